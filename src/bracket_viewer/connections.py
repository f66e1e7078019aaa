"""
Connector topology between matches.

A connection only says which sides of a match carry a connector and of which
shape. Coordinates are left to the rendering backend.
"""
from enum import Enum
from typing import Dict, Optional

from .models import BracketType, FinalType, RoundContext


class ConnectionType(str, Enum):
    # Two matches of one round feed one match of the next.
    SQUARE = 'square'
    # One match feeds one match.
    STRAIGHT = 'straight'


class Connection:
    def __init__(self, connect_previous: Optional[ConnectionType] = None,
                 connect_next: Optional[ConnectionType] = None, connects_final: bool = False):
        self.connect_previous = connect_previous
        self.connect_next = connect_next
        self.connects_final = connects_final

    def to_dict(self) -> Dict:
        return {
            'connect_previous': self.connect_previous.value if self.connect_previous else None,
            'connect_next': self.connect_next.value if self.connect_next else None,
            'connects_final': self.connects_final,
        }

    def __eq__(self, other):
        if not isinstance(other, Connection):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return (f"Connection(connect_previous={self.connect_previous}, connect_next={self.connect_next}, "
                f"connects_final={self.connects_final})")


def get_bracket_connection(context: RoundContext, connect_final: bool = False) -> Connection:
    """
    Connection of a match in a bracket round.

    ``connect_final`` only matters for the last round of a winner bracket and
    must be set when a final group follows it.
    """
    round_number = context.round_number

    if context.bracket_type == BracketType.LOSER:
        # Even rounds take one loser bracket winner plus a winner bracket drop.
        connect_previous = None
        if round_number > 1:
            connect_previous = ConnectionType.SQUARE if round_number % 2 == 1 else ConnectionType.STRAIGHT

        connect_next = None
        if not context.is_last_round:
            connect_next = ConnectionType.SQUARE if round_number % 2 == 0 else ConnectionType.STRAIGHT

        return Connection(connect_previous, connect_next)

    connect_previous = ConnectionType.SQUARE if round_number > 1 else None

    if not context.is_last_round:
        return Connection(connect_previous, ConnectionType.SQUARE)

    if connect_final and context.bracket_type == BracketType.WINNER:
        return Connection(connect_previous, ConnectionType.STRAIGHT, connects_final=True)

    return Connection(connect_previous, None)


def get_final_connection(final_type: FinalType, round_number: int, match_count: int) -> Connection:
    """Connection of a final group match; ``match_count`` is the number of displayed rounds."""
    connect_previous = None
    if final_type == FinalType.GRAND_FINAL and round_number == 1:
        connect_previous = ConnectionType.SQUARE

    connect_next = None
    if match_count == 2 and round_number == 1:
        connect_next = ConnectionType.STRAIGHT

    return Connection(connect_previous, connect_next)
