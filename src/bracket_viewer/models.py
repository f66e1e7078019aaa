"""
Data model for tournament data consumed by the viewer.

Input mappings may use snake_case keys or the camelCase keys emitted by
JavaScript tournament managers (e.g. ``stage_id`` or ``stageId``).
"""
from enum import Enum, IntEnum
from typing import List, Dict, Optional, Any


class StageType(str, Enum):
    ROUND_ROBIN = 'round_robin'
    SINGLE_ELIMINATION = 'single_elimination'
    DOUBLE_ELIMINATION = 'double_elimination'


class BracketType(str, Enum):
    ROUND_ROBIN = 'round-robin'
    SINGLE = 'single-bracket'
    WINNER = 'winner-bracket'
    LOSER = 'loser-bracket'
    FINAL = 'final-group'


class FinalType(str, Enum):
    CONSOLATION_FINAL = 'consolation_final'
    GRAND_FINAL = 'grand_final'


class Result(str, Enum):
    WIN = 'win'
    DRAW = 'draw'
    LOSS = 'loss'


class MatchStatus(IntEnum):
    LOCKED = 0
    WAITING = 1
    READY = 2
    RUNNING = 3
    COMPLETED = 4
    ARCHIVED = 5


def _get(data: Dict, snake: str, camel: Optional[str] = None, default=None):
    """Read a key from a mapping, accepting its camelCase spelling too."""
    if snake in data:
        return data[snake]
    if camel and camel in data:
        return data[camel]
    return default


def _parse_status(value) -> MatchStatus:
    if isinstance(value, str) and not value.isdigit():
        return MatchStatus[value.upper()]
    return MatchStatus(int(value))


class Participant:
    def __init__(self, id, name):
        self.id = id
        self.name = name

    @classmethod
    def from_dict(cls, data: Dict) -> 'Participant':
        return cls(id=data['id'], name=data.get('name', ''))

    def __repr__(self):
        return f"Participant(id={self.id}, name={self.name})"


class ParticipantImage:
    def __init__(self, participant_id, image_url):
        self.participant_id = participant_id
        self.image_url = image_url

    @classmethod
    def from_dict(cls, data: Dict) -> 'ParticipantImage':
        return cls(
            participant_id=_get(data, 'participant_id', 'participantId'),
            image_url=_get(data, 'image_url', 'imageUrl'),
        )

    def __repr__(self):
        return f"ParticipantImage(participant_id={self.participant_id}, image_url={self.image_url})"


class ParticipantResult:
    """One side of a match. ``id`` stays None until the occupant is known."""

    def __init__(self, id=None, result=None, score=None, position=None, forfeit=False):
        self.id = id
        self.result = Result(result) if result else None
        self.score = score
        self.position = position
        self.forfeit = forfeit

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> Optional['ParticipantResult']:
        if data is None:
            return None
        return cls(
            id=data.get('id'),
            result=data.get('result'),
            score=data.get('score'),
            position=data.get('position'),
            forfeit=bool(data.get('forfeit', False)),
        )

    def __repr__(self):
        return (f"ParticipantResult(id={self.id}, result={self.result}, score={self.score}, "
                f"position={self.position})")


class Match:
    def __init__(self, id, stage_id, group_id, round_id, number, opponent1=None, opponent2=None,
                 status=MatchStatus.LOCKED, child_count=0):
        self.id = id
        self.stage_id = stage_id
        self.group_id = group_id
        self.round_id = round_id
        self.number = number
        self.opponent1 = opponent1
        self.opponent2 = opponent2
        self.status = status
        self.child_count = child_count

    @classmethod
    def from_dict(cls, data: Dict) -> 'Match':
        return cls(
            id=data['id'],
            stage_id=_get(data, 'stage_id', 'stageId'),
            group_id=_get(data, 'group_id', 'groupId'),
            round_id=_get(data, 'round_id', 'roundId'),
            number=data.get('number', 1),
            opponent1=ParticipantResult.from_dict(data.get('opponent1')),
            opponent2=ParticipantResult.from_dict(data.get('opponent2')),
            status=_parse_status(data.get('status', 0)),
            child_count=_get(data, 'child_count', 'childCount', 0) or 0,
        )

    @property
    def opponents(self) -> List[Optional[ParticipantResult]]:
        return [self.opponent1, self.opponent2]

    def __repr__(self):
        return (f"Match(id={self.id}, group_id={self.group_id}, round_id={self.round_id}, "
                f"number={self.number})")


class Stage:
    def __init__(self, id, name, type, settings=None, number=None, tournament_id=None):
        self.id = id
        self.name = name
        self.type = type
        self.settings = settings if settings else {}
        self.number = number
        self.tournament_id = tournament_id

    @classmethod
    def from_dict(cls, data: Dict) -> 'Stage':
        return cls(
            id=data['id'],
            name=data.get('name', ''),
            type=data['type'],
            settings=data.get('settings'),
            number=data.get('number'),
            tournament_id=_get(data, 'tournament_id', 'tournamentId'),
        )

    @property
    def skip_first_round(self) -> bool:
        return bool(_get(self.settings, 'skip_first_round', 'skipFirstRound', False))

    def __repr__(self):
        return f"Stage(id={self.id}, name={self.name}, type={self.type})"


class ViewerData:
    """Everything rendered in one pass."""

    def __init__(self, stages, matches, participants):
        self.stages = stages
        self.matches = matches
        self.participants = participants

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ViewerData':
        return cls(
            stages=[Stage.from_dict(s) for s in data.get('stages') or []],
            matches=[Match.from_dict(m) for m in data.get('matches') or []],
            participants=[Participant.from_dict(p) for p in data.get('participants') or []],
        )

    def __repr__(self):
        return (f"ViewerData(stages={len(self.stages)}, matches={len(self.matches)}, "
                f"participants={len(self.participants)})")


class RoundContext:
    """Position of a round inside its bracket, shared by every resolver."""

    def __init__(self, round_number: int, round_count: int, bracket_type: BracketType,
                 skip_first_round: bool = False):
        self.round_number = round_number
        self.round_count = round_count
        self.bracket_type = bracket_type
        self.skip_first_round = skip_first_round

    @property
    def is_first_round(self) -> bool:
        return self.round_number == 1

    @property
    def is_last_round(self) -> bool:
        return self.round_number == self.round_count

    @property
    def rounds_from_end(self) -> int:
        return self.round_count - self.round_number

    def __repr__(self):
        return (f"RoundContext(round_number={self.round_number}, round_count={self.round_count}, "
                f"bracket_type={self.bracket_type}, skip_first_round={self.skip_first_round})")
