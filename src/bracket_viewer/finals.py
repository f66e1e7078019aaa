"""
Final group resolution.

A double elimination grand final has two rounds on paper. The second one
(the bracket reset) is only played when the loser bracket champion wins the
first match, so it is only displayed in that case.
"""
from typing import List

from .models import Match, Result


def get_final_display_count(matches: List[Match]) -> int:
    """Number of final rounds to display, given matches in play order."""
    if not matches:
        return 0

    winner_wb = matches[0].opponent1
    decided = winner_wb is not None and (winner_wb.id is None or winner_wb.result == Result.WIN)
    display_count = 1 if decided else 2
    return min(display_count, len(matches))


def get_final_matches(matches: List[Match]) -> List[Match]:
    return matches[:get_final_display_count(matches)]
