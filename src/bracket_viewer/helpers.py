"""
Grouping and ranking helpers.
"""
from typing import Callable, Dict, List, Optional, Union

from . import lang
from .models import BracketType, Match, ParticipantResult, Result

# Column order of a ranking item, used for both the header and the rows.
RANKING_COLUMNS = (
    'rank',
    'id',
    'played',
    'wins',
    'draws',
    'losses',
    'forfeits',
    'score_for',
    'score_against',
    'score_difference',
    'points',
)

DEFAULT_POINTS = {
    Result.WIN: 3,
    Result.DRAW: 1,
    Result.LOSS: 0,
}


def split_by(objects: List, key: Union[str, Callable]) -> List[List]:
    """
    Split a list into sub-lists sharing the same key value.

    Sub-lists come in first-occurrence order of their key, and each keeps the
    input order of its items. ``key`` is an attribute name, a mapping key or a
    callable.
    """
    if callable(key):
        get_key = key
    else:
        def get_key(obj):
            if isinstance(obj, dict):
                return obj[key]
            return getattr(obj, key)

    groups: Dict = {}
    for obj in objects:
        groups.setdefault(get_key(obj), []).append(obj)
    return list(groups.values())


def _new_ranking_item(participant_id) -> Dict:
    item = {column: 0 for column in RANKING_COLUMNS}
    item['id'] = participant_id
    return item


def _process_participant(items: Dict, current: Optional[ParticipantResult],
                         other: Optional[ParticipantResult], points: Dict) -> None:
    if current is None or current.id is None:
        return

    if current.id not in items:
        items[current.id] = _new_ranking_item(current.id)
    item = items[current.id]

    # An undecided match only registers the participant
    if not (current.forfeit or current.result):
        return

    item['played'] += 1
    if current.result == Result.WIN:
        item['wins'] += 1
    if current.result == Result.DRAW:
        item['draws'] += 1
    if current.result == Result.LOSS:
        item['losses'] += 1
    if current.forfeit:
        item['forfeits'] += 1

    item['score_for'] += current.score or 0
    item['score_against'] += (other.score if other else 0) or 0
    item['score_difference'] = item['score_for'] - item['score_against']
    item['points'] = (item['wins'] * points[Result.WIN]
                      + item['draws'] * points[Result.DRAW]
                      + item['losses'] * points[Result.LOSS])


def get_ranking(matches: List[Match], points: Optional[Dict] = None) -> List[Dict]:
    """
    Compute the standings of one round-robin group.

    Every participant appearing in a match gets a row, even without a played
    match. Rows are sorted by points, wins, score difference and score for;
    remaining ties keep the order in which participants first appear.
    Participants with equal points share a rank.
    """
    scoring = dict(DEFAULT_POINTS)
    if points:
        scoring.update({Result(k): v for k, v in points.items()})

    items: Dict = {}
    for match in matches:
        _process_participant(items, match.opponent1, match.opponent2, scoring)
        _process_participant(items, match.opponent2, match.opponent1, scoring)

    ranking = sorted(
        items.values(),
        key=lambda item: (item['points'], item['wins'], item['score_difference'], item['score_for']),
        reverse=True,
    )

    rank = 0
    last_points = None
    for item in ranking:
        if item['points'] != last_points:
            rank += 1
            last_points = item['points']
        item['rank'] = rank

    return ranking


def get_origin_abbreviation(bracket_type: Optional[BracketType], skip_first_round: bool,
                            round_number: Optional[int] = None) -> Optional[str]:
    """Prefix of the origin shown next to a known participant, e.g. "Seed " or "WB "."""
    round_number = round_number or -1

    if skip_first_round and bracket_type == BracketType.LOSER and round_number <= 2:
        return lang.t('abbreviations.seed') + ' '

    if bracket_type == BracketType.SINGLE or (bracket_type == BracketType.WINNER and round_number == 1):
        return lang.t('abbreviations.seed') + ' '

    if bracket_type == BracketType.LOSER and round_number % 2 == 0:
        return lang.t('abbreviations.winner-bracket') + ' '

    return None
