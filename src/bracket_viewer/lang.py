"""
Human-facing labels: round names, match labels, origin hints and locales.

Nothing here is stored on the tournament data. Every label is derived from a
round's position inside its bracket (see ``RoundContext``).
"""
import math
import logging
from contextlib import contextmanager
from contextvars import ContextVar
from string import Formatter
from typing import Callable, Dict, Optional, Set
import yaml

from .errors import ConfigurationError
from .models import BracketType, FinalType, MatchStatus, RoundContext

logger = logging.getLogger(__name__)

OriginHint = Callable[[int], str]

DEFAULT_LANGUAGE = 'en'

EN = {
    'common.bye': 'BYE',
    'common.best-of-x': 'Bo{x}',
    'common.group-name': 'Group {group_number}',

    'abbreviations.seed': 'Seed',
    'abbreviations.winner-bracket': 'WB',
    'abbreviations.loser-bracket': 'LB',
    'abbreviations.match': 'M',
    'abbreviations.win': 'W',
    'abbreviations.loss': 'L',
    'abbreviations.forfeit': 'F',

    'round-name.round': 'Round {round_number}',
    'round-name.final': 'Final',
    'round-name.semi-final': 'Semi Final',
    'round-name.quarter-final': 'Quarter Final',
    'round-name.consolation-final': 'Consolation Final',
    'round-name.grand-final': 'Grand Final',
    'round-name.grand-final-reset': 'Grand Final Reset',

    'match-label.default': '{prefix} {round_number}.{match_number}',
    'match-label.semi-final': 'Semi {match_number}',
    'match-label.final': 'Final',
    'match-label.winner-bracket-final': 'WB Final',
    'match-label.loser-bracket-final': 'LB Final',
    'match-label.consolation-final': 'Consolation Final',
    'match-label.grand-final': 'Grand Final',
    'match-label.grand-final-reset': 'Grand Final Reset',

    'origin-hint.seed': 'Seed {position}',
    'origin-hint.winner-bracket': 'Loser of WB {round_number}.{position}',
    'origin-hint.winner-bracket-semi-final': 'Loser of WB Semi {position}',
    'origin-hint.winner-bracket-final': 'Loser of WB Final',
    'origin-hint.consolation-final': 'Loser of Semi {position}',
    'origin-hint.grand-final': 'Winner of LB Final',

    'match-status.locked': 'Locked',
    'match-status.waiting': 'Waiting',
    'match-status.ready': 'Ready',
    'match-status.running': 'Running',
    'match-status.completed': 'Completed',
    'match-status.archived': 'Archived',

    'ranking.rank': '#',
    'ranking.id': 'Name',
    'ranking.played': 'P',
    'ranking.wins': 'W',
    'ranking.draws': 'D',
    'ranking.losses': 'L',
    'ranking.forfeits': 'F',
    'ranking.score_for': 'SF',
    'ranking.score_against': 'SA',
    'ranking.score_difference': '+/-',
    'ranking.points': 'Pts',
}

_locales: Dict[str, Dict[str, str]] = {DEFAULT_LANGUAGE: dict(EN)}
# Process-wide default, set at startup
_default_language = DEFAULT_LANGUAGE
# Language of the render in progress, if it asked for one
_active_language: ContextVar[Optional[str]] = ContextVar('active_language', default=None)


def _placeholders(template: str) -> Set[str]:
    return {field for _, field, _, _ in Formatter().parse(template) if field is not None}


def validate_locale(locale) -> None:
    """
    Check a locale bundle before it is registered.

    Keys must be known labels, values strings, and a template may only use
    the placeholders of its English counterpart.
    """
    if not isinstance(locale, dict):
        raise ConfigurationError("A locale must map label keys to strings.")

    for key, template in locale.items():
        if key not in EN:
            raise ConfigurationError(f"Unknown label key: {key}")
        if not isinstance(template, str):
            raise ConfigurationError(f"Label {key} must be a string")
        try:
            fields = _placeholders(template)
        except ValueError as e:
            raise ConfigurationError(f"Invalid template for {key}: {e}") from None
        unknown = fields - _placeholders(EN[key])
        if unknown:
            raise ConfigurationError(f"Unknown placeholder(s) in {key}: {', '.join(sorted(unknown))}")


def add_locale(name: str, locale: Dict[str, str]) -> None:
    """Register (or extend) a locale bundle. Missing keys fall back to English."""
    validate_locale(locale)
    bundle = _locales.setdefault(name, {})
    bundle.update(locale)
    logger.debug("Locale %s now has %d keys", name, len(bundle))


def load_locale(name: str, file_path) -> None:
    """Register a locale bundle stored as a flat YAML mapping."""
    with open(file_path, mode='r', encoding='utf-8') as file:
        add_locale(name, yaml.safe_load(file) or {})


def set_language(name: str) -> None:
    """Set the default language, used by renders that do not ask for one."""
    global _default_language
    if name not in _locales:
        raise KeyError(f"Unknown locale: {name}")
    _default_language = name


def get_language() -> str:
    return _active_language.get() or _default_language


@contextmanager
def use_language(name: Optional[str]):
    """Label everything inside the block in ``name`` (None keeps the default)."""
    if name is not None and name not in _locales:
        raise ConfigurationError(f"Unknown locale: {name}")
    token = _active_language.set(name)
    try:
        yield
    finally:
        _active_language.reset(token)


def get_locales():
    return sorted(_locales)


def t(key: str, **kwargs) -> str:
    template = _locales[get_language()].get(key, EN[key])
    return template.format(**kwargs)


BYE_KEY = 'common.bye'


def bye() -> str:
    return t(BYE_KEY)


def best_of_x(x: int) -> str:
    return t('common.best-of-x', x=x)


def get_group_name(group_number: int) -> str:
    return t('common.group-name', group_number=group_number)


def get_match_status(status: MatchStatus) -> str:
    return t(f'match-status.{MatchStatus(status).name.lower()}')


def get_ranking_header(column: str) -> str:
    return t(f'ranking.{column}')


def get_round_name(context: RoundContext) -> str:
    """
    Name a round from its position in the bracket.

    Elimination brackets count backward from their own last round:
    Final, Semi Final, Quarter Final, then the generic "Round n". When the
    true first round was left out of the input, single and winner bracket
    generic numbers name the true round, one past the position. Loser
    bracket numbers are kept.
    """
    if context.bracket_type == BracketType.ROUND_ROBIN:
        return t('round-name.round', round_number=context.round_number)

    if context.bracket_type == BracketType.FINAL:
        raise ValueError("Final group rounds are named with get_final_round_name()")

    from_end = context.rounds_from_end
    if from_end == 0:
        return t('round-name.final')
    if from_end == 1:
        return t('round-name.semi-final')
    if from_end == 2:
        return t('round-name.quarter-final')

    round_number = context.round_number
    if context.skip_first_round and context.bracket_type in (BracketType.SINGLE, BracketType.WINNER):
        round_number += 1
    return t('round-name.round', round_number=round_number)


def get_final_round_name(final_type: FinalType, round_number: int, round_count: int) -> str:
    if final_type == FinalType.CONSOLATION_FINAL:
        return t('round-name.consolation-final')
    if round_count == 1 or round_number == 1:
        return t('round-name.grand-final')
    return t('round-name.grand-final-reset')


def _match_prefix(bracket_type: BracketType) -> str:
    if bracket_type == BracketType.WINNER:
        return t('abbreviations.winner-bracket')
    if bracket_type == BracketType.LOSER:
        return t('abbreviations.loser-bracket')
    return t('abbreviations.match')


def get_match_label(context: RoundContext, match_number: int) -> str:
    if context.bracket_type == BracketType.SINGLE:
        if context.round_count > 1 and context.rounds_from_end == 1:
            return t('match-label.semi-final', match_number=match_number)
        if context.is_last_round:
            return t('match-label.final')

    if context.is_last_round:
        if context.bracket_type == BracketType.LOSER:
            return t('match-label.loser-bracket-final')
        if context.bracket_type == BracketType.WINNER:
            return t('match-label.winner-bracket-final')

    return t('match-label.default', prefix=_match_prefix(context.bracket_type),
             round_number=context.round_number, match_number=match_number)


def get_final_match_label(final_type: FinalType, round_number: int, round_count: int) -> str:
    if final_type == FinalType.CONSOLATION_FINAL:
        return t('match-label.consolation-final')
    if round_count == 1 or round_number == 1:
        return t('match-label.grand-final')
    return t('match-label.grand-final-reset')


def is_major_round(round_number: int) -> bool:
    """Loser bracket rounds that take in losers dropped from the winner bracket."""
    return round_number == 1 or round_number % 2 == 0


def get_loser_drop_slots(round_number: int):
    """
    Slots of a loser bracket match filled by a fresh drop from the winner bracket.

    Round 1 pairs two dropped losers. Later major rounds keep slot 1 for the
    winner of the previous loser bracket round, so the drop lands in slot 2.
    Minor rounds only pair loser bracket winners.
    """
    if round_number == 1:
        return (1, 2)
    if round_number % 2 == 0:
        return (2,)
    return ()


def get_origin_hint(context: RoundContext) -> Optional[OriginHint]:
    """
    Return a function giving the origin of a not-yet-known participant from
    its upstream position, or None when the round has no origin to show.
    """
    bracket_type = context.bracket_type
    round_number = context.round_number

    if round_number == 1:
        if bracket_type in (BracketType.SINGLE, BracketType.WINNER):
            return lambda position: t('origin-hint.seed', position=position)

        if bracket_type == BracketType.LOSER and context.skip_first_round:
            return lambda position: t('origin-hint.seed', position=position)

    if bracket_type == BracketType.LOSER and is_major_round(round_number):
        if round_number == context.round_count - 2:
            return lambda position: t('origin-hint.winner-bracket-semi-final', position=position)

        if context.is_last_round:
            return lambda position: t('origin-hint.winner-bracket-final')

        round_number_wb = math.ceil((round_number + 1) / 2)
        if context.skip_first_round:
            round_number_wb -= 1

        return lambda position: t('origin-hint.winner-bracket', round_number=round_number_wb, position=position)

    return None


def get_final_origin_hint(final_type: FinalType, round_number: int) -> Optional[OriginHint]:
    if final_type == FinalType.GRAND_FINAL and round_number == 1:
        return lambda position: t('origin-hint.grand-final')

    if final_type == FinalType.CONSOLATION_FINAL:
        return lambda position: t('origin-hint.consolation-final', position=position)

    return None
