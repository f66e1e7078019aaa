"""
Shared pytest fixtures for bracket viewer tests.

Running tests:
    pytest tests/
"""
import pytest
import sys
import os

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from bracket_viewer import lang


def make_match(id, group_id, round_id, number, opponent1, opponent2, status=2, stage_id=0, child_count=0):
    """Build a match mapping the way a tournament manager exports it."""
    return {
        'id': id,
        'stage_id': stage_id,
        'group_id': group_id,
        'round_id': round_id,
        'number': number,
        'opponent1': opponent1,
        'opponent2': opponent2,
        'status': status,
        'child_count': child_count,
    }


def make_participants(count):
    return [{'id': i, 'name': f'Player {i}'} for i in range(1, count + 1)]


@pytest.fixture(autouse=True)
def english_locale(monkeypatch):
    """Every test starts in English, with its own copy of the locale registry."""
    monkeypatch.setattr(lang, '_locales', {name: dict(bundle) for name, bundle in lang._locales.items()})
    monkeypatch.setattr(lang, '_default_language', lang.DEFAULT_LANGUAGE)


@pytest.fixture
def match_factory():
    return make_match


@pytest.fixture
def single_elimination_data():
    """Four participants, no byes, no consolation final."""
    return {
        'stages': [{'id': 0, 'name': 'Playoffs', 'type': 'single_elimination', 'settings': {}}],
        'participants': make_participants(4),
        'matches': [
            make_match(0, 0, 0, 1,
                       {'id': 1, 'position': 1, 'score': 2, 'result': 'win'},
                       {'id': 4, 'position': 4, 'score': 0, 'result': 'loss'}, status=4),
            make_match(1, 0, 0, 2, {'id': 2, 'position': 2}, {'id': 3, 'position': 3}),
            make_match(2, 0, 1, 1, {'id': 1}, {'id': None}, status=1),
        ],
    }


@pytest.fixture
def single_elimination_with_consolation_data(single_elimination_data):
    single_elimination_data['matches'].append(
        make_match(3, 1, 2, 1, {'id': 4, 'position': 1}, {'id': None, 'position': 2}, status=1)
    )
    return single_elimination_data


@pytest.fixture
def double_elimination_data():
    """
    Eight participants. Winner bracket: 3 rounds, loser bracket: 2 rounds,
    grand final: 2 matches, the winner bracket champion won the first one.
    """
    wb = [
        make_match(0, 0, 0, 1, {'id': 1, 'position': 1, 'result': 'win'}, {'id': 8, 'position': 8, 'result': 'loss'}, status=4),
        make_match(1, 0, 0, 2, {'id': 4, 'position': 4, 'result': 'win'}, {'id': 5, 'position': 5, 'result': 'loss'}, status=4),
        make_match(2, 0, 0, 3, {'id': 2, 'position': 2, 'result': 'win'}, {'id': 7, 'position': 7, 'result': 'loss'}, status=4),
        make_match(3, 0, 0, 4, {'id': 3, 'position': 3, 'result': 'win'}, {'id': 6, 'position': 6, 'result': 'loss'}, status=4),
        make_match(4, 0, 1, 1, {'id': 1, 'result': 'win'}, {'id': 4, 'result': 'loss'}, status=4),
        make_match(5, 0, 1, 2, {'id': 2, 'result': 'win'}, {'id': 3, 'result': 'loss'}, status=4),
        make_match(6, 0, 2, 1, {'id': 1, 'result': 'win'}, {'id': 2, 'result': 'loss'}, status=4),
    ]
    lb = [
        make_match(7, 1, 3, 1, {'id': 8, 'position': 1, 'result': 'loss'}, {'id': 5, 'position': 2, 'result': 'win'}, status=4),
        make_match(8, 1, 3, 2, {'id': 7, 'position': 3, 'result': 'loss'}, {'id': 6, 'position': 4, 'result': 'win'}, status=4),
        make_match(9, 1, 4, 1, {'id': 5, 'result': 'win'}, {'id': 6, 'result': 'loss'}, status=4),
    ]
    gf = [
        make_match(10, 2, 5, 1, {'id': 1, 'score': 3, 'result': 'win'}, {'id': 5, 'score': 1, 'result': 'loss'}, status=4),
        make_match(11, 2, 6, 1, {'id': None}, {'id': None}, status=0),
    ]
    return {
        'stages': [{'id': 0, 'name': 'Main Event', 'type': 'double_elimination', 'settings': {}}],
        'participants': make_participants(8),
        'matches': wb + lb + gf,
    }


@pytest.fixture
def round_robin_data():
    """
    One group of four. Player 1 wins everything; players 2 and 3 tie on
    points and wins, player 3 has the better score difference.
    """
    return {
        'stages': [{'id': 0, 'name': 'League', 'type': 'round_robin', 'settings': {}}],
        'participants': make_participants(4),
        'matches': [
            make_match(0, 0, 0, 1, {'id': 1, 'score': 2, 'result': 'win'}, {'id': 2, 'score': 0, 'result': 'loss'}, status=4),
            make_match(1, 0, 0, 2, {'id': 3, 'score': 2, 'result': 'win'}, {'id': 4, 'score': 1, 'result': 'loss'}, status=4),
            make_match(2, 0, 1, 1, {'id': 1, 'score': 1, 'result': 'win'}, {'id': 3, 'score': 0, 'result': 'loss'}, status=4),
            make_match(3, 0, 1, 2, {'id': 2, 'score': 1, 'result': 'win'}, {'id': 4, 'score': 0, 'result': 'loss'}, status=4),
            make_match(4, 0, 2, 1, {'id': 1, 'score': 3, 'result': 'win'}, {'id': 4, 'score': 1, 'result': 'loss'}, status=4),
            make_match(5, 0, 2, 2, {'id': 2, 'score': 1, 'result': 'draw'}, {'id': 3, 'score': 1, 'result': 'draw'}, status=4),
        ],
    }
