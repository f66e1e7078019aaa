"""
Unit tests for grouping and ranking helpers.
"""
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from bracket_viewer.helpers import (
    RANKING_COLUMNS,
    split_by,
    get_ranking,
    get_origin_abbreviation
)
from bracket_viewer.models import BracketType, Match, Result, ViewerData


class TestSplitBy:
    """Tests for split_by."""

    def test_groups_in_first_occurrence_order(self):
        """Groups come in the order their key first appears."""
        items = [{'g': 2, 'n': 'a'}, {'g': 1, 'n': 'b'}, {'g': 2, 'n': 'c'}, {'g': 3, 'n': 'd'}]
        groups = split_by(items, 'g')
        assert [[i['n'] for i in group] for group in groups] == [['a', 'c'], ['b'], ['d']]

    def test_preserves_order_within_group(self):
        """Items keep their input order inside each group; nothing is sorted."""
        items = [{'g': 'x', 'n': 3}, {'g': 'x', 'n': 1}, {'g': 'x', 'n': 2}]
        assert [i['n'] for i in split_by(items, 'g')[0]] == [3, 1, 2]

    def test_attribute_key(self, match_factory):
        """Objects are split by attribute."""
        matches = [
            Match.from_dict(match_factory(0, 0, 0, 1, None, None)),
            Match.from_dict(match_factory(1, 1, 2, 1, None, None)),
            Match.from_dict(match_factory(2, 0, 1, 1, None, None)),
        ]
        groups = split_by(matches, 'group_id')
        assert [[m.id for m in group] for group in groups] == [[0, 2], [1]]

    def test_callable_key(self):
        """A callable key is used as is."""
        groups = split_by([1, 2, 3, 4, 5], lambda n: n % 2)
        assert groups == [[1, 3, 5], [2, 4]]

    def test_empty_input(self):
        """Empty input gives no groups."""
        assert split_by([], 'group_id') == []


class TestGetRanking:
    """Tests for the round-robin ranking."""

    def _matches(self, data):
        return ViewerData.from_dict(data).matches

    def test_ranking_order(self, round_robin_data):
        """Sorted by points; the tie between 2 and 3 is broken by score difference."""
        ranking = get_ranking(self._matches(round_robin_data))
        assert [item['id'] for item in ranking] == [1, 3, 2, 4]
        assert [item['points'] for item in ranking] == [9, 4, 4, 0]

    def test_tied_points_share_rank(self, round_robin_data):
        """Equal points give an equal rank."""
        ranking = get_ranking(self._matches(round_robin_data))
        assert [item['rank'] for item in ranking] == [1, 2, 2, 3]

    def test_counters(self, round_robin_data):
        """Per-participant counters are accumulated from both slots."""
        ranking = {item['id']: item for item in get_ranking(self._matches(round_robin_data))}

        assert ranking[2]['played'] == 3
        assert ranking[2]['wins'] == 1
        assert ranking[2]['draws'] == 1
        assert ranking[2]['losses'] == 1
        assert ranking[2]['score_for'] == 2
        assert ranking[2]['score_against'] == 3
        assert ranking[2]['score_difference'] == -1

        assert ranking[3]['draws'] == 1
        assert ranking[3]['score_difference'] == 0

    def test_points_total_matches_results(self, round_robin_data):
        """Total points equal 3 per decided match plus 1 per side of each draw."""
        matches = self._matches(round_robin_data)
        expected = 0
        for match in matches:
            results = {match.opponent1.result, match.opponent2.result}
            expected += 2 if results == {Result.DRAW} else 3
        assert sum(item['points'] for item in get_ranking(matches)) == expected

    def test_column_order(self, round_robin_data):
        """Every item lists its statistics in the fixed column order."""
        for item in get_ranking(self._matches(round_robin_data)):
            assert tuple(item.keys()) == RANKING_COLUMNS

    def test_all_undetermined(self, match_factory):
        """A group without results ranks everyone at zero, in order of appearance."""
        data = {'matches': [
            match_factory(0, 0, 0, 1, {'id': 7}, {'id': 3}),
            match_factory(1, 0, 0, 2, {'id': 5}, {'id': 1}),
            match_factory(2, 0, 1, 1, {'id': 7}, {'id': 5}),
        ]}
        ranking = get_ranking(self._matches(data))

        assert [item['id'] for item in ranking] == [7, 3, 5, 1]
        assert all(item['points'] == 0 and item['played'] == 0 for item in ranking)
        assert all(item['rank'] == 1 for item in ranking)

    def test_participant_without_played_match_is_kept(self, match_factory):
        """A participant whose only match is pending still gets a row."""
        data = {'matches': [
            match_factory(0, 0, 0, 1, {'id': 1, 'result': 'win'}, {'id': 2, 'result': 'loss'}),
            match_factory(1, 0, 0, 2, {'id': 3}, {'id': None}),
        ]}
        ranking = get_ranking(self._matches(data))

        assert [item['id'] for item in ranking] == [1, 2, 3]
        assert ranking[2]['played'] == 0

    def test_undecided_scores_do_not_count(self, match_factory):
        """A running match's score does not break a tie on points."""
        data = {'matches': [
            match_factory(0, 0, 0, 1, {'id': 1, 'score': 1, 'result': 'win'}, {'id': 3, 'score': 0, 'result': 'loss'}),
            match_factory(1, 0, 0, 2, {'id': 2, 'score': 1, 'result': 'win'}, {'id': 4, 'score': 0, 'result': 'loss'}),
            match_factory(2, 0, 1, 1, {'id': 2, 'score': 5}, {'id': 1, 'score': 0}, status=3),
        ]}
        ranking = get_ranking(self._matches(data))

        assert [item['id'] for item in ranking][:2] == [1, 2]
        assert ranking[1]['score_for'] == 1
        assert ranking[1]['score_difference'] == 1
        assert ranking[1]['played'] == 1
        assert ranking[0]['score_against'] == 0

    def test_byes_and_unknown_slots_are_ignored(self, match_factory):
        """Bye slots and slots without a participant id add no row."""
        data = {'matches': [match_factory(0, 0, 0, 1, {'id': 1}, None)]}
        assert [item['id'] for item in get_ranking(self._matches(data))] == [1]

    def test_draw_credits_both_sides(self, match_factory):
        """A draw counts for both participants and gives no winner."""
        data = {'matches': [
            match_factory(0, 0, 0, 1, {'id': 1, 'result': 'draw'}, {'id': 2, 'result': 'draw'}),
        ]}
        ranking = get_ranking(self._matches(data))

        assert all(item['draws'] == 1 and item['wins'] == 0 for item in ranking)
        assert all(item['points'] == 1 for item in ranking)

    def test_forfeit(self, match_factory):
        """A forfeit counts as played and as a forfeit."""
        data = {'matches': [
            match_factory(0, 0, 0, 1, {'id': 1, 'forfeit': True}, {'id': 2, 'result': 'win'}),
        ]}
        ranking = {item['id']: item for item in get_ranking(self._matches(data))}

        assert ranking[1]['played'] == 1
        assert ranking[1]['forfeits'] == 1
        assert ranking[2]['points'] == 3

    def test_custom_points(self, round_robin_data):
        """The scoring rule can be overridden."""
        ranking = get_ranking(self._matches(round_robin_data), points={'win': 2, 'draw': 1})
        assert ranking[0]['points'] == 6

    def test_reproducible(self, round_robin_data):
        """Equal inputs give equal rankings."""
        first = get_ranking(self._matches(round_robin_data))
        second = get_ranking(self._matches(round_robin_data))
        assert first == second


class TestOriginAbbreviation:
    """Tests for get_origin_abbreviation."""

    def test_single_bracket_is_seed(self):
        assert get_origin_abbreviation(BracketType.SINGLE, False, 1) == 'Seed '
        assert get_origin_abbreviation(BracketType.SINGLE, False, 3) == 'Seed '

    def test_winner_bracket_first_round_only(self):
        assert get_origin_abbreviation(BracketType.WINNER, False, 1) == 'Seed '
        assert get_origin_abbreviation(BracketType.WINNER, False, 2) is None

    def test_loser_bracket_even_rounds(self):
        """Even loser bracket rounds come from the winner bracket."""
        assert get_origin_abbreviation(BracketType.LOSER, False, 2) == 'WB '
        assert get_origin_abbreviation(BracketType.LOSER, False, 4) == 'WB '
        assert get_origin_abbreviation(BracketType.LOSER, False, 3) is None

    def test_loser_bracket_with_skipped_first_round(self):
        """With the first round skipped, early loser bracket rounds hold seeds."""
        assert get_origin_abbreviation(BracketType.LOSER, True, 1) == 'Seed '
        assert get_origin_abbreviation(BracketType.LOSER, True, 2) == 'Seed '
        assert get_origin_abbreviation(BracketType.LOSER, True, 4) == 'WB '

    def test_final_group(self):
        assert get_origin_abbreviation(BracketType.FINAL, False, None) is None
