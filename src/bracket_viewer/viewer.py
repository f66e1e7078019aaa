"""
Render plan generation for round-robin, single and double elimination stages.

``BracketsViewer.render()`` walks every stage of the data and produces a plan:
plain dicts and lists describing brackets, rounds, matches, slots, connectors
and ranking tables. A rendering backend paints the plan.

Groups of an elimination stage have fixed roles by position:
- Single elimination: group 0 is the bracket, group 1 the consolation final
- Double elimination: group 0 is the winner bracket, group 1 the loser
  bracket, group 2 the grand final
"""
import logging
from typing import Dict, List, Optional

from . import lang
from .config import Config
from .connections import Connection, get_bracket_connection, get_final_connection
from .errors import BracketStructureError, UnknownParticipantError, UnknownStageTypeError
from .finals import get_final_matches
from .helpers import RANKING_COLUMNS, get_origin_abbreviation, get_ranking, split_by
from .models import (
    BracketType,
    FinalType,
    Match,
    ParticipantImage,
    ParticipantResult,
    Result,
    RoundContext,
    Stage,
    StageType,
    ViewerData,
)

logger = logging.getLogger(__name__)


class RenderSession:
    """
    State of one render pass.

    ``participant_refs`` maps each participant id of the roster to the plan
    nodes showing that participant, so hovering one of them can highlight all.
    """

    def __init__(self, participants, config: Config):
        self.config = config
        self.participants = {participant.id: participant for participant in participants}
        self.participant_refs: Dict = {participant.id: [] for participant in participants}
        self.stages: List[Dict] = []

    def add_participant_ref(self, participant_id, ref: str) -> None:
        if not self.config.highlight_participant_on_hover:
            return

        refs = self.participant_refs.get(participant_id)
        if refs is None:
            raise UnknownParticipantError(participant_id)
        refs.append(ref)

    def to_dict(self) -> Dict:
        return {
            'stages': self.stages,
            'participant_refs': {str(pid): refs for pid, refs in self.participant_refs.items()},
        }


class BracketsViewer:
    def __init__(self):
        self.participant_images: List[ParticipantImage] = []
        self.session: Optional[RenderSession] = None

    def render(self, data, config=None) -> RenderSession:
        """
        Plan every stage of ``data`` (a ``ViewerData`` or its dict form).

        Stages are planned in order and independently. If a stage fails, the
        error propagates and ``self.session`` keeps the plans of the stages
        before it.
        """
        if isinstance(data, dict):
            data = ViewerData.from_dict(data)
        if not isinstance(config, Config):
            config = Config.from_dict(config)

        self.session = RenderSession(data.participants, config)

        with lang.use_language(config.language):
            for stage in data.stages:
                matches = [match for match in data.matches if match.stage_id == stage.id]
                self.session.stages.append(self._render_stage(stage, matches))

        return self.session

    def add_locale(self, name: str, locale: Dict[str, str]) -> None:
        lang.add_locale(name, locale)

    def set_participant_images(self, images) -> None:
        self.participant_images = [
            image if isinstance(image, ParticipantImage) else ParticipantImage.from_dict(image)
            for image in images
        ]

    def _render_stage(self, stage: Stage, matches: List[Match]) -> Dict:
        try:
            stage_type = StageType(stage.type)
        except ValueError:
            raise UnknownStageTypeError(stage.type) from None

        matches_by_group = split_by(matches, 'group_id')
        logger.debug("Planning stage %s (%s) with %d groups", stage.id, stage_type.value, len(matches_by_group))

        if stage_type == StageType.ROUND_ROBIN:
            return self._render_round_robin(stage, matches_by_group)
        if stage_type in (StageType.SINGLE_ELIMINATION, StageType.DOUBLE_ELIMINATION):
            return self._render_elimination(stage, stage_type, matches_by_group)
        raise UnknownStageTypeError(stage.type)

    def _stage_header(self, stage: Stage, stage_type: StageType) -> Dict:
        return {
            'stage_id': stage.id,
            'name': stage.name,
            'type': stage_type.value,
            'skip_first_round': stage.skip_first_round,
        }

    def _render_round_robin(self, stage: Stage, matches_by_group: List[List[Match]]) -> Dict:
        plan = self._stage_header(stage, StageType.ROUND_ROBIN)
        plan['groups'] = []

        for group_number, group_matches in enumerate(matches_by_group, start=1):
            matches_by_round = split_by(group_matches, 'round_id')
            round_count = len(matches_by_round)
            rounds = []

            for round_number, round_matches in enumerate(matches_by_round, start=1):
                context = RoundContext(round_number, round_count, BracketType.ROUND_ROBIN)
                rounds.append({
                    'round_id': round_matches[0].round_id,
                    'number': round_number,
                    'name': lang.get_round_name(context),
                    'matches': [self._create_match(match) for match in round_matches],
                })

            plan['groups'].append({
                'group_id': group_matches[0].group_id,
                'name': lang.get_group_name(group_number),
                'rounds': rounds,
                'ranking': self._create_ranking(group_matches),
            })

        return plan

    def _render_elimination(self, stage: Stage, stage_type: StageType,
                            matches_by_group: List[List[Match]]) -> Dict:
        if not matches_by_group:
            raise BracketStructureError(f"Stage {stage.id} ({stage_type.value}) has no matches to display.")

        plan = self._stage_header(stage, stage_type)
        plan['brackets'] = []

        if stage_type == StageType.SINGLE_ELIMINATION:
            self._render_single_elimination(plan, matches_by_group, stage.skip_first_round)
        else:
            self._render_double_elimination(plan, matches_by_group, stage.skip_first_round)

        return plan

    def _render_single_elimination(self, plan: Dict, matches_by_group: List[List[Match]],
                                   skip_first_round: bool) -> None:
        has_final = len(matches_by_group) > 1
        self._render_bracket(plan, split_by(matches_by_group[0], 'round_id'), BracketType.SINGLE, skip_first_round)

        if has_final:
            self._render_final(plan, FinalType.CONSOLATION_FINAL, matches_by_group[1])

    def _render_double_elimination(self, plan: Dict, matches_by_group: List[List[Match]],
                                   skip_first_round: bool) -> None:
        has_loser_bracket = len(matches_by_group) > 1
        has_final = len(matches_by_group) > 2

        self._render_bracket(plan, split_by(matches_by_group[0], 'round_id'), BracketType.WINNER,
                             skip_first_round, connect_final=has_final)

        if has_loser_bracket:
            self._render_bracket(plan, split_by(matches_by_group[1], 'round_id'), BracketType.LOSER, skip_first_round)

        if has_final:
            self._render_final(plan, FinalType.GRAND_FINAL, matches_by_group[2])

    def _render_bracket(self, plan: Dict, matches_by_round: List[List[Match]], bracket_type: BracketType,
                        skip_first_round: bool, connect_final: bool = False) -> None:
        group_id = matches_by_round[0][0].group_id
        round_count = len(matches_by_round)
        rounds = []

        for round_number, matches in enumerate(matches_by_round, start=1):
            context = RoundContext(round_number, round_count, bracket_type, skip_first_round)
            rounds.append({
                'round_id': matches[0].round_id,
                'number': round_number,
                'name': lang.get_round_name(context),
                'matches': [self._create_bracket_match(context, match, connect_final) for match in matches],
            })

        plan['brackets'].append({
            'group_id': group_id,
            'bracket_type': bracket_type.value,
            'round_count': round_count,
            'rounds': rounds,
        })

    def _render_final(self, plan: Dict, final_type: FinalType, matches: List[Match]) -> None:
        """Append the displayed final rounds below the upper bracket."""
        if not plan['brackets']:
            raise BracketStructureError('Upper bracket not found.')
        upper_bracket = plan['brackets'][0]

        final_matches = get_final_matches(matches)
        round_count = len(matches)
        logger.debug("Final group %s: displaying %d of %d rounds", matches[0].group_id,
                     len(final_matches), round_count)

        for round_index, match in enumerate(final_matches):
            round_number = round_index + 1
            upper_bracket['rounds'].append({
                'round_id': match.round_id,
                'group_id': match.group_id,
                'number': round_number,
                'final_type': final_type.value,
                'name': lang.get_final_round_name(final_type, round_number, round_count),
                'matches': [self._create_final_match(final_type, final_matches, round_number, round_count)],
            })

    def _create_ranking(self, matches: List[Match]) -> Dict:
        ranking = get_ranking(matches)
        return {
            'headers': [{'column': column, 'label': lang.get_ranking_header(column)} for column in RANKING_COLUMNS],
            'rows': [self._create_ranking_row(item) for item in ranking],
        }

    def _create_ranking_row(self, item: Dict) -> List[Dict]:
        row = []
        for column in RANKING_COLUMNS:
            value = item[column]
            cell = {'column': column, 'value': value}

            if column == 'id':
                participant = self.session.participants.get(value)
                if participant is not None:
                    cell['value'] = participant.name
                    cell['participant_id'] = participant.id
                    cell['image_url'] = self._get_participant_image(participant.id)
                    self.session.add_participant_ref(participant.id, f"ranking:{item['id']}")

            row.append(cell)
        return row

    def _create_bracket_match(self, context: RoundContext, match: Match, connect_final: bool) -> Dict:
        connection = get_bracket_connection(context, connect_final)
        label = lang.get_match_label(context, match.number)
        origin_hint = lang.get_origin_hint(context)
        return self._create_match(match, context, connection, label, origin_hint)

    def _create_final_match(self, final_type: FinalType, matches: List[Match], round_number: int,
                            round_count: int) -> Dict:
        context = RoundContext(round_number, round_count, BracketType.FINAL)
        connection = get_final_connection(final_type, round_number, len(matches))
        label = lang.get_final_match_label(final_type, round_number, round_count)
        origin_hint = lang.get_final_origin_hint(final_type, round_number)
        return self._create_match(matches[round_number - 1], context, connection, label, origin_hint)

    def _create_match(self, match: Match, context: Optional[RoundContext] = None,
                      connection: Optional[Connection] = None, label: Optional[str] = None,
                      origin_hint=None) -> Dict:
        child_count_label = None
        if match.child_count > 0:
            if label and not self.config.separated_child_count_label:
                label = f"{label}, {lang.best_of_x(match.child_count)}"
            elif self.config.separated_child_count_label:
                child_count_label = lang.best_of_x(match.child_count)

        opponents = [
            self._create_participant(match, slot, opponent, origin_hint, context)
            for slot, opponent in enumerate(match.opponents, start=1)
        ]

        return {
            'id': match.id,
            'number': match.number,
            'status': int(match.status),
            'status_label': lang.get_match_status(match.status),
            'label': label,
            'child_count_label': child_count_label,
            'connection': connection.to_dict() if connection else None,
            'opponents': opponents,
        }

    @property
    def config(self) -> Config:
        return self.session.config

    def _create_participant(self, match: Match, slot: int, participant: Optional[ParticipantResult],
                            origin_hint, context: Optional[RoundContext]) -> Dict:
        plan = {
            'slot': slot,
            'participant_id': None,
            'name': None,
            'title': None,
            'hint': None,
            'origin': None,
            'origin_placement': None,
            'image_url': None,
            'score': None,
            'result_label': None,
            'win': False,
            'loss': False,
            'is_bye': participant is None,
        }

        if participant is None:
            plan['name'] = lang.bye()
            return plan

        plan['participant_id'] = participant.id
        self._render_participant(plan, participant, origin_hint, context)

        if participant.id is not None:
            self.session.add_participant_ref(participant.id, f"match:{match.id}:{slot}")

        return plan

    def _render_participant(self, plan: Dict, participant: ParticipantResult, origin_hint,
                            context: Optional[RoundContext]) -> None:
        found = self.session.participants.get(participant.id) if participant.id is not None else None

        if found is not None:
            plan['name'] = found.name
            plan['title'] = found.name
            plan['image_url'] = self._get_participant_image(found.id)
            self._render_participant_origin(plan, participant, context)
        else:
            self._render_hint(plan, participant, origin_hint, context)

        plan['score'] = '-' if participant.score is None else str(participant.score)
        self._setup_result(plan, participant)

    def _setup_result(self, plan: Dict, participant: ParticipantResult) -> None:
        if participant.result == Result.WIN:
            plan['win'] = True
            if participant.score is None:
                plan['result_label'] = lang.t('abbreviations.win')

        if participant.result == Result.LOSS or participant.forfeit:
            plan['loss'] = True
            if participant.forfeit:
                plan['result_label'] = lang.t('abbreviations.forfeit')
            elif participant.score is None:
                plan['result_label'] = lang.t('abbreviations.loss')

    def _get_participant_image(self, participant_id) -> Optional[str]:
        for image in self.participant_images:
            if image.participant_id == participant_id:
                return image.image_url
        return None

    def _origin_hidden(self, context: Optional[RoundContext]) -> bool:
        if not self.config.show_slots_origin:
            return True
        is_loser_bracket = context is not None and context.bracket_type == BracketType.LOSER
        return not self.config.show_lower_bracket_slots_origin and is_loser_bracket

    @staticmethod
    def _comes_from_upstream(context: RoundContext, slot: int) -> bool:
        """
        Whether a slot is filled from outside its bracket's previous round.

        In the loser bracket only the drop slots take winner bracket losers;
        the other slot holds the winner of the previous loser round.
        """
        if context.bracket_type != BracketType.LOSER:
            return True
        return slot in lang.get_loser_drop_slots(context.round_number)

    def _render_hint(self, plan: Dict, participant: ParticipantResult, origin_hint,
                     context: Optional[RoundContext]) -> None:
        if origin_hint is None or participant.position is None:
            return
        if self._origin_hidden(context):
            return
        if context is not None and not self._comes_from_upstream(context, plan['slot']):
            return

        plan['hint'] = origin_hint(participant.position)

    def _render_participant_origin(self, plan: Dict, participant: ParticipantResult,
                                   context: Optional[RoundContext]) -> None:
        if participant.position is None or context is None:
            return
        if self.config.participant_origin_placement == 'none':
            return
        if self._origin_hidden(context) or not self._comes_from_upstream(context, plan['slot']):
            return

        abbreviation = get_origin_abbreviation(context.bracket_type, context.skip_first_round,
                                               context.round_number)
        if abbreviation is None:
            return

        plan['origin'] = f"{abbreviation}{participant.position}"
        plan['origin_placement'] = self.config.participant_origin_placement
