"""
Viewer configuration.

Every option is independently togglable. Defaults show everything, place the
origin before the participant name and share hover highlighting.
"""
from typing import Dict, Optional
import yaml

from .errors import ConfigurationError

ORIGIN_PLACEMENTS = ('before', 'after', 'none')

# snake_case option -> camelCase spelling accepted from JavaScript callers
OPTION_ALIASES = {
    'participant_origin_placement': 'participantOriginPlacement',
    'separated_child_count_label': 'separatedChildCountLabel',
    'show_slots_origin': 'showSlotsOrigin',
    'show_lower_bracket_slots_origin': 'showLowerBracketSlotsOrigin',
    'highlight_participant_on_hover': 'highlightParticipantOnHover',
    'language': 'language',
}


def _normalize(options: Optional[Dict]) -> Dict:
    """Keep the known options of a partial mapping, keyed by their snake_case name."""
    values = {}
    if not options:
        return values
    for name, alias in OPTION_ALIASES.items():
        if options.get(name) is not None:
            values[name] = options[name]
        elif options.get(alias) is not None:
            values[name] = options[alias]
    # A falsy placement hides the origin
    if 'participant_origin_placement' in values and not values['participant_origin_placement']:
        values['participant_origin_placement'] = 'none'
    return values


class Config:
    def __init__(self, participant_origin_placement='before', separated_child_count_label=False,
                 show_slots_origin=True, show_lower_bracket_slots_origin=True,
                 highlight_participant_on_hover=True, language=None):
        if participant_origin_placement not in ORIGIN_PLACEMENTS:
            raise ConfigurationError(
                f"Invalid participant_origin_placement: {participant_origin_placement!r} "
                f"(expected one of {', '.join(ORIGIN_PLACEMENTS)})"
            )
        self.participant_origin_placement = participant_origin_placement
        self.separated_child_count_label = bool(separated_child_count_label)
        self.show_slots_origin = bool(show_slots_origin)
        self.show_lower_bracket_slots_origin = bool(show_lower_bracket_slots_origin)
        self.highlight_participant_on_hover = bool(highlight_participant_on_hover)
        # Locale used for labels; None keeps the default language
        self.language = language

    @classmethod
    def from_dict(cls, options: Optional[Dict]) -> 'Config':
        """Build a config from a partial mapping; unknown keys are ignored."""
        return cls(**_normalize(options))

    def merge(self, options: Optional[Dict]) -> 'Config':
        """Return a copy of this config overridden by the options of a partial mapping."""
        values = self.to_dict()
        values.update(_normalize(options))
        return Config(**values)

    def to_dict(self) -> Dict:
        return {name: getattr(self, name) for name in OPTION_ALIASES}

    def __repr__(self):
        return f"Config({self.to_dict()})"


def load_config(file_path) -> Config:
    """Load a config from a YAML file. An empty file yields the defaults."""
    with open(file_path, mode='r', encoding='utf-8') as file:
        data = yaml.safe_load(file)
    if data is not None and not isinstance(data, dict):
        raise ConfigurationError(f"Config file {file_path} must contain a mapping")
    return Config.from_dict(data)
