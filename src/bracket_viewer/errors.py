"""
Exceptions raised while planning a bracket.
"""


class BracketViewerError(Exception):
    pass


class ConfigurationError(BracketViewerError, ValueError):
    pass


class UnknownStageTypeError(ConfigurationError):
    def __init__(self, stage_type):
        self.stage_type = stage_type
        super().__init__(f"Unknown bracket type: {stage_type}")


class BracketStructureError(BracketViewerError):
    pass


class UnknownParticipantError(BracketViewerError, KeyError):
    def __init__(self, participant_id):
        self.participant_id = participant_id
        super().__init__(f"The participant (id: {participant_id}) does not exist in the participants table.")

    def __str__(self):
        # KeyError would repr() the message
        return self.args[0]
