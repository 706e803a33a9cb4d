class CourtsideError(Exception):
    """Base class for errors raised by the question-answering pipeline."""


class SchemaViolation(CourtsideError):
    """A structured query payload failed validation."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class TranslationFailure(CourtsideError):
    """The text-generation capability errored or returned nothing usable."""


class NoPlayerNameFound(CourtsideError):
    """A player-specific task could not resolve a player name."""

    def __init__(self, message: str = "Could not find a player name in your question. Please specify a player name."):
        self.message = message
        super().__init__(message)


class PlayerNotFound(CourtsideError):
    def __init__(self, player_name: str):
        self.player_name = player_name
        self.message = f'Could not find player "{player_name}" in the database.'
        super().__init__(self.message)


class UpstreamUnavailable(CourtsideError):
    """The backend service or data store is unreachable or misconfigured."""

    def __init__(self, message: str, details: str = "Unknown error"):
        self.message = message
        self.details = details
        super().__init__(f"{message} ({details})")


class InformationalQuestion(CourtsideError):
    """The question is outside the statistics domain."""

    def __init__(self, season: int):
        self.message = (
            f"I can help you with statistics and comparisons for the {season + 1} NBA season. "
            "Try asking about player statistics, team comparisons, or historical player comparisons."
        )
        super().__init__(self.message)
