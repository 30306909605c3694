"""Error taxonomy for generation calls.

ConfigurationError is raised before any network call is attempted.
TransportError covers network and model-service failures.
ParseError means the model answered but its output was unusable.
"""


class GenerationError(Exception):
    """Base class for all failures of a generation action."""


class ConfigurationError(GenerationError):
    """Missing credential or required input (prompt, image)."""


class TransportError(GenerationError):
    """The model service or the relay could not be reached or returned an error."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ParseError(GenerationError):
    """Model output was not valid JSON or did not fit the expected shape."""


class NoContentError(ParseError):
    """The response carried no generated text at the expected path."""
