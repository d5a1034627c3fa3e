"""
Error taxonomy for Pulse Engine.

ValidationError and SyntheticDataError are fatal for the single item or
topic being processed. The scoring pass records them as failures and moves
on; they are never replaced by default or placeholder values.

EmptyPoolWarning is non-fatal: the matcher returns an empty result.
"""


class PulseEngineError(Exception):
    """Base class for all engine errors."""


class ValidationError(PulseEngineError, ValueError):
    """
    Raised when input data is malformed.

    Examples: negative engagement counts, a URL that is not absolute,
    an empty candidate text where matching requires one.
    """


class SyntheticDataError(PulseEngineError, ValueError):
    """
    Raised when output would contain placeholder or fabricated data.

    Attributes:
        marker: The denylist marker that matched.
        value: The offending value.
    """

    def __init__(self, message: str, marker: str = "", value: str = ""):
        super().__init__(message)
        self.marker = marker
        self.value = value


class EmptyPoolWarning(UserWarning):
    """Emitted when relevance matching is asked to search an empty pool."""
