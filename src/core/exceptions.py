"""
Exception types raised by the best-price router.
"""


class MatchingEngineError(Exception):
    """Base class for all router errors."""


class InvalidInputError(MatchingEngineError, ValueError):
    """A required argument was missing."""

    def __init__(self, argument_name: str, message: str = None):
        self.argument_name = argument_name
        super().__init__(message or f"Invalid argument: {argument_name} is required")


class UnsupportedOperationError(MatchingEngineError):
    """The customer order side is outside the supported set."""


class SnapshotSourceError(MatchingEngineError):
    """The snapshot source as a whole could not be read."""
