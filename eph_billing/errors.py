"""Exceptions raised by the billing engine.

Every engine component raises one of these instead of defaulting a value,
so a calculation run either produces a fully resolved result set or fails
as a whole. Callers decide how to handle partial failure (for example,
skip one asset and continue with the others).
"""

from typing import Any, Optional, Sequence, Tuple


class BillingEngineError(Exception):
    """Base exception for billing engine errors with user-friendly messages."""

    def __init__(self, message: str, recovery_hint: Optional[str] = None):
        """
        Initialize billing engine error.

        Args:
            message: Error message to display
            recovery_hint: Optional hint for recovering from the error
        """
        self.message = message
        self.recovery_hint = recovery_hint
        super().__init__(message)


class ConfigurationError(BillingEngineError):
    """A required day-type configuration is missing or inconsistent."""

    pass


class AmbiguousEntryError(BillingEngineError):
    """Several submissions compete for the same (date, subject) key.

    Attributes:
        key: The (date, subject_key) group that could not be resolved
        candidates: The tied entries
    """

    def __init__(
        self,
        message: str,
        key: Optional[Tuple[Any, str]] = None,
        candidates: Sequence[Any] = (),
        recovery_hint: Optional[str] = None,
    ):
        super().__init__(message, recovery_hint)
        self.key = key
        self.candidates = tuple(candidates)


class InvalidTimeRangeError(BillingEngineError):
    """Start/end times are unparseable or the worked hours are nonsensical."""

    pass
