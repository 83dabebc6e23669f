"""
Error taxonomy for the habitat unit engine.

Design Principles:
- Fail fast with explicit error messages
- Every error names the offending field (and record, when known)
- All errors are deterministic: same inputs -> same error
"""

from typing import Optional


class HabitatUnitError(Exception):
    """Base class for all engine errors"""
    pass


class PreconditionError(HabitatUnitError, ValueError):
    """
    Raised when an input violates a declared bound.

    Examples: rubric score outside 0-20, reference velocity <= 0.
    """

    kind = "precondition"

    def __init__(self, message: str, field: Optional[str] = None, record: Optional[str] = None):
        self.field = field
        self.record = record
        super().__init__(message)

    def with_record(self, record: str) -> 'PreconditionError':
        """Attach record identity to an error raised below the record level."""
        self.record = record
        return self

    def __str__(self) -> str:
        message = super().__str__()
        if self.record:
            return f"[{self.record}] {message}"
        return message


class MissingFieldError(PreconditionError):
    """Raised when a required field is absent, None or NaN"""

    kind = "missing_field"


class NegativeAreaError(PreconditionError):
    """Raised when an area is negative (rejected before computing habitat units)"""

    kind = "negative_area"


class ConfigError(HabitatUnitError, ValueError):
    """Raised when an index configuration is invalid"""
    pass
