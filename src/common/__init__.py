"""Shared utilities for the habitat unit engine."""

from .errors import (
    HabitatUnitError,
    PreconditionError,
    MissingFieldError,
    NegativeAreaError,
    ConfigError,
)

__all__ = [
    'HabitatUnitError',
    'PreconditionError',
    'MissingFieldError',
    'NegativeAreaError',
    'ConfigError',
]
