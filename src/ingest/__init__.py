"""Input table validation for the habitat unit engine."""

from .validators import (
    validate_input_table,
    resolve_identity_columns,
    required_metric_columns,
)

__all__ = [
    'validate_input_table',
    'resolve_identity_columns',
    'required_metric_columns',
]
