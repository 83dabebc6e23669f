"""Metric normalization and record schemas for the habitat unit engine."""

from .metrics import (
    normalize_rubric,
    deviation_index,
    normalize_ratio,
    to_percent_scale,
    DEFAULT_DEVIATION_THRESHOLD,
)

from .schemas import (
    InputRecord,
    OutputRecord,
    record_from_mapping,
    RIPARIAN_METRICS,
    INSTREAM_METRICS,
    IDENTITY_FIELDS,
    EXTENT_FIELDS,
)

__all__ = [
    # Metric normalization
    'normalize_rubric',
    'deviation_index',
    'normalize_ratio',
    'to_percent_scale',
    'DEFAULT_DEVIATION_THRESHOLD',
    # Schemas
    'InputRecord',
    'OutputRecord',
    'record_from_mapping',
    'RIPARIAN_METRICS',
    'INSTREAM_METRICS',
    'IDENTITY_FIELDS',
    'EXTENT_FIELDS',
]
