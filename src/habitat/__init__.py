"""Habitat unit aggregation and alternative summaries."""

from .units import (
    SQFT_PER_ACRE,
    square_feet_to_acres,
    instream_area_acres,
    compute_habitat_units,
    classify_condition,
    aggregate_record,
    explain_habitat_units,
)

from .summary import (
    summarize_by_alternative,
    compute_average_annual_habitat_units,
    compute_net_change,
)

__all__ = [
    # Habitat units
    'SQFT_PER_ACRE',
    'square_feet_to_acres',
    'instream_area_acres',
    'compute_habitat_units',
    'classify_condition',
    'aggregate_record',
    'explain_habitat_units',
    # Summaries
    'summarize_by_alternative',
    'compute_average_annual_habitat_units',
    'compute_net_change',
]
