"""
Metric Normalizer for the habitat unit engine

Converts heterogeneous raw field metrics onto a common 0-1 condition scale.

Supported metric types:
- Rubric scores (0-20 instream rubrics, 0-15 riparian rubrics)
- Hydraulic deviation from reference (bankfull velocity, bankfull area)
- Ratios already on a 0-1 scale (passage rate)

Design Principles:
- Fail fast on out-of-bound inputs (no silent NaN propagation)
- Errors name the offending field
- Pure functions, no side effects
"""

import math
from typing import Any

import pandas as pd

from common.errors import MissingFieldError, PreconditionError


# Site values beyond this multiple of the reference score 0
DEFAULT_DEVIATION_THRESHOLD = 2.0


def require_value(value: Any, field: str) -> float:
    """Return value as float, raising MissingFieldError for None/NaN."""
    if value is None or pd.isna(value):
        raise MissingFieldError(f"Missing value for '{field}'", field=field)

    try:
        value = float(value)
    except (TypeError, ValueError) as e:
        raise PreconditionError(
            f"Value for '{field}' is not numeric: {value!r}", field=field
        ) from e

    if math.isinf(value):
        raise PreconditionError(f"Value for '{field}' is infinite", field=field)

    return value


def normalize_rubric(score: float, maximum: float, field: str = "score") -> float:
    """
    Normalize a rubric score to the 0-1 scale.

    Args:
        score: Raw rubric score (0 to maximum)
        maximum: Declared rubric maximum (20 for instream, 15 for riparian)
        field: Field name used in error messages

    Returns:
        score / maximum, between 0.0 and 1.0

    Raises:
        MissingFieldError: If score is None or NaN
        PreconditionError: If score is outside [0, maximum] or maximum <= 0

    Examples:
        >>> normalize_rubric(15, 20)
        0.75
        >>> normalize_rubric(12, 15)
        0.8
    """
    score = require_value(score, field)

    if maximum <= 0:
        raise PreconditionError(
            f"Rubric maximum for '{field}' must be positive, got {maximum}", field=field
        )

    if score < 0 or score > maximum:
        raise PreconditionError(
            f"'{field}' = {score} is outside rubric bounds [0, {maximum}]", field=field
        )

    return score / maximum


def deviation_index(
    site: float,
    reference: float,
    field: str = "value",
    threshold: float = DEFAULT_DEVIATION_THRESHOLD
) -> float:
    """
    Score a hydraulic site value against its reference value.

    Formula:
        0.0                                          if site > threshold * reference
        max(0, 1 - |reference - site| / reference)   otherwise

    Deviation is penalized symmetrically in either direction. The threshold
    is a hard cutoff.

    Args:
        site: Measured site value (e.g., bankfull velocity)
        reference: Reference value for the same metric (must be > 0)
        field: Field name used in error messages
        threshold: Multiple of reference beyond which the index is 0

    Returns:
        Deviation index between 0.0 and 1.0

    Raises:
        MissingFieldError: If site or reference is None or NaN
        PreconditionError: If reference <= 0 or site < 0

    Examples:
        >>> deviation_index(4.0, 4.0)
        1.0
        >>> deviation_index(5.0, 4.0)
        0.75
        >>> deviation_index(150.0, 50.0)
        0.0
    """
    site = require_value(site, field)
    reference = require_value(reference, f"{field} reference")

    if reference <= 0:
        raise PreconditionError(
            f"Reference value for '{field}' must be > 0, got {reference}", field=field
        )

    if site < 0:
        raise PreconditionError(
            f"Site value for '{field}' must be >= 0, got {site}", field=field
        )

    if site > threshold * reference:
        return 0.0

    # Non-negative for any threshold, including cutoffs above 2x
    return max(0.0, 1.0 - abs(reference - site) / reference)


def normalize_ratio(value: float, field: str = "ratio") -> float:
    """
    Validate a metric that is already on the 0-1 scale (e.g., passage rate).

    Raises:
        PreconditionError: If value is outside [0, 1]
    """
    return normalize_rubric(value, 1.0, field)


def to_percent_scale(index: float) -> float:
    """Convert a 0-1 condition index to the 0-100 reporting scale."""
    return index * 100.0
