"""
Composite Condition Index Engine

Evaluates a configured composite index (see indices.config) against a set of
raw metric values.

Algorithm:
1. Normalize each metric to 0-1 (rubric, deviation or ratio)
2. Sub-index = weighted mean of its normalized metrics
3. Total = weighted mean of sub-indices

With equal weights both steps reduce to unweighted arithmetic means.

Design Principles:
- Pure function of inputs and config
- Every input validated before use
- Auditable (sub-index breakdown returned with the total)
"""

import logging
from typing import Dict, Mapping, Sequence

from pydantic import BaseModel, Field

from common.errors import MissingFieldError
from normalize.metrics import deviation_index, normalize_ratio, normalize_rubric

from .config import IndexConfig, MetricSpec, SubIndexConfig

logger = logging.getLogger(__name__)


class CompositeIndex(BaseModel):
    """Evaluated composite index with its sub-index breakdown."""

    abbreviation: str = Field(..., description="Index abbreviation (e.g., UIM)")
    sub_indices: Dict[str, float] = Field(..., description="Sub-index scores (0-1)")
    total: float = Field(..., ge=0.0, le=1.0, description="Composite score (0-1)")


def _lookup(inputs: Mapping[str, float], field: str) -> float:
    if field not in inputs:
        raise MissingFieldError(f"Missing input field '{field}'", field=field)
    return inputs[field]


def normalize_metric(metric: MetricSpec, inputs: Mapping[str, float]) -> float:
    """
    Normalize one configured metric to the 0-1 scale.

    Args:
        metric: Metric specification
        inputs: Raw metric values keyed by field name

    Returns:
        Normalized metric value (0-1)
    """
    value = _lookup(inputs, metric.field)

    if metric.method == "deviation":
        reference = _lookup(inputs, metric.reference)
        return deviation_index(value, reference, field=metric.field, threshold=metric.threshold)

    if metric.method == "ratio":
        return normalize_ratio(value, field=metric.field)

    return normalize_rubric(value, metric.maximum, field=metric.field)


def weighted_mean(values: Sequence[float], weights: Sequence[float]) -> float:
    """Weighted arithmetic mean; equal weights give the plain mean."""
    total_weight = sum(weights)
    if total_weight <= 0:
        raise ValueError("weights must sum to a positive value")
    return sum(v * w for v, w in zip(values, weights)) / total_weight


def compute_sub_index(sub_index: SubIndexConfig, inputs: Mapping[str, float]) -> float:
    """Weighted mean of a sub-index's normalized metrics."""
    values = [normalize_metric(metric, inputs) for metric in sub_index.metrics]
    weights = [metric.weight for metric in sub_index.metrics]
    return weighted_mean(values, weights)


def compute_composite_index(inputs: Mapping[str, float], config: IndexConfig) -> CompositeIndex:
    """
    Evaluate a composite index.

    Args:
        inputs: Raw metric values keyed by field name
        config: Index configuration

    Returns:
        CompositeIndex with sub-index scores and total

    Raises:
        MissingFieldError: If a configured field is absent or NaN
        PreconditionError: If a value violates its declared bounds
    """
    sub_indices = {
        name: compute_sub_index(sub_index, inputs)
        for name, sub_index in config.sub_indices.items()
    }

    total = weighted_mean(
        list(sub_indices.values()),
        [sub_index.weight for sub_index in config.sub_indices.values()]
    )

    # Guard against floating-point drift just outside [0, 1]
    total = min(1.0, max(0.0, total))

    logger.debug(f"{config.abbreviation} sub-indices={sub_indices} total={total:.4f}")

    return CompositeIndex(
        abbreviation=config.abbreviation,
        sub_indices=sub_indices,
        total=total
    )


def explain_composite_index(result: CompositeIndex) -> str:
    """
    Generate human-readable explanation of a composite index.

    Reports the total on the 0-100 scale and names the weakest sub-index.

    Examples:
        >>> result = CompositeIndex(abbreviation="REFI",
        ...                         sub_indices={'instream': 0.8, 'habitat': 0.4}, total=0.6)
        >>> explain_composite_index(result)
        'REFI = 60.00 (weakest: habitat at 40.00; strongest: instream at 80.00)'
    """
    weakest = min(result.sub_indices, key=result.sub_indices.get)
    strongest = max(result.sub_indices, key=result.sub_indices.get)

    return (
        f"{result.abbreviation} = {result.total * 100:.2f} "
        f"(weakest: {weakest} at {result.sub_indices[weakest] * 100:.2f}; "
        f"strongest: {strongest} at {result.sub_indices[strongest] * 100:.2f})"
    )
