"""
Habitat Unit Aggregator

Converts condition indices into area-weighted habitat units (HU) for each
spatial component of a reach, then sums them into a reach total.

Components (disjoint by construction):
- Riparian left bank: REFI(left) x left riparian area
- Riparian right bank: REFI(right) x right riparian area
- Instream channel: UIM x (reach length x top width / 43,560)

Design Principles:
- Negative areas rejected before multiplication
- Habitat units are always >= 0
- Total is a plain sum (no double counting)
"""

import logging
from typing import Optional

from common.errors import NegativeAreaError, PreconditionError
from indices.config import IndexConfig
from indices.refi import compute_refi_for_side
from indices.uim import compute_uim_for_record
from normalize.metrics import require_value
from normalize.schemas import InputRecord, OutputRecord, Rating

logger = logging.getLogger(__name__)


SQFT_PER_ACRE = 43560.0


def square_feet_to_acres(square_feet: float, field: str = "area_sqft") -> float:
    """
    Convert square feet to acres.

    Raises:
        NegativeAreaError: If square_feet < 0

    Examples:
        >>> square_feet_to_acres(43560)
        1.0
    """
    square_feet = require_value(square_feet, field)
    if square_feet < 0:
        raise NegativeAreaError(f"'{field}' must be >= 0, got {square_feet}", field=field)
    return square_feet / SQFT_PER_ACRE


def instream_area_acres(reach_length_ft: float, reach_top_width_ft: float) -> float:
    """
    Channel area of a reach in acres (length x top width / 43,560).

    Examples:
        >>> instream_area_acres(1089, 40)
        1.0
    """
    length = require_value(reach_length_ft, "reach_length_ft")
    width = require_value(reach_top_width_ft, "reach_top_width_ft")

    if length < 0:
        raise NegativeAreaError(f"'reach_length_ft' must be >= 0, got {length}", field="reach_length_ft")
    if width < 0:
        raise NegativeAreaError(f"'reach_top_width_ft' must be >= 0, got {width}", field="reach_top_width_ft")

    return square_feet_to_acres(length * width, field="instream_area_sqft")


def compute_habitat_units(condition: float, area_acres: float, field: str = "area_acres") -> float:
    """
    Habitat units = condition index x area (acres).

    Args:
        condition: Condition index (0-1)
        area_acres: Associated area (acres, >= 0)
        field: Area field name used in error messages

    Returns:
        Habitat units (>= 0)

    Raises:
        NegativeAreaError: If area_acres < 0
        PreconditionError: If condition is outside [0, 1]

    Examples:
        >>> compute_habitat_units(0.5, 4.0)
        2.0
    """
    area_acres = require_value(area_acres, field)
    condition = require_value(condition, "condition")

    if area_acres < 0:
        raise NegativeAreaError(f"'{field}' must be >= 0, got {area_acres}", field=field)

    if not (0.0 <= condition <= 1.0):
        raise PreconditionError(
            f"Condition index must be within [0, 1], got {condition}", field="condition"
        )

    return condition * area_acres


def classify_condition(index: float) -> Rating:
    """
    Convert a condition index to a qualitative rating.

    Args:
        index: Condition index (0-1)

    Returns:
        Rating classification

    Examples:
        >>> classify_condition(0.85)
        'excellent'
        >>> classify_condition(0.62)
        'good'
        >>> classify_condition(0.275)
        'poor'
    """
    if index >= 0.8:
        return "excellent"
    elif index >= 0.6:
        return "good"
    elif index >= 0.3:
        return "fair"
    else:
        return "poor"


def aggregate_record(
    record: InputRecord,
    uim_config: Optional[IndexConfig] = None,
    refi_config: Optional[IndexConfig] = None
) -> OutputRecord:
    """
    Compute condition indices and habitat units for one input record.

    Args:
        record: Validated input record
        uim_config: Instream index configuration (default: uim.yaml)
        refi_config: Riparian index configuration (default: refi.yaml)

    Returns:
        OutputRecord with indices, areas and habitat units

    Raises:
        PreconditionError: If any input violates its bounds (field and
            record identity attached)
    """
    try:
        left = compute_refi_for_side(record, "left", config=refi_config).total
        right = compute_refi_for_side(record, "right", config=refi_config).total
        instream = compute_uim_for_record(record, config=uim_config).total

        instream_acres = instream_area_acres(record.reach_length_ft, record.reach_top_width_ft)

        left_hu = compute_habitat_units(left, record.left_area_acres, field="left_area_acres")
        right_hu = compute_habitat_units(right, record.right_area_acres, field="right_area_acres")
        instream_hu = compute_habitat_units(instream, instream_acres, field="instream_acres")
    except PreconditionError as e:
        e.with_record(record.key)
        raise

    total_hu = left_hu + right_hu + instream_hu

    logger.debug(
        f"{record.key}: REFI L={left:.4f} R={right:.4f} UIM={instream:.4f} "
        f"total HU={total_hu:.4f}"
    )

    return OutputRecord(
        reach_id=record.reach_id,
        site_action=record.site_action,
        year=record.year,
        riparian_left_condition=left,
        riparian_right_condition=right,
        instream_condition=instream,
        riparian_left_acres=record.left_area_acres,
        riparian_right_acres=record.right_area_acres,
        instream_acres=instream_acres,
        riparian_left_hu=left_hu,
        riparian_right_hu=right_hu,
        instream_hu=instream_hu,
        total_hu=total_hu,
        riparian_left_rating=classify_condition(left),
        riparian_right_rating=classify_condition(right),
        instream_rating=classify_condition(instream),
    )


def explain_habitat_units(output: OutputRecord) -> str:
    """
    Generate human-readable summary of a reach's habitat units.

    Args:
        output: Computed output record

    Returns:
        Explanation string
    """
    parts = [
        f"Reach {output.reach_id} ({output.site_action}, year {output.year}): "
        f"{output.total_hu:.2f} total HU.",
        f" Instream: {output.instream_condition * 100:.1f} ({output.instream_rating})"
        f" x {output.instream_acres:.2f} ac = {output.instream_hu:.2f} HU.",
        f" Left bank: {output.riparian_left_condition * 100:.1f} ({output.riparian_left_rating})"
        f" x {output.riparian_left_acres:.2f} ac = {output.riparian_left_hu:.2f} HU.",
        f" Right bank: {output.riparian_right_condition * 100:.1f} ({output.riparian_right_rating})"
        f" x {output.riparian_right_acres:.2f} ac = {output.riparian_right_hu:.2f} HU.",
    ]

    return "".join(parts)
