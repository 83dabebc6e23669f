"""
Input Table Validators

Checks a tabular input dataset (one row per reach, alternative and forecast
year) before it is handed to the batch processor.

Design Principles:
- Report every problem found, not just the first
- Log all validation failures for debugging
- Advisory only: row-level enforcement happens in the batch processor
"""

import logging
from typing import Dict, List, Optional

import pandas as pd

from normalize.schemas import EXTENT_FIELDS, InputRecord

logger = logging.getLogger(__name__)


# Identity columns may arrive under their field name or alias
IDENTITY_ALIASES = {
    'reach_id': 'ReachID',
    'site_action': 'SiteAction',
    'year': 'Year',
}

# Reference values are used as denominators
REFERENCE_COLUMNS = ['velocity_ref', 'area_ref']

EXTENT_COLUMNS = EXTENT_FIELDS


def resolve_identity_columns(df: pd.DataFrame) -> Dict[str, Optional[str]]:
    """Map identity field names to whichever column name the table uses."""
    resolved = {}
    for field, alias in IDENTITY_ALIASES.items():
        if field in df.columns:
            resolved[field] = field
        elif alias in df.columns:
            resolved[field] = alias
        else:
            resolved[field] = None
    return resolved


def required_metric_columns() -> List[str]:
    """All non-identity input columns."""
    return [name for name in InputRecord.model_fields if name not in IDENTITY_ALIASES]


def validate_input_table(
    df: pd.DataFrame,
    require_columns: Optional[List[str]] = None
) -> tuple[bool, list[str]]:
    """
    Validate an input table.

    Checks for:
    - Required columns present
    - No all-NaN columns
    - Duplicate (ReachID, SiteAction, Year) keys
    - Negative physical extents
    - Reference values <= 0

    Args:
        df: Input DataFrame
        require_columns: Metric columns to require (default: every InputRecord field)

    Returns:
        Tuple of (is_valid, list of error messages)
    """
    errors = []

    if require_columns is None:
        require_columns = required_metric_columns()

    identity = resolve_identity_columns(df)
    missing_identity = [IDENTITY_ALIASES[field] for field, column in identity.items() if column is None]
    if missing_identity:
        errors.append(f"Missing identity columns: {missing_identity}")

    # Check required columns exist
    missing_cols = sorted(set(require_columns) - set(df.columns))
    if missing_cols:
        errors.append(f"Missing required columns: {missing_cols}")

    if errors:
        logger.error(f"❌ Input table validation failed: {'; '.join(errors)}")
        return False, errors

    if len(df) == 0:
        errors.append("Input table is empty")
        logger.error(f"❌ Input table validation failed: {'; '.join(errors)}")
        return False, errors

    # Check for all-NaN columns
    for col in require_columns:
        if df[col].isna().all():
            errors.append(f"Column '{col}' is entirely NaN")

    # Check for duplicate keys (each reach appears once per alternative-year)
    key_columns = list(identity.values())
    duplicates = df.duplicated(subset=key_columns).sum()
    if duplicates > 0:
        errors.append(
            f"Found {duplicates} duplicate (ReachID, SiteAction, Year) keys. "
            f"Each reach should appear once per alternative and year."
        )

    # Physical extents should be non-negative
    for col in EXTENT_COLUMNS:
        if col in df.columns:
            values = pd.to_numeric(df[col], errors='coerce').dropna()
            if (values < 0).any():
                errors.append(f"Found negative '{col}' values: min={values.min():.2f}")

    # Reference values are denominators
    for col in REFERENCE_COLUMNS:
        if col in df.columns:
            values = pd.to_numeric(df[col], errors='coerce').dropna()
            if (values <= 0).any():
                errors.append(
                    f"Found {(values <= 0).sum()} non-positive '{col}' values "
                    f"(reference values must be > 0)"
                )

    is_valid = len(errors) == 0

    if is_valid:
        logger.info(f"✅ Input table validation passed: {len(df)} records")
    else:
        logger.error(f"❌ Input table validation failed: {'; '.join(errors)}")

    return is_valid, errors
