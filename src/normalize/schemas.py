"""
Canonical Data Schemas for the habitat unit engine

Defines the input and output record models used throughout the system.

Design Principles:
- One input record per (ReachID, SiteAction, Year)
- Declared bounds on every raw metric (validated on construction)
- Records are immutable once created
- Identity (ReachID, SiteAction, Year) is carried through unchanged
"""

from typing import Any, Dict, Literal, Mapping, Optional

import numpy as np
import pandas as pd
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from common.errors import MissingFieldError, NegativeAreaError, PreconditionError


# Type aliases
Side = Literal["left", "right"]
Rating = Literal["poor", "fair", "good", "excellent"]

# Riparian metric names (prefixed with left_ / right_ on InputRecord)
RIPARIAN_METRICS = [
    'watershed_runoff',
    'hydrologic_connection',
    'streambank',
    'energy_nutrients',
    'riparian_filtering',
    'plant_community',
    'canopy',
    'understory',
    'forest_floor',
    'stream_habitat',
    'lateral_connectivity',
    'longitudinal_connectivity',
]

INSTREAM_METRICS = [
    'bhr_score',
    'velocity_site',
    'velocity_ref',
    'area_site',
    'area_ref',
    'channel_alteration',
    'channel_evolution',
    'bank_stability',
    'habitat_cover',
    'large_wood',
    'velocity_depth',
    'substrate',
    'aop_score',
    'material_transport',
    'passage_rate',
]

IDENTITY_FIELDS = ['reach_id', 'site_action', 'year']

EXTENT_FIELDS = ['reach_length_ft', 'reach_top_width_ft', 'left_area_acres', 'right_area_acres']


def _instream_rubric(description: str):
    return Field(..., ge=0, le=20, description=f"{description} (0-20)")


def _riparian_rubric(description: str):
    return Field(..., ge=0, le=15, description=f"{description} (0-15)")


class InputRecord(BaseModel):
    """
    Raw field and modeled metrics for one reach, alternative and forecast year.

    Upstream tabular sources are expected to have coerced types and units
    before records are built.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    reach_id: str = Field(..., alias="ReachID", description="Reach identifier")
    site_action: str = Field(..., alias="SiteAction", description="Restoration alternative")
    year: int = Field(..., alias="Year", ge=0, description="Forecast year (e.g., 0, 2, 10, 50)")

    # Instream: hydrology / hydraulics
    bhr_score: float = _instream_rubric("Bank height ratio score")
    velocity_site: float = Field(..., ge=0, description="Site bankfull velocity")
    velocity_ref: float = Field(..., gt=0, description="Reference bankfull velocity")
    area_site: float = Field(..., ge=0, description="Site bankfull cross-sectional area")
    area_ref: float = Field(..., gt=0, description="Reference bankfull cross-sectional area")

    # Instream: geomorphology
    channel_alteration: float = _instream_rubric("Channel alteration")
    channel_evolution: float = _instream_rubric("Channel stability / evolution")
    bank_stability: float = _instream_rubric("Bank stability")

    # Instream: habitat
    habitat_cover: float = _instream_rubric("Habitat / cover")
    large_wood: float = _instream_rubric("Large wood")
    velocity_depth: float = _instream_rubric("Velocity-depth regime")
    substrate: float = _instream_rubric("Substrate")

    # Instream: connectivity
    aop_score: float = _instream_rubric("Aquatic organism passage")
    material_transport: float = _instream_rubric("Material transport")
    passage_rate: float = Field(..., ge=0, le=1, description="Passage rate (0-1)")

    # Riparian, left bank
    left_watershed_runoff: float = _riparian_rubric("Left watershed runoff")
    left_hydrologic_connection: float = _riparian_rubric("Left hydrologic connection")
    left_streambank: float = _riparian_rubric("Left streambank process")
    left_energy_nutrients: float = _riparian_rubric("Left energy / nutrients")
    left_riparian_filtering: float = _riparian_rubric("Left riparian filtering")
    left_plant_community: float = _riparian_rubric("Left plant community")
    left_canopy: float = _riparian_rubric("Left canopy")
    left_understory: float = _riparian_rubric("Left understory")
    left_forest_floor: float = _riparian_rubric("Left forest floor")
    left_stream_habitat: float = _riparian_rubric("Left stream habitat")
    left_lateral_connectivity: float = _riparian_rubric("Left lateral movement")
    left_longitudinal_connectivity: float = _riparian_rubric("Left longitudinal movement")

    # Riparian, right bank
    right_watershed_runoff: float = _riparian_rubric("Right watershed runoff")
    right_hydrologic_connection: float = _riparian_rubric("Right hydrologic connection")
    right_streambank: float = _riparian_rubric("Right streambank process")
    right_energy_nutrients: float = _riparian_rubric("Right energy / nutrients")
    right_riparian_filtering: float = _riparian_rubric("Right riparian filtering")
    right_plant_community: float = _riparian_rubric("Right plant community")
    right_canopy: float = _riparian_rubric("Right canopy")
    right_understory: float = _riparian_rubric("Right understory")
    right_forest_floor: float = _riparian_rubric("Right forest floor")
    right_stream_habitat: float = _riparian_rubric("Right stream habitat")
    right_lateral_connectivity: float = _riparian_rubric("Right lateral movement")
    right_longitudinal_connectivity: float = _riparian_rubric("Right longitudinal movement")

    # Physical extents
    reach_length_ft: float = Field(..., ge=0, description="Reach length (ft)")
    reach_top_width_ft: float = Field(..., ge=0, description="Reach top width (ft)")
    left_area_acres: float = Field(..., ge=0, description="Left riparian area (acres)")
    right_area_acres: float = Field(..., ge=0, description="Right riparian area (acres)")

    @model_validator(mode='before')
    @classmethod
    def nan_as_missing(cls, data):
        """Tabular sources encode missing values as NaN and numbers as numpy scalars"""
        if not isinstance(data, dict):
            return data
        cleaned = {}
        for key, value in data.items():
            if _is_nan(value):
                value = None
            elif isinstance(value, np.generic):
                value = value.item()
            cleaned[key] = value
        return cleaned

    @field_validator('reach_id', 'site_action', mode='before')
    @classmethod
    def identifiers_as_strings(cls, v):
        """CSV sources often deliver numeric reach IDs"""
        if v is None:
            return v
        return str(v)

    @property
    def key(self) -> str:
        """Record identity used in logs and error messages"""
        return f"{self.reach_id}/{self.site_action}/{self.year}"

    def instream_inputs(self) -> Dict[str, float]:
        """Instream metric values keyed by field name."""
        return {name: getattr(self, name) for name in INSTREAM_METRICS}

    def riparian_inputs(self, side: Side) -> Dict[str, float]:
        """Riparian metric values for one bank, keyed by unprefixed name."""
        if side not in ("left", "right"):
            raise ValueError(f"side must be 'left' or 'right', got {side!r}")
        return {name: getattr(self, f"{side}_{name}") for name in RIPARIAN_METRICS}


class OutputRecord(BaseModel):
    """
    Condition indices, areas and habitat units for one input record.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    reach_id: str = Field(..., alias="ReachID")
    site_action: str = Field(..., alias="SiteAction")
    year: int = Field(..., alias="Year")

    riparian_left_condition: float = Field(..., ge=0.0, le=1.0)
    riparian_right_condition: float = Field(..., ge=0.0, le=1.0)
    instream_condition: float = Field(..., ge=0.0, le=1.0)

    riparian_left_acres: float = Field(..., ge=0.0)
    riparian_right_acres: float = Field(..., ge=0.0)
    instream_acres: float = Field(..., ge=0.0)

    riparian_left_hu: float = Field(..., ge=0.0)
    riparian_right_hu: float = Field(..., ge=0.0)
    instream_hu: float = Field(..., ge=0.0)
    total_hu: float = Field(..., ge=0.0, description="Sum of left, right and instream HUs")

    riparian_left_rating: Rating
    riparian_right_rating: Rating
    instream_rating: Rating


def _record_label(data: Mapping[str, Any]) -> Optional[str]:
    parts = []
    for field, alias in (('reach_id', 'ReachID'), ('site_action', 'SiteAction'), ('year', 'Year')):
        value = data.get(field, data.get(alias))
        parts.append('?' if value is None else str(value))
    if all(p == '?' for p in parts):
        return None
    return "/".join(parts)


def record_from_mapping(data: Mapping[str, Any]) -> InputRecord:
    """
    Build an InputRecord from a row mapping (dict or pandas row).

    Pydantic validation errors are translated into the engine's error
    taxonomy so callers see the offending field and record.

    Raises:
        MissingFieldError: If the record or a required field is absent, None or NaN
        PreconditionError: If the record is not a mapping or a field violates its bounds
    """
    if isinstance(data, pd.Series):
        data = data.to_dict()

    if data is None:
        raise MissingFieldError("Record is empty (None)")
    if not isinstance(data, Mapping):
        raise PreconditionError(f"Record must be a mapping, got {type(data).__name__}")

    try:
        return InputRecord.model_validate(dict(data))
    except ValidationError as e:
        label = _record_label(data)
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get('loc', ())) or None
        value = first.get('input')

        if first.get('type') == 'missing' or value is None or _is_nan(value):
            raise MissingFieldError(
                f"Missing value for '{field}'", field=field, record=label
            ) from e

        if field in EXTENT_FIELDS and first.get('type') == 'greater_than_equal':
            raise NegativeAreaError(
                f"'{field}' must be >= 0, got {value!r}", field=field, record=label
            ) from e

        raise PreconditionError(
            f"Invalid value for '{field}': {first.get('msg')} (got {value!r})",
            field=field,
            record=label
        ) from e


def _is_nan(value: Any) -> bool:
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False
