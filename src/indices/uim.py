"""
Instream Condition Index (UIM)

Scores the instream condition of a reach from fifteen field and modeled metrics
grouped into four sub-indices:

- Hydrology / hydraulics: bank height ratio, bankfull velocity and area
  relative to reference
- Geomorphology: channel alteration, channel evolution, bank stability
- Habitat: cover, large wood, velocity-depth regime, substrate
- Connectivity: aquatic organism passage, material transport, passage rate

Each sub-index is the mean of its normalized metrics and the total is the
unweighted mean of the four sub-indices (weights from config/indices/uim.yaml).
"""

from typing import Optional

from pydantic import BaseModel, Field

from normalize.schemas import InputRecord

from .composite import compute_composite_index
from .config import IndexConfig, load_index_config, require_sub_indices


class UIMScore(BaseModel):
    """Instream condition index with sub-index breakdown (all 0-1)."""

    hydrology: float = Field(..., ge=0.0, le=1.0, description="Hydrology / hydraulics sub-index")
    geomorphology: float = Field(..., ge=0.0, le=1.0, description="Geomorphology sub-index")
    habitat: float = Field(..., ge=0.0, le=1.0, description="Instream habitat sub-index")
    connectivity: float = Field(..., ge=0.0, le=1.0, description="Connectivity sub-index")
    total: float = Field(..., ge=0.0, le=1.0, description="Composite instream condition")


UIM_SUB_INDICES = [name for name in UIMScore.model_fields if name != "total"]


def compute_uim(
    bhr_score: float,
    velocity_site: float,
    velocity_ref: float,
    area_site: float,
    area_ref: float,
    channel_alteration: float,
    channel_evolution: float,
    bank_stability: float,
    habitat_cover: float,
    large_wood: float,
    velocity_depth: float,
    substrate: float,
    aop_score: float,
    material_transport: float,
    passage_rate: float,
    config: Optional[IndexConfig] = None
) -> UIMScore:
    """
    Compute the instream condition index for one reach-year.

    Args:
        bhr_score: Bank height ratio score (0-20)
        velocity_site: Site bankfull velocity
        velocity_ref: Reference bankfull velocity (> 0)
        area_site: Site bankfull cross-sectional area
        area_ref: Reference bankfull cross-sectional area (> 0)
        channel_alteration: Channel alteration score (0-20)
        channel_evolution: Channel stability / evolution score (0-20)
        bank_stability: Bank stability score (0-20)
        habitat_cover: Habitat / cover score (0-20)
        large_wood: Large wood score (0-20)
        velocity_depth: Velocity-depth regime score (0-20)
        substrate: Substrate score (0-20)
        aop_score: Aquatic organism passage score (0-20)
        material_transport: Material transport score (0-20)
        passage_rate: Passage rate (0-1)
        config: Index configuration (defaults to config/indices/uim.yaml)

    Returns:
        UIMScore with four sub-indices and total

    Raises:
        MissingFieldError: If any input is None or NaN
        PreconditionError: If any input is outside its declared bounds
        ConfigError: If config does not define exactly the UIM sub-indices

    Examples:
        >>> score = compute_uim(20, 4, 4, 50, 50, 20, 20, 20, 20, 20, 20, 20, 20, 20, 1.0)
        >>> score.total
        1.0
    """
    if config is None:
        config = load_index_config('uim')
    require_sub_indices(config, UIM_SUB_INDICES)

    inputs = {
        'bhr_score': bhr_score,
        'velocity_site': velocity_site,
        'velocity_ref': velocity_ref,
        'area_site': area_site,
        'area_ref': area_ref,
        'channel_alteration': channel_alteration,
        'channel_evolution': channel_evolution,
        'bank_stability': bank_stability,
        'habitat_cover': habitat_cover,
        'large_wood': large_wood,
        'velocity_depth': velocity_depth,
        'substrate': substrate,
        'aop_score': aop_score,
        'material_transport': material_transport,
        'passage_rate': passage_rate,
    }

    result = compute_composite_index(inputs, config)

    return UIMScore(**result.sub_indices, total=result.total)


def compute_uim_for_record(record: InputRecord, config: Optional[IndexConfig] = None) -> UIMScore:
    """Compute the instream condition index from an InputRecord."""
    return compute_uim(**record.instream_inputs(), config=config)
