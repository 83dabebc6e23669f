"""
Riparian Condition Index (REFI)

Scores one bank of a reach's riparian corridor from twelve 0-15 rubric scores
grouped into three sub-indices:

- Instream processes: watershed runoff, hydrologic connection, streambank,
  energy / nutrients, riparian filtering
- Habitat: plant community, canopy, understory, forest floor, stream habitat
- Connectivity: lateral and longitudinal movement

The total is the unweighted mean of the three sub-indices. Left and right
banks are scored independently.
"""

from typing import Optional

from pydantic import BaseModel, Field

from normalize.schemas import InputRecord, Side

from .composite import compute_composite_index
from .config import IndexConfig, load_index_config, require_sub_indices


class REFIScore(BaseModel):
    """Riparian condition index with sub-index breakdown (all 0-1)."""

    instream: float = Field(..., ge=0.0, le=1.0, description="Instream-process sub-index")
    habitat: float = Field(..., ge=0.0, le=1.0, description="Riparian habitat sub-index")
    connectivity: float = Field(..., ge=0.0, le=1.0, description="Connectivity sub-index")
    total: float = Field(..., ge=0.0, le=1.0, description="Composite riparian condition")


REFI_SUB_INDICES = [name for name in REFIScore.model_fields if name != "total"]


def compute_refi(
    watershed_runoff: float,
    hydrologic_connection: float,
    streambank: float,
    energy_nutrients: float,
    riparian_filtering: float,
    plant_community: float,
    canopy: float,
    understory: float,
    forest_floor: float,
    stream_habitat: float,
    lateral_connectivity: float,
    longitudinal_connectivity: float,
    config: Optional[IndexConfig] = None
) -> REFIScore:
    """
    Compute the riparian condition index for one bank of a reach-year.

    All inputs are rubric scores on 0-15.

    Returns:
        REFIScore with three sub-indices and total

    Raises:
        MissingFieldError: If any input is None or NaN
        PreconditionError: If any input is outside 0-15
        ConfigError: If config does not define exactly the REFI sub-indices

    Examples:
        >>> score = compute_refi(15, 15, 15, 15, 15, 0, 0, 0, 0, 0, 15, 15)
        >>> round(score.total, 4)
        0.6667
    """
    if config is None:
        config = load_index_config('refi')
    require_sub_indices(config, REFI_SUB_INDICES)

    inputs = {
        'watershed_runoff': watershed_runoff,
        'hydrologic_connection': hydrologic_connection,
        'streambank': streambank,
        'energy_nutrients': energy_nutrients,
        'riparian_filtering': riparian_filtering,
        'plant_community': plant_community,
        'canopy': canopy,
        'understory': understory,
        'forest_floor': forest_floor,
        'stream_habitat': stream_habitat,
        'lateral_connectivity': lateral_connectivity,
        'longitudinal_connectivity': longitudinal_connectivity,
    }

    result = compute_composite_index(inputs, config)

    return REFIScore(**result.sub_indices, total=result.total)


def compute_refi_for_side(
    record: InputRecord,
    side: Side,
    config: Optional[IndexConfig] = None
) -> REFIScore:
    """Compute the riparian condition index for the left or right bank of a record."""
    return compute_refi(**record.riparian_inputs(side), config=config)
