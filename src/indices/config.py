"""
Index Configuration for the habitat unit engine

Composite condition indices are described as data: each sub-index lists its
metrics, how each metric is normalized, and its weight. Weights and
normalization bounds live in YAML files under config/indices/.

Design Principles:
- Config-driven (no hardcoded weights or rubric maxima)
- Validated on load (weights sum to 1.0, rubric maxima positive)
- Re-weighting requires no code changes
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from common.errors import ConfigError

logger = logging.getLogger(__name__)

# Type aliases
NormalizationMethod = Literal["rubric", "deviation", "ratio"]

CONFIG_DIR = Path(__file__).parent.parent.parent / "config" / "indices"

# Tolerance for sub-index weights summing to 1.0
WEIGHT_TOLERANCE = 0.01


class MetricSpec(BaseModel):
    """How one raw metric is normalized and weighted within its sub-index."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    field: str = Field(..., description="Input field name")
    method: NormalizationMethod = Field("rubric", description="Normalization method")
    maximum: Optional[float] = Field(None, alias="max", description="Rubric maximum")
    reference: Optional[str] = Field(None, description="Reference field (deviation only)")
    threshold: float = Field(2.0, gt=0, description="Deviation cutoff multiple")
    weight: float = Field(1.0, gt=0, description="Relative weight within sub-index")

    @model_validator(mode='after')
    def check_method_parameters(self):
        if self.method == "rubric" and (self.maximum is None or self.maximum <= 0):
            raise ValueError(f"rubric metric '{self.field}' needs a positive 'max'")
        if self.method == "deviation" and not self.reference:
            raise ValueError(f"deviation metric '{self.field}' needs a 'reference' field")
        return self


class SubIndexConfig(BaseModel):
    """One thematic sub-index (e.g., hydrology, habitat)."""

    model_config = ConfigDict(frozen=True)

    weight: float = Field(..., ge=0.0, le=1.0)
    metrics: List[MetricSpec] = Field(..., min_length=1)


class IndexConfig(BaseModel):
    """A composite condition index built from weighted sub-indices."""

    model_config = ConfigDict(frozen=True)

    name: str
    abbreviation: str
    sub_indices: Dict[str, SubIndexConfig] = Field(..., min_length=1)

    @property
    def required_fields(self) -> List[str]:
        """All input fields the index reads, in configuration order."""
        fields = []
        for sub in self.sub_indices.values():
            for metric in sub.metrics:
                fields.append(metric.field)
                if metric.reference:
                    fields.append(metric.reference)
        return fields


def build_index_config(data: Dict[str, Any]) -> IndexConfig:
    """
    Build and validate an IndexConfig from a parsed mapping.

    Args:
        data: Mapping with 'name', 'abbreviation' and 'sub_indices'

    Returns:
        Validated IndexConfig

    Raises:
        ConfigError: If required fields are missing, a metric is
            misconfigured, or sub-index weights do not sum to 1.0
    """
    if not isinstance(data, dict):
        raise ConfigError(f"Index config must be a mapping, got {type(data).__name__}")

    # Validate required fields
    required = ['name', 'abbreviation', 'sub_indices']
    missing = [field for field in required if field not in data]
    if missing:
        raise ConfigError(f"Invalid index config: missing fields {missing}")

    try:
        config = IndexConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid index config for {data.get('name')}: {e}") from e

    # Validate weights sum to 1.0 (within tolerance)
    total = sum(sub.weight for sub in config.sub_indices.values())
    if abs(total - 1.0) > WEIGHT_TOLERANCE:
        raise ConfigError(f"Sub-index weights must sum to 1.0, got {total}")

    return config


def require_sub_indices(config: IndexConfig, expected: List[str]) -> IndexConfig:
    """
    Check that a config defines exactly the sub-indices a calculator reports.

    Raises:
        ConfigError: If sub-indices are missing or unexpected
    """
    missing = [name for name in expected if name not in config.sub_indices]
    unexpected = [name for name in config.sub_indices if name not in expected]

    if missing or unexpected:
        raise ConfigError(
            f"{config.abbreviation} config must define sub-indices {expected}; "
            f"missing {missing}, unexpected {unexpected}"
        )

    return config


@lru_cache(maxsize=None)
def load_index_config(name: str) -> IndexConfig:
    """
    Load a composite index configuration from YAML.

    Args:
        name: Index identifier ('uim' or 'refi')

    Returns:
        Validated IndexConfig (cached per name)

    Raises:
        FileNotFoundError: If the config file doesn't exist
        ConfigError: If the config is invalid

    Examples:
        >>> config = load_index_config('uim')
        >>> list(config.sub_indices)
        ['hydrology', 'geomorphology', 'habitat', 'connectivity']
    """
    config_path = CONFIG_DIR / f"{name}.yaml"

    if not config_path.exists():
        raise FileNotFoundError(
            f"Index config not found: {config_path}\n"
            f"Available indices: uim, refi"
        )

    with open(config_path, 'r') as f:
        data = yaml.safe_load(f)

    config = build_index_config(data)
    logger.debug(f"Loaded {config.abbreviation} config from {config_path}")

    return config
