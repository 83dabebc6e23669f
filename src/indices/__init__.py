"""Composite condition indices (UIM instream, REFI riparian)."""

from .config import (
    IndexConfig,
    SubIndexConfig,
    MetricSpec,
    build_index_config,
    load_index_config,
    require_sub_indices,
)

from .composite import (
    CompositeIndex,
    compute_composite_index,
    compute_sub_index,
    explain_composite_index,
)

from .uim import (
    UIMScore,
    UIM_SUB_INDICES,
    compute_uim,
    compute_uim_for_record,
)

from .refi import (
    REFIScore,
    REFI_SUB_INDICES,
    compute_refi,
    compute_refi_for_side,
)

__all__ = [
    # Configuration
    'IndexConfig',
    'SubIndexConfig',
    'MetricSpec',
    'build_index_config',
    'load_index_config',
    'require_sub_indices',
    # Composite engine
    'CompositeIndex',
    'compute_composite_index',
    'compute_sub_index',
    'explain_composite_index',
    # Instream
    'UIMScore',
    'UIM_SUB_INDICES',
    'compute_uim',
    'compute_uim_for_record',
    # Riparian
    'REFIScore',
    'REFI_SUB_INDICES',
    'compute_refi',
    'compute_refi_for_side',
]
