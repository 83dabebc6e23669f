"""
Shared fixtures for habitat unit engine tests.

Sample reach (used across test modules):
- Instream: UIM total = 0.55625 (hydrology 0.5, geomorphology 43/60,
  habitat 0.275, connectivity 0.7333)
- Left bank: REFI total = 0.7111 (instream 65/75, habitat 0.4, connectivity 26/30)
- Right bank: all rubrics 10/15, REFI total = 0.6667
- Channel: 1089 ft x 40 ft = 1.0 acre; banks 2.0 and 3.0 acres
"""

import sys
from pathlib import Path

import pytest

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))


LEFT_RIPARIAN = [12, 15, 14, 13, 11, 5, 7, 4, 6, 8, 12, 14]
RIGHT_RIPARIAN = [10] * 12

RIPARIAN_NAMES = [
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

UIM_INPUTS = {
    'bhr_score': 15,
    'velocity_site': 5,
    'velocity_ref': 4,
    'area_site': 150,
    'area_ref': 50,
    'channel_alteration': 16,
    'channel_evolution': 12,
    'bank_stability': 15,
    'habitat_cover': 4,
    'large_wood': 7,
    'velocity_depth': 8,
    'substrate': 3,
    'aop_score': 14,
    'material_transport': 16,
    'passage_rate': 0.7,
}


def make_row(reach_id="R1", site_action="No Action", year=0, **overrides):
    """Build an input row mapping using ReachID / SiteAction / Year aliases."""
    row = {'ReachID': reach_id, 'SiteAction': site_action, 'Year': year}
    row.update(UIM_INPUTS)
    row.update({f"left_{name}": value for name, value in zip(RIPARIAN_NAMES, LEFT_RIPARIAN)})
    row.update({f"right_{name}": value for name, value in zip(RIPARIAN_NAMES, RIGHT_RIPARIAN)})
    row.update({
        'reach_length_ft': 1089.0,
        'reach_top_width_ft': 40.0,
        'left_area_acres': 2.0,
        'right_area_acres': 3.0,
    })
    row.update(overrides)
    return row


@pytest.fixture
def sample_row():
    """Input row mapping for the sample reach"""
    return make_row()


@pytest.fixture
def sample_record(sample_row):
    """InputRecord for the sample reach"""
    from normalize.schemas import InputRecord
    return InputRecord.model_validate(sample_row)


@pytest.fixture
def row_factory():
    """Factory for input rows with per-field overrides"""
    return make_row
