"""
Unit tests for alternative and time-horizon summaries.
"""

import pytest
from pathlib import Path
import sys

import pandas as pd

# Add src to path
src_path = Path(__file__).parent.parent.parent / 'src'
sys.path.insert(0, str(src_path))

from habitat.summary import (
    compute_average_annual_habitat_units,
    compute_net_change,
    summarize_by_alternative,
)


def output_row(reach_id, site_action, year, left, right, instream):
    return {
        'reach_id': reach_id,
        'site_action': site_action,
        'year': year,
        'riparian_left_hu': left,
        'riparian_right_hu': right,
        'instream_hu': instream,
        'total_hu': left + right + instream,
    }


@pytest.fixture
def outputs():
    return pd.DataFrame([
        output_row("R1", "No Action", 0, 1.0, 1.0, 1.0),
        output_row("R2", "No Action", 0, 2.0, 2.0, 2.0),
        output_row("R1", "No Action", 50, 1.0, 1.0, 1.0),
        output_row("R2", "No Action", 50, 2.0, 2.0, 2.0),
        output_row("R1", "Restore", 0, 1.0, 1.0, 1.0),
        output_row("R2", "Restore", 0, 2.0, 2.0, 2.0),
        output_row("R1", "Restore", 50, 3.0, 3.0, 3.0),
        output_row("R2", "Restore", 50, 4.0, 4.0, 4.0),
    ])


class TestSummarizeByAlternative:
    """HU totals per alternative and year."""

    def test_sums_across_reaches(self, outputs):
        summary = summarize_by_alternative(outputs)

        row = summary[(summary['site_action'] == "Restore") & (summary['year'] == 50)].iloc[0]
        assert row['total_hu'] == pytest.approx(21.0)
        assert row['instream_hu'] == pytest.approx(7.0)
        assert row['num_reaches'] == 2

    def test_one_row_per_alternative_year(self, outputs):
        summary = summarize_by_alternative(outputs)
        assert len(summary) == 4
        assert list(summary.columns[:3]) == ['site_action', 'year', 'num_reaches']

    def test_missing_columns_raise(self, outputs):
        with pytest.raises(ValueError, match="total_hu"):
            summarize_by_alternative(outputs.drop(columns=['total_hu']))

    def test_empty_outputs(self, outputs):
        summary = summarize_by_alternative(outputs.iloc[0:0])
        assert len(summary) == 0
        assert 'total_hu' in summary.columns


class TestAverageAnnualHabitatUnits:
    """AAHU by linear interpolation across forecast years."""

    def test_constant_alternative(self, outputs):
        aahu = compute_average_annual_habitat_units(summarize_by_alternative(outputs))
        no_action = aahu[aahu['site_action'] == "No Action"].iloc[0]

        assert no_action['aahu'] == pytest.approx(9.0)
        assert no_action['first_year'] == 0
        assert no_action['last_year'] == 50

    def test_linear_increase(self, outputs):
        aahu = compute_average_annual_habitat_units(summarize_by_alternative(outputs))
        restore = aahu[aahu['site_action'] == "Restore"].iloc[0]

        # Linear from 9 to 21 over 50 years averages 15
        assert restore['aahu'] == pytest.approx(15.0)

    def test_uneven_forecast_years(self):
        summary = pd.DataFrame({
            'site_action': ["A"] * 4,
            'year': [0, 2, 10, 50],
            'total_hu': [0.0, 10.0, 10.0, 10.0],
        })
        aahu = compute_average_annual_habitat_units(summary)

        # Ramp 0 -> 10 over 2 years (area 10), then flat 48 years (area 480)
        assert aahu['aahu'].iloc[0] == pytest.approx(490.0 / 50)

    def test_period_longer_than_forecast_holds_last_value(self):
        summary = pd.DataFrame({
            'site_action': ["A", "A"],
            'year': [0, 10],
            'total_hu': [10.0, 20.0],
        })
        aahu = compute_average_annual_habitat_units(summary, period_of_analysis=20)

        # Area 150 over years 0-10, then 200 over years 10-20
        assert aahu['aahu'].iloc[0] == pytest.approx(350.0 / 20)

    def test_period_shorter_than_forecast_raises(self):
        summary = pd.DataFrame({'site_action': ["A", "A"], 'year': [0, 50], 'total_hu': [1.0, 2.0]})
        with pytest.raises(ValueError, match="shorter"):
            compute_average_annual_habitat_units(summary, period_of_analysis=10)

    def test_period_counted_from_year_zero(self):
        summary = pd.DataFrame({
            'site_action': ["A", "A"],
            'year': [2, 10],
            'total_hu': [10.0, 20.0],
        })
        aahu = compute_average_annual_habitat_units(summary)

        # First value held over years 0-2 (area 20), ramp 2-10 (area 120), over 10 years
        assert aahu['aahu'].iloc[0] == pytest.approx(140.0 / 10)
        assert aahu['first_year'].iloc[0] == 2

    def test_period_shorter_than_last_year_raises(self):
        summary = pd.DataFrame({'site_action': ["A", "A"], 'year': [2, 50], 'total_hu': [1.0, 2.0]})
        with pytest.raises(ValueError, match="last forecast year"):
            compute_average_annual_habitat_units(summary, period_of_analysis=48)

    def test_single_year(self):
        summary = pd.DataFrame({'site_action': ["A"], 'year': [0], 'total_hu': [7.5]})
        aahu = compute_average_annual_habitat_units(summary)
        assert aahu['aahu'].iloc[0] == 7.5

    def test_unsorted_years(self):
        summary = pd.DataFrame({
            'site_action': ["A", "A"],
            'year': [50, 0],
            'total_hu': [20.0, 10.0],
        })
        aahu = compute_average_annual_habitat_units(summary)
        assert aahu['aahu'].iloc[0] == pytest.approx(15.0)


class TestNetChange:
    """AAHU lift over a baseline alternative."""

    def test_net_change(self, outputs):
        aahu = compute_average_annual_habitat_units(summarize_by_alternative(outputs))
        net = compute_net_change(aahu, baseline="No Action")

        lift = dict(zip(net['site_action'], net['net_aahu']))
        assert lift["No Action"] == pytest.approx(0.0)
        assert lift["Restore"] == pytest.approx(6.0)

    def test_unknown_baseline_raises(self, outputs):
        aahu = compute_average_annual_habitat_units(summarize_by_alternative(outputs))
        with pytest.raises(ValueError, match="not found"):
            compute_net_change(aahu, baseline="Dam Removal")
