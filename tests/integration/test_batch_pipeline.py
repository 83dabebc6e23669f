"""
End-to-End Habitat Unit Pipeline Test

Tests the complete pipeline:
1. Validate an input table (reaches x alternatives x forecast years)
2. Run the batch processor (with one malformed row)
3. Summarize habitat units per alternative and year
4. Compute average annual habitat units and net change over No Action
5. Run the CSV command-line wrapper
"""

import importlib.util
import sys
from pathlib import Path

import pandas as pd
import pytest

# Add src to path
src_path = Path(__file__).parent.parent.parent / 'src'
sys.path.insert(0, str(src_path))

from batch.processor import process_dataframe
from habitat.summary import (
    compute_average_annual_habitat_units,
    compute_net_change,
    summarize_by_alternative,
)
from ingest.validators import validate_input_table

SCRIPT_PATH = Path(__file__).parent.parent.parent / 'scripts' / 'production' / 'compute_habitat_units.py'

YEARS = [0, 2, 10, 50]


@pytest.fixture
def input_table(row_factory):
    """Three reaches, two alternatives, four forecast years"""
    rows = []
    for reach in ["R1", "R2", "R3"]:
        for action in ["No Action", "Restore"]:
            for year in YEARS:
                overrides = {}
                if action == "Restore" and year > 0:
                    # Restoration improves habitat rubrics over time
                    boost = {2: 2, 10: 6, 50: 10}[year]
                    overrides = {
                        'habitat_cover': 4 + boost,
                        'large_wood': 7 + boost,
                        'left_plant_community': 5 + boost,
                        'right_plant_community': min(15, 10 + boost),
                    }
                rows.append(row_factory(reach, action, year, **overrides))
    return pd.DataFrame(rows)


def test_pipeline(input_table):
    """Batch -> summary -> AAHU -> net change"""
    is_valid, errors = validate_input_table(input_table)
    assert is_valid, errors

    outputs, failures = process_dataframe(input_table)
    assert len(outputs) == len(input_table)
    assert len(failures) == 0

    # Output order matches input order
    assert outputs['reach_id'].tolist() == input_table['ReachID'].tolist()
    assert outputs['year'].tolist() == input_table['Year'].tolist()

    summary = summarize_by_alternative(outputs)
    assert len(summary) == 2 * len(YEARS)
    assert (summary['num_reaches'] == 3).all()

    aahu = compute_average_annual_habitat_units(summary)
    net = compute_net_change(aahu, baseline="No Action")
    lift = dict(zip(net['site_action'], net['net_aahu']))

    assert lift["No Action"] == pytest.approx(0.0)
    assert lift["Restore"] > 0


def test_pipeline_isolates_bad_rows(input_table):
    """A malformed row is reported without affecting the others"""
    clean_outputs, _ = process_dataframe(input_table)

    dirty = input_table.copy()
    dirty.loc[5, 'area_ref'] = 0.0
    dirty.loc[9, 'left_canopy'] = None

    is_valid, errors = validate_input_table(dirty)
    assert not is_valid

    outputs, failures = process_dataframe(dirty)

    assert failures['row'].tolist() == [5, 9]
    assert failures['kind'].tolist() == ["precondition", "missing_field"]
    assert len(outputs) == len(dirty) - 2

    expected = clean_outputs.drop(index=[5, 9]).reset_index(drop=True)
    pd.testing.assert_frame_equal(outputs, expected)


def test_pipeline_is_idempotent(input_table):
    first, _ = process_dataframe(input_table)
    second, _ = process_dataframe(input_table, max_workers=4)

    pd.testing.assert_frame_equal(first, second)


def test_command_line(input_table, tmp_path):
    """CSV in, CSV out"""
    spec = importlib.util.spec_from_file_location("compute_habitat_units", SCRIPT_PATH)
    script = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(script)

    input_path = tmp_path / "inputs.csv"
    output_path = tmp_path / "hu.csv"
    summary_path = tmp_path / "summary.csv"
    input_table.to_csv(input_path, index=False)

    exit_code = script.main([
        str(input_path),
        '--output', str(output_path),
        '--failures', str(tmp_path / "failures.csv"),
        '--summary', str(summary_path),
        '--baseline', 'No Action',
    ])

    assert exit_code == 0

    outputs = pd.read_csv(output_path)
    assert len(outputs) == len(input_table)
    assert list(outputs.columns[:3]) == ['ReachID', 'SiteAction', 'Year']

    summary = pd.read_csv(summary_path)
    assert 'aahu' in summary.columns
    assert 'net_aahu' in summary.columns
    assert not (tmp_path / "failures.csv").exists()


def test_command_line_baseline_requires_summary(input_table, tmp_path):
    spec = importlib.util.spec_from_file_location("compute_habitat_units", SCRIPT_PATH)
    script = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(script)

    input_path = tmp_path / "inputs.csv"
    input_table.to_csv(input_path, index=False)

    with pytest.raises(SystemExit) as exc_info:
        script.main([
            str(input_path),
            '--output', str(tmp_path / "hu.csv"),
            '--baseline', 'No Action',
        ])

    assert exc_info.value.code == 2
    assert not (tmp_path / "hu.csv").exists()


def test_command_line_missing_input(tmp_path):
    spec = importlib.util.spec_from_file_location("compute_habitat_units", SCRIPT_PATH)
    script = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(script)

    assert script.main([str(tmp_path / "nope.csv")]) == 1
