"""
Compute condition indices and habitat units for a reach input table.

Reads a CSV with one row per (ReachID, SiteAction, Year), runs the batch
processor, and writes the output table plus any per-record failures.
Optionally writes an alternative summary with average annual habitat units.

Usage:
    python scripts/production/compute_habitat_units.py inputs.csv

    # Custom output paths and thread fan-out
    python scripts/production/compute_habitat_units.py inputs.csv --output hu.csv --workers 4

    # Alternative summary with net change over a baseline
    python scripts/production/compute_habitat_units.py inputs.csv --summary summary.csv --baseline "No Action"
"""

import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent.parent / 'src'
sys.path.insert(0, str(src_path))

from dotenv import load_dotenv
import argparse
import logging
import os

import pandas as pd

from batch.processor import process_dataframe
from habitat.summary import (
    compute_average_annual_habitat_units,
    compute_net_change,
    summarize_by_alternative,
)
from ingest.validators import validate_input_table

load_dotenv()

# Configure logging
logging.basicConfig(
    level=os.getenv('LOG_LEVEL', 'INFO'),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Compute stream restoration habitat units")
    parser.add_argument('input', type=Path, help='Input CSV (one row per reach/alternative/year)')
    parser.add_argument('--output', type=Path, default=Path('habitat_units.csv'),
                        help='Output CSV for per-record results')
    parser.add_argument('--failures', type=Path, default=Path('habitat_unit_failures.csv'),
                        help='Output CSV for records that failed validation')
    parser.add_argument('--summary', type=Path, default=None,
                        help='Optional CSV with per-alternative totals and AAHU')
    parser.add_argument('--baseline', type=str, default=None,
                        help='Baseline alternative for net AAHU (requires --summary)')
    parser.add_argument('--period', type=float, default=None,
                        help='Period of analysis in years for AAHU (requires --summary)')
    parser.add_argument('--workers', type=int, default=None,
                        help='Number of worker threads')
    args = parser.parse_args(argv)

    if args.summary is None and (args.baseline is not None or args.period is not None):
        parser.error("--baseline and --period require --summary")

    return args


def main(argv=None) -> int:
    args = parse_args(argv)

    if not args.input.exists():
        logger.error(f"Input file not found: {args.input}")
        return 1

    df = pd.read_csv(args.input)
    logger.info(f"Loaded {len(df)} rows from {args.input}")

    is_valid, errors = validate_input_table(df)
    if not is_valid:
        # Row-level failures are isolated by the batch processor
        logger.warning(f"Input table has {len(errors)} issue(s); continuing")

    outputs, failures = process_dataframe(df, max_workers=args.workers, by_alias=True)

    outputs.to_csv(args.output, index=False)
    logger.info(f"Wrote {len(outputs)} records to {args.output}")

    if len(failures) > 0:
        failures.to_csv(args.failures, index=False)
        logger.warning(f"Wrote {len(failures)} failed records to {args.failures}")

    if args.summary is not None:
        summary = summarize_by_alternative(
            outputs.rename(columns={'ReachID': 'reach_id', 'SiteAction': 'site_action', 'Year': 'year'})
        )
        aahu = compute_average_annual_habitat_units(summary, period_of_analysis=args.period)
        if args.baseline:
            aahu = compute_net_change(aahu, args.baseline)

        summary = summary.merge(aahu, on='site_action', how='left')
        summary.to_csv(args.summary, index=False)
        logger.info(f"Wrote alternative summary to {args.summary}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
