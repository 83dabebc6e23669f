"""
Alternative and Time-Horizon Summaries

Rolls per-reach habitat units up to restoration alternatives and compares
alternatives across forecast years.

Metrics:
- Habitat units per (alternative, year), summed across reaches
- Average annual habitat units (AAHU): area under the HU-versus-year curve
  (linear between forecast years) divided by the period of analysis
- Net change: AAHU of each alternative minus a baseline alternative
"""

import logging
from typing import Optional

import pandas as pd

logger = logging.getLogger(__name__)


HU_COLUMNS = ['riparian_left_hu', 'riparian_right_hu', 'instream_hu', 'total_hu']


def summarize_by_alternative(outputs: pd.DataFrame) -> pd.DataFrame:
    """
    Sum habitat units across reaches for each alternative and forecast year.

    Args:
        outputs: DataFrame of output records (from BatchResult.to_dataframe())

    Returns:
        DataFrame with columns site_action, year, num_reaches and the HU columns,
        sorted by site_action then year
    """
    required = ['reach_id', 'site_action', 'year'] + HU_COLUMNS
    missing = set(required) - set(outputs.columns)
    if missing:
        raise ValueError(f"Missing required columns: {sorted(missing)}")

    if len(outputs) == 0:
        return pd.DataFrame(columns=['site_action', 'year', 'num_reaches'] + HU_COLUMNS)

    grouped = outputs.groupby(['site_action', 'year'], sort=True)
    summary = grouped[HU_COLUMNS].sum()
    summary.insert(0, 'num_reaches', grouped['reach_id'].nunique())

    return summary.reset_index()


def _average_over_period(years: pd.Series, values: pd.Series, period: Optional[float]) -> float:
    years = years.astype(float).tolist()
    values = values.astype(float).tolist()

    # Period of analysis runs from year 0
    last_year = years[-1]

    if period is None:
        period = last_year

    if period < last_year:
        raise ValueError(
            f"period_of_analysis ({period}) is shorter than the last forecast year ({last_year})"
        )

    if period == 0:
        return values[0]

    # Hold the first forecast value back to year 0
    area = values[0] * years[0]

    # Trapezoidal area between forecast years
    for i in range(1, len(years)):
        area += (values[i - 1] + values[i]) / 2.0 * (years[i] - years[i - 1])

    # Hold the last forecast value through the rest of the period
    area += values[-1] * (period - last_year)

    return area / period


def compute_average_annual_habitat_units(
    summary: pd.DataFrame,
    period_of_analysis: Optional[float] = None,
    value_column: str = 'total_hu'
) -> pd.DataFrame:
    """
    Compute average annual habitat units (AAHU) per alternative.

    HUs are interpolated linearly between forecast years and averaged over the
    period of analysis, which starts at year 0. The first forecast value is held
    back to year 0 and the last value is held through the end of the period.

    Args:
        summary: Output of summarize_by_alternative()
        period_of_analysis: Years in the analysis period, counted from year 0
            (default: last forecast year of each alternative)
        value_column: HU column to average

    Returns:
        DataFrame with columns site_action, aahu, first_year, last_year

    Examples:
        >>> summary = pd.DataFrame({'site_action': ['A', 'A'], 'year': [0, 50],
        ...                         'total_hu': [10.0, 20.0]})
        >>> compute_average_annual_habitat_units(summary)['aahu'].iloc[0]
        15.0
    """
    rows = []
    for site_action, group in summary.groupby('site_action', sort=True):
        group = group.sort_values('year')
        aahu = _average_over_period(group['year'], group[value_column], period_of_analysis)
        rows.append({
            'site_action': site_action,
            'aahu': aahu,
            'first_year': int(group['year'].iloc[0]),
            'last_year': int(group['year'].iloc[-1]),
        })

    logger.info(f"Computed AAHU for {len(rows)} alternatives")

    return pd.DataFrame(rows, columns=['site_action', 'aahu', 'first_year', 'last_year'])


def compute_net_change(aahu: pd.DataFrame, baseline: str) -> pd.DataFrame:
    """
    Compute AAHU lift of each alternative over a baseline alternative.

    Args:
        aahu: Output of compute_average_annual_habitat_units()
        baseline: site_action of the baseline (e.g., 'No Action')

    Returns:
        Copy of aahu with a net_aahu column (alternative minus baseline)

    Raises:
        ValueError: If the baseline alternative is not present
    """
    matches = aahu.loc[aahu['site_action'] == baseline, 'aahu']
    if len(matches) == 0:
        raise ValueError(
            f"Baseline alternative '{baseline}' not found. "
            f"Available: {aahu['site_action'].tolist()}"
        )

    result = aahu.copy()
    result['net_aahu'] = result['aahu'] - float(matches.iloc[0])

    return result
