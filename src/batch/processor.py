"""
Batch Processor for the habitat unit engine

Maps every input record (one per reach, alternative and forecast year) to an
output record of condition indices and habitat units.

Design Principles:
- Pure mapping: each output depends only on its own input record
- Input order and identity (ReachID, SiteAction, Year) preserved
- Isolate-and-report: a bad record becomes a RecordFailure, the batch continues
- Re-running on the same inputs yields identical outputs
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Iterable, List, Literal, Mapping, Optional, Tuple, Union

import pandas as pd
from pydantic import BaseModel, Field, ValidationError

from common.errors import PreconditionError
from habitat.units import aggregate_record
from indices.config import IndexConfig, load_index_config, require_sub_indices
from indices.refi import REFI_SUB_INDICES
from indices.uim import UIM_SUB_INDICES
from normalize.schemas import InputRecord, OutputRecord, record_from_mapping

logger = logging.getLogger(__name__)

# Type aliases
ErrorKind = Literal["precondition", "missing_field", "negative_area"]
RecordInput = Union[InputRecord, Mapping[str, Any]]

FAILURE_COLUMNS = ['row', 'record', 'kind', 'field', 'message']


class RecordFailure(BaseModel):
    """A record whose computation failed, with the reason."""

    row: int = Field(..., ge=0, description="Position of the record in the input")
    record: Optional[str] = Field(None, description="ReachID/SiteAction/Year, when known")
    kind: ErrorKind = Field(..., description="Error category")
    field: Optional[str] = Field(None, description="Offending field, when known")
    message: str = Field(..., description="Error message")


class BatchResult(BaseModel):
    """Output table and per-record failures of one batch run."""

    outputs: List[OutputRecord] = Field(default_factory=list)
    failures: List[RecordFailure] = Field(default_factory=list)

    @property
    def num_records(self) -> int:
        return len(self.outputs) + len(self.failures)

    @property
    def total_hu(self) -> float:
        """Total habitat units across all successful records"""
        return sum(output.total_hu for output in self.outputs)

    def to_dataframe(self, by_alias: bool = False) -> pd.DataFrame:
        """
        Output records as a DataFrame (one row per successful record).

        Args:
            by_alias: Use ReachID / SiteAction / Year column names
        """
        columns = list(OutputRecord.model_fields)
        if by_alias:
            columns = [OutputRecord.model_fields[name].alias or name for name in columns]

        rows = [output.model_dump(by_alias=by_alias) for output in self.outputs]
        return pd.DataFrame(rows, columns=columns)

    def failures_to_dataframe(self) -> pd.DataFrame:
        """Failures as a DataFrame (one row per failed record)."""
        rows = [failure.model_dump() for failure in self.failures]
        return pd.DataFrame(rows, columns=FAILURE_COLUMNS)


def process_record(
    row: int,
    item: RecordInput,
    uim_config: IndexConfig,
    refi_config: IndexConfig
) -> Union[OutputRecord, RecordFailure]:
    """
    Compute one record, converting precondition errors into a RecordFailure.

    Args:
        row: Position of the record in the input
        item: InputRecord or row mapping
        uim_config: Instream index configuration
        refi_config: Riparian index configuration

    Returns:
        OutputRecord on success, RecordFailure otherwise
    """
    record = None
    try:
        record = item if isinstance(item, InputRecord) else record_from_mapping(item)
        return aggregate_record(record, uim_config=uim_config, refi_config=refi_config)
    except PreconditionError as e:
        logger.warning(f"Record {row} failed ({e.kind}): {e}")
        return RecordFailure(
            row=row,
            record=e.record,
            kind=e.kind,
            field=e.field,
            message=str(e)
        )
    except ValidationError as e:
        # Computed values outside the output model's bounds
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get('loc', ())) or None
        label = record.key if record is not None else None
        logger.warning(f"Record {row} failed (precondition): {e}")
        return RecordFailure(
            row=row,
            record=label,
            kind="precondition",
            field=field,
            message=f"Invalid computed value for '{field}': {first.get('msg')}"
        )


def process_records(
    records: Iterable[RecordInput],
    max_workers: Optional[int] = None,
    uim_config: Optional[IndexConfig] = None,
    refi_config: Optional[IndexConfig] = None
) -> BatchResult:
    """
    Compute condition indices and habitat units for every input record.

    Args:
        records: InputRecords or row mappings (field names or
            ReachID / SiteAction / Year aliases)
        max_workers: Fan records out across this many threads (None or 1
            computes in the calling thread)
        uim_config: Instream index configuration (default: uim.yaml)
        refi_config: Riparian index configuration (default: refi.yaml)

    Returns:
        BatchResult with outputs in input order and per-record failures

    Raises:
        ConfigError: If either index config defines the wrong sub-indices

    Examples:
        >>> result = process_records([record_a, record_b])
        >>> len(result.outputs) + len(result.failures)
        2
    """
    if uim_config is None:
        uim_config = load_index_config('uim')
    if refi_config is None:
        refi_config = load_index_config('refi')

    # Misconfigured indices fail the whole run, not each record
    require_sub_indices(uim_config, UIM_SUB_INDICES)
    require_sub_indices(refi_config, REFI_SUB_INDICES)

    items = list(records)
    logger.info(f"Processing {len(items)} records")

    def compute(row: int, item: RecordInput) -> Union[OutputRecord, RecordFailure]:
        return process_record(row, item, uim_config, refi_config)

    if max_workers is not None and max_workers > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            results = list(executor.map(compute, range(len(items)), items))
    else:
        results = [compute(row, item) for row, item in enumerate(items)]

    outputs = [r for r in results if isinstance(r, OutputRecord)]
    failures = [r for r in results if isinstance(r, RecordFailure)]

    if failures:
        logger.error(f"❌ {len(failures)} of {len(items)} records failed")
    else:
        logger.info(f"✅ Processed {len(outputs)} records")

    return BatchResult(outputs=outputs, failures=failures)


def process_dataframe(
    df: pd.DataFrame,
    max_workers: Optional[int] = None,
    uim_config: Optional[IndexConfig] = None,
    refi_config: Optional[IndexConfig] = None,
    by_alias: bool = False
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Run the batch over a DataFrame of input records.

    Args:
        df: One row per (ReachID, SiteAction, Year)
        max_workers: Thread fan-out (see process_records)
        uim_config: Instream index configuration
        refi_config: Riparian index configuration
        by_alias: Use ReachID / SiteAction / Year output column names

    Returns:
        Tuple of (outputs DataFrame, failures DataFrame). Failure 'row'
        values are labels from df.index.
    """
    records = df.to_dict(orient='records')

    result = process_records(
        records,
        max_workers=max_workers,
        uim_config=uim_config,
        refi_config=refi_config
    )

    failures = result.failures_to_dataframe()
    if len(failures) > 0:
        failures['row'] = [df.index[position] for position in failures['row']]

    return result.to_dataframe(by_alias=by_alias), failures
