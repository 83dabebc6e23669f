"""Batch processing of reach records into habitat unit tables."""

from .processor import (
    BatchResult,
    RecordFailure,
    process_record,
    process_records,
    process_dataframe,
)

__all__ = [
    'BatchResult',
    'RecordFailure',
    'process_record',
    'process_records',
    'process_dataframe',
]
