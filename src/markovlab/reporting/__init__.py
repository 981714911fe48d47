"""Tabular adapters for report layers consuming markovlab results."""

from .export import (
    count_table_frame,
    distribution_frame,
    propagation_frame,
    write_report_json,
)

__all__ = [
    "count_table_frame",
    "distribution_frame",
    "propagation_frame",
    "write_report_json",
]
