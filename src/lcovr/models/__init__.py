"""Data models for lcovr."""

from lcovr.models.coverage import (
    DEFAULT_SOURCE_SUFFIXES,
    CoverageRecord,
    CoverageReport,
    PackageGroup,
    compute_rate,
    split_class_name,
)

__all__ = [
    "DEFAULT_SOURCE_SUFFIXES",
    "CoverageRecord",
    "CoverageReport",
    "PackageGroup",
    "compute_rate",
    "split_class_name",
]
