"""Group coverage records into packages and assemble the report."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from lcovr.models.coverage import CoverageReport, PackageGroup

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from lcovr.models.coverage import CoverageRecord

logger = logging.getLogger(__name__)


def split_into_packages(records: Iterable[CoverageRecord]) -> dict[str, PackageGroup]:
    """Group records by derived package name.

    Groups are lists, so records with identical paths are never collapsed.
    """
    packages: dict[str, PackageGroup] = {}
    for record in records:
        name = record.package_name
        group = packages.get(name)
        if group is None:
            group = PackageGroup(name=name)
            packages[name] = group
        group.records.append(record)
    return packages


def build_report(
    records: Iterable[CoverageRecord],
    sources: Iterable[str],
    *,
    timestamp_ms: int | None = None,
    clock: Callable[[], float] = time.time,
) -> CoverageReport:
    """Aggregate records into a :class:`CoverageReport`.

    Args:
        records: Flat sequence of parsed records.
        sources: Source-root directories, kept in the given order.
        timestamp_ms: Explicit report timestamp; read from ``clock`` when None.
        clock: Returns the current time in epoch seconds.
    """
    packages = split_into_packages(records)
    if timestamp_ms is None:
        timestamp_ms = int(clock() * 1000)
    report = CoverageReport(packages=packages, sources=list(sources), timestamp_ms=timestamp_ms)
    logger.debug(
        "Aggregated %d records into %d packages", report.record_count, len(report.packages)
    )
    return report
