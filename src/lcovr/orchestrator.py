"""Conversion pipeline: LCOV tracefiles in, Cobertura XML out."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from lcovr.adapters.lcov import LcovParser
from lcovr.aggregator import build_report
from lcovr.errors import ConversionError, LcovParseError, LcovReadError
from lcovr.models.coverage import DEFAULT_SOURCE_SUFFIXES, CoverageRecord
from lcovr.reporters.cobertura import CoberturaWriter

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from lcovr.models.coverage import CoverageReport

logger = logging.getLogger(__name__)


@dataclass
class ConversionResult:
    """Outcome of a successful conversion."""

    output_path: Path
    report: CoverageReport
    input_files: list[Path]


def read_records(
    lcov_files: Iterable[Path],
    *,
    source_suffixes: tuple[str, ...] = DEFAULT_SOURCE_SUFFIXES,
) -> list[CoverageRecord]:
    """Parse every tracefile in order and concatenate the records.

    Raises:
        ConversionError: On the first file that cannot be read or parsed.
    """
    parser = LcovParser(source_suffixes)
    records: list[CoverageRecord] = []
    for lcov_file in lcov_files:
        path = Path(lcov_file)
        try:
            records.extend(parser.parse_file(path))
        except LcovParseError as e:
            raise ConversionError(
                f"Malformed LCOV file {path}: {e}", input_file=str(path)
            ) from e
        except LcovReadError as e:
            raise ConversionError(str(e), input_file=str(path)) from e
    return records


def convert(
    lcov_files: Iterable[Path],
    source_dirs: Iterable[Path],
    output_path: Path,
    *,
    source_suffixes: tuple[str, ...] = DEFAULT_SOURCE_SUFFIXES,
    writer: CoberturaWriter | None = None,
    clock: Callable[[], float] = time.time,
) -> ConversionResult:
    """Convert LCOV tracefiles into one Cobertura XML report.

    Files are parsed one after another; all records are kept, including
    repeated paths. Source directories appear in ``<sources>`` as absolute
    paths in the order given.

    Args:
        lcov_files: Tracefiles to read.
        source_dirs: Source-root directories for the ``<sources>`` section.
        output_path: Destination of the XML report.
        source_suffixes: Suffixes stripped when deriving class names.
        writer: Writer to render with; a default :class:`CoberturaWriter`
            when None.
        clock: Time source for the report timestamp.

    Raises:
        ConversionError: If an input file cannot be read or parsed.
        ReportBuildError: If the XML document cannot be built.
        CoberturaWriteError: If the report cannot be written.
    """
    inputs = [Path(p) for p in lcov_files]
    records = read_records(inputs, source_suffixes=source_suffixes)
    logger.info("Read information for %d source files.", len(records))

    sources = [str(Path(d).resolve()) for d in source_dirs]
    report = build_report(records, sources, clock=clock)

    writer = writer or CoberturaWriter()
    written = writer.generate(report, Path(output_path))
    return ConversionResult(output_path=written, report=report, input_files=inputs)
