"""LCOV tracefile parser.

Reads the line-level subset of the LCOV ``.info`` format::

    SF:<source file>
    DA:<line number>,<execution count>[,<checksum>]
    LH:<number of lines with a non-zero execution count>
    LF:<number of instrumented lines>
    end_of_record

Every other tag (``TN``, ``FN``, ``FNDA``, ``BRDA``, ...) is ignored.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from lcovr.errors import LcovParseError, LcovReadError
from lcovr.models.coverage import DEFAULT_SOURCE_SUFFIXES, CoverageRecord

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)

# LCOV record keys
_LCOV_SF = "SF"
_LCOV_DA = "DA"
_LCOV_LH = "LH"
_LCOV_LF = "LF"
_LCOV_END = "end_of_record"
_LCOV_DA_PARTS = 2

_DECIMAL_RE = re.compile(r"[0-9]+")


@dataclass
class _OpenRecord:
    """Record under construction between ``SF:`` and ``end_of_record``."""

    path: str
    da: dict[int, int] = field(default_factory=dict)
    lf: int = 0
    lh: int = 0


@dataclass
class _LineContext:
    source: str
    line_number: int
    line: str

    def error(self, message: str) -> LcovParseError:
        return LcovParseError(
            message, source=self.source, line_number=self.line_number, line=self.line
        )


class LcovParser:
    """Parse LCOV text into :class:`CoverageRecord` objects.

    One record is produced per ``end_of_record`` marker, in input order.
    """

    def __init__(self, source_suffixes: tuple[str, ...] = DEFAULT_SOURCE_SUFFIXES) -> None:
        self.source_suffixes = source_suffixes

    def parse_file(self, path: Path) -> list[CoverageRecord]:
        """Read and parse one tracefile.

        Raises:
            LcovReadError: If the file cannot be read or decoded.
            LcovParseError: If the file contains a malformed line.
        """
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise LcovReadError(f"Couldn't read LCOV file {path}: {e}") from e
        records = self.parse_string(content, source=str(path))
        logger.debug("Parsed %d records from %s", len(records), path)
        return records

    def parse_string(self, content: str, *, source: str = "<string>") -> list[CoverageRecord]:
        """Parse LCOV text.

        Args:
            content: Full tracefile text.
            source: Name used in error messages (usually the file path).

        Returns:
            Records in the order their ``end_of_record`` markers appear.
        """
        records: list[CoverageRecord] = []
        current: _OpenRecord | None = None

        for line_number, raw_line in enumerate(content.splitlines(), start=1):
            line = raw_line.strip()
            if not line:
                continue
            ctx = _LineContext(source, line_number, line)

            if line == _LCOV_END:
                if current is None:
                    logger.debug("%s:%d: end_of_record without SF, ignoring", source, line_number)
                    continue
                records.append(self._close(current))
                current = None
                continue

            key, sep, value = line.partition(":")
            if not sep:
                continue

            if key == _LCOV_SF:
                if current is not None:
                    logger.debug(
                        "%s:%d: discarding unterminated record for %s",
                        source,
                        line_number,
                        current.path,
                    )
                current = _OpenRecord(path=value)
            elif key in (_LCOV_DA, _LCOV_LH, _LCOV_LF):
                if current is None:
                    raise ctx.error(f"{key} entry before any SF entry")
                self._apply(current, key, value, ctx)

        if current is not None:
            logger.warning(
                "%s: record for %s has no end_of_record and was dropped", source, current.path
            )
        return records

    def _apply(self, current: _OpenRecord, key: str, value: str, ctx: _LineContext) -> None:
        if key == _LCOV_DA:
            parts = value.split(",")
            if len(parts) < _LCOV_DA_PARTS:
                raise ctx.error("DA entry needs a line number and an execution count")
            # A third field, when present, is a checksum.
            line_no = _parse_int(parts[0], ctx)
            current.da[line_no] = _parse_int(parts[1], ctx)
        elif key == _LCOV_LH:
            current.lh = _parse_int(value, ctx)
        else:
            current.lf = _parse_int(value, ctx)

    def _close(self, current: _OpenRecord) -> CoverageRecord:
        return CoverageRecord(
            path=current.path,
            line_hits=current.da,
            lines_found=current.lf,
            lines_hit=current.lh,
            source_suffixes=self.source_suffixes,
        )


def _parse_int(text: str, ctx: _LineContext) -> int:
    stripped = text.strip()
    if not _DECIMAL_RE.fullmatch(stripped):
        raise ctx.error(f"invalid integer {stripped!r}")
    return int(stripped)


def parse_lcov_files(
    paths: Iterable[Path],
    *,
    source_suffixes: tuple[str, ...] = DEFAULT_SOURCE_SUFFIXES,
) -> list[CoverageRecord]:
    """Parse several tracefiles and concatenate their records in order.

    Records with the same path in different files are all kept.
    """
    parser = LcovParser(source_suffixes)
    records: list[CoverageRecord] = []
    for path in paths:
        records.extend(parser.parse_file(Path(path)))
    return records
