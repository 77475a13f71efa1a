"""Cobertura XML reporter — renders a CoverageReport as ``coverage-03`` XML.

Produces the schema consumed by Jenkins, GitLab and other CI coverage
viewers::

    coverage
      sources/source*
      packages/package*
        classes/class*
          methods
          lines/line*

Branch rate and complexity are not collected and are always ``0.0``.
"""

from __future__ import annotations

import contextlib
import logging
import os
import re
import tempfile
import xml.etree.ElementTree as ET
from decimal import Decimal
from pathlib import Path
from typing import TYPE_CHECKING

from lcovr import __version__
from lcovr.errors import CoberturaWriteError, ReportBuildError

if TYPE_CHECKING:
    from lcovr.models.coverage import CoverageRecord, CoverageReport

logger = logging.getLogger(__name__)

COBERTURA_DTD = "http://cobertura.sourceforge.net/xml/coverage-03.dtd"

_XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'
_DOCTYPE = f'<!DOCTYPE coverage SYSTEM "{COBERTURA_DTD}">'
_UNSUPPORTED_METRIC = "0.0"

# Characters outside the XML 1.0 Char production.
_ILLEGAL_XML_CHARS = re.compile(r"[^\x09\x0a\x0d\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")


def format_rate(value: float) -> str:
    """Format a rate the way a double prints: ``0.6``, ``0.0``, ``1.0``.

    Uses the shortest round-trip representation and never scientific
    notation, so ``1e-05`` is written as ``0.00001``.
    """
    text = repr(float(value))
    if "e" in text or "E" in text:
        text = format(Decimal(text), "f")
    if "." not in text:
        text += ".0"
    return text


class CoberturaWriter:
    """Generate Cobertura XML reports from a :class:`CoverageReport`."""

    def __init__(self, version: str | None = None) -> None:
        self.version = version or f"lcovr {__version__}"

    def generate(self, report: CoverageReport, output_path: Path) -> Path:
        """Write a Cobertura XML report file.

        The document is written to a temporary file next to ``output_path``
        and moved into place once complete, so a failed write never leaves a
        truncated report behind.

        Args:
            report: Aggregated coverage report.
            output_path: Path to write the XML file.

        Returns:
            The path to the generated XML file.

        Raises:
            ReportBuildError: If the XML document cannot be built.
            CoberturaWriteError: If the file cannot be written.
        """
        content = self.generate_string(report)
        tmp_path: Path | None = None
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=output_path.parent,
                prefix=f".{output_path.name}.",
                suffix=".tmp",
                delete=False,
            ) as fh:
                tmp_path = Path(fh.name)
                fh.write(content)
            tmp_path.chmod(_target_mode(output_path))
            tmp_path.replace(output_path)
        except OSError as e:
            if tmp_path is not None:
                with contextlib.suppress(OSError):
                    tmp_path.unlink(missing_ok=True)
            raise CoberturaWriteError(f"Couldn't write Cobertura XML to {output_path}: {e}") from e
        logger.info("Cobertura XML report written to %s", output_path)
        return output_path

    def generate_string(self, report: CoverageReport) -> str:
        """Return the Cobertura XML document as a string.

        Raises:
            ReportBuildError: If the XML document cannot be built.
        """
        try:
            root = self.build_tree(report)
            ET.indent(root, space="  ")
            body = ET.tostring(root, encoding="unicode")
        except (TypeError, ValueError) as e:
            raise ReportBuildError(f"Couldn't build Cobertura XML document: {e}") from e
        illegal = _ILLEGAL_XML_CHARS.search(body)
        if illegal:
            raise ReportBuildError(
                f"Couldn't build Cobertura XML document: character {illegal.group()!r} "
                "is not allowed in XML"
            )
        return f"{_XML_DECLARATION}\n{_DOCTYPE}\n{body}\n"

    def build_tree(self, report: CoverageReport) -> ET.Element:
        """Build the ``<coverage>`` element tree for ``report``."""
        root = ET.Element("coverage")
        root.set("timestamp", str(report.timestamp_ms))
        root.set("branch-rate", _UNSUPPORTED_METRIC)
        root.set("version", self.version)
        root.set("line-rate", format_rate(report.line_rate))

        sources = ET.SubElement(root, "sources")
        for source_dir in report.sources:
            ET.SubElement(sources, "source").text = source_dir

        packages = ET.SubElement(root, "packages")
        for group in report.sorted_packages():
            package = ET.SubElement(packages, "package")
            package.set("name", group.name)
            package.set("branch-rate", _UNSUPPORTED_METRIC)
            package.set("complexity", _UNSUPPORTED_METRIC)
            package.set("line-rate", format_rate(group.line_rate))
            classes = ET.SubElement(package, "classes")
            for record in group.sorted_records():
                _add_class(classes, record)

        return root


def _add_class(parent: ET.Element, record: CoverageRecord) -> None:
    """Append a ``<class>`` element describing one source file."""
    class_elem = ET.SubElement(parent, "class")
    class_elem.set("branch-rate", format_rate(record.branch_rate))
    class_elem.set("complexity", format_rate(record.complexity))
    class_elem.set("line-rate", format_rate(record.line_rate))
    class_elem.set("filename", record.path)
    class_elem.set("name", record.full_class_name)
    ET.SubElement(class_elem, "methods")

    lines = ET.SubElement(class_elem, "lines")
    for line_number, hits in record.sorted_lines():
        line = ET.SubElement(lines, "line")
        line.set("hits", str(hits))
        line.set("number", str(line_number))


def _target_mode(output_path: Path) -> int:
    """Permission bits for the report: kept from an existing file, else umask-based."""
    try:
        return output_path.stat().st_mode & 0o7777
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask
