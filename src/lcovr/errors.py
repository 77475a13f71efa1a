"""Exceptions raised by lcovr.

Every failure is terminal for the current conversion; nothing is retried.
"""

from __future__ import annotations


class LcovrError(Exception):
    """Base class for all lcovr failures."""


class LcovParseError(LcovrError):
    """Raised when an LCOV tracefile contains a malformed line."""

    def __init__(self, message: str, *, source: str, line_number: int, line: str) -> None:
        self.source = source
        self.line_number = line_number
        self.line = line
        super().__init__(f"{source}:{line_number}: {message}: {line!r}")


class LcovReadError(LcovrError):
    """Raised when an LCOV tracefile cannot be read."""


class ReportBuildError(LcovrError):
    """Raised when the Cobertura XML document cannot be constructed."""


class CoberturaWriteError(LcovrError):
    """Raised when the Cobertura XML report cannot be written."""


class ConversionError(LcovrError):
    """Raised when a conversion run aborts because of one input file."""

    def __init__(self, message: str, *, input_file: str) -> None:
        self.input_file = input_file
        super().__init__(message)


class ConfigError(LcovrError):
    """Raised when ``.lcovr.yml`` cannot be loaded."""
