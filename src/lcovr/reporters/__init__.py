"""Reporters for writing and displaying conversion results."""

from __future__ import annotations

from lcovr.reporters.cobertura import CoberturaWriter, format_rate
from lcovr.reporters.terminal import reporter

__all__ = [
    "CoberturaWriter",
    "format_rate",
    "reporter",
]
