"""Input adapters that turn native coverage data into lcovr models."""

from lcovr.adapters.lcov import LcovParser, parse_lcov_files

__all__ = [
    "LcovParser",
    "parse_lcov_files",
]
