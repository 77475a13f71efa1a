"""lcovr — convert LCOV tracefiles into Cobertura XML coverage reports."""

__version__ = "0.1.0"
