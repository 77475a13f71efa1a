"""Coverage models: per-file records, package groups and the full report."""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_SOURCE_SUFFIXES: tuple[str, ...] = (".java",)
"""Source-file suffixes stripped before deriving package and class names."""

_PATH_SEPARATORS = ("/", "\\")


def compute_rate(hit: int, found: int) -> float:
    """Return ``hit / found``, or 0.0 when nothing was instrumented."""
    if found == 0:
        return 0.0
    return hit / found


def split_class_name(
    path: str, source_suffixes: tuple[str, ...] = DEFAULT_SOURCE_SUFFIXES
) -> tuple[str, str]:
    """Split a source path into ``(package_name, class_name)``.

    ``com/mycompany/MyClass.java`` becomes ``("com.mycompany", "MyClass")``.
    A path without any package segment yields an empty package name.
    """
    dotted = path
    for separator in _PATH_SEPARATORS:
        dotted = dotted.replace(separator, ".")
    for suffix in source_suffixes:
        if suffix and dotted.endswith(suffix):
            dotted = dotted[: -len(suffix)]
            break
    dotted = dotted.lstrip(".")
    package_name, _, class_name = dotted.rpartition(".")
    return package_name, class_name


@dataclass(frozen=True)
class CoverageRecord:
    """Line coverage facts for a single source file (one LCOV record)."""

    path: str
    """File path exactly as it appeared in the ``SF:`` line."""

    line_hits: dict[int, int] = field(default_factory=dict)
    """Execution count per 1-based line number."""

    lines_found: int = 0
    """Instrumented line count declared by ``LF:``."""

    lines_hit: int = 0
    """Executed line count declared by ``LH:``."""

    source_suffixes: tuple[str, ...] = field(default=DEFAULT_SOURCE_SUFFIXES, compare=False)
    """Suffixes stripped when deriving class names."""

    @property
    def line_rate(self) -> float:
        """Return ``lines_hit / lines_found`` (0.0 when nothing was found)."""
        return compute_rate(self.lines_hit, self.lines_found)

    @property
    def branch_rate(self) -> float:
        """Branch coverage is not collected; always 0.0."""
        return 0.0

    @property
    def complexity(self) -> float:
        """Cyclomatic complexity is not collected; always 0.0."""
        return 0.0

    @property
    def package_name(self) -> str:
        return split_class_name(self.path, self.source_suffixes)[0]

    @property
    def class_name(self) -> str:
        return split_class_name(self.path, self.source_suffixes)[1]

    @property
    def full_class_name(self) -> str:
        """Return the class name qualified by its package."""
        package_name, class_name = split_class_name(self.path, self.source_suffixes)
        if not package_name:
            return class_name
        return f"{package_name}.{class_name}"

    def sorted_lines(self) -> list[tuple[int, int]]:
        """Return ``(line_number, hits)`` pairs in ascending line order."""
        return sorted(self.line_hits.items())


@dataclass
class PackageGroup:
    """All coverage records sharing one derived package name.

    Records are kept in a list: two records with the same path (for example
    from separate tracefiles) are both retained.
    """

    name: str
    records: list[CoverageRecord] = field(default_factory=list)

    @property
    def lines_found(self) -> int:
        return sum(record.lines_found for record in self.records)

    @property
    def lines_hit(self) -> int:
        return sum(record.lines_hit for record in self.records)

    @property
    def line_rate(self) -> float:
        """Return the package line rate summed over its records."""
        return compute_rate(self.lines_hit, self.lines_found)

    def sorted_records(self) -> list[CoverageRecord]:
        """Return records ordered by path (stable for duplicate paths)."""
        return sorted(self.records, key=lambda record: record.path)


@dataclass
class CoverageReport:
    """Complete conversion result, ready to be rendered as Cobertura XML."""

    packages: dict[str, PackageGroup] = field(default_factory=dict)
    """Package groups keyed by package name."""

    sources: list[str] = field(default_factory=list)
    """Absolute source-root directories, in caller order."""

    timestamp_ms: int = 0
    """Report creation time in epoch milliseconds."""

    @property
    def lines_found(self) -> int:
        return sum(group.lines_found for group in self.packages.values())

    @property
    def lines_hit(self) -> int:
        return sum(group.lines_hit for group in self.packages.values())

    @property
    def line_rate(self) -> float:
        """Return the overall line rate across every record."""
        return compute_rate(self.lines_hit, self.lines_found)

    @property
    def record_count(self) -> int:
        return sum(len(group.records) for group in self.packages.values())

    def sorted_packages(self) -> list[PackageGroup]:
        """Return package groups ordered by name."""
        return [self.packages[name] for name in sorted(self.packages)]
