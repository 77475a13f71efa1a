"""Resolve glob-based file sets into concrete input files and source roots."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)

DEFAULT_LCOV_INCLUDES: tuple[str, ...] = ("**/*.info", "**/*.lcov")


@dataclass(frozen=True)
class FileSet:
    """A base directory plus include/exclude glob patterns.

    Patterns are relative to ``base_dir`` and use :meth:`Path.glob` syntax,
    so ``**`` matches any number of directories.
    """

    base_dir: Path
    includes: tuple[str, ...] = DEFAULT_LCOV_INCLUDES
    excludes: tuple[str, ...] = ()

    def included_files(self) -> list[Path]:
        """Return matching files, sorted for a stable read order."""
        return self._scan(want_dirs=False)

    def included_directories(self) -> list[Path]:
        """Return matching directories, sorted.

        A file set without include patterns selects its base directory.
        """
        if not self.includes:
            return [self.base_dir]
        return self._scan(want_dirs=True)

    def _scan(self, *, want_dirs: bool) -> list[Path]:
        if not self.base_dir.is_dir():
            logger.warning("File set directory does not exist: %s", self.base_dir)
            return []
        excluded: set[Path] = set()
        for pattern in self.excludes:
            excluded.update(self.base_dir.glob(pattern))
        matches: set[Path] = set()
        for pattern in self.includes:
            for path in self.base_dir.glob(pattern):
                if path in excluded:
                    continue
                if path.is_dir() if want_dirs else path.is_file():
                    matches.add(path)
        return sorted(matches)


def resolve_inputs(filesets: Iterable[FileSet]) -> list[Path]:
    """Flatten file sets into LCOV input paths, in file-set order."""
    paths: list[Path] = []
    for fileset in filesets:
        paths.extend(fileset.included_files())
    return paths


def resolve_source_dirs(filesets: Iterable[FileSet]) -> list[Path]:
    """Flatten file sets into source-root directories, in file-set order."""
    dirs: list[Path] = []
    for fileset in filesets:
        dirs.extend(fileset.included_directories())
    return dirs
