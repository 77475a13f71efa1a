"""Configuration parsing from ``.lcovr.yml``."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from lcovr.discovery import DEFAULT_LCOV_INCLUDES, FileSet
from lcovr.errors import ConfigError
from lcovr.models.coverage import DEFAULT_SOURCE_SUFFIXES

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".lcovr.yml"
DEFAULT_OUTPUT = "coverage.xml"

_ENV_VAR_RE = re.compile(r"\$\{(\w+)\}")


def _resolve_env_vars(value: str) -> str:
    """Replace ``${VAR_NAME}`` placeholders with environment variable values."""

    def _replace(match: re.Match[str]) -> str:
        var = match.group(1)
        resolved = os.environ.get(var)
        if resolved is None:
            logger.warning("Environment variable %s is not set (referenced in config)", var)
            return ""
        return resolved

    return _ENV_VAR_RE.sub(_replace, value)


def _resolve_value(value: Any) -> Any:
    if isinstance(value, str):
        return _resolve_env_vars(value)
    if isinstance(value, dict):
        return _resolve_dict(value)
    if isinstance(value, list):
        return [_resolve_value(item) for item in value]
    return value


def _resolve_dict(data: dict[str, Any]) -> dict[str, Any]:
    """Recursively resolve environment variables in a dictionary."""
    return {key: _resolve_value(value) for key, value in data.items()}


@dataclass
class FileSetConfig:
    """One file set entry from ``input`` or ``sources``."""

    dir: str
    """Base directory, relative to the project root unless absolute."""

    includes: list[str] = field(default_factory=list)
    """Glob patterns selecting entries below ``dir``."""

    excludes: list[str] = field(default_factory=list)
    """Glob patterns removed from the selection."""

    def to_fileset(self, root: Path) -> FileSet:
        base = Path(self.dir)
        if not base.is_absolute():
            base = root / base
        return FileSet(base, tuple(self.includes), tuple(self.excludes))


@dataclass
class LcovrConfig:
    """Complete lcovr configuration from ``.lcovr.yml``."""

    root: str
    """Project root directory; relative paths are resolved against it."""

    inputs: list[FileSetConfig] = field(default_factory=list)
    """File sets selecting LCOV tracefiles."""

    sources: list[FileSetConfig] = field(default_factory=list)
    """File sets selecting source-root directories."""

    output: str = DEFAULT_OUTPUT
    """Destination of the Cobertura XML report."""

    source_suffixes: list[str] = field(default_factory=lambda: list(DEFAULT_SOURCE_SUFFIXES))
    """Suffixes stripped when deriving class names from paths."""

    raw: dict[str, Any] = field(default_factory=dict)
    """Raw parsed YAML for extension/debugging."""

    @property
    def output_path(self) -> Path:
        path = Path(self.output)
        if not path.is_absolute():
            path = Path(self.root) / path
        return path

    def input_filesets(self) -> list[FileSet]:
        return [entry.to_fileset(Path(self.root)) for entry in self.inputs]

    def source_filesets(self) -> list[FileSet]:
        return [entry.to_fileset(Path(self.root)) for entry in self.sources]


def _parse_fileset(entry: Any, default_includes: tuple[str, ...]) -> FileSetConfig | None:
    """Parse a file set given either as a plain directory or a mapping."""
    if isinstance(entry, str):
        return FileSetConfig(dir=entry, includes=list(default_includes))
    if not isinstance(entry, dict) or "dir" not in entry:
        logger.warning("Ignoring invalid file set entry: %r", entry)
        return None
    includes = entry.get("includes", list(default_includes))
    excludes = entry.get("excludes", [])
    return FileSetConfig(
        dir=str(entry["dir"]),
        includes=[str(p) for p in includes] if isinstance(includes, list) else [str(includes)],
        excludes=[str(p) for p in excludes] if isinstance(excludes, list) else [str(excludes)],
    )


def _parse_filesets(raw: Any, default_includes: tuple[str, ...]) -> list[FileSetConfig]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raw = [raw]
    parsed = (_parse_fileset(entry, default_includes) for entry in raw)
    return [entry for entry in parsed if entry is not None]


def load_config(root: str | Path) -> LcovrConfig:
    """Load and parse ``.lcovr.yml`` from ``root``.

    Falls back to defaults when the file is missing or incomplete.

    Raises:
        ConfigError: If the file exists but cannot be read or parsed.
    """
    root_path = Path(root).resolve()
    config_file = root_path / CONFIG_FILE_NAME

    raw: dict[str, Any] = {}
    if config_file.is_file():
        try:
            parsed = yaml.safe_load(config_file.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Couldn't load {config_file}: {e}") from e
        if isinstance(parsed, dict):
            raw = _resolve_dict(parsed)

    suffixes_raw = raw.get("source_suffixes", list(DEFAULT_SOURCE_SUFFIXES))
    if not isinstance(suffixes_raw, list):
        suffixes_raw = [suffixes_raw]

    return LcovrConfig(
        root=str(raw.get("root", root_path)),
        inputs=_parse_filesets(raw.get("input"), DEFAULT_LCOV_INCLUDES),
        # A bare string under sources selects that directory itself.
        sources=_parse_filesets(raw.get("sources"), ()),
        output=str(raw.get("output", DEFAULT_OUTPUT)),
        source_suffixes=[str(s) for s in suffixes_raw],
        raw=raw,
    )


def _validate_filesets(entries: list[FileSetConfig], root: Path, section: str) -> list[str]:
    errors: list[str] = []
    for idx, entry in enumerate(entries):
        fileset = entry.to_fileset(root)
        if not fileset.base_dir.is_dir():
            errors.append(f"{section}[{idx}].dir does not exist: {fileset.base_dir}")
    return errors


def validate_config(config: LcovrConfig) -> list[str]:
    """Validate the configuration and return a list of error messages.

    Returns an empty list if the configuration is valid.
    """
    errors: list[str] = []
    root = Path(config.root)

    if not config.output.strip():
        errors.append("output must not be empty")

    for suffix in config.source_suffixes:
        if not suffix.startswith("."):
            errors.append(f"source_suffixes entries must start with '.' (got: {suffix!r})")

    for idx, entry in enumerate(config.inputs):
        if not entry.includes:
            errors.append(f"input[{idx}].includes must not be empty")

    errors.extend(_validate_filesets(config.inputs, root, "input"))
    errors.extend(_validate_filesets(config.sources, root, "sources"))
    return errors
