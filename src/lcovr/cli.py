"""lcovr CLI — top-level command group."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any

import click
import yaml
from rich.console import Console
from rich.markup import escape

from lcovr import __version__
from lcovr.config import LcovrConfig, load_config, validate_config
from lcovr.discovery import FileSet, resolve_inputs, resolve_source_dirs
from lcovr.errors import ConfigError, LcovrError
from lcovr.orchestrator import convert
from lcovr.reporters.terminal import reporter

console = Console()


def _config_to_dict(config: LcovrConfig) -> dict[str, Any]:
    """Convert LcovrConfig to dictionary for display."""
    result = asdict(config)
    # Remove the raw field as it's redundant
    result.pop("raw", None)
    return result


def _load_config_or_abort(path: str) -> LcovrConfig:
    try:
        return load_config(path)
    except ConfigError as e:
        reporter.print_error(f"Failed to load configuration: {escape(str(e))}")
        raise click.Abort from e


def _expand_inputs(lcov_files: tuple[str, ...]) -> list[Path]:
    """Expand command-line inputs; directories are scanned for tracefiles."""
    paths: list[Path] = []
    for item in lcov_files:
        path = Path(item)
        if path.is_dir():
            paths.extend(FileSet(path).included_files())
        else:
            paths.append(path)
    return paths


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.version_option(version=__version__, prog_name="lcovr")
@click.pass_context
def cli(ctx: click.Context, *, verbose: bool) -> None:
    """lcovr — convert LCOV coverage data into Cobertura XML."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="[%(levelname)s] %(name)s: %(message)s",
    )


@cli.command("convert")
@click.argument("lcov_files", nargs=-1, type=click.Path(exists=True))
@click.option(
    "--source-dir",
    "source_dirs",
    multiple=True,
    type=click.Path(file_okay=False),
    help="Source root for the <sources> section (repeatable, order is kept).",
)
@click.option(
    "-o",
    "--output",
    "output_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path of the Cobertura XML report (default: from .lcovr.yml or coverage.xml).",
)
@click.option(
    "--strip-suffix",
    "strip_suffixes",
    multiple=True,
    help="Source suffix removed when deriving class names (repeatable, default: .java).",
)
@click.option(
    "--path",
    default=".",
    type=click.Path(exists=True, file_okay=False, resolve_path=True),
    help="Project root directory containing .lcovr.yml.",
)
@click.option("-q", "--quiet", is_flag=True, help="Do not print the coverage summary.")
def convert_command(
    lcov_files: tuple[str, ...],
    source_dirs: tuple[str, ...],
    output_path: str | None,
    strip_suffixes: tuple[str, ...],
    path: str,
    *,
    quiet: bool,
) -> None:
    """Convert LCOV tracefiles into a Cobertura XML report.

    LCOV_FILES may be tracefiles or directories; directories are searched
    for *.info and *.lcov files. Without arguments the `input` file sets
    from .lcovr.yml are used.

    Example:
      lcovr convert build/coverage.info --source-dir src -o coverage.xml
    """
    config = _load_config_or_abort(path)

    if lcov_files:
        inputs = _expand_inputs(lcov_files)
    else:
        inputs = resolve_inputs(config.input_filesets())
    if not inputs:
        raise click.UsageError("No LCOV input files found. Pass files or configure `input`.")

    if source_dirs:
        sources = [Path(d) for d in source_dirs]
    else:
        sources = resolve_source_dirs(config.source_filesets())

    output = Path(output_path) if output_path else config.output_path
    suffixes = tuple(strip_suffixes) if strip_suffixes else tuple(config.source_suffixes)

    if not quiet:
        reporter.print_header("lcovr convert")
        reporter.print_info(f"Reading {len(inputs)} LCOV file(s)")

    try:
        result = convert(inputs, sources, output, source_suffixes=suffixes)
    except LcovrError as e:
        reporter.print_error(escape(str(e)))
        raise click.Abort from e

    if not quiet:
        reporter.print_coverage_summary(result.report)
    reporter.print_success(
        f"Wrote coverage for {result.report.record_count} source files "
        f"to {escape(str(result.output_path))}"
    )


@cli.group("config")
def config_group() -> None:
    """Inspect `.lcovr.yml` configuration."""


@config_group.command("show")
@click.option(
    "--path",
    default=".",
    type=click.Path(exists=True, file_okay=False, resolve_path=True),
    help="Project root directory.",
)
@click.option(
    "--json-output",
    "as_json",
    is_flag=True,
    help="Output as JSON instead of YAML.",
)
def config_show(path: str, *, as_json: bool) -> None:
    """Display the resolved configuration.

    Example:
      lcovr config show
      lcovr config show --json-output
    """
    config_dict = _config_to_dict(_load_config_or_abort(path))

    if as_json:
        click.echo(json.dumps(config_dict, indent=2))
    else:
        console.print()
        console.print("[bold cyan]Configuration:[/bold cyan]")
        console.print()
        click.echo(yaml.safe_dump(config_dict, sort_keys=False, default_flow_style=False))


@config_group.command("validate")
@click.option(
    "--path",
    default=".",
    type=click.Path(exists=True, file_okay=False, resolve_path=True),
    help="Project root directory.",
)
def config_validate(path: str) -> None:
    """Validate `.lcovr.yml`.

    Example:
      lcovr config validate
    """
    errors = validate_config(_load_config_or_abort(path))

    if not errors:
        reporter.print_success("Configuration is valid!")
        return

    reporter.print_error(f"Found {len(errors)} configuration error(s):")
    console.print()
    for idx, error in enumerate(errors, start=1):
        console.print(f"  {idx}. [red]{escape(error)}[/red]")
    console.print()
    raise click.Abort
