"""Tests for the lcovr CLI commands."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml
from click.testing import CliRunner
from defusedxml import ElementTree

from lcovr import __version__
from lcovr.cli import _config_to_dict, _expand_inputs, cli
from lcovr.config import load_config

_LCOV = """TN:
SF:com/mycompany/MyClass.java
DA:3,1
DA:4,1
DA:5,1
DA:6,0
LH:3
LF:4
end_of_record
"""


def _write_file(root: Path, rel: str, content: str) -> Path:
    f = root / rel
    f.parent.mkdir(parents=True, exist_ok=True)
    f.write_text(content, encoding="utf-8")
    return f


def _write_lcovr_yml(root: Path, data: dict[str, Any]) -> None:
    (root / ".lcovr.yml").write_text(yaml.dump(data), encoding="utf-8")


def test_version() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_help() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "convert" in result.output


# ── convert ──────────────────────────────────────────────────────


def test_convert_explicit_arguments(tmp_path: Path) -> None:
    lcov = _write_file(tmp_path, "cov/app.info", _LCOV)
    src = tmp_path / "src"
    src.mkdir()
    output = tmp_path / "coverage.xml"

    runner = CliRunner()
    result = runner.invoke(
        cli,
        [
            "convert",
            str(lcov),
            "--source-dir",
            str(src),
            "--output",
            str(output),
            "--path",
            str(tmp_path),
        ],
    )

    assert result.exit_code == 0, result.output
    assert "Coverage Summary" in result.output
    root = ElementTree.fromstring(output.read_text(encoding="utf-8"))
    assert root.get("line-rate") == "0.75"
    assert [s.text for s in root.findall("sources/source")] == [str(src.resolve())]


def test_convert_directory_argument(tmp_path: Path) -> None:
    _write_file(tmp_path, "cov/a.info", _LCOV)
    _write_file(tmp_path, "cov/nested/b.lcov", _LCOV.replace("MyClass", "Other"))
    output = tmp_path / "coverage.xml"

    runner = CliRunner()
    result = runner.invoke(
        cli, ["convert", str(tmp_path / "cov"), "-o", str(output), "--path", str(tmp_path), "-q"]
    )

    assert result.exit_code == 0, result.output
    assert "Coverage Summary" not in result.output
    root = ElementTree.fromstring(output.read_text(encoding="utf-8"))
    assert len(root.findall(".//class")) == 2


def test_convert_from_config(tmp_path: Path) -> None:
    _write_file(tmp_path, "build/cov/app.info", _LCOV)
    (tmp_path / "src" / "main").mkdir(parents=True)
    _write_lcovr_yml(
        tmp_path,
        {
            "input": [{"dir": "build/cov", "includes": ["*.info"]}],
            "sources": ["src/main"],
            "output": "reports/cobertura.xml",
        },
    )

    runner = CliRunner()
    result = runner.invoke(cli, ["convert", "--path", str(tmp_path)])

    assert result.exit_code == 0, result.output
    output = tmp_path / "reports" / "cobertura.xml"
    root = ElementTree.fromstring(output.read_text(encoding="utf-8"))
    assert [s.text for s in root.findall("sources/source")] == [
        str((tmp_path / "src" / "main").resolve())
    ]


def test_convert_strip_suffix(tmp_path: Path) -> None:
    lcov = _write_file(tmp_path, "a.info", "SF:web/app/main.ts\nLF:1\nLH:1\nend_of_record\n")
    output = tmp_path / "c.xml"

    runner = CliRunner()
    result = runner.invoke(
        cli,
        ["convert", str(lcov), "-o", str(output), "--strip-suffix", ".ts", "--path", str(tmp_path)],
    )

    assert result.exit_code == 0, result.output
    root = ElementTree.fromstring(output.read_text(encoding="utf-8"))
    cls = root.find(".//class")
    assert cls is not None
    assert cls.get("name") == "web.app.main"


def test_convert_prints_markup_like_names_literally(tmp_path: Path) -> None:
    lcov = _write_file(tmp_path, "a.info", "SF:[bold]/x/Foo.java\nLF:1\nLH:1\nend_of_record\n")
    output = tmp_path / "[red]cov.xml"

    runner = CliRunner()
    result = runner.invoke(cli, ["convert", str(lcov), "-o", str(output), "--path", str(tmp_path)])

    assert result.exit_code == 0, result.output
    flat = "".join(result.output.split())
    assert "[bold].x" in flat
    assert "[red]cov.xml" in flat
    assert output.exists()


def test_convert_without_inputs_is_usage_error(tmp_path: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["convert", "--path", str(tmp_path)])
    assert result.exit_code == 2
    assert "No LCOV input files" in result.output


def test_convert_malformed_input_aborts(tmp_path: Path) -> None:
    bad = _write_file(tmp_path, "bad.info", "DA:1,1\n")
    output = tmp_path / "coverage.xml"

    runner = CliRunner()
    result = runner.invoke(cli, ["convert", str(bad), "-o", str(output), "--path", str(tmp_path)])

    assert result.exit_code != 0
    assert "Malformed LCOV file" in result.output
    assert not output.exists()


def test_convert_invalid_config_aborts(tmp_path: Path) -> None:
    (tmp_path / ".lcovr.yml").write_text("input: [oops\n", encoding="utf-8")
    runner = CliRunner()
    result = runner.invoke(cli, ["convert", "--path", str(tmp_path)])
    assert result.exit_code != 0
    assert "Failed to load configuration" in result.output


def test_expand_inputs_keeps_files_and_scans_dirs(tmp_path: Path) -> None:
    single = _write_file(tmp_path, "single.info", _LCOV)
    _write_file(tmp_path, "dir/x.info", _LCOV)
    assert _expand_inputs((str(single), str(tmp_path / "dir"))) == [
        single,
        tmp_path / "dir" / "x.info",
    ]


# ── config ───────────────────────────────────────────────────────


def test_config_show_json(tmp_path: Path) -> None:
    _write_lcovr_yml(tmp_path, {"output": "out.xml"})
    runner = CliRunner()
    result = runner.invoke(cli, ["config", "show", "--path", str(tmp_path), "--json-output"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["output"] == "out.xml"
    assert "raw" not in data


def test_config_show_yaml(tmp_path: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["config", "show", "--path", str(tmp_path)])
    assert result.exit_code == 0, result.output
    assert "output: coverage.xml" in result.output


def test_config_validate_ok(tmp_path: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["config", "validate", "--path", str(tmp_path)])
    assert result.exit_code == 0, result.output
    assert "Configuration is valid" in result.output


def test_config_validate_errors(tmp_path: Path) -> None:
    _write_lcovr_yml(tmp_path, {"input": ["missing-dir"]})
    runner = CliRunner()
    result = runner.invoke(cli, ["config", "validate", "--path", str(tmp_path)])
    assert result.exit_code != 0
    assert "configuration error" in result.output


def test_config_to_dict_drops_raw(tmp_path: Path) -> None:
    config = load_config(tmp_path)
    assert "raw" not in _config_to_dict(config)
