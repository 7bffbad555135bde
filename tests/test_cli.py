"""Tests for the aliasscan command line."""

import json
import os
import sys
import textwrap

import pytest
import yaml
from click.testing import CliRunner

from aliasscan import __version__
from aliasscan.cli import cli, resolve_target
from aliasscan.core.errors import TargetResolutionError


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def target_module(tmp_path, monkeypatch, clean_env):
    """Write an importable module with one aliased and one clean graph."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(sys, "path", list(sys.path))
    name = f"scan_target_{tmp_path.name}"
    (tmp_path / f"{name}.py").write_text(textwrap.dedent("""
        SHARED = []
        GRAPH = {"a": SHARED, "b": SHARED}
        CLEAN = {"a": [], "b": []}
    """))
    yield name, tmp_path
    sys.modules.pop(name, None)


class TestResolveTarget:
    """Test module:attribute resolution."""

    def test_attribute_path(self):
        assert resolve_target("os.path:join") is os.path.join

    def test_module_only(self):
        assert resolve_target("json") is json

    def test_missing_module(self):
        with pytest.raises(TargetResolutionError, match="Cannot import"):
            resolve_target("no_such_module_for_aliasscan:thing")

    def test_missing_attribute(self):
        with pytest.raises(TargetResolutionError) as exc_info:
            resolve_target("json:dumps.nope")
        assert exc_info.value.target == "json:dumps.nope"

    def test_empty_module(self):
        with pytest.raises(TargetResolutionError):
            resolve_target(":thing")


class TestScanCommand:
    """Test ``aliasscan scan``."""

    def test_json_output(self, runner, target_module):
        name, path = target_module
        result = runner.invoke(cli, ["scan", f"{name}:GRAPH", "--path", str(path), "--json"])
        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert payload["summary"] == {"identities": 2, "duplicates": 1, "unique": 1}
        assert [item["type"] for item in payload["identities"]] == ["list"]

    def test_table_output(self, runner, target_module):
        name, path = target_module
        result = runner.invoke(cli, ["scan", f"{name}:GRAPH", "--path", str(path)])
        assert result.exit_code == 0, result.output
        assert "1 duplicate(s) among 2 identities" in result.output

    def test_fail_on_duplicates(self, runner, target_module):
        name, path = target_module
        result = runner.invoke(
            cli, ["scan", f"{name}:GRAPH", "--path", str(path), "--fail-on-duplicates"]
        )
        assert result.exit_code == 1

    def test_clean_graph_passes(self, runner, target_module):
        name, path = target_module
        result = runner.invoke(
            cli, ["scan", f"{name}:CLEAN", "--path", str(path), "--fail-on-duplicates"]
        )
        assert result.exit_code == 0, result.output
        assert "No duplicate references among 3 identities" in result.output

    def test_config_file_is_used(self, runner, target_module):
        name, path = target_module
        config_file = path / "limits.yml"
        config_file.write_text(yaml.dump({"max_objects": 1}))
        result = runner.invoke(
            cli, ["scan", f"{name}:GRAPH", "--path", str(path), "-c", str(config_file)]
        )
        assert result.exit_code == 1
        assert "more than 1 identities" in result.output

    def test_bad_target(self, runner, target_module):
        result = runner.invoke(cli, ["scan", "no_such_module_for_aliasscan:thing"])
        assert result.exit_code == 1
        assert "Cannot import" in result.output

    def test_module_raising_on_import(self, runner, target_module):
        _, path = target_module
        (path / "broken_target_module.py").write_text("raise RuntimeError('boom at import')\n")
        result = runner.invoke(cli, ["scan", "broken_target_module:X", "--path", str(path)])
        sys.modules.pop("broken_target_module", None)
        assert result.exit_code == 1
        assert "RuntimeError: boom at import" in result.output

    def test_log_file(self, runner, target_module):
        name, path = target_module
        log_file = path / "logs" / "scan.jsonl"
        result = runner.invoke(
            cli, ["scan", f"{name}:GRAPH", "--path", str(path), "--json", "--log-file", str(log_file)]
        )
        assert result.exit_code == 0, result.output
        records = [json.loads(line) for line in log_file.read_text().splitlines()]
        scanned = [r for r in records if r["message"] == f"Scanned {name}:GRAPH"]
        assert scanned and scanned[0]["duplicates"] == 1
        assert records[0]["operation"] == "scan"


class TestOtherCommands:
    """Test demo, version and config commands."""

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert __version__ in result.output

    def test_demo(self, runner):
        result = runner.invoke(cli, ["demo"])
        assert result.exit_code == 0, result.output
        assert "as expected" in result.output

    def test_config_init_and_show(self, runner, tmp_path, clean_env):
        path = tmp_path / "conf.yml"
        result = runner.invoke(cli, ["config", "init", "--path", str(path)])
        assert result.exit_code == 0, result.output
        assert yaml.safe_load(path.read_text())["max_objects"] == 0

        result = runner.invoke(cli, ["config", "show", "--path", str(path)])
        assert result.exit_code == 0, result.output
        assert "follow_weakrefs" in result.output

    def test_config_init_keeps_existing_file(self, runner, tmp_path):
        path = tmp_path / "conf.yml"
        path.write_text("max_objects: 5\n")
        result = runner.invoke(cli, ["config", "init", "--path", str(path)], input="n\n")
        assert "Aborted" in result.output
        assert path.read_text() == "max_objects: 5\n"

        result = runner.invoke(cli, ["config", "init", "--path", str(path), "--force"])
        assert yaml.safe_load(path.read_text())["max_objects"] == 0

    def test_invalid_config_file(self, runner, tmp_path, clean_env):
        path = tmp_path / "bad.yml"
        path.write_text("max_objects: -3\n")
        result = runner.invoke(cli, ["config", "show", "--path", str(path)])
        assert result.exit_code == 1
        assert "Invalid configuration" in result.output
