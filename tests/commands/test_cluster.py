"""Tests for the ``jobreg cluster`` command group."""

from __future__ import annotations

import json
from typing import Any

import pytest
from click.testing import CliRunner, Result

from jobreg.cli import cli


def _run(runner: CliRunner, *args: str) -> Result:
    return runner.invoke(cli, ["--json", *args])


def _data(result: Result) -> dict[str, Any]:
    assert result.exit_code == 0, result.output
    return json.loads(result.output)["data"]


def _ids(result: Result) -> list[str]:
    return [item["id"] for item in _data(result)["items"]]


@pytest.fixture
def populated(cli_runner: CliRunner, _isolated_root: None) -> CliRunner:
    _data(_run(cli_runner, "cluster", "create", "--id", "c1", "--name", "h2prod",
               "--user", "tgianos", "--version", "2.4.0", "--status", "UP",
               "--cluster-type", "yarn", "--tag", "prod"))
    for command_id in ("cmd1", "cmd2", "cmd3"):
        _data(_run(cli_runner, "command", "create", "--id", command_id, "--name", command_id,
                   "--user", "u", "--version", "1", "--status", "ACTIVE",
                   "--executable", "pig"))
    return cli_runner


class TestClusterCrud:
    def test_cluster_type(self, populated: CliRunner) -> None:
        data = _data(_run(populated, "cluster", "get", "c1"))
        assert data["cluster_type"] == "yarn"
        assert data["tags"] == ["c1", "h2prod", "prod"]

    def test_status_filter(self, populated: CliRunner) -> None:
        assert _ids(_run(populated, "cluster", "list", "--status", "up")) == ["c1"]
        assert _ids(_run(populated, "cluster", "list", "--status", "TERMINATED")) == []


class TestClusterCommands:
    def test_add_keeps_order(self, populated: CliRunner) -> None:
        _data(_run(populated, "cluster", "commands", "add", "c1", "cmd3", "cmd1"))
        _data(_run(populated, "cluster", "commands", "add", "c1", "cmd2"))
        assert _ids(_run(populated, "cluster", "commands", "show", "c1")) == [
            "cmd3",
            "cmd1",
            "cmd2",
        ]

    def test_add_existing_warns(self, populated: CliRunner) -> None:
        _data(_run(populated, "cluster", "commands", "add", "c1", "cmd1"))
        result = populated.invoke(cli, ["cluster", "commands", "add", "c1", "cmd1"])
        assert result.exit_code == 0
        assert "WARNING" in result.output

    def test_add_unknown_command(self, populated: CliRunner) -> None:
        result = _run(populated, "cluster", "commands", "add", "c1", "cmd1", "ghost")
        assert result.exit_code == 1
        assert _data(_run(populated, "cluster", "commands", "show", "c1"))["count"] == 0

    def test_set_remove_clear(self, populated: CliRunner) -> None:
        _data(_run(populated, "cluster", "commands", "add", "c1", "cmd1", "cmd2"))
        assert _ids(_run(populated, "cluster", "commands", "set", "c1", "cmd3", "cmd1")) == [
            "cmd3",
            "cmd1",
        ]
        assert _ids(_run(populated, "cluster", "commands", "remove", "c1", "cmd3")) == ["cmd1"]
        assert _ids(_run(populated, "cluster", "commands", "clear", "c1")) == []

    def test_delete_cluster_keeps_commands(self, populated: CliRunner) -> None:
        _data(_run(populated, "cluster", "commands", "add", "c1", "cmd1"))
        _data(_run(populated, "cluster", "delete", "c1"))
        assert _data(_run(populated, "command", "clusters", "cmd1"))["count"] == 0
        assert _data(_run(populated, "command", "get", "cmd1"))["id"] == "cmd1"
