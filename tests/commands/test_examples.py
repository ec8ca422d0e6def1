"""Tests for --examples flag and help text on CLI commands."""

from __future__ import annotations

import click
import pytest
from click.testing import CliRunner

from jobreg.cli import cli
from jobreg.commands._base import JobregCommand

# (CLI args, expected keywords in output)
EXAMPLES_COMMANDS: list[tuple[list[str], list[str]]] = [
    (["init", "--examples"], ["jobreg init"]),
    (["app", "--examples"], ["jobreg app create", "jobreg app commands app1"]),
    (["app", "create", "--examples"], ["jobreg app create"]),
    (["app", "list", "--examples"], ["--order-by name", "--page-size 10"]),
    (["app", "update", "--examples"], ["--version 2.0"]),
    (["app", "tags", "--examples"], ["jobreg app tags clear ID"]),
    (["command", "--examples"], ["--application-id app1", "jobreg command app set"]),
    (["command", "jars", "--examples"], ["jobreg command jars add ID"]),
    (["cluster", "--examples"], ["--cluster-type yarn"]),
    (["cluster", "commands", "--examples"], ["jobreg cluster commands set"]),
    (["cluster", "configs", "--examples"], ["jobreg cluster configs show ID"]),
]


class TestExamples:
    @pytest.mark.parametrize(
        ("args", "keywords"), EXAMPLES_COMMANDS, ids=lambda v: " ".join(v) if v else ""
    )
    def test_examples_output(
        self, cli_runner: CliRunner, args: list[str], keywords: list[str]
    ) -> None:
        result = cli_runner.invoke(cli, args)
        assert result.exit_code == 0, result.output
        assert "Examples for" in result.output
        for keyword in keywords:
            assert keyword in result.output

    def test_examples_listed_in_help(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["cluster", "--help"])
        assert "--examples" in result.output


HELP_COMMANDS = [
    ["app", "--help"],
    ["app", "create", "--help"],
    ["command", "app", "--help"],
    ["command", "clusters", "--help"],
    ["cluster", "commands", "add", "--help"],
    ["cluster", "jars", "remove", "--help"],
]


class TestHelp:
    @pytest.mark.parametrize("args", HELP_COMMANDS, ids=" ".join)
    def test_help(self, cli_runner: CliRunner, args: list[str]) -> None:
        result = cli_runner.invoke(cli, args)
        assert result.exit_code == 0
        assert "Usage" in result.output

    def test_command_create_has_kind_options(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["command", "create", "--help"])
        for option in ("--executable", "--job-type", "--application-id"):
            assert option in result.output


class TestExamplesOption:
    def test_fires_before_required_options(self) -> None:
        @click.command(cls=JobregCommand, examples="  jobreg command create --executable pig")
        @click.option("--executable", required=True)
        def create(executable: str) -> None:
            raise AssertionError("callback must not run")

        result = CliRunner().invoke(create, ["--examples"])
        assert result.exit_code == 0
        assert "Examples for 'create':" in result.output
        assert "--executable pig" in result.output

    def test_no_flag_without_examples(self) -> None:
        command = JobregCommand("bare")
        assert [p.name for p in command.params] == []
