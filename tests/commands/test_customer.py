"""Tests for the customer CLI command group."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from invoicectl.cli import cli


@pytest.mark.usefixtures("_isolated_project")
class TestCustomerCommands:
    def test_add(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli, ["customer", "add", "Lee Robinson", "--email", "lee@robinson.com"]
        )
        assert result.exit_code == 0
        assert "Lee Robinson" in result.stdout

    def test_add_requires_email(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["customer", "add", "Lee"])
        assert result.exit_code == 2

    def test_duplicate_email(self, cli_runner: CliRunner) -> None:
        args = ["customer", "add", "Lee", "--email", "lee@robinson.com"]
        assert cli_runner.invoke(cli, args).exit_code == 0
        result = cli_runner.invoke(cli, args)
        assert result.exit_code == 1
        assert "already exists" in result.stderr

    def test_list(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["customer", "add", "Zed", "--email", "z@example.com"])
        cli_runner.invoke(cli, ["customer", "add", "Amy", "--email", "a@example.com"])
        result = cli_runner.invoke(cli, ["--json", "customer", "list"])
        names = [c["name"] for c in json.loads(result.stdout)["data"]["items"]]
        assert names == ["Amy", "Zed"]
