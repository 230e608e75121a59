"""Tests for the inspect command."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from typedwire.cli import cli

_DOC = json.dumps(
    {
        "type": "array",
        "value": [
            {"type": "number", "value": 1},
            {"type": "object", "value": {"b": {"type": "binary", "value": ""}}},
            {"type": "bogus"},
        ],
    }
)


@pytest.mark.usefixtures("_isolated_cwd")
class TestInspectCommand:
    def test_human_output(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["inspect"], input=_DOC)
        assert result.exit_code == 0
        assert "inspect" in result.stdout
        assert "root: array" in result.stdout
        assert "binary" in result.stdout
        assert "WARNING: 1 member(s) are not valid envelopes" in result.stderr

    def test_json_output(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "inspect"], input=_DOC)
        data = json.loads(result.stdout)
        assert data["data"]["envelopes"] == 4
        assert data["data"]["invalid"] == 1
        assert data["data"]["depth"] == 2
        assert data["warnings"] == ["1 member(s) are not valid envelopes"]

    def test_quiet(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-q", "inspect"], input=_DOC)
        assert result.stdout.strip() == "array"

    def test_not_an_envelope(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["inspect"], input="[]")
        assert result.exit_code == 1
        assert "MALFORMED_TEXT" in result.stderr
