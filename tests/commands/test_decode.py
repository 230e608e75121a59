"""Tests for the decode command."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from typedwire.cli import cli

_MAP = (
    '{"type":"map","value":[[{"type":"number","value":1},'
    '{"type":"binary","value":"AAEC"}]]}'
)


@pytest.mark.usefixtures("_isolated_cwd")
class TestDecodeCommand:
    def test_stdin_to_stdout(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["decode"], input=_MAP)
        assert result.exit_code == 0
        assert result.stdout == '[[1,"AAEC"]]\n'
        assert result.stderr == ""

    def test_output_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        out = tmp_path / "plain.json"
        result = cli_runner.invoke(cli, ["decode", "--output", str(out)], input=_MAP)
        assert result.exit_code == 0
        assert json.loads(out.read_text()) == [[1, "AAEC"]]

    def test_json_mode(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "decode"], input=_MAP)
        data = json.loads(result.stdout)
        assert data["data"]["root"] == "map"
        assert data["data"]["content"] == '[[1,"AAEC"]]'

    def test_truncated_lenient_warns(self, cli_runner: CliRunner) -> None:
        text = '{"type":"array","value":[{"type":"number","value":1},'
        result = cli_runner.invoke(cli, ["decode"], input=text)
        assert result.exit_code == 0
        assert result.stdout == "[1]\n"
        assert "WARNING: Input is malformed" in result.stderr

    def test_truncated_strict_fails(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--strict", "decode"], input='{"type":"array","value":[')
        assert result.exit_code == 1
        assert "MALFORMED_TEXT" in result.stderr

    def test_invalid_envelope(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "decode"], input='{"kind":"number"}')
        assert result.exit_code == 1
        assert json.loads(result.stderr)["error"]["code"] == "INVALID_ENVELOPE"

    def test_pretty_from_config(self, cli_runner: CliRunner, _isolated_cwd: Path) -> None:
        (_isolated_cwd / "typedwire.toml").write_text("[output]\npretty = true\n")
        text = '{"type":"object","value":{"a":{"type":"boolean","value":true}}}'
        result = cli_runner.invoke(cli, ["decode"], input=text)
        assert result.stdout == '{\n  "a": true\n}\n'
