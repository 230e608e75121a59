"""Tests for the encode command."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from typedwire.cli import cli


@pytest.mark.usefixtures("_isolated_cwd")
class TestEncodeCommand:
    def test_stdin_to_stdout(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["encode"], input='{"a": 1}')
        assert result.exit_code == 0
        assert result.stdout == (
            '{"type":"object","value":{"a":{"type":"number","value":1}}}\n'
        )

    def test_file_argument(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        source = tmp_path / "doc.json"
        source.write_text("[true]")
        result = cli_runner.invoke(cli, ["encode", str(source)])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["type"] == "array"

    def test_output_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        out = tmp_path / "doc.tw.json"
        result = cli_runner.invoke(cli, ["encode", "--output", str(out)], input="null")
        assert result.exit_code == 0
        assert out.read_text() == '{"type":"null"}'
        assert "output_file" in result.stdout

    def test_json_mode(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "encode"], input='"x"')
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["ok"] is True
        assert data["op"] == "encode"
        assert data["data"]["content"] == '{"type":"string","value":"x"}'

    def test_quiet_with_output(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        out = tmp_path / "o.json"
        result = cli_runner.invoke(cli, ["-q", "encode", "--output", str(out)], input="{}")
        assert result.exit_code == 0
        assert result.stdout.strip() == "object"

    def test_blob_prefix(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli, ["encode", "--blob-prefix", "b64:"], input='["b64:AAEC"]'
        )
        envelope = json.loads(result.stdout)
        assert envelope["value"] == [{"type": "binary", "value": "AAEC"}]

    def test_invalid_json(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["encode"], input="{nope")
        assert result.exit_code == 1
        assert result.stdout == ""
        assert "INVALID_JSON" in result.stderr

    def test_invalid_json_structured_error(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "encode"], input="[1,")
        assert result.exit_code == 1
        payload = json.loads(result.stderr)
        assert payload["ok"] is False
        assert payload["error"]["code"] == "INVALID_JSON"

    def test_verbose_includes_telemetry(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-v", "--json", "encode"], input="[1]")
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        spans = [c["name"] for c in data["meta"]["telemetry"]["children"]]
        assert spans == ["load_json", "encode", "serialize"]


class TestEncodeConfig:
    def test_discovered_config(
        self, cli_runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "typedwire.toml").write_text(
            '[codec]\ntype_key = "$type"\nvalue_key = "$value"\n'
        )
        monkeypatch.chdir(tmp_path)
        result = cli_runner.invoke(cli, ["encode"], input="1")
        assert result.stdout.strip() == '{"$type":"number","$value":1}'

    def test_explicit_config(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        config = tmp_path / "custom.toml"
        config.write_text("[codec]\nmax_depth = 1\n")
        result = cli_runner.invoke(cli, ["-c", str(config), "encode"], input="[[1]]")
        assert result.exit_code == 1
        assert "DEPTH_EXCEEDED" in result.stderr
