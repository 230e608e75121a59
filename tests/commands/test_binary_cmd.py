"""Tests for the binary command group."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from typedwire.cli import cli


@pytest.mark.usefixtures("_isolated_cwd")
class TestBinaryEncode:
    def test_to_stdout(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        data = tmp_path / "data.bin"
        data.write_bytes(b"\x00\x01\x02")
        result = cli_runner.invoke(cli, ["binary", "encode", str(data)])
        assert result.exit_code == 0
        assert result.stdout == "AAEC\n"

    def test_to_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        data = tmp_path / "data.bin"
        data.write_bytes(b"foo")
        out = tmp_path / "data.b64"
        result = cli_runner.invoke(cli, ["binary", "encode", str(data), "--output", str(out)])
        assert result.exit_code == 0
        assert out.read_text() == "Zm9v"
        assert "size: 3" in result.stdout

    def test_missing_path(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = cli_runner.invoke(cli, ["binary", "encode", str(tmp_path / "absent")])
        assert result.exit_code == 2


@pytest.mark.usefixtures("_isolated_cwd")
class TestBinaryDecode:
    def test_raw_bytes_to_stdout(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["binary", "decode"], input="AAEC\n")
        assert result.exit_code == 0
        assert result.stdout_bytes == b"\x00\x01\x02"

    def test_to_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        out = tmp_path / "out.bin"
        result = cli_runner.invoke(cli, ["binary", "decode", "--output", str(out)], input="Zm9v")
        assert result.exit_code == 0
        assert out.read_bytes() == b"foo"

    def test_json_summary_omits_bytes(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "binary", "decode"], input="Zm9vYg==")
        data = json.loads(result.stdout)
        assert data["data"] == {"size": 4}

    def test_lenient_skips_bad_characters(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["binary", "decode"], input="Zm*9")
        assert result.stdout_bytes == b"fo"

    def test_strict_rejects(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--strict", "binary", "decode"], input="Zm9")
        assert result.exit_code == 1
        assert "BINARY_DECODE_ERROR" in result.stderr
