"""Shared pytest fixtures and test helpers for typedwire tests."""

from __future__ import annotations

import logging
import sys
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from typedwire.config.models import CodecOptions
from typedwire.services.codec import CodecService
from typedwire.services.telemetry import _current_span, disable_telemetry


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def service() -> CodecService:
    """CodecService with default (lenient) options."""
    return CodecService()


@pytest.fixture
def strict_service() -> CodecService:
    """CodecService with every strict switch on."""
    return CodecService(CodecOptions.strict())


@pytest.fixture
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run from an empty directory so no typedwire.toml is discovered."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def int_digit_limit() -> Generator[int]:
    """Pin the interpreter's integer string conversion limit to its default."""
    original = sys.get_int_max_str_digits()
    sys.set_int_max_str_digits(4300)
    yield 4300
    sys.set_int_max_str_digits(original)


@pytest.fixture(autouse=True)
def _isolate_global_state(monkeypatch: pytest.MonkeyPatch) -> Generator[None]:
    """Undo logging and telemetry changes made by CLI invocations."""
    monkeypatch.delenv("TYPEDWIRE_CONFIG", raising=False)
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    tw = logging.getLogger("typedwire")
    tw_level = tw.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    tw.setLevel(tw_level)
    disable_telemetry()
    _current_span.set(None)


# ---------------------------------------------------------------------------
# Envelope builders
# ---------------------------------------------------------------------------


def env(tag: str, *value: Any) -> dict[str, Any]:
    """Build an envelope; pass no value for null/undefined."""
    if value:
        return {"type": tag, "value": value[0]}
    return {"type": tag}


def num(n: int | float) -> dict[str, Any]:
    return env("number", n)


def text(s: str) -> dict[str, Any]:
    return env("string", s)
