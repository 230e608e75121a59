"""Locating and reading typedwire.toml.

The file is found by walking up from the working directory, unless the
TYPEDWIRE_CONFIG env var or the --config flag names one. Reading checks
the [codec] and [output] sections up front so a bad value is reported
against the file rather than as a settings traceback.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import ValidationError

from typedwire.config.models import TypedwireConfig

CONFIG_FILENAME = "typedwire.toml"
CONFIG_ENV_VAR = "TYPEDWIRE_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for typedwire.toml.

    Returns the path to the config file, or None if not found.
    Checks TYPEDWIRE_CONFIG env var first.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        if p.is_file():
            return p
        return None

    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def read_config(path: Path) -> dict[str, Any]:
    """Parse *path* and return its raw table for the settings TOML source.

    Raises:
        click.ClickException: The file is not valid TOML, or one of its
            sections holds a value the section model rejects.
    """
    try:
        data: dict[str, Any] = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise click.ClickException(f"Invalid TOML in {path}: {exc}") from exc

    try:
        TypedwireConfig.model_validate(data)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        raise click.ClickException(f"Invalid config in {path}: {problems}") from exc
    return data
