"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``TYPEDWIRE_*`` prefix (``TYPEDWIRE_CODEC__MAX_DEPTH=64``)
  3. TOML file    — ``typedwire.toml`` discovered via walk-up
  4. Code defaults — baked into the section models
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from typedwire.config.discovery import find_config, read_config
from typedwire.config.models import CodecOptions, OutputConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``typedwire.toml`` file discovered via walk-up."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            self._data = read_config(toml_path)

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# TOML path handed from from_cli() to settings_customise_sources().
_tls = threading.local()


class TypedwireSettings(BaseSettings):
    """Unified settings for the typedwire CLI.

    Attributes:
        config_path: The TOML file that was loaded, or None.
        strict: Turn on every strict switch of the codec regardless of
            what the ``[codec]`` section says.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "TYPEDWIRE_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False
    strict: bool = False

    # --- TOML sections ---
    codec: CodecOptions = Field(default_factory=CodecOptions)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @property
    def codec_options(self) -> CodecOptions:
        """Effective codec options after applying ``--strict``."""
        if not self.strict:
            return self.codec
        return self.codec.model_copy(
            update={"strict_binary": True, "strict_json": True, "strict_envelopes": True}
        )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        cwd: Path | None = None,
        **cli_flags: Any,
    ) -> TypedwireSettings:
        """Construct settings from a CLI invocation.

        Uses *config_path* when given, otherwise discovers ``typedwire.toml``
        by walking up from *cwd*. CLI flags are highest-priority overrides.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(cwd)

        _tls.toml_path = toml_path
        try:
            return cls(config_path=toml_path, **cli_flags)
        finally:
            _tls.toml_path = None
