"""Configuration — codec options, TOML discovery, settings, and logging."""

from typedwire.config.models import CodecOptions, OutputConfig, TypedwireConfig

__all__ = ["CodecOptions", "OutputConfig", "TypedwireConfig"]
