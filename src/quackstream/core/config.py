"""Configuration management.

Loads from an optional TOML config file + environment variables.
Uses pydantic-settings for validation and env var overriding.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings

from .enums import QuackPolicy, TimelinePolicy


# ---------------------------------------------------------------------------
# Sub-configs
# ---------------------------------------------------------------------------

class PolicyConfig(BaseModel):
    timeline_policy: TimelinePolicy = TimelinePolicy.FOLD
    quack_policy: QuackPolicy = QuackPolicy.ALLOW
    replay_on_subscribe: bool = False  # Late subscribers start from now


class BusConfig(BaseModel):
    isolate_subscriber_errors: bool = False  # False: first failure aborts publish


class ObservabilityConfig(BaseModel):
    log_level: str = "INFO"
    log_format: str = "console"  # "json" or "console"


# ---------------------------------------------------------------------------
# Top-level settings
# ---------------------------------------------------------------------------

class Settings(BaseSettings):
    """Top-level settings.

    Loaded from a TOML config file, overridden by environment variables
    such as ``QUACK_POLICY__TIMELINE_POLICY=append_only``.
    """

    policy: PolicyConfig = Field(default_factory=PolicyConfig)
    bus: BusConfig = Field(default_factory=BusConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    model_config = {"env_prefix": "QUACK_", "env_nested_delimiter": "__"}


def load_settings(
    config_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> Settings:
    """Load settings from TOML file + env vars.

    Args:
        config_path: Path to TOML config file (optional, ignored if absent).
        overrides: Dict of overrides applied per section on top of the file.
    """
    from .errors import ConfigError

    data: dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if path.exists():
            import tomli

            try:
                with open(path, "rb") as f:
                    data = tomli.load(f)
            except tomli.TOMLDecodeError as exc:
                raise ConfigError(f"Malformed config file {path}: {exc}") from exc

    if overrides:
        for key, value in overrides.items():
            if isinstance(value, dict) and isinstance(data.get(key), dict):
                data[key] = {**data[key], **value}
            else:
                data[key] = value

    try:
        return Settings(**data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid settings: {exc}") from exc
