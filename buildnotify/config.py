"""Configuration management with Pydantic Settings + optional YAML."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict

CONFIG_FILENAME = "config.yaml"


class Recipient(BaseModel):
    """Where the message goes: a direct message to a user, or a channel."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["user", "channel"]
    name: str

    @classmethod
    def from_options(cls, user: str = "", channel: str = "") -> Recipient | None:
        # A direct user wins over a channel when both are given
        if user:
            return cls(kind="user", name=user)
        if channel:
            return cls(kind="channel", name=channel)
        return None


class NotifyConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    webhook: str = ""
    recipient: Recipient | None = None
    username: str = ""
    template: str = ""
    fallback: str = ""
    color: str = ""
    image_url: str = ""
    icon_url: str = ""
    icon_emoji: str = ""
    host_internal: str = ""
    host_external: str = ""
    link_names: bool = False
    timeout: float = 30.0


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="BUILDNOTIFY_",
        case_sensitive=False,
    )

    log_level: str = "INFO"
    log_json: bool = False
    http_timeout: float = 30.0
    dry_run: bool = False


def default_config_dir() -> Path:
    env = os.environ.get("BUILDNOTIFY_CONFIG_DIR")
    if env:
        return Path(env)
    if sys.platform == "win32":
        return Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming")) / "buildnotify"
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")) / "buildnotify"


def load_settings(config_path: str | Path | None = None) -> Settings:
    """Load settings from env vars, optionally overlaying a YAML config."""
    yaml_data: dict[str, Any] = {}

    # Determine config file path
    if config_path is None:
        config_path = os.environ.get("BUILDNOTIFY_CONFIG")
    if config_path is None:
        default = default_config_dir() / CONFIG_FILENAME
        if default.exists():
            config_path = default

    if config_path is not None:
        path = Path(config_path)
        if path.exists():
            with open(path) as f:
                yaml_data = yaml.safe_load(f) or {}

    # Init kwargs outrank env vars in pydantic-settings, so drop keys the env sets
    env_keys = {k.upper() for k in os.environ}
    for key in list(yaml_data):
        if f"BUILDNOTIFY_{key}".upper() in env_keys:
            yaml_data.pop(key)

    return Settings(**yaml_data)
