"""Runtime settings for PulseMind.

Settings come from an optional YAML file (``~/.pulsemind/config.yaml`` by
default) with environment variables layered on top:

- ``PULSEMIND_HOME`` -- root directory for all JSON stores and audit logs
- ``PULSEMIND_OPERATOR_EMAIL`` -- email of the operator account
- ``PULSEMIND_OPERATOR_PASSWORD`` -- seeds the operator account at startup
- ``PULSEMIND_SESSION_HOURS`` -- lifetime of bearer session tokens
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_HOME = Path.home() / ".pulsemind"
DEFAULT_OPERATOR_EMAIL = "admin@pulsemind.com"


@dataclass
class Settings:
    """Resolved configuration for stores, sessions and the operator account."""

    home_dir: Path = field(default_factory=lambda: DEFAULT_HOME)
    operator_email: str = DEFAULT_OPERATOR_EMAIL
    operator_password: Optional[str] = None
    session_hours: int = 24
    max_message_length: int = 500

    def __post_init__(self) -> None:
        if isinstance(self.home_dir, str):
            self.home_dir = Path(self.home_dir).expanduser()

    def area(self, name: str) -> Path:
        """Return the directory for one storage area (``auth``, ``trust``...)."""
        return self.home_dir / name


def load_settings(path: str | Path | None = None) -> Settings:
    """Load settings from YAML (if present), then apply environment overrides."""
    config_path = Path(path) if path else DEFAULT_HOME / "config.yaml"

    data: dict = {}
    if config_path.exists():
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

    settings = Settings(
        home_dir=data.get("home_dir", DEFAULT_HOME),
        operator_email=data.get("operator_email", DEFAULT_OPERATOR_EMAIL),
        operator_password=data.get("operator_password"),
        session_hours=int(data.get("session_hours", 24)),
        max_message_length=int(data.get("max_message_length", 500)),
    )

    home = os.environ.get("PULSEMIND_HOME")
    if home:
        settings.home_dir = Path(home).expanduser()
    operator = os.environ.get("PULSEMIND_OPERATOR_EMAIL")
    if operator:
        settings.operator_email = operator
    operator_password = os.environ.get("PULSEMIND_OPERATOR_PASSWORD")
    if operator_password:
        settings.operator_password = operator_password
    hours = os.environ.get("PULSEMIND_SESSION_HOURS")
    if hours:
        settings.session_hours = int(hours)

    return settings


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the process-wide settings, loading them on first use."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings
