"""Module for loading engine settings."""

from pathlib import Path
from tomllib import load
from typing import TypedDict


class DisplaySettings(TypedDict):
    """Cell display limits."""

    large_value_threshold: int
    truncate_length: int
    ellipsis: str


class MigrationSettings(TypedDict):
    """Default timeouts sent with a migration batch."""

    lock_timeout_ms: int
    statement_timeout_ms: int


class Settings(TypedDict):
    """Engine settings."""

    display: DisplaySettings
    migration: MigrationSettings


DEFAULTS_FILE = Path(__file__).parent / "defaults.toml"


def load_settings(location: Path = DEFAULTS_FILE) -> Settings:
    """Load settings from the given TOML file."""
    with location.open("rb") as f:
        settings: Settings = load(f)  # pyright: ignore[reportAssignmentType]

    for section in ("display", "migration"):
        if section not in settings:
            msg = f"Missing settings section: {section}"
            raise ValueError(msg)
    return settings


SETTINGS = load_settings()
