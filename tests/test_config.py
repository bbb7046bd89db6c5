"""Tests for settings loading."""

from pathlib import Path

import pytest

from tusker.config import DEFAULTS_FILE, SETTINGS, load_settings


def test_packaged_defaults() -> None:
    """Test the values shipped in the packaged defaults file."""
    assert DEFAULTS_FILE.exists()
    assert SETTINGS["display"]["large_value_threshold"] == 500
    assert SETTINGS["display"]["truncate_length"] == 100
    assert SETTINGS["migration"]["lock_timeout_ms"] == 5000
    assert SETTINGS["migration"]["statement_timeout_ms"] == 30000


def test_load_alternative_file(tmp_path: Path) -> None:
    """Test loading settings from another TOML file."""
    location = tmp_path / "settings.toml"
    location.write_text(
        """
        [display]
        large_value_threshold = 50
        truncate_length = 10
        ellipsis = "..."

        [migration]
        lock_timeout_ms = 100
        statement_timeout_ms = 200
        """,
    )

    settings = load_settings(location)

    assert settings["display"]["ellipsis"] == "..."
    assert settings["migration"]["statement_timeout_ms"] == 200


def test_missing_section(tmp_path: Path) -> None:
    """Test that a file without the migration section is rejected."""
    location = tmp_path / "settings.toml"
    location.write_text("[display]\ntruncate_length = 10\n")

    with pytest.raises(ValueError, match="migration"):
        load_settings(location)
