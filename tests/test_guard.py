"""Tests for the free-text SQL denylist."""

import logging

import pytest

from tusker.sql.guard import SqlValidation, validate_sql


def test_plain_queries_pass() -> None:
    """Test that ordinary statements are accepted."""
    assert validate_sql("SELECT * FROM users WHERE id = 1") == SqlValidation(valid=True)
    assert validate_sql("DELETE FROM users WHERE id = 1").valid
    assert validate_sql("select 1; select 2").valid


def test_dangerous_statements_rejected() -> None:
    """Test that separators followed by destructive statements are rejected."""
    assert not validate_sql("SELECT 1; DROP TABLE users").valid
    assert not validate_sql("select 1;   truncate users").valid
    assert not validate_sql("SELECT 1; ALTER TABLE users ADD x int").valid
    assert not validate_sql("SELECT 1; DELETE FROM users").valid


def test_qualified_delete_after_separator_passes() -> None:
    """Test that a DELETE with a WHERE clause is not flagged."""
    assert validate_sql("SELECT 1; DELETE FROM users WHERE id = 3").valid


def test_comments_rejected() -> None:
    """Test that comment sequences are rejected."""
    assert not validate_sql("SELECT 1 -- trailing").valid
    assert not validate_sql("SELECT /* hidden */ 1").valid


def test_rejection_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    """Test that rejections carry an error message and are logged."""
    with caplog.at_level(logging.WARNING, logger="tusker.sql.guard"):
        result = validate_sql("x; drop table y")

    assert result.error == "Query contains potentially dangerous patterns"
    assert "Rejected SQL" in caplog.text
