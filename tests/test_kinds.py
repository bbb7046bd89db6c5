"""Tests for data type classification."""

from tusker.codec.kinds import KindRegistry, ValueKind, base_type, classify


def test_base_type_strips_modifiers() -> None:
    """Test that type modifiers and extra whitespace are removed."""
    assert base_type("NUMERIC(10, 2)") == "numeric"
    assert base_type("character   varying(255)") == "character varying"
    assert base_type("  Timestamp(3) With Time Zone ") == "timestamp with time zone"


def test_classify_scalar_types() -> None:
    """Test classification of common scalar types."""
    assert classify("integer") is ValueKind.INTEGER
    assert classify("bigserial") is ValueKind.INTEGER
    assert classify("numeric(10,2)") is ValueKind.FLOAT
    assert classify("double precision") is ValueKind.FLOAT
    assert classify("boolean") is ValueKind.BOOLEAN
    assert classify("jsonb") is ValueKind.JSON
    assert classify("character varying(20)") is ValueKind.TEXT
    assert classify("uuid") is ValueKind.TEXT


def test_classify_temporal_types() -> None:
    """Test classification of date and time types."""
    assert classify("date") is ValueKind.DATE
    assert classify("time without time zone") is ValueKind.TIME
    assert classify("timestamp with time zone") is ValueKind.TIMESTAMP
    assert classify("timestamptz") is ValueKind.TIMESTAMP


def test_classify_array_types_win_over_element_type() -> None:
    """Test that array notations classify as arrays regardless of element type."""
    assert classify("integer[]") is ValueKind.ARRAY
    assert classify("text[]") is ValueKind.ARRAY
    assert classify("_int4") is ValueKind.ARRAY
    assert classify("ARRAY") is ValueKind.ARRAY


def test_registry_priority() -> None:
    """Test that higher priority rules are consulted first."""
    registry = KindRegistry()
    registry.prefix("int", ValueKind.INTEGER, priority=10)
    registry.exact("interval", kind=ValueKind.TEXT, priority=90)

    assert registry.kind("interval") is ValueKind.TEXT
    assert registry.kind("int4") is ValueKind.INTEGER
    assert registry.kind("money") is ValueKind.TEXT
