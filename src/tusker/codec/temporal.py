"""Date, time and timestamp parsing for editor input.

Parsing is tolerant: empty or invalid input yields None instead of raising, so
the caller can decide whether to keep the raw text or clear the cell.
"""

from datetime import date, datetime, time

from tusker.codec.kinds import ValueKind, classify

DATE_FORMATS = (
    "%d/%m/%Y",  # DD/MM/YYYY: 30/03/2026
    "%m/%d/%Y",  # MM/DD/YYYY: 03/30/2026
    "%d-%m-%Y",  # DD-MM-YYYY: 30-03-2026
    "%Y/%m/%d",  # YYYY/MM/DD: 2026/03/30
)

TIME_FORMATS = (
    "%H:%M",
    "%I:%M %p",
    "%I:%M:%S %p",
)

TIMESTAMP_FORMATS = (
    "%d/%m/%Y %H:%M:%S",
    "%m/%d/%Y %H:%M:%S",
    "%Y/%m/%d %H:%M:%S",
)


def _clean(text: str | None) -> str | None:
    """Strip input, mapping empty text and the literal null to None."""
    if text is None or not text.strip() or text.strip().lower() == "null":
        return None
    return text.strip()


def parse_date(text: str | None) -> date | None:
    """Parse a date, trying ISO format first and then common fallbacks."""
    if (value := _clean(text)) is None:
        return None

    try:
        return date.fromisoformat(value)
    except ValueError:
        pass

    # A full timestamp still names a date
    try:
        return datetime.fromisoformat(value).date()
    except ValueError:
        pass

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()  # noqa: DTZ007
        except ValueError:
            continue
    return None


def parse_time(text: str | None) -> time | None:
    """Parse a time of day, ignoring anything below whole seconds."""
    if (value := _clean(text)) is None:
        return None

    try:
        return time.fromisoformat(value).replace(microsecond=0)
    except ValueError:
        pass

    for fmt in TIME_FORMATS:
        try:
            return datetime.strptime(value, fmt).time()  # noqa: DTZ007
        except ValueError:
            continue
    return None


def parse_timestamp(text: str | None) -> datetime | None:
    """Parse a timestamp, keeping any UTC offset present in the input."""
    if (value := _clean(text)) is None:
        return None

    # Fast path: ISO 8601, with either T or a space as separator
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        pass

    for fmt in TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(value, fmt)  # noqa: DTZ007
        except ValueError:
            continue

    # Date-only input means midnight
    if parsed_date := parse_date(value):
        return datetime.combine(parsed_date, time.min)
    return None


def format_date(value: date) -> str:
    """Format a date as YYYY-MM-DD."""
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat()


def format_time(value: time | datetime) -> str:
    """Format a time as HH:MM:SS."""
    return value.strftime("%H:%M:%S")


def format_timestamp(value: datetime) -> str:
    """Format a timestamp as ISO 8601."""
    return value.isoformat()


def normalize_temporal(text: str | None, data_type: str) -> str | None:
    """Canonicalize editor input for a temporal column, or None when invalid.

    Text for non-temporal columns is returned unchanged.
    """
    match classify(data_type):
        case ValueKind.DATE:
            parsed_date = parse_date(text)
            return format_date(parsed_date) if parsed_date else None
        case ValueKind.TIME:
            parsed_time = parse_time(text)
            return format_time(parsed_time) if parsed_time else None
        case ValueKind.TIMESTAMP:
            parsed = parse_timestamp(text)
            return format_timestamp(parsed) if parsed else None
        case _:
            return text
