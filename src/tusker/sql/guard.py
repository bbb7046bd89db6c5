"""Heuristic denylist for free-text SQL entry.

This is a secondary guard only. Generated statements are safe because of the
literal escaping in tusker.sql.literals, not because of this check.
"""

import re
from logging import getLogger
from typing import NamedTuple

logger = getLogger(__name__)

DANGEROUS_PATTERNS = (
    re.compile(r";\s*drop\s+", re.IGNORECASE),
    re.compile(r";\s*delete\s+from\s+(?!.*where)", re.IGNORECASE),
    re.compile(r";\s*truncate\s+", re.IGNORECASE),
    re.compile(r";\s*alter\s+", re.IGNORECASE),
    re.compile(r"--"),
    re.compile(r"/\*"),
)


class SqlValidation(NamedTuple):
    """Outcome of validating a SQL string."""

    valid: bool
    error: str | None = None


def validate_sql(sql: str) -> SqlValidation:
    """Reject SQL containing obviously dangerous patterns."""
    for pattern in DANGEROUS_PATTERNS:
        if pattern.search(sql):
            logger.warning("Rejected SQL matching %s", pattern.pattern)
            return SqlValidation(
                valid=False,
                error="Query contains potentially dangerous patterns",
            )
    return SqlValidation(valid=True)
