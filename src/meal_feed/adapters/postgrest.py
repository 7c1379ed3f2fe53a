"""Helpers for building PostgREST filters and reading embedded rows."""

from datetime import UTC, datetime

# Characters with meaning inside a PostgREST or=(...) filter, plus the
# LIKE escape character itself.
_RESERVED = str.maketrans({char: " " for char in ",()%*\\"})


def ilike_pattern(query: str) -> str:
    """Return a contains-pattern for ilike that matches the query literally.

    Reserved characters are removed and the ``_`` wildcard is escaped.
    """
    literal = query.translate(_RESERVED).strip().replace("_", "\\_")
    return f"%{literal}%"


def embedded_count(value: object) -> int:
    """Read an aggregated count such as ``meal_likes: [{"count": 3}]``."""
    if isinstance(value, list):
        value = value[0] if value else None
    if isinstance(value, dict):
        count = value.get("count")
        return int(count) if count is not None else 0
    return 0


def embedded_row(value: object) -> dict[str, object] | None:
    """Read a to-one embedded resource, which may come back as a list."""
    if isinstance(value, list):
        value = value[0] if value else None
    return value if isinstance(value, dict) else None


def parse_timestamp(raw: object) -> datetime | None:
    """Parse an ISO timestamp, assuming UTC when no offset is given."""
    if not isinstance(raw, str) or not raw:
        return None
    parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed
