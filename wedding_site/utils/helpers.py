from datetime import datetime, timezone


def now_iso():
    """Current UTC time as ISO-8601 with millisecond precision, e.g. 2025-11-21T18:30:00.000Z."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def is_blank(value):
    return not isinstance(value, str) or not value.strip()
