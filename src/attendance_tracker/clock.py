"""Server clock helpers."""

from datetime import UTC, datetime


def now_ms() -> int:
    """Return the current server time in epoch milliseconds."""
    return int(datetime.now(tz=UTC).timestamp() * 1000)
