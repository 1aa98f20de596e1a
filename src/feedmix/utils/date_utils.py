from datetime import UTC, date, datetime

OLDEST = datetime.min.replace(tzinfo=UTC)

# Placeholder for records that arrive without a date; sorts below any dated item.
UNKNOWN_DATE = "1970-01-01T00:00:00Z"


def parse_item_date(value: str | None) -> datetime:
    """Parse an ISO-8601 date or timestamp into an aware UTC datetime.

    Date-only values ("2024-01-15") resolve to midnight UTC and naive timestamps are
    taken as UTC. Missing or unparseable values return OLDEST so they sort last in a
    newest-first ordering.
    """
    if not value:
        return OLDEST
    try:
        parsed = datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))
    except (TypeError, ValueError):
        return OLDEST
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def release_year(value: str | None) -> int | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10]).year
    except ValueError:
        return None


def isoformat_utc(moment: datetime) -> str:
    return moment.astimezone(UTC).isoformat().replace("+00:00", "Z")


def format_time_ago(timestamp: str, now: datetime | None = None) -> str:
    """Render a timestamp relative to now: "Just now", "5m ago", "3h ago", "2d ago"."""
    current = now or datetime.now(UTC)
    moment = parse_item_date(timestamp)
    if moment == OLDEST:
        return "Unknown"

    minutes = int((current - moment).total_seconds() // 60)
    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return f"{minutes}m ago"

    hours = minutes // 60
    if hours < 24:
        return f"{hours}h ago"

    return f"{hours // 24}d ago"
