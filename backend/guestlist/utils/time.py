from datetime import datetime, timezone
from email.utils import format_datetime


def utc_now_naive() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_rfc1123(dt: datetime) -> str:
    """Format a stored (UTC naive) timestamp as e.g. `Mon, 19 Oct 2026 18:30:00 GMT`."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return format_datetime(dt.astimezone(timezone.utc), usegmt=True)
