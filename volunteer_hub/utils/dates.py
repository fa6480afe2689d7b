from datetime import datetime, timedelta, timezone

# Timestamps are stored as sortable UTC text so string comparison matches time order.
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_ts(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)


def now_ts() -> str:
    return format_ts(utc_now())


def ts_in(days: int = 0, seconds: int = 0) -> str:
    return format_ts(utc_now() + timedelta(days=days, seconds=seconds))
