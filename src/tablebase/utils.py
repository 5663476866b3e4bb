from datetime import UTC, datetime
from uuid import UUID


def truncate_to_millis(value: datetime) -> datetime:
    """Drop sub-millisecond precision, which BSON dates cannot hold."""
    return value.replace(microsecond=value.microsecond // 1000 * 1000)


def now() -> datetime:
    return truncate_to_millis(datetime.now(UTC))


def parse_uuid(value: object) -> UUID | None:
    """Parse a reference id stored as a JSON string, None when it is not a UUID."""
    if isinstance(value, UUID):
        return value
    if not isinstance(value, str):
        return None
    try:
        return UUID(value)
    except ValueError:
        return None
