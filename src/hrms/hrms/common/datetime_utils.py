from __future__ import annotations

from datetime import date, datetime, time, tzinfo
from typing import Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..core.exceptions import MalformedTimestamp, ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid date {value!r}, expected YYYY-MM-DD") from e


def get_zone(name: Optional[str]) -> Optional[tzinfo]:
    """Resolve the policy-local zone. Empty name means naive local wall-clock time."""
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except ZoneInfoNotFoundError as e:
        raise ValidationError(f"Unknown time zone {name!r}") from e


def now_local(tz: Optional[tzinfo] = None) -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(tz) if tz else datetime.now()


def to_local(instant: datetime, tz: Optional[tzinfo] = None) -> datetime:
    """Aware instants are moved into the policy zone; naive ones are already local."""
    if tz is not None and instant.tzinfo is not None:
        return instant.astimezone(tz)
    return instant


def to_naive_local(instant: datetime, tz: Optional[tzinfo] = None) -> datetime:
    """Wall-clock value stored in DATETIME columns (no offset kept)."""
    if instant.tzinfo is None:
        return instant
    local = instant.astimezone(tz) if tz is not None else instant.astimezone()
    return local.replace(tzinfo=None)


def parse_hhmm(value: str) -> int:
    """Parse an HH:MM (or HH:MM:SS) wall-clock value into minutes since midnight."""
    if isinstance(value, time):
        return value.hour * 60 + value.minute

    parts = str(value or "").strip().split(":")
    if len(parts) not in (2, 3):
        raise MalformedTimestamp(f"Invalid time {value!r}, expected HH:MM")
    try:
        hours, minutes = int(parts[0]), int(parts[1])
    except ValueError as e:
        raise MalformedTimestamp(f"Invalid time {value!r}, expected HH:MM") from e
    if not (0 <= hours < 24 and 0 <= minutes < 60):
        raise MalformedTimestamp(f"Invalid time {value!r}, expected HH:MM")
    return hours * 60 + minutes


def format_hhmm(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def parse_timestamp(value: Union[str, datetime, None]) -> datetime:
    """Parse an ISO-8601 instant. A trailing 'Z' is accepted as UTC."""
    if isinstance(value, datetime):
        return value
    if value is None or value == "":
        raise MalformedTimestamp("Timestamp is required")
    if not isinstance(value, str):
        raise MalformedTimestamp(f"Invalid timestamp {value!r}, expected an ISO-8601 string")

    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError as e:
        raise MalformedTimestamp(f"Invalid timestamp {value!r}") from e


def combine_on_date(work_date: date, value: Union[str, datetime]) -> datetime:
    """Accept either a wall-clock time (HH:MM[:SS]) for ``work_date`` or a full timestamp."""
    if isinstance(value, datetime):
        return value

    text = str(value or "").strip()
    if "T" in text or len(text) > 8:
        return parse_timestamp(text)

    parts = text.split(":")
    minutes = parse_hhmm(text)
    seconds = 0
    if len(parts) == 3:
        try:
            seconds = int(parts[2])
        except ValueError as e:
            raise MalformedTimestamp(f"Invalid time {value!r}") from e
        if not 0 <= seconds < 60:
            raise MalformedTimestamp(f"Invalid time {value!r}")
    return datetime.combine(work_date, time(minutes // 60, minutes % 60, seconds))
