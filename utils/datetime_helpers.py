"""Timezone-aware date/time helpers for the club calendar."""

from datetime import date, datetime
from zoneinfo import ZoneInfo

from flask import current_app, has_app_context

DEFAULT_TIMEZONE = 'Asia/Karachi'


def get_timezone() -> ZoneInfo:
    """Get the configured timezone."""
    tz_name = DEFAULT_TIMEZONE
    if has_app_context():
        tz_name = current_app.config.get('TIMEZONE', DEFAULT_TIMEZONE)
    return ZoneInfo(tz_name)


def get_today() -> date:
    """Get today's date in the configured timezone."""
    return datetime.now(get_timezone()).date()


def get_now() -> datetime:
    """Get current datetime in the configured timezone."""
    return datetime.now(get_timezone())


def to_club_date(value) -> date:
    """
    Truncate a value to a calendar day of the club calendar.

    Aware datetimes are converted to the club timezone before the time of day
    is dropped; naive datetimes are taken as already club-local.

    Args:
        value: date, datetime or ISO string (YYYY-MM-DD or full ISO datetime)

    Returns:
        date in the club calendar

    Raises:
        ValueError: If a string cannot be parsed
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(get_timezone())
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if len(text) == 10:
            return date.fromisoformat(text)
        return to_club_date(datetime.fromisoformat(text))
    raise ValueError(f"Unsupported date value: {value!r}")


def to_club_datetime(value: datetime) -> datetime:
    """Attach or convert a datetime to the club timezone."""
    if value.tzinfo is None:
        return value.replace(tzinfo=get_timezone())
    return value.astimezone(get_timezone())
