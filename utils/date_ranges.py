"""
Calendar-day ranges shared by the availability projector and the
reconciliation sweeps.

All ranges are closed on both ends and expressed in the club calendar
(see utils.datetime_helpers.to_club_date), so a range never depends on
the timezone of whoever built it.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterator, Optional

from utils.datetime_helpers import to_club_date
from utils.errors import InvalidRangeError

ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class DateRange:
    """Closed range of calendar days [start, end]."""

    start: date
    end: date

    @classmethod
    def checked(cls, start, end) -> 'DateRange':
        """
        Build a range from user or store input.

        Args:
            start: date, datetime or ISO string
            end: date, datetime or ISO string

        Returns:
            DateRange in the club calendar

        Raises:
            InvalidRangeError: If start falls after end
        """
        start_day = to_club_date(start)
        end_day = to_club_date(end)
        if start_day > end_day:
            raise InvalidRangeError(start_day, end_day)
        return cls(start_day, end_day)

    @property
    def days(self) -> int:
        """Number of calendar days covered."""
        return (self.end - self.start).days + 1

    def __iter__(self) -> Iterator[date]:
        return iter_days(self)


def overlaps(a: DateRange, b: DateRange) -> bool:
    """True when the two ranges share at least one day."""
    return a.start <= b.end and b.start <= a.end


def contains(date_range: DateRange, instant) -> bool:
    """True when the day of `instant` lies inside the range."""
    day = to_club_date(instant)
    return date_range.start <= day <= date_range.end


def iter_days(date_range: DateRange) -> Iterator[date]:
    """Yield every day of the range in ascending order, ends included."""
    current = date_range.start
    while current <= date_range.end:
        yield current
        current += ONE_DAY


def clip(date_range: DateRange, horizon: DateRange) -> Optional[DateRange]:
    """Intersection of two ranges, or None when they are disjoint."""
    if not overlaps(date_range, horizon):
        return None
    return DateRange(max(date_range.start, horizon.start), min(date_range.end, horizon.end))


def stay_range(check_in, check_out) -> DateRange:
    """
    Occupied days of a room stay.

    The check-out day is free for the next guest, so a stay occupies
    [check_in, check_out - 1]. A same-day check-out still occupies the
    check-in day.

    Raises:
        InvalidRangeError: If check_out is before check_in
    """
    first = to_club_date(check_in)
    departure = to_club_date(check_out)
    if departure < first:
        raise InvalidRangeError(first, departure)
    return DateRange(first, max(first, departure - ONE_DAY))
