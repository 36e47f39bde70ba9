"""
Availability projection for bookable resources.
Merges bookings, reservation windows and maintenance windows into one
status per calendar day.

Precedence, strongest first: OUT_OF_ORDER > BOOKED > RESERVED > AVAILABLE.
Maintenance is an operator override, and a booking is realized occupancy
so it outranks a reservation on the same day.
"""

import sqlite3
from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from typing import Optional

from database import get_db
from models.resource_window import MAINTENANCE, RESERVATION, TIME_SLOTS
from utils.date_ranges import DateRange, clip, iter_days
from utils.errors import ResourceNotFoundError, StoreUnavailableError

AVAILABLE = 'AVAILABLE'
RESERVED = 'RESERVED'
BOOKED = 'BOOKED'
OUT_OF_ORDER = 'OUT_OF_ORDER'

PRECEDENCE = {
    AVAILABLE: 0,
    RESERVED: 1,
    BOOKED: 2,
    OUT_OF_ORDER: 3,
}


@dataclass(frozen=True)
class DateStatus:
    """Status of one resource on one day, with the record that produced it."""

    date: date
    status: str
    origin_id: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            'date': self.date.isoformat(),
            'status': self.status,
            'origin_id': self.origin_id,
        }


# =============================================================================
# PURE MERGE
# =============================================================================

def merge_date_statuses(horizon: DateRange, bookings: list, reservations: list,
                        maintenance: list) -> list:
    """
    Label every day of the horizon.

    Sources may overlap each other and themselves; each day ends up with
    exactly one label, the strongest one that covers it. Between sources of
    the same label the lowest ID is kept as origin.

    Args:
        horizon: Days to label
        bookings: Dicts with id, booking_date, end_date
        reservations: Window dicts with id, start_date, end_date
        maintenance: Window dicts with id, start_date, end_date

    Returns:
        list[DateStatus]: One entry per day, ascending
    """
    labels = {}

    def mark(start, end, status, origin_id):
        covered = clip(DateRange.checked(start, end), horizon)
        if covered is None:
            return
        for day in iter_days(covered):
            current = labels.get(day)
            if current is None or PRECEDENCE[status] > PRECEDENCE[current[0]]:
                labels[day] = (status, origin_id)

    for booking in sorted(bookings, key=lambda b: b['id']):
        mark(booking['booking_date'], booking['end_date'], BOOKED, booking['id'])

    for window in sorted(reservations, key=lambda w: w['id']):
        mark(window['start_date'], window['end_date'], RESERVED, window['id'])

    for window in sorted(maintenance, key=lambda w: w['id']):
        mark(window['start_date'], window['end_date'], OUT_OF_ORDER, window['id'])

    result = []
    for day in iter_days(horizon):
        status, origin_id = labels.get(day, (AVAILABLE, None))
        result.append(DateStatus(day, status, origin_id))
    return result


# =============================================================================
# STORE-BACKED PROJECTION
# =============================================================================

def project(resource_id: int, horizon_start, horizon_end) -> list:
    """
    Day-by-day status of a resource over a horizon.

    Past days are included; hiding them is a presentation concern.

    Args:
        resource_id: Resource ID
        horizon_start: First day (date, datetime or ISO string)
        horizon_end: Last day (inclusive)

    Returns:
        list[DateStatus]: One entry per day of the horizon

    Raises:
        InvalidRangeError: If horizon_start is after horizon_end
        ResourceNotFoundError: If the resource does not exist
        StoreUnavailableError: If the store cannot be read
    """
    horizon = DateRange.checked(horizon_start, horizon_end)

    try:
        db = get_db()
        exists = db.execute('SELECT 1 FROM resources WHERE id = ?', (resource_id,)).fetchone()
        if not exists:
            raise ResourceNotFoundError(resource_id)

        bookings = _fetch_bookings([resource_id], horizon)
        windows = _fetch_windows([resource_id], horizon)
    except sqlite3.DatabaseError as e:
        raise StoreUnavailableError(str(e)) from e

    return merge_date_statuses(
        horizon,
        bookings,
        [w for w in windows if w['kind'] == RESERVATION],
        [w for w in windows if w['kind'] == MAINTENANCE],
    )


def get_availability_map(date_from, date_to, resource_type: str = None) -> dict:
    """
    Projection for every active resource, with a per-day summary.

    Args:
        date_from: First day
        date_to: Last day (inclusive)
        resource_type: Filter by type (room, hall, lawn)

    Returns:
        dict: {
            'resources': [{'id', 'name', 'resource_type', 'category'}],
            'dates': ['YYYY-MM-DD', ...],
            'availability': {resource_id: [DateStatus dict, ...]},
            'summary': {
                'YYYY-MM-DD': {
                    'total': int, 'available': int, 'booked': int,
                    'reserved': int, 'out_of_order': int,
                    'occupancy_rate': float
                }
            }
        }

    Raises:
        InvalidRangeError: If date_from is after date_to
        StoreUnavailableError: If the store cannot be read
    """
    horizon = DateRange.checked(date_from, date_to)

    try:
        query = '''
            SELECT id, name, resource_type, category
            FROM resources
            WHERE is_active = 1
        '''
        params = []
        if resource_type:
            query += ' AND resource_type = ?'
            params.append(resource_type)
        query += ' ORDER BY resource_type, name'

        resources = [dict(row) for row in get_db().execute(query, params).fetchall()]
        resource_ids = [r['id'] for r in resources]

        if not resource_ids:
            return {'resources': [], 'dates': [], 'availability': {}, 'summary': {}}

        bookings_by_resource = defaultdict(list)
        for booking in _fetch_bookings(resource_ids, horizon):
            bookings_by_resource[booking['resource_id']].append(booking)

        windows_by_resource = defaultdict(list)
        for window in _fetch_windows(resource_ids, horizon):
            windows_by_resource[window['resource_id']].append(window)
    except sqlite3.DatabaseError as e:
        raise StoreUnavailableError(str(e)) from e

    dates = [day.isoformat() for day in iter_days(horizon)]
    summary = {
        d: {'total': len(resource_ids), 'available': 0, 'booked': 0, 'reserved': 0, 'out_of_order': 0}
        for d in dates
    }
    availability = {}

    for resource_id in resource_ids:
        windows = windows_by_resource[resource_id]
        statuses = merge_date_statuses(
            horizon,
            bookings_by_resource[resource_id],
            [w for w in windows if w['kind'] == RESERVATION],
            [w for w in windows if w['kind'] == MAINTENANCE],
        )
        availability[resource_id] = [s.to_dict() for s in statuses]
        for s in statuses:
            summary[s.date.isoformat()][s.status.lower()] += 1

    for d in dates:
        total = summary[d]['total']
        bookable = total - summary[d]['out_of_order']
        summary[d]['occupancy_rate'] = round(summary[d]['booked'] / bookable * 100, 1) if bookable > 0 else 0

    return {
        'resources': resources,
        'dates': dates,
        'availability': availability,
        'summary': summary
    }


def get_hall_slot_availability(resource_id: int, date_from, date_to) -> list:
    """
    Per-day time-slot availability of a hall.

    A day is disabled when the hall is out of order or when every slot is
    taken by a booking or a reservation window. A booking or reservation
    without a slot takes the whole day.

    Returns:
        list: [{'date': str, 'unavailable_slots': [...], 'disabled': bool}]

    Raises:
        InvalidRangeError: If date_from is after date_to
        ResourceNotFoundError: If the resource does not exist
        StoreUnavailableError: If the store cannot be read
    """
    horizon = DateRange.checked(date_from, date_to)

    try:
        exists = get_db().execute('SELECT 1 FROM resources WHERE id = ?', (resource_id,)).fetchone()
        if not exists:
            raise ResourceNotFoundError(resource_id)
        bookings = _fetch_bookings([resource_id], horizon)
        windows = _fetch_windows([resource_id], horizon)
    except sqlite3.DatabaseError as e:
        raise StoreUnavailableError(str(e)) from e

    taken = defaultdict(set)
    out_of_order = set()

    def covered_days(start, end):
        covered = clip(DateRange.checked(start, end), horizon)
        return iter_days(covered) if covered else ()

    for booking in bookings:
        slots = {booking['time_slot']} if booking['time_slot'] else set(TIME_SLOTS)
        for day in covered_days(booking['booking_date'], booking['end_date']):
            taken[day] |= slots

    for window in windows:
        if window['kind'] == MAINTENANCE:
            out_of_order.update(covered_days(window['start_date'], window['end_date']))
            continue
        slots = {window['time_slot']} if window['time_slot'] else set(TIME_SLOTS)
        for day in covered_days(window['start_date'], window['end_date']):
            taken[day] |= slots

    result = []
    for day in iter_days(horizon):
        disabled = day in out_of_order or taken[day] >= set(TIME_SLOTS)
        unavailable = list(TIME_SLOTS) if disabled else [s for s in TIME_SLOTS if s in taken[day]]
        result.append({
            'date': day.isoformat(),
            'unavailable_slots': unavailable,
            'disabled': disabled,
        })
    return result


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def _fetch_bookings(resource_ids: list, horizon: DateRange) -> list:
    placeholders = ','.join('?' * len(resource_ids))
    cursor = get_db().execute(f'''
        SELECT id, resource_id, booking_date, end_date, time_slot
        FROM bookings
        WHERE resource_id IN ({placeholders})
          AND is_cancelled = 0
          AND booking_date <= ?
          AND end_date >= ?
    ''', list(resource_ids) + [horizon.end.isoformat(), horizon.start.isoformat()])
    return [dict(row) for row in cursor.fetchall()]


def _fetch_windows(resource_ids: list, horizon: DateRange) -> list:
    placeholders = ','.join('?' * len(resource_ids))
    cursor = get_db().execute(f'''
        SELECT id, resource_id, kind, start_date, end_date, time_slot
        FROM resource_windows
        WHERE resource_id IN ({placeholders})
          AND start_date <= ?
          AND end_date >= ?
    ''', list(resource_ids) + [horizon.end.isoformat(), horizon.start.isoformat()])
    return [dict(row) for row in cursor.fetchall()]
