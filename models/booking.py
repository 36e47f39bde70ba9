"""
Booking data access functions.
Handles booking persistence, conflict lookups, payment fields and cancellation.
"""

from typing import Optional

from database import get_db
from utils.date_ranges import DateRange
from utils.datetime_helpers import get_now

PRICING_TYPES = ('member', 'guest')


def get_booking_by_id(booking_id: int) -> Optional[dict]:
    """
    Get booking by ID.

    Args:
        booking_id: Booking ID

    Returns:
        Booking dict with resource name, or None if not found
    """
    db = get_db()
    cursor = db.execute('''
        SELECT b.*, r.name as resource_name, r.resource_type
        FROM bookings b
        JOIN resources r ON b.resource_id = r.id
        WHERE b.id = ?
    ''', (booking_id,))
    row = cursor.fetchone()
    return dict(row) if row else None


def list_bookings(resource_id: int, date_from: str = None, date_to: str = None,
                  include_cancelled: bool = False) -> list:
    """
    Get bookings of a resource whose occupied days intersect a date range.

    Args:
        resource_id: Resource ID
        date_from: Optional first day of the range
        date_to: Optional last day of the range
        include_cancelled: Include logically deleted bookings

    Returns:
        list: Bookings ordered by first day then ID
    """
    db = get_db()
    query = 'SELECT * FROM bookings WHERE resource_id = ?'
    params = [resource_id]

    if not include_cancelled:
        query += ' AND is_cancelled = 0'

    if date_from:
        query += ' AND end_date >= ?'
        params.append(str(date_from))

    if date_to:
        query += ' AND booking_date <= ?'
        params.append(str(date_to))

    query += ' ORDER BY booking_date, id'

    cursor = db.execute(query, params)
    return [dict(row) for row in cursor.fetchall()]


def find_conflicting_bookings(resource_id: int, date_range: DateRange, time_slot: str = None) -> list:
    """
    Active bookings that would collide with a new booking.

    Two hall bookings on the same day only collide when they share a slot;
    a booking without a slot takes the whole day.

    Returns:
        list: Conflicting booking dicts
    """
    query = '''
        SELECT id, booking_date, end_date, time_slot
        FROM bookings
        WHERE resource_id = ?
          AND is_cancelled = 0
          AND booking_date <= ?
          AND end_date >= ?
    '''
    params = [resource_id, date_range.end.isoformat(), date_range.start.isoformat()]

    if time_slot:
        query += ' AND (time_slot IS NULL OR time_slot = ?)'
        params.append(time_slot)

    query += ' ORDER BY booking_date'

    cursor = get_db().execute(query, params)
    return [dict(row) for row in cursor.fetchall()]


def create_booking(
    resource_id: int,
    date_range: DateRange,
    pricing_type: str,
    total_price,
    payment_status: str,
    paid_amount,
    pending_amount,
    time_slot: str = None,
    member_name: str = None,
    membership_no: str = None
) -> int:
    """
    Insert a booking and commit.

    Payment fields must already be derived by the accounting service.
    Callers that check conflicts first use insert_booking inside their own
    write transaction instead.

    Returns:
        int: New booking ID

    Raises:
        ValueError: If pricing type is invalid
    """
    with get_db():
        return insert_booking(
            resource_id, date_range, pricing_type, total_price, payment_status,
            paid_amount, pending_amount, time_slot, member_name, membership_no
        )


def insert_booking(
    resource_id: int,
    date_range: DateRange,
    pricing_type: str,
    total_price,
    payment_status: str,
    paid_amount,
    pending_amount,
    time_slot: str = None,
    member_name: str = None,
    membership_no: str = None
) -> int:
    """
    Insert a booking in the caller's transaction; does not commit.

    Returns:
        int: New booking ID

    Raises:
        ValueError: If pricing type is invalid
    """
    if pricing_type not in PRICING_TYPES:
        raise ValueError(f"Invalid pricing type: {pricing_type}")

    cursor = get_db().execute('''
        INSERT INTO bookings
        (resource_id, booking_date, end_date, time_slot, member_name, membership_no,
         pricing_type, total_price, payment_status, paid_amount, pending_amount)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
    ''', (resource_id, date_range.start.isoformat(), date_range.end.isoformat(), time_slot,
          member_name, membership_no, pricing_type, str(total_price), payment_status,
          str(paid_amount), str(pending_amount)))
    return cursor.lastrowid


def update_booking_payment(booking_id: int, payment_status: str, paid_amount, pending_amount) -> bool:
    """
    Persist derived payment fields.

    Returns:
        bool: True if the booking was updated
    """
    with get_db() as conn:
        cursor = conn.execute('''
            UPDATE bookings
            SET payment_status = ?, paid_amount = ?, pending_amount = ?,
                updated_at = CURRENT_TIMESTAMP
            WHERE id = ?
        ''', (payment_status, str(paid_amount), str(pending_amount), booking_id))
        return cursor.rowcount > 0


def cancel_booking(booking_id: int) -> bool:
    """
    Logically delete a booking.

    Cancelled bookings stay in the table for accounting history but are
    excluded from availability.

    Returns:
        bool: True if an active booking was cancelled
    """
    cancelled_at = get_now().replace(tzinfo=None).isoformat(timespec='seconds')
    with get_db() as conn:
        cursor = conn.execute('''
            UPDATE bookings
            SET is_cancelled = 1, cancelled_at = ?, updated_at = CURRENT_TIMESTAMP
            WHERE id = ? AND is_cancelled = 0
        ''', (cancelled_at, booking_id))
        return cursor.rowcount > 0
