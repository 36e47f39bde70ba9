"""
Booking Service - booking confirmation orchestration.

Checks the resource and the requested days, prices the booking and derives
its payment fields before anything is written.
"""

import logging

from blueprints.club.services.accounting_service import (
    PaymentStatus,
    calculate_price,
    derive_accounting,
    to_amount,
)
from database import get_db
from models.booking import find_conflicting_bookings, insert_booking
from models.resource import get_resource_by_id
from models.resource_window import MAINTENANCE, TIME_SLOTS, list_windows
from utils.date_ranges import DateRange, stay_range

logger = logging.getLogger(__name__)


def resolve_booking_range(resource: dict, data: dict) -> DateRange:
    """
    Occupied days of a booking request.

    Rooms accept check_in/check_out (check-out day excluded); every
    resource accepts booking_date with an optional inclusive end_date.

    Raises:
        InvalidRangeError: If the dates are inverted
        ValueError: If no date was supplied
    """
    if resource['resource_type'] == 'room' and data.get('check_in'):
        return stay_range(data['check_in'], data.get('check_out') or data['check_in'])

    booking_date = data.get('booking_date')
    if not booking_date:
        raise ValueError("Field booking_date is required")
    return DateRange.checked(booking_date, data.get('end_date') or booking_date)


def confirm_booking(resource_id: int, data: dict) -> dict:
    """
    Validate and create a booking.

    Args:
        resource_id: Resource ID
        data: Request fields (booking_date/end_date or check_in/check_out,
            time_slot, pricing_type, total_price, payment_status,
            paid_amount, member_name, membership_no)

    Returns:
        dict: {'booking_id', 'total_price', 'paid_amount', 'pending_amount'}

    Raises:
        ValueError: On an unknown or inactive resource, invalid slot, or a
            conflict with another booking or a maintenance window
        InvalidRangeError: If the dates are inverted
        InvalidAccountingInputError: On invalid payment input
    """
    resource = get_resource_by_id(resource_id)
    if not resource:
        raise ValueError("Resource not found")
    if not resource['is_active']:
        raise ValueError("Resource is not bookable")

    date_range = resolve_booking_range(resource, data)

    time_slot = data.get('time_slot') or None
    if time_slot is not None:
        if resource['resource_type'] != 'hall':
            raise ValueError("Time slots apply to halls only")
        if time_slot not in TIME_SLOTS:
            raise ValueError(f"Invalid time slot: {time_slot}")

    pricing_type = data.get('pricing_type', 'member')
    if data.get('total_price') not in (None, ''):
        total_price = to_amount(data['total_price'], 'total price')
    else:
        total_price = calculate_price(resource, pricing_type, date_range)

    status = PaymentStatus.parse(data.get('payment_status', PaymentStatus.UNPAID))
    accounting = derive_accounting(status, total_price, data.get('paid_amount'))

    db = get_db()
    # The conflict check and the insert share one write lock, so two
    # requests for the same day cannot both pass the check.
    db.execute('BEGIN IMMEDIATE')
    try:
        conflicts = find_conflicting_bookings(resource_id, date_range, time_slot)
        maintenance = list_windows(resource_id, MAINTENANCE,
                                   date_range.start.isoformat(), date_range.end.isoformat())
        if conflicts or maintenance:
            days = sorted({c['booking_date'] for c in conflicts} | {m['start_date'] for m in maintenance})
            raise ValueError(f"Resource is not available on {', '.join(days)}")

        booking_id = insert_booking(
            resource_id=resource_id,
            date_range=date_range,
            pricing_type=pricing_type,
            total_price=total_price,
            payment_status=status.value,
            paid_amount=accounting.paid,
            pending_amount=accounting.owed,
            time_slot=time_slot,
            member_name=data.get('member_name'),
            membership_no=data.get('membership_no'),
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(
        "Booking %s created for resource %s (%s..%s, %s)",
        booking_id, resource_id, date_range.start, date_range.end, status.value
    )

    return {
        'booking_id': booking_id,
        'total_price': str(total_price),
        'paid_amount': str(accounting.paid),
        'pending_amount': str(accounting.owed),
    }
