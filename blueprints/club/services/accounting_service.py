"""
Accounting Service - payment state of bookings.

Handles:
- Deriving paid/owed amounts from a payment status
- Booking price calculation from resource tariffs
- Persisting and re-verifying a booking's payment fields
"""

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum

from models.booking import get_booking_by_id, update_booking_payment
from utils.date_ranges import DateRange
from utils.errors import InvalidAccountingInputError

logger = logging.getLogger(__name__)

ZERO = Decimal('0')


class PaymentStatus(str, Enum):
    """Closed set of booking payment states."""

    UNPAID = 'UNPAID'
    HALF_PAID = 'HALF_PAID'
    PAID = 'PAID'
    TO_BILL = 'TO_BILL'

    @classmethod
    def parse(cls, value) -> 'PaymentStatus':
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            raise InvalidAccountingInputError(f"Unknown payment status: {value}") from None


@dataclass(frozen=True)
class Accounting:
    """Paid and owed amounts of a booking."""

    paid: Decimal
    owed: Decimal

    def to_dict(self) -> dict:
        return {'paid': str(self.paid), 'owed': str(self.owed), 'pending_amount': str(self.owed)}


def to_amount(value, field: str = 'amount') -> Decimal:
    """
    Parse a monetary value.

    Raises:
        InvalidAccountingInputError: If the value is not a finite number
    """
    if value is None or value == '':
        return ZERO
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise InvalidAccountingInputError(f"Invalid {field}: {value}") from None
    if not amount.is_finite():
        raise InvalidAccountingInputError(f"Invalid {field}: {value}")
    return amount


def derive_accounting(status, total_price, paid_amount=None) -> Accounting:
    """
    Paid and owed amounts for a payment status.

    PAID settles the full total whatever amount was supplied. HALF_PAID
    takes the supplied amount, which must lie in [0, total]. UNPAID and
    TO_BILL owe the full total.

    Args:
        status: PaymentStatus or its name
        total_price: Booking total
        paid_amount: Amount received (used by HALF_PAID only)

    Returns:
        Accounting

    Raises:
        InvalidAccountingInputError: On unknown status, negative total or a
            half payment outside [0, total]
    """
    status = PaymentStatus.parse(status)
    total = to_amount(total_price, 'total price')
    if total < ZERO:
        raise InvalidAccountingInputError("Total price cannot be negative")

    if status is PaymentStatus.PAID:
        return Accounting(paid=total, owed=ZERO)

    if status is PaymentStatus.HALF_PAID:
        paid = to_amount(paid_amount, 'paid amount')
        if paid < ZERO or paid > total:
            raise InvalidAccountingInputError(
                f"Paid amount {paid} must be between 0 and {total}"
            )
        return Accounting(paid=paid, owed=total - paid)

    # UNPAID and TO_BILL
    return Accounting(paid=ZERO, owed=total)


def calculate_price(resource: dict, pricing_type: str, date_range: DateRange) -> Decimal:
    """
    Booking price from the resource tariff.

    Rooms charge per occupied night; halls and lawns charge a flat rate per
    booking.

    Args:
        resource: Resource dict with price_member / price_guest
        pricing_type: 'member' or 'guest'
        date_range: Occupied days

    Returns:
        Decimal price
    """
    if pricing_type not in ('member', 'guest'):
        raise ValueError(f"Invalid pricing type: {pricing_type}")

    rate = to_amount(resource['price_member'] if pricing_type == 'member' else resource['price_guest'])

    if resource['resource_type'] == 'room':
        return rate * date_range.days
    return rate


def apply_payment(booking_id: int, status, paid_amount=None) -> Accounting:
    """
    Derive and persist the payment fields of a booking.

    Raises:
        ValueError: If the booking does not exist or is cancelled
        InvalidAccountingInputError: On invalid payment input
    """
    booking = get_booking_by_id(booking_id)
    if not booking:
        raise ValueError("Booking not found")
    if booking['is_cancelled']:
        raise ValueError("Booking is already cancelled")

    status = PaymentStatus.parse(status)
    accounting = derive_accounting(status, booking['total_price'], paid_amount)
    update_booking_payment(booking_id, status.value, accounting.paid, accounting.owed)

    logger.info(
        "Booking %s payment %s -> %s (paid=%s owed=%s)",
        booking_id, booking['payment_status'], status.value, accounting.paid, accounting.owed
    )
    return accounting


def verify_booking_accounting(booking: dict) -> bool:
    """
    Re-derive a persisted booking's accounting and compare it.

    Returns:
        bool: True if stored paid/pending match the derived values
    """
    accounting = derive_accounting(
        booking['payment_status'], booking['total_price'], booking['paid_amount']
    )
    return (to_amount(booking['paid_amount']) == accounting.paid
            and to_amount(booking['pending_amount']) == accounting.owed)
