"""
Tests for the accounting service.
"""

import pytest
from decimal import Decimal

from blueprints.club.services.accounting_service import (
    PaymentStatus,
    apply_payment,
    calculate_price,
    derive_accounting,
    to_amount,
    verify_booking_accounting,
)
from utils.date_ranges import DateRange
from utils.errors import InvalidAccountingInputError


class TestDeriveAccounting:
    """Tests for paid/owed derivation."""

    def test_half_paid_splits_total(self):
        result = derive_accounting('HALF_PAID', '10000', '4000')
        assert result.paid == Decimal('4000')
        assert result.owed == Decimal('6000')

    def test_paid_ignores_supplied_amount(self):
        result = derive_accounting(PaymentStatus.PAID, 10000, 1)
        assert result.paid == Decimal('10000')
        assert result.owed == Decimal('0')

    def test_unpaid_owes_total(self):
        result = derive_accounting('UNPAID', '7500.50', '100')
        assert result.paid == Decimal('0')
        assert result.owed == Decimal('7500.50')

    def test_to_bill_owes_total(self):
        result = derive_accounting('TO_BILL', '5000')
        assert result.paid == Decimal('0')
        assert result.owed == Decimal('5000')

    def test_status_is_case_insensitive(self):
        assert derive_accounting('paid', '100').paid == Decimal('100')

    def test_paid_plus_owed_equals_total(self):
        for status in PaymentStatus:
            result = derive_accounting(status, '9000', '3000')
            assert result.paid + result.owed == Decimal('9000')

    def test_half_paid_bounds_inclusive(self):
        assert derive_accounting('HALF_PAID', '100', '0').owed == Decimal('100')
        assert derive_accounting('HALF_PAID', '100', '100').owed == Decimal('0')

    def test_half_paid_over_total_rejected(self):
        with pytest.raises(InvalidAccountingInputError):
            derive_accounting('HALF_PAID', '100', '150')

    def test_half_paid_negative_rejected(self):
        with pytest.raises(InvalidAccountingInputError):
            derive_accounting('HALF_PAID', '100', '-1')

    def test_negative_total_rejected(self):
        with pytest.raises(InvalidAccountingInputError):
            derive_accounting('UNPAID', '-5')

    def test_unknown_status_rejected(self):
        with pytest.raises(InvalidAccountingInputError):
            derive_accounting('PARTIAL', '100')

    def test_non_numeric_amount_rejected(self):
        with pytest.raises(InvalidAccountingInputError):
            derive_accounting('HALF_PAID', 'abc', '1')

    def test_non_finite_amount_rejected(self):
        with pytest.raises(InvalidAccountingInputError):
            to_amount('NaN')

    def test_to_dict_has_pending_amount(self):
        data = derive_accounting('HALF_PAID', '10000', '4000').to_dict()
        assert data == {'paid': '4000', 'owed': '6000', 'pending_amount': '6000'}


class TestCalculatePrice:
    """Tests for tariff-based pricing."""

    ROOM = {'resource_type': 'room', 'price_member': '8000', 'price_guest': '12000'}
    HALL = {'resource_type': 'hall', 'price_member': '150000', 'price_guest': '250000'}

    def test_room_charges_per_night(self):
        nights = DateRange.checked('2025-06-10', '2025-06-12')
        assert calculate_price(self.ROOM, 'member', nights) == Decimal('24000')
        assert calculate_price(self.ROOM, 'guest', nights) == Decimal('36000')

    def test_hall_charges_flat_rate(self):
        days = DateRange.checked('2025-06-10', '2025-06-12')
        assert calculate_price(self.HALL, 'member', days) == Decimal('150000')

    def test_unknown_pricing_type_rejected(self):
        days = DateRange.checked('2025-06-10', '2025-06-10')
        with pytest.raises(ValueError):
            calculate_price(self.HALL, 'staff', days)


class TestApplyPayment:
    """Tests for persisting payment changes."""

    def _create_booking(self, resource_id, status='UNPAID', paid='0', pending='10000'):
        from models.booking import create_booking
        return create_booking(
            resource_id=resource_id,
            date_range=DateRange.checked('2025-06-10', '2025-06-10'),
            pricing_type='member',
            total_price='10000',
            payment_status=status,
            paid_amount=paid,
            pending_amount=pending,
        )

    def test_apply_payment_updates_booking(self, app, hall_id):
        from models.booking import get_booking_by_id

        booking_id = self._create_booking(hall_id)
        result = apply_payment(booking_id, 'HALF_PAID', '4000')

        assert result.owed == Decimal('6000')
        booking = get_booking_by_id(booking_id)
        assert booking['payment_status'] == 'HALF_PAID'
        assert booking['paid_amount'] == '4000'
        assert booking['pending_amount'] == '6000'
        assert verify_booking_accounting(booking)

    def test_apply_payment_missing_booking(self, app):
        with pytest.raises(ValueError):
            apply_payment(9999, 'PAID')

    def test_apply_payment_cancelled_booking(self, app, hall_id):
        from models.booking import cancel_booking

        booking_id = self._create_booking(hall_id)
        cancel_booking(booking_id)
        with pytest.raises(ValueError):
            apply_payment(booking_id, 'PAID')

    def test_verify_detects_drift(self, app, hall_id):
        from models.booking import get_booking_by_id

        booking_id = self._create_booking(hall_id, status='PAID', paid='5000', pending='5000')
        assert verify_booking_accounting(get_booking_by_id(booking_id)) is False
