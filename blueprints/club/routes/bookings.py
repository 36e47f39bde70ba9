"""
Booking API routes.
Endpoints for booking confirmation, payments, cancellation and the
accounting preview.
"""

import logging

from flask import request

from blueprints.club.services.accounting_service import apply_payment, derive_accounting
from blueprints.club.services.booking_service import confirm_booking
from models.booking import cancel_booking, get_booking_by_id
from models.resource import get_resource_by_id
from utils.api_response import api_error, api_success
from utils.messages import MESSAGES

logger = logging.getLogger(__name__)


def register_routes(bp):
    """Register booking routes on the blueprint."""

    @bp.route('/api/bookings', methods=['POST'])
    def create_booking():
        """
        Confirm a booking.

        Request body:
            resource_id: Resource ID
            booking_date / end_date: Inclusive days (halls, lawns, rooms)
            check_in / check_out: Room stay, check-out day excluded
            time_slot: MORNING, EVENING or NIGHT (halls only)
            pricing_type: member or guest
            total_price: Overrides the tariff (optional)
            payment_status: UNPAID, HALF_PAID, PAID or TO_BILL
            paid_amount: Amount received (HALF_PAID)
            member_name, membership_no: optional

        Returns:
            JSON with booking ID and accounting fields
        """
        data = request.get_json(silent=True)
        if not data:
            return api_error(MESSAGES['data_required'])

        resource_id = data.get('resource_id')
        if not resource_id:
            return api_error(MESSAGES['field_required'].format(field='resource_id'))

        if not get_resource_by_id(resource_id):
            return api_error(MESSAGES['resource_not_found'], status=404)

        try:
            result = confirm_booking(int(resource_id), data)
        except ValueError as e:
            return api_error(str(e))

        return api_success(data=result, message=MESSAGES['booking_created'], status=201)

    @bp.route('/api/bookings/<int:booking_id>', methods=['GET'])
    def booking_detail(booking_id):
        """Get one booking with its resource name."""
        booking = get_booking_by_id(booking_id)
        if not booking:
            return api_error(MESSAGES['booking_not_found'], status=404)
        return api_success(data=booking)

    @bp.route('/api/bookings/<int:booking_id>/payment', methods=['POST'])
    def update_payment(booking_id):
        """
        Change the payment status of a booking.

        Request body:
            payment_status: UNPAID, HALF_PAID, PAID or TO_BILL
            paid_amount: Amount received (HALF_PAID)
        """
        data = request.get_json(silent=True)
        if not data or not data.get('payment_status'):
            return api_error(MESSAGES['field_required'].format(field='payment_status'))

        if not get_booking_by_id(booking_id):
            return api_error(MESSAGES['booking_not_found'], status=404)

        try:
            accounting = apply_payment(booking_id, data['payment_status'], data.get('paid_amount'))
        except ValueError as e:
            return api_error(str(e))

        return api_success(data=accounting.to_dict(), message=MESSAGES['payment_updated'])

    @bp.route('/api/bookings/<int:booking_id>/cancel', methods=['POST'])
    def cancel(booking_id):
        """Cancel a booking; its days become available again."""
        if not get_booking_by_id(booking_id):
            return api_error(MESSAGES['booking_not_found'], status=404)

        if not cancel_booking(booking_id):
            return api_error(MESSAGES['booking_cancelled_already'])

        logger.info("Booking %s cancelled", booking_id)
        return api_success(message=MESSAGES['booking_cancelled'])

    @bp.route('/api/accounting/preview', methods=['POST'])
    def accounting_preview():
        """
        Derive paid/owed amounts without saving anything.

        Request body:
            payment_status, total_price, paid_amount
        """
        data = request.get_json(silent=True)
        if not data:
            return api_error(MESSAGES['data_required'])

        try:
            accounting = derive_accounting(
                data.get('payment_status', 'UNPAID'),
                data.get('total_price'),
                data.get('paid_amount')
            )
        except ValueError as e:
            return api_error(str(e))

        return api_success(data=accounting.to_dict())
