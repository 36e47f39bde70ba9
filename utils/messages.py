"""
Centralized operator-facing messages for the club API.
"""

MESSAGES = {
    # Success messages
    'resource_created': 'Resource created',
    'resource_held': 'Resource {name} held until {expiry}',
    'window_created': 'Window created',
    'window_deleted': 'Window deleted',
    'window_released': 'Window dates released',
    'booking_created': 'Booking created',
    'booking_cancelled': 'Booking cancelled',
    'payment_updated': 'Payment updated',

    # Error messages
    'data_required': 'Request body is required',
    'field_required': 'Field {field} is required',
    'invalid_date': 'Invalid date: {value}',
    'horizon_required': 'Query parameters from and to are required',
    'horizon_too_long': 'Horizon cannot exceed {days} days',
    'resource_not_found': 'Resource not found',
    'resource_inactive': 'Resource is not bookable',
    'resource_on_hold': 'Resource is held by {holder}',
    'window_not_found': 'Window not found',
    'window_resource_mismatch': 'Window does not belong to this resource',
    'booking_not_found': 'Booking not found',
    'booking_cancelled_already': 'Booking is already cancelled',
    'booking_conflict': 'Resource is not available on {dates}',
    'store_unavailable': 'Data store temporarily unavailable, try again',
    'unexpected_error': 'Unexpected error',
}
