"""
Availability API routes.
Endpoints for per-resource calendars, hall slots and the availability map.
"""

from flask import current_app, request

from models.availability import get_availability_map, get_hall_slot_availability, project
from models.resource import RESOURCE_TYPES
from utils.api_response import api_error, api_success
from utils.date_ranges import DateRange
from utils.errors import InvalidRangeError
from utils.messages import MESSAGES


def _horizon_from_args() -> DateRange:
    """
    Parse the from/to query parameters into a bounded horizon.

    Raises:
        ValueError: On missing, malformed, inverted or too long horizons
    """
    date_from = request.args.get('from')
    date_to = request.args.get('to')
    if not date_from or not date_to:
        raise ValueError(MESSAGES['horizon_required'])

    for value in (date_from, date_to):
        if len(value) != 10:
            raise ValueError(MESSAGES['invalid_date'].format(value=value))

    try:
        horizon = DateRange.checked(date_from, date_to)
    except InvalidRangeError:
        raise
    except ValueError:
        raise ValueError(MESSAGES['invalid_date'].format(value=f'{date_from}..{date_to}')) from None

    max_days = current_app.config.get('MAX_HORIZON_DAYS', 366)
    if horizon.days > max_days:
        raise ValueError(MESSAGES['horizon_too_long'].format(days=max_days))
    return horizon


def register_routes(bp):
    """Register availability routes on the blueprint."""

    @bp.route('/api/resources/<int:resource_id>/availability', methods=['GET'])
    def resource_availability(resource_id):
        """
        Day-by-day status of one resource.

        Query params:
            from: First day (YYYY-MM-DD)
            to: Last day (YYYY-MM-DD)

        Returns:
            JSON list of {date, status, origin_id}
        """
        try:
            horizon = _horizon_from_args()
        except ValueError as e:
            return api_error(str(e))

        statuses = project(resource_id, horizon.start, horizon.end)
        return api_success(
            data=[s.to_dict() for s in statuses],
            resource_id=resource_id,
            start_date=horizon.start.isoformat(),
            end_date=horizon.end.isoformat()
        )

    @bp.route('/api/resources/<int:resource_id>/slots', methods=['GET'])
    def hall_slots(resource_id):
        """
        Time-slot availability of a hall.

        Query params:
            from: First day (YYYY-MM-DD)
            to: Last day (YYYY-MM-DD)
        """
        try:
            horizon = _horizon_from_args()
        except ValueError as e:
            return api_error(str(e))

        slots = get_hall_slot_availability(resource_id, horizon.start, horizon.end)
        return api_success(data=slots, resource_id=resource_id)

    @bp.route('/api/availability', methods=['GET'])
    def availability_map():
        """
        Availability of every active resource with a per-day summary.

        Query params:
            from: First day (YYYY-MM-DD)
            to: Last day (YYYY-MM-DD)
            type: room, hall or lawn (optional)
        """
        resource_type = request.args.get('type')
        if resource_type and resource_type not in RESOURCE_TYPES:
            return api_error(f"Invalid resource type: {resource_type}")

        try:
            horizon = _horizon_from_args()
        except ValueError as e:
            return api_error(str(e))

        result = get_availability_map(horizon.start, horizon.end, resource_type)
        # JSON object keys must be strings
        result['availability'] = {str(k): v for k, v in result['availability'].items()}
        return api_success(data=result)
