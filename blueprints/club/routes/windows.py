"""
Window API routes.
Endpoints for reservation and maintenance windows on resources.
"""

from flask import request

from models.resource import get_resource_by_id
from models.resource_window import (
    WINDOW_KINDS,
    create_window,
    delete_window,
    get_window_by_id,
    list_windows,
    release_window_range,
)
from utils.api_response import api_error, api_success
from utils.messages import MESSAGES


def register_routes(bp):
    """Register window routes on the blueprint."""

    @bp.route('/api/resources/<int:resource_id>/windows', methods=['GET'])
    def resource_windows(resource_id):
        """
        List windows of a resource.

        Query params:
            kind: RESERVATION or MAINTENANCE (optional)
            from / to: Only windows overlapping this range (optional)
        """
        if not get_resource_by_id(resource_id):
            return api_error(MESSAGES['resource_not_found'], status=404)

        kind = request.args.get('kind')
        if kind and kind not in WINDOW_KINDS:
            return api_error(f"Invalid window kind: {kind}")

        windows = list_windows(resource_id, kind, request.args.get('from'), request.args.get('to'))
        return api_success(data=windows, count=len(windows), window_kinds=WINDOW_KINDS)

    @bp.route('/api/resources/<int:resource_id>/windows', methods=['POST'])
    def add_window(resource_id):
        """
        Create a window.

        Request body:
            kind: RESERVATION or MAINTENANCE
            start_date: YYYY-MM-DD
            end_date: YYYY-MM-DD (defaults to start_date)
            time_slot: Hall slot (optional)
            reason, notes, created_by: optional

        Returns:
            JSON with window ID
        """
        data = request.get_json(silent=True)
        if not data:
            return api_error(MESSAGES['data_required'])

        start_date = data.get('start_date')
        if not start_date:
            return api_error(MESSAGES['field_required'].format(field='start_date'))

        if not get_resource_by_id(resource_id):
            return api_error(MESSAGES['resource_not_found'], status=404)

        try:
            window_id = create_window(
                resource_id=resource_id,
                kind=data.get('kind'),
                start_date=start_date,
                end_date=data.get('end_date', start_date),
                time_slot=data.get('time_slot'),
                reason=data.get('reason'),
                notes=data.get('notes'),
                created_by=data.get('created_by', 'system'),
            )
        except ValueError as e:
            return api_error(str(e))

        return api_success(data={'window_id': window_id}, message=MESSAGES['window_created'], status=201)

    @bp.route('/api/windows/<int:window_id>', methods=['DELETE'])
    def remove_window(window_id):
        """Delete a window."""
        if not get_window_by_id(window_id):
            return api_error(MESSAGES['window_not_found'], status=404)

        delete_window(window_id)
        return api_success(message=MESSAGES['window_deleted'])

    @bp.route('/api/windows/<int:window_id>/release', methods=['POST'])
    def release_window(window_id):
        """
        Release part of a window (delete, shrink or split).

        Request body:
            start_date: First day to release
            end_date: Last day to release (defaults to start_date)
        """
        data = request.get_json(silent=True)
        if not data or not data.get('start_date'):
            return api_error(MESSAGES['field_required'].format(field='start_date'))

        if not get_window_by_id(window_id):
            return api_error(MESSAGES['window_not_found'], status=404)

        try:
            result = release_window_range(
                window_id, data['start_date'], data.get('end_date', data['start_date'])
            )
        except ValueError as e:
            return api_error(str(e))

        return api_success(data=result, message=MESSAGES['window_released'])
