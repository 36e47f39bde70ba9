"""
Resource API routes.
Endpoints for listing/creating resources and placing temporary holds.
"""

from flask import current_app, request

from models.resource import RESOURCE_TYPES, create_resource, get_all_resources, get_resource_by_id, hold_resource
from utils.api_response import api_error, api_success
from utils.messages import MESSAGES


def register_routes(bp):
    """Register resource routes on the blueprint."""

    @bp.route('/api/resources', methods=['GET'])
    def list_resources():
        """
        List resources.

        Query params:
            type: room, hall or lawn (optional)
            active: 'false' to include inactive resources

        Returns:
            JSON list of resources
        """
        resource_type = request.args.get('type')
        if resource_type and resource_type not in RESOURCE_TYPES:
            return api_error(f"Invalid resource type: {resource_type}")

        active_only = request.args.get('active', 'true').lower() == 'true'
        resources = get_all_resources(resource_type=resource_type, active_only=active_only)
        return api_success(data=resources, count=len(resources))

    @bp.route('/api/resources', methods=['POST'])
    def add_resource():
        """
        Create a resource.

        Request body:
            resource_type: room, hall or lawn
            name: Display name
            category, capacity, price_member, price_guest, is_active: optional

        Derived flags are not accepted; the sweeps own them.
        """
        data = request.get_json(silent=True)
        if not data:
            return api_error(MESSAGES['data_required'])

        try:
            resource_id = create_resource(
                resource_type=data.get('resource_type'),
                name=data.get('name'),
                category=data.get('category'),
                capacity=int(data.get('capacity') or 0),
                price_member=data.get('price_member', '0'),
                price_guest=data.get('price_guest', '0'),
                is_active=data.get('is_active', True),
            )
        except ValueError as e:
            return api_error(str(e))

        return api_success(data=get_resource_by_id(resource_id),
                           message=MESSAGES['resource_created'], status=201)

    @bp.route('/api/resources/<int:resource_id>', methods=['GET'])
    def resource_detail(resource_id):
        """Get one resource including its derived flags."""
        resource = get_resource_by_id(resource_id)
        if not resource:
            return api_error(MESSAGES['resource_not_found'], status=404)
        return api_success(data=resource)

    @bp.route('/api/resources/<int:resource_id>/hold', methods=['POST'])
    def hold(resource_id):
        """
        Hold a resource while a booking is being entered.

        Request body:
            held_by: Operator name
            minutes: Hold length (default HOLD_MINUTES)
        """
        data = request.get_json(silent=True) or {}
        held_by = data.get('held_by')
        if not held_by:
            return api_error(MESSAGES['field_required'].format(field='held_by'))

        resource = get_resource_by_id(resource_id)
        if not resource:
            return api_error(MESSAGES['resource_not_found'], status=404)

        minutes = int(data.get('minutes') or current_app.config.get('HOLD_MINUTES', 15))
        try:
            expiry = hold_resource(resource_id, held_by, minutes)
        except ValueError as e:
            return api_error(str(e), status=409)

        return api_success(
            data={'resource_id': resource_id, 'hold_expiry': expiry, 'hold_by': held_by},
            message=MESSAGES['resource_held'].format(name=resource['name'], expiry=expiry)
        )
