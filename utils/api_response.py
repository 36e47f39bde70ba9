"""
Standardized API response helpers.

Every JSON endpoint of the club API answers with one of two envelopes:

    Success:  {"success": true, "data": {...}, "message": "..."}
    Error:    {"success": false, "error": "..."}

Usage:
    from utils.api_response import api_success, api_error

    return api_success(data={'id': 1}, message=MESSAGES['booking_created'], status=201)
    return api_error(MESSAGES['resource_not_found'], status=404)
"""

from typing import Any

from flask import jsonify


def api_success(
    data: Any = None,
    message: str | None = None,
    status: int = 200,
    **extra_fields: Any
) -> tuple:
    """
    Build a success response.

    Args:
        data: Payload placed under 'data' (dict or list).
        message: Optional human readable message.
        status: HTTP status code (default 200).
        **extra_fields: Additional top-level fields (e.g. count).

    Returns:
        Tuple of (Response, status_code)
    """
    response = {'success': True}

    if data is not None:
        response['data'] = data

    if message:
        response['message'] = message

    if extra_fields:
        response.update(extra_fields)

    return jsonify(response), status


def api_error(error: str, status: int = 400, **extra_fields: Any) -> tuple:
    """
    Build an error response.

    Args:
        error: Error message safe to show to the operator.
        status: HTTP status code (default 400).
        **extra_fields: Additional context (e.g. the offending field).

    Returns:
        Tuple of (Response, status_code)
    """
    response = {'success': False, 'error': error}

    if extra_fields:
        response.update(extra_fields)

    return jsonify(response), status
