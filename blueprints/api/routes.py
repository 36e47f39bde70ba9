"""
API routes for service-level JSON endpoints.
"""

from flask import Blueprint, current_app, jsonify

api_bp = Blueprint('api', __name__)


@api_bp.route('/health')
def health_check():
    """
    Health check endpoint.

    Returns:
        JSON with status, version and scheduler state
    """
    scheduler = current_app.extensions.get('reconciliation_scheduler')

    return jsonify({
        'status': 'ok',
        'version': current_app.config.get('APP_VERSION', '1.0.0'),
        'app': current_app.config.get('APP_NAME', 'PSC Club'),
        'scheduler_running': bool(scheduler and scheduler.running)
    })
