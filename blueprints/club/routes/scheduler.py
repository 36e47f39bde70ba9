"""
Scheduler API routes.
"""

from flask import current_app

from utils.api_response import api_success


def register_routes(bp):
    """Register scheduler routes on the blueprint."""

    @bp.route('/api/scheduler/status', methods=['GET'])
    def scheduler_status():
        """
        Reconciliation scheduler state and the last outcome of each sweep.

        Returns:
            JSON with running flag, interval and per-job outcomes
        """
        scheduler = current_app.extensions['reconciliation_scheduler']
        return api_success(data=scheduler.status())
