"""
Club blueprint initialization.
Assembles the club API route modules into one blueprint:
- routes/resources.py - Resources and holds
- routes/windows.py - Reservation and maintenance windows
- routes/availability.py - Availability projections
- routes/bookings.py - Bookings, payments and accounting preview
- routes/scheduler.py - Reconciliation scheduler status
"""

from flask import Blueprint

club_bp = Blueprint('club', __name__)

from blueprints.club.routes import availability, bookings, resources, scheduler, windows

resources.register_routes(club_bp)
windows.register_routes(club_bp)
availability.register_routes(club_bp)
bookings.register_routes(club_bp)
scheduler.register_routes(club_bp)
