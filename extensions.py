"""
Application extensions.
Extensions are created here and then initialized with the app in app.py.
"""

from scheduler import ReconciliationScheduler

# Keeps the derived resource flags in step with reservation/maintenance windows
reconciliation_scheduler = ReconciliationScheduler()
