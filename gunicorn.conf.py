"""Gunicorn configuration for production deployment."""

# Server socket
bind = '0.0.0.0:8000'

# Worker processes - a single worker so exactly one reconciliation
# scheduler runs; threads serve concurrent requests.
workers = 1
threads = 8
worker_class = 'gthread'

timeout = 60
graceful_timeout = 30
keepalive = 5

# Logging
accesslog = '/app/logs/gunicorn-access.log'
errorlog = '/app/logs/gunicorn-error.log'
loglevel = 'info'
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'

# Process naming
proc_name = 'psc-club'

# The scheduler thread is started in create_app; it must start inside the
# worker, not in the master before fork.
preload_app = False

# Security
limit_request_line = 8190
limit_request_fields = 100
limit_request_field_size = 8190
