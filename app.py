"""
PSC Club - resource availability and reconciliation engine
Flask application factory and initialization
"""

import atexit
import logging
import os

import click
from dotenv import load_dotenv
from flask import Flask, g

# Load environment variables
load_dotenv()

from config import config
from database import close_db, init_db
from extensions import reconciliation_scheduler
from utils.api_response import api_error
from utils.errors import InvalidRangeError, ResourceNotFoundError, StoreUnavailableError
from utils.messages import MESSAGES


def create_app(config_name=None):
    """
    Application factory for Flask app.

    Args:
        config_name: Configuration name ('development', 'production', 'test')

    Returns:
        Flask application instance
    """
    if config_name is None:
        config_name = os.environ.get('FLASK_ENV', 'development')

    app = Flask(__name__)

    app.config.from_object(config[config_name])
    if config_name == 'production':
        config[config_name].validate()

    configure_logging(app)

    register_blueprints(app)

    register_error_handlers(app)

    register_cli_commands(app)

    register_teardown_handlers(app)

    initialize_extensions(app)

    return app


def initialize_extensions(app):
    """Initialize extensions and start the reconciliation scheduler."""
    reconciliation_scheduler.init_app(app)

    # In debug mode only the reloader's serving child sweeps.
    serving_child = not app.debug or os.environ.get('WERKZEUG_RUN_MAIN') == 'true'

    if app.config.get('SCHEDULER_ENABLED') and serving_child:
        reconciliation_scheduler.start()
        atexit.register(reconciliation_scheduler.shutdown)


def register_blueprints(app):
    """Register Flask blueprints."""
    from blueprints.api.routes import api_bp
    from blueprints.club import club_bp

    app.register_blueprint(api_bp, url_prefix='/api')
    app.register_blueprint(club_bp, url_prefix='/club')


def register_error_handlers(app):
    """Register JSON error handlers."""

    @app.errorhandler(404)
    def not_found_error(error):
        return api_error('Not found', status=404)

    @app.errorhandler(405)
    def method_not_allowed_error(error):
        return api_error('Method not allowed', status=405)

    @app.errorhandler(InvalidRangeError)
    def invalid_range_error(error):
        return api_error(str(error), status=400)

    @app.errorhandler(ResourceNotFoundError)
    def resource_not_found_error(error):
        return api_error(MESSAGES['resource_not_found'], status=404)

    @app.errorhandler(StoreUnavailableError)
    def store_unavailable_error(error):
        app.logger.error("Store unavailable: %s", error)
        return api_error(MESSAGES['store_unavailable'], status=503)

    @app.errorhandler(500)
    def internal_error(error):
        db = g.get('db')
        if db:
            db.rollback()
        return api_error(MESSAGES['unexpected_error'], status=500)


def register_cli_commands(app):
    """Register Flask CLI commands."""

    @app.cli.command('init-db')
    def init_db_command():
        """Initialize database with schema and seed data."""
        click.echo('Initializing database...')
        with app.app_context():
            init_db()
        click.echo('Database initialized successfully!')

    @app.cli.command('reconcile')
    @click.option('--job', default=None, help='Run a single sweep (reservation_flags, '
                                              'maintenance_flags, hold_expiry)')
    def reconcile_command(job):
        """Run reconciliation sweeps once."""
        outcomes = reconciliation_scheduler.run_once(job)
        if job is not None:
            outcomes = {job: outcomes}

        failed = False
        for name, outcome in outcomes.items():
            if outcome.success:
                click.echo(f'{name}: {outcome.updated}')
            else:
                failed = True
                click.echo(f'{name}: FAILED ({outcome.error})', err=True)

        if failed:
            raise SystemExit(1)


def register_teardown_handlers(app):
    """Register teardown handlers."""

    @app.teardown_appcontext
    def teardown_db(error):
        """Close database connection at end of request or job."""
        close_db(error)


def configure_logging(app):
    """Configure application logging."""
    if not app.debug and not app.testing:
        # Production logging
        os.makedirs('logs', exist_ok=True)

        formatter = logging.Formatter(
            '%(asctime)s %(levelname)s %(name)s: %(message)s [in %(pathname)s:%(lineno)d]'
        )
        file_handler = logging.FileHandler('logs/psc_club.log')
        file_handler.setFormatter(formatter)
        file_handler.setLevel(logging.INFO)

        # Module loggers (models, services, scheduler) share the app handler
        root = logging.getLogger()
        root.addHandler(file_handler)
        root.setLevel(logging.INFO)

        app.logger.setLevel(logging.INFO)
        app.logger.info('PSC Club startup')
    else:
        # Development logging
        logging.basicConfig(level=logging.DEBUG)
        app.logger.setLevel(logging.DEBUG)
        logging.getLogger('apscheduler').setLevel(logging.WARNING)


# Create application instance for development server
if __name__ == '__main__':
    app = create_app()
    app.run(host='0.0.0.0', debug=True)
