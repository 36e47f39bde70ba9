"""
Flask application configuration classes.
Provides configuration for development, production, and testing environments.
"""

import os


def _optional_int(name: str, default):
    """Read an integer env var; an empty value disables the setting."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    if raw.strip() == '':
        return None
    return int(raw)


class Config:
    """Base configuration class with common settings."""

    # Secret key for session signing
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'

    # Database configuration
    DATABASE_PATH = os.environ.get('DATABASE_PATH') or 'instance/psc_club.db'

    # Club calendar. Every day-boundary comparison uses this zone.
    TIMEZONE = os.environ.get('TIMEZONE') or 'Asia/Karachi'

    # Reconciliation scheduler
    SCHEDULER_ENABLED = os.environ.get('SCHEDULER_ENABLED', 'true').lower() == 'true'
    RECONCILE_INTERVAL_SECONDS = int(os.environ.get('RECONCILE_INTERVAL_SECONDS', 10))
    RECONCILE_LOCK_RETRIES = int(os.environ.get('RECONCILE_LOCK_RETRIES', 3))
    RECONCILE_LOCK_RETRY_DELAY = float(os.environ.get('RECONCILE_LOCK_RETRY_DELAY', 0.2))

    # Maintenance windows that ended longer ago than this are purged
    WINDOW_RETENTION_DAYS = _optional_int('WINDOW_RETENTION_DAYS', 30)

    # Default length of a resource hold taken while a booking is entered
    HOLD_MINUTES = int(os.environ.get('HOLD_MINUTES', 15))

    # Availability queries
    MAX_HORIZON_DAYS = int(os.environ.get('MAX_HORIZON_DAYS', 366))

    # Application settings
    APP_NAME = 'PSC Club'
    APP_VERSION = '1.0.0'


class DevelopmentConfig(Config):
    """Development environment configuration."""

    DEBUG = True
    TESTING = False


class ProductionConfig(Config):
    """Production environment configuration."""

    DEBUG = False
    TESTING = False

    SECRET_KEY = os.environ.get('SECRET_KEY') or Config.SECRET_KEY
    DATABASE_PATH = os.environ.get('DATABASE_PATH') or Config.DATABASE_PATH

    @classmethod
    def validate(cls) -> None:
        """Validate that required production environment variables are set."""
        secret_key = os.environ.get('SECRET_KEY')
        if not secret_key:
            raise ValueError("SECRET_KEY environment variable must be set in production")
        if len(secret_key) < 32:
            raise ValueError("SECRET_KEY must be at least 32 characters in production")
        if not os.environ.get('DATABASE_PATH'):
            raise ValueError("DATABASE_PATH environment variable must be set in production")
        if cls.RECONCILE_INTERVAL_SECONDS <= 0:
            raise ValueError("RECONCILE_INTERVAL_SECONDS must be positive")


class TestConfig(Config):
    """Testing environment configuration."""

    TESTING = True
    DEBUG = True
    DATABASE_PATH = os.environ.get('DATABASE_PATH', ':memory:')
    SECRET_KEY = 'test-secret-key'
    # Tests drive ticks explicitly through run_once()
    SCHEDULER_ENABLED = False
    RECONCILE_LOCK_RETRY_DELAY = 0


# Configuration dictionary
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'test': TestConfig,
    'default': DevelopmentConfig
}
