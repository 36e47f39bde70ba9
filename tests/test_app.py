"""
Test application factory, configuration and CLI commands.
"""

import pytest
from app import create_app
from config import ProductionConfig


class TestAppFactory:
    """Test Flask application factory."""

    def test_create_app_development(self):
        """Test app creation with development config."""
        app = create_app('development')
        assert app is not None
        assert app.config['DEBUG'] is True
        assert app.config['TESTING'] is False

    def test_create_app_test(self):
        """Test app creation with test config."""
        app = create_app('test')
        assert app.config['TESTING'] is True
        assert app.config['SCHEDULER_ENABLED'] is False

    def test_create_app_default(self):
        """Test app creation with default config."""
        app = create_app()
        assert app is not None

    def test_app_has_blueprints(self):
        """Test that all blueprints are registered."""
        app = create_app('test')
        assert 'api' in app.blueprints
        assert 'club' in app.blueprints

    def test_scheduler_registered_but_not_started(self):
        """The scheduler is available as an extension but idle in tests."""
        app = create_app('test')
        scheduler = app.extensions['reconciliation_scheduler']
        assert scheduler.running is False

    def test_default_timezone(self):
        app = create_app('test')
        assert app.config['TIMEZONE'] == 'Asia/Karachi'


class TestProductionConfig:
    """Test production configuration validation."""

    def test_missing_secret_key(self, monkeypatch):
        monkeypatch.delenv('SECRET_KEY', raising=False)
        with pytest.raises(ValueError, match='SECRET_KEY'):
            ProductionConfig.validate()

    def test_short_secret_key(self, monkeypatch):
        monkeypatch.setenv('SECRET_KEY', 'short')
        with pytest.raises(ValueError, match='32 characters'):
            ProductionConfig.validate()

    def test_valid_configuration(self, monkeypatch):
        monkeypatch.setenv('SECRET_KEY', 'x' * 40)
        monkeypatch.setenv('DATABASE_PATH', '/tmp/psc_club.db')
        ProductionConfig.validate()


class TestCliCommands:
    """Test Flask CLI commands."""

    def test_init_db_command(self, app):
        runner = app.test_cli_runner()
        result = runner.invoke(args=['init-db'])
        assert result.exit_code == 0
        assert 'Database initialized' in result.output

    def test_reconcile_command(self, app):
        runner = app.test_cli_runner()
        result = runner.invoke(args=['reconcile'])
        assert result.exit_code == 0
        assert 'reservation_flags' in result.output
        assert 'hold_expiry' in result.output

    def test_reconcile_single_job(self, app):
        runner = app.test_cli_runner()
        result = runner.invoke(args=['reconcile', '--job', 'maintenance_flags'])
        assert result.exit_code == 0
        assert 'maintenance_flags' in result.output
        assert 'hold_expiry' not in result.output
