"""
Database connection management.
Handles per-context connections, initialization, and teardown.
"""

import logging
import os
import sqlite3

from flask import g, current_app

logger = logging.getLogger(__name__)


def get_db():
    """
    Get the database connection bound to the current app context.

    Request handlers and scheduler jobs each run in their own app context,
    so every thread gets its own connection.

    Returns:
        sqlite3.Connection: Database connection object
    """
    if 'db' not in g:
        db_path = current_app.config.get('DATABASE_PATH', 'instance/psc_club.db')
        directory = os.path.dirname(db_path)
        if directory and db_path != ':memory:':
            os.makedirs(directory, exist_ok=True)
        g.db = sqlite3.connect(db_path, timeout=5)
        g.db.row_factory = sqlite3.Row
        # Enable foreign key constraints
        g.db.execute('PRAGMA foreign_keys = ON')
        # WAL lets projector reads proceed while a sweep holds the write lock
        g.db.execute('PRAGMA journal_mode = WAL')
    return g.db


def close_db(e=None):
    """
    Close database connection.

    Args:
        e: Exception if any (from Flask teardown context)
    """
    db = g.pop('db', None)
    if db is not None:
        db.close()


def init_db():
    """
    Initialize database: drop existing tables, create new schema, insert seed data.
    WARNING: This will delete all existing data!
    """
    from database.schema import drop_tables, create_tables, create_indexes
    from database.seed import seed_database

    db = get_db()

    drop_tables(db)
    create_tables(db)
    create_indexes(db)
    seed_database(db)

    db.commit()
    logger.info("Database initialized at %s", current_app.config.get('DATABASE_PATH'))
