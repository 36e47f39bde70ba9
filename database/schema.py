"""
Database schema definitions.
Table creation, indexes, and structure management.

Dates are stored as ISO text (YYYY-MM-DD) in the club calendar so that
range filters are plain string comparisons.
"""


def drop_tables(db):
    """Drop all existing tables."""
    db.execute('PRAGMA foreign_keys = OFF')

    tables = [
        'bookings',
        'resource_windows',
        'resources',
    ]

    for table in tables:
        db.execute(f'DROP TABLE IF EXISTS {table}')

    db.execute('PRAGMA foreign_keys = ON')


def create_tables(db):
    """Create all database tables."""

    # 1. Bookable resources (rooms, halls, lawns)
    db.execute('''
        CREATE TABLE resources (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            resource_type TEXT NOT NULL CHECK(resource_type IN ('room', 'hall', 'lawn')),
            name TEXT NOT NULL,
            category TEXT,
            capacity INTEGER DEFAULT 0,
            price_member TEXT DEFAULT '0',
            price_guest TEXT DEFAULT '0',
            is_active INTEGER DEFAULT 1,
            is_reserved INTEGER DEFAULT 0,
            is_out_of_order INTEGER DEFAULT 0,
            on_hold INTEGER DEFAULT 0,
            hold_expiry TEXT,
            hold_by TEXT,
            created_at TEXT DEFAULT CURRENT_TIMESTAMP,
            UNIQUE(resource_type, name)
        )
    ''')

    # 2. Reservation and maintenance windows
    db.execute('''
        CREATE TABLE resource_windows (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            resource_id INTEGER NOT NULL REFERENCES resources(id) ON DELETE CASCADE,
            kind TEXT NOT NULL CHECK(kind IN ('RESERVATION', 'MAINTENANCE')),
            start_date TEXT NOT NULL,
            end_date TEXT NOT NULL,
            time_slot TEXT CHECK(time_slot IN ('MORNING', 'EVENING', 'NIGHT')),
            reason TEXT,
            notes TEXT,
            created_by TEXT,
            created_at TEXT DEFAULT CURRENT_TIMESTAMP,
            CHECK(start_date <= end_date)
        )
    ''')

    # 3. Bookings with payment fields
    db.execute('''
        CREATE TABLE bookings (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            resource_id INTEGER NOT NULL REFERENCES resources(id) ON DELETE CASCADE,
            booking_date TEXT NOT NULL,
            end_date TEXT NOT NULL,
            time_slot TEXT CHECK(time_slot IN ('MORNING', 'EVENING', 'NIGHT')),
            member_name TEXT,
            membership_no TEXT,
            pricing_type TEXT NOT NULL DEFAULT 'member' CHECK(pricing_type IN ('member', 'guest')),
            total_price TEXT NOT NULL DEFAULT '0',
            payment_status TEXT NOT NULL DEFAULT 'UNPAID'
                CHECK(payment_status IN ('UNPAID', 'HALF_PAID', 'PAID', 'TO_BILL')),
            paid_amount TEXT NOT NULL DEFAULT '0',
            pending_amount TEXT NOT NULL DEFAULT '0',
            is_cancelled INTEGER DEFAULT 0,
            cancelled_at TEXT,
            created_at TEXT DEFAULT CURRENT_TIMESTAMP,
            updated_at TEXT DEFAULT CURRENT_TIMESTAMP,
            CHECK(booking_date <= end_date)
        )
    ''')


def create_indexes(db):
    """Create indexes used by range filters and sweeps."""
    db.execute('CREATE INDEX idx_windows_resource_kind ON resource_windows(resource_id, kind, start_date)')
    db.execute('CREATE INDEX idx_windows_kind_dates ON resource_windows(kind, start_date, end_date)')
    db.execute('CREATE INDEX idx_bookings_resource_dates ON bookings(resource_id, booking_date, end_date)')
    db.execute('CREATE INDEX idx_resources_flags ON resources(is_reserved, is_out_of_order)')
    db.execute('CREATE INDEX idx_resources_hold ON resources(on_hold, hold_expiry)')
