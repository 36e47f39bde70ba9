"""
Bookable resource data access functions.
Handles rooms, halls and lawns, their derived flags and temporary holds.
"""

from datetime import datetime, timedelta

from database import get_db
from utils.datetime_helpers import get_now

RESOURCE_TYPES = ('room', 'hall', 'lawn')

# Columns the reconciliation sweeps may write; interpolated into SQL.
DERIVED_FLAGS = ('is_reserved', 'is_out_of_order')


def get_all_resources(resource_type: str = None, active_only: bool = True) -> list:
    """
    Get bookable resources.

    Args:
        resource_type: Filter by type (room, hall, lawn)
        active_only: If True, only return bookable resources

    Returns:
        List of resource dicts ordered by type and name
    """
    db = get_db()
    cursor = db.cursor()

    query = 'SELECT * FROM resources WHERE 1=1'
    params = []

    if resource_type:
        query += ' AND resource_type = ?'
        params.append(resource_type)

    if active_only:
        query += ' AND is_active = 1'

    query += ' ORDER BY resource_type, name'

    cursor.execute(query, params)
    return [dict(row) for row in cursor.fetchall()]


def get_resource_by_id(resource_id: int) -> dict:
    """
    Get resource by ID.

    Args:
        resource_id: Resource ID

    Returns:
        Resource dict or None if not found
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('SELECT * FROM resources WHERE id = ?', (resource_id,))
    row = cursor.fetchone()
    return dict(row) if row else None


def create_resource(resource_type: str, name: str, category: str = None, capacity: int = 0,
                    price_member: str = '0', price_guest: str = '0', is_active: bool = True) -> int:
    """
    Create a new resource.

    Derived flags always start cleared; the next sweep sets them.

    Returns:
        New resource ID

    Raises:
        ValueError: If type or name are invalid
    """
    if resource_type not in RESOURCE_TYPES:
        raise ValueError(f"Invalid resource type: {resource_type}")
    if not name:
        raise ValueError("Resource name is required")

    with get_db() as conn:
        cursor = conn.execute('''
            INSERT INTO resources
            (resource_type, name, category, capacity, price_member, price_guest, is_active)
            VALUES (?, ?, ?, ?, ?, ?, ?)
        ''', (resource_type, name, category, capacity, str(price_member), str(price_guest),
              1 if is_active else 0))
        return cursor.lastrowid


def set_resource_active(resource_id: int, is_active: bool) -> bool:
    """Enable or disable bookings for a resource."""
    with get_db() as conn:
        cursor = conn.execute(
            'UPDATE resources SET is_active = ? WHERE id = ?',
            (1 if is_active else 0, resource_id)
        )
        return cursor.rowcount > 0


def get_flagged_resource_ids(flag: str) -> set:
    """
    Get IDs of resources whose derived flag is currently set.

    Uses the caller's transaction; does not commit.
    """
    _check_flag(flag)
    cursor = get_db().execute(f'SELECT id FROM resources WHERE {flag} = 1')
    return {row['id'] for row in cursor.fetchall()}


def bulk_set_flag(resource_ids, flag: str, value: bool) -> int:
    """
    Set a derived flag on a batch of resources.

    Only rows whose flag currently holds the opposite value are touched,
    so the returned count is the number of actual transitions. Uses the
    caller's transaction; does not commit.

    Args:
        resource_ids: Iterable of resource IDs
        flag: 'is_reserved' or 'is_out_of_order'
        value: Target value

    Returns:
        int: Number of rows updated
    """
    _check_flag(flag)
    ids = sorted(resource_ids)
    if not ids:
        return 0

    placeholders = ','.join('?' * len(ids))
    cursor = get_db().execute(f'''
        UPDATE resources
        SET {flag} = ?
        WHERE id IN ({placeholders}) AND {flag} = ?
    ''', [1 if value else 0] + ids + [0 if value else 1])
    return cursor.rowcount


def _check_flag(flag: str) -> None:
    if flag not in DERIVED_FLAGS:
        raise ValueError(f"Unknown derived flag: {flag}")


# =============================================================================
# HOLDS
# =============================================================================

def format_hold_time(value: datetime) -> str:
    """Club-local naive ISO timestamp, comparable as text."""
    return value.replace(tzinfo=None).isoformat(timespec='seconds')


def hold_resource(resource_id: int, held_by: str, minutes: int) -> str:
    """
    Place a temporary hold on a resource.

    A hold owned by someone else that has not expired blocks the call.

    Args:
        resource_id: Resource ID
        held_by: Operator placing the hold
        minutes: Hold length

    Returns:
        str: Hold expiry timestamp

    Raises:
        ValueError: If the resource is held by another operator
    """
    now = get_now()
    expiry = format_hold_time(now + timedelta(minutes=minutes))

    with get_db() as conn:
        row = conn.execute(
            'SELECT on_hold, hold_expiry, hold_by FROM resources WHERE id = ?',
            (resource_id,)
        ).fetchone()
        if row is None:
            raise ValueError("Resource not found")

        if row['on_hold'] and row['hold_by'] != held_by \
                and row['hold_expiry'] and row['hold_expiry'] >= format_hold_time(now):
            raise ValueError(f"Resource is held by {row['hold_by']}")

        conn.execute('''
            UPDATE resources
            SET on_hold = 1, hold_expiry = ?, hold_by = ?
            WHERE id = ?
        ''', (expiry, held_by, resource_id))
        return expiry


def release_expired_holds(now: datetime) -> int:
    """
    Release every hold whose expiry is before `now`.

    Uses the caller's transaction; does not commit.

    Returns:
        int: Number of holds released
    """
    cursor = get_db().execute('''
        UPDATE resources
        SET on_hold = 0, hold_expiry = NULL, hold_by = NULL
        WHERE on_hold = 1 AND hold_expiry < ?
    ''', (format_hold_time(now),))
    return cursor.rowcount
