"""
Resource window model.
CRUD operations for reservation and maintenance windows on resources.
"""

from typing import Optional

from database import get_db
from utils.date_ranges import DateRange, ONE_DAY


# =============================================================================
# WINDOW KINDS
# =============================================================================

RESERVATION = 'RESERVATION'
MAINTENANCE = 'MAINTENANCE'

WINDOW_KINDS = {
    RESERVATION: {'name': 'Reserved', 'color': '#3B82F6'},
    MAINTENANCE: {'name': 'Out of order', 'color': '#DC2626'},
}

TIME_SLOTS = ('MORNING', 'EVENING', 'NIGHT')


# =============================================================================
# CRUD OPERATIONS
# =============================================================================

def create_window(
    resource_id: int,
    kind: str,
    start_date,
    end_date,
    time_slot: str = None,
    reason: str = None,
    notes: str = None,
    created_by: str = None
) -> int:
    """
    Create a new window on a resource.

    Args:
        resource_id: Resource ID
        kind: RESERVATION or MAINTENANCE
        start_date: First covered day
        end_date: Last covered day (inclusive)
        time_slot: Hall slot the reservation applies to (all slots if None)
        reason: Reason for the window
        notes: Additional notes
        created_by: Operator creating the window

    Returns:
        int: Window ID

    Raises:
        InvalidRangeError: If start_date is after end_date
        ValueError: If kind or slot are invalid
    """
    if kind not in WINDOW_KINDS:
        raise ValueError(f"Invalid window kind: {kind}")

    if time_slot is not None and time_slot not in TIME_SLOTS:
        raise ValueError(f"Invalid time slot: {time_slot}")

    date_range = DateRange.checked(start_date, end_date)

    with get_db() as conn:
        exists = conn.execute('SELECT 1 FROM resources WHERE id = ?', (resource_id,)).fetchone()
        if not exists:
            raise ValueError("Resource not found")

        cursor = conn.execute('''
            INSERT INTO resource_windows
            (resource_id, kind, start_date, end_date, time_slot, reason, notes, created_by)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        ''', (resource_id, kind, date_range.start.isoformat(), date_range.end.isoformat(),
              time_slot, reason, notes, created_by))

        return cursor.lastrowid


def get_window_by_id(window_id: int) -> Optional[dict]:
    """
    Get a window by ID.

    Args:
        window_id: Window ID

    Returns:
        dict or None: Window data
    """
    db = get_db()
    cursor = db.execute('''
        SELECT w.*, r.name as resource_name, r.resource_type
        FROM resource_windows w
        JOIN resources r ON w.resource_id = r.id
        WHERE w.id = ?
    ''', (window_id,))

    row = cursor.fetchone()
    return dict(row) if row else None


def list_windows(resource_id: int, kind: str = None, date_from: str = None, date_to: str = None) -> list:
    """
    Get windows of a resource, optionally only those overlapping a date range.

    Overlapping windows are returned as stored; consumers merge them.

    Args:
        resource_id: Resource ID
        kind: RESERVATION or MAINTENANCE (both if None)
        date_from: Optional first day of the range
        date_to: Optional last day of the range

    Returns:
        list: Windows ordered by start date
    """
    db = get_db()
    query = '''
        SELECT w.*
        FROM resource_windows w
        WHERE w.resource_id = ?
    '''
    params = [resource_id]

    if kind:
        query += ' AND w.kind = ?'
        params.append(kind)

    if date_from:
        query += ' AND w.end_date >= ?'
        params.append(str(date_from))

    if date_to:
        query += ' AND w.start_date <= ?'
        params.append(str(date_to))

    query += ' ORDER BY w.start_date, w.id'

    cursor = db.execute(query, params)
    return [dict(row) for row in cursor.fetchall()]


def update_window(
    window_id: int,
    start_date: str = None,
    end_date: str = None,
    reason: str = None,
    notes: str = None
) -> bool:
    """
    Update a window.

    Args:
        window_id: Window ID
        start_date: New start date
        end_date: New end date
        reason: New reason
        notes: New notes

    Returns:
        bool: True if updated

    Raises:
        InvalidRangeError: If the resulting range is inverted
        ValueError: If the window does not exist
    """
    window = get_window_by_id(window_id)
    if not window:
        raise ValueError("Window not found")

    updates = []
    params = []

    if start_date is not None or end_date is not None:
        date_range = DateRange.checked(
            start_date if start_date is not None else window['start_date'],
            end_date if end_date is not None else window['end_date'],
        )
        updates.extend(['start_date = ?', 'end_date = ?'])
        params.extend([date_range.start.isoformat(), date_range.end.isoformat()])

    if reason is not None:
        updates.append('reason = ?')
        params.append(reason)

    if notes is not None:
        updates.append('notes = ?')
        params.append(notes)

    if not updates:
        return False

    params.append(window_id)

    with get_db() as conn:
        conn.execute(f'''
            UPDATE resource_windows
            SET {', '.join(updates)}
            WHERE id = ?
        ''', params)
        return True


def delete_window(window_id: int) -> bool:
    """
    Delete a window.

    Args:
        window_id: Window ID

    Returns:
        bool: True if deleted
    """
    with get_db() as conn:
        cursor = conn.execute('DELETE FROM resource_windows WHERE id = ?', (window_id,))
        return cursor.rowcount > 0


def get_windows_for_date(target_date: str, kind: str = None) -> list:
    """
    Get all windows covering a specific date.

    Args:
        target_date: Date to check (YYYY-MM-DD)
        kind: Optional kind filter

    Returns:
        list: Windows with resource names
    """
    db = get_db()
    query = '''
        SELECT w.*, r.name as resource_name, r.resource_type
        FROM resource_windows w
        JOIN resources r ON w.resource_id = r.id
        WHERE w.start_date <= ? AND w.end_date >= ?
    '''
    params = [target_date, target_date]

    if kind:
        query += ' AND w.kind = ?'
        params.append(kind)

    query += ' ORDER BY r.resource_type, r.name'

    cursor = db.execute(query, params)
    return [dict(row) for row in cursor.fetchall()]


def release_window_range(window_id: int, release_start, release_end) -> dict:
    """
    Release part of a window's date range.

    This may delete, shrink, or split the window depending on the range:
    - If the release covers the entire window: delete it
    - If the release is at the start: move start_date forward
    - If the release is at the end: move end_date back
    - If the release is in the middle: split into two windows

    Args:
        window_id: Window ID
        release_start: First day to release
        release_end: Last day to release

    Returns:
        dict: {'action': str, 'window_ids': list}

    Raises:
        InvalidRangeError: If release_start is after release_end
        ValueError: If the window is missing or the range falls outside it
    """
    window = get_window_by_id(window_id)
    if not window:
        raise ValueError("Window not found")

    released = DateRange.checked(release_start, release_end)
    current = DateRange.checked(window['start_date'], window['end_date'])

    if released.start < current.start or released.end > current.end:
        raise ValueError("Released range must lie inside the window")

    result = {'action': None, 'window_ids': []}

    with get_db() as conn:
        if released.start == current.start and released.end == current.end:
            conn.execute('DELETE FROM resource_windows WHERE id = ?', (window_id,))
            result['action'] = 'deleted'

        elif released.start == current.start:
            conn.execute('UPDATE resource_windows SET start_date = ? WHERE id = ?',
                         ((released.end + ONE_DAY).isoformat(), window_id))
            result['action'] = 'shrunk_start'
            result['window_ids'] = [window_id]

        elif released.end == current.end:
            conn.execute('UPDATE resource_windows SET end_date = ? WHERE id = ?',
                         ((released.start - ONE_DAY).isoformat(), window_id))
            result['action'] = 'shrunk_end'
            result['window_ids'] = [window_id]

        else:
            conn.execute('UPDATE resource_windows SET end_date = ? WHERE id = ?',
                         ((released.start - ONE_DAY).isoformat(), window_id))
            cursor = conn.execute('''
                INSERT INTO resource_windows
                (resource_id, kind, start_date, end_date, time_slot, reason, notes, created_by)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            ''', (
                window['resource_id'],
                window['kind'],
                (released.end + ONE_DAY).isoformat(),
                current.end.isoformat(),
                window['time_slot'],
                window['reason'],
                window['notes'],
                window['created_by']
            ))
            result['action'] = 'split'
            result['window_ids'] = [window_id, cursor.lastrowid]

    return result


# =============================================================================
# SWEEP QUERIES
# =============================================================================

def get_unfinished_windows(kind: str, day) -> list:
    """
    Windows of `kind` whose last day is `day` or later.

    Future windows are included; the reconciliation service decides which
    of them are active. Uses the caller's transaction; does not commit.

    Returns:
        list: Dicts with id, resource_id, start_date, end_date
    """
    if kind not in WINDOW_KINDS:
        raise ValueError(f"Invalid window kind: {kind}")

    cursor = get_db().execute('''
        SELECT id, resource_id, start_date, end_date
        FROM resource_windows
        WHERE kind = ? AND end_date >= ?
    ''', (kind, day.isoformat()))

    return [dict(row) for row in cursor.fetchall()]


def purge_windows_ended_before(kind: str, cutoff) -> int:
    """
    Delete windows of `kind` whose last day is before `cutoff`.

    Uses the caller's transaction; does not commit.

    Returns:
        int: Number of windows deleted
    """
    cursor = get_db().execute(
        'DELETE FROM resource_windows WHERE kind = ? AND end_date < ?',
        (kind, cutoff.isoformat())
    )
    return cursor.rowcount
