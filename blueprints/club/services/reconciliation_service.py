"""
Reconciliation Service - derived resource flags.

`is_reserved` and `is_out_of_order` are a cheap index over the reservation
and maintenance windows. Each sweep derives the target flag set from the
windows and the current day, then writes only the resources whose persisted
flag differs. Derivation is pure; writing the delta is the only side effect,
so a sweep repeated without data changes writes nothing.
"""

import logging
import sqlite3
import time
from dataclasses import dataclass
from datetime import timedelta

from flask import current_app

from database import get_db
from models.resource import bulk_set_flag, get_flagged_resource_ids, release_expired_holds
from models.resource_window import (
    MAINTENANCE,
    RESERVATION,
    get_unfinished_windows,
    purge_windows_ended_before,
)
from utils.date_ranges import ONE_DAY
from utils.datetime_helpers import get_now, to_club_date, to_club_datetime

logger = logging.getLogger(__name__)

FLAG_FOR_KIND = {
    RESERVATION: 'is_reserved',
    MAINTENANCE: 'is_out_of_order',
}


@dataclass(frozen=True)
class FlagDelta:
    """Resources whose flag must be switched on or off."""

    to_set: frozenset
    to_clear: frozenset

    @property
    def is_empty(self) -> bool:
        return not self.to_set and not self.to_clear


# =============================================================================
# PURE DERIVATION
# =============================================================================

def is_window_active(window: dict, now) -> bool:
    """
    Whether a window is active at `now`, at calendar-day granularity.

    A reservation is active when it starts before the next day boundary and
    ends on or after the start of today, so one ending today stays active
    until midnight. Maintenance windows use the same closed-day rule.
    """
    today = to_club_date(now)
    start = to_club_date(window['start_date'])
    end = to_club_date(window['end_date'])
    return start < today + ONE_DAY and end >= today


def derive_target_ids(windows, now) -> set:
    """Resource IDs with at least one active window among `windows`."""
    return {w['resource_id'] for w in windows if is_window_active(w, now)}


def derive_flag_deltas(flagged_ids, target_ids) -> FlagDelta:
    """
    Compare persisted flags with the derived target set.

    Args:
        flagged_ids: Resources whose flag is currently set
        target_ids: Resources whose flag should be set

    Returns:
        FlagDelta
    """
    flagged = frozenset(flagged_ids)
    target = frozenset(target_ids)
    return FlagDelta(to_set=target - flagged, to_clear=flagged - target)


# =============================================================================
# SWEEPS
# =============================================================================

def sweep_reservation_flags(now=None) -> dict:
    """
    Reconcile `is_reserved` against reservation windows.

    Returns:
        dict: {'set': int, 'cleared': int}
    """
    return _run_with_lock_retry(lambda: _reconcile_flag(RESERVATION, now or get_now()))


def sweep_maintenance_flags(now=None, retention_days=None) -> dict:
    """
    Reconcile `is_out_of_order` against maintenance windows, then purge
    maintenance windows that ended more than `retention_days` ago.

    Args:
        now: Reference time (defaults to the current club time)
        retention_days: Days to keep ended windows; None disables the purge

    Returns:
        dict: {'set': int, 'cleared': int, 'purged': int}
    """
    now = now or get_now()

    def apply():
        return _reconcile_flag(MAINTENANCE, now, retention_days=retention_days)

    return _run_with_lock_retry(apply)


def sweep_expired_holds(now=None) -> dict:
    """
    Release resource holds whose expiry has passed.

    Returns:
        dict: {'released': int}
    """
    now = to_club_datetime(now or get_now())

    def apply():
        db = get_db()
        db.execute('BEGIN IMMEDIATE')
        try:
            released = release_expired_holds(now)
            db.commit()
        except Exception:
            db.rollback()
            raise
        if released:
            logger.info("Released %d expired resource holds", released)
        return {'released': released}

    return _run_with_lock_retry(apply)


def _reconcile_flag(kind: str, now, retention_days=None) -> dict:
    """Compute and apply one flag delta inside a single write transaction."""
    flag = FLAG_FOR_KIND[kind]
    today = to_club_date(now)

    db = get_db()
    # Hold the write lock from the read until the commit so the target set
    # cannot go stale between computing it and applying it.
    db.execute('BEGIN IMMEDIATE')
    try:
        target_ids = derive_target_ids(get_unfinished_windows(kind, today), now)
        flagged_ids = get_flagged_resource_ids(flag)
        delta = derive_flag_deltas(flagged_ids, target_ids)

        counts = {
            'set': bulk_set_flag(delta.to_set, flag, True),
            'cleared': bulk_set_flag(delta.to_clear, flag, False),
        }

        if kind == MAINTENANCE:
            counts['purged'] = 0
            if retention_days is not None:
                cutoff = today - timedelta(days=retention_days)
                counts['purged'] = purge_windows_ended_before(MAINTENANCE, cutoff)

        db.commit()
    except Exception:
        db.rollback()
        raise

    if not delta.is_empty:
        logger.info(
            "%s sweep for %s: set=%d cleared=%d",
            flag, today.isoformat(), counts['set'], counts['cleared']
        )
    if counts.get('purged'):
        logger.info("Purged %d ended maintenance windows", counts['purged'])

    return counts


def _run_with_lock_retry(apply):
    """Retry a sweep a few times when SQLite reports the database locked."""
    retries = current_app.config.get('RECONCILE_LOCK_RETRIES', 3)
    delay = current_app.config.get('RECONCILE_LOCK_RETRY_DELAY', 0.2)

    attempt = 0
    while True:
        try:
            return apply()
        except sqlite3.OperationalError as e:
            if 'locked' not in str(e) or attempt >= retries:
                raise
            attempt += 1
            logger.warning("Database locked, retry %d/%d", attempt, retries)
            time.sleep(delay)
