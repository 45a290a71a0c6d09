"""Per-equipment serialization of the check-then-create sequence.

Two layers, both keyed by equipment id:

1. A process-local lock, acquired with a bounded timeout. It serializes
   threads of one process, including on SQLite where select_for_update()
   is a no-op.
2. select_for_update(nowait=True) on the EquipmentCalendar row inside the
   caller's transaction, retried until the same deadline. It serializes
   processes on databases with row locks.

Requests for different equipment never share a lock. They may still queue
on the database's own write lock (SQLite has one per database file).
"""

import logging
import threading
import time
from contextlib import contextmanager

from django.db import DatabaseError, transaction

from .conf import get_setting
from .exceptions import AvailabilityUnavailableError
from .models import EquipmentCalendar


logger = logging.getLogger(__name__)

# Pause between attempts to take a row lock held by another process
ROW_LOCK_RETRY_INTERVAL = 0.05

_registry_guard = threading.Lock()
_locks: dict[str, list] = {}


def _acquire_entry(key: str) -> list:
    # entry is [lock, holders]; removed when the last holder leaves
    with _registry_guard:
        entry = _locks.get(key)
        if entry is None:
            entry = _locks[key] = [threading.Lock(), 0]
        entry[1] += 1
        return entry


def _release_entry(key: str, entry: list) -> None:
    with _registry_guard:
        entry[1] -= 1
        if entry[1] == 0 and _locks.get(key) is entry:
            del _locks[key]


def _lock_calendar(key: str, deadline: float) -> EquipmentCalendar:
    """Lock the calendar row, retrying a held lock until ``deadline``."""
    try:
        EquipmentCalendar.objects.get_or_create(equipment_id=key)
    except DatabaseError as e:
        raise AvailabilityUnavailableError(key, str(e)) from e

    while True:
        try:
            # Savepoint so a failed attempt leaves the transaction usable
            with transaction.atomic():
                return EquipmentCalendar.objects.select_for_update(nowait=True).get(equipment_id=key)
        except DatabaseError as e:
            if time.monotonic() >= deadline:
                logger.warning("Could not lock calendar row of equipment %s: %s", key, e)
                raise AvailabilityUnavailableError(key, str(e)) from e
        time.sleep(ROW_LOCK_RETRY_INTERVAL)


@contextmanager
def equipment_lock(equipment_id: str, timeout: float = None):
    """
    Hold the booking calendar of one equipment for the duration of the block.

    Opens a transaction; the block's writes commit when it exits cleanly.
    ``timeout`` (default ``RENTALS_LOCK_TIMEOUT``) bounds the wait for both
    the process lock and the calendar row lock.

    Usage:
        with equipment_lock(equipment_id) as calendar:
            ...check conflicts, create booking...

    Raises:
        AvailabilityUnavailableError: If the lock cannot be taken in time or
            the calendar row cannot be locked
    """
    key = str(equipment_id)
    if timeout is None:
        timeout = get_setting("LOCK_TIMEOUT")
    deadline = time.monotonic() + timeout

    entry = _acquire_entry(key)
    try:
        if not entry[0].acquire(timeout=timeout):
            logger.warning("Timed out after %ss waiting for equipment %s", timeout, key)
            raise AvailabilityUnavailableError(key, "timed out waiting for the booking lock")
        try:
            with transaction.atomic():
                yield _lock_calendar(key, deadline)
        finally:
            entry[0].release()
    finally:
        _release_entry(key, entry)
