"""Availability index.

Every pending or confirmed booking holds its range on the equipment's
calendar. Cancelled bookings never block, completed ones no longer do.

Database failures surface as AvailabilityUnavailableError so that callers
refuse to book instead of assuming the dates are free.
"""

from django.db import DatabaseError

from .daterange import DateRange
from .exceptions import AvailabilityUnavailableError
from .models import Booking


def _active_bookings(equipment_id):
    return Booking.objects.for_equipment(equipment_id).active()


def blocked_ranges(equipment_id) -> list[DateRange]:
    """
    Return the ranges held by active bookings, ordered by start date.

    Raises:
        AvailabilityUnavailableError: If the booking store cannot be read
    """
    try:
        rows = list(
            _active_bookings(equipment_id)
            .order_by("start_date", "end_date")
            .values_list("start_date", "end_date")
        )
    except DatabaseError as e:
        raise AvailabilityUnavailableError(str(equipment_id), str(e)) from e
    return [DateRange(start, end) for start, end in rows]


def conflicting_ranges(equipment_id, candidate: DateRange) -> list[DateRange]:
    """Return the blocked ranges that overlap ``candidate``."""
    return [blocked for blocked in blocked_ranges(equipment_id) if blocked.overlaps(candidate)]


def has_conflict(equipment_id, candidate: DateRange) -> bool:
    """
    True iff ``candidate`` overlaps any blocked range of the equipment.

    Raises:
        AvailabilityUnavailableError: If the booking store cannot be read
    """
    return bool(conflicting_ranges(equipment_id, candidate))


def active_booking_count(equipment_id) -> int:
    """
    Number of bookings currently holding dates on the equipment.

    Raises:
        AvailabilityUnavailableError: If the booking store cannot be read
    """
    return len(blocked_ranges(equipment_id))
