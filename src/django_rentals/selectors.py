"""Read-side queries for bookings.

Selectors never write. Use services for any state change.
"""

from django.core.exceptions import ValidationError

from .exceptions import BookingNotFoundError
from .models import Booking


def get_booking(booking_id) -> Booking:
    """
    Fetch a booking by id, whether or not its listing still exists.

    Raises:
        BookingNotFoundError: If the booking does not exist
    """
    try:
        return Booking.objects.get(pk=booking_id)
    except (Booking.DoesNotExist, ValueError, ValidationError):
        raise BookingNotFoundError(booking_id)


def bookings_for_renter(renter_id, status=None):
    """Bookings made by a renter, newest first."""
    qs = Booking.objects.filter(renter_id=str(renter_id))
    if status:
        qs = qs.filter(status=status)
    return qs.order_by("-created_at")


def bookings_for_owner(owner_id, status=None):
    """Bookings on an owner's equipment, newest first."""
    qs = Booking.objects.filter(owner_id=str(owner_id))
    if status:
        qs = qs.filter(status=status)
    return qs.order_by("-created_at")


def bookings_for_equipment(equipment_id, active_only: bool = False):
    """Bookings of one listing in calendar order."""
    qs = Booking.objects.for_equipment(equipment_id)
    if active_only:
        qs = qs.active()
    return qs.order_by("start_date")
