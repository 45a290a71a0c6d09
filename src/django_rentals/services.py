"""Reservation workflow and booking operations.

All write operations go through these functions. Direct model manipulation
bypasses the conflict check and the lifecycle graph and is unsupported.

Provides:
- request_booking: Validate, conflict-check, price and create a pending booking
- quote_price: Price preview without booking
- get_blocked_ranges: Dates held on an equipment calendar
- confirm_booking / cancel_booking / complete_booking: Lifecycle transitions
- complete_elapsed_bookings: Complete every confirmed booking whose period ended
"""

import logging
from datetime import date, timedelta

from django.db import transaction
from django.utils import timezone

from . import availability, lifecycle, notifications
from .conf import get_equipment_catalog, get_setting
from .daterange import DateRange
from .exceptions import (
    DateConflictError,
    EquipmentUnavailableError,
    InvalidTransitionError,
    RangeOutOfBoundsError,
    SelfBookingError,
)
from .identity import SYSTEM
from .locks import equipment_lock
from .models import Booking, BookingStatus
from .pricing import Quote, quote_range


logger = logging.getLogger(__name__)


def booking_window(today: date = None) -> tuple[date, date]:
    """Earliest and latest allowed start dates, both inclusive."""
    today = today or timezone.localdate()
    return today, today + timedelta(days=get_setting("BOOKING_HORIZON_DAYS"))


def _check_bounds(candidate: DateRange, today: date) -> None:
    earliest, latest = booking_window(today)
    if candidate.start < earliest or candidate.start > latest:
        raise RangeOutOfBoundsError(candidate.start, earliest, latest)


def _bookable_record(equipment_id: str, renter_id: str):
    record = get_equipment_catalog().get(equipment_id)
    if record.owner_id == renter_id:
        raise SelfBookingError(equipment_id, renter_id)
    if not record.is_available_for_rental:
        raise EquipmentUnavailableError(equipment_id)
    return record


def quote_price(equipment_id, date_range: DateRange) -> Quote:
    """
    Price a range for a listing without creating a booking.

    Raises:
        EquipmentNotFoundError: If the listing does not exist
        InvalidRateError: If the listing has no usable rate for the range length
    """
    record = get_equipment_catalog().get(str(equipment_id))
    return quote_range(date_range, record.rate_schedule)


def get_blocked_ranges(equipment_id) -> list[DateRange]:
    """
    Ranges held by pending or confirmed bookings of a listing.

    Raises:
        AvailabilityUnavailableError: If the booking store cannot be read
    """
    return availability.blocked_ranges(equipment_id)


def request_booking(
    equipment_id,
    renter_id,
    candidate: DateRange,
    *,
    today: date = None,
) -> Booking:
    """
    Request a rental of a listing for a date range.

    The conflict check and the insert run under the equipment's lock, so
    two overlapping requests for the same listing cannot both succeed.

    Args:
        equipment_id: The listing to rent
        renter_id: User id of the renter (already authenticated)
        candidate: Half-open range of rental days
        today: Reference date for the booking window (defaults to today)

    Returns:
        The created Booking, in pending status

    Raises:
        RangeOutOfBoundsError: If the start is before today or past the horizon
        EquipmentNotFoundError: If the listing does not exist
        SelfBookingError: If the renter owns the listing
        EquipmentUnavailableError: If the listing is not open for rental
        AvailabilityUnavailableError: If availability cannot be determined
        DateConflictError: If the range overlaps an active booking
        InvalidRateError: If the listing has no usable rate for the range length
    """
    equipment_id = str(equipment_id)
    renter_id = str(renter_id)
    today = today or timezone.localdate()

    _check_bounds(candidate, today)
    _bookable_record(equipment_id, renter_id)

    with equipment_lock(equipment_id) as calendar:
        # Re-read under the lock; the listing may have been deleted or withdrawn
        record = _bookable_record(equipment_id, renter_id)

        conflicts = availability.conflicting_ranges(equipment_id, candidate)
        if conflicts:
            logger.warning(
                "Rejected %s for equipment %s: overlaps %s",
                candidate, equipment_id, ", ".join(str(c) for c in conflicts),
            )
            raise DateConflictError(equipment_id, candidate, conflicts)

        quote = quote_range(candidate, record.rate_schedule)

        booking = Booking.objects.create(
            equipment_id=equipment_id,
            equipment_title=record.title,
            renter_id=renter_id,
            owner_id=record.owner_id,
            start_date=candidate.start,
            end_date=candidate.end,
            total_price=quote.amount,
            currency=quote.currency,
            pricing_tier=quote.tier,
            status=BookingStatus.PENDING,
        )
        calendar.bookings_created += 1
        calendar.save(update_fields=["bookings_created", "updated_at"])

        notifications.notify(booking.pk, notifications.CREATED)

    logger.info(
        "Booking %s created: equipment %s, %s, %s %s",
        booking.pk, equipment_id, candidate, quote.amount, quote.currency,
    )
    return booking


@transaction.atomic
def confirm_booking(booking_id, actor) -> Booking:
    """
    Accept a pending booking. Owner or admin only.

    Raises:
        BookingNotFoundError: If the booking does not exist
        InvalidTransitionError: If the booking is not pending
        TransitionNotPermittedError: If the actor is neither owner nor admin
    """
    booking = lifecycle.transition(booking_id, BookingStatus.CONFIRMED, actor)
    notifications.notify(booking.pk, notifications.CONFIRMED)
    return booking


@transaction.atomic
def cancel_booking(booking_id, actor) -> Booking:
    """
    Cancel a pending or confirmed booking, freeing its dates immediately.

    Raises:
        BookingNotFoundError: If the booking does not exist
        InvalidTransitionError: If the booking is already cancelled or completed
        TransitionNotPermittedError: If the actor is not a party or an admin
    """
    booking = lifecycle.transition(booking_id, BookingStatus.CANCELLED, actor)
    notifications.notify(booking.pk, notifications.CANCELLED)
    return booking


@transaction.atomic
def complete_booking(booking_id, actor=SYSTEM, *, today: date = None) -> Booking:
    """
    Mark a confirmed booking completed once its end date has passed.

    Raises:
        BookingNotFoundError: If the booking does not exist
        InvalidTransitionError: If the booking is not confirmed, still running
            or disputed
        TransitionNotPermittedError: If the actor is not owner, admin or system
    """
    booking = lifecycle.transition(booking_id, BookingStatus.COMPLETED, actor, today=today)
    notifications.notify(booking.pk, notifications.COMPLETED)
    return booking


def complete_elapsed_bookings(*, today: date = None, dry_run: bool = False) -> list[Booking]:
    """
    Complete every confirmed, undisputed booking whose end date has passed.

    Returns:
        The bookings completed (or that would be, with dry_run)
    """
    today = today or timezone.localdate()
    due = Booking.objects.filter(
        status=BookingStatus.CONFIRMED,
        end_date__lte=today,
        disputed_at__isnull=True,
    ).order_by("end_date")

    if dry_run:
        return list(due)

    completed = []
    for booking in due:
        try:
            completed.append(complete_booking(booking.pk, SYSTEM, today=today))
        except InvalidTransitionError as e:
            # Changed (cancelled or disputed) since it was listed
            logger.info("Skipped completing booking %s: %s", booking.pk, e)
    return completed
