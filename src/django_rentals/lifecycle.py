"""Booking lifecycle state machine.

    pending ──► confirmed ──► completed
       │            │
       └──► cancelled ◄┘

cancelled and completed are terminal. Each edge names the parties allowed
to trigger it; completion also requires the rental period to have ended and
no dispute to be open.
"""

import logging
from datetime import date

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from .exceptions import BookingNotFoundError, InvalidTransitionError, TransitionNotPermittedError
from .identity import Principal, as_principal
from .models import Booking, BookingStatus, BookingTransition


logger = logging.getLogger(__name__)

RENTER = "renter"
OWNER = "owner"
ADMIN = "admin"
SYSTEM = "system"

PENDING = BookingStatus.PENDING.value
CONFIRMED = BookingStatus.CONFIRMED.value
CANCELLED = BookingStatus.CANCELLED.value
COMPLETED = BookingStatus.COMPLETED.value

# from_status -> to_status -> parties allowed to trigger it
TRANSITIONS = {
    PENDING: {
        CONFIRMED: {OWNER, ADMIN},
        CANCELLED: {RENTER, OWNER, ADMIN},
    },
    CONFIRMED: {
        CANCELLED: {RENTER, OWNER, ADMIN},
        COMPLETED: {OWNER, ADMIN, SYSTEM},
    },
}

TERMINAL_STATUSES = (CANCELLED, COMPLETED)


def _status_value(status) -> str:
    return getattr(status, "value", status)


def actor_relations(booking: Booking, actor: Principal) -> set[str]:
    """The capacities in which ``actor`` acts on ``booking``."""
    relations = set()
    if actor.is_admin:
        relations.add(ADMIN)
    if actor.is_system:
        relations.add(SYSTEM)
    if actor.user_id == booking.renter_id:
        relations.add(RENTER)
    if actor.user_id == booking.owner_id:
        relations.add(OWNER)
    return relations


def get_allowed_transitions(booking: Booking) -> list[str]:
    """
    Get list of valid next statuses from the graph.

    Terminal statuses return an empty list.
    """
    return list(TRANSITIONS.get(_status_value(booking.status), {}))


def _check_transition(booking: Booking, to_status: str, actor: Principal, today: date) -> None:
    """Raise if ``actor`` cannot move ``booking`` to ``to_status`` right now."""
    from_status = _status_value(booking.status)

    if from_status in TERMINAL_STATUSES:
        raise InvalidTransitionError(
            from_status, to_status,
            f"Cannot transition from terminal status '{from_status}'",
        )

    allowed_actors = TRANSITIONS.get(from_status, {}).get(to_status)
    if allowed_actors is None:
        raise InvalidTransitionError(from_status, to_status)

    if not allowed_actors & actor_relations(booking, actor):
        raise TransitionNotPermittedError(from_status, to_status, actor.user_id)

    if to_status == COMPLETED:
        if booking.end_date > today:
            raise InvalidTransitionError(
                from_status, to_status,
                f"Rental runs until {booking.end_date}; cannot complete on {today}",
            )
        if booking.is_disputed:
            raise InvalidTransitionError(
                from_status, to_status,
                "Cannot complete a disputed booking",
            )


def validate_transition(booking: Booking, to_status: str, actor, today: date = None) -> tuple[bool, str]:
    """
    Check whether a transition would be accepted, without applying it.

    Returns:
        Tuple of (allowed, reason); reason is empty when allowed
    """
    today = today or timezone.localdate()
    try:
        _check_transition(booking, _status_value(to_status), as_principal(actor), today)
    except InvalidTransitionError as e:
        return False, e.reason
    return True, ""


def _lock_booking(booking_id) -> Booking:
    try:
        return Booking.objects.select_for_update().get(pk=booking_id)
    except (Booking.DoesNotExist, ValueError, ValidationError):
        raise BookingNotFoundError(booking_id)


@transaction.atomic
def transition(
    booking_id,
    to_status: str,
    actor,
    today: date = None,
    metadata: dict = None,
) -> Booking:
    """
    Move a booking to a new status.

    Re-reads the booking under a row lock, then writes the new status,
    refreshes updated_at and records a BookingTransition, all in one
    transaction. On any failure nothing changes.

    Args:
        booking_id: Primary key of the booking
        to_status: Target status
        actor: Principal (or user id) performing the transition
        today: Date used for the completion check (defaults to today)
        metadata: Optional metadata for the audit record

    Returns:
        The updated Booking

    Raises:
        BookingNotFoundError: If the booking does not exist
        InvalidTransitionError: If the edge is not in the graph or its
            preconditions do not hold
        TransitionNotPermittedError: If the actor may not trigger the edge
    """
    to_status = _status_value(to_status)
    actor = as_principal(actor)
    today = today or timezone.localdate()
    booking = _lock_booking(booking_id)

    _check_transition(booking, to_status, actor, today)

    from_status = _status_value(booking.status)
    booking.status = to_status
    booking.save(update_fields=["status", "updated_at"])

    BookingTransition.objects.create(
        booking=booking,
        from_status=from_status,
        to_status=to_status,
        actor_id=actor.user_id,
        actor_role=actor.role,
        metadata=metadata or {},
    )

    logger.info(
        "Booking %s: %s -> %s by %s", booking.pk, from_status, to_status, actor.user_id
    )
    return booking


@transaction.atomic
def raise_dispute(booking_id, actor, reason: str = "") -> Booking:
    """
    Flag a confirmed booking as disputed so it cannot be completed.

    Raises:
        BookingNotFoundError: If the booking does not exist
        InvalidTransitionError: If the booking is not confirmed
        TransitionNotPermittedError: If the actor is not a party or an admin
    """
    actor = as_principal(actor)
    booking = _lock_booking(booking_id)

    if booking.status != CONFIRMED:
        raise InvalidTransitionError(
            booking.status, booking.status,
            f"Only confirmed bookings can be disputed (status is '{booking.status}')",
        )
    if not {RENTER, OWNER, ADMIN} & actor_relations(booking, actor):
        raise TransitionNotPermittedError(booking.status, booking.status, actor.user_id)

    if booking.disputed_at is None:
        booking.disputed_at = timezone.now()
        booking.save(update_fields=["disputed_at", "updated_at"])
        BookingTransition.objects.create(
            booking=booking,
            from_status=booking.status,
            to_status=booking.status,
            actor_id=actor.user_id,
            actor_role=actor.role,
            metadata={"dispute": reason},
        )
        logger.warning("Booking %s disputed by %s: %s", booking.pk, actor.user_id, reason)
    return booking
