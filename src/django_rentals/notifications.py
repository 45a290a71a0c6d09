"""Booking notifications.

Delivery (e-mail, push, SMS) belongs to an external dispatcher. This module
only guarantees that each booking event is handed over exactly once, after
the transaction that produced it has committed. A failing dispatcher is
logged and never undoes or fails the booking operation.
"""

import logging

from django.db import transaction

from .conf import get_notification_dispatcher


logger = logging.getLogger(__name__)

CREATED = "created"
CONFIRMED = "confirmed"
CANCELLED = "cancelled"
COMPLETED = "completed"

EVENTS = (CREATED, CONFIRMED, CANCELLED, COMPLETED)


class BaseNotificationDispatcher:
    """Hands booking events to a delivery channel."""

    def dispatch(self, booking_id: str, event: str) -> None:
        raise NotImplementedError("Subclasses must implement dispatch()")


class LoggingNotificationDispatcher(BaseNotificationDispatcher):
    """Default dispatcher: records the event in the log only."""

    def dispatch(self, booking_id: str, event: str) -> None:
        logger.info("Booking %s: %s notification requested", booking_id, event)


def _deliver(booking_id: str, event: str) -> None:
    try:
        get_notification_dispatcher().dispatch(booking_id, event)
    except Exception:
        logger.exception("Notification dispatch failed for booking %s (%s)", booking_id, event)


def notify(booking_id, event: str) -> None:
    """
    Request one notification for a booking event.

    Runs after the surrounding transaction commits; if the transaction rolls
    back, nothing is sent.

    Raises:
        ValueError: If event is not a known booking event
    """
    if event not in EVENTS:
        raise ValueError(f"Unknown booking event '{event}'")
    booking_id = str(booking_id)
    transaction.on_commit(lambda: _deliver(booking_id, event))
