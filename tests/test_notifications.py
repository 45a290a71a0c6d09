"""Tests for booking notifications."""

import logging
from datetime import date

import pytest
from django.db import transaction

from django_rentals.notifications import CREATED, LoggingNotificationDispatcher, notify
from django_rentals.services import cancel_booking, confirm_booking
from tests.testapp.dispatchers import RecordingDispatcher


def d(day, month=3):
    return date(2024, month, day)


@pytest.mark.django_db
class TestNotify:
    """Tests for notify()."""

    def test_sent_after_commit(self, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks() as callbacks:
            notify("b-1", CREATED)
            assert RecordingDispatcher.events == []

        assert len(callbacks) == 1
        callbacks[0]()
        assert RecordingDispatcher.events == [("b-1", "created")]

    def test_nothing_sent_on_rollback(self, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            with pytest.raises(RuntimeError):
                with transaction.atomic():
                    notify("b-1", CREATED)
                    raise RuntimeError("abort")

        assert callbacks == []
        assert RecordingDispatcher.events == []

    def test_unknown_event_rejected(self):
        with pytest.raises(ValueError):
            notify("b-1", "exploded")

    def test_booking_ids_sent_as_strings(self, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            notify(42, CREATED)

        assert RecordingDispatcher.events == [("42", "created")]


@pytest.mark.django_db
class TestDispatcherFailures:
    """A failing dispatcher never fails the booking operation."""

    def test_exploding_dispatcher_is_logged(self, settings, caplog, django_capture_on_commit_callbacks):
        settings.RENTALS_NOTIFICATION_DISPATCHER = "tests.testapp.dispatchers.ExplodingDispatcher"

        with django_capture_on_commit_callbacks(execute=True):
            notify("b-1", CREATED)

        assert "Notification dispatch failed for booking b-1" in caplog.text

    def test_booking_survives_dispatch_failure(self, settings, make_booking, django_capture_on_commit_callbacks):
        settings.RENTALS_NOTIFICATION_DISPATCHER = "tests.testapp.dispatchers.ExplodingDispatcher"

        with django_capture_on_commit_callbacks(execute=True):
            booking = make_booking(d(1), d(5))

        booking.refresh_from_db()
        assert booking.status == "pending"


@pytest.mark.django_db
class TestLifecycleEvents:
    """Each lifecycle step sends exactly one event."""

    def test_full_sequence(self, make_booking, owner, renter, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            booking = make_booking(d(1), d(5))
        with django_capture_on_commit_callbacks(execute=True):
            confirm_booking(booking.pk, owner)
        with django_capture_on_commit_callbacks(execute=True):
            cancel_booking(booking.pk, renter)

        booking_id = str(booking.pk)
        assert RecordingDispatcher.events == [
            (booking_id, "created"),
            (booking_id, "confirmed"),
            (booking_id, "cancelled"),
        ]


class TestLoggingDispatcher:
    """Tests for the default dispatcher."""

    def test_logs_event(self, caplog):
        with caplog.at_level(logging.INFO, logger="django_rentals.notifications"):
            LoggingNotificationDispatcher().dispatch("b-1", "confirmed")

        assert "Booking b-1: confirmed notification requested" in caplog.text
