"""Tests for the availability index."""

from datetime import date
from unittest import mock

import pytest
from django.db import OperationalError

from django_rentals.availability import (
    active_booking_count,
    blocked_ranges,
    conflicting_ranges,
    has_conflict,
)
from django_rentals.daterange import DateRange
from django_rentals.exceptions import AvailabilityUnavailableError
from django_rentals.models import Booking, BookingStatus


def d(day):
    return date(2024, 3, day)


def add_booking(equipment_id, start, end, status=BookingStatus.PENDING):
    """Insert a booking row directly, bypassing the workflow."""
    return Booking.objects.create(
        equipment_id=str(equipment_id),
        renter_id="renter-1",
        owner_id="owner-1",
        start_date=start,
        end_date=end,
        total_price=0,
        currency="SAR",
        pricing_tier="daily",
        status=status,
    )


@pytest.mark.django_db
class TestBlockedRanges:
    """Tests for blocked_ranges()."""

    def test_no_bookings(self):
        assert blocked_ranges("eq-1") == []

    def test_pending_and_confirmed_block(self):
        add_booking("eq-1", d(10), d(12), BookingStatus.CONFIRMED)
        add_booking("eq-1", d(1), d(3), BookingStatus.PENDING)

        assert blocked_ranges("eq-1") == [DateRange(d(1), d(3)), DateRange(d(10), d(12))]

    def test_cancelled_and_completed_do_not_block(self):
        add_booking("eq-1", d(1), d(3), BookingStatus.CANCELLED)
        add_booking("eq-1", d(5), d(7), BookingStatus.COMPLETED)

        assert blocked_ranges("eq-1") == []

    def test_scoped_to_equipment(self):
        add_booking("eq-1", d(1), d(3))
        add_booking("eq-2", d(5), d(7))

        assert blocked_ranges("eq-2") == [DateRange(d(5), d(7))]

    def test_accepts_non_string_ids(self):
        add_booking("42", d(1), d(3))

        assert blocked_ranges(42) == [DateRange(d(1), d(3))]

    def test_database_failure_is_unavailable(self):
        """A failing store is reported, never read as 'no bookings'."""
        with mock.patch.object(
            Booking.objects, "for_equipment", side_effect=OperationalError("connection lost")
        ):
            with pytest.raises(AvailabilityUnavailableError) as exc_info:
                blocked_ranges("eq-1")

        assert exc_info.value.equipment_id == "eq-1"
        assert "connection lost" in str(exc_info.value)


@pytest.mark.django_db
class TestHasConflict:
    """Tests for has_conflict() and conflicting_ranges()."""

    def test_overlap_conflicts(self):
        add_booking("eq-1", d(1), d(5))

        assert has_conflict("eq-1", DateRange(d(2), d(4)))
        assert conflicting_ranges("eq-1", DateRange(d(4), d(8))) == [DateRange(d(1), d(5))]

    def test_back_to_back_is_free(self):
        """A rental may start on the day the previous one ends."""
        add_booking("eq-1", d(1), d(5))

        assert not has_conflict("eq-1", DateRange(d(5), d(9)))
        assert not has_conflict("eq-1", DateRange(d(20), d(21)))

    def test_cancelled_booking_does_not_conflict(self):
        add_booking("eq-1", d(1), d(5), BookingStatus.CANCELLED)

        assert not has_conflict("eq-1", DateRange(d(1), d(5)))

    def test_other_equipment_does_not_conflict(self):
        add_booking("eq-2", d(1), d(5))

        assert not has_conflict("eq-1", DateRange(d(1), d(5)))


@pytest.mark.django_db
class TestActiveBookingCount:
    """Tests for active_booking_count()."""

    def test_counts_only_active(self):
        add_booking("eq-1", d(1), d(3), BookingStatus.PENDING)
        add_booking("eq-1", d(3), d(6), BookingStatus.CONFIRMED)
        add_booking("eq-1", d(1), d(3), BookingStatus.CANCELLED)

        assert active_booking_count("eq-1") == 2
