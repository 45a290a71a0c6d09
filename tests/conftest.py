"""Pytest configuration for django-rentals tests."""

from datetime import date
from decimal import Decimal

import pytest

from django_rentals.conf import clear_collaborator_cache
from django_rentals.identity import Principal, ROLE_ADMIN
from tests.testapp.dispatchers import RecordingDispatcher


# Fixed "today" used across the suite
TODAY = date(2024, 2, 20)


@pytest.fixture(autouse=True)
def reset_collaborators():
    """Clear loaded collaborators and recorded notifications around each test."""
    clear_collaborator_cache()
    RecordingDispatcher.events.clear()
    yield
    clear_collaborator_cache()
    RecordingDispatcher.events.clear()


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def equipment(db):
    """An excavator owned by owner-1, priced 500/day and 12000/month."""
    from django_rentals.models import Equipment

    return Equipment.objects.create(
        owner_id="owner-1",
        title="CAT 320 Excavator",
        daily_rate=Decimal("500"),
        monthly_rate=Decimal("12000"),
        currency="SAR",
    )


@pytest.fixture
def other_equipment(db):
    """A second listing from the same owner."""
    from django_rentals.models import Equipment

    return Equipment.objects.create(
        owner_id="owner-1",
        title="Komatsu D65 Dozer",
        daily_rate=Decimal("700"),
        monthly_rate=Decimal("15000"),
        currency="SAR",
    )


@pytest.fixture
def admin():
    return Principal(user_id="admin-1", role=ROLE_ADMIN)


@pytest.fixture
def owner():
    return Principal(user_id="owner-1")


@pytest.fixture
def renter():
    return Principal(user_id="renter-1")


@pytest.fixture
def make_booking(equipment, today):
    """Create a pending booking through the workflow."""
    from django_rentals.daterange import DateRange
    from django_rentals.services import request_booking

    def _make(start, end, renter_id="renter-1", equipment_id=None):
        return request_booking(
            equipment_id or equipment.pk,
            renter_id,
            DateRange(start, end),
            today=today,
        )

    return _make
