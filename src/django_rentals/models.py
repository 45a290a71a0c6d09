"""Models for django-rentals.

Provides:
- Equipment: Default backing store for the equipment catalog
- Booking: A rental request for a half-open date range
- BookingTransition: Audit log of all status changes
- EquipmentCalendar: Per-equipment row locked while booking

Write through services only:
- request_booking(), cancel_booking(), confirm_booking(), complete_booking()
"""

import uuid

from django.db import models
from django.db.models import F, Q

from .conf import get_setting
from .daterange import DateRange


def default_currency():
    return get_setting("DEFAULT_CURRENCY")


class RentalsBaseModel(models.Model):
    """Base model with timestamps."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class BookingStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    CONFIRMED = "confirmed", "Confirmed"
    CANCELLED = "cancelled", "Cancelled"
    COMPLETED = "completed", "Completed"


# Statuses that hold dates on the equipment calendar
ACTIVE_STATUSES = (BookingStatus.PENDING, BookingStatus.CONFIRMED)


class Equipment(RentalsBaseModel):
    """
    A rentable listing.

    Only the fields the reservation engine reads are modelled here; listing
    presentation (photos, specs, location) lives elsewhere.
    """

    owner_id = models.CharField(
        max_length=255,
        db_index=True,
        help_text="User id of the listing owner",
    )
    title = models.CharField(max_length=200)
    daily_rate = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        help_text="Price per day; required for hires shorter than a month",
    )
    monthly_rate = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        help_text="Price per 30-day block; required for hires of a month or more",
    )
    currency = models.CharField(max_length=3, default=default_currency)
    is_available_for_rental = models.BooleanField(
        default=True,
        help_text="Whether new bookings may be requested",
    )

    class Meta:
        ordering = ["title"]
        constraints = [
            models.CheckConstraint(
                condition=Q(daily_rate__isnull=True) | Q(daily_rate__gt=0),
                name="rentals_equipment_daily_rate_positive",
            ),
            models.CheckConstraint(
                condition=Q(monthly_rate__isnull=True) | Q(monthly_rate__gt=0),
                name="rentals_equipment_monthly_rate_positive",
            ),
        ]

    def __str__(self):
        return f"{self.title} ({self.pk})"


class BookingQuerySet(models.QuerySet):
    """Custom queryset for Booking model."""

    def for_equipment(self, equipment_id):
        return self.filter(equipment_id=str(equipment_id))

    def active(self):
        """Bookings that block the calendar."""
        return self.filter(status__in=ACTIVE_STATUSES)

    def overlapping(self, date_range: DateRange):
        """Bookings whose range shares at least one day with ``date_range``."""
        return self.filter(start_date__lt=date_range.end, end_date__gt=date_range.start)


class Booking(RentalsBaseModel):
    """
    A rental of one piece of equipment for a half-open date range.

    Key invariants:
    - start_date < end_date
    - equipment, parties, dates and price never change after creation
    - active bookings of the same equipment never overlap
    - status only moves along the lifecycle graph
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Plain id, not a FK: deleting the listing must not touch its bookings
    equipment_id = models.CharField(max_length=255)
    equipment_title = models.CharField(
        max_length=200,
        blank=True,
        default="",
        help_text="Listing title when the booking was made",
    )
    renter_id = models.CharField(max_length=255, db_index=True)
    owner_id = models.CharField(max_length=255, db_index=True)

    start_date = models.DateField()
    end_date = models.DateField(help_text="Exclusive; the equipment is free again on this day")

    total_price = models.DecimalField(max_digits=14, decimal_places=3)
    currency = models.CharField(max_length=3)
    pricing_tier = models.CharField(max_length=10)

    status = models.CharField(
        max_length=20,
        choices=BookingStatus.choices,
        default=BookingStatus.PENDING,
    )
    disputed_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="Set when a party disputes the rental; blocks completion",
    )

    objects = BookingQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["equipment_id", "status"], name="rentals_booking_equip_status"),
            models.Index(fields=["status", "end_date"], name="rentals_booking_status_end"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(start_date__lt=F("end_date")),
                name="rentals_booking_start_before_end",
            ),
            models.CheckConstraint(
                condition=Q(total_price__gte=0),
                name="rentals_booking_price_non_negative",
            ),
        ]

    def __str__(self):
        return f"Booking({self.equipment_id}, {self.date_range}, {self.status})"

    @property
    def date_range(self) -> DateRange:
        return DateRange(self.start_date, self.end_date)

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

    @property
    def is_disputed(self) -> bool:
        return self.disputed_at is not None


class BookingTransition(models.Model):
    """
    Audit log of booking status changes.

    One row per accepted transition. Rejected transitions leave no trace.
    """

    booking = models.ForeignKey(
        Booking,
        on_delete=models.CASCADE,
        related_name="transitions",
    )
    from_status = models.CharField(max_length=20)
    to_status = models.CharField(max_length=20)
    actor_id = models.CharField(max_length=255)
    actor_role = models.CharField(max_length=20)
    transitioned_at = models.DateTimeField(auto_now_add=True)
    metadata = models.JSONField(default=dict, blank=True)

    class Meta:
        ordering = ["-transitioned_at"]
        indexes = [
            models.Index(fields=["booking", "-transitioned_at"], name="rentals_transition_booking"),
        ]

    def __str__(self):
        return f"{self.booking_id}: {self.from_status} -> {self.to_status}"


class EquipmentCalendar(models.Model):
    """
    Lock row for one equipment's booking calendar.

    Locked with select_for_update() while conflicts are checked and a new
    booking is written, so concurrent requests for the same equipment
    are serialized.
    """

    equipment_id = models.CharField(max_length=255, unique=True)
    bookings_created = models.PositiveIntegerField(default=0)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"EquipmentCalendar({self.equipment_id})"
