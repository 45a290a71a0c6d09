# Generated manually for standalone django-rentals package

import uuid

import django.db.models.deletion
import django_rentals.models
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Equipment",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "owner_id",
                    models.CharField(
                        db_index=True,
                        help_text="User id of the listing owner",
                        max_length=255,
                    ),
                ),
                ("title", models.CharField(max_length=200)),
                (
                    "daily_rate",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        help_text="Price per day; required for hires shorter than a month",
                        max_digits=12,
                        null=True,
                    ),
                ),
                (
                    "monthly_rate",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        help_text="Price per 30-day block; required for hires of a month or more",
                        max_digits=12,
                        null=True,
                    ),
                ),
                (
                    "currency",
                    models.CharField(
                        default=django_rentals.models.default_currency, max_length=3
                    ),
                ),
                (
                    "is_available_for_rental",
                    models.BooleanField(
                        default=True,
                        help_text="Whether new bookings may be requested",
                    ),
                ),
            ],
            options={
                "ordering": ["title"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            ("daily_rate__isnull", True),
                            ("daily_rate__gt", 0),
                            _connector="OR",
                        ),
                        name="rentals_equipment_daily_rate_positive",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            ("monthly_rate__isnull", True),
                            ("monthly_rate__gt", 0),
                            _connector="OR",
                        ),
                        name="rentals_equipment_monthly_rate_positive",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Booking",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("equipment_id", models.CharField(max_length=255)),
                (
                    "equipment_title",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="Listing title when the booking was made",
                        max_length=200,
                    ),
                ),
                ("renter_id", models.CharField(db_index=True, max_length=255)),
                ("owner_id", models.CharField(db_index=True, max_length=255)),
                ("start_date", models.DateField()),
                (
                    "end_date",
                    models.DateField(
                        help_text="Exclusive; the equipment is free again on this day"
                    ),
                ),
                ("total_price", models.DecimalField(decimal_places=3, max_digits=14)),
                ("currency", models.CharField(max_length=3)),
                ("pricing_tier", models.CharField(max_length=10)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("confirmed", "Confirmed"),
                            ("cancelled", "Cancelled"),
                            ("completed", "Completed"),
                        ],
                        default="pending",
                        max_length=20,
                    ),
                ),
                (
                    "disputed_at",
                    models.DateTimeField(
                        blank=True,
                        help_text="Set when a party disputes the rental; blocks completion",
                        null=True,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["equipment_id", "status"],
                        name="rentals_booking_equip_status",
                    ),
                    models.Index(
                        fields=["status", "end_date"],
                        name="rentals_booking_status_end",
                    ),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("start_date__lt", models.F("end_date"))),
                        name="rentals_booking_start_before_end",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("total_price__gte", 0)),
                        name="rentals_booking_price_non_negative",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="BookingTransition",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("from_status", models.CharField(max_length=20)),
                ("to_status", models.CharField(max_length=20)),
                ("actor_id", models.CharField(max_length=255)),
                ("actor_role", models.CharField(max_length=20)),
                ("transitioned_at", models.DateTimeField(auto_now_add=True)),
                ("metadata", models.JSONField(blank=True, default=dict)),
                (
                    "booking",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="transitions",
                        to="django_rentals.booking",
                    ),
                ),
            ],
            options={
                "ordering": ["-transitioned_at"],
                "indexes": [
                    models.Index(
                        fields=["booking", "-transitioned_at"],
                        name="rentals_transition_booking",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="EquipmentCalendar",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("equipment_id", models.CharField(max_length=255, unique=True)),
                ("bookings_created", models.PositiveIntegerField(default=0)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
        ),
    ]
