"""
django-rentals: Equipment reservation and availability engine.

Provides:
- DateRange: Half-open day ranges and the single overlap predicate
- Two-tier daily/monthly pricing
- Availability index over pending and confirmed bookings
- Booking lifecycle state machine with an audit log
- Reservation workflow serialized per equipment
- Pure two-click range selector for booking calendars
- Deletion guard for listings with active bookings
"""

__version__ = "0.1.0"
