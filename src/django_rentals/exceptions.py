"""Custom exceptions for django-rentals."""


class RentalError(Exception):
    """Base exception for rental errors."""
    pass


class InvalidRangeError(RentalError):
    """Raised when a date range is empty or inverted."""

    def __init__(self, start, end, reason: str = None):
        self.start = start
        self.end = end
        self.reason = reason or f"Range start {start} must be before end {end}"
        super().__init__(self.reason)


class InvalidRateError(RentalError):
    """Raised when the rate required by the pricing tier is missing or not positive."""

    def __init__(self, tier: str, rate):
        self.tier = tier
        self.rate = rate
        super().__init__(f"No usable {tier} rate (got {rate!r})")


class RangeOutOfBoundsError(RentalError):
    """Raised when a requested start date is in the past or beyond the booking horizon."""

    def __init__(self, start, earliest, latest):
        self.start = start
        self.earliest = earliest
        self.latest = latest
        super().__init__(
            f"Start date {start} must be between {earliest} and {latest}"
        )


class SelfBookingError(RentalError):
    """Raised when an owner tries to rent their own equipment."""

    def __init__(self, equipment_id: str, user_id: str):
        self.equipment_id = equipment_id
        self.user_id = user_id
        super().__init__(f"User '{user_id}' owns equipment '{equipment_id}'")


class EquipmentUnavailableError(RentalError):
    """Raised when equipment is not currently offered for rental."""

    def __init__(self, equipment_id: str):
        self.equipment_id = equipment_id
        super().__init__(f"Equipment '{equipment_id}' is not available for rental")


class EquipmentNotFoundError(RentalError):
    """Raised when the catalog has no record for an equipment id."""

    def __init__(self, equipment_id: str):
        self.equipment_id = equipment_id
        super().__init__(f"Equipment '{equipment_id}' not found")


class BookingNotFoundError(RentalError):
    """Raised when a booking id does not exist."""

    def __init__(self, booking_id):
        self.booking_id = booking_id
        super().__init__(f"Booking '{booking_id}' not found")


class DateConflictError(RentalError):
    """Raised when a candidate range overlaps a blocked range."""

    def __init__(self, equipment_id: str, candidate, conflicts: list):
        self.equipment_id = equipment_id
        self.candidate = candidate
        self.conflicts = conflicts
        super().__init__(
            f"{candidate} conflicts with {len(conflicts)} existing booking(s) "
            f"for equipment '{equipment_id}'"
        )


class InvalidTransitionError(RentalError):
    """Raised when attempting an invalid status transition."""

    def __init__(self, from_status: str, to_status: str, reason: str = None):
        self.from_status = from_status
        self.to_status = to_status
        self.reason = reason or f"Cannot transition from '{from_status}' to '{to_status}'"
        super().__init__(self.reason)


class TransitionNotPermittedError(InvalidTransitionError):
    """Raised when the actor may not trigger an otherwise legal transition."""

    def __init__(self, from_status: str, to_status: str, actor_id: str):
        self.actor_id = actor_id
        super().__init__(
            from_status,
            to_status,
            f"User '{actor_id}' may not move booking from '{from_status}' to '{to_status}'",
        )


class AvailabilityUnavailableError(RentalError):
    """Raised when availability cannot currently be determined.

    Transient. Callers must refuse to book rather than assume the dates are free.
    """

    def __init__(self, equipment_id: str, reason: str = "booking store unreachable"):
        self.equipment_id = equipment_id
        self.reason = reason
        super().__init__(
            f"Cannot determine availability for equipment '{equipment_id}': {reason}"
        )


class DeletionRequiresConfirmation(RentalError):
    """Raised when deleting would affect active bookings and was not confirmed."""

    def __init__(self, equipment_id: str, active_booking_count: int):
        self.equipment_id = equipment_id
        self.active_booking_count = active_booking_count
        super().__init__(
            f"Equipment '{equipment_id}' has {active_booking_count} active booking(s); "
            "confirm to proceed"
        )


class DeletionNotPermittedError(RentalError):
    """Raised when the actor may not delete the listing or its bookings."""

    def __init__(self, equipment_id: str, actor_id: str):
        self.equipment_id = equipment_id
        self.actor_id = actor_id
        super().__init__(f"User '{actor_id}' may not delete equipment '{equipment_id}'")


class CollaboratorLoadError(RentalError):
    """Raised when a configured collaborator class cannot be loaded."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot load '{path}': {reason}")
