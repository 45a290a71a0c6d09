"""Two-click date range selection.

A pure state machine behind the booking calendar. It turns a sequence of
day clicks into a gap-free candidate range that does not cross any blocked
range. It never books; the caller submits ``state.date_range`` to
``services.request_booking``.

Phases:
- empty: nothing chosen
- start-chosen: first day picked
- range-chosen: first day and exclusive end day picked

Usage:
    selector = RangeSelector.for_equipment(equipment_id)
    state = SelectionState()
    state = selector.transition(state, DayClicked(date(2024, 3, 1)))
    state = selector.transition(state, DayClicked(date(2024, 3, 5)))
    state.date_range   # [2024-03-01, 2024-03-05)
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Optional, Union

from django.utils import timezone

from .conf import get_setting
from .daterange import ONE_DAY, DateRange, as_date


EMPTY = "empty"
START_CHOSEN = "start-chosen"
RANGE_CHOSEN = "range-chosen"


@dataclass(frozen=True)
class SelectionState:
    phase: str = EMPTY
    start: Optional[date] = None
    end: Optional[date] = None

    @property
    def date_range(self) -> Optional[DateRange]:
        """The chosen range, or None until both ends are picked."""
        if self.phase != RANGE_CHOSEN:
            return None
        return DateRange(self.start, self.end)


@dataclass(frozen=True)
class DayClicked:
    day: date

    def __post_init__(self):
        object.__setattr__(self, "day", as_date(self.day))


@dataclass(frozen=True)
class Cleared:
    pass


Event = Union[DayClicked, Cleared]


@dataclass(frozen=True)
class RangeSelector:
    """
    Transition function for one equipment calendar.

    Attributes:
        blocked: Ranges held by active bookings
        min_day: Earliest selectable start (None = unbounded)
        max_day: Latest selectable start (None = unbounded)
    """

    blocked: tuple = field(default_factory=tuple)
    min_day: Optional[date] = None
    max_day: Optional[date] = None

    def __post_init__(self):
        object.__setattr__(self, "blocked", tuple(self.blocked))

    @classmethod
    def for_equipment(cls, equipment_id, today: date = None) -> "RangeSelector":
        """
        Build a selector from the equipment's current blocked ranges and the
        booking window.

        Raises:
            AvailabilityUnavailableError: If the booking store cannot be read
        """
        from .availability import blocked_ranges

        today = today or timezone.localdate()
        horizon = timedelta(days=get_setting("BOOKING_HORIZON_DAYS"))
        return cls(blocked=blocked_ranges(equipment_id), min_day=today, max_day=today + horizon)

    def is_blocked(self, day: date) -> bool:
        """True if an active booking occupies ``day``."""
        occupied = DateRange.single_day(day)
        return any(occupied.overlaps(blocked) for blocked in self.blocked)

    def in_bounds(self, day: date) -> bool:
        if self.min_day is not None and day < self.min_day:
            return False
        if self.max_day is not None and day > self.max_day:
            return False
        return True

    def can_start(self, day: date) -> bool:
        return self.in_bounds(day) and not self.is_blocked(day)

    def has_blocked_between(self, start: date, end: date) -> bool:
        """True if any day strictly between ``start`` and ``end`` is blocked."""
        day = start + ONE_DAY
        while day < end:
            if self.is_blocked(day):
                return True
            day += ONE_DAY
        return False

    def _start_at(self, state: SelectionState, day: date) -> SelectionState:
        # Unselectable days leave the selection untouched
        if not self.can_start(day):
            return state
        return SelectionState(phase=START_CHOSEN, start=day)

    def transition(self, state: SelectionState, event: Event) -> SelectionState:
        """Return the state that follows ``event``."""
        if isinstance(event, Cleared):
            return SelectionState()
        if not isinstance(event, DayClicked):
            raise TypeError(f"Unknown selector event {event!r}")

        day = event.day

        if state.phase == START_CHOSEN:
            if day == state.start:
                return SelectionState()
            if day < state.start:
                return self._start_at(state, day)
            if self.has_blocked_between(state.start, day):
                return self._start_at(state, day)
            return SelectionState(phase=RANGE_CHOSEN, start=state.start, end=day)

        # empty, or a completed range being replaced by a new selection
        return self._start_at(state, day)
