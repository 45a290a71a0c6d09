"""Half-open calendar date ranges.

A DateRange ``[start, end)`` occupies every day from ``start`` through
``end - 1``. The day a rental ends is free for the next rental to start.

``ranges_overlap`` is the only overlap predicate in the package. Conflict
checks, the range selector and the deletion guard all go through it.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterator

from .exceptions import InvalidRangeError


ONE_DAY = timedelta(days=1)


def as_date(value) -> date:
    """Truncate a datetime to its date; pass dates through."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raise TypeError(f"Expected a date, got {type(value).__name__}")


def ranges_overlap(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    """Return True iff ``[a_start, a_end)`` and ``[b_start, b_end)`` share a day."""
    return a_start < b_end and b_start < a_end


@dataclass(frozen=True, order=True)
class DateRange:
    """Immutable half-open range of whole days.

    Usage:
        stay = DateRange(date(2024, 3, 1), date(2024, 3, 5))
        stay.days                                   # 4
        stay.overlaps(DateRange(date(2024, 3, 5), date(2024, 3, 7)))  # False
    """

    start: date
    end: date

    def __post_init__(self):
        # Use object.__setattr__ because dataclass is frozen
        object.__setattr__(self, "start", as_date(self.start))
        object.__setattr__(self, "end", as_date(self.end))
        if not self.start < self.end:
            raise InvalidRangeError(self.start, self.end)

    @classmethod
    def single_day(cls, day: date) -> "DateRange":
        """The range occupying exactly ``day``."""
        day = as_date(day)
        return cls(day, day + ONE_DAY)

    @property
    def days(self) -> int:
        return (self.end - self.start).days

    def overlaps(self, other: "DateRange") -> bool:
        return ranges_overlap(self.start, self.end, other.start, other.end)

    def contains(self, day: date) -> bool:
        """True if ``day`` is occupied by this range (``end`` is not)."""
        return self.start <= as_date(day) < self.end

    def iter_days(self) -> Iterator[date]:
        """Yield every occupied day, ``start`` through ``end - 1``."""
        day = self.start
        while day < self.end:
            yield day
            day += ONE_DAY

    def __str__(self):
        return f"[{self.start.isoformat()}, {self.end.isoformat()})"
