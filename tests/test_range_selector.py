"""Tests for the two-click range selector."""

from datetime import date

import pytest

from django_rentals.daterange import DateRange
from django_rentals.range_selector import (
    EMPTY,
    RANGE_CHOSEN,
    START_CHOSEN,
    Cleared,
    DayClicked,
    RangeSelector,
    SelectionState,
)


def d(day, month=3):
    return date(2024, month, day)


def click(selector, state, *days):
    for day in days:
        state = selector.transition(state, DayClicked(day))
    return state


@pytest.fixture
def selector():
    """March 2024 with the 10th-12th held by an existing booking."""
    return RangeSelector(blocked=[DateRange(d(10), d(13))], min_day=d(1), max_day=d(31))


class TestHappyPath:
    """Tests for picking a start and an end."""

    def test_first_click_chooses_start(self, selector):
        state = click(selector, SelectionState(), d(3))

        assert state == SelectionState(phase=START_CHOSEN, start=d(3))
        assert state.date_range is None

    def test_second_click_chooses_end(self, selector):
        state = click(selector, SelectionState(), d(3), d(7))

        assert state.phase == RANGE_CHOSEN
        assert state.date_range == DateRange(d(3), d(7))

    def test_end_may_be_first_blocked_day(self, selector):
        """The end day is exclusive, so it may be the day another rental starts."""
        state = click(selector, SelectionState(), d(5), d(10))

        assert state.date_range == DateRange(d(5), d(10))

    def test_start_may_be_day_a_rental_ends(self, selector):
        state = click(selector, SelectionState(), d(13), d(15))

        assert state.date_range == DateRange(d(13), d(15))

    def test_adjacent_days(self, selector):
        assert click(selector, SelectionState(), d(3), d(4)).date_range.days == 1

    def test_accepts_datetimes(self, selector):
        from datetime import datetime

        state = selector.transition(SelectionState(), DayClicked(datetime(2024, 3, 3, 15, 30)))

        assert state.start == d(3)


class TestRestarts:
    """Tests for clicks that restart or clear the selection."""

    def test_same_day_clears(self, selector):
        assert click(selector, SelectionState(), d(3), d(3)) == SelectionState()

    def test_earlier_day_restarts(self, selector):
        state = click(selector, SelectionState(), d(8), d(4))

        assert state == SelectionState(phase=START_CHOSEN, start=d(4))

    def test_blocked_gap_restarts_at_clicked_day(self, selector):
        """A range may not swallow a booked day."""
        state = click(selector, SelectionState(), d(5), d(20))

        assert state == SelectionState(phase=START_CHOSEN, start=d(20))

    def test_click_after_range_starts_fresh(self, selector):
        state = click(selector, SelectionState(), d(3), d(7), d(15))

        assert state == SelectionState(phase=START_CHOSEN, start=d(15))

    @pytest.mark.parametrize(
        "state",
        [
            SelectionState(),
            SelectionState(phase=START_CHOSEN, start=d(3)),
            SelectionState(phase=RANGE_CHOSEN, start=d(3), end=d(7)),
        ],
    )
    def test_clear_from_any_phase(self, selector, state):
        assert selector.transition(state, Cleared()).phase == EMPTY

    def test_unknown_event_rejected(self, selector):
        with pytest.raises(TypeError):
            selector.transition(SelectionState(), "click")


class TestUnselectableDays:
    """Blocked and out-of-window days cannot start a range."""

    def test_blocked_day_ignored_when_empty(self, selector):
        assert click(selector, SelectionState(), d(11)) == SelectionState()

    def test_blocked_day_ignored_after_range(self, selector):
        chosen = click(selector, SelectionState(), d(3), d(7))

        assert click(selector, chosen, d(11)) == chosen

    def test_blocked_gap_on_blocked_day_keeps_start(self, selector):
        """Ending inside a booking is refused and the start stays put."""
        state = click(selector, SelectionState(), d(5), d(12))

        assert state == SelectionState(phase=START_CHOSEN, start=d(5))

    def test_day_before_window_ignored(self, selector):
        assert click(selector, SelectionState(), date(2024, 2, 29)) == SelectionState()

    def test_day_after_window_ignored(self, selector):
        assert click(selector, SelectionState(), date(2024, 4, 1)) == SelectionState()

    def test_end_beyond_window_allowed(self, selector):
        """Only the start is bound to the booking window."""
        state = click(selector, SelectionState(), d(30), date(2024, 4, 3))

        assert state.date_range == DateRange(d(30), date(2024, 4, 3))

    def test_unbounded_selector(self):
        selector = RangeSelector()

        assert click(selector, SelectionState(), date(1999, 1, 1), date(1999, 1, 2)).phase == RANGE_CHOSEN


class TestNeverSpansBlocked:
    """Every range the selector produces is free of blocked days."""

    def test_exhaustive_two_clicks(self, selector):
        for first in range(1, 32):
            for second in range(1, 32):
                state = click(selector, SelectionState(), d(first), d(second))
                if state.phase != RANGE_CHOSEN:
                    continue
                chosen = state.date_range
                assert not any(chosen.overlaps(blocked) for blocked in selector.blocked), chosen


@pytest.mark.django_db
class TestForEquipment:
    """Tests for building a selector from the booking store."""

    def test_uses_blocked_ranges_and_window(self, equipment, make_booking, today):
        make_booking(d(10), d(13))

        selector = RangeSelector.for_equipment(equipment.pk, today=today)

        assert selector.blocked == (DateRange(d(10), d(13)),)
        assert selector.min_day == today
        assert selector.max_day == date(2024, 8, 21)

    def test_selected_range_can_be_booked(self, equipment, make_booking, today):
        make_booking(d(10), d(13))
        selector = RangeSelector.for_equipment(equipment.pk, today=today)

        state = click(selector, SelectionState(), d(5), d(10))
        booking = make_booking(state.date_range.start, state.date_range.end, renter_id="renter-2")

        assert booking.date_range == DateRange(d(5), d(10))
