"""Tests for timetable reduction to a date window."""

from datetime import date

import pytest

from transit_export.export.reduction import clip_timetable, reduce_timetable
from transit_export.model.models import CalendarDay, DayType, Period, Timetable


def make_timetable() -> Timetable:
    """Timetable mixing periods and explicit days around March 2024."""
    timetable = Timetable(
        object_id="TM:1",
        comment="mixed",
        day_types=[DayType.WEEKDAY],
        calendar_days=[
            CalendarDay(date(2024, 2, 10)),
            CalendarDay(date(2024, 3, 15)),
            CalendarDay(date(2024, 3, 18), included=False),
            CalendarDay(date(2024, 5, 1)),
        ],
        periods=[
            Period(date(2024, 1, 1), date(2024, 1, 31)),
            Period(date(2024, 2, 20), date(2024, 3, 20)),
            Period(date(2024, 4, 1), date(2024, 6, 30)),
        ],
    )
    timetable.compute_limit_of_periods()
    return timetable


BOUNDARIES = [
    date(2023, 12, 1),
    date(2024, 1, 1),
    date(2024, 1, 31),
    date(2024, 2, 10),
    date(2024, 3, 1),
    date(2024, 3, 18),
    date(2024, 4, 1),
    date(2024, 6, 30),
    date(2024, 7, 1),
]


def test_reduce_before_drops_and_clamps() -> None:
    """Test reduction from a start boundary."""
    reduced = reduce_timetable(make_timetable(), date(2024, 3, 1), before=True)

    assert reduced is not None
    assert reduced.periods == [
        Period(date(2024, 3, 1), date(2024, 3, 20)),
        Period(date(2024, 4, 1), date(2024, 6, 30)),
    ]
    assert [d.day for d in reduced.calendar_days] == [
        date(2024, 3, 15),
        date(2024, 3, 18),
        date(2024, 5, 1),
    ]
    assert reduced.start_of_period == date(2024, 3, 1)
    assert reduced.end_of_period == date(2024, 6, 30)


def test_reduce_after_drops_and_clamps() -> None:
    """Test reduction from an end boundary."""
    reduced = reduce_timetable(make_timetable(), date(2024, 3, 1), before=False)

    assert reduced is not None
    assert reduced.periods == [
        Period(date(2024, 1, 1), date(2024, 1, 31)),
        Period(date(2024, 2, 20), date(2024, 3, 1)),
    ]
    assert [d.day for d in reduced.calendar_days] == [date(2024, 2, 10)]
    assert reduced.end_of_period == date(2024, 3, 1)


def test_boundary_day_is_kept() -> None:
    """Test a day equal to the boundary survives on both sides."""
    timetable = Timetable(object_id="TM:day", calendar_days=[CalendarDay(date(2024, 3, 15))])

    assert reduce_timetable(timetable, date(2024, 3, 15), before=True) is not None
    assert reduce_timetable(timetable, date(2024, 3, 15), before=False) is not None


def test_reduce_to_nothing() -> None:
    """Test reduction returns None when everything is on the dropped side."""
    assert reduce_timetable(make_timetable(), date(2024, 7, 1), before=True) is None
    assert reduce_timetable(make_timetable(), date(2023, 12, 31), before=False) is None


def test_empty_timetable_reduces_to_nothing() -> None:
    """Test a timetable that never runs is always reduced away."""
    timetable = Timetable(object_id="TM:empty")

    assert reduce_timetable(timetable, date(2024, 1, 1), before=True) is None


def test_reduce_does_not_mutate_input() -> None:
    """Test the original timetable is left untouched."""
    timetable = make_timetable()
    original_periods = list(timetable.periods)
    original_days = list(timetable.calendar_days)

    reduced = reduce_timetable(timetable, date(2024, 3, 1), before=True)

    assert timetable.periods == original_periods
    assert timetable.calendar_days == original_days
    assert timetable.start_of_period == date(2024, 1, 1)
    assert reduced is not timetable
    assert reduced.periods is not timetable.periods


def test_reduce_copies_metadata() -> None:
    """Test identifier and day types are carried over."""
    reduced = reduce_timetable(make_timetable(), date(2024, 3, 1), before=True)

    assert reduced.object_id == "TM:1"
    assert reduced.comment == "mixed"
    assert reduced.day_types == [DayType.WEEKDAY]


@pytest.mark.parametrize("boundary", BOUNDARIES)
@pytest.mark.parametrize("before", [True, False])
def test_reduction_is_monotonic(boundary: date, before: bool) -> None:
    """Test reduction never adds active dates."""
    timetable = make_timetable()
    original = timetable.active_dates()

    reduced = reduce_timetable(timetable, boundary, before)

    if reduced is None:
        kept = {d for d in original if (d >= boundary if before else d <= boundary)}
        assert kept == set()
    else:
        assert reduced.active_dates() <= original


@pytest.mark.parametrize("boundary", BOUNDARIES)
@pytest.mark.parametrize("before", [True, False])
def test_reduction_is_idempotent(boundary: date, before: bool) -> None:
    """Test reducing twice by the same boundary changes nothing."""
    once = reduce_timetable(make_timetable(), boundary, before)
    if once is None:
        return

    twice = reduce_timetable(once, boundary, before)

    assert twice == once


@pytest.mark.parametrize("start", BOUNDARIES)
@pytest.mark.parametrize("end", BOUNDARIES)
def test_reduction_is_commutative(start: date, end: date) -> None:
    """Test start-then-end and end-then-start reductions agree."""
    if start > end:
        pytest.skip("window is empty")
    timetable = make_timetable()

    start_first = reduce_timetable(timetable, start, before=True)
    if start_first is not None:
        start_first = reduce_timetable(start_first, end, before=False)

    end_first = reduce_timetable(timetable, end, before=False)
    if end_first is not None:
        end_first = reduce_timetable(end_first, start, before=True)

    assert start_first == end_first


def test_clip_timetable_window() -> None:
    """Test clipping to a window keeps only what lies inside it."""
    clipped = clip_timetable(make_timetable(), date(2024, 3, 1), date(2024, 4, 30))

    assert clipped.periods == [
        Period(date(2024, 3, 1), date(2024, 3, 20)),
        Period(date(2024, 4, 1), date(2024, 4, 30)),
    ]
    assert [d.day for d in clipped.calendar_days] == [date(2024, 3, 15), date(2024, 3, 18)]
    assert date(2024, 3, 18) not in clipped.active_dates()


def test_clip_timetable_open_bounds() -> None:
    """Test a missing bound leaves that side open."""
    clipped = clip_timetable(make_timetable(), None, date(2024, 1, 15))

    assert clipped.periods == [Period(date(2024, 1, 1), date(2024, 1, 15))]
    assert clipped.calendar_days == []


def test_active_dates_follow_day_types() -> None:
    """Test weekday day types filter period dates."""
    timetable = Timetable(
        object_id="TM:weekend",
        day_types=[DayType.WEEKEND],
        periods=[Period(date(2024, 3, 4), date(2024, 3, 10))],  # Monday to Sunday
    )

    assert timetable.active_dates() == {date(2024, 3, 9), date(2024, 3, 10)}
