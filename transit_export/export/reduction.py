"""Reduction of timetables to a date window."""

import logging
from dataclasses import replace
from datetime import date

from transit_export.model.models import CalendarDay, Period, Timetable

logger = logging.getLogger(__name__)


def reduce_timetable(timetable: Timetable, boundary: date, before: bool) -> Timetable | None:
    """
    Produce a copy of a timetable reduced to one side of a boundary date.

    Args:
        timetable: Original timetable, left untouched
        boundary: Boundary date, always kept
        before: True to drop what lies before the boundary, False to drop
            what lies after it

    Returns:
        Reduced copy, or None when nothing remains
    """
    calendar_days = [
        calendar_day
        for calendar_day in timetable.calendar_days
        if not _is_date_out(calendar_day, boundary, before)
    ]

    periods: list[Period] = []
    for period in timetable.periods:
        if _is_period_out(period, boundary, before):
            continue
        periods.append(_shorten_period(period, boundary, before))

    if not calendar_days and not periods:
        logger.debug(
            f"Timetable {timetable.object_id} reduced to nothing "
            f"({'before' if before else 'after'} {boundary})"
        )
        return None

    reduced = Timetable(
        object_id=timetable.object_id,
        object_version=timetable.object_version,
        comment=timetable.comment,
        day_types=list(timetable.day_types),
        calendar_days=calendar_days,
        periods=periods,
    )
    reduced.compute_limit_of_periods()
    return reduced


def clip_timetable(
    timetable: Timetable, start_date: date | None, end_date: date | None
) -> Timetable | None:
    """Reduce a timetable to [start_date, end_date]; a missing bound is open."""
    clipped: Timetable | None = timetable
    if start_date is not None:
        clipped = reduce_timetable(timetable, start_date, before=True)
    if clipped is not None and end_date is not None:
        clipped = reduce_timetable(clipped, end_date, before=False)
    return clipped


def _is_date_out(calendar_day: CalendarDay, boundary: date, before: bool) -> bool:
    if before:
        return calendar_day.day < boundary
    return calendar_day.day > boundary


def _is_period_out(period: Period, boundary: date, before: bool) -> bool:
    """Check if period lies entirely on the dropped side."""
    if before:
        return period.end < boundary
    return period.start > boundary


def _shorten_period(period: Period, boundary: date, before: bool) -> Period:
    """Clamp the open edge of a period to the boundary."""
    if before and period.start < boundary:
        return replace(period, start=boundary)
    if not before and period.end > boundary:
        return replace(period, end=boundary)
    return period
