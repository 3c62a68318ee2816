"""
Simulated attendance for payroll test runs.

Recorded attendance always wins. Days with no record are filled in: weekends
are marked weekend, weekdays are drawn from a random source with the
distribution below. The random source is injected so tests can supply a
fixed sequence of draws.

    r < 0.85 → present
    r < 0.92 → leave
    r < 0.97 → halfday
    else     → absent
"""
from __future__ import annotations

import calendar
import datetime
import random
from typing import Iterable, Iterator, Optional, Protocol

from payrolldesk.test_run.schemas import (
    AttendanceDay,
    AttendanceRecord,
    AttendanceStatus,
    DateRangeKind,
)

PRESENT_THRESHOLD = 0.85
LEAVE_THRESHOLD   = 0.92
HALFDAY_THRESHOLD = 0.97


class RandomSource(Protocol):
    def random(self) -> float: ...


class SequenceRandom:
    """Replays a fixed list of draws, cycling when exhausted."""

    def __init__(self, values: Iterable[float]) -> None:
        self._values = list(values)
        if not self._values:
            raise ValueError("SequenceRandom needs at least one value")
        self._index = 0

    def random(self) -> float:
        value = self._values[self._index % len(self._values)]
        self._index += 1
        return value


def resolve_date_range(
    kind: DateRangeKind,
    today: datetime.date,
    custom_start: Optional[datetime.date] = None,
    custom_end: Optional[datetime.date] = None,
) -> tuple[datetime.date, datetime.date]:
    """(start, end), both inclusive, for a date-range selector value."""
    if kind == DateRangeKind.last15:
        return today - datetime.timedelta(days=14), today
    if kind == DateRangeKind.last30:
        return today - datetime.timedelta(days=29), today
    if kind == DateRangeKind.current_month:
        last_day = calendar.monthrange(today.year, today.month)[1]
        return today.replace(day=1), today.replace(day=last_day)

    if custom_start is None or custom_end is None:
        raise ValueError("custom date range requires both start and end dates")
    if custom_start > custom_end:
        raise ValueError(f"start date {custom_start} is after end date {custom_end}")
    return custom_start, custom_end


def iter_days(start: datetime.date, end: datetime.date) -> Iterator[datetime.date]:
    day = start
    while day <= end:
        yield day
        day += datetime.timedelta(days=1)


def draw_status(rng: RandomSource) -> AttendanceStatus:
    r = rng.random()
    if r < PRESENT_THRESHOLD:
        return AttendanceStatus.present
    if r < LEAVE_THRESHOLD:
        return AttendanceStatus.leave
    if r < HALFDAY_THRESHOLD:
        return AttendanceStatus.halfday
    return AttendanceStatus.absent


def generate_test_attendance(
    employee_id: int,
    start: datetime.date,
    end: datetime.date,
    records: Iterable[AttendanceRecord] = (),
    rng: Optional[RandomSource] = None,
) -> list[AttendanceDay]:
    """One AttendanceDay per calendar day from start to end inclusive."""
    rng = rng if rng is not None else random.Random()
    recorded = {r.date: r.status for r in records if r.user_id == employee_id}

    days: list[AttendanceDay] = []
    for day in iter_days(start, end):
        if day in recorded:
            status = recorded[day]
        elif day.weekday() >= 5:
            status = AttendanceStatus.weekend
        else:
            status = draw_status(rng)
        days.append(AttendanceDay(date=day, status=status))
    return days
