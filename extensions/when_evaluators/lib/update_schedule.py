# SPDX-FileCopyrightText: 2025 Eric Löffler <eric.loeffler@opalia.systems>
# SPDX-License-Identifier: GPL-3.0-or-later

"""Next-wakeup arithmetic for "update every N units" schedules.

A schedule is anchored at a timezone-aware instant and repeats every
``step`` units. Fixed-length units repeat on a constant period; months
repeat on the calendar, clamping to the last day of shorter months.
"""

import enum
import math
import numbers
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Union

from dateutil.relativedelta import relativedelta


class ScheduleError(ValueError):
    pass


class InvalidUnit(ScheduleError):
    pass


class InvalidStep(ScheduleError):
    pass


class TimeZoneResolutionError(ScheduleError):
    pass


class DateParseError(ScheduleError):
    pass


class TimeUnit(enum.Enum):
    SECONDS = "seconds"
    MINUTES = "minutes"
    HOURS = "hours"
    DAYS = "days"
    WEEKS = "weeks"
    MONTHS = "months"

    @property
    def is_fixed(self) -> bool:
        return self is not TimeUnit.MONTHS


_SECONDS_PER_UNIT = {
    TimeUnit.SECONDS: 1,
    TimeUnit.MINUTES: 60,
    TimeUnit.HOURS: 3600,
    TimeUnit.DAYS: 86400,
    TimeUnit.WEEKS: 604800,
}


def parse_unit(unit: Union[str, TimeUnit]) -> TimeUnit:
    if isinstance(unit, TimeUnit):
        return unit
    try:
        return TimeUnit(str(unit).strip().lower())
    except ValueError:
        raise InvalidUnit(f"Unrecognized unit \"{unit}\", expected one of "
                          f"{', '.join(u.value for u in TimeUnit)}") from None


def _whole_months(count) -> int:
    if isinstance(count, bool) or not isinstance(count, numbers.Real):
        raise InvalidStep(f"Month count must be a number, got {count!r}")
    if isinstance(count, numbers.Integral):
        return int(count)
    if float(count).is_integer():
        return int(count)
    raise InvalidStep(f"Month count must be a whole number, got {count}")


def _require_aware(dt: datetime, name: str) -> None:
    if dt.tzinfo is None or dt.utcoffset() is None:
        raise ScheduleError(f"{name} must be timezone-aware, got {dt.isoformat()}")


def _utc(dt: datetime) -> datetime:
    # aware datetimes sharing a tzinfo subtract by wall clock, so always go through UTC
    return dt.astimezone(timezone.utc)


def advance_by_months(dt: datetime, n: int) -> datetime:
    """Shift ``dt`` by ``n`` calendar months.

    Day of month, wall-clock time and tzinfo are kept; a day missing from
    the target month clamps to its last day (Jan 31 + 1 month is Feb 28,
    or Feb 29 in a leap year).
    """
    return dt + relativedelta(months=_whole_months(n))


def to_seconds(count, unit: Union[str, TimeUnit], reference_now: datetime) -> float:
    unit = parse_unit(unit)

    if unit.is_fixed:
        if isinstance(count, bool) or not isinstance(count, numbers.Real):
            raise InvalidStep(f"Count must be a number, got {count!r}")
        return count * _SECONDS_PER_UNIT[unit]

    _require_aware(reference_now, "reference_now")
    future = advance_by_months(reference_now, _whole_months(count))
    return (_utc(future) - _utc(reference_now)).total_seconds()


def advance(dt: datetime, count, unit: Union[str, TimeUnit]) -> datetime:
    """Return ``dt`` moved forward by ``count`` units.

    Fixed units add elapsed seconds, so a DST change shifts the wall clock;
    months keep the wall clock and clamp the day.
    """
    unit = parse_unit(unit)
    _require_aware(dt, "dt")

    if unit.is_fixed:
        delta = timedelta(seconds=to_seconds(count, unit, dt))
        return (_utc(dt) + delta).astimezone(dt.tzinfo)

    return advance_by_months(dt, count)


def parse_step(step_str: str) -> Union[int, float]:
    try:
        return int(step_str)
    except ValueError:
        pass
    try:
        step = float(step_str)
    except ValueError:
        raise InvalidStep(f"Step \"{step_str}\" is not a number") from None
    if not math.isfinite(step):
        raise InvalidStep(f"Step must be finite, got {step_str}")
    return step


@dataclass(frozen=True)
class Schedule:
    anchor: datetime
    unit: TimeUnit
    step: Union[int, float]

    def __post_init__(self):
        _require_aware(self.anchor, "anchor")
        object.__setattr__(self, "unit", parse_unit(self.unit))

        if isinstance(self.step, bool) or not isinstance(self.step, numbers.Real):
            raise InvalidStep(f"Step must be a number, got {self.step!r}")
        if not math.isfinite(self.step):
            raise InvalidStep(f"Step must be finite, got {self.step}")
        if self.step <= 0:
            raise InvalidStep(f"Step must be positive, got {self.step}")
        if self.unit is TimeUnit.MONTHS:
            object.__setattr__(self, "step", _whole_months(self.step))
            return

        # the period has to be representable as a non-zero timedelta
        try:
            period = timedelta(seconds=self.step * _SECONDS_PER_UNIT[self.unit])
        except OverflowError:
            raise InvalidStep(f"Step {self.step} {self.unit.value} is too large") from None
        if period <= timedelta(0):
            raise InvalidStep(f"Step {self.step} {self.unit.value} is shorter than a microsecond")


def _months_between(start: datetime, end: datetime) -> int:
    end = end.astimezone(start.tzinfo)
    return (end.year - start.year) * 12 + (end.month - start.month)


def next_occurrence(schedule: Schedule, now: datetime) -> datetime:
    _require_aware(now, "now")
    anchor = schedule.anchor

    if _utc(now) < _utc(anchor):
        return anchor

    if schedule.unit.is_fixed:
        period = timedelta(seconds=to_seconds(schedule.step, schedule.unit, now))
        elapsed = _utc(now) - _utc(anchor)
        return (_utc(now) + period - elapsed % period).astimezone(now.tzinfo)

    step = schedule.step
    # start one step below the closed-form estimate; month advance is monotone so
    # every multiple up to here still lands before now
    k = max(0, (_months_between(anchor, now) // step - 1) * step)
    candidate = advance_by_months(anchor, k)
    while _utc(candidate) < _utc(now):
        k += step
        candidate = advance_by_months(anchor, k)
    return candidate


def seconds_until_next(schedule: Schedule, now: datetime) -> float:
    return (_utc(next_occurrence(schedule, now)) - _utc(now)).total_seconds()
