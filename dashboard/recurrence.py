"""
Annual recurrence math for anchor dates (birthdays, recurring calendar
events).

An anchor date is stored once, with its original year, and projected onto
the reference year on every read; the projection is never persisted.

Feb 29 anchors need a rule for non-leap years. :class:`LeapDayPolicy`
names the choices:

  - ``FEB_28``: celebrate on Feb 28, the last day of the same month
    (default).
  - ``MAR_1``: roll over to Mar 1, what plain calendar arithmetic gives.
  - ``NEXT_LEAP_YEAR``: no occurrence until the next Feb 29.
"""

import enum
from dataclasses import dataclass, asdict
from datetime import date, datetime, time
from zoneinfo import ZoneInfo


class LeapDayPolicy(enum.Enum):
    FEB_28 = 'feb_28'
    MAR_1 = 'mar_1'
    NEXT_LEAP_YEAR = 'next_leap_year'

    @classmethod
    def from_config(cls, value):
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(
                f'LEAP_DAY_POLICY must be one of {[p.value for p in cls]}, got {value!r}'
            ) from None


def _is_leap(year):
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def _as_date(value):
    if isinstance(value, datetime):
        return value.date()
    return value


def now_in(tz_name='UTC'):
    """Current aware datetime in the school's timezone."""
    return datetime.now(ZoneInfo(tz_name))


def anniversary_in(anchor, year, policy=LeapDayPolicy.FEB_28):
    """The anchor's month/day placed in ``year``.

    Returns None only for a Feb 29 anchor under ``NEXT_LEAP_YEAR`` in a
    non-leap year.
    """
    anchor = _as_date(anchor)
    if anchor.month == 2 and anchor.day == 29 and not _is_leap(year):
        if policy is LeapDayPolicy.FEB_28:
            return date(year, 2, 28)
        if policy is LeapDayPolicy.MAR_1:
            return date(year, 3, 1)
        return None
    return date(year, anchor.month, anchor.day)


def next_occurrence(anchor, reference, policy=LeapDayPolicy.FEB_28):
    """First anniversary of ``anchor`` on or after the reference day.

    The candidate is built in the reference year; if it falls before the
    start of the reference day it moves to the following year (or, for
    ``NEXT_LEAP_YEAR``, to the next year that has a Feb 29).
    """
    ref_day = _as_date(reference)
    year = ref_day.year
    candidate = anniversary_in(anchor, year, policy)
    if candidate is not None and candidate >= ref_day:
        return candidate

    year += 1
    candidate = anniversary_in(anchor, year, policy)
    while candidate is None:
        year += 1
        candidate = anniversary_in(anchor, year, policy)
    return candidate


def is_anniversary(anchor, on_date, policy=LeapDayPolicy.FEB_28):
    on_day = _as_date(on_date)
    return anniversary_in(anchor, on_day.year, policy) == on_day


def age_at(anchor, on_date, policy=LeapDayPolicy.FEB_28):
    """Whole years from ``anchor`` to ``on_date``.

    The count only goes up once the anniversary has been reached in
    ``on_date``'s year. A Feb 29 anchor in a non-leap year ages on the
    policy's substitute day; under ``NEXT_LEAP_YEAR`` that is Mar 1.
    """
    anchor = _as_date(anchor)
    on_day = _as_date(on_date)
    anniversary = anniversary_in(anchor, on_day.year, policy) or date(on_day.year, 3, 1)
    years = on_day.year - anchor.year
    if on_day < anniversary:
        years -= 1
    return years


@dataclass(frozen=True)
class TimeLeft:
    days: int = 0
    hours: int = 0
    minutes: int = 0
    seconds: int = 0
    is_today: bool = False
    has_passed: bool = False

    def to_dict(self):
        return asdict(self)


def time_remaining(target, now):
    """Countdown from ``now`` to ``target``.

    A date target means the start of that day in ``now``'s timezone. Once
    the target moment is reached the result is ``is_today`` for the rest of
    that calendar day and ``has_passed`` afterwards.
    """
    if not isinstance(target, datetime):
        target = datetime.combine(target, time.min, tzinfo=now.tzinfo)
    elif target.tzinfo is None and now.tzinfo is not None:
        target = target.replace(tzinfo=now.tzinfo)
    elif target.tzinfo is not None and now.tzinfo is not None:
        target = target.astimezone(now.tzinfo)

    difference = (target - now).total_seconds()
    if difference <= 0:
        if target.date() == now.date():
            return TimeLeft(is_today=True)
        return TimeLeft(has_passed=True)

    total = int(difference)
    days, rest = divmod(total, 24 * 60 * 60)
    hours, rest = divmod(rest, 60 * 60)
    minutes, seconds = divmod(rest, 60)
    return TimeLeft(days=days, hours=hours, minutes=minutes, seconds=seconds)
