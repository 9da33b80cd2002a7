"""
Working-day calendar arithmetic.

Dates are offset in whole working days, skipping Saturday and Sunday. Both
``datetime.date`` and ``datetime.datetime`` values are accepted; a datetime
keeps its time of day.
"""

import math
import numbers
from datetime import date, datetime

import numpy as np

from planning_engine.config import (
    FRACTION_EPSILON,
    HOURS_PER_WORKING_DAY,
    WORKING_WEEKMASK,
)
from planning_engine.domain.errors import InvalidDurationError, SchedulingError


def _as_day(value):
    """Return the calendar day of a date or datetime as a numpy datetime64."""
    if isinstance(value, datetime):
        value = value.date()
    if not isinstance(value, date):
        raise TypeError(f"Expected a date or datetime, got {type(value).__name__}")
    return np.datetime64(value, "D")


def _restore(original, day):
    """Turn a numpy day back into the same kind of object as ``original``."""
    result = day.item()
    # numpy returns a plain int outside date.min..date.max
    if not isinstance(result, date):
        raise SchedulingError(f"Working-day arithmetic left the supported date range at {day}")
    if isinstance(original, datetime):
        return datetime.combine(result, original.timetz())
    return result


def whole_working_days(n):
    """
    Convert a possibly fractional day count to whole working days.

    Fractions round away from zero, since a partly used day is still
    occupied. Values within FRACTION_EPSILON of an integer are snapped to it.

    Raises:
        InvalidDurationError: If n is not a finite number
    """
    if isinstance(n, bool) or not isinstance(n, numbers.Real):
        raise InvalidDurationError(n)
    if isinstance(n, numbers.Integral):
        return int(n)
    if not math.isfinite(n):
        raise InvalidDurationError(n)

    magnitude = abs(n)
    nearest = round(magnitude)
    if abs(magnitude - nearest) < FRACTION_EPSILON:
        whole = int(nearest)
    else:
        whole = math.ceil(magnitude)
    return whole if n >= 0 else -whole


def is_working_day(day):
    """True when ``day`` is a weekday."""
    return bool(np.is_busday(_as_day(day), weekmask=WORKING_WEEKMASK))


def next_working_day(day):
    """Return ``day`` itself if it is a working day, else the next one."""
    rolled = np.busday_offset(_as_day(day), 0, roll="forward", weekmask=WORKING_WEEKMASK)
    if rolled == _as_day(day):
        return day
    return _restore(day, rolled)


def offset_working_days(day, n):
    """
    Move ``day`` by ``n`` working days.

    Positive n moves forward, negative n backward, and n == 0 returns ``day``
    unchanged. Counting starts at the first working day after (or before)
    ``day``, so the result is always strictly later (or earlier) for n != 0.

    Args:
        day: Start date or datetime
        n: Number of working days, fractions rounded up to whole days

    Returns:
        A value of the same type as ``day``
    """
    steps = whole_working_days(n)
    if steps == 0:
        return day

    # Roll a weekend start against the direction of travel.
    roll = "backward" if steps > 0 else "forward"
    shifted = np.busday_offset(
        _as_day(day), steps, roll=roll, weekmask=WORKING_WEEKMASK
    )
    return _restore(day, shifted)


def working_days_between(start, end):
    """
    Signed number of working days in the half-open interval (start, end].

    For working-day dates, ``offset_working_days(start, result) == end``.
    The result is negative when ``end`` precedes ``start``, and then counts
    the working days in (end, start].
    """
    first, last = _as_day(start), _as_day(end)
    # busday_count shifts its interval when begin > end, so count forward only
    if last < first:
        return -working_days_between(end, start)
    one_day = np.timedelta64(1, "D")
    count = np.busday_count(first + one_day, last + one_day, weekmask=WORKING_WEEKMASK)
    return int(count)


def hours_to_working_days(hours, hours_per_day=HOURS_PER_WORKING_DAY):
    """Convert an effort in hours to working days."""
    if isinstance(hours, bool) or not isinstance(hours, numbers.Real):
        raise InvalidDurationError(hours)
    if not math.isfinite(hours) or hours < 0:
        raise InvalidDurationError(hours)
    if hours_per_day <= 0:
        raise ValueError("hours_per_day must be positive")
    return hours / hours_per_day

