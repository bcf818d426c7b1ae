"""Low level time and date functions working on seconds since 1970."""

from __future__ import annotations

import enum
import time
from dataclasses import dataclass
from typing import Callable, Optional

_MASK32 = 0xFFFFFFFF

SECS_PER_MIN = 60
SECS_PER_HOUR = 3600
SECS_PER_DAY = SECS_PER_HOUR * 24
DAYS_PER_WEEK = 7
SECS_PER_WEEK = SECS_PER_DAY * DAYS_PER_WEEK
SECS_PER_YEAR = SECS_PER_DAY * 365
SECS_YR_2000 = 946684800

_MONTH_DAYS = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)

_MONTH_NAMES = (
    "Error", "January", "February", "March", "April", "May", "June", "July",
    "August", "September", "October", "November", "December",
)
_MONTH_SHORT_NAMES = (
    "Err", "Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep",
    "Oct", "Nov", "Dec",
)
_DAY_NAMES = (
    "Err", "Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday",
    "Saturday",
)
_DAY_SHORT_NAMES = ("Err", "Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


class TimeStatus(enum.Enum):
    NOT_SET = 0
    NEEDS_SYNC = 1
    SET = 2


@dataclass
class TimeElements:
    """Broken-down time. ``year`` is an offset from 1970, ``wday`` 1 is Sunday."""

    second: int = 0
    minute: int = 0
    hour: int = 0
    wday: int = 0
    day: int = 0
    month: int = 0
    year: int = 0


def _is_leap(year_offset: int) -> bool:
    y = 1970 + year_offset
    return y > 0 and y % 4 == 0 and (y % 100 != 0 or y % 400 == 0)


def _month_length(month_index: int, year_offset: int) -> int:
    if month_index == 1:
        return 29 if _is_leap(year_offset) else 28
    return _MONTH_DAYS[month_index]


def break_time(t: int) -> TimeElements:
    """Split seconds since 1970 into calendar fields."""
    remaining = t & _MASK32
    second = remaining % 60
    remaining //= 60
    minute = remaining % 60
    remaining //= 60
    hour = remaining % 24
    days = remaining // 24
    wday = (days + 4) % 7 + 1

    year = 0
    while True:
        length = 366 if _is_leap(year) else 365
        if days < length:
            break
        days -= length
        year += 1

    month = 0
    while month < 12 and days >= _month_length(month, year):
        days -= _month_length(month, year)
        month += 1

    return TimeElements(
        second=second, minute=minute, hour=hour, wday=wday,
        day=days + 1, month=month + 1, year=year,
    )


def make_time(elements: TimeElements) -> int:
    """Assemble calendar fields into seconds since 1970."""
    seconds = elements.year * SECS_PER_DAY * 365
    seconds += sum(SECS_PER_DAY for y in range(elements.year) if _is_leap(y))
    for month in range(1, elements.month):
        if month == 2 and _is_leap(elements.year):
            seconds += SECS_PER_DAY * 29
        else:
            seconds += SECS_PER_DAY * _MONTH_DAYS[month - 1]
    seconds += (elements.day - 1) * SECS_PER_DAY
    seconds += elements.hour * SECS_PER_HOUR
    seconds += elements.minute * SECS_PER_MIN
    seconds += elements.second
    return seconds & _MASK32


def _lookup(table: tuple, index: int, what: str) -> str:
    if not 0 <= index < len(table):
        raise ValueError(f"{what} out of range: {index}")
    return table[index]


def month_str(month: int) -> str:
    return _lookup(_MONTH_NAMES, month, "month")


def month_short_str(month: int) -> str:
    return _lookup(_MONTH_SHORT_NAMES, month, "month")


def day_str(day: int) -> str:
    return _lookup(_DAY_NAMES, day, "day")


def day_short_str(day: int) -> str:
    return _lookup(_DAY_SHORT_NAMES, day, "day")


def _millis() -> int:
    return int(time.monotonic() * 1000) & _MASK32


class SystemClock:
    """Software clock counting seconds, optionally synced from a provider.

    ``millis`` supplies a millisecond tick counter; the provider returns
    seconds since 1970, or 0 when it has no time to give.
    """

    def __init__(self, millis: Optional[Callable[[], int]] = None) -> None:
        self._millis = millis or _millis
        self._sys_time = 0
        self._prev_millis = 0
        self._next_sync_time = 0
        self._status = TimeStatus.NOT_SET
        self._sync_interval = 300
        self._provider: Optional[Callable[[], int]] = None
        self._cache_time: Optional[int] = None
        self._cache = TimeElements()

    def _ticks(self) -> int:
        return self._millis() & _MASK32

    def now(self) -> int:
        """Current time in seconds since 1970, syncing when due."""
        while ((self._ticks() - self._prev_millis) & _MASK32) >= 1000:
            self._sys_time = (self._sys_time + 1) & _MASK32
            self._prev_millis = (self._prev_millis + 1000) & _MASK32
        if self._next_sync_time <= self._sys_time and self._provider is not None:
            t = self._provider()
            if t:
                self.set_time(t)
            else:
                self._next_sync_time = (self._sys_time + self._sync_interval) & _MASK32
                if self._status is not TimeStatus.NOT_SET:
                    self._status = TimeStatus.NEEDS_SYNC
        return self._sys_time

    def set_time(self, t: int) -> None:
        self._sys_time = t & _MASK32
        self._next_sync_time = (t + self._sync_interval) & _MASK32
        self._status = TimeStatus.SET
        self._prev_millis = self._ticks()

    def set_time_components(self, hr, minute, sec, day, month, year) -> None:
        """Set the clock from fields; ``year`` may be four or two digits."""
        year = year - 1970 if year > 99 else year + 30
        self.set_time(make_time(TimeElements(
            second=sec, minute=minute, hour=hr, day=day, month=month, year=year,
        )))

    def adjust_time(self, adjustment: int) -> None:
        self._sys_time = (self._sys_time + adjustment) & _MASK32

    def time_status(self) -> TimeStatus:
        self.now()
        return self._status

    def set_sync_provider(self, provider: Callable[[], int]) -> None:
        self._provider = provider
        self._next_sync_time = self._sys_time
        self.now()

    def set_sync_interval(self, interval: int) -> None:
        self._sync_interval = interval & _MASK32
        self._next_sync_time = (self._sys_time + self._sync_interval) & _MASK32

    def _elements(self, t: Optional[int]) -> TimeElements:
        if t is None:
            t = self.now()
        if t != self._cache_time:
            self._cache = break_time(t)
            self._cache_time = t
        return self._cache

    def hour(self, t=None) -> int:
        return self._elements(t).hour

    def hour_format_12(self, t=None) -> int:
        hour = self._elements(t).hour
        if hour == 0:
            return 12
        return hour - 12 if hour > 12 else hour

    def is_am(self, t=None) -> bool:
        return not self.is_pm(t)

    def is_pm(self, t=None) -> bool:
        return self.hour(t) >= 12

    def minute(self, t=None) -> int:
        return self._elements(t).minute

    def second(self, t=None) -> int:
        return self._elements(t).second

    def day(self, t=None) -> int:
        return self._elements(t).day

    def weekday(self, t=None) -> int:
        return self._elements(t).wday

    def month(self, t=None) -> int:
        return self._elements(t).month

    def year(self, t=None) -> int:
        return self._elements(t).year + 1970

    def time_string(self, t=None) -> str:
        if t is None:
            t = self.now()
        return f"{self.hour(t):02d}:{self.minute(t):02d}:{self.second(t):02d}"