import datetime

import pytest

from lora_igate.timelib import (
    SECS_YR_2000,
    SystemClock,
    TimeElements,
    TimeStatus,
    break_time,
    day_short_str,
    day_str,
    make_time,
    month_short_str,
    month_str,
)


class FakeMillis:
    def __init__(self, value=0):
        self.value = value

    def __call__(self):
        return self.value


SAMPLE_TIMES = [0, 59, 86399, 951782400, SECS_YR_2000, 1234567890, 1709251199, 4102444800]


@pytest.mark.parametrize("t", SAMPLE_TIMES)
def test_break_time_matches_datetime(t):
    expected = datetime.datetime.fromtimestamp(t, tz=datetime.timezone.utc)
    elements = break_time(t)
    assert elements.year + 1970 == expected.year
    assert elements.month == expected.month
    assert elements.day == expected.day
    assert (elements.hour, elements.minute, elements.second) == (
        expected.hour, expected.minute, expected.second)
    assert day_short_str(elements.wday) == expected.strftime("%a")


@pytest.mark.parametrize("t", SAMPLE_TIMES)
def test_make_time_round_trip(t):
    assert make_time(break_time(t)) == t


def test_epoch_start():
    elements = break_time(0)
    assert elements == TimeElements(second=0, minute=0, hour=0, wday=5, day=1, month=1, year=0)
    assert day_str(elements.wday) == "Thursday"


def test_leap_day_2000():
    elements = TimeElements(day=29, month=2, year=30)
    assert break_time(make_time(elements)).day == 29
    assert break_time(make_time(elements)).month == 2


def test_name_tables():
    assert month_str(1) == "January"
    assert month_short_str(12) == "Dec"
    assert day_str(1) == "Sunday"
    assert day_short_str(7) == "Sat"
    assert month_str(0) == "Error"


@pytest.mark.parametrize("func,bad", [(month_str, 13), (month_short_str, -1), (day_str, 8), (day_short_str, 9)])
def test_name_out_of_range(func, bad):
    with pytest.raises(ValueError):
        func(bad)


def test_clock_counts_seconds():
    millis = FakeMillis(5000)
    clock = SystemClock(millis)
    clock.set_time(1000)
    millis.value += 2500
    assert clock.now() == 1002
    assert clock.time_status() is TimeStatus.SET


def test_clock_not_set_initially():
    clock = SystemClock(FakeMillis())
    assert clock.time_status() is TimeStatus.NOT_SET


def test_adjust_time():
    millis = FakeMillis()
    clock = SystemClock(millis)
    clock.set_time(100)
    clock.adjust_time(5)
    assert clock.now() == 105


def test_sync_provider_sets_time_and_later_needs_sync():
    millis = FakeMillis()
    clock = SystemClock(millis)
    provided = [SECS_YR_2000]
    clock.set_sync_provider(lambda: provided[0])
    assert clock.time_status() is TimeStatus.SET
    assert clock.now() == SECS_YR_2000
    provided[0] = 0
    clock.set_sync_interval(10)
    millis.value += 10 * 1000
    assert clock.time_status() is TimeStatus.NEEDS_SYNC
    assert clock.now() == SECS_YR_2000 + 10


def test_failing_provider_keeps_not_set():
    clock = SystemClock(FakeMillis())
    clock.set_sync_provider(lambda: 0)
    assert clock.time_status() is TimeStatus.NOT_SET


@pytest.mark.parametrize("year", [2020, 20])
def test_set_time_components(year):
    clock = SystemClock(FakeMillis())
    clock.set_time_components(12, 30, 45, 15, 6, year)
    t = clock.now()
    assert clock.year(t) == 2020
    assert clock.month(t) == 6
    assert clock.day(t) == 15
    assert clock.time_string(t) == "12:30:45"
    assert clock.is_pm(t) is True


def test_twelve_hour_format():
    clock = SystemClock(FakeMillis())
    midnight = SECS_YR_2000
    assert clock.hour_format_12(midnight) == 12
    assert clock.is_am(midnight) is True
    afternoon = midnight + 13 * 3600
    assert clock.hour_format_12(afternoon) == clock.hour(afternoon) - 12
    assert clock.is_am(afternoon) is False


def test_accessors_default_to_now():
    millis = FakeMillis()
    clock = SystemClock(millis)
    clock.set_time(SECS_YR_2000)
    assert clock.year() == 2000
    assert clock.weekday() == clock.weekday(SECS_YR_2000)
    assert clock.time_string() == "00:00:00"