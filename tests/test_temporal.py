"""
Tests for the deepequal.temporal file, both on its own and through compare().
"""

import datetime

import numpy as np

from deepequal import MismatchReason, Options, TimeEqual, compare
from deepequal.temporal import compare_time, epoch_nanoseconds


_UTC = datetime.timezone.utc
_PLUS_2 = datetime.timezone(datetime.timedelta(hours=2))


def test_epoch_nanoseconds():
    """Tests nanosecond counts of datetimes"""
    assert epoch_nanoseconds(datetime.datetime(1970, 1, 1, tzinfo=_UTC)) == 0
    assert epoch_nanoseconds(datetime.datetime(1970, 1, 1, 0, 0, 1, 5, tzinfo=_UTC)) == 1_000_005_000
    assert epoch_nanoseconds(datetime.datetime(1969, 12, 31, 23, 59, 59, tzinfo=_UTC)) == -1_000_000_000
    assert epoch_nanoseconds(datetime.datetime(1970, 1, 1, 2, tzinfo=_PLUS_2)) == 0

    # Naive datetimes are local time
    naive = datetime.datetime(2001, 9, 9, 1, 46, 40)
    assert epoch_nanoseconds(naive) == round(naive.timestamp()) * 10**9


def test_epoch_nanoseconds_datetime64():
    """Tests nanosecond counts of numpy datetime64's in various units"""
    assert epoch_nanoseconds(np.datetime64('1970-01-01T00:00:01', 's')) == 10**9
    assert epoch_nanoseconds(np.datetime64('1970-01-01T00:00:00.000000001', 'ns')) == 1
    assert epoch_nanoseconds(np.datetime64('1970-01-02', 'D')) == 86_400 * 10**9
    assert epoch_nanoseconds(np.datetime64('1970-02', 'M')) == 31 * 86_400 * 10**9
    assert epoch_nanoseconds(np.datetime64('1969-12-31T23:59', 'm')) == -60 * 10**9
    assert epoch_nanoseconds(np.datetime64(1500, 'ps')) == 1
    assert epoch_nanoseconds(np.datetime64('NaT')) is None


def test_structural():
    """The same instant in different timezones is unequal structurally"""
    local = datetime.datetime(2024, 5, 1, 14, 0, tzinfo=_PLUS_2)
    utc = local.astimezone(_UTC)
    assert local == utc  # Python itself thinks so

    err = compare(local, utc)
    assert err is not None
    assert err.reason is MismatchReason.VALUE
    assert str(err).startswith('different value, ')

    assert compare(local, local.replace()) is None
    assert compare(utc, datetime.datetime(2024, 5, 1, 12, 0, tzinfo=datetime.timezone(datetime.timedelta(0)))) is None

    # Naive and aware datetimes with the same wall time
    assert compare(datetime.datetime(2024, 5, 1), datetime.datetime(2024, 5, 1, tzinfo=_UTC)) is not None

    # fold is part of the representation
    assert compare(datetime.datetime(2024, 11, 3, 1, 30), datetime.datetime(2024, 11, 3, 1, 30, fold=1)) is not None

    err = compare({'t': local}, {'t': local + datetime.timedelta(microseconds=1)})
    assert str(err).startswith('t: different value, ')


def test_epoch_nanosecond_mode():
    """Only the instant matters in epoch-nanosecond mode"""
    local = datetime.datetime(2024, 5, 1, 14, 0, tzinfo=_PLUS_2)
    utc = local.astimezone(_UTC)

    for time_equal in [TimeEqual.EPOCH_NANOSECOND, 'unixNano', 'epoch_ns']:
        assert compare(local, utc, time_equal=time_equal) is None
        assert compare([local], [utc], Options(time_equal=time_equal)) is None

    later = local + datetime.timedelta(microseconds=1)
    err = compare(local, later, time_equal='unixNano')
    assert err is not None
    assert err.reason is MismatchReason.VALUE
    assert str(err) == 'different epoch nanoseconds, %d vs %d' % (epoch_nanoseconds(local), epoch_nanoseconds(local) + 1_000)


def test_datetime64():
    """The same instant in different units is only equal in epoch-nanosecond mode"""
    seconds = np.datetime64('2024-01-01T00:00:00', 's')
    millis = np.datetime64('2024-01-01T00:00:00.000', 'ms')

    assert compare(seconds, np.datetime64('2024-01-01T00:00:00', 's')) is None
    assert compare(seconds, millis) is not None
    assert compare(seconds, millis, time_equal=TimeEqual.EPOCH_NANOSECOND) is None
    assert compare(seconds, seconds + np.timedelta64(1, 's'), time_equal=TimeEqual.EPOCH_NANOSECOND) is not None


def test_compare_time():
    """Tests compare_time() directly, including the path it reports"""
    a = datetime.datetime(2020, 1, 1, tzinfo=_UTC)
    b = datetime.datetime(2020, 1, 1, 2, tzinfo=_PLUS_2)

    assert compare_time(a, a, 'T') is None
    assert compare_time(a, b, 'T', TimeEqual.EPOCH_NANOSECOND) is None

    err = compare_time(a, b, 'T')
    assert err.path == 'T'
    assert err.expect is a
    assert err.actual is b
