"""
Equality of timestamps (``datetime.datetime`` and ``numpy.datetime64``).

Two modes are supported:

    - structural (the default): the full representations must match. Two datetimes that denote the same instant in
      different timezones are NOT equal, and neither are two datetime64's with the same instant in different units.
    - epoch-nanosecond: only the number of nanoseconds since 1970-01-01T00:00:00Z is compared, so the same instant
      is equal no matter how it is represented. Naive datetimes are taken to be in local time, like
      ``datetime.timestamp()`` does.
"""

import datetime
from typing import TYPE_CHECKING

import numpy as np

from .errors import EqualityError, MismatchReason
from .options import TimeEqual


if TYPE_CHECKING:
    from typing import Hashable, Optional, Union

    Timestamp = Union[datetime.datetime, np.datetime64]


_EPOCH = datetime.datetime(1970, 1, 1, tzinfo=datetime.timezone.utc)

# Nanoseconds per datetime64 unit. Years and months have no fixed length and are converted to days first
_NS_PER_UNIT = {
    'W': 7 * 86_400 * 10**9,
    'D': 86_400 * 10**9,
    'h': 3_600 * 10**9,
    'm': 60 * 10**9,
    's': 10**9,
    'ms': 10**6,
    'us': 10**3,
    'ns': 1,
}
_UNITS_PER_NS = {'ps': 10**3, 'fs': 10**6, 'as': 10**9}


def epoch_nanoseconds(ts: 'Timestamp') -> 'Optional[int]':
    """
    Returns the signed number of nanoseconds between the unix epoch and `ts`, or None for a NaT datetime64.

    Units finer than a nanosecond are floored to the nanosecond.
    """
    if isinstance(ts, np.datetime64):
        return _datetime64_nanoseconds(ts)

    if ts.utcoffset() is None:
        ts = ts.astimezone()

    delta = ts - _EPOCH
    return (delta.days * 86_400 + delta.seconds) * 10**9 + delta.microseconds * 1_000 + getattr(ts, 'nanosecond', 0)


def _datetime64_nanoseconds(ts: np.datetime64) -> 'Optional[int]':
    if np.isnat(ts):
        return None

    unit, count = np.datetime_data(ts.dtype)
    if unit in ('Y', 'M'):
        ts = ts.astype('datetime64[D]')
        unit, count = 'D', 1

    raw = int(ts.astype(np.int64)) * count
    if unit in _UNITS_PER_NS:
        return raw // _UNITS_PER_NS[unit]
    return raw * _NS_PER_UNIT[unit]


def representation_key(ts: 'Timestamp') -> 'Hashable':
    """Everything that makes up the representation of `ts`, in a form that can be compared with '=='"""
    if isinstance(ts, np.datetime64):
        return (np.datetime_data(ts.dtype), int(ts.astype(np.int64)))
    return (ts.replace(tzinfo=None, fold=0), ts.fold, ts.tzinfo, ts.utcoffset())


def compare_time(expect: 'Timestamp', actual: 'Timestamp', path: str,
                 time_equal: TimeEqual = TimeEqual.STRUCTURAL) -> 'Optional[EqualityError]':
    """Compares two timestamps of the same type, returning an EqualityError if they are unequal under `time_equal`"""
    if time_equal is TimeEqual.EPOCH_NANOSECOND:
        expect_ns, actual_ns = epoch_nanoseconds(expect), epoch_nanoseconds(actual)
        if expect_ns != actual_ns:
            return EqualityError(path, MismatchReason.VALUE, expect, actual,
                message='different epoch nanoseconds, %s vs %s' % (expect_ns, actual_ns))
        return None

    if representation_key(expect) != representation_key(actual):
        return EqualityError(path, MismatchReason.VALUE, expect, actual)
    return None
