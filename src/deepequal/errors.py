"""
Errors describing why two objects were determined to be unequal.

A comparison failure is an :class:`EqualityError`. It is returned (not raised) by
:func:`~deepequal.equality.compare`, and raised by :func:`~deepequal.equality.assert_equal`. Since it subclasses
AssertionError, pytest reports a raised one as a plain test failure.
"""

from enum import Enum
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from typing import Any, Optional


_MAX_STR_LEN = 1000


class MismatchReason(Enum):
    """Why two values differ. The value is the default phrase used in the diagnostic"""
    TYPE = 'different type'
    NIL = 'different is-None'
    LENGTH = 'different length'
    VALUE = 'different value'
    CUSTOM = 'not equal, compared via equal_to()'
    NOT_FOUND = 'not found'
    LOOKUP = 'different key presence'


def limit_str(a: 'Any', limit: int = _MAX_STR_LEN) -> str:
    """repr() of `a`, cut down to `limit` characters"""
    a_str = repr(a)
    return a_str if len(a_str) < limit else (a_str[:limit] + '...')


class EqualityError(AssertionError):
    """
    The first difference found between two objects.

    The string form is ``'<path>: <message>'``, or just ``'<message>'`` at the root. When `message` isn't given it
    is built as ``'<reason phrase>, <expect> vs <actual>'``.

    Attributes:
        path (str): where in the compared structure the difference was found
        reason (MismatchReason): why the values differ
        expect: the conflicting value on the expected side
        actual: the conflicting value on the actual side
        message (str): the diagnostic, without the path
    """

    def __init__(self, path: str, reason: MismatchReason, expect: 'Any', actual: 'Any',
                 message: 'Optional[str]' = None):
        self.path = path
        self.reason = reason
        self.expect = expect
        self.actual = actual
        self.message = ('%s, %s vs %s' % (reason.value, limit_str(expect), limit_str(actual))) \
            if message is None else message
        super().__init__(('%s: %s' % (path, self.message)) if path else self.message)


class EqualityCheckingError(Exception):
    """Error raised whenever there is an unexpected problem attempting to check equality between two objects"""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(('%s: %s' % (path, message)) if path else message)
