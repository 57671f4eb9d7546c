"""
Structural (deep) equality with diagnostics, meant for test assertions.

Handled kinds:
    - None (only ever equal to None)
    - objects with an ``equal_to(other)`` method (that method decides, for the whole subtree)
    - weakref.ref (compared by what they point to)
    - mappings (dict and any other collections.abc.Mapping)
    - sequences (list, tuple, numpy ndarray, and any other collections.abc.Sequence except str/bytes-likes/range),
      by position or, for configured paths, by containment
    - timestamps (datetime.datetime, numpy datetime64), see :mod:`deepequal.temporal`
    - aggregates (dataclasses, namedtuples, and plain objects whose class doesn't define __eq__), field by field
    - falls back on built-in __eq__ for everything else (numbers, strings, sets, enums, ...)

Both values must have exactly the same type at every level: ``1`` and ``1.0`` are NOT equal here.

Comparison is depth-first and left-to-right, and stops at the first difference found. That difference is returned as
an :class:`~deepequal.errors.EqualityError` naming the path it was found at, eg::

    >>> str(compare({'foo': 1}, {'foo': '1'}))
    'foo: different type, int vs str'

NOTE: cyclic object graphs are not detected, comparing them will raise a RecursionError.
"""

import dataclasses
import logging
from typing import TYPE_CHECKING

import numpy as np

from .errors import EqualityCheckingError, EqualityError, MismatchReason, limit_str
from .options import SKIP_MARKER, options_from_args, resolve_options
from .paths import ROOT_PATH, extend_field, extend_index
from .pytypes import (Kind, has_equal_to, is_dataclass_instance, is_exception, is_namedtuple, kind_of, slot_names, type_key,
                      type_name)
from .temporal import compare_time


if TYPE_CHECKING:
    from typing import Any, Iterator, Optional

    from .options import Options, ResolvedOptions


logger = logging.getLogger(__name__)

# Stands in for an attribute an object doesn't have
_MISSING = object()


def compare(expect: 'Any', actual: 'Any', *options: 'Options', **option_kwargs: 'Any') -> 'Optional[EqualityError]':
    """
    Compares `expect` with `actual`, returning None if they are equal, or an EqualityError describing the first
    difference otherwise.

    Options can be given either as a single :class:`~deepequal.options.Options` value, or as keyword arguments naming
    its fields, eg: ``compare(a, b, ignore_fields=['id'])``. Passing more than one Options, or an Options along with
    keyword options, is a programming error and raises a TypeError.

    Args:
        expect (Any): the expected object
        actual (Any): the object to check against `expect`
        options (Options): at most one Options value
        option_kwargs: fields of Options, used if no Options value is passed

    Returns:
        Optional[EqualityError]: None if the objects are equal, otherwise the first difference found
    """
    opts = resolve_options(options_from_args(options, option_kwargs))
    err = _compare(expect, actual, ROOT_PATH, opts)
    if err is not None:
        logger.debug("Objects differ at %r (%s): %s", err.path, err.reason.name, err.message)
    return err


def equal(expect: 'Any', actual: 'Any', *options: 'Options', raise_err: bool = False, **option_kwargs: 'Any') -> bool:
    """
    Like :func:`compare`, but returns a bool.

    Args:
        raise_err (bool): if True, then the EqualityError is raised whenever `expect` and `actual` are unequal instead
            of returning False. Defaults to False.
    """
    err = compare(expect, actual, *options, **option_kwargs)
    if err is None:
        return True
    if raise_err:
        raise err
    return False


def assert_equal(expect: 'Any', actual: 'Any', *options: 'Options', **option_kwargs: 'Any') -> None:
    """Raises the EqualityError from :func:`compare` if `expect` and `actual` are unequal"""
    err = compare(expect, actual, *options, **option_kwargs)
    if err is not None:
        raise err


def _compare(expect: 'Any', actual: 'Any', path: str, opts: 'ResolvedOptions') -> 'Optional[EqualityError]':
    """Recursive comparison of `expect` and `actual` found at `path`"""
    # Ignored paths are skipped before anything else, that way their types are allowed to differ too
    if opts.is_ignored(path):
        return None

    if expect is None or actual is None:
        if expect is None and actual is None:
            return None
        return EqualityError(path, MismatchReason.NIL, expect, actual,
            message='%s, %s vs %s' % (MismatchReason.NIL.value, expect is None, actual is None))

    if type_key(expect) != type_key(actual):
        return EqualityError(path, MismatchReason.TYPE, expect, actual,
            message='%s, %s vs %s' % (MismatchReason.TYPE.value, type_name(expect), type_name(actual)))

    if _same_storage(expect, actual):
        return None

    if has_equal_to(expect):
        try:
            if expect.equal_to(actual):
                return None
        except RecursionError:
            raise
        except Exception as e:
            raise EqualityCheckingError(path, "%s.equal_to() raised an error" % type_name(expect)) from e
        return EqualityError(path, MismatchReason.CUSTOM, expect, actual)

    kind = kind_of(expect)

    # Dereferencing doesn't add a path segment
    if kind is Kind.REFERENCE:
        return _compare(expect(), actual(), path, opts)

    elif kind is Kind.MAPPING:
        return _compare_mapping(expect, actual, path, opts)

    elif kind is Kind.SEQUENCE:
        return _compare_sequence(expect, actual, path, opts)

    elif kind is Kind.TIMESTAMP:
        return compare_time(expect, actual, path, opts.time_equal)

    elif kind is Kind.AGGREGATE:
        return _compare_aggregate(expect, actual, path, opts)

    return _compare_scalar(expect, actual, path)


def _same_storage(expect: 'Any', actual: 'Any') -> bool:
    """True if both objects are the same object, or are numpy arrays viewing exactly the same memory the same way"""
    if expect is actual:
        return True
    if isinstance(expect, np.ndarray):
        return expect.__array_interface__['data'][0] == actual.__array_interface__['data'][0] \
            and expect.shape == actual.shape and expect.strides == actual.strides
    return False


def _compare_scalar(expect: 'Any', actual: 'Any', path: str) -> 'Optional[EqualityError]':
    """Falls back on built-in __eq__ (or numpy's array_equal for 0-d arrays)"""
    try:
        if isinstance(expect, np.ndarray):
            same = np.array_equal(expect, actual)
        else:
            same = expect == actual
            if isinstance(same, np.ndarray):
                same = same.all()
        same = bool(same)
    except RecursionError:
        raise
    except Exception as e:
        raise EqualityCheckingError(path, "Could not determine equality between objects\na: %s\nb: %s" %
            (limit_str(expect), limit_str(actual))) from e

    if not same:
        return EqualityError(path, MismatchReason.VALUE, expect, actual)
    return None


def _compare_mapping(expect: 'Any', actual: 'Any', path: str, opts: 'ResolvedOptions') -> 'Optional[EqualityError]':
    """
    Compares key counts, then each of the expected keys' values.

    With equal key counts, any key only `actual` has implies a key only `expect` has, so iterating over the expected
    keys is enough to find it.
    """
    if len(expect) != len(actual):
        return EqualityError(path, MismatchReason.LENGTH, len(expect), len(actual),
            message='different key count, %d vs %d' % (len(expect), len(actual)))

    for key in expect:
        key_path = extend_field(path, key)
        if key not in actual:
            if opts.is_ignored(key_path):
                continue
            return EqualityError(key_path, MismatchReason.LOOKUP, True, False)

        err = _compare(expect[key], actual[key], key_path, opts)
        if err is not None:
            return err

    return None


def _compare_sequence(expect: 'Any', actual: 'Any', path: str, opts: 'ResolvedOptions') -> 'Optional[EqualityError]':
    """Compares lengths, then elements either by position or (if `path` ignores order) by containment"""
    if len(expect) != len(actual):
        return EqualityError(path, MismatchReason.LENGTH, len(expect), len(actual),
            message='%s, %d vs %d' % (MismatchReason.LENGTH.value, len(expect), len(actual)))

    if not opts.is_order_ignored(path):
        for i, (_checking_e, _checking_a) in enumerate(zip(expect, actual)):
            err = _compare(_checking_e, _checking_a, extend_index(path, i), opts)
            if err is not None:
                return err
        return None

    err = _find_all(expect, actual, path, opts)
    if err is not None:
        return err
    return _find_all(actual, expect, path, opts)


def _not_found(item_path: str, item: 'Any', target: 'Any') -> EqualityError:
    return EqualityError(item_path, MismatchReason.NOT_FOUND, item, target,
        message='%s not found in %s' % (limit_str(item), limit_str(target)))


def _find_all(source: 'Any', target: 'Any', path: str, opts: 'ResolvedOptions') -> 'Optional[EqualityError]':
    """
    Checks every element of `source` is equal to some element of `target`. O(len(source) * len(target)).

    Unless `strict_multiset` is set, an element of `target` can be matched by more than one element of `source`.
    """
    if opts.strict_multiset:
        return _match_all(source, target, path, opts)

    for i, item in enumerate(source):
        item_path = extend_index(path, i)
        if not any(_compare(item, candidate, item_path, opts) is None for candidate in target):
            return _not_found(item_path, item, target)
    return None


def _match_all(source: 'Any', target: 'Any', path: str, opts: 'ResolvedOptions') -> 'Optional[EqualityError]':
    """
    Matches every element of `source` to a distinct equal element of `target`.

    Uses augmenting paths (Kuhn's algorithm), so a matching is found whenever one exists, even when equality isn't
    transitive (eg: an equal_to() based on substrings). The first element left without a match is reported.
    """
    candidates = []
    for i, item in enumerate(source):
        item_path = extend_index(path, i)
        equal_js = [j for j, candidate in enumerate(target) if _compare(item, candidate, item_path, opts) is None]
        if not equal_js:
            return _not_found(item_path, item, target)
        candidates.append(equal_js)

    # Index into `target` -> index into `source` it is currently matched with
    matched_by = {}

    def _augment(i, visited):
        for j in candidates[i]:
            if j in visited:
                continue
            visited.add(j)
            if j not in matched_by or _augment(matched_by[j], visited):
                matched_by[j] = i
                return True
        return False

    for i, item in enumerate(source):
        if not _augment(i, set()):
            return _not_found(extend_index(path, i), item, target)
    return None


def _iter_fields(expect: 'Any', actual: 'Any', tag_name: 'Optional[str]') -> 'Iterator[tuple[str, str]]':
    """
    Yields (attribute name, path segment) for each field to compare, in declaration order. Fields skipped by their
    tag are left out.
    """
    if is_dataclass_instance(expect):
        for f in dataclasses.fields(expect):
            segment = f.name
            if tag_name is not None and tag_name in f.metadata:
                tag = str(f.metadata[tag_name]).split(',')[0].strip()
                if tag == SKIP_MARKER:
                    continue
                if tag:
                    segment = tag
            yield f.name, segment

    elif is_namedtuple(expect):
        for name in type(expect)._fields:
            yield name, name

    else:
        names = list(slot_names(type(expect)))
        if is_exception(expect):
            names.insert(0, 'args')
        for attrs in (getattr(expect, '__dict__', {}), getattr(actual, '__dict__', {})):
            names.extend(name for name in attrs if name not in names)
        for name in names:
            yield name, name


def _compare_aggregate(expect: 'Any', actual: 'Any', path: str, opts: 'ResolvedOptions') -> 'Optional[EqualityError]':
    """Compares each exported (not starting with '_') field, stopping at the first difference"""
    for name, segment in _iter_fields(expect, actual, opts.tag_name):
        if name.startswith('_'):
            continue

        field_path = extend_field(path, segment)
        _checking_e = getattr(expect, name, _MISSING)
        _checking_a = getattr(actual, name, _MISSING)

        if _checking_e is _MISSING or _checking_a is _MISSING:
            if (_checking_e is _MISSING and _checking_a is _MISSING) or opts.is_ignored(field_path):
                continue
            return EqualityError(field_path, MismatchReason.LOOKUP, _checking_e is not _MISSING,
                _checking_a is not _MISSING, message='different attribute presence, %s vs %s' %
                (_checking_e is not _MISSING, _checking_a is not _MISSING))

        err = _compare(_checking_e, _checking_a, field_path, opts)
        if err is not None:
            return err

    return None
