"""
Options for :func:`~deepequal.equality.compare` and how they get resolved into the lookup structures used while
recursing.

Options are given once per top-level call and resolved once, before any recursion happens. The resolved form is
immutable and is passed explicitly to every recursive call, so concurrent calls with different options never see
eachother's configuration.
"""

import dataclasses
import logging
import re
from enum import Enum, unique as enum_unique
from types import MappingProxyType
from typing import TYPE_CHECKING

from typing_extensions import Self


if TYPE_CHECKING:
    from typing import Any, Iterable, Mapping, Optional, Union

    TimeEqualInput = Union['TimeEqual', str]


logger = logging.getLogger(__name__)

# Key in `ignore_order` that turns on order-insensitive comparison for every path
WILDCARD_PATH = '*'

# First token of a tag annotation that excludes the field from comparison
SKIP_MARKER = '-'


@enum_unique
class TimeEqual(Enum):
    """
    How timestamps are compared. Values are the (case-insensitive) regex patterns that string inputs are matched
    against, the same way they are for other string-or-enum arguments.
    """
    STRUCTURAL = r'(deep|default|struct(ural)?)'
    EPOCH_NANOSECOND = r'((unix|epoch)[ _-]?(nano(second)?s?|ns))'


def parse_time_equal(time_equal: 'TimeEqualInput') -> 'TimeEqual':
    """Returns the TimeEqual member for the given enum member or string, raising an error on anything unknown"""
    if isinstance(time_equal, TimeEqual):
        return time_equal

    if isinstance(time_equal, str):
        clean_te = time_equal.lower().strip()
        for te in TimeEqual:
            if re.fullmatch(te.value, clean_te) is not None:
                return te
        raise ValueError("Unknown time_equal string: %s" % repr(time_equal))

    raise TypeError("`time_equal` must be a TimeEqual or str, not %s" % repr(type(time_equal).__name__))


@dataclasses.dataclass
class Options:
    """
    Caller-facing configuration for a single comparison.

    Args:
        ignore_fields (Iterable[str]): paths that are skipped entirely. Whatever lives at (and below) these paths is
            treated as equal, even if the types differ. Paths look like ``'M.string'``, ``'items[2].name'``.
        tag_name (Optional[str]): if not None, the dataclass field metadata key to look at for each field. The first
            comma-separated token of that metadata value renames the field's path segment, or excludes the field
            entirely if it is ``'-'``.
        ignore_order (Mapping[str, bool]): paths at which sequences are compared by containment instead of by
            position. The root path is ``''``, and ``'*'`` applies to every path.
        time_equal (Union[TimeEqual, str]): ``TimeEqual.STRUCTURAL`` (the default) compares the full representation of
            timestamps, ``TimeEqual.EPOCH_NANOSECOND`` only compares the instant they denote.
        strict_multiset (bool): if True, order-insensitive comparison matches every element at most once, making it a
            true multiset equality, found with augmenting paths so it holds for a non-transitive equal_to() too.
            Otherwise elements may be matched more than once, eg: ``['1', '1', '2']`` and ``['1', '2', '2']``
            compare equal. Defaults to False.
    """
    ignore_fields: 'Iterable[str]' = ()
    tag_name: 'Optional[str]' = None
    ignore_order: 'Mapping[str, bool]' = dataclasses.field(default_factory=dict)
    time_equal: 'TimeEqualInput' = TimeEqual.STRUCTURAL
    strict_multiset: bool = False

    def updated(self, **changes: 'Any') -> Self:
        """Returns a copy of these options with the given fields replaced"""
        return dataclasses.replace(self, **changes)


@dataclasses.dataclass(frozen=True)
class ResolvedOptions:
    """Options after resolution. Built once per top-level call and never modified afterwards"""
    ignored_paths: 'frozenset[str]'
    tag_name: 'Optional[str]'
    ignore_order: 'Mapping[str, bool]'
    time_equal: TimeEqual
    strict_multiset: bool

    def is_ignored(self, path: str) -> bool:
        return path in self.ignored_paths

    def is_order_ignored(self, path: str) -> bool:
        return bool(self.ignore_order.get(path)) or bool(self.ignore_order.get(WILDCARD_PATH))


_OPTION_NAMES = frozenset(f.name for f in dataclasses.fields(Options))


def options_from_args(options: 'tuple', option_kwargs: 'Mapping[str, Any]') -> 'Optional[Options]':
    """
    Collapses the ``*options`` and ``**option_kwargs`` passed to a public entry point into at most one Options value.

    Configuration is a single optional value, so passing more than one Options, or an Options along with keyword
    options, is a programming error and raises a TypeError immediately.
    """
    if len(options) > 1:
        raise TypeError("Only one Options value may be passed, got %d" % len(options))

    unknown = set(option_kwargs) - _OPTION_NAMES
    if unknown:
        raise TypeError("Unknown option(s): %s" % ', '.join(sorted(repr(k) for k in unknown)))

    if len(options) == 1:
        if option_kwargs:
            raise TypeError("Cannot pass both an Options value and keyword options %s" % sorted(option_kwargs))
        return options[0]

    return Options(**option_kwargs) if option_kwargs else None


def resolve_options(options: 'Optional[Options]' = None) -> ResolvedOptions:
    """
    Resolves the given options (or the defaults if None) into a ResolvedOptions.

    Raises:
        TypeError: if `options` is not an Options, or one of its fields has the wrong type
        ValueError: if `time_equal` is an unknown string
    """
    if options is None:
        options = Options()
    elif not isinstance(options, Options):
        raise TypeError("`options` must be an Options instance or None, not %s" % repr(type(options).__name__))

    if isinstance(options.ignore_fields, str):
        raise TypeError("`ignore_fields` must be an iterable of paths, not a single str: %s" % repr(options.ignore_fields))
    if options.tag_name is not None and not isinstance(options.tag_name, str):
        raise TypeError("`tag_name` must be a str or None, not %s" % repr(type(options.tag_name).__name__))

    resolved = ResolvedOptions(
        ignored_paths=frozenset(options.ignore_fields),
        tag_name=options.tag_name or None,
        ignore_order=MappingProxyType(dict(options.ignore_order or {})),
        time_equal=parse_time_equal(options.time_equal),
        strict_multiset=bool(options.strict_multiset),
    )
    logger.debug("Resolved comparison options: %s", resolved)
    return resolved
