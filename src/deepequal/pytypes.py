"""
Types and type checks used to decide how two values get compared.

Every value falls into exactly one :class:`Kind`. Custom equality (objects with an ``equal_to()`` method) is checked
separately since it can apply to a value of any kind.
"""

import dataclasses
import datetime
import functools
import weakref
from collections.abc import Mapping, Sequence
from enum import Enum
from types import BuiltinFunctionType, FunctionType, MethodType, ModuleType
from typing import TYPE_CHECKING, Protocol, runtime_checkable

import numpy as np


if TYPE_CHECKING:
    from typing import Any, Hashable, Iterator


class Kind(Enum):
    SCALAR = 'scalar'
    REFERENCE = 'reference'
    MAPPING = 'mapping'
    SEQUENCE = 'sequence'
    TIMESTAMP = 'timestamp'
    AGGREGATE = 'aggregate'


@runtime_checkable
class SupportsEqualTo(Protocol):
    """Objects that know how to compare themselves to another object of unknown shape"""
    def equal_to(self, other: 'Any') -> bool:
        pass


# Sequences that are compared as a whole rather than element by element
_ATOMIC_SEQUENCE_TYPES = (str, bytes, bytearray, memoryview, range)

# Objects that should never be compared attribute by attribute
_NON_AGGREGATE_TYPES = (type, Enum, FunctionType, BuiltinFunctionType, MethodType, ModuleType, functools.partial)

# Set on classes created by a class statement, as opposed to builtin or C extension types
_TPFLAGS_HEAPTYPE = 1 << 9

_SLOT_INTERNALS = frozenset(['__dict__', '__weakref__'])

TIMESTAMP_TYPES = (datetime.datetime, np.datetime64)


def is_namedtuple(obj: 'Any') -> bool:
    return isinstance(obj, tuple) and hasattr(type(obj), '_fields')


def is_dataclass_instance(obj: 'Any') -> bool:
    return dataclasses.is_dataclass(obj) and not isinstance(obj, type)


def _is_python_class(cls: type) -> bool:
    """True if every class in the MRO of `cls` (other than object) is defined in Python rather than C"""
    return all(base is object or base.__flags__ & _TPFLAGS_HEAPTYPE for base in cls.__mro__)


def is_plain_object(obj: 'Any') -> bool:
    """
    True if `obj` is an instance of a Python-defined class that doesn't define its own __eq__, so its state lives in
    its __dict__ and/or __slots__. Instances of C types (partial, builtin exceptions, ...) keep state the attributes
    can't see and are never plain objects.
    """
    cls = type(obj)
    return cls is not object and cls.__eq__ is object.__eq__ and not isinstance(obj, _NON_AGGREGATE_TYPES) \
        and _is_python_class(cls)


def is_exception(obj: 'Any') -> bool:
    """True for exceptions using the default __eq__, which are compared by their args and attributes"""
    return isinstance(obj, BaseException) and type(obj).__eq__ is object.__eq__


def slot_names(cls: type) -> 'Iterator[str]':
    """Yields the __slots__ names of `cls` and its bases, base classes first"""
    seen = set()
    for base in reversed(cls.__mro__):
        slots = base.__dict__.get('__slots__', ())
        for name in ([slots] if isinstance(slots, str) else slots):
            if name not in _SLOT_INTERNALS and name not in seen:
                seen.add(name)
                yield name


def has_equal_to(obj: 'Any') -> bool:
    """True if `obj` (and not just its class) exposes a callable equal_to()"""
    return not isinstance(obj, type) and isinstance(obj, SupportsEqualTo) and callable(obj.equal_to)


def kind_of(obj: 'Any') -> Kind:
    """Returns the Kind that determines how `obj` is compared"""
    if isinstance(obj, weakref.ReferenceType):
        return Kind.REFERENCE
    if isinstance(obj, Mapping):
        return Kind.MAPPING
    if isinstance(obj, TIMESTAMP_TYPES):
        return Kind.TIMESTAMP
    if isinstance(obj, np.ndarray):
        # 0-d arrays have no len() and can't be indexed
        return Kind.SEQUENCE if obj.ndim > 0 else Kind.SCALAR
    if is_namedtuple(obj) or is_dataclass_instance(obj) or is_exception(obj):
        return Kind.AGGREGATE
    if isinstance(obj, Sequence) and not isinstance(obj, _ATOMIC_SEQUENCE_TYPES):
        return Kind.SEQUENCE
    if is_plain_object(obj):
        return Kind.AGGREGATE
    return Kind.SCALAR


def type_key(obj: 'Any') -> 'Hashable':
    """
    The runtime type identity of `obj`. Two values can only be equal if their type keys match. For numpy arrays the
    dtype is part of the identity, so an int64 array never equals a float64 one.
    """
    if isinstance(obj, np.ndarray):
        return (type(obj), obj.dtype)
    return type(obj)


def type_name(obj: 'Any') -> str:
    """Display name of the type of `obj`, used in type mismatch diagnostics"""
    if isinstance(obj, np.ndarray):
        return '%s[%s]' % (type(obj).__name__, obj.dtype)
    return type(obj).__name__
