"""
Building the location strings used for ignore rules and in diagnostics.

Field access renders as ``.name`` (no leading dot at the root) and index access as ``[i]``, eg: ``M.foo.Arr[1]``.
"""

from enum import Enum
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from typing import Any, Union


ROOT_PATH = ''


class SegmentKind(Enum):
    FIELD = 'field'
    INDEX = 'index'


def extend(path: str, segment: 'Any', kind: 'Union[SegmentKind, str]' = SegmentKind.FIELD) -> str:
    """Returns a new path with `segment` appended to `path` as either a field access or an index access"""
    kind = SegmentKind(kind)
    if kind is SegmentKind.INDEX:
        return extend_index(path, segment)
    return extend_field(path, segment)


def extend_field(path: str, name: 'Any') -> str:
    if path == ROOT_PATH:
        return str(name)
    return '%s.%s' % (path, name)


def extend_index(path: str, index: int) -> str:
    return '%s[%d]' % (path, index)
