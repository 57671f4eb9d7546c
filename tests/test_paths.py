"""
Tests for the deepequal.paths file.
"""

import pytest

from deepequal.paths import ROOT_PATH, SegmentKind, extend, extend_field, extend_index


def test_fields():
    """Field segments get a '.' separator, except at the root"""
    assert extend_field(ROOT_PATH, 'Name') == 'Name'
    assert extend_field('M', 'foo') == 'M.foo'
    assert extend_field('M.foo', 'bar') == 'M.foo.bar'
    assert extend_field('[0]', 'x') == '[0].x'
    assert extend_field('', 1) == '1'


def test_indices():
    """Index segments never get a separator"""
    assert extend_index(ROOT_PATH, 0) == '[0]'
    assert extend_index('Arr', 2) == 'Arr[2]'
    assert extend_index('[1]', 3) == '[1][3]'


def test_extend():
    """Tests extend() with both kinds of segment"""
    assert extend('', 'Name') == 'Name'
    assert extend('', 'Name', SegmentKind.FIELD) == 'Name'
    assert extend('', 0, SegmentKind.INDEX) == '[0]'
    assert extend('Arr', 2, 'index') == 'Arr[2]'
    assert extend(extend('foo', 'Arr', 'field'), 1, 'index') == 'foo.Arr[1]'

    with pytest.raises(ValueError):
        extend('', 'x', 'attribute')


def test_paths_are_not_shared():
    """Extending a path never changes it, so siblings each get their own"""
    parent = 'a'
    left, right = extend_field(parent, 'b'), extend_index(parent, 0)
    assert (parent, left, right) == ('a', 'a.b', 'a[0]')
