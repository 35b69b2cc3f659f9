import os
import sys

# Add the src directory to Python path to import local sparsemat
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from sparsemat.sparse_map import SparseMap, merge_keys, transpose_nested, combine_nested, count_nonzero


class TestSparseMap:
    """Zero elision and ordering of the container."""

    def test_absent_reads_zero(self):
        m = SparseMap()
        assert m[3] == 0
        assert m.get(3) == 0
        assert 3 not in m
        assert len(m) == 0

    def test_setting_zero_removes(self):
        m = SparseMap()
        m[2] = 5
        assert m[2] == 5
        m.set(2, 0)
        assert 2 not in m
        assert m.data_store == {}

    def test_add_at_cancels(self):
        m = SparseMap({1: 3})
        m.add_at(1, -3)
        assert len(m) == 0
        m.add_at(4, 2)
        assert m.items() == [(4, 2)]

    def test_keys_ascending(self):
        m = SparseMap({9: 1, 0: 2, 4: 3})
        assert m.keys() == [0, 4, 9]
        assert list(m) == [0, 4, 9]
        assert m.values() == [2, 3, 1]
        assert m.max_key() == 9

    def test_equality_by_content(self):
        a = SparseMap({1: 2, 3: 4})
        b = SparseMap({3: 4, 1: 2})
        assert a == b
        assert a is not b
        assert a != SparseMap({1: 2})
        assert hash(a) == hash(b)

    def test_from_dict_no_copy_purges_zeros(self):
        d = {0: 1, 1: 0, 2: 3}
        m = SparseMap.from_dict(d, copy=False)
        assert m.data_store is d
        assert d == {0: 1, 2: 3}

    def test_constructor_purges_zeros(self):
        d = {0: 0, 1: 2, 5: 0}
        m = SparseMap(d)
        assert m.items() == [(1, 2)]
        assert len(m) == 1
        assert 0 not in m
        assert m == SparseMap({1: 2})
        assert m.copy().data_store == {1: 2}

    def test_from_dict_copy(self):
        d = {0: 1, 1: 0}
        m = SparseMap.from_dict(d)
        assert m.data_store is not d
        assert d == {0: 1, 1: 0}
        assert m.items() == [(0, 1)]

    def test_map_values_drops_zero_and_none(self):
        m = SparseMap({0: 1, 1: 2, 2: 3})
        mapped = m.map_values(lambda v: None if v == 3 else v - 1)
        assert mapped.items() == [(1, 1)]

    def test_combine(self):
        a = SparseMap({0: 1, 2: 5})
        b = SparseMap({2: 5, 3: 1})
        assert a.combine(b, lambda x, y: x - y).items() == [(0, 1), (3, -1)]


class TestMergeKeys:
    """Two-pointer union of sorted key lists."""

    def test_interleaved(self):
        assert list(merge_keys([0, 2, 5], [1, 2, 7])) == [0, 1, 2, 5, 7]

    def test_one_side_empty(self):
        assert list(merge_keys([], [1, 3])) == [1, 3]
        assert list(merge_keys([4], [])) == [4]
        assert list(merge_keys([], [])) == []


class TestNested:

    def test_transpose_nested(self):
        outer = {0: SparseMap({0: 1, 2: 2}), 1: SparseMap({0: 3})}
        t = transpose_nested(outer)
        assert t == {0: SparseMap({0: 1, 1: 3}), 2: SparseMap({0: 2})}

    def test_combine_nested_drops_empty_rows(self):
        left = {0: SparseMap({0: 1}), 1: SparseMap({1: 2})}
        right = {0: SparseMap({0: 1}), 2: SparseMap({0: 4})}
        result = combine_nested(left, right, lambda a, b: a - b)
        assert result == {1: SparseMap({1: 2}), 2: SparseMap({0: -4})}
        assert count_nonzero(result.values()) == 2
