import os
import sys
import pytest
import numpy as np
import pandas as pd
import scipy.sparse as sp

# Add the src directory to Python path to import local sparsemat
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from sparsemat import (
    SparseMatrix,
    SparseVector,
    SparseMap,
    RowMajor,
    ColumnMajor,
    ArgumentError,
    DimensionMismatchError,
    IndexOutOfRangeError,
    OperationNotDefinedError,
    TypeMismatchError,
)
from test_utils import validate_dense, random_dense


@pytest.fixture
def sm():
    return SparseMatrix.rows([[1, 3, 0], [0, 0, 4], [3, 9, 0]])


@pytest.fixture
def tall():
    """Seven rows, three columns."""
    return SparseMatrix.rows([[1, 3, 0], [0, 0, 4], [3, 9, 0], [0, 0, 5], [6, 0, 0], [2, 0, 6], [0, 4, 0]])


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


class TestCreation:

    def test_of(self):
        m = SparseMatrix.of([1, 0, 2], [3, 0, 0], [0, 4, 5])
        assert m.shape == (3, 3)
        assert m.to_dict() == {0: {0: 1, 2: 2}, 1: {0: 3}, 2: {1: 4, 2: 5}}
        assert m.nnz == 5

    def test_rows_array(self):
        m = SparseMatrix.rows([[1, 0, 2], [3, 0, 0], [0, 4, 5]])
        assert m.row_size == 3
        assert m.column_size == 3
        assert m.nnz == 5
        assert m.element(0, 2) == 2
        assert m.element(1, 1) == 0

    def test_rows_hash(self):
        m = SparseMatrix.rows({0: {0: 1, 2: 2}, 1: {0: 3}, 2: {1: 4, 2: 5}})
        assert m.shape == (3, 3)
        assert m.to_dict() == {0: {0: 1, 2: 2}, 1: {0: 3}, 2: {1: 4, 2: 5}}
        assert m.nnz == 5

    def test_rows_hash_no_copy_takes_ownership(self):
        row = {0: 1, 1: 0}
        m = SparseMatrix.rows({0: row}, copy=False)
        assert row == {0: 1}
        assert m.shape == (1, 1)

    def test_rows_empty_rows_not_stored(self):
        m = SparseMatrix.rows([[0, 0], [0, 1], [0, 0]])
        assert m.shape == (3, 2)
        assert m.to_dict() == {1: {1: 1}}

    def test_rows_explicit_sizes(self):
        m = SparseMatrix.rows({1: {1: 2}}, row_size=4, column_size=5)
        assert m.shape == (4, 5)
        with pytest.raises(ArgumentError):
            SparseMatrix.rows({3: {0: 1}}, row_size=2)
        with pytest.raises(ArgumentError):
            SparseMatrix.rows({0: {0: 1}}, column_size=-1)

    def test_rows_negative_index(self):
        with pytest.raises(ArgumentError):
            SparseMatrix.rows({-1: {0: 1}})
        with pytest.raises(ArgumentError):
            SparseMatrix.rows({0: {-1: 1}})

    def test_rows_column_keys_must_be_integers(self):
        with pytest.raises(TypeMismatchError):
            SparseMatrix.rows({0: {"a": 1, 1: 2}})
        m = SparseMatrix.rows({0: {np.int64(1): 2}})
        assert m.shape == (1, 2)
        assert m == SparseMatrix.of([0, 2])

    def test_rows_sparse_map_with_zeros(self):
        m = SparseMatrix.rows({0: SparseMap({0: 0, 1: 2})}, copy=False)
        assert m.nnz == 1
        assert m == SparseMatrix.of([0, 2])

    def test_rows_must_be_flat(self):
        with pytest.raises(TypeMismatchError):
            SparseMatrix.rows([[[1, 2], 3]])

    def test_rows_of_vectors(self):
        m = SparseMatrix.rows([SparseVector.of(0, 1, 0, 0), SparseVector.of(2, 0, 0, 0)])
        assert m.shape == (2, 4)
        assert m.to_dict() == {0: {1: 1}, 1: {0: 2}}

    def test_rows_bad_type(self):
        with pytest.raises(TypeMismatchError):
            SparseMatrix.rows(5)

    def test_columns(self):
        m = SparseMatrix.columns([[1, 0], [3, 0], [0, 4]])
        assert m.shape == (2, 3)
        assert m.orientation == "column"
        assert m.to_dict() == {0: {0: 1, 1: 3}, 1: {2: 4}}
        assert m.nnz == 3

    def test_build(self):
        m = SparseMatrix.build(2, 4, lambda row, col: col - row)
        assert m == SparseMatrix.rows([[0, 1, 2, 3], [-1, 0, 1, 2]])
        assert m.nnz == 6

    def test_build_negative(self):
        with pytest.raises(ArgumentError):
            SparseMatrix.build(-1, 2, lambda i, j: 1)

    def test_diagonal(self):
        m = SparseMatrix.diagonal(3, 4, 0, 9, 0)
        assert m.row_size == 5
        assert m.column_size == 5
        assert m.to_dict() == {0: {0: 3}, 1: {1: 4}, 3: {3: 9}}
        assert m.nnz == 3

    def test_scalar_identity_zero(self):
        assert SparseMatrix.scalar(3, 4).to_dict() == {0: {0: 4}, 1: {1: 4}, 2: {2: 4}}
        assert SparseMatrix.identity(3).to_dict() == {0: {0: 1}, 1: {1: 1}, 2: {2: 1}}
        assert SparseMatrix.unit(2) == SparseMatrix.identity(2)
        zero = SparseMatrix.zero(3)
        assert zero.shape == (3, 3)
        assert zero.to_dict() == {}
        assert zero.nnz == 0

    def test_row_vector(self):
        m = SparseMatrix.row_vector([1, 3, 0, 0, 6])
        assert m.shape == (1, 5)
        assert m.to_dict() == {0: {0: 1, 1: 3, 4: 6}}
        assert SparseMatrix.row_vector({0: 1, 1: 3, 4: 6}) == m

    def test_column_vector(self):
        m = SparseMatrix.column_vector([1, 3, 0, 0, 6])
        assert m.shape == (5, 1)
        assert m.to_dict() == {0: {0: 1}, 1: {0: 3}, 4: {0: 6}}
        assert SparseMatrix.column_vector({0: 1, 1: 3, 4: 6}) == m

    def test_empty(self):
        sm1 = SparseMatrix.empty(3, 0)
        assert sm1.shape == (3, 0)
        assert sm1.nnz == 0
        sm2 = SparseMatrix.empty(0, 4)
        assert sm2.shape == (0, 4)
        assert SparseMatrix.empty().shape == (0, 0)

    def test_empty_invalid(self):
        with pytest.raises(ArgumentError):
            SparseMatrix.empty(2, 3)
        with pytest.raises(ArgumentError):
            SparseMatrix.empty(-1, 0)


class TestAccess:

    def test_element(self):
        m = SparseMatrix.of([1, 0, 2], [3, 0, 0], [0, 4, 5])
        expected = [[1, 0, 2], [3, 0, 0], [0, 4, 5]]
        for i in range(3):
            for j in range(3):
                assert m[i, j] == expected[i][j]
        assert m[-1, -1] == 5

    def test_element_column_major(self):
        m = SparseMatrix.columns([[1, 0], [3, 0], [0, 4]])
        assert m[0, 1] == 3
        assert m[1, 2] == 4
        assert m[1, 0] == 0

    def test_element_out_of_range(self, sm):
        with pytest.raises(IndexOutOfRangeError):
            sm[3, 3]
        with pytest.raises(IndexOutOfRangeError):
            sm.element(0, -4)

    def test_bad_key(self, sm):
        with pytest.raises(KeyError):
            sm[1]

    def test_row(self, tall):
        assert tall.row(0) == SparseVector.of(1, 3, 0)
        assert tall.row(2) == SparseVector.of(3, 9, 0)
        assert tall.row(-1) == SparseVector.of(0, 4, 0)
        assert tall.row(-3) == SparseVector.of(6, 0, 0)
        assert tall.row_nonzero(-3) == SparseVector.of(6, 0, 0)

    def test_row_block(self, sm):
        total = []
        sm.row(0, total.append)
        assert sum(total) == 4
        zeros = []
        assert sm.row(-2, lambda v: zeros.append(v) if v == 0 else None) is sm
        assert len(zeros) == 2

    def test_row_nonzero_block(self, sm):
        seen = []
        sm.row_nonzero(0, seen.append)
        assert seen == [1, 3]
        seen = []
        sm.row_nonzero(-1, seen.append)
        assert 0 not in seen

    def test_row_out_of_range(self, sm):
        with pytest.raises(IndexOutOfRangeError):
            sm.row(3)

    def test_column(self):
        m = SparseMatrix.columns([[1, 3, 0], [0, 0, 4], [3, 9, 0], [0, 0, 5], [6, 0, 0], [2, 0, 6], [0, 4, 0]])
        assert m.column(0) == SparseVector.of(1, 3, 0)
        assert m.column(2) == SparseVector.of(3, 9, 0)
        assert m.column(-1) == SparseVector.of(0, 4, 0)
        assert m.column_nonzero(-3) == SparseVector.of(6, 0, 0)

    def test_column_of_row_major(self, sm):
        assert sm.column(1) == SparseVector.of(3, 0, 9)
        assert sm.to_column_major().column(1) == SparseVector.of(3, 0, 9)
        assert sm.to_column_major().row(2) == SparseVector.of(3, 9, 0)

    def test_column_block(self):
        m = SparseMatrix.columns([[1, 3, 0], [0, 0, 4], [3, 9, 0]])
        total = []
        m.column(0, total.append)
        assert sum(total) == 4
        seen = []
        m.column_nonzero(1, seen.append)
        assert seen == [4]

    def test_slice_is_a_snapshot(self, sm):
        row = sm.row(0)
        assert row * 2 == SparseVector.of(2, 6, 0)
        assert sm.row(0) == SparseVector.of(1, 3, 0)


class TestOrientation:

    def test_to_column_major(self, sm):
        cm = sm.to_column_major()
        assert cm.orientation == "column"
        assert cm == sm
        assert cm.to_column_major() is cm
        assert sm.to_row_major() is sm

    def test_round_trip(self, sm):
        assert sm.to_row_major().to_column_major().to_row_major() == sm.to_row_major()
        assert sm.to_column_major().to_row_major().to_dict() == sm.to_dict()

    def test_transpose(self):
        m = SparseMatrix.rows([[1, 0], [3, 0], [0, 4]])
        assert m.shape == (3, 2)
        t = m.transpose()
        assert t.shape == (2, 3)
        assert t == SparseMatrix.rows([[1, 3, 0], [0, 0, 4]])
        assert m.T == t

    def test_transpose_twice(self, sm):
        assert sm.transpose().transpose() == sm
        assert sm.to_column_major().transpose().transpose() == sm

    def test_transpose_empty(self):
        t = SparseMatrix.empty(0, 3).transpose()
        assert t == SparseMatrix.empty(3, 0)
        assert SparseMatrix.empty(2, 0).T.shape == (0, 2)


class TestEnumeration:

    def test_collect(self, sm):
        assert sm.collect(lambda v: v - 3) == SparseMatrix.rows([[-2, 0, -3], [-3, -3, 1], [0, 6, -3]])

    def test_collect_nonzero(self, sm):
        assert sm.collect_nonzero(lambda v: v - 3) == SparseMatrix.rows([[-2, 0, 0], [0, 0, 1], [0, 6, 0]])

    def test_collect_drops_none(self, sm):
        result = sm.collect_nonzero(lambda v: v if v > 3 else None)
        assert result.to_dict() == {1: {2: 4}, 2: {1: 9}}

    def test_collect_nonzero_keeps_orientation(self, sm):
        assert sm.to_column_major().collect_nonzero(lambda v: v * 2).orientation == "column"

    def test_each(self, sm):
        values = list(sm.each())
        assert len(values) == 9
        assert sum(1 for v in values if v != 0) == 5

    def test_each_nonzero(self, sm):
        seen = []
        assert sm.each_nonzero(seen.append) is sm
        assert seen == [1, 3, 4, 3, 9]

    def test_each_with_index(self, sm):
        vals = [(i, j, k) for k, i, j in sm.each_with_index()]
        assert vals == [
            (0, 0, 1), (0, 1, 3), (0, 2, 0),
            (1, 0, 0), (1, 1, 0), (1, 2, 4),
            (2, 0, 3), (2, 1, 9), (2, 2, 0),
        ]

    def test_each_with_index_nonzero(self, sm):
        vals = []
        sm.each_with_index_nonzero(lambda k, i, j: vals.append((i, j, k)))
        assert vals == [(0, 0, 1), (0, 1, 3), (1, 2, 4), (2, 0, 3), (2, 1, 9)]

    def test_column_major_traversal_is_row_order(self, sm):
        cm = sm.to_column_major()
        assert list(cm.each()) == list(sm.each())
        assert list(cm.each_with_index_nonzero()) == list(sm.each_with_index_nonzero())


class TestTesting:

    def test_is_empty(self):
        assert SparseMatrix.rows([]).is_empty()
        assert not SparseMatrix.rows([[1, 0, 0], [3, 0, 0], [0, 4, 0]]).is_empty()
        assert SparseMatrix.empty().is_empty()

    def test_is_square(self):
        assert SparseMatrix.rows([[1, 0, 0], [3, 0, 0], [0, 4, 0]]).is_square()
        assert not SparseMatrix.rows([[1, 0], [3, 0], [0, 4]]).is_square()

    def test_is_real(self, sm):
        assert sm.is_real()
        assert not SparseMatrix.diagonal(1, 2j).is_real()


class TestArithmetic:

    def test_multiplication_numeric(self):
        m = SparseMatrix.rows([[1, 0], [3, 0], [0, 4]])
        assert m * 2 == SparseMatrix.of([2, 0], [6, 0], [0, 8])
        assert 2 * m == SparseMatrix.of([2, 0], [6, 0], [0, 8])
        assert (m * 0).nnz == 0

    def test_division_numeric(self):
        m = SparseMatrix.rows([[2, 0], [0, 4]])
        assert m / 2 == SparseMatrix.rows([[1.0, 0], [0, 2.0]])

    def test_multiplication_matrix(self):
        m1 = [[1, 0], [3, 0], [0, 4]]
        m2 = [[4, 0, 0, 5], [2, 0, 7, 0]]
        smr = SparseMatrix.rows(m1) * SparseMatrix.rows(m2)
        assert smr.shape == (3, 4)
        validate_dense(smr, np.array(m1) @ np.array(m2))

    def test_multiplication_matches_dense(self, rng):
        for _ in range(5):
            a = random_dense(rng, (6, 4))
            b = random_dense(rng, (4, 5))
            sa = SparseMatrix.from_dense(a)
            sb = SparseMatrix.from_dense(b)
            expected = a @ b
            validate_dense(sa * sb, expected)
            validate_dense(sa.to_column_major() * sb, expected)
            validate_dense(sa * sb.to_column_major(), expected)
            validate_dense(sa.to_column_major() @ sb.to_column_major(), expected)

    def test_multiplication_cancelling_terms(self):
        a = SparseMatrix.rows([[1, 1]])
        b = SparseMatrix.rows([[2], [-2]])
        product = a * b
        assert product.shape == (1, 1)
        assert product.nnz == 0

    def test_multiplication_dimension_mismatch(self):
        with pytest.raises(DimensionMismatchError):
            SparseMatrix.identity(2) * SparseMatrix.identity(3)

    def test_multiplication_vector(self):
        m = SparseMatrix.rows([[1, 2], [0, 3]])
        assert m * SparseVector.of(1, 1) == SparseVector.of(3, 3)
        assert m @ np.array([1, 0]) == SparseVector.of(1, 0)

    def test_multiplication_dense(self):
        m = SparseMatrix.identity(2) * 3
        assert m * np.array([[1, 2], [3, 4]]) == SparseMatrix.rows([[3, 6], [9, 12]])
        assert np.array([[1, 2], [3, 4]]) @ m == SparseMatrix.rows([[3, 6], [9, 12]])

    def test_matmul_scalar_not_defined(self):
        with pytest.raises(OperationNotDefinedError):
            SparseMatrix.identity(2) @ 2

    def test_empty_product(self):
        product = SparseMatrix.empty(2, 0) * SparseMatrix.empty(0, 3)
        assert product.shape == (2, 3)
        assert product == SparseMatrix.rows([[0, 0, 0], [0, 0, 0]])

    def test_add_subtract(self, rng):
        a = random_dense(rng, (4, 6))
        b = random_dense(rng, (4, 6))
        sa = SparseMatrix.from_dense(a)
        sb = SparseMatrix.from_dense(b)
        validate_dense(sa + sb, a + b)
        validate_dense(sa - sb, a - b)
        validate_dense(sa.to_column_major() + sb, a + b)
        assert sa + sb == sb + sa
        assert sa - sb == -(sb - sa)
        assert sa - sb == (sb - sa) * -1

    def test_add_cancels(self):
        a = SparseMatrix.rows([[1, 0], [0, 2]])
        total = a + SparseMatrix.rows([[-1, 0], [0, 0]])
        assert total.to_dict() == {1: {1: 2}}

    def test_add_empty(self):
        assert SparseMatrix.empty(3, 0) + SparseMatrix.rows([[], [], []]) == SparseMatrix.empty(3, 0)

    def test_add_dimension_mismatch(self):
        with pytest.raises(DimensionMismatchError):
            SparseMatrix.identity(2) + SparseMatrix.identity(3)

    def test_add_scalar_not_defined(self):
        with pytest.raises(OperationNotDefinedError):
            SparseMatrix.identity(2) + 1
        with pytest.raises(OperationNotDefinedError):
            1 - SparseMatrix.identity(2)

    def test_add_vector(self):
        m = SparseMatrix.column_vector([1, 0, 2])
        assert m + SparseVector.of(0, 1, 0) == SparseMatrix.column_vector([1, 1, 2])

    def test_add_dense(self):
        m = SparseMatrix.identity(2)
        assert m + [[0, 1], [1, 0]] == SparseMatrix.rows([[1, 1], [1, 1]])
        assert np.array([[0, 1], [1, 0]]) - m == SparseMatrix.rows([[-1, 1], [1, -1]])

    def test_division_by_matrix_not_defined(self):
        with pytest.raises(OperationNotDefinedError):
            SparseMatrix.identity(2) / SparseMatrix.identity(2)

    def test_power_not_defined(self):
        with pytest.raises(OperationNotDefinedError):
            SparseMatrix.identity(2) ** 2

    def test_unknown_operand(self):
        with pytest.raises(TypeMismatchError):
            SparseMatrix.identity(2) * "x"

    def test_operands_unchanged(self, sm):
        before = sm.to_dict()
        sm * sm
        sm + sm
        sm * 4
        assert sm.to_dict() == before


class TestComparing:

    def test_equality_across_orientations(self, sm):
        assert sm == sm.to_column_major()
        assert sm.to_column_major() == sm
        assert hash(sm) == hash(sm.to_column_major())

    def test_equality_needs_dimensions(self):
        assert SparseMatrix.empty(2, 0) != SparseMatrix.empty(0, 2)
        assert SparseMatrix.rows({0: {0: 1}}, row_size=2) != SparseMatrix.rows({0: {0: 1}})

    def test_not_equal_to_dense(self, sm):
        assert sm != sm.to_list()

    def test_str(self):
        assert str(SparseMatrix.rows([[1, 0], [0, 2]])) == "SparseMatrix[[1, 0], [0, 2]]"
        assert str(SparseMatrix.empty(2, 0)) == "SparseMatrix.empty(2, 0)"
        assert repr(SparseMatrix.identity(2)) == "SparseMatrix({0: {0: 1}, 1: {1: 1}}, shape=(2, 2))"


class TestStorage:

    def test_storage_variants(self, sm):
        assert isinstance(sm._storage, RowMajor)
        assert isinstance(sm.transpose()._storage, ColumnMajor)
        assert sm.transpose()._storage.outer is sm._storage.outer


class TestConverting:

    def test_to_dense(self, sm):
        assert sm.to_list() == [[1, 3, 0], [0, 0, 4], [3, 9, 0]]
        assert np.array_equal(sm.to_dense(), np.array([[1, 3, 0], [0, 0, 4], [3, 9, 0]]))
        assert SparseMatrix.empty(2, 0).to_dense().shape == (2, 0)

    def test_from_dense(self):
        arr = np.array([[0, 2], [0, 0], [5, 0]])
        m = SparseMatrix.from_dense(arr)
        assert m.shape == (3, 2)
        assert m.to_dict() == {0: {1: 2}, 2: {0: 5}}
        with pytest.raises(TypeMismatchError):
            SparseMatrix.from_dense(np.array([1, 2]))

    def test_to_scipy(self, sm):
        csr = sm.to_scipy()
        assert csr.format == "csr"
        assert csr.nnz == 5
        assert np.array_equal(csr.toarray(), sm.to_dense())
        csc = sm.to_column_major().to_scipy("csc")
        assert csc.format == "csc"
        assert np.array_equal(csc.toarray(), sm.to_dense())

    def test_from_scipy(self, sm):
        assert SparseMatrix.from_scipy(sm.to_scipy()) == sm
        assert SparseMatrix.from_scipy(sp.csr_matrix((4, 2))) == SparseMatrix.rows({}, row_size=4, column_size=2)

    def test_from_scipy_sums_duplicates(self):
        coo = sp.coo_matrix(([1, 2, -3], ([0, 0, 1], [1, 1, 0])), shape=(2, 2))
        m = SparseMatrix.from_scipy(coo)
        assert m.to_dict() == {0: {1: 3}, 1: {0: -3}}

    def test_from_scipy_rejects_dense(self):
        with pytest.raises(TypeMismatchError):
            SparseMatrix.from_scipy(np.eye(2))

    def test_to_frame(self, sm):
        df = sm.to_frame()
        assert list(df.columns) == ["row", "column", "value"]
        assert df["row"].tolist() == [0, 0, 1, 2, 2]
        assert df["column"].tolist() == [0, 1, 2, 0, 1]
        assert df["value"].tolist() == [1, 3, 4, 3, 9]

    def test_from_frame(self, sm):
        assert SparseMatrix.from_frame(sm.to_frame(), row_size=3, column_size=3) == sm

    def test_from_frame_sizes(self):
        df = pd.DataFrame({"row": [0, 2, 2], "column": [1, 0, 0], "value": [4, 1, 1]})
        m = SparseMatrix.from_frame(df)
        assert m.shape == (3, 2)
        assert m.to_dict() == {0: {1: 4}, 2: {0: 2}}
        assert SparseMatrix.from_frame(df, column_size=5).shape == (3, 5)

    def test_from_frame_missing_column(self):
        with pytest.raises(ArgumentError):
            SparseMatrix.from_frame(pd.DataFrame({"row": [0], "value": [1]}))
