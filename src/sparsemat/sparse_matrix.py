import numbers
import operator
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Union

import numpy as np
import pandas as pd
import scipy.sparse as sp

from .sparse_map import SparseMap, transpose_nested, combine_nested, count_nonzero
from .sparse_vector import SparseVector
from .conversion import (
    is_numeric,
    coerce_to_int,
    coerce_operand,
    convert_to_sparse_map,
    check_indices,
    to_dense_array,
)
from .constants import ROW_MAJOR, COLUMN_MAJOR, TripletColumn
from .sparse_errors import (
    ArgumentError,
    DimensionMismatchError,
    IndexOutOfRangeError,
    OperationNotDefinedError,
    TypeMismatchError,
)


@dataclass(frozen=True, eq=False)
class RowMajor:
    """Entries grouped by row: outer index = row, inner index = column."""
    outer: dict[int, SparseMap] = field(default_factory=dict)


@dataclass(frozen=True, eq=False)
class ColumnMajor:
    """Entries grouped by column: outer index = column, inner index = row."""
    outer: dict[int, SparseMap] = field(default_factory=dict)


Storage = Union[RowMajor, ColumnMajor]


def _flip(storage: Storage) -> Storage:
    """Same nested mapping read in the other orientation."""
    if isinstance(storage, RowMajor):
        return ColumnMajor(storage.outer)
    return RowMajor(storage.outer)


def _accumulate_products(outer: dict[int, SparseMap], other_outer: dict[int, SparseMap],
                         left_first: bool = True) -> dict[int, SparseMap]:
    """result[i] = sum over stored (k, v) in outer[i] of v * other_outer[k]."""
    result: dict[int, SparseMap] = {}
    for i in sorted(outer):
        acc = SparseMap()
        for k, v in outer[i].items():
            other_inner = other_outer.get(k)
            if other_inner is None:
                continue
            for j, w in other_inner.items():
                acc.add_at(j, v * w if left_first else w * v)
        if acc:
            result[i] = acc
    return result


def _dense_length(row: Any) -> int:
    if isinstance(row, SparseVector):
        return row.size
    if isinstance(row, (list, tuple, np.ndarray)):
        return len(row)
    return 0


class SparseMatrix:
    """
    Immutable matrix that only stores its non-zero elements.

    Entries live in a nested mapping held either row-major or column-major (see
    RowMajor / ColumnMajor). Operations that depend on the orientation pick the
    cheap path for the storage at hand and only convert when they have to.
    Use the class methods (rows, columns, build, diagonal, ...) to create one.
    """

    # make numpy defer to the reflected operators below
    __array_ufunc__ = None

    def __init__(self, storage: Storage, row_size: Optional[int] = None, column_size: Optional[int] = None):
        # No checking is done at this point. Missing sizes are taken from the largest stored keys.
        self._storage = storage
        if row_size is None or column_size is None:
            outer_size = max(storage.outer) + 1 if storage.outer else 0
            inner_size = max((inner.max_key() for inner in storage.outer.values()), default=-1) + 1
            if isinstance(storage, ColumnMajor):
                outer_size, inner_size = inner_size, outer_size
            if row_size is None:
                row_size = outer_size
            if column_size is None:
                column_size = inner_size
        self._row_size = row_size
        self._column_size = column_size

    # ------------------------------------------------------------------
    # creation

    @classmethod
    def of(cls, *rows) -> 'SparseMatrix':
        """
        Creates a sparse matrix where each argument is a row.
          SparseMatrix.of([25, 93], [-1, 66])
        """
        return cls.rows(list(rows), copy=False)

    @classmethod
    def rows(cls, rows: Any, copy: bool = True,
             row_size: Optional[int] = None, column_size: Optional[int] = None) -> 'SparseMatrix':
        """
        Creates a sparse matrix from its rows.

        Args:
            rows: list or dict of rows, or a 2-D ndarray. Each row is a list, tuple,
                1-D ndarray, SparseVector, dict or SparseMap.
            copy: If False, dict / SparseMap rows are used as internal storage without copying.
            row_size: Number of rows. Defaults to the larger of len(rows) and the largest row index + 1.
            column_size: Number of columns. Defaults to the longest dense row or the largest
                column index + 1.

        Returns:
            Row-major SparseMatrix.

        Raises:
            ArgumentError: On negative indices or explicit sizes too small for the stored entries.
            TypeMismatchError: If rows or one of its rows has an unsupported type.
        """
        if isinstance(rows, np.ndarray):
            if rows.ndim != 2:
                raise TypeMismatchError(rows, "SparseMatrix", f"expected 2 dimensions, got {rows.ndim}")
            if row_size is None:
                row_size = rows.shape[0]
            if column_size is None:
                column_size = rows.shape[1]
            rows = rows.tolist()

        if isinstance(rows, dict):
            items = list(rows.items())
            num_rows = 0
        elif isinstance(rows, (list, tuple)):
            items = list(enumerate(rows))
            num_rows = len(rows)
        else:
            raise TypeMismatchError(rows, "SparseMatrix rows")

        outer: dict[int, SparseMap] = {}
        num_columns = 0
        min_rows = 0
        min_columns = 0
        for k, row in items:
            k = coerce_to_int(k)
            if k < 0:
                raise ArgumentError(f"Negative row index {k}")
            inner = check_indices(convert_to_sparse_map(row, copy=copy), "column index")
            num_columns = max(num_columns, _dense_length(row))
            # remove the row if it is empty
            if not inner:
                continue
            min_rows = max(min_rows, k + 1)
            min_columns = max(min_columns, inner.max_key() + 1)
            outer[k] = inner

        num_rows = max(num_rows, min_rows)
        num_columns = max(num_columns, min_columns)
        if row_size is not None:
            num_rows = cls._check_size(row_size, min_rows, "row")
        if column_size is not None:
            num_columns = cls._check_size(column_size, min_columns, "column")
        return cls(RowMajor(outer), num_rows, num_columns)

    @staticmethod
    def _check_size(size: Any, minimum: int, axis: str) -> int:
        size = coerce_to_int(size)
        if size < 0:
            raise ArgumentError(f"Negative {axis} size {size}")
        if size < minimum:
            raise ArgumentError(f"{axis} size {size} is too small for stored {axis} index {minimum - 1}")
        return size

    @classmethod
    def columns(cls, columns: Any) -> 'SparseMatrix':
        """
        Creates a sparse matrix using columns as a list of column vectors.
          SparseMatrix.columns([[25, 93], [-1, 66]])
             =>  25 -1
                 93 66
        """
        return cls.rows(columns).transpose()

    @classmethod
    def build(cls, row_size: int, column_size: int, func: Callable[[int, int], Any]) -> 'SparseMatrix':
        """
        Creates a row_size x column_size sparse matrix filled by func(row, col).

          SparseMatrix.build(2, 4, lambda row, col: col - row)
            => SparseMatrix[[0, 1, 2, 3], [-1, 0, 1, 2]]

        Raises:
            ArgumentError: If either size is negative.
        """
        row_size = coerce_to_int(row_size)
        column_size = coerce_to_int(column_size)
        if row_size < 0 or column_size < 0:
            raise ArgumentError(f"Negative size ({row_size}, {column_size})")
        outer: dict[int, SparseMap] = {}
        for i in range(row_size):
            inner = SparseMap()
            for j in range(column_size):
                val = func(i, j)
                if val is not None:
                    inner[j] = val
            if inner:
                outer[i] = inner
        return cls(RowMajor(outer), row_size, column_size)

    @classmethod
    def diagonal(cls, *values) -> 'SparseMatrix':
        """
        Creates a sparse matrix where the diagonal elements are composed of values.
          SparseMatrix.diagonal(9, 5, -3)
            =>  9  0  0
                0  5  0
                0  0 -3
        """
        size = len(values)
        outer = {i: SparseMap({i: v}) for i, v in enumerate(values) if v != 0}
        return cls(RowMajor(outer), size, size)

    @classmethod
    def scalar(cls, n: int, value: Any) -> 'SparseMatrix':
        """Creates an n by n diagonal matrix where each diagonal element is value."""
        n = coerce_to_int(n)
        if n < 0:
            raise ArgumentError(f"Negative size {n}")
        return cls.diagonal(*([value] * n))

    @classmethod
    def identity(cls, n: int) -> 'SparseMatrix':
        """Creates an n by n identity sparse matrix."""
        return cls.scalar(n, 1)

    unit = identity

    @classmethod
    def zero(cls, n: int) -> 'SparseMatrix':
        """Creates an n by n zero sparse matrix."""
        return cls.scalar(n, 0)

    @classmethod
    def row_vector(cls, row: Any) -> 'SparseMatrix':
        """
        Creates a single-row sparse matrix where the values of that row are as given in row.
          SparseMatrix.row_vector([4, 5, 6])
            => 4 5 6
        """
        vector = row if isinstance(row, SparseVector) else SparseVector.elements(row)
        outer = {0: vector.to_sparse_map()} if vector.nnz else {}
        return cls(RowMajor(outer), 1, vector.size)

    @classmethod
    def column_vector(cls, column: Any) -> 'SparseMatrix':
        """
        Creates a single-column sparse matrix where the values of that column are as given in column.
          SparseMatrix.column_vector([4, 5, 6])
            => 4
               5
               6
        """
        vector = column if isinstance(column, SparseVector) else SparseVector.elements(column)
        outer = {0: vector.to_sparse_map()} if vector.nnz else {}
        return cls(ColumnMajor(outer), vector.size, 1)

    @classmethod
    def empty(cls, row_size: int = 0, column_size: int = 0) -> 'SparseMatrix':
        """
        Creates an empty sparse matrix of row_size x column_size.
        At least one of row_size or column_size must be 0.

          m = SparseMatrix.empty(2, 0)
          n = SparseMatrix.empty(0, 3)
          m * n
            => SparseMatrix[[0, 0, 0], [0, 0, 0]]
        """
        row_size = coerce_to_int(row_size)
        column_size = coerce_to_int(column_size)
        if row_size < 0 or column_size < 0:
            raise ArgumentError("Negative size")
        if row_size != 0 and column_size != 0:
            raise ArgumentError("One size must be 0")
        return cls(RowMajor(), row_size, column_size)

    @classmethod
    def from_dense(cls, array: Any) -> 'SparseMatrix':
        """Creates a sparse matrix from a 2-D numpy array (or array-like)."""
        arr = np.asarray(array)
        if arr.ndim != 2:
            raise TypeMismatchError(array, "SparseMatrix", f"expected 2 dimensions, got {arr.ndim}")
        return cls.rows(arr)

    @classmethod
    def from_scipy(cls, matrix: Any) -> 'SparseMatrix':
        """Creates a sparse matrix from any scipy.sparse matrix or array. Duplicate entries are summed."""
        if not sp.issparse(matrix):
            raise TypeMismatchError(matrix, "SparseMatrix", "not a scipy sparse matrix")
        coo = sp.coo_matrix(matrix)
        outer: dict[int, SparseMap] = {}
        for i, j, v in zip(coo.row.tolist(), coo.col.tolist(), coo.data.tolist()):
            if i not in outer:
                outer[i] = SparseMap()
            outer[i].add_at(j, v)
        outer = {i: inner for i, inner in outer.items() if inner}
        return cls(RowMajor(outer), coo.shape[0], coo.shape[1])

    @classmethod
    def from_frame(cls, df: pd.DataFrame, row_size: Optional[int] = None,
                   column_size: Optional[int] = None) -> 'SparseMatrix':
        """
        Creates a sparse matrix from a triplet table.

        Args:
            df: DataFrame with row, column and value columns (see TripletColumn).
                Duplicate coordinates are summed.
            row_size: Number of rows, defaults to the largest row index + 1.
            column_size: Number of columns, defaults to the largest column index + 1.
        """
        for col in [TripletColumn.ROW, TripletColumn.COLUMN, TripletColumn.VALUE]:
            if col not in df.columns:
                raise ArgumentError(f"Column \"{col}\" not found in triplet table")
        outer: dict[int, SparseMap] = {}
        for i, j, v in zip(df[TripletColumn.ROW].tolist(), df[TripletColumn.COLUMN].tolist(),
                           df[TripletColumn.VALUE].tolist()):
            i = coerce_to_int(i)
            if i not in outer:
                outer[i] = SparseMap()
            outer[i].add_at(coerce_to_int(j), v)
        outer = {i: inner for i, inner in outer.items() if inner}
        return cls.rows(outer, copy=False, row_size=row_size, column_size=column_size)

    # ------------------------------------------------------------------
    # access

    @property
    def row_size(self) -> int:
        """Number of rows."""
        return self._row_size

    @property
    def column_size(self) -> int:
        """Number of columns."""
        return self._column_size

    @property
    def shape(self) -> tuple[int, int]:
        return (self._row_size, self._column_size)

    @property
    def nnz(self) -> int:
        """Number of stored (non-zero) elements."""
        return count_nonzero(self._storage.outer.values())

    @property
    def orientation(self) -> str:
        """Storage orientation, 'row' or 'column'."""
        return ROW_MAJOR if isinstance(self._storage, RowMajor) else COLUMN_MAJOR

    def _rows(self) -> dict[int, SparseMap]:
        if isinstance(self._storage, RowMajor):
            return self._storage.outer
        return transpose_nested(self._storage.outer)

    def _columns(self) -> dict[int, SparseMap]:
        if isinstance(self._storage, ColumnMajor):
            return self._storage.outer
        return transpose_nested(self._storage.outer)

    @staticmethod
    def _normalize(index: Any, size: int, axis: str) -> int:
        index = coerce_to_int(index)
        idx = size + index if index < 0 else index
        if idx < 0 or idx >= size:
            raise IndexOutOfRangeError(index, size, axis)
        return idx

    def element(self, i: int, j: int) -> Any:
        """
        Returns element (i, j) of the matrix, that is row i, column j.
        Negative indices count from the end.

        Raises:
            IndexOutOfRangeError: If i or j is out of range.
        """
        i = self._normalize(i, self._row_size, "row")
        j = self._normalize(j, self._column_size, "column")
        if isinstance(self._storage, RowMajor):
            outer_key, inner_key = i, j
        else:
            outer_key, inner_key = j, i
        inner = self._storage.outer.get(outer_key)
        return 0 if inner is None else inner[inner_key]

    component = element

    def __getitem__(self, key) -> Any:
        if isinstance(key, tuple) and len(key) == 2:
            i, j = key
        else:
            raise KeyError("SparseMatrix indices must be a tuple of length 2")
        return self.element(i, j)

    def _slice(self, k: int, variant: type) -> SparseMap:
        """Copy of row or column k; variant names the orientation the slice runs along."""
        if isinstance(self._storage, variant):
            inner = self._storage.outer.get(k)
            return SparseMap() if inner is None else inner.copy()
        # cross-orientation, pick key k out of every outer container
        return SparseMap({o: inner[k] for o, inner in self._storage.outer.items() if k in inner})

    def row(self, i: int, func: Optional[Callable[[Any], Any]] = None):
        """
        Returns row i as a SparseVector (negative i counts from the end).
        When func is given, it is called with every element of the row instead and self is returned.
        """
        i = self._normalize(i, self._row_size, "row")
        inner = self._slice(i, RowMajor)
        if func is None:
            return SparseVector(inner, self._column_size)
        for j in range(self._column_size):
            func(inner[j])
        return self

    def row_nonzero(self, i: int, func: Optional[Callable[[Any], Any]] = None):
        """Like row, but func only sees the stored elements, in column order."""
        i = self._normalize(i, self._row_size, "row")
        inner = self._slice(i, RowMajor)
        if func is None:
            return SparseVector(inner, self._column_size)
        for v in inner.values():
            func(v)
        return self

    def column(self, j: int, func: Optional[Callable[[Any], Any]] = None):
        """
        Returns column j as a SparseVector (negative j counts from the end).
        When func is given, it is called with every element of the column instead and self is returned.
        """
        j = self._normalize(j, self._column_size, "column")
        inner = self._slice(j, ColumnMajor)
        if func is None:
            return SparseVector(inner, self._row_size)
        for i in range(self._row_size):
            func(inner[i])
        return self

    def column_nonzero(self, j: int, func: Optional[Callable[[Any], Any]] = None):
        """Like column, but func only sees the stored elements, in row order."""
        j = self._normalize(j, self._column_size, "column")
        inner = self._slice(j, ColumnMajor)
        if func is None:
            return SparseVector(inner, self._row_size)
        for v in inner.values():
            func(v)
        return self

    # ------------------------------------------------------------------
    # orientation

    def to_row_major(self) -> 'SparseMatrix':
        """This matrix with row-major storage. Returns self if it already is."""
        if isinstance(self._storage, RowMajor):
            return self
        return SparseMatrix(RowMajor(transpose_nested(self._storage.outer)), self._row_size, self._column_size)

    def to_column_major(self) -> 'SparseMatrix':
        """This matrix with column-major storage. Returns self if it already is."""
        if isinstance(self._storage, ColumnMajor):
            return self
        return SparseMatrix(ColumnMajor(transpose_nested(self._storage.outer)), self._row_size, self._column_size)

    def transpose(self) -> 'SparseMatrix':
        """
        Returns the transpose of the matrix.
          SparseMatrix.of([1, 2], [3, 4], [5, 6]).transpose()
            => 1 3 5
               2 4 6

        The nested mapping is shared and read in the other orientation.
        """
        return SparseMatrix(_flip(self._storage), self._column_size, self._row_size)

    @property
    def T(self) -> 'SparseMatrix':
        return self.transpose()

    # ------------------------------------------------------------------
    # enumeration

    def collect(self, func: Callable[[Any], Any]) -> 'SparseMatrix':
        """
        New matrix with func applied at every position, zeros included.
        Zero and None results are not stored. Cost is row_size * column_size calls.
        """
        rows = self._rows()
        empty = SparseMap()
        outer: dict[int, SparseMap] = {}
        for i in range(self._row_size):
            src = rows.get(i, empty)
            inner = SparseMap()
            for j in range(self._column_size):
                val = func(src[j])
                if val is not None:
                    inner[j] = val
            if inner:
                outer[i] = inner
        return SparseMatrix(RowMajor(outer), self._row_size, self._column_size)

    map = collect

    def collect_nonzero(self, func: Callable[[Any], Any]) -> 'SparseMatrix':
        """New matrix with func applied to the stored elements only; zero and None results are dropped."""
        return self._map_storage(func)

    map_nonzero = collect_nonzero

    def _map_storage(self, func: Callable[[Any], Any]) -> 'SparseMatrix':
        outer: dict[int, SparseMap] = {}
        for k, inner in self._storage.outer.items():
            mapped = inner.map_values(func)
            if mapped:
                outer[k] = mapped
        return SparseMatrix(type(self._storage)(outer), self._row_size, self._column_size)

    def _dense_triplets(self):
        rows = self._rows()
        empty = SparseMap()
        for i in range(self._row_size):
            src = rows.get(i, empty)
            for j in range(self._column_size):
                yield src[j], i, j

    def _nonzero_triplets(self):
        rows = self._rows()
        for i in sorted(rows):
            for j, v in rows[i].items():
                yield v, i, j

    def each(self, func: Optional[Callable[[Any], Any]] = None):
        """Visit every element in row-major order, zeros included.

        Returns an iterator when func is None, otherwise calls func per element and returns self.
        """
        values = (v for v, _, _ in self._dense_triplets())
        if func is None:
            return values
        for v in values:
            func(v)
        return self

    def __iter__(self):
        return self.each()

    def each_nonzero(self, func: Optional[Callable[[Any], Any]] = None):
        """Visit the stored elements in row-major order."""
        values = (v for v, _, _ in self._nonzero_triplets())
        if func is None:
            return values
        for v in values:
            func(v)
        return self

    def each_with_index(self, func: Optional[Callable[[Any, int, int], Any]] = None):
        """Visit (value, row, column) for every element in row-major order."""
        triplets = self._dense_triplets()
        if func is None:
            return triplets
        for v, i, j in triplets:
            func(v, i, j)
        return self

    def each_with_index_nonzero(self, func: Optional[Callable[[Any, int, int], Any]] = None):
        """Visit (value, row, column) for the stored elements in row-major order."""
        triplets = self._nonzero_triplets()
        if func is None:
            return triplets
        for v, i, j in triplets:
            func(v, i, j)
        return self

    # ------------------------------------------------------------------
    # testing

    def is_empty(self) -> bool:
        """True if the number of rows or the number of columns is 0."""
        return self._row_size == 0 or self._column_size == 0

    def is_square(self) -> bool:
        return self._row_size == self._column_size

    def is_real(self) -> bool:
        """True if all entries of the matrix are real."""
        return all(isinstance(v, numbers.Real) for v in self.each_nonzero())

    # ------------------------------------------------------------------
    # comparing

    def __eq__(self, other) -> bool:
        """Equal iff the dimensions and the stored elements match, whatever the storage orientation."""
        if not isinstance(other, SparseMatrix):
            return False
        if self.shape != other.shape:
            return False
        if type(self._storage) is type(other._storage):
            return self._storage.outer == other._storage.outer
        return self._rows() == other._rows()

    def __hash__(self) -> int:
        return hash((self.shape, frozenset(self._rows().items())))

    # ------------------------------------------------------------------
    # arithmetic

    def _multiply(self, other: 'SparseMatrix') -> 'SparseMatrix':
        if self._column_size != other._row_size:
            raise DimensionMismatchError(self.shape, other.shape, "*")
        if isinstance(self._storage, ColumnMajor):
            # C[:, j] = sum over stored (k, w) in B[:, j] of A[:, k] * w
            outer = _accumulate_products(other._columns(), self._storage.outer, left_first=False)
            return SparseMatrix(ColumnMajor(outer), self._row_size, other._column_size)
        # C[i, :] = sum over stored (k, v) in A[i, :] of v * B[k, :]
        outer = _accumulate_products(self._storage.outer, other._rows())
        return SparseMatrix(RowMajor(outer), self._row_size, other._column_size)

    def __mul__(self, x: Any):
        """
        Matrix multiplication.
          SparseMatrix.of([2, 4], [6, 8]) * SparseMatrix.identity(2)
            => 2 4
               6 8

        A SparseVector operand is treated as a column matrix and the result column is
        returned as a SparseVector.
        """
        if is_numeric(x):
            return self._map_storage(lambda v: v * x)
        if isinstance(x, SparseMatrix):
            return self._multiply(x)
        if isinstance(x, SparseVector):
            return self._multiply(SparseMatrix.column_vector(x)).column(0)
        arr = coerce_operand(x, "SparseMatrix")
        if arr.ndim == 1:
            return self * SparseVector.from_dense(arr)
        return self._multiply(SparseMatrix.from_dense(arr))

    def __rmul__(self, x: Any):
        if is_numeric(x):
            return self._map_storage(lambda v: x * v)
        arr = coerce_operand(x, "SparseMatrix")
        if arr.ndim == 1:
            return SparseVector.from_dense(arr) * self
        return SparseMatrix.from_dense(arr)._multiply(self)

    def __matmul__(self, x: Any):
        if is_numeric(x):
            raise OperationNotDefinedError("@", self, x)
        return self * x

    def __rmatmul__(self, x: Any):
        if is_numeric(x):
            raise OperationNotDefinedError("@", x, self)
        return self.__rmul__(x)

    def __truediv__(self, x: Any) -> 'SparseMatrix':
        """Divides every element by a number. Matrix division is not defined."""
        if is_numeric(x):
            return self._map_storage(lambda v: v / x)
        if not isinstance(x, (SparseMatrix, SparseVector)):
            coerce_operand(x, "SparseMatrix")
        raise OperationNotDefinedError("/", self, x)

    def __pow__(self, x: Any):
        raise OperationNotDefinedError("**", self, x)

    def _as_matrix(self, other: Any) -> 'SparseMatrix':
        if isinstance(other, SparseMatrix):
            return other
        if isinstance(other, SparseVector):
            return SparseMatrix.column_vector(other)
        arr = coerce_operand(other, "SparseMatrix")
        if arr.ndim == 1:
            return SparseMatrix.column_vector(arr)
        return SparseMatrix.from_dense(arr)

    def _add_or_subtract(self, other: Any, op: Callable[[Any, Any], Any], name: str) -> 'SparseMatrix':
        if is_numeric(other):
            raise OperationNotDefinedError(name, self, other)
        other = self._as_matrix(other)
        if self.shape != other.shape:
            raise DimensionMismatchError(self.shape, other.shape, name)
        if isinstance(self._storage, ColumnMajor):
            return SparseMatrix(ColumnMajor(combine_nested(self._storage.outer, other._columns(), op)),
                                self._row_size, self._column_size)
        return SparseMatrix(RowMajor(combine_nested(self._storage.outer, other._rows(), op)),
                            self._row_size, self._column_size)

    def __add__(self, other: Any) -> 'SparseMatrix':
        """Matrix addition, merging the stored entries of both operands."""
        return self._add_or_subtract(other, operator.add, "+")

    def __sub__(self, other: Any) -> 'SparseMatrix':
        """Matrix subtraction, merging the stored entries of both operands."""
        return self._add_or_subtract(other, operator.sub, "-")

    def __radd__(self, other: Any) -> 'SparseMatrix':
        if is_numeric(other):
            raise OperationNotDefinedError("+", other, self)
        return self._as_matrix(other) + self

    def __rsub__(self, other: Any) -> 'SparseMatrix':
        if is_numeric(other):
            raise OperationNotDefinedError("-", other, self)
        return self._as_matrix(other) - self

    def __neg__(self) -> 'SparseMatrix':
        return self * -1

    def __pos__(self) -> 'SparseMatrix':
        return self

    # ------------------------------------------------------------------
    # converting

    def to_dict(self) -> dict[int, dict[int, Any]]:
        """Stored elements as a row -> {column -> value} dict."""
        rows = self._rows()
        return {i: dict(rows[i].items()) for i in sorted(rows)}

    def to_list(self) -> list[list]:
        """All elements as nested lists, one list per row."""
        rows = self._rows()
        empty = SparseMap()
        return [[rows.get(i, empty)[j] for j in range(self._column_size)] for i in range(self._row_size)]

    def to_dense(self) -> np.ndarray:
        """All elements as a 2-D numpy array."""
        return to_dense_array(self.to_list(), self.shape)

    def to_scipy(self, format: str = "csr"):
        """Converts to a scipy.sparse matrix of the given format ('csr', 'csc', 'coo', ...)."""
        data, row_idx, col_idx = [], [], []
        for v, i, j in self._nonzero_triplets():
            data.append(v)
            row_idx.append(i)
            col_idx.append(j)
        coo = sp.coo_matrix((data, (row_idx, col_idx)), shape=self.shape)
        return coo.asformat(format)

    def to_frame(self) -> pd.DataFrame:
        """Stored elements as a triplet table (row, column, value) in row-major order."""
        data, row_idx, col_idx = [], [], []
        for v, i, j in self._nonzero_triplets():
            data.append(v)
            row_idx.append(i)
            col_idx.append(j)
        return pd.DataFrame({
            TripletColumn.ROW: pd.Series(row_idx, dtype="int64"),
            TripletColumn.COLUMN: pd.Series(col_idx, dtype="int64"),
            TripletColumn.VALUE: data,
        })

    # ------------------------------------------------------------------
    # printing

    def __str__(self) -> str:
        if self.is_empty():
            return f"SparseMatrix.empty({self._row_size}, {self._column_size})"
        return "SparseMatrix[" + ", ".join(
            "[" + ", ".join(str(v) for v in row) + "]" for row in self.to_list()
        ) + "]"

    def __repr__(self) -> str:
        if self.is_empty():
            return f"SparseMatrix.empty({self._row_size}, {self._column_size})"
        return f"SparseMatrix({self.to_dict()}, shape={self.shape})"
