import math
import operator
from typing import Any, Callable, Iterator, Optional, Union

import numpy as np

from .sparse_map import SparseMap, merge_keys
from .conversion import (
    is_numeric,
    coerce_to_int,
    coerce_operand,
    convert_to_sparse_map,
    check_indices,
    dense_values,
    to_dense_array,
)
from .sparse_errors import (
    ArgumentError,
    DimensionMismatchError,
    IndexOutOfRangeError,
    OperationNotDefinedError,
    TypeMismatchError,
)


def _matrix_class():
    # sparse_matrix imports this module
    from .sparse_matrix import SparseMatrix
    return SparseMatrix


class SparseVector:
    """
    Immutable vector that only stores its non-zero elements.

    Every operator returns a new SparseVector (or SparseMatrix); operands are never
    modified. Use SparseVector.of or SparseVector.elements to create one.
    """

    # make numpy defer to the reflected operators below
    __array_ufunc__ = None

    def __init__(self, elements: SparseMap, size: Optional[int] = None):
        # No checking is done at this point, elements must respect size.
        self._elements = elements
        if size is None:
            max_key = elements.max_key()
            size = 0 if max_key is None else max_key + 1
        self._size = size

    @classmethod
    def of(cls, *values) -> 'SparseVector':
        """Creates a sparse vector from its elements, e.g. SparseVector.of(7, 0, 4)."""
        return cls(convert_to_sparse_map(list(values)), len(values))

    @classmethod
    def elements(cls, obj: Any, copy: bool = True, size: Optional[int] = None) -> 'SparseVector':
        """
        Creates a sparse vector from a dense sequence or a sparse mapping.

        Args:
            obj: list, tuple, 1-D ndarray, SparseVector, dict or SparseMap.
            copy: Whether a supplied dict or SparseMap is copied. With copy=False the
                caller hands the mapping over and must not touch it afterwards.
            size: Logical length. Defaults to the sequence length for dense input and to
                the largest stored index + 1 for mappings.

        Returns:
            New SparseVector.

        Raises:
            ArgumentError: If size is negative, a stored index is negative, or size is
                smaller than a stored index + 1.
            TypeMismatchError: If obj is not vector-like, a dense element is not a scalar
                or a mapping key is not an integer.
        """
        if isinstance(obj, SparseVector):
            smap = obj._elements.copy() if copy else obj._elements
            default_size = obj.size
        elif isinstance(obj, (list, tuple, np.ndarray)):
            values = dense_values(obj)
            smap = convert_to_sparse_map(values)
            default_size = len(values)
        else:
            smap = check_indices(convert_to_sparse_map(obj, copy=copy))
            default_size = None

        if size is None:
            return cls(smap, default_size)

        size = coerce_to_int(size)
        max_key = smap.max_key()
        if size < 0:
            raise ArgumentError(f"Negative size {size}")
        if max_key is not None and max_key >= size:
            raise ArgumentError(f"Size {size} is too small for stored index {max_key}")
        return cls(smap, size)

    @classmethod
    def from_dense(cls, array) -> 'SparseVector':
        """Creates a sparse vector from a 1-D numpy array (or array-like)."""
        arr = np.asarray(array)
        if arr.ndim != 1:
            raise TypeMismatchError(array, "SparseVector", f"expected 1 dimension, got {arr.ndim}")
        return cls.elements(arr)

    @classmethod
    def zero(cls, size: int) -> 'SparseVector':
        """Creates an all-zero sparse vector of the given size."""
        return cls.elements({}, size=size)

    # ------------------------------------------------------------------
    # access

    @property
    def size(self) -> int:
        """Number of elements, zeros included."""
        return self._size

    @property
    def nnz(self) -> int:
        """Number of stored (non-zero) elements."""
        return len(self._elements)

    def __len__(self) -> int:
        return self._size

    def element(self, i: int) -> Any:
        """
        Returns element i, counting from the end when i is negative.

        Raises:
            IndexOutOfRangeError: If i is outside [-size, size).
        """
        i = coerce_to_int(i)
        idx = self._size + i if i < 0 else i
        if idx < 0 or idx >= self._size:
            raise IndexOutOfRangeError(i, self._size)
        return self._elements[idx]

    __getitem__ = element
    component = element

    def nonzero_indices(self) -> list[int]:
        """Stored indices in ascending order."""
        return self._elements.keys()

    # ------------------------------------------------------------------
    # enumeration

    def each(self, func: Optional[Callable[[Any], Any]] = None):
        """Visit every element (zeros included) in index order.

        Returns an iterator when func is None, otherwise calls func per element and returns self.
        """
        values = (self._elements[i] for i in range(self._size))
        if func is None:
            return values
        for v in values:
            func(v)
        return self

    def __iter__(self) -> Iterator[Any]:
        return self.each()

    def each_nonzero(self, func: Optional[Callable[[Any], Any]] = None):
        """Visit the stored elements in index order."""
        values = iter(self._elements.values())
        if func is None:
            return values
        for v in values:
            func(v)
        return self

    def each_with_index(self, func: Optional[Callable[[Any, int], Any]] = None):
        """Visit (value, index) for every element, zeros included."""
        pairs = ((self._elements[i], i) for i in range(self._size))
        if func is None:
            return pairs
        for v, i in pairs:
            func(v, i)
        return self

    def each_with_index_nonzero(self, func: Optional[Callable[[Any, int], Any]] = None):
        """Visit (value, index) for the stored elements only."""
        pairs = iter([(v, i) for i, v in self._elements.items()])
        if func is None:
            return pairs
        for v, i in pairs:
            func(v, i)
        return self

    def _as_vector(self, other: Any) -> 'SparseVector':
        if isinstance(other, SparseVector):
            return other
        if is_numeric(other):
            raise TypeMismatchError(other, "SparseVector", "a number is not vector-like")
        arr = coerce_operand(other, "SparseVector")
        if arr.ndim != 1:
            raise TypeMismatchError(other, "SparseVector", f"expected 1 dimension, got {arr.ndim}")
        return SparseVector.from_dense(arr)

    def _check_size(self, other: 'SparseVector', operation: str) -> None:
        if self._size != other._size:
            raise DimensionMismatchError(self._size, other._size, operation)

    def merge_each(self, other: Any, func: Optional[Callable[[Any, Any], Any]] = None):
        """
        Visit (self[i], other[i]) for every index, zeros included.

        Raises:
            TypeMismatchError: If other is not vector-like.
            DimensionMismatchError: If the sizes differ.
        """
        other = self._as_vector(other)
        self._check_size(other, "merge_each")
        pairs = ((self._elements[i], other._elements[i]) for i in range(self._size))
        if func is None:
            return pairs
        for a, b in pairs:
            func(a, b)
        return self

    def merge_each_nonzero(self, other: Any, func: Optional[Callable[[Any, Any], Any]] = None):
        """
        Visit (self[i], other[i]) for every index stored in either vector, in ascending order.

        Raises:
            TypeMismatchError: If other is not vector-like.
            DimensionMismatchError: If the sizes differ.
        """
        other = self._as_vector(other)
        self._check_size(other, "merge_each_nonzero")
        keys = merge_keys(self._elements.keys(), other._elements.keys())
        pairs = ((self._elements[k], other._elements[k]) for k in keys)
        if func is None:
            return pairs
        for a, b in pairs:
            func(a, b)
        return self

    def map(self, func: Callable[[Any], Any]) -> 'SparseVector':
        """New vector with func applied to the stored elements; zeros are not visited."""
        return SparseVector(self._elements.map_values(func), self._size)

    collect = map

    def astype(self, func: Callable[[Any], Any]) -> 'SparseVector':
        """
        New vector with every stored element converted by func, e.g. float, int or
        fractions.Fraction.
          SparseVector.of(1, 0, 2).astype(float)  => SparseVector[1.0, 0, 2.0]

        Elements converting to zero are dropped.
        """
        return SparseVector(self._elements.map_values(func), self._size)

    def collect_pairwise(self, other: Any, func: Callable[[Any, Any], Any]) -> list:
        """List of func(self[i], other[i]) for every index."""
        return [func(a, b) for a, b in self.merge_each(other)]

    def map_pairwise(self, other: Any, func: Callable[[Any, Any], Any]) -> 'SparseVector':
        """Like collect_pairwise but returns a SparseVector."""
        return SparseVector(convert_to_sparse_map(self.collect_pairwise(other, func)), self._size)

    def map_pairwise_nonzero(self, other: Any, func: Callable[[Any, Any], Any]) -> 'SparseVector':
        """func over the indices stored in either vector; func(0, 0) is assumed to be 0."""
        other = self._as_vector(other)
        self._check_size(other, "map_pairwise_nonzero")
        return SparseVector(self._elements.combine(other._elements, func), self._size)

    # ------------------------------------------------------------------
    # comparing

    def __eq__(self, other) -> bool:
        """Equal iff the sizes and the stored elements match."""
        if not isinstance(other, SparseVector):
            return False
        return self._size == other._size and self._elements == other._elements

    def __hash__(self) -> int:
        return hash((self._size, self._elements))

    # ------------------------------------------------------------------
    # arithmetic

    def __mul__(self, x: Any) -> Union['SparseVector', Any]:
        """Multiplies the vector by a number, or promotes it to a column matrix to multiply a matrix."""
        if is_numeric(x):
            return SparseVector(self._elements.map_values(lambda v: v * x), self._size)
        if isinstance(x, SparseVector):
            raise OperationNotDefinedError("*", self, x)
        SparseMatrix = _matrix_class()
        if isinstance(x, SparseMatrix):
            return SparseMatrix.column_vector(self) * x
        arr = coerce_operand(x, "SparseVector")
        if arr.ndim == 1:
            raise OperationNotDefinedError("*", self, x)
        return SparseMatrix.column_vector(self) * SparseMatrix.from_dense(arr)

    def __rmul__(self, x: Any) -> Union['SparseVector', Any]:
        if is_numeric(x):
            return SparseVector(self._elements.map_values(lambda v: x * v), self._size)
        arr = coerce_operand(x, "SparseVector")
        if arr.ndim == 1:
            raise OperationNotDefinedError("*", x, self)
        return _matrix_class().from_dense(arr) * self

    def __matmul__(self, x: Any):
        if is_numeric(x):
            raise OperationNotDefinedError("@", self, x)
        return self * x

    def __rmatmul__(self, x: Any):
        if is_numeric(x):
            raise OperationNotDefinedError("@", x, self)
        return self.__rmul__(x)

    def __truediv__(self, x: Any) -> 'SparseVector':
        """Divides the vector by a number."""
        if is_numeric(x):
            return SparseVector(self._elements.map_values(lambda v: v / x), self._size)
        if isinstance(x, (SparseVector, _matrix_class())):
            raise OperationNotDefinedError("/", self, x)
        coerce_operand(x, "SparseVector")
        raise OperationNotDefinedError("/", self, x)

    def _add_or_subtract(self, other: Any, op: Callable[[Any, Any], Any], name: str):
        if isinstance(other, SparseVector):
            self._check_size(other, name)
            return SparseVector(self._elements.combine(other._elements, op), self._size)
        if is_numeric(other):
            raise OperationNotDefinedError(name, self, other)
        SparseMatrix = _matrix_class()
        if isinstance(other, SparseMatrix):
            return op(SparseMatrix.column_vector(self), other)
        arr = coerce_operand(other, "SparseVector")
        if arr.ndim == 1:
            return op(self, SparseVector.from_dense(arr))
        return op(SparseMatrix.column_vector(self), SparseMatrix.from_dense(arr))

    def __add__(self, other: Any):
        """Vector addition over the union of stored indices."""
        return self._add_or_subtract(other, operator.add, "+")

    def __sub__(self, other: Any):
        """Vector subtraction over the union of stored indices."""
        return self._add_or_subtract(other, operator.sub, "-")

    def _reflected(self, other: Any, op: Callable[[Any, Any], Any], name: str):
        if is_numeric(other):
            raise OperationNotDefinedError(name, other, self)
        arr = coerce_operand(other, "SparseVector")
        if arr.ndim == 1:
            return op(SparseVector.from_dense(arr), self)
        return op(_matrix_class().from_dense(arr), self)

    def __radd__(self, other: Any):
        return self._reflected(other, operator.add, "+")

    def __rsub__(self, other: Any):
        return self._reflected(other, operator.sub, "-")

    def __neg__(self) -> 'SparseVector':
        return self * -1

    def __pos__(self) -> 'SparseVector':
        return self

    # ------------------------------------------------------------------
    # vector functions

    def inner_product(self, other: Any) -> Any:
        """
        Returns the inner product of this vector with the other.
          SparseVector.of(4, 7).inner_product(SparseVector.of(10, 1))  => 47

        Only indices stored in either vector are visited.
        """
        other = self._as_vector(other)
        self._check_size(other, "inner_product")
        p = 0
        for a, b in self.merge_each_nonzero(other):
            p += a * b
        return p

    dot = inner_product

    def norm(self) -> float:
        """Returns the modulus (Pythagorean distance) of the vector."""
        return math.sqrt(sum(v * v for v in self._elements.values()))

    r = norm

    def resized(self, size: int) -> 'SparseVector':
        """New vector of the given size; elements at index >= size are dropped."""
        size = coerce_to_int(size)
        if size < 0:
            raise ArgumentError(f"Negative size {size}")
        kept = SparseMap({k: v for k, v in self._elements.items() if k < size})
        return SparseVector(kept, size)

    # ------------------------------------------------------------------
    # converting

    def covector(self):
        """Creates a single-row sparse matrix from this vector."""
        return _matrix_class().row_vector(self)

    def to_matrix(self):
        """Creates a single-column sparse matrix from this vector."""
        return _matrix_class().column_vector(self)

    def to_sparse_map(self) -> SparseMap:
        """Copy of the stored elements."""
        return self._elements.copy()

    def to_dict(self) -> dict[int, Any]:
        """Stored elements as an index -> value dict."""
        return dict(self._elements.items())

    def to_list(self) -> list:
        """All elements, zeros included."""
        values = [0] * self._size
        for k, v in self._elements.items():
            values[k] = v
        return values

    def to_dense(self) -> np.ndarray:
        """All elements as a 1-D numpy array."""
        return to_dense_array(self.to_list(), (self._size,))

    # ------------------------------------------------------------------
    # printing

    def __str__(self) -> str:
        return "SparseVector[" + ", ".join(str(v) for v in self.to_list()) + "]"

    def __repr__(self) -> str:
        items_str = ", ".join(f"{k}: {v}" for k, v in self._elements.items())
        return f"SparseVector({{{items_str}}}, size={self._size})"
