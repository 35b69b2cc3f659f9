import numbers
import operator
from typing import Any

import numpy as np

from .sparse_map import SparseMap
from .sparse_errors import ArgumentError, TypeMismatchError


NUMERIC_DTYPE_KINDS = "biufc"


def is_numeric(obj: Any) -> bool:
    """True for Python and numpy scalars."""
    return isinstance(obj, numbers.Number)


def coerce_to_int(obj: Any) -> int:
    """Coerce obj to a Python int, accepting anything that implements __index__."""
    if isinstance(obj, int):
        return obj
    try:
        return operator.index(obj)
    except TypeError as e:
        raise TypeMismatchError(obj, "int", str(e)) from e


def dense_values(obj: Any) -> list:
    """Flat list of Python values from a 1-D list, tuple or ndarray."""
    if isinstance(obj, np.ndarray):
        if obj.ndim != 1:
            raise TypeMismatchError(obj, "a dense vector", f"expected 1 dimension, got {obj.ndim}")
        return obj.tolist()
    values = list(obj)
    for v in values:
        if np.ndim(v) != 0:
            raise TypeMismatchError(obj, "a dense vector", f"element {v!r} is not a scalar")
    return values


def check_indices(smap: SparseMap, axis: str = "index") -> SparseMap:
    """
    Coerce the stored keys of smap to Python ints and reject negative ones.

    Returns:
        smap itself when every key already is a non-negative int, otherwise a new SparseMap.

    Raises:
        TypeMismatchError: If a key does not implement __index__.
        ArgumentError: If a key is negative.
    """
    if not all(type(k) is int for k in smap.data_store):
        smap = SparseMap({coerce_to_int(k): v for k, v in smap.data_store.items()})
    if smap and min(smap.data_store) < 0:
        raise ArgumentError(f"Negative {axis} {min(smap.data_store)}")
    return smap


def convert_to_sparse_map(obj: Any, copy: bool = False) -> SparseMap:
    """
    Convert obj into a SparseMap, dropping zero entries.

    Args:
        obj: A list, tuple, 1-D ndarray, dict, SparseMap or anything providing to_sparse_map().
        copy: Whether a dict or SparseMap is copied. Dense sequences are always copied.

    Returns:
        SparseMap holding the non-zero entries of obj.

    Raises:
        TypeMismatchError: If obj is none of the supported types.
    """
    if isinstance(obj, SparseMap):
        return obj.copy() if copy else obj
    if isinstance(obj, dict):
        return SparseMap.from_dict(obj, copy=copy)
    if isinstance(obj, (list, tuple, np.ndarray)):
        result = SparseMap()
        for i, v in enumerate(dense_values(obj)):
            if v != 0:
                result.data_store[i] = v
        return result
    if hasattr(obj, "to_sparse_map"):
        return obj.to_sparse_map()
    raise TypeMismatchError(obj, "SparseMap")


def coerce_operand(obj: Any, target: str) -> np.ndarray:
    """
    Coerce a foreign operand into a numeric dense array.

    Args:
        obj: Operand of an arithmetic operator, e.g. a nested list or an array-like.
        target: Name of the type asking for the coercion, used in the error message.

    Returns:
        1-D or 2-D numpy array of numeric dtype.

    Raises:
        TypeMismatchError: If obj offers no array conversion or the result is not a
            numeric vector or matrix.
    """
    if isinstance(obj, np.ndarray):
        arr = obj
    elif isinstance(obj, (list, tuple)) or hasattr(obj, "__array__"):
        try:
            arr = np.asarray(obj)
        except (TypeError, ValueError) as e:
            raise TypeMismatchError(obj, target, str(e)) from e
    else:
        raise TypeMismatchError(obj, target)

    if arr.dtype.kind not in NUMERIC_DTYPE_KINDS:
        raise TypeMismatchError(obj, target, f"non-numeric dtype {arr.dtype}")
    if arr.ndim not in (1, 2):
        raise TypeMismatchError(obj, target, f"expected 1 or 2 dimensions, got {arr.ndim}")
    return arr


def to_dense_array(nested: list, shape: tuple) -> np.ndarray:
    """Build an ndarray of the given shape from nested (or flat) Python lists."""
    return np.array(nested).reshape(shape)
