"""
Sparse matrices and sparse vectors.

Matrix and vector types with the arithmetic surface of dense numpy objects that only store their non-zero entries.
"""

__version__ = "0.1.0"

from .sparse_map import SparseMap
from .sparse_vector import SparseVector
from .sparse_matrix import SparseMatrix, RowMajor, ColumnMajor
from .config import BenchmarkConfig
from .benchmark import SparseBenchmark
from .sparse_errors import (
    SparseMatrixError,
    DimensionMismatchError,
    OperationNotDefinedError,
    ArgumentError,
    TypeMismatchError,
    IndexOutOfRangeError,
)

__all__ = [
    "SparseMap",
    "SparseVector",
    "SparseMatrix",
    "RowMajor",
    "ColumnMajor",
    "BenchmarkConfig",
    "SparseBenchmark",
    "SparseMatrixError",
    "DimensionMismatchError",
    "OperationNotDefinedError",
    "ArgumentError",
    "TypeMismatchError",
    "IndexOutOfRangeError",
]
