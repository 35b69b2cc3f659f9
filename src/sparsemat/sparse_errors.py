

class SparseMatrixError(ValueError):
    """Base class for sparse matrix and sparse vector errors."""
    pass

class BenchmarkConfigError(ValueError):
    """Base class for benchmark configuration errors."""
    pass



class DimensionMismatchError(SparseMatrixError):
    """Raised when operand shapes are incompatible for the requested operation."""

    def __init__(self, left_shape, right_shape, operation: str = None):
        self.left_shape = left_shape
        self.right_shape = right_shape
        self.operation = operation
        if operation is None:
            message = f"Dimension mismatch: {left_shape} vs {right_shape}"
        else:
            message = f"Dimension mismatch for '{operation}': {left_shape} vs {right_shape}"
        super().__init__(message)


class OperationNotDefinedError(SparseMatrixError, TypeError):
    """Raised when an operator has no meaning for the given operand types."""

    def __init__(self, operation: str, left, right):
        self.operation = operation
        self.left_type = left if isinstance(left, type) else type(left)
        self.right_type = right if isinstance(right, type) else type(right)
        message = f"Operation({operation}) can't be defined: {self.left_type.__name__} op {self.right_type.__name__}"
        super().__init__(message)


class ArgumentError(SparseMatrixError):
    """Raised when a constructor is given invalid arguments."""

    def __init__(self, message: str):
        super().__init__(message)


class TypeMismatchError(SparseMatrixError, TypeError):
    """Raised when an operand cannot be coerced into a cooperating type."""

    def __init__(self, obj, target: str, reason: str = None):
        self.obj = obj
        self.target = target
        self.reason = reason
        message = f"{type(obj).__name__} can't be coerced into {target}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class IndexOutOfRangeError(SparseMatrixError, IndexError):
    """Raised when an index falls outside the valid range after negative-index normalization."""

    def __init__(self, index: int, size: int, axis: str = "index"):
        self.index = index
        self.size = size
        self.axis = axis
        message = f"{axis} {index} out of range for size {size}"
        super().__init__(message)


class InvalidSizesError(BenchmarkConfigError):
    """Raised when benchmark matrix sizes are empty or not positive."""

    def __init__(self, sizes):
        self.sizes = sizes
        message = f"Benchmark sizes {sizes} must be a non-empty list of positive integers"
        super().__init__(message)


class InvalidSparsityRangeError(BenchmarkConfigError):
    """Raised when benchmark sparsities are outside the range (0, 1]."""

    def __init__(self, sparsities):
        self.sparsities = sparsities
        message = f"Benchmark sparsities {sparsities} must be non-empty and all in range (0, 1]"
        super().__init__(message)


class InvalidRunCountError(BenchmarkConfigError):
    """Raised when the number of benchmark runs is less than one."""

    def __init__(self, num_runs: int):
        self.num_runs = num_runs
        message = f"num_runs must be at least 1, got {num_runs}"
        super().__init__(message)


class InvalidMaxValueError(BenchmarkConfigError):
    """Raised when the largest random entry value is less than one."""

    def __init__(self, max_value: int):
        self.max_value = max_value
        message = f"max_value must be at least 1, got {max_value}"
        super().__init__(message)


class ProductMismatchError(SparseMatrixError):
    """Raised when a verified benchmark run finds the sparse product differs from the dense one."""

    def __init__(self, size: int, sparsity: float):
        self.size = size
        self.sparsity = sparsity
        message = f"Sparse product differs from dense product for {size}x{size} matrices at sparsity {sparsity}"
        super().__init__(message)
