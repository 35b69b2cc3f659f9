ROW_MAJOR = "row"  # storage orientations (row, column)
COLUMN_MAJOR = "column"

class TripletColumn:
    ROW = "row"
    COLUMN = "column"
    VALUE = "value"

class BenchmarkColumn:
    SIZE = "size"
    SPARSITY = "sparsity"
    NNZ_A = "nnz_a"
    NNZ_B = "nnz_b"

    DENSE_SECONDS = "dense_seconds"
    SPARSE_SECONDS = "sparse_seconds"
    SPEEDUP = "speedup"
