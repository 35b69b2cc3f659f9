import os
import time
from typing import Optional

import numpy as np
import pandas as pd

from .sparse_matrix import SparseMatrix
from .config import BenchmarkConfig
from .constants import BenchmarkColumn
from .sparse_errors import ProductMismatchError



class SparseBenchmark:
    """
    Times sparse matrix multiplication against dense numpy multiplication.

    For every (size, sparsity) pair of the configuration, two random square sparse
    matrices are generated, converted to dense arrays, and multiplied both ways.
    Timings are averaged over config.num_runs runs.
    """

    REPORT_COLUMNS = [
        BenchmarkColumn.SIZE,
        BenchmarkColumn.SPARSITY,
        BenchmarkColumn.NNZ_A,
        BenchmarkColumn.NNZ_B,
        BenchmarkColumn.DENSE_SECONDS,
        BenchmarkColumn.SPARSE_SECONDS,
        BenchmarkColumn.SPEEDUP,
    ]

    def __init__(self, config: Optional[BenchmarkConfig] = None):
        """
        Initialize the SparseBenchmark

        Args:
            config: BenchmarkConfig object defining what is timed
        """
        self.config = config if config is not None else BenchmarkConfig()
        self.config.validate()
        self.results: Optional[pd.DataFrame] = None

    def random_matrix(self, rng: np.random.Generator, size: int, sparsity: float) -> SparseMatrix:
        """Square size x size matrix with size * size * sparsity entries drawn at random coordinates."""
        nnz = int(size * size * sparsity)
        row_idx = rng.integers(0, size, nnz).tolist()
        col_idx = rng.integers(0, size, nnz).tolist()
        vals = rng.integers(1, self.config.max_value + 1, nnz).tolist()

        rows: dict[int, dict[int, int]] = {}
        for i, j, v in zip(row_idx, col_idx, vals):
            if i not in rows:
                rows[i] = {}
            rows[i][j] = v
        return SparseMatrix.rows(rows, copy=False, row_size=size, column_size=size)

    def run(self) -> pd.DataFrame:
        """
        Run the benchmark and return one report row per (size, sparsity) pair.

        Raises:
            ProductMismatchError: If config.verify is set and a sparse product differs from the dense one.
        """
        print(f"=== Benchmarking sparse matrix multiplication ===")
        rng = np.random.default_rng(self.config.seed)
        num_runs = self.config.num_runs
        records = []

        start_time = time.time()
        for size in self.config.sizes:
            st = time.time()
            for sparsity in self.config.sparsities:
                dense_time = 0.0
                sparse_time = 0.0
                nnz_a = 0
                nnz_b = 0
                for _ in range(num_runs):
                    s_a = self.random_matrix(rng, size, sparsity)
                    s_b = self.random_matrix(rng, size, sparsity)
                    a = s_a.to_dense()
                    b = s_b.to_dense()

                    m_start = time.time()
                    c = a @ b
                    dense_time += time.time() - m_start

                    sm_start = time.time()
                    s_c = s_a * s_b
                    sparse_time += time.time() - sm_start

                    if self.config.verify and not np.array_equal(s_c.to_dense(), c):
                        raise ProductMismatchError(size, sparsity)
                    nnz_a += s_a.nnz
                    nnz_b += s_b.nnz

                m = dense_time / num_runs
                sm = sparse_time / num_runs
                speedup = m / sm if sm > 0 else float("inf")
                print(f"{size}x{size} ({sparsity}) : m => {m:.4f}s / sm => {sm:.4f}s => {speedup:.2f}x")
                records.append({
                    BenchmarkColumn.SIZE: size,
                    BenchmarkColumn.SPARSITY: sparsity,
                    BenchmarkColumn.NNZ_A: nnz_a / num_runs,
                    BenchmarkColumn.NNZ_B: nnz_b / num_runs,
                    BenchmarkColumn.DENSE_SECONDS: m,
                    BenchmarkColumn.SPARSE_SECONDS: sm,
                    BenchmarkColumn.SPEEDUP: speedup,
                })
            print(f"  took: {time.time() - st} seconds")

        print(f"Total time taken: {time.time() - start_time} seconds")
        self.results = pd.DataFrame(records, columns=self.REPORT_COLUMNS)
        return self.results

    def get_results(self) -> Optional[pd.DataFrame]:
        """
        Get the report of the last run, or None if run() has not been called
        """
        return self.results

    def export_to_file(self, output_dir: str) -> Optional[str]:
        """Write the report of the last run to output_dir/sparse_benchmark.csv and return the path."""
        if self.results is None:
            print("Warning: Benchmark results are not available")
            return None

        os.makedirs(output_dir, exist_ok=True)
        output_file = os.path.join(output_dir, 'sparse_benchmark.csv')
        self.results.to_csv(output_file, index=False, float_format='%.6f')
        return output_file
