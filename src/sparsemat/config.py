from typing import Optional, List
from dataclasses import dataclass, field

from .sparse_errors import InvalidSizesError, InvalidSparsityRangeError, InvalidRunCountError, InvalidMaxValueError


@dataclass
class BenchmarkConfig:
    """
    Configuration for the sparse vs. dense multiplication benchmark.

    Every combination of size and sparsity is timed; each run multiplies two
    freshly generated random square matrices.
    """

    sizes: List[int] = field(default_factory=lambda: [5, 10, 25, 100, 250])
    """Square matrix sizes to benchmark."""

    sparsities: List[float] = field(default_factory=lambda: [0.25, 0.1, 0.01, 0.001])
    """Fraction of entries drawn per matrix, each in (0, 1].
    size * size * sparsity coordinates are drawn with replacement, so the realized
    fill can be slightly lower."""

    num_runs: int = 3
    """Number of runs averaged per (size, sparsity) combination."""

    max_value: int = 5
    """Entries are drawn uniformly from 1..max_value."""

    seed: Optional[int] = None
    """Seed for the random generator. If None, results differ between calls."""

    verify: bool = False
    """Whether to check every sparse product against the dense numpy product."""

    def validate(self) -> None:
        """Validate configuration parameters."""
        if len(self.sizes) == 0 or any(int(s) != s or s < 1 for s in self.sizes):
            raise InvalidSizesError(self.sizes)
        if len(self.sparsities) == 0 or not all(0 < s <= 1 for s in self.sparsities):
            raise InvalidSparsityRangeError(self.sparsities)
        if self.num_runs < 1:
            raise InvalidRunCountError(self.num_runs)
        if self.max_value < 1:
            raise InvalidMaxValueError(self.max_value)
