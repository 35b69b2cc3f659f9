from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Iterator, Optional



@dataclass(eq=False)
class SparseMap:
    """Integer-keyed mapping whose absent keys read as zero.

    Zero values are never stored: assigning zero removes the key instead.
    Iteration is always in ascending key order.
    """
    data_store: dict[int, Any] = field(default_factory=dict)

    def __post_init__(self):
        # the supplied dict becomes the backing store, zero entries are purged from it
        for k in [k for k, v in self.data_store.items() if v == 0]:
            del self.data_store[k]

    @classmethod
    def from_dict(cls, mapping: dict[int, Any], copy: bool = True) -> 'SparseMap':
        """Wrap a plain dict, dropping zero entries.

        Args:
            mapping: index -> value dict.
            copy: If False the dict is used as the backing store and zero entries
                are purged from it in place.

        Returns:
            A SparseMap over the non-zero entries of mapping.
        """
        if copy:
            return cls({k: v for k, v in mapping.items() if v != 0})
        return cls(mapping)

    def add_at(self, i: int, v: Any) -> None:
        """Add a value to the element at index i."""
        self[i] = self[i] + v

    def get(self, i: int) -> Any:
        """Get the value at index i."""
        return self[i]

    def set(self, i: int, value: Any) -> None:
        """Set the value at index i."""
        self[i] = value

    def __getitem__(self, i: int) -> Any:
        """Returns the value at index i, or 0 if not stored."""
        return self.data_store.get(i, 0)

    def __setitem__(self, i: int, value: Any) -> None:
        """Sets the value at index i.

        Args:
            i: The index to set the value for.
            value: The value to set. Zero removes the entry.
        """
        if value == 0:
            # Remove zero values to maintain sparsity
            self.data_store.pop(i, None)
        else:
            self.data_store[i] = value

    def __delitem__(self, i: int) -> None:
        self.data_store.pop(i, None)

    def __contains__(self, i: int) -> bool:
        return i in self.data_store

    def __len__(self) -> int:
        """Returns the number of non-zero elements."""
        return len(self.data_store)

    def __bool__(self) -> bool:
        return bool(self.data_store)

    def __iter__(self) -> Iterator[int]:
        """Iterates over the stored indices in ascending order."""
        return iter(self.keys())

    def keys(self) -> list[int]:
        """Returns the stored indices in ascending order."""
        return sorted(self.data_store)

    def values(self) -> list[Any]:
        """Returns the stored values, ordered by index."""
        return [self.data_store[k] for k in self.keys()]

    def items(self) -> list[tuple[int, Any]]:
        """Returns a list of (index, value) pairs ordered by index."""
        return [(k, self.data_store[k]) for k in self.keys()]

    def max_key(self) -> Optional[int]:
        """Largest stored index, or None when nothing is stored."""
        if not self.data_store:
            return None
        return max(self.data_store)

    def map_values(self, func: Callable[[Any], Any]) -> 'SparseMap':
        """New map with func applied to every stored value; zero and None results are dropped."""
        result = SparseMap()
        for k, v in self.items():
            new_v = func(v)
            if new_v is not None:
                result[k] = new_v
        return result

    def combine(self, other: 'SparseMap', func: Callable[[Any, Any], Any]) -> 'SparseMap':
        """New map holding func(self[k], other[k]) over the union of stored keys.

        Keys stored in neither map are never visited, so func must map (0, 0) to 0.
        """
        result = SparseMap()
        for k in merge_keys(self.keys(), other.keys()):
            result[k] = func(self[k], other[k])
        return result

    def __eq__(self, other) -> bool:
        if not isinstance(other, SparseMap):
            return NotImplemented
        return self.data_store == other.data_store

    def __hash__(self) -> int:
        return hash(frozenset(self.data_store.items()))

    def __repr__(self) -> str:
        """String representation of the map."""
        if not self.data_store:
            return "SparseMap({})"
        items_str = ", ".join(f"{k}: {v}" for k, v in self.items())
        return f"SparseMap({{{items_str}}})"

    def copy(self) -> 'SparseMap':
        """Returns a copy of the map."""
        return SparseMap(self.data_store.copy())


def merge_keys(left_keys: list[int], right_keys: list[int]) -> Iterator[int]:
    """Yield the ascending union of two ascending key lists.

    Two-pointer walk: the side holding the smaller key advances, both advance on a tie.
    """
    i_l = 0
    i_r = 0
    n_l = len(left_keys)
    n_r = len(right_keys)
    while i_l < n_l or i_r < n_r:
        if i_r >= n_r:
            yield left_keys[i_l]
            i_l += 1
        elif i_l >= n_l:
            yield right_keys[i_r]
            i_r += 1
        else:
            a = left_keys[i_l]
            b = right_keys[i_r]
            if a < b:
                i_l += 1
                yield a
            elif b < a:
                i_r += 1
                yield b
            else:
                i_l += 1
                i_r += 1
                yield a


def transpose_nested(outer: dict[int, SparseMap]) -> dict[int, SparseMap]:
    """Swap the outer and inner keys of a nested mapping: [k1][k2] -> [k2][k1]."""
    result: dict[int, SparseMap] = {}
    for k1 in sorted(outer):
        for k2, v in outer[k1].items():
            if k2 not in result:
                result[k2] = SparseMap()
            result[k2].data_store[k1] = v
    return result


def combine_nested(left: dict[int, SparseMap], right: dict[int, SparseMap],
                   func: Callable[[Any, Any], Any]) -> dict[int, SparseMap]:
    """Nested merge of two outer mappings; empty inner maps are not kept."""
    empty = SparseMap()
    result: dict[int, SparseMap] = {}
    for k in merge_keys(sorted(left), sorted(right)):
        inner = left.get(k, empty).combine(right.get(k, empty), func)
        if inner:
            result[k] = inner
    return result


def count_nonzero(outer: Iterable[SparseMap]) -> int:
    """Total number of stored entries across inner maps."""
    return sum(len(inner) for inner in outer)
