"""Tensor shape with element-count and contiguity queries."""

from __future__ import annotations

from collections.abc import Sequence


class Shape:
    """Immutable list of dimensions."""

    __slots__ = ("_dims",)

    def __init__(self, dims: Sequence[int]):
        dims = tuple(int(d) for d in dims)
        if any(d < 0 for d in dims):
            raise ValueError(f"negative dimension in shape {dims}")
        self._dims = dims

    @classmethod
    def of(cls, value: Shape | int | Sequence[int]) -> Shape:
        """Coerce an int, a sequence of ints or a Shape into a Shape."""
        if isinstance(value, Shape):
            return value
        if isinstance(value, int):
            return cls((value,))
        return cls(value)

    @property
    def dims(self) -> tuple[int, ...]:
        return self._dims

    @property
    def rank(self) -> int:
        return len(self._dims)

    def elem_count(self) -> int:
        count = 1
        for d in self._dims:
            count *= d
        return count

    def stride_contiguous(self) -> tuple[int, ...]:
        """Row-major strides, in elements."""
        strides = []
        acc = 1
        for d in reversed(self._dims):
            strides.append(acc)
            acc *= d
        return tuple(reversed(strides))

    def is_contiguous(self, stride: Sequence[int]) -> bool:
        """True when ``stride`` is exactly the row-major packing of this shape."""
        if len(stride) != len(self._dims):
            return False
        acc = 1
        for s, d in zip(reversed(tuple(stride)), reversed(self._dims)):
            if s != acc:
                return False
            acc *= d
        return True

    def __eq__(self, other) -> bool:
        if isinstance(other, Shape):
            return self._dims == other._dims
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._dims)

    def __iter__(self):
        return iter(self._dims)

    def __len__(self) -> int:
        return len(self._dims)

    def __repr__(self) -> str:
        return f"Shape({list(self._dims)})"
