"""
Shared data structures for the quadratic least-squares fit.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterator, Optional, Tuple, Union

import numpy as np

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 16


class OutOfRangeError(IndexError):
    """Raised when a sample position is not within [0, size)."""


@dataclass(frozen=True)
class Sample:
    """Container for one (x, y) sample."""
    x: Any
    y: Any


def check_dtype(dtype) -> np.dtype:
    """Return dtype as a numpy floating dtype, rejecting anything else."""
    try:
        resolved = np.dtype(dtype)
    except TypeError as e:
        raise TypeError(f"Not a numpy dtype: {dtype!r}") from e
    if not np.issubdtype(resolved, np.floating):
        raise TypeError(f"Scalar type must be a floating dtype, got {resolved}")
    return resolved


class SampleStore:
    """Ordered, growable collection of (x, y) samples."""

    def __init__(self, n: Optional[int] = None, dtype=np.float64):
        """
        Args:
            n: Number of samples to reserve storage for. Size stays 0.
            dtype: Numpy floating type used for stored values.
        """
        self.dtype = check_dtype(dtype)
        if n is not None and n < 0:
            raise ValueError(f"Capacity hint must be >= 0, got {n}")
        capacity = DEFAULT_CAPACITY if n is None else int(n)
        self._x = np.empty(capacity, dtype=self.dtype)
        self._y = np.empty(capacity, dtype=self.dtype)
        self._size = 0

    @property
    def capacity(self) -> int:
        return self._x.shape[0]

    def reserve(self, n: int) -> None:
        """Grow the buffers to hold at least n samples."""
        if n < 0:
            raise ValueError(f"Capacity hint must be >= 0, got {n}")
        if n <= self.capacity:
            return
        x_new = np.empty(n, dtype=self.dtype)
        y_new = np.empty(n, dtype=self.dtype)
        x_new[:self._size] = self._x[:self._size]
        y_new[:self._size] = self._y[:self._size]
        self._x, self._y = x_new, y_new
        logger.debug("Reserved storage for %d samples", n)

    def add(self, x, y) -> None:
        """Append a sample at the end of the collection."""
        if self._size == self.capacity:
            self.reserve(max(2 * self.capacity, 1))
        x, y = self.dtype.type(x), self.dtype.type(y)
        self._x[self._size] = x
        self._y[self._size] = y
        self._size += 1

    def _check_index(self, index: int) -> int:
        if not 0 <= index < self._size:
            raise OutOfRangeError(
                f"Sample index {index} out of range for store of size {self._size}")
        return index

    def at(self, index: int) -> Sample:
        """Return the sample at the given position."""
        i = self._check_index(index)
        return Sample(self._x[i], self._y[i])

    def __getitem__(self, index: int) -> Sample:
        return self.at(index)

    def __setitem__(self, index: int, sample: Union[Sample, Tuple[Any, Any]]) -> None:
        i = self._check_index(index)
        if isinstance(sample, Sample):
            x, y = sample.x, sample.y
        else:
            try:
                x, y = sample
            except (TypeError, ValueError) as e:
                raise ValueError(f"Expected a Sample or an (x, y) pair, got {sample!r}") from e
        # Both values convert before either buffer is written
        x, y = self.dtype.type(x), self.dtype.type(y)
        self._x[i] = x
        self._y[i] = y

    def clear(self) -> None:
        """Remove all samples. Capacity is kept."""
        self._size = 0

    def size(self) -> int:
        return self._size

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[Sample]:
        for i in range(self._size):
            yield Sample(self._x[i], self._y[i])

    def x_values(self) -> np.ndarray:
        """Read-only view of the stored x values."""
        view = self._x[:self._size]
        view.flags.writeable = False
        return view

    def y_values(self) -> np.ndarray:
        """Read-only view of the stored y values."""
        view = self._y[:self._size]
        view.flags.writeable = False
        return view


@dataclass
class FitResult:
    """Container for fit results."""
    success: bool
    coefficients: Optional[np.ndarray] = None
    n_samples: int = 0
    message: Optional[str] = None
