"""
Least-squares quadratic fit y = a*x^2 + b*x + c over accumulated samples.
"""

import logging
from typing import Iterator, Optional

import numpy as np

from sample_types import SampleStore, Sample, FitResult
from fit_utils import compute_coefficients

logger = logging.getLogger(__name__)


class QuadraticFit:
    """Accumulates samples and computes the three fit coefficients on demand."""

    def __init__(self, n: Optional[int] = None, dtype=np.float64):
        """
        Args:
            n: Number of samples to initially reserve storage for
            dtype: Numpy floating type for samples and coefficients
        """
        self.samples = SampleStore(n, dtype=dtype)

    @property
    def dtype(self) -> np.dtype:
        return self.samples.dtype

    def add(self, x, y) -> None:
        """Add a new sample to the fit."""
        self.samples.add(x, y)

    def at(self, index: int) -> Sample:
        return self.samples.at(index)

    def __getitem__(self, index: int) -> Sample:
        return self.samples[index]

    def __setitem__(self, index: int, sample) -> None:
        self.samples[index] = sample

    def clear(self) -> None:
        """Clear all samples."""
        self.samples.clear()

    def reserve(self, n: int) -> None:
        self.samples.reserve(n)

    def size(self) -> int:
        return self.samples.size()

    def __len__(self) -> int:
        return len(self.samples)

    def __iter__(self) -> Iterator[Sample]:
        return iter(self.samples)

    def compute(self) -> np.ndarray:
        """Compute the coefficients [a, b, c]."""
        return compute_coefficients(self.samples)

    def result(self) -> FitResult:
        """
        Compute the coefficients and report whether they can be trusted.

        The fit is only meaningful with at least three distinct x values;
        otherwise the coefficients come out infinite or NaN and success is False.
        """
        coefficients = self.compute()
        n_samples = self.size()
        if np.all(np.isfinite(coefficients)):
            return FitResult(success=True, coefficients=coefficients, n_samples=n_samples)

        n_distinct = np.unique(self.samples.x_values()).size
        message = (f"Non-finite coefficients from {n_samples} samples with "
                   f"{n_distinct} distinct x values (at least 3 required)")
        logger.debug(message)
        return FitResult(success=False, coefficients=coefficients,
                         n_samples=n_samples, message=message)
