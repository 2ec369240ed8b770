"""
Core utilities for the closed-form least-squares quadratic fit.

The coefficients of y = a*x^2 + b*x + c solve the normal equations

    | S0(0) S0(1) S0(2) |   | c |   | S1(0) |
    | S0(1) S0(2) S0(3) | . | b | = | S1(1) |
    | S0(2) S0(3) S0(4) |   | a |   | S1(2) |

with S0(j) = sum(x^j) and S1(j) = sum(x^j * y). The system is solved by
Cramer's rule, see http://mathforum.org/library/drmath/view/72047.html.
No attempt is made to detect a singular system: fewer than three distinct
x values give a zero determinant and non-finite coefficients.
"""

import logging
from typing import Tuple

import numpy as np

from sample_types import SampleStore

logger = logging.getLogger(__name__)


def sj0(store: SampleStore, j: int):
    """Power sum of x of order j over all samples."""
    x = store.x_values()
    return np.sum(x ** j, dtype=store.dtype)


def sj1(store: SampleStore, j: int):
    """Cross sum of x^j * y over all samples."""
    x = store.x_values()
    y = store.y_values()
    return np.sum(x ** j * y, dtype=store.dtype)


def power_sums(store: SampleStore) -> Tuple[np.ndarray, np.ndarray]:
    """
    Evaluate all aggregates needed for the fit.

    Returns:
        (s0, s1) where s0[j] = sj0(store, j) for j = 0..4
        and s1[j] = sj1(store, j) for j = 0..2
    """
    s0 = np.array([sj0(store, j) for j in range(5)], dtype=store.dtype)
    s1 = np.array([sj1(store, j) for j in range(3)], dtype=store.dtype)
    return s0, s1


def normal_equations(store: SampleStore) -> Tuple[np.ndarray, np.ndarray]:
    """
    Build the normal equations for quadratic regression.

    Returns:
        (matrix, rhs) ordered for the unknown vector [c, b, a]
    """
    s0, s1 = power_sums(store)
    matrix = np.array([[s0[0], s0[1], s0[2]],
                       [s0[1], s0[2], s0[3]],
                       [s0[2], s0[3], s0[4]]], dtype=store.dtype)
    return matrix, s1.copy()


def denominator(s0: np.ndarray):
    """Determinant of the normal-equations matrix."""
    return (s0[0] * s0[2] * s0[4]
            - s0[1]**2 * s0[4]
            - s0[0] * s0[3]**2
            + 2 * s0[1] * s0[2] * s0[3]
            - s0[2]**3)


def coefficient_a(s0: np.ndarray, s1: np.ndarray, det):
    return (s1[0] * s0[1] * s0[3]
            - s1[1] * s0[0] * s0[3]
            - s1[0] * s0[2]**2
            + s1[1] * s0[1] * s0[2]
            + s1[2] * s0[0] * s0[2]
            - s1[2] * s0[1]**2) / det


def coefficient_b(s0: np.ndarray, s1: np.ndarray, det):
    return (s1[1] * s0[0] * s0[4]
            - s1[0] * s0[1] * s0[4]
            + s1[0] * s0[2] * s0[3]
            - s1[2] * s0[0] * s0[3]
            - s1[1] * s0[2]**2
            + s1[2] * s0[1] * s0[2]) / det


def coefficient_c(s0: np.ndarray, s1: np.ndarray, det):
    return (s1[0] * s0[2] * s0[4]
            - s1[1] * s0[1] * s0[4]
            - s1[0] * s0[3]**2
            + s1[1] * s0[2] * s0[3]
            + s1[2] * s0[1] * s0[3]
            - s1[2] * s0[2]**2) / det


def compute_coefficients(store: SampleStore) -> np.ndarray:
    """
    Compute the least-squares coefficients for the samples in store.

    Args:
        store: Samples to fit. Not modified.

    Returns:
        Array [a, b, c] in the store dtype
    """
    # Overflowing sums and a zero determinant yield inf/nan by IEEE arithmetic
    with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
        s0, s1 = power_sums(store)
        det = denominator(s0)
        coefficients = np.array([coefficient_a(s0, s1, det),
                                 coefficient_b(s0, s1, det),
                                 coefficient_c(s0, s1, det)], dtype=store.dtype)

    logger.debug("Fit over %d samples: S0=%s, S1=%s, det=%s, coefficients=%s",
                 store.size(), s0, s1, det, coefficients)
    return coefficients


def evaluate(coefficients, x):
    """Evaluate a*x^2 + b*x + c for scalar or array x."""
    a, b, c = coefficients
    return a * x**2 + b * x + c
