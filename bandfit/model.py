"""Gaussian dip on a linear baseline, and its least-squares fit."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np
from scipy.optimize import least_squares

SIGMA_FLOOR = 1e-6
PARAMETER_NAMES = ("A", "mu", "sigma", "b", "offset")

_TOLERANCE = 1e-12
_MAX_EVALUATIONS = 200


@dataclass(frozen=True)
class FitResult:
    """Fitted parameters of the model and the root-mean-square error of the fit."""

    amplitude: float
    mu: float
    sigma: float
    slope: float
    offset: float
    rmse: float
    converged: bool = True

    @property
    def params(self) -> tuple[float, float, float, float, float]:
        """Parameters in model order: A, mu, sigma, b, offset."""
        return (self.amplitude, self.mu, self.sigma, self.slope, self.offset)


def gaussian_with_bias(x, params):
    """Evaluate ``-A*exp(-(x-mu)^2 / (2 sigma^2)) + b*x + c`` at ``x``.

    Scalars give a float, sequences give a numpy array.
    """
    amplitude, mu, sigma, slope, offset = params
    x_arr = np.asarray(x, dtype=float)
    gauss = -amplitude * np.exp(-((x_arr - mu) ** 2) / (2.0 * sigma * sigma))
    result = gauss + slope * x_arr + offset
    return float(result) if result.ndim == 0 else result


def residual(x, y, params):
    """Observed value minus model value."""
    y_arr = np.asarray(y, dtype=float)
    result = y_arr - gaussian_with_bias(x, params)
    return float(result) if np.ndim(result) == 0 else result


def _as_arrays(xs: Sequence[float], ys: Sequence[float]) -> tuple[np.ndarray, np.ndarray]:
    xs_arr = np.asarray(xs, dtype=float).ravel()
    ys_arr = np.asarray(ys, dtype=float).ravel()
    if xs_arr.size != ys_arr.size:
        raise ValueError(
            f"x and y must have the same length ({xs_arr.size} != {ys_arr.size})"
        )
    if xs_arr.size == 0:
        raise ValueError("at least one data point is required")
    return xs_arr, ys_arr


def initial_guess(xs, ys) -> tuple[float, float, float, float, float]:
    """Starting parameters derived from the spread of the data."""
    xs_arr, ys_arr = _as_arrays(xs, ys)
    amplitude = float(ys_arr.max() - ys_arr.min())
    mu = float(xs_arr.mean())
    sigma = float(xs_arr.max() - xs_arr.min()) / 6.0
    if sigma < SIGMA_FLOOR:
        sigma = SIGMA_FLOOR
    return (amplitude, mu, sigma, 0.0, float(ys_arr.min()))


def fit_gaussian_with_bias(xs, ys) -> FitResult:
    """Fit the model to the points, keeping sigma at or above ``SIGMA_FLOOR``."""
    xs_arr, ys_arr = _as_arrays(xs, ys)
    start = np.array(initial_guess(xs_arr, ys_arr))
    lower = np.array([-np.inf, -np.inf, SIGMA_FLOOR, -np.inf, -np.inf])
    upper = np.full(5, np.inf)

    solution = least_squares(
        lambda p: np.atleast_1d(residual(xs_arr, ys_arr, p)),
        start,
        jac="3-point",
        bounds=(lower, upper),
        method="trf",
        ftol=_TOLERANCE,
        xtol=_TOLERANCE,
        gtol=_TOLERANCE,
        max_nfev=_MAX_EVALUATIONS,
    )
    params = tuple(float(v) for v in solution.x)
    errors = np.atleast_1d(residual(xs_arr, ys_arr, params))
    rmse = math.sqrt(float(np.sum(errors * errors)) / xs_arr.size)
    return FitResult(*params, rmse=rmse, converged=bool(solution.status > 0))