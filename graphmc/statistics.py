"""
Statistics for Monte Carlo time series.

Series functions
----------------
mean, error                       : naive estimates (error ignores autocorrelation)
autocorr_function, autocorr_time  : normalized autocorrelation and integrated time
jackknife_samples, jackknife_error: leave-one-out resampling of f(<a>[, <b>])
jackknife_mean, jackknife_mean_error
u4, susceptibility (+ jackknife_ variants)

Series functions raise InsufficientSamplesError when a series is too short
and LengthMismatchError when two series that must be paired are not.

Accumulator
-----------
Streaming sink for one observable. Queries on degenerate series return
nan instead of raising, so a driver can print whatever is available.

Autocorrelation convention
--------------------------
Γ(t) = (1/N) Σ_{i<N-t} (y_i - ȳ)(y_{i+t} - ȳ),   ρ(t) = Γ(t)/Γ(0)
τ_int = ½ + Σ_{t=1}^{W} ρ(t)

W is the first lag with W >= c·τ_int(W) (Sokal's automatic window, c = 5
by default), capped at N/2. An uncorrelated series gives τ_int ≈ ½; a
constant series gives exactly ½.
"""

import math
import numpy as np
from typing import Callable, List, Optional, Sequence, Union


class InsufficientSamplesError(ValueError):
    """Series too short for the requested estimate."""


class LengthMismatchError(ValueError):
    """Two paired series have different lengths."""


def _as_series(y, min_len: int, what: str) -> np.ndarray:
    arr = np.asarray(y, dtype=float).ravel()
    if arr.size < min_len:
        raise InsufficientSamplesError(
            f"insufficient samples: {what} needs at least {min_len}, got {arr.size}"
        )
    return arr


def _paired(a, b, what: str):
    a = _as_series(a, 2, what)
    b = np.asarray(b, dtype=float).ravel()
    if a.size != b.size:
        raise LengthMismatchError(
            f"length mismatch: {what} got series of length {a.size} and {b.size}"
        )
    return a, b


# =============================================================================
# Mean and naive error
# =============================================================================

def mean(y: Sequence[float]) -> float:
    arr = _as_series(y, 1, "mean")
    return math.fsum(arr) / arr.size


def error(y: Sequence[float]) -> float:
    """sqrt((<y²> - <y>²) / (N - 1)), with the variance clamped at zero."""
    arr = _as_series(y, 2, "error")
    n = arr.size
    m = math.fsum(arr) / n
    m2 = math.fsum(arr * arr) / n
    return math.sqrt(max(m2 - m * m, 0.0) / (n - 1))


# =============================================================================
# Autocorrelation
# =============================================================================

def autocorr_function(y: Sequence[float], max_lag: Optional[int] = None) -> np.ndarray:
    """
    Normalized autocorrelation ρ(t) for t = 0 .. max_lag.

    Computed with a zero-padded FFT. A constant series has no fluctuations;
    its ρ is reported as 1 at t = 0 and 0 elsewhere.
    """
    arr = _as_series(y, 2, "autocorr_function")
    n = arr.size
    if max_lag is None:
        max_lag = n - 1
    max_lag = min(int(max_lag), n - 1)

    d = arr - arr.mean()
    f = np.fft.rfft(d, 2 * n)
    acov = np.fft.irfft(f * np.conj(f), 2 * n)[: max_lag + 1] / n

    rho = np.zeros(max_lag + 1)
    rho[0] = 1.0
    if acov[0] <= 0.0:
        return rho
    rho[1:] = acov[1:] / acov[0]
    return rho


def autocorr_time(y: Sequence[float], c: float = 5.0) -> float:
    """Integrated autocorrelation time with an automatic window."""
    arr = _as_series(y, 2, "autocorr_time")
    w_max = arr.size // 2
    rho = autocorr_function(arr, w_max)

    tau = 0.5
    for t in range(1, w_max + 1):
        tau += rho[t]
        if t >= c * tau:
            break
    return float(tau)


# =============================================================================
# Jackknife
# =============================================================================

def _leave_one_out_means(arr: np.ndarray) -> np.ndarray:
    # (S - y_i)/(N - 1) written around the mean to avoid cancellation in S
    n = arr.size
    m = math.fsum(arr) / n
    return m + (m - arr) / (n - 1)


def jackknife_samples(
    fn: Callable[..., float],
    a: Sequence[float],
    b: Optional[Sequence[float]] = None,
) -> np.ndarray:
    """
    Leave-one-out evaluations fn(<a>_i) or fn(<a>_i, <b>_i).

    For two series the same index i is removed from both.
    """
    if b is None:
        arr = _as_series(a, 2, "jackknife")
        return np.array([fn(x) for x in _leave_one_out_means(arr)], dtype=float)

    a_arr, b_arr = _paired(a, b, "jackknife")
    loo_a = _leave_one_out_means(a_arr)
    loo_b = _leave_one_out_means(b_arr)
    return np.array([fn(x, y) for x, y in zip(loo_a, loo_b)], dtype=float)


def jackknife_error(
    fn: Callable[..., float],
    a: Sequence[float],
    b: Optional[Sequence[float]] = None,
) -> float:
    """Jackknife error sqrt(N - 1) · std(leave-one-out values)."""
    samples = jackknife_samples(fn, a, b)
    return float(math.sqrt(samples.size - 1) * np.std(samples))


def jackknife_mean(y: Sequence[float]) -> float:
    """Average of the leave-one-out means (equals the plain mean)."""
    loo = _leave_one_out_means(_as_series(y, 2, "jackknife_mean"))
    return math.fsum(loo) / loo.size


def jackknife_mean_error(y: Sequence[float]) -> float:
    return jackknife_error(lambda x: x, y)


def _u4(m2: float, m4: float) -> float:
    return 1.5 * (1.0 - m4 / (3.0 * m2 * m2))


def _susceptibility(m2: float, m_abs: float) -> float:
    return m2 - m_abs * m_abs


def u4(m2: Sequence[float], m4: Sequence[float]) -> float:
    """Binder cumulant U4 = 1.5 (1 - <m⁴> / (3 <m²>²))."""
    m2, m4 = _paired(m2, m4, "u4")
    return _u4(mean(m2), mean(m4))


def jackknife_u4(m2: Sequence[float], m4: Sequence[float]) -> float:
    return jackknife_error(_u4, m2, m4)


def susceptibility(m2: Sequence[float], m_abs: Sequence[float]) -> float:
    """<m²> - <|m|>² (multiply by the volume for the usual normalization)."""
    m2, m_abs = _paired(m2, m_abs, "susceptibility")
    return _susceptibility(mean(m2), mean(m_abs))


def jackknife_susceptibility(m2: Sequence[float], m_abs: Sequence[float]) -> float:
    return jackknife_error(_susceptibility, m2, m_abs)


# =============================================================================
# Streaming accumulator
# =============================================================================

class Accumulator:
    """
    Running sums plus the full history of one observable.

    Parameters
    ----------
    name : str
        Label used in summaries.
    """

    def __init__(self, name: str = ""):
        self.name = name
        self.n = 0
        self.sum = 0.0
        self.sum2 = 0.0
        self.last = math.nan
        self.history: List[float] = []

    def __len__(self) -> int:
        return self.n

    def record(self, value: float):
        value = float(value)
        self.last = value
        self.sum += value
        self.sum2 += value * value
        self.n += 1
        self.history.append(value)

    def mean(self) -> float:
        if self.n == 0:
            return math.nan
        return self.sum / self.n

    def error(self) -> float:
        if self.n < 2:
            return math.nan
        m = self.sum / self.n
        return math.sqrt(max(self.sum2 / self.n - m * m, 0.0) / (self.n - 1))

    def autocorr_time(self) -> float:
        if self.n < 2:
            return math.nan
        return autocorr_time(self.history)

    def autocorr_front(self) -> float:
        """Autocorrelation time of the first half of the history."""
        half = self.n // 2
        if half < 2:
            return math.nan
        return autocorr_time(self.history[:half])

    def autocorr_back(self) -> float:
        """Autocorrelation time of the last half of the history."""
        half = self.n // 2
        if half < 2:
            return math.nan
        return autocorr_time(self.history[self.n - half:])

    def jackknife_mean(self) -> float:
        if self.n < 2:
            return math.nan
        return jackknife_mean(self.history)

    def jackknife_error(
        self,
        fn: Optional[Callable[..., float]] = None,
        other: Optional[Union["Accumulator", Sequence[float]]] = None,
    ) -> float:
        """
        Jackknife error of ``fn`` applied to this series' mean, or to this
        and ``other``'s means. Defaults to the error of the mean.

        Raises LengthMismatchError when ``other`` has a different length.
        """
        if fn is None:
            if other is not None:
                raise ValueError("A function is required for a two-series jackknife")
            fn = lambda x: x
        if isinstance(other, Accumulator):
            other = other.history
        if other is not None and len(other) != self.n:
            raise LengthMismatchError(
                f"length mismatch: {self.name or 'series'} has {self.n} samples, "
                f"other has {len(other)}"
            )
        if self.n < 2:
            return math.nan
        return jackknife_error(fn, self.history, other)

    def summary(self) -> dict:
        return {
            'name': self.name,
            'n': self.n,
            'mean': self.mean(),
            'error': self.error(),
            'tau_int': self.autocorr_time(),
        }

    def __repr__(self) -> str:
        return f"Accumulator({self.name!r}, n={self.n}, mean={self.mean():.6g})"
