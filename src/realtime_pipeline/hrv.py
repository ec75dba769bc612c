"""
Interval analysis module.

Provides:
- RR interval generation from R-peak timestamps
- Heart rate from the mean RR interval
- Time-domain HRV (SDNN) over one analysis window
"""

from typing import Sequence
from dataclasses import dataclass, asdict

import numpy as np

from .config import Config, default_config


@dataclass(frozen=True)
class IntervalMetrics:
    """Heart rate and HRV of one window."""
    heart_rate: float  # bpm, rounded to an integer value
    sdnn: float        # Standard deviation of RR intervals (ms)
    n_intervals: int   # Number of RR intervals used

    def to_dict(self):
        return asdict(self)


def compute_rr_intervals(peak_times: Sequence[int]) -> np.ndarray:
    """
    Consecutive differences between R-peak timestamps.

    Parameters
    ----------
    peak_times : Sequence[int]
        R-peak timestamps in milliseconds.

    Returns
    -------
    np.ndarray
        RR intervals in milliseconds (empty for fewer than two peaks).
    """
    if len(peak_times) < 2:
        return np.array([], dtype=np.float64)
    return np.diff(np.asarray(peak_times, dtype=np.float64))


def compute_heart_rate(peak_times: Sequence[int]) -> float:
    """
    Heart rate from the mean RR interval.

    Returns ``60000 / mean(RR)`` rounded half-up to the nearest integer, or 0
    when fewer than two peaks are available. Coincident peak timestamps
    (mean RR of zero) also give 0.
    """
    rr_intervals = compute_rr_intervals(peak_times)
    if len(rr_intervals) == 0:
        return 0.0

    mean_rr = float(np.mean(rr_intervals))
    if mean_rr <= 0:
        return 0.0
    return float(np.floor(60000.0 / mean_rr + 0.5))


def compute_hrv_sdnn(
    peak_times: Sequence[int],
    config: Config = default_config,
) -> float:
    """
    SDNN: population standard deviation of the RR intervals (ms).

    Requires at least ``config.MIN_RR_INTERVALS`` peaks, otherwise 0.
    """
    if len(peak_times) < config.MIN_RR_INTERVALS:
        return 0.0
    rr_intervals = compute_rr_intervals(peak_times)
    return float(np.std(rr_intervals))


def compute_interval_metrics(
    peak_times: Sequence[int],
    config: Config = default_config,
) -> IntervalMetrics:
    """Heart rate and SDNN for the R-peaks of one window."""
    return IntervalMetrics(
        heart_rate=compute_heart_rate(peak_times),
        sdnn=compute_hrv_sdnn(peak_times, config),
        n_intervals=max(0, len(peak_times) - 1),
    )
