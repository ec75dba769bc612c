"""R-peak detection.
Uses a dynamic amplitude threshold (mean + k * std) over one analysis window.
"""

from typing import List
from dataclasses import dataclass, field

import numpy as np

from .buffer import Window
from .config import Config, default_config


@dataclass(frozen=True)
class DetectionResult:
    """Result of R-peak detection on one window."""
    peak_times: List[int]                                  # Timestamps (ms) of R-peaks, window order
    peak_indices: List[int] = field(default_factory=list)  # Window indices of the same peaks
    threshold: float = 0.0                                 # Amplitude threshold used

    @property
    def n_peaks(self) -> int:
        """Number of detected peaks."""
        return len(self.peak_times)

    def get_rr_intervals_ms(self) -> np.ndarray:
        """Get RR intervals in milliseconds."""
        if len(self.peak_times) < 2:
            return np.array([], dtype=np.float64)
        return np.diff(np.asarray(self.peak_times, dtype=np.float64))


def compute_dynamic_threshold(
    values: np.ndarray,
    config: Config = default_config,
) -> float:
    """Return ``mean + THRESHOLD_STD_MULT * std`` (population std)."""
    values = np.asarray(values, dtype=np.float64)
    if values.size == 0:
        return 0.0
    return float(np.mean(values) + config.THRESHOLD_STD_MULT * np.std(values))


def detect_rpeaks(
    window: Window,
    config: Config = default_config,
) -> DetectionResult:
    """Detect R-peaks in an analysis window.

    A sample is an R-peak when it lies above the dynamic threshold and is a
    strict local maximum (greater than both neighbours). Plateaus are never
    flagged. There is no memory between windows.

    Parameters
    ----------
    window : Window
        Samples of one analysis pass.
    config : Config
        Pipeline configuration.

    Returns
    -------
    DetectionResult
        Peak timestamps, their window indices and the threshold.
    """
    values = window.values
    if len(values) < config.MIN_PEAK_SAMPLES:
        return DetectionResult(peak_times=[], peak_indices=[], threshold=0.0)

    threshold = compute_dynamic_threshold(values, config)

    centre = values[1:-1]
    is_peak = (centre > threshold) & (centre > values[:-2]) & (centre > values[2:])
    peak_indices = (np.flatnonzero(is_peak) + 1).tolist()
    peak_times = [int(window.timestamps[i]) for i in peak_indices]

    return DetectionResult(
        peak_times=peak_times,
        peak_indices=peak_indices,
        threshold=threshold,
    )
