"""
Beat morphology around the most recent R-peak.

Provides:
- QT interval (R-peak to T-wave end zero crossing)
- ST segment elevation over fixed offsets after the R-peak
- QRS complex duration (Q/S boundaries) and amplitude

Every analyzer inspects only the last R-peak of the window and falls back to
zero values when there is no peak or the peak is not part of the window.
"""

from typing import Optional, Sequence, Tuple
from dataclasses import dataclass, asdict

import numpy as np

from .buffer import Window
from .config import Config, default_config


@dataclass(frozen=True)
class STSegment:
    """ST segment characteristics."""
    elevation: float = 0.0  # Mean amplitude over the ST region
    duration: float = 0.0   # ms

    def to_dict(self):
        return asdict(self)


@dataclass(frozen=True)
class QRSComplex:
    """QRS complex characteristics."""
    duration: float = 0.0   # ms, S boundary minus Q boundary
    amplitude: float = 0.0  # R-peak amplitude

    def to_dict(self):
        return asdict(self)


def find_peak_index(window: Window, peak_times: Sequence[int]) -> Optional[int]:
    """Index of the first sample stamped with the last peak's timestamp."""
    if len(peak_times) == 0:
        return None
    matches = np.flatnonzero(window.timestamps == int(peak_times[-1]))
    if matches.size == 0:
        return None
    return int(matches[0])


def find_t_wave_end(
    window: Window,
    peak_index: int,
    config: Config = default_config,
) -> int:
    """
    Index of the T-wave end after an R-peak.

    Scans up to ``config.qt_search_samples`` samples after the peak for the
    first crossing from non-negative to negative. Without a crossing the last
    scanned index is returned (the peak itself when nothing follows it).
    """
    values = window.values
    last = min(peak_index + config.qt_search_samples, len(values) - 1)
    for i in range(peak_index + 1, last + 1):
        if values[i] < 0 and values[i - 1] >= 0:
            return i
    return max(peak_index, last)


def st_bounds(
    window: Window,
    peak_index: int,
    config: Config = default_config,
) -> Tuple[int, int]:
    """Half-open ``[start, end)`` index range of the ST segment, clipped to the window."""
    n = len(window)
    start = min(peak_index + config.st_start_samples, n)
    end = min(peak_index + config.st_end_samples, n)
    return start, max(start, end)


def find_qrs_bounds(
    window: Window,
    peak_index: int,
    config: Config = default_config,
) -> Tuple[int, int]:
    """
    Q and S boundary indices around an R-peak.

    Each side takes the nearest sample with a non-negative value within
    ``config.QRS_SEARCH_SAMPLES``; the peak index is used when none exists.
    """
    values = window.values
    span = config.QRS_SEARCH_SAMPLES

    q_index = peak_index
    for i in range(peak_index - 1, max(0, peak_index - span) - 1, -1):
        if values[i] >= 0:
            q_index = i
            break

    s_index = peak_index
    for i in range(peak_index + 1, min(len(values) - 1, peak_index + span) + 1):
        if values[i] >= 0:
            s_index = i
            break

    return q_index, s_index


def compute_qt_interval(
    window: Window,
    peak_times: Sequence[int],
    config: Config = default_config,
) -> float:
    """
    QT interval of the last beat in milliseconds.

    Parameters
    ----------
    window : Window
        Analysis window.
    peak_times : Sequence[int]
        R-peak timestamps detected in the window.
    config : Config
        Pipeline configuration.

    Returns
    -------
    float
        ``timestamp(T-wave end) - timestamp(last R-peak)``; 0 without a
        usable peak.
    """
    peak_index = find_peak_index(window, peak_times)
    if peak_index is None:
        return 0.0
    t_end = find_t_wave_end(window, peak_index, config)
    return float(window.timestamps[t_end] - window.timestamps[peak_index])


def analyze_st_segment(
    window: Window,
    peak_times: Sequence[int],
    config: Config = default_config,
) -> STSegment:
    """
    ST segment of the last beat.

    Elevation is the mean amplitude between the configured start and end
    offsets; an ST region running off the end of the window gives elevation
    0. The duration depends only on the configured offsets and sampling rate.
    """
    peak_index = find_peak_index(window, peak_times)
    if peak_index is None:
        return STSegment()

    start, end = st_bounds(window, peak_index, config)
    region = window.values[start:end]
    elevation = float(np.mean(region)) if region.size > 0 else 0.0

    duration = (config.st_end_samples - config.st_start_samples) * (1000.0 / config.SAMPLING_RATE)
    return STSegment(elevation=elevation, duration=float(duration))


def analyze_qrs_complex(
    window: Window,
    peak_times: Sequence[int],
    config: Config = default_config,
) -> QRSComplex:
    """QRS complex of the last beat (duration in ms, amplitude of the R-peak)."""
    peak_index = find_peak_index(window, peak_times)
    if peak_index is None:
        return QRSComplex()

    q_index, s_index = find_qrs_bounds(window, peak_index, config)
    return QRSComplex(
        duration=float(window.timestamps[s_index] - window.timestamps[q_index]),
        amplitude=float(window.values[peak_index]),
    )
