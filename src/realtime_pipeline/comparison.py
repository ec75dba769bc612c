"""
Baseline comparison.

Compares the metrics of the current window against those of a baseline
recording and scales the heart-rate and ST deltas by the wearer's current
activity.
"""

from typing import Any, Dict, Optional, Sequence
from dataclasses import dataclass, fields

from .activity import ActivitySegment, ActivityType, find_active_segment, get_multiplier
from .buffer import Window
from .config import Config, default_config
from .metrics import Metrics, compute_metrics


@dataclass(frozen=True)
class ComparisonMetrics(Metrics):
    """Current-window metrics plus deltas against the baseline."""
    heart_rate_recovery: float = 0.0  # bpm
    st_deviation: float = 0.0         # Elevation delta, activity scaled
    hrv_change: float = 0.0           # %
    qt_change: float = 0.0            # %
    activity: Optional[ActivityType] = None

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result.update({
            "heartRateRecovery": self.heart_rate_recovery,
            "stDeviation": self.st_deviation,
            "hrvChange": self.hrv_change,
            "qtChange": self.qt_change,
        })
        return result

    def to_flat_dict(self) -> Dict[str, Any]:
        result = super().to_flat_dict()
        result.update({
            "heart_rate_recovery": self.heart_rate_recovery,
            "st_deviation": self.st_deviation,
            "hrv_change": self.hrv_change,
            "qt_change": self.qt_change,
            "activity": self.activity.value if self.activity is not None else "",
        })
        return result


def percent_change(baseline: float, current: float) -> float:
    """Relative change in percent; 0 when the baseline is 0."""
    if baseline == 0:
        return 0.0
    return (current - baseline) / baseline * 100.0


def compare_metrics(
    baseline: Metrics,
    current: Metrics,
    activity: Optional[ActivityType] = None,
) -> ComparisonMetrics:
    """
    Derive comparison metrics from two analysis passes.

    Parameters
    ----------
    baseline : Metrics
        Metrics of the baseline window.
    current : Metrics
        Metrics of the current window.
    activity : ActivityType, optional
        Activity of the active segment; None applies no scaling.

    Returns
    -------
    ComparisonMetrics
        ``current`` merged with heart-rate recovery, ST deviation and the
        HRV / QT percentage changes.
    """
    multiplier = get_multiplier(activity)

    if baseline.heart_rate == 0 or current.heart_rate == 0:
        hr_recovery = 0.0
    else:
        hr_recovery = max(0.0, current.heart_rate - baseline.heart_rate) * multiplier.hr_recovery

    st_deviation = (
        current.st_segment.elevation - baseline.st_segment.elevation
    ) * multiplier.st_deviation

    base_fields = {f.name: getattr(current, f.name) for f in fields(Metrics)}
    return ComparisonMetrics(
        **base_fields,
        heart_rate_recovery=float(hr_recovery),
        st_deviation=float(st_deviation),
        hrv_change=percent_change(baseline.heart_rate_variability, current.heart_rate_variability),
        qt_change=percent_change(baseline.qt_interval, current.qt_interval),
        activity=ActivityType(activity) if activity is not None else None,
    )


def compare_windows(
    baseline_window: Window,
    current_window: Window,
    segments: Optional[Sequence[ActivitySegment]],
    reference_ms: float,
    config: Config = default_config,
) -> ComparisonMetrics:
    """
    Analyse both windows and compare them.

    The active segment is the one containing ``reference_ms``; which instant
    that is (wall clock or signal time) is the caller's choice.
    """
    baseline = compute_metrics(baseline_window, config)
    current = compute_metrics(current_window, config)
    segment = find_active_segment(segments, reference_ms)
    return compare_metrics(baseline, current, segment.type if segment is not None else None)
