"""
Per-window metrics aggregation.

``compute_metrics`` is the whole analysis pass: R-peak detection followed by
interval and morphology analysis of one immutable window. It keeps no state,
so repeated calls on the same window give identical results.
"""

from typing import Any, Dict, Tuple
from dataclasses import dataclass, field

from .buffer import Window
from .config import Config, default_config
from .hrv import compute_interval_metrics
from .morphology import (
    STSegment,
    QRSComplex,
    compute_qt_interval,
    analyze_st_segment,
    analyze_qrs_complex,
)
from .rpeak import detect_rpeaks


@dataclass(frozen=True)
class Metrics:
    """Metrics of one analysis pass. The default instance is the all-zero state."""
    heart_rate: float = 0.0               # bpm
    heart_rate_variability: float = 0.0   # SDNN (ms)
    qt_interval: float = 0.0              # ms
    st_segment: STSegment = field(default_factory=STSegment)
    qrs_complex: QRSComplex = field(default_factory=QRSComplex)
    r_peaks: Tuple[int, ...] = ()         # R-peak timestamps (ms)

    def to_dict(self) -> Dict[str, Any]:
        """JSON shape consumed by the display and storage layers."""
        return {
            "heartRate": self.heart_rate,
            "heartRateVariability": self.heart_rate_variability,
            "qtInterval": self.qt_interval,
            "stSegment": {
                "elevation": self.st_segment.elevation,
                "duration": self.st_segment.duration,
            },
            "qrsComplex": {
                "duration": self.qrs_complex.duration,
                "amplitude": self.qrs_complex.amplitude,
            },
            "rPeaks": list(self.r_peaks),
        }

    def to_flat_dict(self) -> Dict[str, Any]:
        """Convert to flat dictionary for CSV export."""
        return {
            "heart_rate": self.heart_rate,
            "heart_rate_variability": self.heart_rate_variability,
            "qt_interval": self.qt_interval,
            "st_elevation": self.st_segment.elevation,
            "st_duration": self.st_segment.duration,
            "qrs_duration": self.qrs_complex.duration,
            "qrs_amplitude": self.qrs_complex.amplitude,
            "n_peaks": len(self.r_peaks),
            "r_peaks": " ".join(str(t) for t in self.r_peaks),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Metrics":
        """Create Metrics from the JSON shape produced by ``to_dict``."""
        st = data.get("stSegment", {})
        qrs = data.get("qrsComplex", {})
        return cls(
            heart_rate=float(data.get("heartRate", 0.0)),
            heart_rate_variability=float(data.get("heartRateVariability", 0.0)),
            qt_interval=float(data.get("qtInterval", 0.0)),
            st_segment=STSegment(
                elevation=float(st.get("elevation", 0.0)),
                duration=float(st.get("duration", 0.0)),
            ),
            qrs_complex=QRSComplex(
                duration=float(qrs.get("duration", 0.0)),
                amplitude=float(qrs.get("amplitude", 0.0)),
            ),
            r_peaks=tuple(int(t) for t in data.get("rPeaks", [])),
        )


def compute_metrics(
    window: Window,
    config: Config = default_config,
) -> Metrics:
    """
    Run one full analysis pass over a window.

    Parameters
    ----------
    window : Window
        Immutable snapshot of the most recent samples.
    config : Config
        Pipeline configuration.

    Returns
    -------
    Metrics
        Heart rate, SDNN, QT, ST and QRS characteristics and the R-peak set.
    """
    detection = detect_rpeaks(window, config)
    peaks = detection.peak_times

    intervals = compute_interval_metrics(peaks, config)

    return Metrics(
        heart_rate=intervals.heart_rate,
        heart_rate_variability=intervals.sdnn,
        qt_interval=compute_qt_interval(window, peaks, config),
        st_segment=analyze_st_segment(window, peaks, config),
        qrs_complex=analyze_qrs_complex(window, peaks, config),
        r_peaks=tuple(peaks),
    )
