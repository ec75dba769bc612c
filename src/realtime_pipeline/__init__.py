# Real-time ECG Pipeline
# Windowed R-peak / interval / morphology analysis and baseline comparison

from .config import Config
from .buffer import Sample, Window, WindowBuffer
from .rpeak import detect_rpeaks
from .hrv import compute_heart_rate, compute_hrv_sdnn
from .morphology import compute_qt_interval, analyze_st_segment, analyze_qrs_complex
from .metrics import Metrics, compute_metrics
from .activity import ActivityType, ActivitySegment, find_active_segment, validate_segments
from .comparison import ComparisonMetrics, compare_metrics, compare_windows
from .monitor import MetricsMonitor, ComparisonMonitor
from .pmd import decode_ecg_frame, parse_heart_rate
from .simulate import generate_sample_ecg
from .io_utils import RecordData, load_record_json, save_record_json, load_samples_csv, load_recording

__all__ = [
    "Config",
    "Sample",
    "Window",
    "WindowBuffer",
    "detect_rpeaks",
    "compute_heart_rate",
    "compute_hrv_sdnn",
    "compute_qt_interval",
    "analyze_st_segment",
    "analyze_qrs_complex",
    "Metrics",
    "compute_metrics",
    "ActivityType",
    "ActivitySegment",
    "find_active_segment",
    "validate_segments",
    "ComparisonMetrics",
    "compare_metrics",
    "compare_windows",
    "MetricsMonitor",
    "ComparisonMonitor",
    "decode_ecg_frame",
    "parse_heart_rate",
    "generate_sample_ecg",
    "RecordData",
    "load_record_json",
    "save_record_json",
    "load_samples_csv",
    "load_recording",
]
