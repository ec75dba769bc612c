"""
I/O utilities for the real-time ECG pipeline.

Handles:
- Stored recording JSON (user, datetime, ECG, HR, activity segments)
- Sample CSV loading with NaN repair
- Metrics JSON / CSV export
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence
from dataclasses import dataclass, field

import numpy as np
import pandas as pd

from .activity import ActivitySegment, clamp_segment, validate_segments
from .buffer import Sample
from .config import Config, default_config
from .metrics import Metrics

RECORD_REQUIRED_FIELDS = ("user_id", "datetime", "ecg", "hr", "activity_segments")


@dataclass
class RecordData:
    """One stored recording session."""
    user_id: str
    datetime: str                                   # ISO-8601
    ecg: List[Sample] = field(default_factory=list)
    hr: List[Sample] = field(default_factory=list)  # Heart rate readings (bpm)
    activity_segments: List[ActivitySegment] = field(default_factory=list)

    @property
    def n_samples(self) -> int:
        """Number of ECG samples."""
        return len(self.ecg)

    @property
    def duration_seconds(self) -> float:
        """Span of the ECG samples in seconds."""
        if len(self.ecg) < 2:
            return 0.0
        return (self.ecg[-1].timestamp - self.ecg[0].timestamp) / 1000.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "user_id": self.user_id,
            "datetime": self.datetime,
            "ecg": [s.to_dict() for s in self.ecg],
            "hr": [s.to_dict() for s in self.hr],
            "activity_segments": [seg.to_dict() for seg in self.activity_segments],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RecordData":
        """Create RecordData from a stored record.

        Unknown keys (e.g. a database ``_id``) are ignored.
        """
        missing = [k for k in RECORD_REQUIRED_FIELDS if k not in data]
        if missing:
            raise ValueError(f"Record is missing fields: {', '.join(missing)}")
        return cls(
            user_id=str(data["user_id"]),
            datetime=str(data["datetime"]),
            ecg=[Sample.from_dict(p) for p in data["ecg"]],
            hr=[Sample.from_dict(p) for p in data["hr"]],
            activity_segments=[ActivitySegment.from_dict(s) for s in data["activity_segments"]],
        )


def load_record_json(
    json_path: Path,
    config: Config = default_config,
) -> RecordData:
    """
    Load a stored recording from JSON.

    Activity segments are checked against the editor's invariants
    (no overlap, minimum duration), returned sorted by start and clipped to
    the span of the ECG samples. Segments entirely outside it are dropped.

    Raises
    ------
    FileNotFoundError
        If the JSON file does not exist.
    ValueError
        If required fields are missing or segments are invalid.
    """
    json_path = Path(json_path)
    if not json_path.exists():
        raise FileNotFoundError(f"Record file not found: {json_path}")

    with open(json_path, 'r', encoding='utf-8') as f:
        data = json.load(f)

    record = RecordData.from_dict(data)
    segments = validate_segments(record.activity_segments, config)
    if record.ecg:
        recording_start = record.ecg[0].timestamp
        recording_end = record.ecg[-1].timestamp + 1
        clipped = (clamp_segment(s, recording_start, recording_end) for s in segments)
        segments = [s for s in clipped if s is not None]
    record.activity_segments = segments
    return record


def save_record_json(
    record: RecordData,
    output_path: Path,
) -> None:
    """Save a recording to JSON in the storage layer's record shape."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(record.to_dict(), f, indent=2, ensure_ascii=False)


def load_samples_csv(csv_path: Path) -> List[Sample]:
    """
    Load ECG samples from a CSV with timestamp and value columns.

    Column names are matched case-insensitively: the first column containing
    "timestamp" (or "time") and the first containing "value" (or "ecg").
    NaN values are linearly interpolated.

    Raises
    ------
    FileNotFoundError
        If CSV file does not exist.
    ValueError
        If required columns are missing or a timestamp is NaN.
    """
    csv_path = Path(csv_path)
    if not csv_path.exists():
        raise FileNotFoundError(f"Sample file not found: {csv_path}")

    df = pd.read_csv(csv_path)

    timestamp_column = _find_column(df, ("timestamp", "time"))
    value_column = _find_column(df, ("value", "ecg"))
    if timestamp_column is None or value_column is None:
        raise ValueError(
            f"No timestamp/value columns found in {csv_path}. Columns: {list(df.columns)}"
        )

    values = df[value_column].to_numpy(dtype=np.float64, copy=True)
    if np.any(np.isnan(values)):
        nan_count = int(np.sum(np.isnan(values)))
        print(f"  ⚠ Warning: {nan_count} NaN values found, interpolating...")
        values = (
            pd.Series(values)
            .interpolate(method="linear")
            .bfill()
            .ffill()
            .to_numpy(dtype=np.float64)
        )

    raw_timestamps = df[timestamp_column].to_numpy(dtype=np.float64)
    if np.any(np.isnan(raw_timestamps)):
        nan_rows = np.flatnonzero(np.isnan(raw_timestamps)).tolist()
        raise ValueError(f"NaN timestamps in {csv_path} at rows {nan_rows}")
    timestamps = np.floor(raw_timestamps + 0.5).astype(np.int64)

    return [Sample(timestamp=int(ts), value=float(v)) for ts, v in zip(timestamps, values)]


def load_recording(
    path: Path,
    config: Config = default_config,
) -> RecordData:
    """
    Load a recording from a record JSON or a sample CSV.

    A CSV carries ECG samples only; the other record fields are left empty.
    """
    path = Path(path)
    if path.suffix.lower() == ".json":
        return load_record_json(path, config)
    if path.suffix.lower() == ".csv":
        return RecordData(user_id="", datetime="", ecg=load_samples_csv(path))
    raise ValueError(f"Unsupported recording format: {path.suffix} (expected .json or .csv)")


def _find_column(df: pd.DataFrame, keys: Sequence[str]) -> Optional[str]:
    for key in keys:
        for col in df.columns:
            if key in str(col).lower():
                return col
    return None


def save_metrics_json(
    metrics: Metrics,
    output_path: Path,
) -> None:
    """Save one Metrics (or ComparisonMetrics) record in its JSON shape."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(metrics.to_dict(), f, indent=2, ensure_ascii=False)


def metrics_to_frame(
    passes: Sequence[Metrics],
    window_end_times: Optional[Sequence[int]] = None,
) -> pd.DataFrame:
    """
    Tabulate a sequence of analysis passes.

    Parameters
    ----------
    passes : Sequence[Metrics]
        Metrics (or ComparisonMetrics) in pass order.
    window_end_times : Sequence[int], optional
        Timestamp of the last sample of each pass's window.

    Returns
    -------
    pd.DataFrame
        One row per pass, columns from ``to_flat_dict``.
    """
    rows = []
    for i, metrics in enumerate(passes):
        row: Dict[str, Any] = {"pass_index": i}
        if window_end_times is not None:
            row["window_end_ms"] = int(window_end_times[i])
        row.update(metrics.to_flat_dict())
        rows.append(row)
    return pd.DataFrame(rows)


def list_record_files(config: Config = default_config) -> List[Path]:
    """List stored recording JSON files under the records directory."""
    records_dir = config.get_records_dir()
    if not records_dir.exists():
        return []
    return sorted(records_dir.glob("*.json"))
