"""
Trailing sample buffer for real-time ECG analysis.

Provides:
- Sample: one timestamped amplitude reading
- Window: immutable snapshot of the most recent samples
- WindowBuffer: bounded, lock-guarded store that hands out Window copies
"""

from collections import deque
from dataclasses import dataclass
from threading import Lock
from typing import Any, Deque, Dict, Iterable, List, Optional

import numpy as np

from .config import default_config


@dataclass(frozen=True)
class Sample:
    """Single ECG reading."""
    timestamp: int   # Milliseconds, non-decreasing within a stream
    value: float     # Signal amplitude (device units)

    def to_dict(self) -> Dict[str, Any]:
        return {"timestamp": self.timestamp, "value": self.value}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Sample":
        """Create a Sample from a ``{timestamp, value}`` mapping.

        Fractional timestamps (the browser recorder stores ``Date.now() + i *
        1000 / 130``) are rounded to the nearest millisecond.
        """
        if "timestamp" not in data or "value" not in data:
            raise ValueError(f"Sample requires 'timestamp' and 'value': {data!r}")
        return cls(timestamp=int(round(float(data["timestamp"]))), value=float(data["value"]))


@dataclass(frozen=True)
class Window:
    """Immutable slice of a sample stream used for one analysis pass.

    Both arrays are read-only copies, so a Window can be shared freely
    between passes.
    """
    timestamps: np.ndarray  # int64, milliseconds
    values: np.ndarray      # float64

    @classmethod
    def from_samples(cls, samples: Iterable[Sample]) -> "Window":
        samples = list(samples)
        timestamps = np.array([s.timestamp for s in samples], dtype=np.int64)
        values = np.array([s.value for s in samples], dtype=np.float64)
        timestamps.flags.writeable = False
        values.flags.writeable = False
        return cls(timestamps=timestamps, values=values)

    def __len__(self) -> int:
        return len(self.values)

    @property
    def duration_ms(self) -> int:
        """Span between first and last sample."""
        if len(self.timestamps) == 0:
            return 0
        return int(self.timestamps[-1] - self.timestamps[0])

    def to_samples(self) -> List[Sample]:
        return [
            Sample(timestamp=int(ts), value=float(v))
            for ts, v in zip(self.timestamps, self.values)
        ]


class WindowBuffer:
    """
    Bounded trailing store of samples for one stream.

    Batches are appended under a lock and windows are copied out under the
    same lock, so a reader never observes a half-applied batch. Older samples
    fall off the left once ``capacity`` is exceeded; the complete history
    belongs to the ingestion side, not to this buffer.
    """

    def __init__(self, window_size: Optional[int] = None, capacity: Optional[int] = None) -> None:
        """
        Args:
            window_size:
                Number of samples in one analysis window. Defaults to
                ``default_config.WINDOW_SIZE``.
            capacity:
                Maximum samples retained. Never smaller than ``window_size``.
        """
        if window_size is None:
            window_size = default_config.WINDOW_SIZE
        if capacity is None:
            capacity = default_config.BUFFER_CAPACITY
        self.window_size: int = int(window_size)
        self.capacity: int = max(int(capacity), self.window_size)
        self._samples: Deque[Sample] = deque(maxlen=self.capacity)
        self._lock: Lock = Lock()

    def append(self, batch: Iterable[Sample]) -> int:
        """Append a batch of samples; returns the number of samples held."""
        batch = list(batch)
        with self._lock:
            self._samples.extend(batch)
            return len(self._samples)

    def current_window(self) -> Optional[Window]:
        """Snapshot of the last ``window_size`` samples, or None if not ready."""
        with self._lock:
            if len(self._samples) < self.window_size:
                return None
            recent = list(self._samples)[-self.window_size:]
        return Window.from_samples(recent)

    @property
    def is_ready(self) -> bool:
        with self._lock:
            return len(self._samples) >= self.window_size

    def clear(self) -> None:
        with self._lock:
            self._samples.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._samples)
