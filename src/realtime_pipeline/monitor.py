"""
Live monitors that publish metrics as sample batches arrive.

A monitor owns the sample buffer(s) of its stream(s), runs a full analysis
pass on every batch once a complete window is available, and otherwise keeps
publishing the last value it computed (zeros before the first pass).
"""

import time
from typing import Callable, Iterable, Iterator, List, Optional, Sequence

from .activity import ActivitySegment
from .buffer import Sample, Window, WindowBuffer
from .comparison import ComparisonMetrics, compare_windows
from .config import Config, default_config
from .metrics import Metrics, compute_metrics

REFERENCE_MODES = ("wall_clock", "signal")


def wall_clock_ms() -> float:
    """Current wall-clock time in milliseconds."""
    return time.time() * 1000.0


def iter_batches(samples: Sequence[Sample], batch_size: int) -> Iterator[List[Sample]]:
    """Split a recording into consecutive batches, as the sensor delivers them."""
    if batch_size < 1:
        raise ValueError(f"batch_size must be >= 1 (got {batch_size})")
    for start in range(0, len(samples), batch_size):
        yield list(samples[start:start + batch_size])


class MetricsMonitor:
    """Publishes the Metrics of the latest window of one stream."""

    def __init__(self, config: Config = default_config) -> None:
        self.config = config
        self.buffer = WindowBuffer(config.WINDOW_SIZE, config.BUFFER_CAPACITY)
        self.metrics: Metrics = Metrics()
        self.n_passes: int = 0

    def push(self, batch: Iterable[Sample]) -> bool:
        """
        Append a batch and recompute.

        Returns True if a new analysis pass ran, False if the stream does not
        hold a full window yet (the published metrics are left unchanged).
        """
        self.buffer.append(batch)
        window = self.buffer.current_window()
        if window is None:
            return False
        self.metrics = compute_metrics(window, self.config)
        self.n_passes += 1
        return True

    @property
    def window(self) -> Optional[Window]:
        return self.buffer.current_window()

    def reset(self) -> None:
        self.buffer.clear()
        self.metrics = Metrics()
        self.n_passes = 0


class ComparisonMonitor:
    """
    Publishes ComparisonMetrics of a current stream against a baseline stream.

    The active activity segment is chosen with a reference instant taken at
    recompute time. By default that instant is the wall clock
    (``config.ACTIVITY_REFERENCE == "wall_clock"``); ``"signal"`` uses the last
    timestamp of the current window instead. An explicit ``clock`` callable
    overrides both.
    """

    def __init__(
        self,
        config: Config = default_config,
        segments: Optional[Iterable[ActivitySegment]] = None,
        clock: Optional[Callable[[], float]] = None,
        reference: Optional[str] = None,
    ) -> None:
        if reference is None:
            reference = config.ACTIVITY_REFERENCE
        if reference not in REFERENCE_MODES:
            raise ValueError(f"Unknown activity reference {reference!r} (expected one of {REFERENCE_MODES})")

        self.config = config
        self.reference = reference
        self.clock = clock
        self.segments: List[ActivitySegment] = list(segments) if segments else []
        self.baseline_buffer = WindowBuffer(config.WINDOW_SIZE, config.BUFFER_CAPACITY)
        self.current_buffer = WindowBuffer(config.WINDOW_SIZE, config.BUFFER_CAPACITY)
        self.comparison: ComparisonMetrics = ComparisonMetrics()
        self.n_passes: int = 0

    def push_baseline(self, batch: Iterable[Sample]) -> bool:
        self.baseline_buffer.append(batch)
        return self.recompute()

    def push_current(self, batch: Iterable[Sample]) -> bool:
        self.current_buffer.append(batch)
        return self.recompute()

    def set_segments(self, segments: Iterable[ActivitySegment]) -> bool:
        """Replace the activity segments and recompute."""
        self.segments = list(segments)
        return self.recompute()

    def reference_instant(self, current_window: Window) -> float:
        if self.clock is not None:
            return float(self.clock())
        if self.reference == "signal":
            return float(current_window.timestamps[-1])
        return wall_clock_ms()

    def recompute(self) -> bool:
        """Run a comparison pass if both streams hold a full window."""
        baseline_window = self.baseline_buffer.current_window()
        current_window = self.current_buffer.current_window()
        if baseline_window is None or current_window is None:
            return False

        self.comparison = compare_windows(
            baseline_window,
            current_window,
            self.segments,
            self.reference_instant(current_window),
            self.config,
        )
        self.n_passes += 1
        return True
