import numpy as np
import pytest

from realtime_pipeline.buffer import Sample, Window
from realtime_pipeline.config import Config


def sample_timestamps(n, start_ms=0, sampling_rate=130):
    """Millisecond timestamps of a stream sampled at ``sampling_rate``."""
    return start_ms + np.floor(np.arange(n) * 1000.0 / sampling_rate + 0.5).astype(np.int64)


@pytest.fixture
def config():
    return Config()


@pytest.fixture
def make_window():
    """Build a Window from values; timestamps follow 130 Hz unless ``step_ms`` is given."""
    def _make(values, start_ms=0, step_ms=None):
        values = np.asarray(values, dtype=np.float64)
        if step_ms is None:
            timestamps = sample_timestamps(len(values), start_ms)
        else:
            timestamps = start_ms + np.arange(len(values), dtype=np.int64) * step_ms
        return Window.from_samples(
            Sample(timestamp=int(ts), value=float(v)) for ts, v in zip(timestamps, values)
        )
    return _make


@pytest.fixture
def make_samples():
    """Samples at 130 Hz from values."""
    def _make(values, start_ms=0):
        timestamps = sample_timestamps(len(values), start_ms)
        return [Sample(timestamp=int(ts), value=float(v)) for ts, v in zip(timestamps, values)]
    return _make


@pytest.fixture
def spike_values():
    """260 zero samples with unit spikes at indices 20 and 143 (RR of 946 ms at 130 Hz)."""
    values = np.zeros(260)
    values[[20, 143]] = 1.0
    return values
