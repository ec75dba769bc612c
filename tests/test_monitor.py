import numpy as np
import pytest

from realtime_pipeline.activity import ActivitySegment, ActivityType
from realtime_pipeline.comparison import ComparisonMetrics
from realtime_pipeline.metrics import Metrics
from realtime_pipeline.monitor import ComparisonMonitor, MetricsMonitor, iter_batches


def test_iter_batches(make_samples):
    samples = make_samples(np.arange(10.0))
    batches = list(iter_batches(samples, 4))
    assert [len(b) for b in batches] == [4, 4, 2]
    assert batches[-1][-1] == samples[-1]
    with pytest.raises(ValueError):
        list(iter_batches(samples, 0))


def test_metrics_monitor_waits_for_full_window(make_samples, spike_values, config):
    monitor = MetricsMonitor(config)
    samples = make_samples(spike_values)

    assert not monitor.push(samples[:259])
    assert monitor.metrics == Metrics()
    assert monitor.window is None
    assert monitor.n_passes == 0

    assert monitor.push(samples[259:])
    assert monitor.metrics.heart_rate == 63.0
    assert monitor.n_passes == 1
    assert len(monitor.window) == 260


def test_metrics_monitor_runs_on_every_later_batch(make_samples, spike_values, config):
    monitor = MetricsMonitor(config)
    samples = make_samples(np.concatenate([spike_values, np.zeros(100)]))
    passes = [monitor.push(batch) for batch in iter_batches(samples, 73)]
    assert passes == [False, False, False, True, True]
    assert monitor.n_passes == 2


def test_metrics_monitor_reset(make_samples, spike_values, config):
    monitor = MetricsMonitor(config)
    monitor.push(make_samples(spike_values))
    monitor.reset()
    assert monitor.metrics == Metrics()
    assert monitor.window is None
    assert monitor.n_passes == 0


def test_comparison_needs_both_streams(make_samples, spike_values, config):
    monitor = ComparisonMonitor(config, clock=lambda: 0.0)
    assert not monitor.push_current(make_samples(spike_values))
    assert monitor.comparison == ComparisonMetrics()
    assert monitor.push_baseline(make_samples(spike_values))
    assert monitor.comparison.heart_rate == 63.0
    assert monitor.n_passes == 1


def test_comparison_clock_selects_segment(make_samples, spike_values, config):
    segments = [ActivitySegment(type=ActivityType.RUN, start=1000, end=2000)]
    now = {"ms": 1500.0}
    monitor = ComparisonMonitor(config, segments=segments, clock=lambda: now["ms"])
    monitor.push_baseline(make_samples(spike_values))
    monitor.push_current(make_samples(spike_values))
    assert monitor.comparison.activity is ActivityType.RUN

    now["ms"] = 2000.0
    monitor.recompute()
    assert monitor.comparison.activity is None


def test_signal_reference_uses_last_window_timestamp(make_samples, spike_values, config):
    samples = make_samples(spike_values, start_ms=10000)
    last_ms = samples[-1].timestamp
    segments = [ActivitySegment(type=ActivityType.WALK, start=last_ms, end=last_ms + 6000)]

    monitor = ComparisonMonitor(config, segments=segments, reference="signal")
    monitor.push_baseline(make_samples(spike_values))
    monitor.push_current(samples)
    assert monitor.reference == "signal"
    assert monitor.comparison.activity is ActivityType.WALK


def test_wall_clock_reference_is_default(config):
    monitor = ComparisonMonitor(config)
    assert monitor.reference == "wall_clock"


def test_unknown_reference_rejected(config):
    with pytest.raises(ValueError):
        ComparisonMonitor(config, reference="sensor")


def test_set_segments_recomputes(make_samples, spike_values, config):
    monitor = ComparisonMonitor(config, clock=lambda: 500.0)
    monitor.push_baseline(make_samples(spike_values))
    monitor.push_current(make_samples(spike_values))
    assert monitor.comparison.activity is None

    assert monitor.set_segments([ActivitySegment(type=ActivityType.REST, start=0, end=6000)])
    assert monitor.comparison.activity is ActivityType.REST
