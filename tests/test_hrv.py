import numpy as np
import pytest

from realtime_pipeline.hrv import (
    compute_heart_rate,
    compute_hrv_sdnn,
    compute_interval_metrics,
    compute_rr_intervals,
)


def test_rr_intervals():
    np.testing.assert_array_equal(compute_rr_intervals([0, 800, 1700]), [800.0, 900.0])
    assert compute_rr_intervals([100]).size == 0


def test_heart_rate_from_mean_rr():
    assert compute_heart_rate([0, 1000]) == 60.0
    assert compute_heart_rate([0, 946]) == 63.0
    assert compute_heart_rate([0, 500, 1000, 1500]) == 120.0


def test_heart_rate_rounds_half_up():
    # 60000 / 960 = 62.5
    assert compute_heart_rate([0, 960]) == 63.0


def test_heart_rate_needs_two_distinct_peaks():
    assert compute_heart_rate([]) == 0.0
    assert compute_heart_rate([500]) == 0.0
    assert compute_heart_rate([500, 500]) == 0.0


def test_sdnn_requires_six_peaks(config):
    assert compute_hrv_sdnn([0, 900, 2000, 2900, 4000], config) == 0.0


def test_sdnn_is_population_std(config):
    peaks = [0, 900, 2000, 2900, 4000, 4900]
    # RR 900, 1100, 900, 1100, 900 -> variance 9600
    assert compute_hrv_sdnn(peaks, config) == pytest.approx(np.sqrt(9600.0))


def test_sdnn_of_regular_rhythm_is_zero(config):
    assert compute_hrv_sdnn([0, 1000, 2000, 3000, 4000, 5000], config) == 0.0


def test_interval_metrics(config):
    metrics = compute_interval_metrics([0, 1000, 2000], config)
    assert metrics.heart_rate == 60.0
    assert metrics.sdnn == 0.0
    assert metrics.n_intervals == 2
