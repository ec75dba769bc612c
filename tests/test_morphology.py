import numpy as np
import pytest

from realtime_pipeline.morphology import (
    QRSComplex,
    STSegment,
    analyze_qrs_complex,
    analyze_st_segment,
    compute_qt_interval,
    find_peak_index,
    find_qrs_bounds,
    find_t_wave_end,
)

ST_DURATION_MS = 10 * 1000.0 / 130


def beat(peak=100, n=260):
    values = np.zeros(n)
    values[peak] = 1.0
    return values


def test_config_offsets(config):
    assert config.qt_search_samples == 52
    assert config.st_start_samples == 10
    assert config.st_end_samples == 20


def test_find_peak_index_uses_last_peak(make_window):
    window = make_window(beat(), step_ms=10)
    assert find_peak_index(window, [500, 1000]) == 100
    assert find_peak_index(window, []) is None
    assert find_peak_index(window, [99999]) is None


def test_qt_at_first_zero_crossing(make_window, config):
    values = beat()
    values[101:110] = 0.2
    values[110] = -0.1
    window = make_window(values, step_ms=10)
    assert find_t_wave_end(window, 100, config) == 110
    assert compute_qt_interval(window, [1000], config) == 100.0


def test_qt_without_crossing_uses_last_scanned_sample(make_window, config):
    window = make_window(beat(), step_ms=10)
    assert compute_qt_interval(window, [1000], config) == 520.0


def test_qt_scan_stops_at_window_end(make_window, config):
    window = make_window(beat(peak=258), step_ms=10)
    assert compute_qt_interval(window, [2580], config) == 10.0

    window = make_window(beat(peak=259), step_ms=10)
    assert compute_qt_interval(window, [2590], config) == 0.0


def test_qt_is_zero_without_usable_peak(make_window, config):
    window = make_window(beat(), step_ms=10)
    assert compute_qt_interval(window, [], config) == 0.0
    assert compute_qt_interval(window, [12345], config) == 0.0


def test_st_segment_mean_over_offsets(make_window, config):
    values = beat()
    values[110:120] = 0.3
    values[120] = 5.0  # just past the exclusive end
    st = analyze_st_segment(make_window(values), [int(make_window(values).timestamps[100])], config)
    assert st.elevation == pytest.approx(0.3)
    assert st.duration == pytest.approx(ST_DURATION_MS)


def test_st_segment_past_window_end(make_window, config):
    window = make_window(beat(peak=255))
    st = analyze_st_segment(window, [int(window.timestamps[255])], config)
    assert st.elevation == 0.0
    assert st.duration == pytest.approx(ST_DURATION_MS)


def test_st_segment_partially_inside_window(make_window, config):
    values = beat(peak=245)
    values[255:] = 0.4
    window = make_window(values)
    st = analyze_st_segment(window, [int(window.timestamps[245])], config)
    assert st.elevation == pytest.approx(0.4)


def test_st_segment_without_peak(make_window, config):
    assert analyze_st_segment(make_window(beat()), [], config) == STSegment()


def test_qrs_bounds_nearest_non_negative(make_window, config):
    values = np.full(260, -0.1)
    values[100] = 1.0
    values[95] = 0.0
    values[104] = 0.2
    window = make_window(values, step_ms=10)
    assert find_qrs_bounds(window, 100, config) == (95, 104)

    qrs = analyze_qrs_complex(window, [1000], config)
    assert qrs.duration == 90.0
    assert qrs.amplitude == 1.0


def test_qrs_bounds_fall_back_to_peak(make_window, config):
    values = np.full(260, -0.1)
    values[100] = 1.0
    window = make_window(values, step_ms=10)
    assert find_qrs_bounds(window, 100, config) == (100, 100)
    assert analyze_qrs_complex(window, [1000], config).duration == 0.0


def test_qrs_search_limited_to_thirty_samples(make_window, config):
    values = np.full(260, -0.1)
    values[100] = 1.0
    values[69] = 0.5   # 31 before
    values[130] = 0.5  # 30 after
    window = make_window(values, step_ms=10)
    assert find_qrs_bounds(window, 100, config) == (100, 130)


def test_qrs_near_window_start(make_window, config):
    values = np.full(260, -0.1)
    values[3] = 1.0
    values[0] = 0.1
    window = make_window(values, step_ms=10)
    assert find_qrs_bounds(window, 3, config) == (0, 3)


def test_qrs_without_peak(make_window, config):
    assert analyze_qrs_complex(make_window(beat()), [], config) == QRSComplex()
