import numpy as np
import pytest

from realtime_pipeline.buffer import Sample, Window, WindowBuffer


def test_sample_from_dict_rounds_fractional_timestamp():
    sample = Sample.from_dict({"timestamp": 1000.6, "value": "0.25"})
    assert sample == Sample(timestamp=1001, value=0.25)


def test_sample_from_dict_requires_keys():
    with pytest.raises(ValueError):
        Sample.from_dict({"timestamp": 0})


def test_window_arrays_are_read_only(make_window):
    window = make_window([0.0, 1.0, 2.0])
    with pytest.raises(ValueError):
        window.values[0] = 5.0
    with pytest.raises(ValueError):
        window.timestamps[0] = 5


def test_window_duration_and_samples(make_window):
    window = make_window([0.0, 1.0, 2.0], start_ms=100, step_ms=10)
    assert len(window) == 3
    assert window.duration_ms == 20
    assert window.to_samples()[-1] == Sample(timestamp=120, value=2.0)
    assert Window.from_samples([]).duration_ms == 0


def test_buffer_not_ready_until_full_window(make_samples):
    buffer = WindowBuffer(window_size=260, capacity=1000)
    buffer.append(make_samples(np.zeros(259)))
    assert not buffer.is_ready
    assert buffer.current_window() is None

    buffer.append(make_samples([1.0], start_ms=5000))
    window = buffer.current_window()
    assert buffer.is_ready
    assert len(window) == 260
    assert window.values[-1] == 1.0
    assert window.timestamps[-1] == 5000


def test_buffer_evicts_oldest_beyond_capacity(make_samples):
    buffer = WindowBuffer(window_size=5, capacity=8)
    assert buffer.append(make_samples(np.arange(12.0))) == 8
    assert len(buffer) == 8
    window = buffer.current_window()
    np.testing.assert_array_equal(window.values, [7.0, 8.0, 9.0, 10.0, 11.0])


def test_capacity_never_below_window_size():
    buffer = WindowBuffer(window_size=260, capacity=100)
    assert buffer.capacity == 260


def test_window_is_independent_of_later_appends(make_samples):
    buffer = WindowBuffer(window_size=3, capacity=10)
    buffer.append(make_samples([1.0, 2.0, 3.0]))
    snapshot = buffer.current_window()
    buffer.append(make_samples([4.0, 5.0], start_ms=100))
    np.testing.assert_array_equal(snapshot.values, [1.0, 2.0, 3.0])


def test_clear(make_samples):
    buffer = WindowBuffer(window_size=2, capacity=4)
    buffer.append(make_samples([1.0, 2.0]))
    buffer.clear()
    assert len(buffer) == 0
    assert buffer.current_window() is None
