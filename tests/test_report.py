import numpy as np

from realtime_pipeline.report import create_window_report


def test_report_contains_summary(make_window, spike_values, config):
    html = create_window_report(make_window(spike_values), "session-1", config=config)
    assert "<html>" in html
    assert "session-1" in html
    assert "R-peaks" in html


def test_report_for_flat_window(make_window, config):
    html = create_window_report(make_window(np.zeros(260)), "flat", config=config)
    assert "flat" in html
