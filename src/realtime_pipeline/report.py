"""
Window inspection report.

Renders one analysis window as an interactive Plotly HTML page: waveform with
the detection threshold, R-peaks, the T-wave end, the ST region and the Q/S
boundaries of the last beat, plus the RR intervals of the window.
"""

from typing import Optional

import numpy as np
import plotly.graph_objects as go
from plotly.subplots import make_subplots

from .buffer import Window
from .config import Config, default_config
from .metrics import Metrics, compute_metrics
from .morphology import find_peak_index, find_qrs_bounds, find_t_wave_end, st_bounds
from .rpeak import detect_rpeaks


def create_window_report(
    window: Window,
    title: str,
    metrics: Optional[Metrics] = None,
    config: Config = default_config,
) -> str:
    """
    Create interactive HTML report of one analysis window using Plotly.

    Parameters
    ----------
    window : Window
        Analysed window.
    title : str
        Name shown in the report header (e.g. the recording name).
    metrics : Metrics, optional
        Metrics of the window; recomputed when omitted.
    config : Config
        Pipeline configuration.

    Returns
    -------
    str
        HTML string of the report.
    """
    if metrics is None:
        metrics = compute_metrics(window, config)
    detection = detect_rpeaks(window, config)

    fig = make_subplots(
        rows=2, cols=1,
        subplot_titles=(
            "Analysis Window with Landmarks",
            "RR Intervals",
        ),
        row_heights=[0.7, 0.3],
        vertical_spacing=0.12,
    )

    color_ecg = "rgb(0, 100, 200)"
    color_peaks = "rgb(255, 0, 0)"
    color_threshold = "rgba(255, 140, 0, 0.8)"

    t0 = int(window.timestamps[0]) if len(window) > 0 else 0
    time = (window.timestamps - t0) / 1000.0

    # Row 1: waveform and landmarks
    fig.add_trace(
        go.Scatter(
            x=time, y=window.values,
            mode='lines', name='ECG',
            line=dict(color=color_ecg, width=1),
        ),
        row=1, col=1
    )

    if len(window) >= config.MIN_PEAK_SAMPLES:
        fig.add_hline(
            y=detection.threshold, line_dash="dash", line_color=color_threshold,
            annotation_text="threshold", row=1, col=1,
        )

    if detection.n_peaks > 0:
        idx = np.asarray(detection.peak_indices, dtype=int)
        fig.add_trace(
            go.Scatter(
                x=time[idx], y=window.values[idx],
                mode='markers', name='R-peaks',
                marker=dict(color=color_peaks, size=8, symbol='x'),
            ),
            row=1, col=1
        )

    peak_index = find_peak_index(window, detection.peak_times)
    if peak_index is not None:
        st_start, st_end = st_bounds(window, peak_index, config)
        if st_end > st_start:
            fig.add_vrect(
                x0=time[st_start], x1=time[st_end - 1],
                fillcolor="green", opacity=0.15, line_width=0,
                annotation_text="ST", row=1, col=1,
            )

        t_end = find_t_wave_end(window, peak_index, config)
        q_index, s_index = find_qrs_bounds(window, peak_index, config)
        landmarks = [("T end", t_end, "purple"), ("Q", q_index, "black"), ("S", s_index, "gray")]
        for name, index, color in landmarks:
            fig.add_trace(
                go.Scatter(
                    x=[time[index]], y=[window.values[index]],
                    mode='markers', name=name,
                    marker=dict(color=color, size=9, symbol='diamond'),
                ),
                row=1, col=1
            )

    # Row 2: RR intervals
    rr_intervals = detection.get_rr_intervals_ms()
    if len(rr_intervals) > 0:
        fig.add_trace(
            go.Bar(
                x=[f"RR{i + 1}" for i in range(len(rr_intervals))],
                y=rr_intervals,
                name='RR (ms)',
                marker_color=color_ecg,
                showlegend=False,
            ),
            row=2, col=1
        )

    summary_lines = [
        f"<b>Window:</b> {title} | <b>Samples:</b> {len(window)} | "
        f"<b>Span:</b> {window.duration_ms} ms | <b>Fs:</b> {config.SAMPLING_RATE}Hz",
        f"<b>HR:</b> {metrics.heart_rate:.0f} bpm | <b>HRV (SDNN):</b> {metrics.heart_rate_variability:.1f} ms | "
        f"<b>QT:</b> {metrics.qt_interval:.0f} ms | <b>R-peaks:</b> {len(metrics.r_peaks)}",
        f"<b>ST:</b> {metrics.st_segment.elevation:.3f} over {metrics.st_segment.duration:.1f} ms | "
        f"<b>QRS:</b> {metrics.qrs_complex.duration:.0f} ms, amplitude {metrics.qrs_complex.amplitude:.3f}",
    ]

    fig.update_layout(
        title=dict(
            text="<br>".join(summary_lines),
            x=0.5,
            xanchor='center',
            font=dict(size=12),
        ),
        height=config.REPORT_HEIGHT,
        showlegend=True,
        template="plotly_white",
    )

    fig.update_xaxes(title_text="Time (s)", row=1, col=1)
    fig.update_yaxes(title_text="Amplitude", row=1, col=1)
    fig.update_yaxes(title_text="RR (ms)", row=2, col=1)

    return fig.to_html(
        full_html=True,
        include_plotlyjs=True,
        config={
            'displayModeBar': True,
            'scrollZoom': True,
        }
    )
