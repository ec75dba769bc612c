"""
Synthetic ECG generation for simulation mode.

Builds a repeating beat from Gaussian P, QRS and T waves with additive noise,
occasional artifacts and a slow baseline wander. Used in place of a connected
sensor, one chunk per simulation tick.
"""

from typing import List, Optional
from dataclasses import dataclass

import numpy as np

from .buffer import Sample
from .config import Config, default_config


@dataclass
class SimulatedECG:
    """One generated chunk of signal."""
    samples: List[Sample]
    actual_hr: float      # Heart rate used after jitter (bpm)
    sampling_rate: int

    @property
    def end_timestamp(self) -> Optional[int]:
        return self.samples[-1].timestamp if self.samples else None


def generate_sample_ecg(
    base_heart_rate: Optional[float] = None,
    duration_sec: float = 5.0,
    start_ms: int = 0,
    start_index: int = 0,
    sampling_rate: Optional[int] = None,
    hr_jitter_bpm: Optional[float] = None,
    noise_mv: Optional[float] = None,
    artifact_probability: Optional[float] = None,
    wander_mv: Optional[float] = None,
    rng: Optional[np.random.Generator] = None,
    config: Config = default_config,
) -> SimulatedECG:
    """
    Generate a synthetic ECG chunk.

    Parameters
    ----------
    base_heart_rate : float, optional
        Nominal heart rate in bpm. Defaults to config.SIM_BASE_HEART_RATE.
    duration_sec : float
        Length of the chunk in seconds.
    start_ms : int
        Timestamp of the first sample.
    start_index : int
        Stream-wide index of the first sample. Chunks of one stream pass
        the running sample count so the beat phase continues across them.
    sampling_rate : int, optional
        Output rate in Hz. Defaults to config.SAMPLING_RATE.
    hr_jitter_bpm : float, optional
        Uniform +/- jitter applied once to the heart rate.
    noise_mv : float, optional
        Peak-to-peak amplitude of the uniform additive noise.
    artifact_probability : float, optional
        Per-sample probability of a large spike artifact.
    wander_mv : float, optional
        Amplitude of the respiratory baseline wander.
    rng : np.random.Generator, optional
        Random source; pass a seeded generator for reproducible output.
    config : Config
        Pipeline configuration holding the SIM_* defaults.

    Returns
    -------
    SimulatedECG
        Samples with integer millisecond timestamps and the heart rate used.
    """
    if base_heart_rate is None:
        base_heart_rate = config.SIM_BASE_HEART_RATE
    if sampling_rate is None:
        sampling_rate = config.SAMPLING_RATE
    if hr_jitter_bpm is None:
        hr_jitter_bpm = config.SIM_HR_JITTER_BPM
    if noise_mv is None:
        noise_mv = config.SIM_NOISE_MV
    if artifact_probability is None:
        artifact_probability = config.SIM_ARTIFACT_PROBABILITY
    if wander_mv is None:
        wander_mv = config.SIM_WANDER_MV
    if rng is None:
        rng = np.random.default_rng()

    total_points = int(duration_sec * sampling_rate)

    actual_hr = base_heart_rate + (rng.random() * 2 - 1) * hr_jitter_bpm
    rr_interval_ms = 60000.0 / actual_hr
    points_per_beat = max(1, int(rr_interval_ms * sampling_rate / 1000))

    # Waveform amplitudes (mV) drawn once per chunk
    p_amplitude = 0.1 + rng.random() * 0.1
    qrs_amplitude = 1.0 + rng.random() * 0.5
    t_amplitude = 0.2 + rng.random() * 0.1

    i = np.arange(total_points)
    stream_index = i + start_index
    t = stream_index / sampling_rate
    beat_position = (stream_index % points_per_beat) / points_per_beat

    values = np.zeros(total_points, dtype=np.float64)

    p_mask = beat_position < 0.15
    p_time = (beat_position[p_mask] - 0.05) * 20
    values[p_mask] += p_amplitude * np.exp(-p_time ** 2)

    qrs_mask = (beat_position >= 0.15) & (beat_position < 0.25)
    qrs_time = (beat_position[qrs_mask] - 0.2) * 50
    values[qrs_mask] += qrs_amplitude * np.exp(-qrs_time ** 2)

    t_mask = (beat_position >= 0.25) & (beat_position < 0.45)
    t_time = (beat_position[t_mask] - 0.35) * 20
    values[t_mask] += t_amplitude * np.exp(-t_time ** 2)

    values += (rng.random(total_points) - 0.5) * noise_mv

    artifacts = rng.random(total_points) < artifact_probability
    values[artifacts] += (rng.random(int(artifacts.sum())) - 0.5) * 0.5

    values += np.sin(t * 0.5) * wander_mv

    timestamps = start_ms + np.floor(i * 1000.0 / sampling_rate + 0.5).astype(np.int64)
    samples = [Sample(timestamp=int(ts), value=float(v)) for ts, v in zip(timestamps, values)]

    return SimulatedECG(samples=samples, actual_hr=float(actual_hr), sampling_rate=int(sampling_rate))
