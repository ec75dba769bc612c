import numpy as np

from realtime_pipeline.buffer import Window
from realtime_pipeline.metrics import compute_metrics
from realtime_pipeline.simulate import generate_sample_ecg


def clean_ecg(config, heart_rate=63.0, duration_sec=2.0, seed=0, noise_mv=0.02, **kwargs):
    return generate_sample_ecg(
        base_heart_rate=heart_rate,
        duration_sec=duration_sec,
        hr_jitter_bpm=0.0,
        noise_mv=noise_mv,
        artifact_probability=0.0,
        wander_mv=0.0,
        rng=np.random.default_rng(seed),
        config=config,
        **kwargs,
    )


def test_chunk_length_and_timestamps(config):
    chunk = generate_sample_ecg(duration_sec=1.0, start_ms=5000, rng=np.random.default_rng(1), config=config)
    assert len(chunk.samples) == 130
    assert chunk.samples[0].timestamp == 5000
    assert chunk.samples[1].timestamp == 5008
    assert chunk.end_timestamp == 5000 + 992
    assert chunk.sampling_rate == 130


def test_seeded_generation_is_reproducible(config):
    first = generate_sample_ecg(rng=np.random.default_rng(42), config=config)
    second = generate_sample_ecg(rng=np.random.default_rng(42), config=config)
    assert first.samples == second.samples
    assert first.actual_hr == second.actual_hr


def test_jitter_bounds(config):
    rng = np.random.default_rng(5)
    for _ in range(20):
        chunk = generate_sample_ecg(base_heart_rate=60.0, hr_jitter_bpm=10.0, duration_sec=0.1, rng=rng, config=config)
        assert 50.0 <= chunk.actual_hr <= 70.0


def test_zero_duration_chunk(config):
    chunk = generate_sample_ecg(duration_sec=0.0, rng=np.random.default_rng(0), config=config)
    assert chunk.samples == []
    assert chunk.end_timestamp is None


def test_heart_rate_recovered_from_synthetic_window(config):
    chunk = clean_ecg(config)
    assert len(chunk.samples) == config.WINDOW_SIZE

    metrics = compute_metrics(Window.from_samples(chunk.samples), config)
    assert 2 <= len(metrics.r_peaks) <= 3
    assert abs(metrics.heart_rate - 63.0) <= 10.0
    assert metrics.qrs_complex.amplitude > 0.8


def test_beat_phase_continues_across_chunks(config):
    whole = clean_ecg(config, heart_rate=90.0, duration_sec=2.0, noise_mv=0.0)
    first = clean_ecg(config, heart_rate=90.0, duration_sec=1.0, noise_mv=0.0)
    second = clean_ecg(
        config, heart_rate=90.0, duration_sec=1.0, noise_mv=0.0,
        start_ms=first.end_timestamp + 8, start_index=len(first.samples),
    )
    joined = [s.value for s in first.samples + second.samples]
    np.testing.assert_allclose(joined, [s.value for s in whole.samples])
