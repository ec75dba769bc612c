#!/usr/bin/env python3
"""
Run the real-time pipeline on a simulated sensor.

This script stands in for a connected chest strap:
1. Generate a 5 s resting baseline and load it into the comparison monitor
2. Every tick, generate the next chunk of synthetic ECG
3. Push the chunk to the metrics and comparison monitors
4. Print the published values for the tick
5. Optionally save the generated samples and per-tick metrics to CSV

The activity lookup uses the signal timestamps, so --activity applies the
chosen activity to the whole simulated session.

Usage:
    python src/run_simulation.py --ticks 10
    python src/run_simulation.py --ticks 30 --base-hr 90 --activity run --seed 1
    python src/run_simulation.py --ticks 20 --no-sleep --save sim_session

Output (--save NAME):
    Results/metrics_{NAME}.csv   - One row per tick
    Results/{NAME}.csv           - Generated timestamp/value samples
"""

import argparse
import sys
import time
from pathlib import Path
from typing import List, Optional, Sequence
from dataclasses import dataclass, field

import numpy as np
import pandas as pd

# Ensure this script works when executed from any CWD.
sys.path.insert(0, str(Path(__file__).resolve().parent))

from realtime_pipeline.activity import ActivitySegment, ActivityType
from realtime_pipeline.buffer import Sample
from realtime_pipeline.comparison import ComparisonMetrics
from realtime_pipeline.config import Config
from realtime_pipeline.metrics import Metrics
from realtime_pipeline.monitor import ComparisonMonitor, MetricsMonitor
from realtime_pipeline.simulate import generate_sample_ecg

BASELINE_DURATION_SEC = 5.0


@dataclass
class SimulationResult:
    """Samples generated and values published during a simulated session."""
    samples: List[Sample] = field(default_factory=list)
    metrics: List[Metrics] = field(default_factory=list)
    comparisons: List[ComparisonMetrics] = field(default_factory=list)
    tick_end_times: List[int] = field(default_factory=list)
    actual_hr: List[float] = field(default_factory=list)


def run_simulation(
    config: Config,
    n_ticks: int,
    chunk_sec: Optional[float] = None,
    base_heart_rate: Optional[float] = None,
    activity: Optional[ActivityType] = None,
    seed: Optional[int] = None,
    sleep: bool = False,
    verbose: bool = True,
) -> SimulationResult:
    """
    Drive both monitors with synthetic ECG, one chunk per tick.

    Parameters
    ----------
    config : Config
        Pipeline configuration (SIM_* values give the generator defaults).
    n_ticks : int
        Number of chunks to generate after the baseline.
    chunk_sec : float, optional
        Seconds of signal per tick. Defaults to config.SIM_TICK_SEC.
    base_heart_rate : float, optional
        Nominal heart rate of the session.
    activity : ActivityType, optional
        Activity applied to the whole session.
    seed : int, optional
        Seed for reproducible signals.
    sleep : bool
        Wait config.SIM_TICK_SEC between ticks, as a live sensor would.
    verbose : bool
        Print one line per tick.
    """
    if n_ticks < 0:
        raise ValueError(f"n_ticks must be >= 0 (got {n_ticks})")
    if chunk_sec is None:
        chunk_sec = config.SIM_TICK_SEC

    rng = np.random.default_rng(seed)

    baseline = generate_sample_ecg(
        base_heart_rate=config.SIM_BASE_HEART_RATE,
        duration_sec=BASELINE_DURATION_SEC,
        rng=rng,
        config=config,
    )
    start_ms = baseline.end_timestamp + 1

    segments = []
    if activity is not None:
        session_end = start_ms + int((n_ticks + 1) * chunk_sec * 1000)
        segments.append(ActivitySegment(type=activity, start=start_ms, end=session_end))

    metrics_monitor = MetricsMonitor(config)
    comparison_monitor = ComparisonMonitor(config, segments=segments, reference="signal")
    comparison_monitor.push_baseline(baseline.samples)

    result = SimulationResult()
    next_ms = start_ms
    next_index = 0
    for tick in range(n_ticks):
        chunk = generate_sample_ecg(
            base_heart_rate=base_heart_rate,
            duration_sec=chunk_sec,
            start_ms=next_ms,
            start_index=next_index,
            rng=rng,
            config=config,
        )
        if chunk.samples:
            next_ms = chunk.end_timestamp + 1
        next_index += len(chunk.samples)

        metrics_monitor.push(chunk.samples)
        comparison_monitor.push_current(chunk.samples)

        result.samples.extend(chunk.samples)
        result.metrics.append(metrics_monitor.metrics)
        result.comparisons.append(comparison_monitor.comparison)
        result.tick_end_times.append(next_ms - 1)
        result.actual_hr.append(chunk.actual_hr)

        if verbose:
            m = metrics_monitor.metrics
            c = comparison_monitor.comparison
            print(
                f"  [{tick + 1:>3}/{n_ticks}] generated {chunk.actual_hr:5.1f} bpm | "
                f"HR {m.heart_rate:5.0f} | SDNN {m.heart_rate_variability:6.1f} ms | "
                f"QT {m.qt_interval:5.0f} ms | HR recovery {c.heart_rate_recovery:6.1f}"
            )

        if sleep and tick < n_ticks - 1:
            time.sleep(config.SIM_TICK_SEC)

    return result


def simulation_to_frame(result: SimulationResult) -> pd.DataFrame:
    """One row per tick: metrics, comparison deltas and generated heart rate."""
    rows = []
    for i, (m, c) in enumerate(zip(result.metrics, result.comparisons)):
        row = {
            "tick": i + 1,
            "tick_end_ms": result.tick_end_times[i],
            "generated_hr": result.actual_hr[i],
        }
        row.update(m.to_flat_dict())
        row["heart_rate_recovery"] = c.heart_rate_recovery
        row["st_deviation"] = c.st_deviation
        row["hrv_change"] = c.hrv_change
        row["qt_change"] = c.qt_change
        row["activity"] = c.activity.value if c.activity is not None else ""
        rows.append(row)
    return pd.DataFrame(rows)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Run the real-time ECG analysis on a simulated sensor",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--ticks", "-t",
        type=int,
        default=10,
        help="Number of simulated notifications (default: 10)"
    )

    parser.add_argument(
        "--chunk-sec",
        type=float,
        default=None,
        help="Seconds of signal generated per tick (default: config SIM_TICK_SEC)"
    )

    parser.add_argument(
        "--base-hr",
        type=float,
        default=None,
        help="Nominal heart rate in bpm (default: config SIM_BASE_HEART_RATE)"
    )

    parser.add_argument(
        "--activity", "-a",
        choices=[a.value for a in ActivityType],
        default=None,
        help="Activity applied to the whole session"
    )

    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducible signals"
    )

    parser.add_argument(
        "--no-sleep",
        action="store_true",
        help="Do not wait between ticks"
    )

    parser.add_argument(
        "--save",
        type=str,
        default=None,
        metavar="NAME",
        help="Save per-tick metrics and generated samples under NAME"
    )

    parser.add_argument(
        "--results-dir",
        type=str,
        default=None,
        help="Directory for outputs (default: Results/)"
    )

    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress progress messages"
    )

    args = parser.parse_args(argv)

    config = Config()
    if args.results_dir:
        config.RESULTS_DIR = str(Path(args.results_dir).resolve())

    verbose = not args.quiet
    activity = ActivityType(args.activity) if args.activity else None

    if verbose:
        print("=" * 60)
        print("Real-time ECG Analysis - Simulation Mode")
        print("=" * 60)
        print(f"Ticks: {args.ticks} | Sampling rate: {config.SAMPLING_RATE} Hz")
        if activity is not None:
            print(f"Activity: {activity.value}")

    try:
        result = run_simulation(
            config,
            n_ticks=args.ticks,
            chunk_sec=args.chunk_sec,
            base_heart_rate=args.base_hr,
            activity=activity,
            seed=args.seed,
            sleep=not args.no_sleep,
            verbose=verbose,
        )
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    if args.save:
        df = simulation_to_frame(result)
        metrics_path = config.get_metrics_path(args.save)
        df.to_csv(metrics_path, index=False)

        samples_path = metrics_path.parent / f"{args.save}.csv"
        pd.DataFrame(
            {"timestamp": [s.timestamp for s in result.samples],
             "value": [s.value for s in result.samples]}
        ).to_csv(samples_path, index=False)

        if verbose:
            print(f"\n  ✓ Metrics: {metrics_path}")
            print(f"  ✓ Samples: {samples_path}")

    if verbose and result.metrics:
        final = result.metrics[-1]
        print("\n" + "=" * 60)
        print("SUMMARY")
        print("=" * 60)
        print(f"Samples generated: {len(result.samples):,}")
        print(f"Final HR: {final.heart_rate:.0f} bpm | HRV: {final.heart_rate_variability:.1f} ms")
        print(f"Final QT: {final.qt_interval:.0f} ms | R-peaks in window: {len(final.r_peaks)}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
