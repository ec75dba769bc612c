#!/usr/bin/env python3
"""
Compare a recording against a baseline recording.

This script replays two recordings through the comparison monitor:
1. Load the baseline and current recordings (record JSON or CSV)
2. Pre-populate the baseline stream
3. Replay the current stream batch by batch with its activity segments
4. Export every comparison pass to CSV and the final pass to JSON

The active activity segment is looked up at each pass with either the wall
clock (default, matches the live application) or the last timestamp of the
current window (--reference signal, for offline recordings).

Usage:
    python src/run_baseline_comparison.py --baseline rest.json --current walk.json
    python src/run_baseline_comparison.py --baseline rest.json --current walk.json --reference signal

Output:
    Results/comparison_{name}.csv   - One row per comparison pass
    Results/comparison_{name}.json  - ComparisonMetrics of the final pass
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional, Sequence
from dataclasses import dataclass, field

# Ensure this script works when executed from any CWD.
sys.path.insert(0, str(Path(__file__).resolve().parent))

from realtime_pipeline.comparison import ComparisonMetrics
from realtime_pipeline.config import Config
from realtime_pipeline.io_utils import (
    RecordData,
    load_recording,
    metrics_to_frame,
    save_metrics_json,
)
from realtime_pipeline.monitor import REFERENCE_MODES, ComparisonMonitor, iter_batches


@dataclass
class ComparisonReplay:
    """Outcome of replaying a recording against a baseline."""
    reference: str
    passes: List[ComparisonMetrics] = field(default_factory=list)
    window_end_times: List[int] = field(default_factory=list)
    final: ComparisonMetrics = field(default_factory=ComparisonMetrics)


def replay_comparison(
    baseline: RecordData,
    current: RecordData,
    config: Config,
    batch_size: Optional[int] = None,
    reference: Optional[str] = None,
) -> ComparisonReplay:
    """
    Run the comparison monitor over two recordings.

    The baseline is pushed in full before the current recording is replayed,
    as in the live application where the baseline is loaded up front.
    """
    if batch_size is None:
        batch_size = config.PMD_SAMPLES_PER_FRAME

    monitor = ComparisonMonitor(config, segments=current.activity_segments, reference=reference)
    monitor.push_baseline(baseline.ecg)

    result = ComparisonReplay(reference=monitor.reference)
    for batch in iter_batches(current.ecg, batch_size):
        if monitor.push_current(batch):
            result.passes.append(monitor.comparison)
            result.window_end_times.append(batch[-1].timestamp)

    result.final = monitor.comparison
    return result


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Compare a recording against a baseline recording",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--baseline",
        type=str,
        required=True,
        help="Baseline record JSON or sample CSV"
    )

    parser.add_argument(
        "--current",
        type=str,
        required=True,
        help="Current record JSON or sample CSV (its activity segments are used)"
    )

    parser.add_argument(
        "--name", "-n",
        type=str,
        default=None,
        help="Name used for output files (default: current file stem)"
    )

    parser.add_argument(
        "--reference",
        choices=REFERENCE_MODES,
        default=None,
        help="Instant used to select the active activity segment (default: config)"
    )

    parser.add_argument(
        "--batch-size", "-b",
        type=int,
        default=None,
        help="Samples per replayed batch (default: one PMD frame, 73)"
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

    name = args.name or Path(args.current).stem
    verbose = not args.quiet

    if verbose:
        print("=" * 60)
        print("Real-time ECG Analysis - Baseline Comparison")
        print("=" * 60)

    recordings = {}
    for label, path in (("baseline", args.baseline), ("current", args.current)):
        try:
            recordings[label] = load_recording(Path(path), config)
        except (FileNotFoundError, ValueError) as e:
            print(f"  ✗ ERROR loading {label} recording: {e}")
            return 1
        if verbose:
            rec = recordings[label]
            print(f"  ✓ {label.capitalize()}: {rec.n_samples:,} samples ({rec.duration_seconds:.1f}s)")
        if recordings[label].n_samples < config.WINDOW_SIZE:
            print(
                f"  ⚠ {label.capitalize()} recording holds {recordings[label].n_samples} samples; "
                f"a window needs {config.WINDOW_SIZE}. No comparison computed."
            )

    try:
        replay = replay_comparison(
            recordings["baseline"],
            recordings["current"],
            config,
            batch_size=args.batch_size,
            reference=args.reference,
        )
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    df = metrics_to_frame(replay.passes, replay.window_end_times)
    csv_path = config.get_comparison_path(name)
    df.to_csv(csv_path, index=False)
    save_metrics_json(replay.final, csv_path.with_suffix(".json"))

    if verbose:
        final = replay.final
        activity = final.activity.value if final.activity is not None else "none"
        print("\n" + "=" * 60)
        print("SUMMARY")
        print("=" * 60)
        print(f"Reference: {replay.reference} | Comparison passes: {len(replay.passes)}")
        print(f"Active activity (final pass): {activity}")
        print(f"HR recovery: {final.heart_rate_recovery:.1f} bpm | ST deviation: {final.st_deviation:.3f}")
        print(f"HRV change: {final.hrv_change:.1f}% | QT change: {final.qt_change:.1f}%")
        print(f"\nOutput saved to: {csv_path}")

        if len(df) > 0:
            print("\n" + "-" * 60)
            print("Comparison passes (last 10)")
            print("-" * 60)
            cols = ["pass_index", "heart_rate", "heart_rate_recovery", "st_deviation", "hrv_change", "qt_change", "activity"]
            print(df[cols].tail(10).to_string(index=False))

    return 0


if __name__ == "__main__":
    sys.exit(main())
