#!/usr/bin/env python3
"""
Replay a stored recording through the real-time pipeline.

This script feeds a recording to the live monitor the way the sensor would:
1. Load the recording (record JSON or timestamp/value CSV)
2. Split the ECG samples into notification-sized batches
3. Run one analysis pass per batch once a full window is buffered
4. Export every pass to CSV and the final metrics to JSON
5. Optionally write an HTML report of the final window

Usage:
    python src/run_record_analysis.py --record Data/records/2025-03-01_walk.json
    python src/run_record_analysis.py --record session.csv --batch-size 130 --report
    python src/run_record_analysis.py --list-records

Output:
    Results/metrics_{name}.csv   - One row per analysis pass
    Results/metrics_{name}.json  - Metrics of the final pass
    Results/window_{name}.html   - Final window report (--report)
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional, Sequence
from dataclasses import dataclass, field

# Ensure this script works when executed from any CWD.
sys.path.insert(0, str(Path(__file__).resolve().parent))

from realtime_pipeline.buffer import Sample, Window
from realtime_pipeline.config import Config
from realtime_pipeline.io_utils import (
    load_recording,
    list_record_files,
    metrics_to_frame,
    save_metrics_json,
)
from realtime_pipeline.metrics import Metrics
from realtime_pipeline.monitor import MetricsMonitor, iter_batches
from realtime_pipeline.report import create_window_report


@dataclass
class ReplayResult:
    """Outcome of replaying one recording."""
    passes: List[Metrics] = field(default_factory=list)
    window_end_times: List[int] = field(default_factory=list)
    final_metrics: Metrics = field(default_factory=Metrics)
    final_window: Optional[Window] = None
    n_batches: int = 0


def replay_samples(
    samples: Sequence[Sample],
    config: Config,
    batch_size: Optional[int] = None,
) -> ReplayResult:
    """
    Feed samples to a MetricsMonitor batch by batch.

    Parameters
    ----------
    samples : Sequence[Sample]
        ECG samples of the recording.
    config : Config
        Pipeline configuration.
    batch_size : int, optional
        Samples per batch. Defaults to config.PMD_SAMPLES_PER_FRAME.

    Returns
    -------
    ReplayResult
        Metrics of every pass and the final window.
    """
    if batch_size is None:
        batch_size = config.PMD_SAMPLES_PER_FRAME

    monitor = MetricsMonitor(config)
    result = ReplayResult()

    for batch in iter_batches(samples, batch_size):
        result.n_batches += 1
        if monitor.push(batch):
            result.passes.append(monitor.metrics)
            result.window_end_times.append(batch[-1].timestamp)

    result.final_metrics = monitor.metrics
    result.final_window = monitor.window
    return result


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Replay a recording through the windowed ECG analysis",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Analyse a stored record
    python src/run_record_analysis.py --record Data/records/2025-03-01_walk.json

    # Analyse a CSV export in one-second batches and write a report
    python src/run_record_analysis.py --record session.csv --batch-size 130 --report

    # List stored records
    python src/run_record_analysis.py --list-records
        """
    )

    parser.add_argument(
        "--record", "-r",
        type=str,
        help="Record JSON or sample CSV to analyse"
    )

    parser.add_argument(
        "--name", "-n",
        type=str,
        default=None,
        help="Name used for output files (default: record file stem)"
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
        "--report",
        action="store_true",
        help="Write an HTML report of the final window"
    )

    parser.add_argument(
        "--list-records", "-l",
        action="store_true",
        help="List stored records and exit"
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

    if args.list_records:
        records = list_record_files(config)
        if records:
            print("Available records:")
            for path in records:
                print(f"  - {path.name}")
        else:
            print(f"No records found in {config.get_records_dir()}.")
        return 0

    if not args.record:
        parser.error("--record is required (use --list-records to see available)")

    record_path = Path(args.record)
    name = args.name or record_path.stem
    verbose = not args.quiet

    if verbose:
        print("=" * 60)
        print("Real-time ECG Analysis - Record Replay")
        print("=" * 60)
        print(f"Record: {record_path}")

    try:
        record = load_recording(record_path, config)
    except (FileNotFoundError, ValueError) as e:
        print(f"  ✗ ERROR loading {record_path.name}: {e}")
        return 1

    if verbose:
        print(f"  ✓ Loaded {record.n_samples:,} samples ({record.duration_seconds:.1f}s)")
        if record.activity_segments:
            print(f"  ✓ Activity segments: {len(record.activity_segments)}")

    if record.n_samples < config.WINDOW_SIZE:
        print(
            f"  ⚠ Recording holds {record.n_samples} samples; "
            f"a window needs {config.WINDOW_SIZE}. No metrics computed."
        )

    try:
        result = replay_samples(record.ecg, config, args.batch_size)
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    df = metrics_to_frame(result.passes, result.window_end_times)
    csv_path = config.get_metrics_path(name)
    df.to_csv(csv_path, index=False)

    json_path = csv_path.with_suffix(".json")
    save_metrics_json(result.final_metrics, json_path)

    if args.report and result.final_window is not None:
        html_content = create_window_report(result.final_window, name, result.final_metrics, config)
        report_path = config.get_report_path(name)
        with open(report_path, 'w', encoding='utf-8') as f:
            f.write(html_content)
        if verbose:
            print(f"  ✓ Report: {report_path}")

    if verbose:
        final = result.final_metrics
        print("\n" + "=" * 60)
        print("SUMMARY")
        print("=" * 60)
        print(f"Batches: {result.n_batches} | Analysis passes: {len(result.passes)}")
        print(f"Final HR: {final.heart_rate:.0f} bpm | HRV: {final.heart_rate_variability:.1f} ms")
        print(f"Final QT: {final.qt_interval:.0f} ms | R-peaks in window: {len(final.r_peaks)}")
        print(f"ST elevation: {final.st_segment.elevation:.3f} | QRS: {final.qrs_complex.duration:.0f} ms")
        print(f"\nOutput saved to: {csv_path}")

        if len(df) > 0:
            print("\n" + "-" * 60)
            print("Per-pass Heart Rate (last 10 passes)")
            print("-" * 60)
            cols = ["pass_index", "window_end_ms", "heart_rate", "heart_rate_variability", "qt_interval", "n_peaks"]
            print(df[cols].tail(10).to_string(index=False))

    return 0


if __name__ == "__main__":
    sys.exit(main())
