"""realtime_pipeline configuration.

Centralizes the constants of the windowed analysis pipeline (window size,
detection threshold, morphology search offsets), the baseline comparison,
PMD frame decoding and the simulation mode, together with the data/result
directory layout used by the command-line scripts.
"""

from pathlib import Path
from dataclasses import dataclass


@dataclass
class Config:
    """Pipeline configuration parameters."""

    # ==========================================================================
    # Signal Acquisition Parameters
    # ==========================================================================
    SAMPLING_RATE: int = 130  # Hz (Polar H10 ECG stream)

    # ==========================================================================
    # Analysis Window
    # ==========================================================================
    # One analysis pass runs on the trailing WINDOW_SIZE samples (2 s at 130 Hz)
    WINDOW_SIZE: int = 260

    # Trailing samples kept by the live buffer (the sensor view keeps 1000)
    BUFFER_CAPACITY: int = 1000

    # ==========================================================================
    # R-Peak Detection Parameters
    # ==========================================================================
    # threshold = mean + THRESHOLD_STD_MULT * std (population)
    THRESHOLD_STD_MULT: float = 2.0

    # Windows shorter than this yield no peaks (need both neighbours)
    MIN_PEAK_SAMPLES: int = 3

    # ==========================================================================
    # Interval Parameters
    # ==========================================================================
    # Minimum number of R-peaks before SDNN is reported
    MIN_RR_INTERVALS: int = 6

    # ==========================================================================
    # Morphology Parameters
    # ==========================================================================
    QT_SEARCH_SEC: float = 0.4     # T-wave end search after the R-peak
    ST_START_SEC: float = 0.08     # ST segment start offset after the R-peak
    ST_END_SEC: float = 0.16       # ST segment end offset (exclusive)
    QRS_SEARCH_SAMPLES: int = 30   # Q/S boundary search in each direction

    # ==========================================================================
    # Baseline Comparison
    # ==========================================================================
    # Instant used to pick the active activity segment:
    #   "wall_clock" - the moment the comparison recomputes
    #   "signal"     - the last timestamp of the current window
    ACTIVITY_REFERENCE: str = "wall_clock"

    # Editor invariant for activity segments (milliseconds)
    MIN_SEGMENT_DURATION_MS: int = 5000

    # ==========================================================================
    # PMD (Polar Measurement Data) Frame Layout
    # ==========================================================================
    PMD_MEASUREMENT_ECG: int = 0x00
    PMD_HEADER_BYTES: int = 10
    PMD_SAMPLE_BYTES: int = 3
    PMD_SAMPLES_PER_FRAME: int = 73  # Batch size when replaying recordings

    # ==========================================================================
    # Simulation Mode
    # ==========================================================================
    SIM_TICK_SEC: float = 1.0          # Tick period of the simulated sensor
    SIM_BASE_HEART_RATE: float = 60.0  # bpm
    SIM_HR_JITTER_BPM: float = 10.0    # uniform +/- jitter per generated chunk
    SIM_NOISE_MV: float = 0.05         # peak-to-peak additive noise
    SIM_ARTIFACT_PROBABILITY: float = 0.01
    SIM_WANDER_MV: float = 0.05        # respiratory baseline wander amplitude

    # ==========================================================================
    # Directory Structure
    # ==========================================================================
    DATA_DIR: str = "Data"
    RESULTS_DIR: str = "Results"
    RECORDS_SUBDIR: str = "records"

    # ==========================================================================
    # Output File Naming
    # ==========================================================================
    METRICS_PREFIX: str = "metrics_"
    COMPARISON_PREFIX: str = "comparison_"
    REPORT_PREFIX: str = "window_"

    # ==========================================================================
    # Visualization Parameters
    # ==========================================================================
    REPORT_HEIGHT: int = 800

    @property
    def sample_interval_ms(self) -> float:
        """Nominal spacing between samples in milliseconds."""
        return 1000.0 / self.SAMPLING_RATE

    @property
    def qt_search_samples(self) -> int:
        """Number of samples scanned for the T-wave end."""
        return int(self.QT_SEARCH_SEC * self.SAMPLING_RATE)

    @property
    def st_start_samples(self) -> int:
        return int(self.ST_START_SEC * self.SAMPLING_RATE)

    @property
    def st_end_samples(self) -> int:
        return int(self.ST_END_SEC * self.SAMPLING_RATE)

    def get_project_root(self) -> Path:
        """Get project root directory."""
        return Path(__file__).parent.parent.parent

    def get_data_dir(self) -> Path:
        """Get data directory path."""
        return self.get_project_root() / self.DATA_DIR

    def get_records_dir(self) -> Path:
        """Get directory holding stored recording JSON files."""
        return self.get_data_dir() / self.RECORDS_SUBDIR

    def get_results_dir(self) -> Path:
        """Get results directory path (created on demand)."""
        results_dir = self.get_project_root() / self.RESULTS_DIR
        results_dir.mkdir(parents=True, exist_ok=True)
        return results_dir

    def get_metrics_path(self, record_name: str) -> Path:
        """Get path for the per-pass metrics CSV of a recording."""
        return self.get_results_dir() / f"{self.METRICS_PREFIX}{record_name}.csv"

    def get_comparison_path(self, record_name: str) -> Path:
        """Get path for the per-pass comparison CSV of a recording."""
        return self.get_results_dir() / f"{self.COMPARISON_PREFIX}{record_name}.csv"

    def get_report_path(self, record_name: str) -> Path:
        """Get path for the HTML window report."""
        return self.get_results_dir() / f"{self.REPORT_PREFIX}{record_name}.html"


# Default configuration instance
default_config = Config()
