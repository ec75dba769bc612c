"""
Activity context for baseline comparison.

Activity segments are produced by the segment editor; this module only reads
them: type lookup, the multiplier table, the active-segment search and the
editor's validity rules (no overlap, minimum length) for segments loaded
from stored records.
"""

from enum import Enum
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Sequence
from dataclasses import dataclass

from .config import Config, default_config


class ActivityType(str, Enum):
    REST = "rest"
    WALK = "walk"
    RUN = "run"


class ActivityMultiplier(NamedTuple):
    """Scaling applied to comparison metrics for one activity."""
    hr_recovery: float
    st_deviation: float


ACTIVITY_MULTIPLIERS: Dict[ActivityType, ActivityMultiplier] = {
    ActivityType.REST: ActivityMultiplier(hr_recovery=1.0, st_deviation=1.0),
    ActivityType.WALK: ActivityMultiplier(hr_recovery=1.5, st_deviation=1.2),
    ActivityType.RUN: ActivityMultiplier(hr_recovery=2.0, st_deviation=1.5),
}

# No active segment
DEFAULT_MULTIPLIER = ActivityMultiplier(hr_recovery=1.0, st_deviation=1.0)


def get_multiplier(activity: Optional[ActivityType]) -> ActivityMultiplier:
    if activity is None:
        return DEFAULT_MULTIPLIER
    return ACTIVITY_MULTIPLIERS[ActivityType(activity)]


@dataclass(frozen=True)
class ActivitySegment:
    """Labelled half-open interval ``[start, end)`` of a recording (ms)."""
    type: ActivityType
    start: int
    end: int

    @property
    def duration_ms(self) -> int:
        return self.end - self.start

    def contains(self, instant_ms: float) -> bool:
        return self.start <= instant_ms < self.end

    def overlaps(self, other: "ActivitySegment") -> bool:
        return self.start < other.end and self.end > other.start

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type.value, "start": self.start, "end": self.end}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ActivitySegment":
        try:
            activity = ActivityType(data["type"])
        except KeyError:
            raise ValueError(f"Activity segment without 'type': {data!r}")
        except ValueError:
            raise ValueError(
                f"Unknown activity type {data['type']!r} "
                f"(expected one of {[a.value for a in ActivityType]})"
            )
        if "start" not in data or "end" not in data:
            raise ValueError(f"Activity segment requires 'start' and 'end': {data!r}")
        return cls(type=activity, start=int(data["start"]), end=int(data["end"]))


def find_active_segment(
    segments: Optional[Iterable[ActivitySegment]],
    instant_ms: float,
) -> Optional[ActivitySegment]:
    """Return the segment containing ``instant_ms``, or None."""
    if not segments:
        return None
    for segment in segments:
        if segment.contains(instant_ms):
            return segment
    return None


def clamp_segment(
    segment: ActivitySegment,
    recording_start: int,
    recording_end: int,
) -> Optional[ActivitySegment]:
    """
    Clip a segment to the span of a recording.

    Returns None when nothing of the segment is left after clipping.
    """
    start = max(segment.start, recording_start)
    end = min(segment.end, recording_end)
    if start >= end:
        return None
    return ActivitySegment(type=segment.type, start=start, end=end)


def validate_segments(
    segments: Sequence[ActivitySegment],
    config: Config = default_config,
) -> List[ActivitySegment]:
    """
    Check the segment editor's invariants.

    Parameters
    ----------
    segments : Sequence[ActivitySegment]
        Segments of one recording, in any order.
    config : Config
        Pipeline configuration with MIN_SEGMENT_DURATION_MS.

    Returns
    -------
    List[ActivitySegment]
        Segments sorted by start time.

    Raises
    ------
    ValueError
        If a segment is empty or inverted, shorter than the minimum
        duration, or overlaps another segment.
    """
    ordered = sorted(segments, key=lambda s: (s.start, s.end))

    for segment in ordered:
        if segment.start >= segment.end:
            raise ValueError(
                f"Segment {segment.type.value} has start >= end ({segment.start} >= {segment.end})"
            )
        if segment.duration_ms < config.MIN_SEGMENT_DURATION_MS:
            raise ValueError(
                f"Segment {segment.type.value} [{segment.start}, {segment.end}) is shorter than "
                f"{config.MIN_SEGMENT_DURATION_MS} ms"
            )

    for previous, current in zip(ordered, ordered[1:]):
        if previous.overlaps(current):
            raise ValueError(
                f"Segments overlap: {previous.type.value} [{previous.start}, {previous.end}) and "
                f"{current.type.value} [{current.start}, {current.end})"
            )

    return ordered
