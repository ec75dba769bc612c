import pytest

from realtime_pipeline.activity import (
    ActivitySegment,
    ActivityType,
    clamp_segment,
    find_active_segment,
    get_multiplier,
    validate_segments,
)


def test_multiplier_table():
    assert get_multiplier(ActivityType.REST) == (1.0, 1.0)
    assert get_multiplier(ActivityType.WALK) == (1.5, 1.2)
    assert get_multiplier(ActivityType.RUN) == (2.0, 1.5)
    assert get_multiplier(None) == (1.0, 1.0)
    assert get_multiplier("run").hr_recovery == 2.0


def test_segment_is_half_open():
    segment = ActivitySegment(type=ActivityType.WALK, start=1000, end=2000)
    assert segment.contains(1000)
    assert segment.contains(1999.5)
    assert not segment.contains(2000)
    assert not segment.contains(999)


def test_find_active_segment():
    segments = [
        ActivitySegment(type=ActivityType.REST, start=0, end=1000),
        ActivitySegment(type=ActivityType.RUN, start=1000, end=2000),
    ]
    assert find_active_segment(segments, 1000).type is ActivityType.RUN
    assert find_active_segment(segments, 999).type is ActivityType.REST
    assert find_active_segment(segments, 2000) is None
    assert find_active_segment([], 500) is None
    assert find_active_segment(None, 500) is None


def test_segment_dict_round_trip():
    segment = ActivitySegment(type=ActivityType.RUN, start=0, end=6000)
    assert segment.to_dict() == {"type": "run", "start": 0, "end": 6000}
    assert ActivitySegment.from_dict(segment.to_dict()) == segment


@pytest.mark.parametrize("data", [
    {"start": 0, "end": 6000},
    {"type": "swim", "start": 0, "end": 6000},
    {"type": "walk", "start": 0},
])
def test_segment_from_dict_rejects_bad_input(data):
    with pytest.raises(ValueError):
        ActivitySegment.from_dict(data)


def test_clamp_segment():
    segment = ActivitySegment(type=ActivityType.WALK, start=0, end=10000)
    assert clamp_segment(segment, 2000, 8000) == ActivitySegment(ActivityType.WALK, 2000, 8000)
    assert clamp_segment(segment, 10000, 20000) is None


def test_validate_sorts_segments(config):
    segments = [
        ActivitySegment(type=ActivityType.RUN, start=10000, end=20000),
        ActivitySegment(type=ActivityType.WALK, start=0, end=10000),
    ]
    ordered = validate_segments(segments, config)
    assert [s.type for s in ordered] == [ActivityType.WALK, ActivityType.RUN]


@pytest.mark.parametrize("segments", [
    [ActivitySegment(ActivityType.WALK, 5000, 5000)],
    [ActivitySegment(ActivityType.WALK, 0, 4999)],
    [ActivitySegment(ActivityType.WALK, 0, 10000), ActivitySegment(ActivityType.RUN, 9000, 20000)],
])
def test_validate_rejects_invalid_segments(segments, config):
    with pytest.raises(ValueError):
        validate_segments(segments, config)
