import pytest

from src.host.memory import MemoryGroup, MemoryTrack, make_group
from src.timeline.neighbors import find_nearest, find_next, find_previous


def _single_group_track(notes):
    track = MemoryTrack()
    track.place(make_group(notes))
    return track


def test_find_next_and_previous_on_adjacent_notes():
    track = _single_group_track([(0, 10), (10, 10)])
    assert find_next(5, track).onset == 10
    assert find_previous(15, track).onset == 0


def test_find_previous_considers_note_at_timeline_start():
    track = _single_group_track([(0, 10), (10, 10)])
    pair = find_previous(10, track)
    assert pair is not None
    assert pair.onset == 0


def test_find_previous_skips_note_containing_position():
    track = _single_group_track([(0, 10), (10, 10), (30, 10)])
    assert find_previous(5, track) is None
    assert find_previous(35, track).onset == 10
    assert find_previous(30, track).onset == 10


def test_find_previous_uses_last_note_when_position_is_past_group():
    track = _single_group_track([(0, 10), (20, 10)])
    assert find_previous(100, track).onset == 20


def test_find_previous_picks_latest_across_references():
    track = MemoryTrack()
    track.place(make_group([(0, 10), (40, 10)]))
    track.place(make_group([(0, 5)]), onset=60)
    track.place(make_group([(0, 5)]), onset=55)
    pair = find_previous(66, track)
    assert pair.onset == 60
    assert pair.ref.onset == 60
    # The note at 60 still sounds at 62, so the reference at 55 wins.
    assert find_previous(62, track).onset == 55


def test_find_next_picks_earliest_across_references():
    track = MemoryTrack()
    track.place(make_group([(0, 10), (40, 10)]))
    track.place(make_group([(0, 5)]), onset=30)
    assert find_next(20, track).onset == 30
    assert find_next(30, track).onset == 30
    assert find_next(31, track).onset == 40


def test_find_next_and_previous_empty_results():
    track = _single_group_track([(10, 10)])
    assert find_previous(10, track) is None
    assert find_next(11, track) is None
    assert find_next(0, MemoryTrack()) is None


@pytest.mark.parametrize(
    "position, expected_onset",
    [
        (5, 0),    # inside the first note
        (12, 0),   # gap, closer to the first note's end
        (18, 20),  # gap, closer to the second note's start
        (25, 20),  # inside the last note
        (90, 20),  # past every note
        (-7, 0),   # before every note
    ],
)
def test_find_nearest_both(position, expected_onset):
    track = _single_group_track([(0, 10), (20, 10)])
    assert find_nearest(position, track, "both").onset == expected_onset


def test_find_nearest_before_and_after_modes():
    track = _single_group_track([(0, 10), (20, 10)])
    assert find_nearest(12, track, "after").onset == 20
    assert find_nearest(12, track, "before").onset == 0
    assert find_nearest(-5, track, "before") is None
    assert find_nearest(25, track, "after") is None
    assert find_nearest(90, track, "before").onset == 20


def test_find_nearest_ties_keep_first_reference():
    track = MemoryTrack()
    first = track.place(make_group([(0, 10)]))
    track.place(make_group([(0, 10)]), onset=30)
    pair = find_nearest(20, track, "both")
    assert pair.ref is first


def test_find_nearest_prefers_closer_reference():
    track = MemoryTrack()
    track.place(make_group([(0, 10)]))
    track.place(make_group([(0, 10)]), onset=24)
    assert find_nearest(20, track, "both").onset == 24


def test_find_nearest_without_notes():
    track = MemoryTrack()
    track.place(MemoryGroup())
    assert find_nearest(0, track) is None


def test_find_nearest_rejects_unknown_mode():
    with pytest.raises(ValueError):
        find_nearest(0, MemoryTrack(), "sideways")
