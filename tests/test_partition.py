import random

import pytest

from midi2synth.errors import UnsortedChordsError
from midi2synth.partition import (
    PartitionOptions, pad_with_rests, partition_chords,
)
from midi2synth.timeline import Chord, Rest

from tests.helpers import make_chord, max_simultaneous


def test_empty_input_gives_no_tracks():
    assert partition_chords([]) == []


def test_overlapping_chords_split_and_gap_reuses_first_track():
    c1, c2, c3 = make_chord(0, 1000), make_chord(500, 1000), make_chord(2000, 1000)
    tracks = partition_chords([c1, c2, c3])
    assert tracks == [[c1, c3], [c2]]


def test_back_to_back_chords_share_a_track():
    a, b = make_chord(0, 480), make_chord(480, 480)
    assert partition_chords([a, b]) == [[a, b]]


def test_strict_mode_separates_touching_chords():
    a, b = make_chord(0, 480), make_chord(480, 480)
    opts = PartitionOptions(allow_back_to_back=False)
    assert partition_chords([a, b], opts) == [[a], [b]]


def test_first_fit_not_tightest_fit():
    # both tracks free at t=100; track 0 must win even though track 1 ended later
    a = make_chord(0, 10)
    b = make_chord(5, 50)
    c = make_chord(100, 10)
    assert partition_chords([a, b, c]) == [[a, c], [b]]


def test_unsorted_input_is_rejected():
    with pytest.raises(UnsortedChordsError) as exc:
        partition_chords([make_chord(100, 10), make_chord(50, 10)])
    assert exc.value.index == 1
    assert exc.value.previous_time == 100


def test_unsorted_check_can_be_disabled():
    tracks = partition_chords(
        [make_chord(100, 10), make_chord(50, 10)],
        PartitionOptions(check_sorted=False),
    )
    assert sum(len(t) for t in tracks) == 2


def _random_chords(seed, n=60):
    rnd = random.Random(seed)
    chords = [make_chord(rnd.randrange(0, 2000), rnd.randrange(1, 300)) for _ in range(n)]
    return sorted(chords, key=lambda c: c.time)


@pytest.mark.parametrize("seed", range(5))
def test_partition_properties(seed):
    chords = _random_chords(seed)
    tracks = partition_chords(chords)

    # completeness
    flat = [c for t in tracks for c in t]
    assert sorted(flat, key=id) == sorted(chords, key=id)
    assert len(flat) == len(chords)

    # no overlap inside a track
    for t in tracks:
        for prev, nxt in zip(t, t[1:]):
            assert prev.end <= nxt.time

    # minimality
    assert len(tracks) == max_simultaneous(chords)


def test_max_simultaneous_ignores_touching():
    assert max_simultaneous([make_chord(0, 10), make_chord(10, 10)]) == 1
    assert max_simultaneous([make_chord(0, 10), make_chord(9, 10)]) == 2
    assert max_simultaneous([]) == 0


def test_pad_inserts_leading_and_inner_rests(ms_map):
    c1, c3 = make_chord(0, 1000), make_chord(2000, 1000)
    assert pad_with_rests([c1, c3], ms_map) == [c1, Rest(1_000_000, 1_000_000), c3]

    c2 = make_chord(500, 1000)
    assert pad_with_rests([c2], ms_map) == [Rest(0, 500_000), c2]


def test_pad_skips_zero_gaps(ms_map):
    a, b = make_chord(0, 100), make_chord(100, 100)
    assert pad_with_rests([a, b], ms_map) == [a, b]


@pytest.mark.parametrize("seed", range(3))
def test_padded_tracks_are_contiguous(ms_map, seed):
    for track in partition_chords(_random_chords(seed)):
        cursor = 0
        for item in pad_with_rests(track, ms_map):
            if isinstance(item, Rest):
                assert item.start_us == cursor
                cursor = item.end_us
            else:
                assert ms_map.time_to_us(item.time) == cursor
                cursor = ms_map.time_to_us(item.end)
