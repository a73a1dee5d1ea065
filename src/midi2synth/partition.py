from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, List, Sequence

from .errors import UnsortedChordsError
from .timeline import Chord, Rest, TrackItem, Tracks
from .util.time import TempoMap

@dataclass(frozen=True)
class PartitionOptions:
    allow_back_to_back: bool = True   # last.end == chord.time may share a track
    check_sorted: bool = True

DEFAULT_PARTITION = PartitionOptions()

def _fits(track: List[Chord], chord: Chord, allow_back_to_back: bool) -> bool:
    last_end = track[-1].end
    if allow_back_to_back:
        return last_end <= chord.time
    return last_end < chord.time

def partition_chords(chords: Iterable[Chord], opts: PartitionOptions = DEFAULT_PARTITION) -> Tracks:
    """
    First-fit assignment of chords to monophonic tracks.

    Chords must arrive in non-decreasing start order. Each chord goes to the
    earliest-created track whose last chord has finished; a new track is
    opened only when none has. With sorted input this uses as many tracks as
    there are chords sounding at the busiest instant.
    """
    tracks: Tracks = []
    prev_time = None
    for idx, chord in enumerate(chords):
        if opts.check_sorted and prev_time is not None and chord.time < prev_time:
            raise UnsortedChordsError(idx, chord.time, prev_time)
        prev_time = chord.time

        for track in tracks:
            if _fits(track, chord, opts.allow_back_to_back):
                track.append(chord)
                break
        else:
            tracks.append([chord])
    return tracks

def pad_with_rests(track: Sequence[Chord], tempo_map: TempoMap) -> List[TrackItem]:
    """Insert a Rest before every chord that starts after the previous one ended (or after 0)."""
    out: List[TrackItem] = []
    last_end_us = 0
    for chord in track:
        start_us = tempo_map.time_to_us(chord.time)
        if last_end_us < start_us:
            out.append(Rest(start_us=last_end_us, duration_us=start_us - last_end_us))
        out.append(chord)
        last_end_us = start_us + tempo_map.length_to_us(chord.length, chord.time)
    return out
