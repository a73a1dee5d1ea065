from __future__ import annotations

from midi2synth.analyze import note_from_midi
from midi2synth.timeline import Chord


def make_chord(time, length, pitches=(60,), velocity=64):
    return Chord(
        time=time,
        length=length,
        notes=tuple(note_from_midi(p, time, length, velocity) for p in pitches),
    )


def max_simultaneous(chords):
    """Largest number of chords sounding at one instant (half-open intervals)."""
    evs = []
    for c in chords:
        evs.append((c.time, 1))
        evs.append((c.end, -1))
    # ends before starts at the same tick
    evs.sort()
    best = cur = 0
    for _, delta in evs:
        cur += delta
        best = max(best, cur)
    return best
