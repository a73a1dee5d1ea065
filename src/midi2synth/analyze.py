# src/midi2synth/analyze.py
from __future__ import annotations
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

import mido

from .errors import MidiReadError
from .timeline import Chord, Note, NOTE_NAMES, DEFAULT_TEMPO_US
from .util.time import TempoMap

@dataclass
class Performance:
    chords: List[Chord] = field(default_factory=list)
    tempo_map: TempoMap = field(default_factory=TempoMap)

    @property
    def ticks_per_beat(self) -> int:
        return self.tempo_map.ticks_per_beat

def note_from_midi(pitch: int, time: int, length: int, velocity: int) -> Note:
    """MIDI note number -> named note; 60 is C4."""
    return Note(
        name=NOTE_NAMES[pitch % 12],
        octave=pitch // 12 - 1,
        time=time,
        length=length,
        velocity=velocity,
    )

def _tempo_events(mid: mido.MidiFile) -> List[Tuple[int, int]]:
    events: List[Tuple[int, int]] = []
    for track in mid.tracks:
        tick = 0
        for msg in track:
            tick += msg.time
            if msg.type == "set_tempo":
                events.append((tick, int(msg.tempo)))
    events.sort(key=lambda x: x[0])
    return events

NoteSpan = Tuple[int, int, int, int, int, int]

def _extract_notes(mid: mido.MidiFile) -> List[NoteSpan]:
    """Returns (start_tick, end_tick, pitch, velocity, channel, order) for every sounded note.

    order is the index of the note_on among all note_ons of the file.
    """
    abs_tick = 0
    order = 0
    # (channel, pitch) -> (start_tick, velocity, order)
    active: Dict[Tuple[int, int], Tuple[int, int, int]] = {}
    out = []
    for msg in mido.merge_tracks(mid.tracks):
        abs_tick += msg.time
        if msg.type not in ("note_on", "note_off"):
            continue
        key = (msg.channel, msg.note)
        is_on = msg.type == "note_on" and msg.velocity > 0
        if key in active:
            # retrigger or note-off: close the running note
            start, vel, idx = active.pop(key)
            out.append((start, abs_tick, msg.note, vel, msg.channel, idx))
        if is_on:
            active[key] = (abs_tick, msg.velocity, order)
            order += 1
    # close dangling
    for (ch, pitch), (start, vel, idx) in active.items():
        out.append((start, abs_tick, pitch, vel, ch, idx))
    return out

def group_chords(notes: List[NoteSpan]) -> List[Chord]:
    """
    Notes sharing start tick and channel form one chord, in the order their
    note_ons appear in the file. Chord length runs to the latest note end.
    Result is ordered by (start, channel).
    """
    groups: Dict[Tuple[int, int], List[NoteSpan]] = defaultdict(list)
    for ev in notes:
        groups[(ev[0], ev[4])].append(ev)

    chords: List[Chord] = []
    for (start, _ch), evs in sorted(groups.items()):
        evs.sort(key=lambda e: e[5])
        end = max(e[1] for e in evs)
        chords.append(Chord(
            time=start,
            length=end - start,
            notes=tuple(note_from_midi(p, s, e - s, v) for (s, e, p, v, _c, _i) in evs),
        ))
    return chords

def read_midi(path: str, default_tempo_us: int = DEFAULT_TEMPO_US) -> Performance:
    try:
        mid = mido.MidiFile(path)
    except (OSError, EOFError, ValueError) as e:
        raise MidiReadError(f"cannot read MIDI file {path}: {e}") from e

    tempo_map = TempoMap.from_events(_tempo_events(mid), mid.ticks_per_beat, default_tempo_us)
    chords = group_chords(_extract_notes(mid))
    return Performance(chords=chords, tempo_map=tempo_map)
