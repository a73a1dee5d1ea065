from __future__ import annotations
from typing import List, Optional, Sequence

from .envelope import DEFAULT_ENVELOPE, EnvelopeConfig, silent_envelope, velocity_to_envelope
from .errors import EmptyChordError
from .partition import DEFAULT_PARTITION, PartitionOptions, pad_with_rests, partition_chords
from .timeline import (
    Chord, Note, OutputChord, OutputNote, OutputSong, OutputTrack, Rest,
    TrackItem, REST_NOTE_NAME,
)
from .util.time import TempoMap, us_to_seconds

def synth_note_name(name: str) -> str:
    """'CSharp' -> 'Cs'; natural names pass through."""
    if "Sharp" in name:
        return name[0] + "s"
    return name

def format_note(note: Note, tempo_map: TempoMap, env_cfg: EnvelopeConfig = DEFAULT_ENVELOPE) -> OutputNote:
    seconds = us_to_seconds(tempo_map.length_to_us(note.length, note.time))
    env = velocity_to_envelope(note.velocity, env_cfg)
    return OutputNote(
        note=synth_note_name(note.name),
        octave=note.octave,
        duration=seconds,
        peak_intensity=env.peak_intensity,
        sustain_intensity=env.sustain_intensity,
        adsr_envelope=env.adsr,
    )

def format_chord(chord: Chord, tempo_map: TempoMap, env_cfg: EnvelopeConfig = DEFAULT_ENVELOPE) -> OutputChord:
    if not chord.notes:
        raise EmptyChordError(chord.time)
    notes = tuple(format_note(n, tempo_map, env_cfg) for n in chord.notes)
    seconds = us_to_seconds(tempo_map.length_to_us(chord.length, chord.time))
    return OutputChord(music_notes=notes, duration=seconds)

def format_rest(rest: Rest) -> OutputChord:
    seconds = us_to_seconds(rest.duration_us)
    env = silent_envelope()
    note = OutputNote(
        note=REST_NOTE_NAME,
        octave=0,
        duration=seconds,
        peak_intensity=env.peak_intensity,
        sustain_intensity=env.sustain_intensity,
        adsr_envelope=env.adsr,
    )
    return OutputChord(music_notes=(note,), duration=seconds)

def format_track(items: Sequence[TrackItem], tempo_map: TempoMap,
                 env_cfg: EnvelopeConfig = DEFAULT_ENVELOPE) -> OutputTrack:
    chords: List[OutputChord] = []
    for item in items:
        if isinstance(item, Rest):
            chords.append(format_rest(item))
        else:
            chords.append(format_chord(item, tempo_map, env_cfg))
    return OutputTrack(music_chords=tuple(chords))

def build_song(
    chords: Sequence[Chord],
    tempo_map: TempoMap,
    env_cfg: Optional[EnvelopeConfig] = None,
    part_opts: Optional[PartitionOptions] = None,
) -> OutputSong:
    """
    Full conversion: partition, pad with rests, render every record.
    Any error aborts the run; no partial song is returned.
    """
    env_cfg = env_cfg or DEFAULT_ENVELOPE
    part_opts = part_opts or DEFAULT_PARTITION

    tracks = partition_chords(chords, part_opts)
    out_tracks = []
    for track in tracks:
        items = pad_with_rests(track, tempo_map)
        out_tracks.append(format_track(items, tempo_map, env_cfg))
    return OutputSong(music_tracks=tuple(out_tracks))
