from __future__ import annotations
import sys
from typing import List, Optional, TextIO

from .timeline import OutputChord, OutputNote, OutputSong, OutputTrack, Tracks
from .util.time import TempoMap, us_to_seconds

SEP = ",\n"

# ---------- internal helpers ----------

def fmt_double(value: float) -> str:
    """Shortest round-trip text; integral values without '.0' (1.0 -> '1')."""
    value = float(value)
    if value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(value)

def _note_literal(n: OutputNote) -> str:
    adsr = ", ".join(fmt_double(x) for x in n.adsr_envelope)
    return (
        "\t\t\t{"
        f".note = \"{n.note}\""
        f", .octave = {n.octave}"
        f", .duration = {fmt_double(n.duration)}"
        f", .peak_intensity = {fmt_double(n.peak_intensity)}"
        f", .sustain_intensity = {fmt_double(n.sustain_intensity)}"
        f", .adsr_envelope = (double[]) {{{adsr}}}"
        "}"
    )

def _chord_literal(c: OutputChord) -> str:
    notes = SEP.join(_note_literal(n) for n in c.music_notes)
    return (
        "\t\t{.music_notes = (struct MusicNote[]) {\n"
        f"{notes}\n"
        f"\t\t}}, .duration = {fmt_double(c.duration)}, .num_notes = {c.num_notes}}}"
    )

def _track_literal(t: OutputTrack) -> str:
    chords = SEP.join(_chord_literal(c) for c in t.music_chords)
    return (
        "\t{.music_chords = (struct MusicChord[]) {\n"
        f"{chords}\n"
        f"\t}}, .playback_type = {t.playback_type}, .length = {t.length}}}"
    )

# ---------- public writer APIs ----------

def song_to_literal(song: OutputSong) -> str:
    """Render the whole song as one C initializer (no trailing newline)."""
    tracks = SEP.join(_track_literal(t) for t in song.music_tracks)
    return (
        "{.music_tracks = (struct MusicTrack[]) {\n"
        f"{tracks}\n"
        f"}}, .num_tracks = {song.num_tracks}}}"
    )

def write_song(song: OutputSong, out: Optional[TextIO] = None):
    """Render first, then write in one go, so a failure never leaves half a literal behind."""
    text = song_to_literal(song)
    (out or sys.stdout).write(text)

def write_song_file(song: OutputSong, out_path: str):
    text = song_to_literal(song)
    with open(out_path, "w", encoding="utf-8") as fh:
        fh.write(text)

def dump_tracks(tracks: Tracks, tempo_map: TempoMap) -> str:
    """
    Timing overview of the partition: one block per track with start/end
    seconds per chord and the summed chord time (rests not counted).
    """
    lines: List[str] = []
    for track in tracks:
        lines.append("--TRACK START--")
        total_us = 0
        for item in track:
            start_us = tempo_map.time_to_us(item.time)
            dur_us = tempo_map.length_to_us(item.length, item.time)
            lines.append(f"start: {fmt_double(us_to_seconds(start_us))} end: {fmt_double(us_to_seconds(start_us + dur_us))}")
            total_us += dur_us
        lines.append("--TRACK END--")
        lines.append(f"TIME ELAPSED: {fmt_double(us_to_seconds(total_us))}\n\n")
    return "\n".join(lines)
