import pytest

from midi2synth.envelope import velocity_to_envelope
from midi2synth.errors import EmptyChordError, UnsortedChordsError
from midi2synth.process import (
    build_song, format_chord, format_note, format_rest, synth_note_name,
)
from midi2synth.timeline import Chord, Note, Rest, PLAYBACK_MONO

from tests.helpers import make_chord


@pytest.mark.parametrize("name,expected", [
    ("CSharp", "Cs"), ("FSharp", "Fs"), ("ASharp", "As"),
    ("C", "C"), ("E", "E"), ("B", "B"),
])
def test_sharp_names(name, expected):
    assert synth_note_name(name) == expected


def test_format_note(ms_map):
    note = Note(name="GSharp", octave=3, time=500, length=250, velocity=127)
    out = format_note(note, ms_map)
    env = velocity_to_envelope(127)
    assert out.note == "Gs"
    assert out.octave == 3
    assert out.duration == pytest.approx(0.25)
    assert out.peak_intensity == env.peak_intensity
    assert out.sustain_intensity == env.sustain_intensity
    assert out.adsr_envelope == env.adsr


def test_format_chord_keeps_note_order(ms_map):
    chord = make_chord(0, 1500, pitches=(67, 60, 64))
    out = format_chord(chord, ms_map)
    assert [n.note for n in out.music_notes] == ["G", "C", "E"]
    assert out.num_notes == 3
    assert out.duration == pytest.approx(1.5)


def test_empty_chord_is_fatal(ms_map):
    with pytest.raises(EmptyChordError):
        format_chord(Chord(time=0, length=10), ms_map)


def test_rest_record():
    out = format_rest(Rest(start_us=0, duration_us=500_000))
    assert out.num_notes == 1
    assert out.duration == pytest.approx(0.5)
    note = out.music_notes[0]
    assert note.note == "S" and note.octave == 0
    assert note.duration == out.duration
    assert note.peak_intensity == 0 and note.sustain_intensity == 0
    assert note.adsr_envelope == (0, 0, 0, 0)


def test_three_chord_scenario(ms_map):
    chords = [make_chord(0, 1000), make_chord(500, 1000), make_chord(2000, 1000)]
    song = build_song(chords, ms_map)
    assert song.num_tracks == 2

    t0, t1 = song.music_tracks
    assert t0.playback_type == PLAYBACK_MONO
    assert t0.length == 3
    assert [c.music_notes[0].note for c in t0.music_chords] == ["C", "S", "C"]
    assert [c.duration for c in t0.music_chords] == pytest.approx([1.0, 1.0, 1.0])

    assert t1.length == 2
    assert [c.music_notes[0].note for c in t1.music_chords] == ["S", "C"]
    assert [c.duration for c in t1.music_chords] == pytest.approx([0.5, 1.0])


def test_failure_aborts_whole_conversion(ms_map):
    good = make_chord(0, 10)
    with pytest.raises(EmptyChordError):
        build_song([good, Chord(time=20, length=10)], ms_map)
    with pytest.raises(UnsortedChordsError):
        build_song([make_chord(50, 10), good], ms_map)


def test_empty_performance(ms_map):
    song = build_song([], ms_map)
    assert song.num_tracks == 0
