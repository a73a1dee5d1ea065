from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Tuple, Union

DEFAULT_TPB = 480
DEFAULT_TEMPO_US = 500_000  # 120 BPM

NOTE_NAMES = (
    "C", "CSharp", "D", "DSharp", "E", "F",
    "FSharp", "G", "GSharp", "A", "ASharp", "B",
)

REST_NOTE_NAME = "S"
PLAYBACK_MONO = "PLAYBACK_MONO"

# --- Pass 1: parsed performance (ticks) ---

@dataclass(frozen=True)
class Note:
    name: str          # one of NOTE_NAMES
    octave: int
    time: int          # ticks
    length: int        # ticks
    velocity: int

    @property
    def end(self) -> int:
        return self.time + self.length

@dataclass(frozen=True)
class Chord:
    time: int
    length: int
    notes: Tuple[Note, ...] = ()

    @property
    def end(self) -> int:
        return self.time + self.length

@dataclass(frozen=True)
class Rest:
    """Silence filling the gap before a chord, already resolved to microseconds."""
    start_us: int
    duration_us: int

    @property
    def end_us(self) -> int:
        return self.start_us + self.duration_us

TrackItem = Union[Chord, Rest]

# --- Pass 2: rendered records ---

@dataclass(frozen=True)
class Envelope:
    peak_intensity: float
    sustain_intensity: float
    attack: float
    decay: float
    sustain: float
    release: float

    @property
    def adsr(self) -> Tuple[float, float, float, float]:
        return (self.attack, self.decay, self.sustain, self.release)

@dataclass(frozen=True)
class OutputNote:
    note: str
    octave: int
    duration: float    # seconds
    peak_intensity: float
    sustain_intensity: float
    adsr_envelope: Tuple[float, float, float, float]

@dataclass(frozen=True)
class OutputChord:
    music_notes: Tuple[OutputNote, ...]
    duration: float

    @property
    def num_notes(self) -> int:
        return len(self.music_notes)

@dataclass(frozen=True)
class OutputTrack:
    music_chords: Tuple[OutputChord, ...]
    playback_type: str = PLAYBACK_MONO

    @property
    def length(self) -> int:
        return len(self.music_chords)

@dataclass(frozen=True)
class OutputSong:
    music_tracks: Tuple[OutputTrack, ...] = field(default_factory=tuple)

    @property
    def num_tracks(self) -> int:
        return len(self.music_tracks)

# Type alias for the partitioner result
Tracks = List[List[Chord]]
