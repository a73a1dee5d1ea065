from __future__ import annotations


class Midi2SynthError(Exception):
    """Base class for every failure that aborts a conversion run."""


class UnsortedChordsError(Midi2SynthError):
    def __init__(self, index: int, time: int, previous_time: int):
        self.index = index
        self.time = time
        self.previous_time = previous_time
        super().__init__(
            f"chord #{index} starts at tick {time}, before the previous chord at tick {previous_time}"
        )


class TempoResolutionError(Midi2SynthError):
    pass


class EmptyChordError(Midi2SynthError):
    def __init__(self, time: int):
        self.time = time
        super().__init__(f"chord at tick {time} has no notes")


class MidiReadError(Midi2SynthError):
    pass
