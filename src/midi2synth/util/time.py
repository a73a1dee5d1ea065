from __future__ import annotations
from bisect import bisect_right
from dataclasses import dataclass, field
from typing import Iterable, List, Tuple

from ..errors import TempoResolutionError
from ..timeline import DEFAULT_TEMPO_US, DEFAULT_TPB

MICROSECONDS_TO_SECONDS = 0.000001


@dataclass(frozen=True)
class TempoSegment:
    tick_start: int
    tempo_us: int             # microseconds per quarter note
    us_at_start: float


@dataclass
class TempoMap:
    """Piecewise-constant tempo: converts ticks to absolute microseconds."""
    ticks_per_beat: int = DEFAULT_TPB
    segments: List[TempoSegment] = field(default_factory=list)

    @classmethod
    def from_events(
        cls,
        events: Iterable[Tuple[int, int]],
        ticks_per_beat: int = DEFAULT_TPB,
        default_tempo_us: int = DEFAULT_TEMPO_US,
    ) -> "TempoMap":
        """
        events: (tick, tempo_us) pairs in any order. A later event at the same
        tick replaces an earlier one. Without an event at tick 0 the map starts
        at default_tempo_us.
        """
        if ticks_per_beat <= 0:
            raise TempoResolutionError(f"ticks_per_beat must be > 0, got {ticks_per_beat}")

        by_tick = {}
        for tick, tempo in sorted(events, key=lambda x: x[0]):
            if tick < 0 or tempo <= 0:
                raise TempoResolutionError(f"invalid tempo event ({tick}, {tempo})")
            by_tick[int(tick)] = int(tempo)
        by_tick.setdefault(0, int(default_tempo_us))

        segments: List[TempoSegment] = []
        us = 0.0
        ordered = sorted(by_tick.items())
        for i, (tick, tempo) in enumerate(ordered):
            segments.append(TempoSegment(tick_start=tick, tempo_us=tempo, us_at_start=us))
            if i + 1 < len(ordered):
                us += tempo * (ordered[i + 1][0] - tick) / ticks_per_beat
        return cls(ticks_per_beat=ticks_per_beat, segments=segments)

    def _segment_at(self, tick: int) -> TempoSegment:
        if not self.segments:
            raise TempoResolutionError("tempo map is empty")
        starts = [s.tick_start for s in self.segments]
        idx = bisect_right(starts, tick) - 1
        return self.segments[max(0, idx)]

    def time_to_us(self, tick: int) -> int:
        """Absolute time of a tick in whole microseconds."""
        if tick < 0:
            raise TempoResolutionError(f"cannot resolve negative tick {tick}")
        seg = self._segment_at(tick)
        return int(round(seg.us_at_start + seg.tempo_us * (tick - seg.tick_start) / self.ticks_per_beat))

    def length_to_us(self, length: int, time: int) -> int:
        """Duration of `length` ticks starting at `time`, tempo changes included."""
        if length < 0:
            raise TempoResolutionError(f"cannot resolve negative length {length} at tick {time}")
        return self.time_to_us(time + length) - self.time_to_us(time)


def us_to_seconds(us: int) -> float:
    return us * MICROSECONDS_TO_SECONDS
