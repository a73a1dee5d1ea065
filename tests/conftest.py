from __future__ import annotations
import pytest

from midi2synth.util.time import TempoMap


@pytest.fixture
def ms_map():
    # 1 tick == 1 ms
    return TempoMap.from_events([], ticks_per_beat=1000, default_tempo_us=1_000_000)
