from __future__ import annotations
from dataclasses import dataclass

from .timeline import Envelope

MAX_VELOCITY = 127

@dataclass(frozen=True)
class EnvelopeConfig:
    sensitivity: float = 1.018152      # peak = sensitivity ** velocity
    sustain_ratio: float = 0.4
    max_ad_percent: float = 0.6        # velocity 0
    min_ad_percent: float = 0.1        # velocity 127
    ad_proportion: float = 0.2         # attack share of attack+decay
    max_r_percent: float = 0.4
    min_r_percent: float = 0.05

    @property
    def ad_slope(self) -> float:
        return (self.max_ad_percent - self.min_ad_percent) / (0 - MAX_VELOCITY)

    @property
    def r_slope(self) -> float:
        return (self.max_r_percent - self.min_r_percent) / (0 - MAX_VELOCITY)

DEFAULT_ENVELOPE = EnvelopeConfig()

def velocity_to_envelope(velocity: int, cfg: EnvelopeConfig = DEFAULT_ENVELOPE) -> Envelope:
    """
    Loudness curve and ADSR split for one note.

    Harder hits get an exponentially louder peak and a shorter attack/decay
    and release. The sustain share is whatever is left, so the four
    fractions add up to 1 without any normalisation. Velocities outside
    0..127 are not rejected.
    """
    peak = cfg.sensitivity ** velocity
    sustain_intensity = peak * cfg.sustain_ratio

    ad_percent = cfg.ad_slope * (abs(velocity) - MAX_VELOCITY) + cfg.min_ad_percent
    a_percent = ad_percent * cfg.ad_proportion
    d_percent = ad_percent - a_percent
    r_percent = cfg.r_slope * (abs(velocity) - MAX_VELOCITY) + cfg.min_r_percent
    s_percent = 1 - a_percent - d_percent - r_percent

    return Envelope(
        peak_intensity=peak,
        sustain_intensity=sustain_intensity,
        attack=a_percent,
        decay=d_percent,
        sustain=s_percent,
        release=r_percent,
    )

def silent_envelope() -> Envelope:
    return Envelope(0.0, 0.0, 0.0, 0.0, 0.0, 0.0)
