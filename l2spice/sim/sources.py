"""Time-dependent waveforms driving independent sources."""

import math
from dataclasses import dataclass
from enum import IntEnum
from typing import Union


class SourceMode(IntEnum):
    """The kind of waveform a source produces."""

    DC = 0
    SINE = 1
    SQUARE = 2


@dataclass(frozen=True)
class DCWaveform:
    """A constant value."""

    value: float

    def value_at(self, t: float) -> float:
        """The value at time ``t``; always the same."""
        return self.value


@dataclass(frozen=True)
class SineWaveform:
    """``offset + amplitude * sin(2*pi*frequency*t + phase)``, phase in degrees."""

    offset: float
    amplitude: float
    frequency: float
    phase: float = 0.0

    def value_at(self, t: float) -> float:
        """The value at time ``t`` in seconds."""
        angle = 2 * math.pi * self.frequency * t + self.phase * math.pi / 180
        return self.offset + self.amplitude * math.sin(angle)


@dataclass(frozen=True)
class SquareWaveform:
    """Alternates between ``on`` for ``on_time`` and ``off`` for the rest of ``period``.

    Each period starts with the ``on`` part; at ``t <= 0`` the value is ``off``.
    """

    on: float
    off: float
    period: float
    on_time: float

    def __post_init__(self) -> None:
        if self.period <= 0:
            raise ValueError("square wave period must be positive")

    def value_at(self, t: float) -> float:
        """The value at time ``t`` in seconds."""
        edges = 0
        elapsed = 0.0
        while t > elapsed:
            if edges % 2 == 0:
                elapsed += self.on_time
            else:
                elapsed += self.period - self.on_time
            edges += 1
        return self.on if edges % 2 == 1 else self.off


Waveform = Union[DCWaveform, SineWaveform, SquareWaveform]


def waveform_frequency(waveform: Waveform) -> float:
    """Frequency in hertz; zero for a constant waveform."""
    if isinstance(waveform, SineWaveform):
        return waveform.frequency
    if isinstance(waveform, SquareWaveform):
        return 1.0 / waveform.period
    return 0.0


def waveform_mode(waveform: Waveform) -> SourceMode:
    """The mode matching the waveform's kind."""
    if isinstance(waveform, SineWaveform):
        return SourceMode.SINE
    if isinstance(waveform, SquareWaveform):
        return SourceMode.SQUARE
    if isinstance(waveform, DCWaveform):
        return SourceMode.DC
    raise TypeError(f"unknown waveform: {waveform!r}")