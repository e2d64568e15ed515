"""A circuit of numbered nodes ready for nodal analysis.

Node ``0`` is ground; other nodes are numbered from ``1``.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, List, Tuple, Type, TypeVar, Union

import numpy as np

from .sources import DCWaveform, SourceMode, Waveform, waveform_frequency, waveform_mode


class CircuitState(IntEnum):
    """Whether a network is ready to be analysed."""

    OK = 0
    IDLE = 1
    NO_COMPONENT = 2
    NO_GROUND = 3
    NO_SOLUTION = 4


@dataclass
class TwoTerminal:
    """An element between ``node1`` and ``node2``."""

    name: str
    node1: int
    node2: int

    def __post_init__(self) -> None:
        if self.node1 < 0 or self.node2 < 0:
            raise ValueError(f"{self.name}: node indices must not be negative")


@dataclass
class Resistor(TwoTerminal):
    resistance: float


@dataclass
class Capacitor(TwoTerminal):
    capacitance: float


@dataclass
class Inductor(TwoTerminal):
    inductance: float


def _as_waveform(value: Union[Waveform, float]) -> Waveform:
    if isinstance(value, (int, float)):
        return DCWaveform(float(value))
    return value


@dataclass
class VoltageSource(TwoTerminal):
    """Independent voltage source; ``node2`` is the positive terminal."""

    waveform: Union[Waveform, float]

    def __post_init__(self) -> None:
        super().__post_init__()
        self.waveform = _as_waveform(self.waveform)

    def voltage_at(self, t: float) -> float:
        """Source voltage at time ``t``."""
        return self.waveform.value_at(t)

    @property
    def is_dc(self) -> bool:
        return waveform_mode(self.waveform) is SourceMode.DC

    @property
    def frequency(self) -> float:
        return waveform_frequency(self.waveform)


@dataclass
class CurrentSource(TwoTerminal):
    """Independent current source driving current from ``node1`` to ``node2``."""

    waveform: Union[Waveform, float]

    def __post_init__(self) -> None:
        super().__post_init__()
        self.waveform = _as_waveform(self.waveform)

    def current_at(self, t: float) -> float:
        """Source current at time ``t``."""
        return self.waveform.value_at(t)

    @property
    def is_dc(self) -> bool:
        return waveform_mode(self.waveform) is SourceMode.DC

    @property
    def frequency(self) -> float:
        return waveform_frequency(self.waveform)


@dataclass
class Diode(TwoTerminal):
    """Exponential diode conducting from ``node1`` to ``node2``."""

    isat: float


@dataclass
class VoltageControlledCurrentSource(TwoTerminal):
    """Current ``coefficient * (V(control1) - V(control2))`` from node1 to node2.

    Controls name a terminal as element name plus ``L`` (first) or ``R`` (second).
    """

    coefficient: float
    control1: str
    control2: str


@dataclass
class VoltageControlledVoltageSource(TwoTerminal):
    """Voltage ``coefficient * (V(control1) - V(control2))``; ``node2`` positive."""

    coefficient: float
    control1: str
    control2: str


@dataclass
class CurrentControlledCurrentSource(TwoTerminal):
    """Current ``coefficient`` times the current through voltage source ``branch``."""

    coefficient: float
    branch: str


@dataclass
class CurrentControlledVoltageSource(TwoTerminal):
    """Voltage ``coefficient`` times the current through voltage source ``branch``."""

    coefficient: float
    branch: str


E = TypeVar("E", bound=TwoTerminal)


@dataclass
class Network:
    """Elements of a circuit plus optional initial node voltages."""

    elements: List[TwoTerminal] = field(default_factory=list)
    initial_conditions: Dict[int, float] = field(default_factory=dict)

    def add(self, element: TwoTerminal) -> TwoTerminal:
        """Append ``element``; names must be unique."""
        if any(existing.name == element.name for existing in self.elements):
            raise ValueError(f"duplicate element name: {element.name}")
        self.elements.append(element)
        return element

    def _of_type(self, kind: Type[E]) -> Tuple[E, ...]:
        return tuple(e for e in self.elements if type(e) is kind)

    @property
    def resistors(self) -> Tuple[Resistor, ...]:
        return self._of_type(Resistor)

    @property
    def capacitors(self) -> Tuple[Capacitor, ...]:
        return self._of_type(Capacitor)

    @property
    def inductors(self) -> Tuple[Inductor, ...]:
        return self._of_type(Inductor)

    @property
    def voltage_sources(self) -> Tuple[VoltageSource, ...]:
        return self._of_type(VoltageSource)

    @property
    def current_sources(self) -> Tuple[CurrentSource, ...]:
        return self._of_type(CurrentSource)

    @property
    def diodes(self) -> Tuple[Diode, ...]:
        return self._of_type(Diode)

    @property
    def vccs(self) -> Tuple[VoltageControlledCurrentSource, ...]:
        return self._of_type(VoltageControlledCurrentSource)

    @property
    def vcvs(self) -> Tuple[VoltageControlledVoltageSource, ...]:
        return self._of_type(VoltageControlledVoltageSource)

    @property
    def cccs(self) -> Tuple[CurrentControlledCurrentSource, ...]:
        return self._of_type(CurrentControlledCurrentSource)

    @property
    def ccvs(self) -> Tuple[CurrentControlledVoltageSource, ...]:
        return self._of_type(CurrentControlledVoltageSource)

    @property
    def state(self) -> CircuitState:
        """OK when there are elements and at least one touches ground."""
        if not self.elements:
            return CircuitState.NO_COMPONENT
        if not any(0 in (e.node1, e.node2) for e in self.elements):
            return CircuitState.NO_GROUND
        return CircuitState.OK

    def node_count(self) -> int:
        """Number of nodes including ground."""
        return 1 + max((max(e.node1, e.node2) for e in self.elements), default=0)

    def unknown_count(self) -> int:
        """Size of the nodal system: node voltages plus branch currents."""
        return (
            self.node_count()
            - 1
            + len(self.voltage_sources)
            + len(self.capacitors)
            + len(self.inductors)
            + len(self.vcvs)
            + len(self.ccvs)
        )

    def dependent_branch(self, name: str) -> TwoTerminal:
        """The element called ``name``."""
        for element in self.elements:
            if element.name == name:
                return element
        raise KeyError(name)

    def dependent_node(self, reference: str) -> int:
        """Node of a terminal reference: element name plus ``L`` or ``R``."""
        if not reference:
            raise KeyError(reference)
        side = reference[-1]
        element = self.dependent_branch(reference[:-1])
        if side == "L":
            return element.node1
        if side == "R":
            return element.node2
        raise KeyError(reference)

    def voltage_source_index(self, name: str) -> int:
        """Position of the voltage source ``name`` among the voltage sources."""
        for index, source in enumerate(self.voltage_sources):
            if source.name == name:
                return index
        raise KeyError(f"{name} is not a voltage source")

    def initial_state(self) -> np.ndarray:
        """Unknown vector holding the initial node voltages, zero elsewhere."""
        state = np.zeros(self.unknown_count())
        for node, voltage in self.initial_conditions.items():
            if node != 0:
                state[node - 1] = voltage
        return state