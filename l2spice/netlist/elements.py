"""Circuit elements and nodes of the command-driven netlist."""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import ClassVar, List

from .errors import CircuitError

_DIODE_THRESHOLDS = {"D": 0.0, "Z": 0.7}


def _fmt(value: float) -> str:
    return f"{value:g}"


@dataclass
class Component(ABC):
    """A two-terminal element connected between ``node1`` and ``node2``."""

    type_name: ClassVar[str] = "Component"

    id: str
    node1: str
    node2: str

    @property
    def name(self) -> str:
        """The name the element is known by in the circuit."""
        return self.id

    def info(self) -> str:
        """One line naming the element and its terminals."""
        return f"{self.type_name} {self.id} between {self.node1} and {self.node2}"

    @abstractmethod
    def describe(self) -> str:
        """A full human-readable description including the element's value."""

    def debug_lines(self) -> List[str]:
        """Diagnostic lines describing the element."""
        return [f"[DEBUG] {self.info()}"]


@dataclass
class Resistor(Component):
    type_name: ClassVar[str] = "Resistor"
    value: float

    def describe(self) -> str:
        return (
            f"Resistor {self.id} between {self.node1} and {self.node2} "
            f"with value {_fmt(self.value)} Ohms"
        )


@dataclass
class Capacitor(Component):
    type_name: ClassVar[str] = "Capacitor"
    value: float

    def describe(self) -> str:
        return (
            f"Capacitor {self.id} between {self.node1} and {self.node2} "
            f"with value {_fmt(self.value)} F"
        )


@dataclass
class Inductor(Component):
    type_name: ClassVar[str] = "Inductor"
    value: float

    def describe(self) -> str:
        return (
            f"Inductor {self.id} between {self.node1} and {self.node2} "
            f"with value {_fmt(self.value)} H"
        )


@dataclass
class Diode(Component):
    type_name: ClassVar[str] = "Diode"
    model: str
    threshold: float = field(init=False)

    def __post_init__(self) -> None:
        try:
            self.threshold = _DIODE_THRESHOLDS[self.model]
        except KeyError:
            raise CircuitError(f"Error: Model {self.model} not found in library") from None

    def describe(self) -> str:
        return (
            f"Diode {self.id} between {self.node1} and {self.node2} "
            f"with model {self.model} (threshold: {_fmt(self.threshold)} V)"
        )


@dataclass
class VoltageSource(Component):
    type_name: ClassVar[str] = "VoltageSource"
    value: float

    def describe(self) -> str:
        return (
            f"Voltage Source {self.id} between {self.node1} and {self.node2} "
            f"with value {_fmt(self.value)} V"
        )

    def debug_lines(self) -> List[str]:
        return super().debug_lines() + [f"[DEBUG] Voltage value: {_fmt(self.value)} V"]


@dataclass
class CurrentSource(Component):
    type_name: ClassVar[str] = "CurrentSource"
    value: float

    def describe(self) -> str:
        return (
            f"Current Source {self.id} between {self.node1} and {self.node2} "
            f"with value {_fmt(self.value)} A"
        )

    def debug_lines(self) -> List[str]:
        return super().debug_lines() + [f"[DEBUG] Current value: {_fmt(self.value)} A"]


@dataclass
class SineVoltageSource(Component):
    type_name: ClassVar[str] = "SineVoltageSource"
    offset: float
    amplitude: float
    frequency: float

    def describe(self) -> str:
        return (
            f"Sine Voltage Source {self.id} between {self.node1} and {self.node2} "
            f"with Voffset: {_fmt(self.offset)} V, Amplitude: {_fmt(self.amplitude)} V, "
            f"Frequency: {_fmt(self.frequency)} Hz"
        )

    def debug_lines(self) -> List[str]:
        return super().debug_lines() + [
            f"[DEBUG] SIN source: offset = {_fmt(self.offset)}, "
            f"amplitude = {_fmt(self.amplitude)}, frequency = {_fmt(self.frequency)}"
        ]

    def value_at(self, t: float) -> float:
        """Source voltage at time ``t`` in seconds."""
        return self.offset + self.amplitude * math.sin(2 * math.pi * self.frequency * t)


@dataclass
class _VoltageControlled(Component):
    prefix: ClassVar[str] = ""
    ctrl_node1: str
    ctrl_node2: str
    gain: float

    @property
    def name(self) -> str:
        return self.prefix + self.id

    def describe(self) -> str:
        return (
            f"{self.type_name} {self.id}: {self.node1} -> {self.node2}, "
            f"controlled by {self.ctrl_node1} - {self.ctrl_node2}, gain = {_fmt(self.gain)}"
        )


@dataclass
class _CurrentControlled(Component):
    prefix: ClassVar[str] = ""
    vname: str
    gain: float

    @property
    def name(self) -> str:
        return self.prefix + self.id

    def describe(self) -> str:
        return (
            f"{self.type_name} {self.id}: {self.node1} -> {self.node2}, "
            f"controlled by current through {self.vname}, gain = {_fmt(self.gain)}"
        )


@dataclass
class VCVS(_VoltageControlled):
    """Voltage-controlled voltage source."""

    type_name: ClassVar[str] = "VCVS"
    prefix: ClassVar[str] = "E"


@dataclass
class VCCS(_VoltageControlled):
    """Voltage-controlled current source."""

    type_name: ClassVar[str] = "VCCS"
    prefix: ClassVar[str] = "G"


@dataclass
class CCVS(_CurrentControlled):
    """Current-controlled voltage source."""

    type_name: ClassVar[str] = "CCVS"
    prefix: ClassVar[str] = "H"


@dataclass
class CCCS(_CurrentControlled):
    """Current-controlled current source."""

    type_name: ClassVar[str] = "CCCS"
    prefix: ClassVar[str] = "F"


@dataclass
class Node:
    """A named circuit node, possibly connected to ground."""

    id: str
    grounded: bool = False