"""A named-node circuit built up by netlist commands."""

from typing import List, Optional, Type

from .elements import (
    Capacitor,
    Component,
    CurrentSource,
    Diode,
    Inductor,
    Node,
    Resistor,
    SineVoltageSource,
    VoltageSource,
)
from .errors import (
    CircuitError,
    DuplicateElementC,
    DuplicateElementI,
    DuplicateElementR,
    ElementNotFound,
    NetlistSyntaxError,
)
from .values import parse_capacitance, parse_inductance, parse_resistance

_DIODE_MODELS = ("D", "Z")


class Circuit:
    """Components and nodes of one circuit, kept in insertion order."""

    def __init__(self) -> None:
        self.components: List[Component] = []
        self.nodes: List[Node] = []
        self._gnd_exists = False

    def _find_node(self, name: str) -> Optional[Node]:
        return next((node for node in self.nodes if node.id == name), None)

    def _has_component(self, name: str) -> bool:
        return any(component.name == name for component in self.components)

    def _remove(self, name: str, kind: Optional[Type[Component]], label: str) -> None:
        for index, component in enumerate(self.components):
            if component.name == name and (kind is None or isinstance(component, kind)):
                del self.components[index]
                return
        raise CircuitError(f"Error: Cannot delete {label}; component not found")

    def add_voltage_source(self, name: str, node1: str, node2: str, value: float) -> None:
        """Add a DC voltage source; no checks are made on the name."""
        self.components.append(VoltageSource(name, node1, node2, value))

    def add_current_source(self, name: str, node1: str, node2: str, value: float) -> None:
        """Add a DC current source; no checks are made on the name."""
        self.components.append(CurrentSource(name, node1, node2, value))

    def add_resistor(self, name: str, node1: str, node2: str, value: str) -> None:
        """Add a resistor whose value is given as text such as ``4.7k``."""
        if self._has_component(name):
            raise DuplicateElementR(name)
        if not name.startswith("R"):
            raise ElementNotFound(name)
        resistance = parse_resistance(value)
        self.get_or_create_node(node1)
        self.get_or_create_node(node2)
        self.components.append(Resistor(name, node1, node2, resistance))

    def delete_resistor(self, name: str) -> None:
        """Remove the first component called ``name``."""
        self._remove(name, None, "resistor")

    def add_capacitor(self, name: str, node1: str, node2: str, value: str) -> None:
        """Add a capacitor whose value is given as text such as ``10u``."""
        if not name.startswith("C"):
            raise ElementNotFound(name)
        if self._has_component(name):
            raise DuplicateElementC(name)
        capacitance = parse_capacitance(value)
        if capacitance <= 0:
            raise NetlistSyntaxError("Error: Capacitance cannot be zero or negative")
        self.get_or_create_node(node1)
        self.get_or_create_node(node2)
        self.components.append(Capacitor(name, node1, node2, capacitance))

    def delete_capacitor(self, name: str) -> None:
        """Remove the capacitor called ``name``."""
        self._remove(name, Capacitor, "capacitor")

    def add_sine_voltage(
        self,
        name: str,
        node1: str,
        node2: str,
        offset: float,
        amplitude: float,
        frequency: float,
    ) -> None:
        """Add a sinusoidal voltage source."""
        if self._has_component(name):
            raise DuplicateElementI(name)
        self.get_or_create_node(node1)
        self.get_or_create_node(node2)
        self.components.append(
            SineVoltageSource(name, node1, node2, offset, amplitude, frequency)
        )

    def add_inductor(self, name: str, node1: str, node2: str, value: str) -> None:
        """Add an inductor whose value is given as text such as ``1u``."""
        if not name.startswith("L"):
            raise ElementNotFound(name)
        if self._has_component(name):
            raise DuplicateElementI(name)
        inductance = parse_inductance(value)
        if inductance <= 0:
            raise NetlistSyntaxError("Error: Inductance cannot be zero or negative")
        self.get_or_create_node(node1)
        self.get_or_create_node(node2)
        self.components.append(Inductor(name, node1, node2, inductance))

    def delete_inductor(self, name: str) -> None:
        """Remove the inductor called ``name``."""
        self._remove(name, Inductor, "inductor")

    def add_diode(self, name: str, node1: str, node2: str, model: str) -> None:
        """Add a diode of model ``D`` or ``Z``."""
        if not name.startswith("D"):
            raise ElementNotFound(name)
        if self._has_component(name):
            raise CircuitError(f"Error: diode {name} already exists in the circuit")
        if model not in _DIODE_MODELS:
            raise CircuitError(f"Error: Model {model} not found in library")
        self.get_or_create_node(node1)
        self.get_or_create_node(node2)
        self.components.append(Diode(name, node1, node2, model))

    def delete_diode(self, name: str) -> None:
        """Remove the diode called ``name``."""
        self._remove(name, Diode, "diode")

    def get_or_create_node(self, name: str) -> Node:
        """Return the node called ``name``, creating it when missing."""
        node = self._find_node(name)
        if node is None:
            node = Node(name)
            self.nodes.append(node)
        return node

    def add_ground(self, name: str) -> None:
        """Connect ground to the node ``name``, creating the node if needed."""
        self.get_or_create_node(name).grounded = True

    def delete_ground(self, name: str) -> None:
        """Disconnect ground from an existing node."""
        node = self._find_node(name)
        if node is None:
            raise CircuitError("Node does not exist")
        node.grounded = False

    def node_names(self) -> List[str]:
        """Names of all nodes in insertion order."""
        return [node.id for node in self.nodes]

    def component_lines(self, type_name: Optional[str] = None) -> List[str]:
        """Info lines of all components, or only of those of ``type_name``."""
        return [
            component.info()
            for component in self.components
            if type_name is None or component.type_name == type_name
        ]

    def rename_node(self, old_name: str, new_name: str) -> None:
        """Give an existing node a new, unused name."""
        node = self._find_node(old_name)
        if node is None:
            raise CircuitError(f"ERROR: Node {old_name} does not exist in the circuit")
        if self.node_exists(new_name):
            raise CircuitError(f"ERROR: Node name {new_name} already exists")
        node.id = new_name

    def node_exists(self, name: str) -> bool:
        """True when a node called ``name`` exists."""
        return self._find_node(name) is not None

    def add_node(self, name: str) -> None:
        """Add a node if missing; adding ``GND`` marks the circuit as grounded."""
        if self.node_exists(name):
            return
        self.nodes.append(Node(name))
        if name == "GND":
            self._gnd_exists = True

    def has_gnd(self) -> bool:
        """True once a node named ``GND`` was added with :meth:`add_node`."""
        return self._gnd_exists

    def describe_all(self) -> List[str]:
        """Full descriptions of every component."""
        return [component.describe() for component in self.components]

    def add_component(self, component: Component) -> None:
        """Append an already built component."""
        self.components.append(component)


def validate_circuit(circuit: Circuit) -> Node:
    """Check the circuit has exactly one ground and unique names.

    Returns the ground node; raises CircuitError otherwise.
    """
    grounds = [node for node in circuit.nodes if node.grounded]
    if not grounds:
        raise CircuitError("Error: No ground node detected in the circuit.")
    if len(grounds) > 1:
        raise CircuitError("Error: More than one ground node detected in the circuit.")

    seen_nodes = set()
    for node in circuit.nodes:
        if node.id in seen_nodes:
            raise CircuitError(f"Error: Duplicate node name detected: {node.id}")
        seen_nodes.add(node.id)

    seen_components = set()
    for component in circuit.components:
        if component.id in seen_components:
            raise CircuitError(f"Error: Duplicate component name detected: {component.id}")
        seen_components.add(component.id)

    return grounds[0]