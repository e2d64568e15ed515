import pytest

from l2spice.netlist.circuit import Circuit, validate_circuit
from l2spice.netlist.elements import Capacitor, Inductor, Resistor, VoltageSource
from l2spice.netlist.errors import (
    CircuitError,
    DuplicateElementC,
    DuplicateElementI,
    DuplicateElementR,
    ElementNotFound,
    NetlistSyntaxError,
)
from l2spice.netlist.values import parse_capacitance, parse_resistance


def test_add_resistor_creates_nodes_and_component():
    circuit = Circuit()
    circuit.add_resistor("R1", "n1", "n2", "4.7k")
    assert circuit.node_names() == ["n1", "n2"]
    resistor = circuit.components[0]
    assert isinstance(resistor, Resistor)
    assert resistor.value == parse_resistance("4.7k")


def test_duplicate_resistor_rejected():
    circuit = Circuit()
    circuit.add_resistor("R1", "a", "b", "10")
    with pytest.raises(DuplicateElementR):
        circuit.add_resistor("R1", "a", "c", "20")
    assert len(circuit.components) == 1


def test_resistor_name_must_start_with_r():
    with pytest.raises(ElementNotFound):
        Circuit().add_resistor("X1", "a", "b", "10")


def test_delete_resistor():
    circuit = Circuit()
    circuit.add_resistor("R1", "a", "b", "10")
    circuit.delete_resistor("R1")
    assert circuit.components == []
    with pytest.raises(CircuitError, match="Cannot delete resistor"):
        circuit.delete_resistor("R1")


def test_capacitor_value_and_zero_rejected():
    circuit = Circuit()
    circuit.add_capacitor("C1", "a", "b", "10u")
    assert isinstance(circuit.components[0], Capacitor)
    assert circuit.components[0].value == parse_capacitance("10u")
    with pytest.raises(NetlistSyntaxError) as info:
        circuit.add_capacitor("C2", "a", "b", "0")
    assert str(info.value) == "Error: Capacitance cannot be zero or negative"
    with pytest.raises(DuplicateElementC):
        circuit.add_capacitor("C1", "a", "b", "1")


def test_delete_capacitor_only_removes_capacitors():
    circuit = Circuit()
    circuit.add_resistor("R1", "a", "b", "10")
    with pytest.raises(CircuitError):
        circuit.delete_capacitor("R1")
    circuit.add_capacitor("C1", "a", "b", "1n")
    circuit.delete_capacitor("C1")
    assert [c.name for c in circuit.components] == ["R1"]


def test_inductor_add_and_delete():
    circuit = Circuit()
    circuit.add_inductor("L1", "a", "b", "2u")
    assert isinstance(circuit.components[0], Inductor)
    with pytest.raises(DuplicateElementI):
        circuit.add_inductor("L1", "a", "b", "2u")
    with pytest.raises(ElementNotFound):
        circuit.add_inductor("Q1", "a", "b", "2u")
    circuit.delete_inductor("L1")
    assert circuit.components == []


def test_diode_checks():
    circuit = Circuit()
    circuit.add_diode("D1", "a", "b", "Z")
    assert circuit.components[0].model == "Z"
    with pytest.raises(CircuitError, match="already exists"):
        circuit.add_diode("D1", "a", "b", "D")
    with pytest.raises(CircuitError, match="Model Q not found"):
        circuit.add_diode("D2", "a", "b", "Q")
    circuit.delete_diode("D1")
    with pytest.raises(CircuitError):
        circuit.delete_diode("D1")


def test_sine_duplicate_rejected():
    circuit = Circuit()
    circuit.add_sine_voltage("V1", "a", "b", 0.0, 1.0, 50.0)
    with pytest.raises(DuplicateElementI):
        circuit.add_sine_voltage("V1", "a", "b", 0.0, 1.0, 50.0)


def test_ground_add_and_delete():
    circuit = Circuit()
    circuit.add_ground("n1")
    assert circuit.get_or_create_node("n1").grounded is True
    circuit.delete_ground("n1")
    assert circuit.get_or_create_node("n1").grounded is False
    with pytest.raises(CircuitError, match="Node does not exist"):
        circuit.delete_ground("missing")


def test_rename_node():
    circuit = Circuit()
    circuit.add_resistor("R1", "a", "b", "10")
    circuit.rename_node("a", "c")
    assert circuit.node_names() == ["c", "b"]
    with pytest.raises(CircuitError, match="does not exist"):
        circuit.rename_node("a", "d")
    with pytest.raises(CircuitError, match="already exists"):
        circuit.rename_node("c", "b")


def test_component_lines_filter():
    circuit = Circuit()
    circuit.add_resistor("R1", "a", "b", "10")
    circuit.add_capacitor("C1", "a", "b", "1u")
    assert circuit.component_lines() == [c.info() for c in circuit.components]
    assert circuit.component_lines("Capacitor") == [circuit.components[1].info()]
    assert circuit.component_lines("Diode") == []


def test_add_node_gnd_flag():
    circuit = Circuit()
    assert circuit.has_gnd() is False
    circuit.add_node("GND")
    circuit.add_node("GND")
    assert circuit.has_gnd() is True
    assert circuit.node_names() == ["GND"]


def test_describe_all_matches_components():
    circuit = Circuit()
    circuit.add_voltage_source("V1", "a", "b", 5.0)
    circuit.add_resistor("R1", "a", "b", "1k")
    assert circuit.describe_all() == [c.describe() for c in circuit.components]


def test_add_component_appends():
    circuit = Circuit()
    source = VoltageSource("V9", "x", "y", 1.0)
    circuit.add_component(source)
    assert circuit.components == [source]


def test_validate_circuit():
    circuit = Circuit()
    circuit.add_resistor("R1", "n1", "n2", "10")
    with pytest.raises(CircuitError, match="No ground"):
        validate_circuit(circuit)
    circuit.add_ground("n1")
    assert validate_circuit(circuit).id == "n1"
    circuit.add_ground("n2")
    with pytest.raises(CircuitError, match="More than one ground"):
        validate_circuit(circuit)


def test_validate_duplicate_components():
    circuit = Circuit()
    circuit.add_ground("a")
    circuit.add_voltage_source("V1", "a", "b", 1.0)
    circuit.add_voltage_source("V1", "a", "b", 2.0)
    with pytest.raises(CircuitError, match="Duplicate component name"):
        validate_circuit(circuit)