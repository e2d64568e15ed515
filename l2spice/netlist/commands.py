"""Interpretation of textual netlist commands and schematic files."""

import os
import re
from typing import Callable, List, Match, Optional, Pattern, Tuple

from .circuit import Circuit
from .elements import CCCS, CCVS, VCCS, VCVS
from .errors import CircuitError, ElementNotFound, NetlistSyntaxError
from .values import is_valid_node_id, parse_number

_NUM = r"[+-]?\d*\.?\d+"
_NUM_EXP = _NUM + r"(?:[eE][+-]?\d+)?"
_NODE = r"[A-Za-z0-9_:]+"


def _rx(pattern: str) -> Pattern[str]:
    return re.compile(pattern, re.ASCII)


_SINE = _rx(
    rf"add\s+VoltageSource\s+(\w+)\s+(\w+)\s+(\w+)\s+SIN\(\s*({_NUM})\s+({_NUM})\s+({_NUM})\s*\)"
)
_VOLTAGE = _rx(rf"add\s+VoltageSource\s+(\w+)\s+(\w+)\s+(\w+)\s+({_NUM_EXP})")
_CURRENT = _rx(rf"add\s+CurrentSource\s+(\w+)\s+(\w+)\s+(\w+)\s+({_NUM_EXP})")

_SOURCE_HELP = "ERROR: Invalid syntax - correct format:\nadd {kind} <Name> <Node1> <Node2> <Value>"
_RENAME_HELP = "ERROR: Invalid syntax - correct format:\n.rename node <old_name> <new_name>"

Handler = Callable[[Circuit, Match[str]], List[str]]


def _require_upper(name: str) -> None:
    if not name[0].isupper():
        raise ElementNotFound(name)


def _sine(circuit: Circuit, m: Match[str]) -> List[str]:
    name, node1, node2 = m.group(1, 2, 3)
    offset, amplitude, frequency = (parse_number(m.group(i)) for i in (4, 5, 6))
    circuit.add_sine_voltage(name, node1, node2, offset, amplitude, frequency)
    return [f"Sine voltage source {name} added successfully."]


def _voltage(circuit: Circuit, m: Match[str]) -> List[str]:
    circuit.add_voltage_source(m[1], m[2], m[3], parse_number(m[4]))
    return [f"Voltage Source {m[1]} added."]


def _current(circuit: Circuit, m: Match[str]) -> List[str]:
    circuit.add_current_source(m[1], m[2], m[3], parse_number(m[4]))
    return [f"Current Source {m[1]} added."]


def _add_resistor(circuit: Circuit, m: Match[str]) -> List[str]:
    _require_upper(m[1])
    circuit.add_resistor(m[1], m[2], m[3], m[4])
    return [f"Resistor {m[1]} added successfully."]


def _delete_resistor(circuit: Circuit, m: Match[str]) -> List[str]:
    _require_upper(m[1])
    circuit.delete_resistor(m[1])
    return [f"Resistor {m[1]} deleted successfully."]


def _add_capacitor(circuit: Circuit, m: Match[str]) -> List[str]:
    _require_upper(m[1])
    circuit.add_capacitor(m[1], m[2], m[3], m[4])
    return [f"Capacitor {m[1]} added successfully."]


def _delete_capacitor(circuit: Circuit, m: Match[str]) -> List[str]:
    _require_upper(m[1])
    circuit.delete_capacitor(m[1])
    return [f"Capacitor {m[1]} deleted successfully."]


def _add_inductor(circuit: Circuit, m: Match[str]) -> List[str]:
    _require_upper(m[1])
    circuit.add_inductor(m[1], m[2], m[3], m[4])
    return [f"Inductor {m[1]} added successfully."]


def _delete_inductor(circuit: Circuit, m: Match[str]) -> List[str]:
    _require_upper(m[1])
    circuit.delete_inductor(m[1])
    return [f"Inductor {m[1]} deleted successfully."]


def _add_diode(circuit: Circuit, m: Match[str]) -> List[str]:
    name, model = m[1], m[4]
    _require_upper(name)
    if model not in ("D", "Z"):
        raise CircuitError(f"Error: Model {model} not found in library")
    circuit.add_diode(name, m[2], m[3], model)
    return [f"Diode {name} added successfully."]


def _delete_diode(circuit: Circuit, m: Match[str]) -> List[str]:
    circuit.delete_diode(m[1])
    return [f"Diode {m[1]} deleted successfully."]


def _ground_target(m: Match[str]) -> str:
    element, node = m[1], m[2]
    if element != "GND":
        raise CircuitError(f"Error: Element {element} not found in library")
    if not is_valid_node_id(node):
        raise NetlistSyntaxError("Error: Syntax error")
    return node


def _add_ground(circuit: Circuit, m: Match[str]) -> List[str]:
    node = _ground_target(m)
    circuit.add_ground(node)
    return [f"Ground connected to node {node} successfully."]


def _delete_ground(circuit: Circuit, m: Match[str]) -> List[str]:
    node = _ground_target(m)
    circuit.delete_ground(node)
    return [f"Ground removed from node {node} successfully."]


def _nodes(circuit: Circuit, m: Match[str]) -> List[str]:
    names = circuit.node_names()
    if circuit.has_gnd() and "GND" not in names:
        names.append("GND")
    if not names:
        return ["No nodes in the circuit."]
    return ["Available nodes:", ", ".join(names)]


def _list(circuit: Circuit, m: Match[str]) -> List[str]:
    type_name = m[1]
    if type_name is None:
        return circuit.component_lines()
    lines = circuit.component_lines(type_name)
    return lines or [f"No components of type {type_name} found."]


def _rename(circuit: Circuit, m: Match[str]) -> List[str]:
    old_name, new_name = m[1], m[2]
    if not (is_valid_node_id(old_name) and is_valid_node_id(new_name)):
        raise NetlistSyntaxError(_RENAME_HELP)
    try:
        circuit.rename_node(old_name, new_name)
    except CircuitError as exc:
        return [str(exc)]
    return [f"SUCCESS: Node renamed from {old_name} to {new_name}"]


def _voltage_controlled(kind: type) -> Handler:
    def handle(circuit: Circuit, m: Match[str]) -> List[str]:
        component = kind(m[1], m[2], m[3], m[4], m[5], parse_number(m[6]))
        circuit.add_component(component)
        return [f"[ADDED] {component.info()}"]

    return handle


def _current_controlled(kind: type) -> Handler:
    def handle(circuit: Circuit, m: Match[str]) -> List[str]:
        component = kind(m[1], m[2], m[3], m[4], parse_number(m[5]))
        circuit.add_component(component)
        return [f"[ADDED] {component.info()}"]

    return handle


def _new_file(circuit: Circuit, m: Match[str]) -> List[str]:
    path = m[1].strip(" \t\n\r")
    try:
        with open(path, "a", encoding="utf-8"):
            pass
    except OSError:
        raise CircuitError(f"[-] Error creating file at: {path}") from None
    return [f"[+] File created or opened successfully: {path}"]


_SOURCE_RULES: List[Tuple[Pattern[str], Handler]] = [
    (_SINE, _sine),
    (_VOLTAGE, _voltage),
    (_CURRENT, _current),
]

_RULES: List[Tuple[Pattern[str], Handler]] = [
    (
        _rx(
            rf"add\s+([Rr][A-Za-z0-9_]+)\s+({_NODE})\s+({_NODE})\s+"
            r"([0-9.eE+-]+[kK]?|[0-9.eE+-]+(Meg|M)?)"
        ),
        _add_resistor,
    ),
    (_rx(r"delete\s+([Rr][A-Za-z0-9_]+)"), _delete_resistor),
    (
        _rx(rf"add\s+([Cc][A-Za-z0-9_]+)\s+({_NODE})\s+({_NODE})\s+([0-9.eE+-]+[uUnnFf]?)"),
        _add_capacitor,
    ),
    (_rx(r"delete\s+([Cc][A-Za-z0-9_]+)"), _delete_capacitor),
    (
        _rx(
            rf"add\s+([Ll][A-Za-z0-9_]+)\s+({_NODE})\s+({_NODE})\s+"
            r"([0-9.eE+-]+(u|U|\u00b5|m|M|H)?)"
        ),
        _add_inductor,
    ),
    (_rx(r"delete\s+([Ll][A-Za-z0-9_]+)"), _delete_inductor),
    (
        _rx(rf"add\s+([Dd][A-Za-z0-9_]+)\s+({_NODE})\s+({_NODE})\s+([A-Za-z0-9_]+)"),
        _add_diode,
    ),
    (_rx(r"delete\s+(D[A-Za-z0-9_]+)"), _delete_diode),
    (_rx(r"add\s+([A-Za-z0-9_]+)\s+([A-Za-z0-9_]+)"), _add_ground),
    (_rx(r"delete\s+([A-Za-z0-9_]+)\s+([A-Za-z0-9_]+)"), _delete_ground),
    (_rx(r"\.nodes"), _nodes),
    (_rx(r"\.list(?:\s+([A-Za-z0-9_]+))?"), _list),
    (_rx(r"\.rename\s+node\s+([A-Za-z0-9_]+)\s+([A-Za-z0-9_]+)"), _rename),
    (
        _rx(rf"add\s+E([A-Za-z0-9_]+)\s+(\w+)\s+(\w+)\s+(\w+)\s+(\w+)\s+({_NUM})"),
        _voltage_controlled(VCVS),
    ),
    (
        _rx(rf"add\s+G([A-Za-z0-9_]+)\s+(\w+)\s+(\w+)\s+(\w+)\s+(\w+)\s+({_NUM})"),
        _voltage_controlled(VCCS),
    ),
    (
        _rx(rf"add\s+H([A-Za-z0-9_]+)\s+(\w+)\s+(\w+)\s+(\w+)\s+({_NUM})"),
        _current_controlled(CCVS),
    ),
    (
        _rx(rf"add\s+F([A-Za-z0-9_]+)\s+(\w+)\s+(\w+)\s+(\w+)\s+({_NUM})"),
        _current_controlled(CCCS),
    ),
    (re.compile(r"NewFile (.*)", re.DOTALL), _new_file),
]


def _dispatch(circuit: Circuit, line: str, rules) -> Optional[List[str]]:
    for pattern, handler in rules:
        match = pattern.fullmatch(line)
        if match is not None:
            return handler(circuit, match)
    return None


def handle_command(circuit: Circuit, line: str) -> List[str]:
    """Apply one command to ``circuit`` and return the lines it reports.

    Raises CircuitError (or a subclass) when the command is rejected.
    """
    output = _dispatch(circuit, line, _SOURCE_RULES)
    if output is not None:
        return output
    for kind in ("VoltageSource", "CurrentSource"):
        if line.startswith(f"add {kind}"):
            raise NetlistSyntaxError(_SOURCE_HELP.format(kind=kind))
    output = _dispatch(circuit, line, _RULES)
    if output is not None:
        return output
    raise NetlistSyntaxError()


def convert_to_command(line: str) -> str:
    """Prefix element lines (``R1 a b 10``) with ``add``; other lines pass through."""
    tokens = line.split()
    if tokens and tokens[0][0].upper() in "RCLVID":
        return "add " + line
    return line


def schematic_line_to_command(line: str) -> Optional[str]:
    """Turn ``<type> <name> <node1> <node2> <value>`` into an add command.

    Returns None when the line has fewer than five fields.
    """
    tokens = line.split()
    if len(tokens) < 5:
        return None
    kind, name, node1, node2, value = tokens[:5]
    if kind == "V":
        return f"add VoltageSource {name} {node1} {node2} {value}"
    return f"add {kind}{name} {node1} {node2} {value}"


def _read_lines(path: str) -> List[str]:
    with open(path, encoding="utf-8", errors="replace") as file:
        return [raw.rstrip("\n") for raw in file]


def load_schematic_file(path: str, circuit: Circuit) -> List[str]:
    """Run every line of a command file against ``circuit``; return the report."""
    try:
        lines = _read_lines(path)
    except OSError:
        return [f"[ERROR] Could not open file: {path}"]
    report: List[str] = []
    for line in lines:
        try:
            report.extend(handle_command(circuit, convert_to_command(line)))
        except CircuitError as exc:
            report.append(f"[Exception in file] {exc}")
    return report


def parse_schematic_file(path: str, circuit: Circuit) -> Tuple[bool, List[str]]:
    """Load a schematic file into ``circuit``.

    Returns whether a ``.end`` line was seen, and the lines reported.
    """
    try:
        lines = _read_lines(path)
    except OSError:
        return False, [f"Failed to open file: {path}"]
    report: List[str] = []
    for line in lines:
        if line == ".end":
            return True, report
        command = schematic_line_to_command(line)
        if command is None:
            report.append(f"Invalid line format: {line}")
            continue
        try:
            report.extend(handle_command(circuit, command))
        except CircuitError as exc:
            report.append(f"[Exception while parsing] {exc}")
    return False, report


def handle_new_file(path: str, circuits: List[Circuit]) -> List[str]:
    """Load a schematic into a fresh circuit appended to ``circuits``."""
    if not os.path.exists(path):
        return [f"File not found: {path}"]
    circuit = Circuit()
    has_end, report = parse_schematic_file(path, circuit)
    circuits.append(circuit)
    report.append(f"File loaded: {path}")
    if not has_end:
        report.append(
            "This schematic has no '.end'. You can still add components "
            "using the interactive mode."
        )
    return report