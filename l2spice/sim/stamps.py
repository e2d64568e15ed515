"""Modified nodal analysis stamps for the linear elements of a network.

Unknowns are laid out as node voltages (node ``k`` at row ``k - 1``; ground
has no row), then branch currents of voltage sources, capacitors, inductors,
voltage-controlled voltage sources and current-controlled voltage sources.
Every stamp adds into the array it is given, in place.
"""

import numpy as np

from .network import Network


def _add(matrix: np.ndarray, row: int, col: int, value: float) -> None:
    if row >= 0 and col >= 0:
        matrix[row, col] += value


def _couple(matrix: np.ndarray, branch: int, node_row: int, value: float) -> None:
    """Add ``value`` to the branch row and the node column symmetrically."""
    _add(matrix, branch, node_row, value)
    _add(matrix, node_row, branch, value)


def _add_entry(vector: np.ndarray, row: int, value: float) -> None:
    if row >= 0:
        vector[row] += value


def _voltage_source_offset(network: Network) -> int:
    return network.node_count() - 1


def _vcvs_offset(network: Network) -> int:
    return (
        _voltage_source_offset(network)
        + len(network.voltage_sources)
        + len(network.capacitors)
        + len(network.inductors)
    )


def _ccvs_offset(network: Network) -> int:
    return _vcvs_offset(network) + len(network.vcvs)


def stamp_resistors(network: Network, matrix: np.ndarray) -> None:
    """Add the conductance of every resistor."""
    for resistor in network.resistors:
        if resistor.node1 == 0 and resistor.node2 == 0:
            continue
        conductance = 1.0 / resistor.resistance
        a, b = resistor.node1 - 1, resistor.node2 - 1
        _add(matrix, a, a, conductance)
        _add(matrix, b, b, conductance)
        _add(matrix, a, b, -conductance)
        _add(matrix, b, a, -conductance)


def stamp_voltage_sources(network: Network, matrix: np.ndarray) -> None:
    """Tie each voltage source's branch current to its terminals.

    The branch row reads ``V(node2) - V(node1)``.
    """
    offset = _voltage_source_offset(network)
    for index, source in enumerate(network.voltage_sources):
        if source.node1 == 0 and source.node2 == 0:
            continue
        row = offset + index
        _couple(matrix, row, source.node2 - 1, 1.0)
        _couple(matrix, row, source.node1 - 1, -1.0)


def stamp_vccs(network: Network, matrix: np.ndarray) -> None:
    """Add the transconductance of every voltage-controlled current source."""
    for source in network.vccs:
        out1, out2 = source.node1 - 1, source.node2 - 1
        ctrl1 = network.dependent_node(source.control1) - 1
        ctrl2 = network.dependent_node(source.control2) - 1
        if out1 < 0 and out2 < 0:
            continue
        if ctrl1 < 0 and ctrl2 < 0:
            continue
        gain = source.coefficient
        _add(matrix, out1, ctrl1, gain)
        _add(matrix, out1, ctrl2, -gain)
        _add(matrix, out2, ctrl1, -gain)
        _add(matrix, out2, ctrl2, gain)


def stamp_vcvs(network: Network, matrix: np.ndarray) -> None:
    """Add the constraint rows of every voltage-controlled voltage source."""
    offset = _vcvs_offset(network)
    for index, source in enumerate(network.vcvs):
        out1, out2 = source.node1 - 1, source.node2 - 1
        ctrl1 = network.dependent_node(source.control1) - 1
        ctrl2 = network.dependent_node(source.control2) - 1
        if out1 < 0 and out2 < 0:
            continue
        if ctrl1 < 0 and ctrl2 < 0:
            continue
        row = offset + index
        gain = source.coefficient
        _couple(matrix, row, out2, 1.0)
        _couple(matrix, row, out1, -1.0)
        _add(matrix, row, ctrl2, gain)
        _add(matrix, row, ctrl1, -gain)


def stamp_cccs(network: Network, matrix: np.ndarray) -> None:
    """Inject a multiple of a voltage source's branch current at the outputs."""
    offset = _voltage_source_offset(network)
    for source in network.cccs:
        column = offset + network.voltage_source_index(source.branch)
        _add(matrix, source.node1 - 1, column, source.coefficient)
        _add(matrix, source.node2 - 1, column, -source.coefficient)


def stamp_ccvs(network: Network, matrix: np.ndarray) -> None:
    """Add the constraint rows of every current-controlled voltage source."""
    offset = _ccvs_offset(network)
    sources_offset = _voltage_source_offset(network)
    for index, source in enumerate(network.ccvs):
        column = sources_offset + network.voltage_source_index(source.branch)
        row = offset + index
        _couple(matrix, row, source.node1 - 1, -1.0)
        _couple(matrix, row, source.node2 - 1, 1.0)
        matrix[row, column] -= source.coefficient


def stamp_current_sources(network: Network, vector: np.ndarray, t: float) -> None:
    """Add every current source's value at time ``t`` to the right-hand side."""
    for source in network.current_sources:
        if source.node1 == 0 and source.node2 == 0:
            continue
        current = source.current_at(t)
        _add_entry(vector, source.node1 - 1, current)
        _add_entry(vector, source.node2 - 1, -current)


def stamp_source_voltages(network: Network, vector: np.ndarray, t: float) -> None:
    """Put every voltage source's value at time ``t`` on its branch row."""
    offset = _voltage_source_offset(network)
    for index, source in enumerate(network.voltage_sources):
        if source.node1 == 0 and source.node2 == 0:
            continue
        vector[offset + index] += source.voltage_at(t)