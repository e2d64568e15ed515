"""Operating point (DC) analysis of a network."""

import math

import numpy as np

from .mna import build_static_system, solve_linear
from .network import CircuitState, Network

_THERMAL_SLOPE = 40.0
_THERMAL_VOLTAGE = 0.025


def _node_voltage(state: np.ndarray, node: int) -> float:
    return 0.0 if node == 0 else float(state[node - 1])


def _add(matrix: np.ndarray, row: int, col: int, value: float) -> None:
    if row >= 0 and col >= 0:
        matrix[row, col] += value


def _dc_rhs(network: Network, size: int):
    """Right-hand side from the DC sources, and whether any DC source exists."""
    rhs = np.zeros(size)
    has_dc = False
    for source in network.current_sources:
        if not source.is_dc:
            continue
        has_dc = True
        if source.node1 == 0 and source.node2 == 0:
            continue
        current = source.current_at(0.0)
        if source.node1 != 0:
            rhs[source.node1 - 1] += current
        if source.node2 != 0:
            rhs[source.node2 - 1] -= current
    offset = network.node_count() - 1
    for index, source in enumerate(network.voltage_sources):
        voltage = 0.0
        if source.is_dc:
            has_dc = True
            voltage = source.voltage_at(0.0)
        if source.node1 == 0 and source.node2 == 0:
            continue
        rhs[offset + index] += voltage
    return rhs, has_dc


def _stamp_conducting_diodes(network: Network, matrix: np.ndarray, state: np.ndarray) -> None:
    for diode in network.diodes:
        if diode.node1 == 0 and diode.node2 == 0:
            continue
        if diode.isat <= 0:
            raise ValueError(f"{diode.name}: saturation current must be positive")
        vd = _node_voltage(state, diode.node1) - _node_voltage(state, diode.node2)
        v_on = _THERMAL_VOLTAGE * math.log(_THERMAL_VOLTAGE / (math.sqrt(2) * diode.isat))
        if vd < v_on:
            continue
        try:
            conductance = _THERMAL_SLOPE * diode.isat * math.exp(_THERMAL_SLOPE * vd)
        except OverflowError:
            conductance = math.inf
        a, b = diode.node1 - 1, diode.node2 - 1
        _add(matrix, a, a, conductance)
        _add(matrix, b, b, conductance)
        _add(matrix, a, b, -conductance)
        _add(matrix, b, a, -conductance)


def dc_analysis(network: Network) -> np.ndarray:
    """Solve the operating point of ``network`` from its DC sources.

    Time-varying sources count as zero. When the network has no DC source
    at all, the initial state (initial node voltages) is returned unchanged.
    Diodes that the initial state biases beyond their turn-on voltage are
    replaced by their conductance at that bias. Raises ValueError when the
    network is not ready or the system is singular.
    """
    state = network.state
    if state is not CircuitState.OK:
        raise ValueError(f"network is not ready for analysis: {state.name}")
    last_state = network.initial_state()
    rhs, has_dc = _dc_rhs(network, network.unknown_count())
    if not has_dc:
        return last_state
    matrix = build_static_system(network).matrix.copy()
    _stamp_conducting_diodes(network, matrix, last_state)
    return solve_linear(matrix, rhs)