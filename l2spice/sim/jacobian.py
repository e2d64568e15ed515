"""The Jacobian used by the Newton iteration of a transient step."""

import math

import numpy as np

from .network import Network
from .stamps import (
    stamp_cccs,
    stamp_ccvs,
    stamp_resistors,
    stamp_vccs,
    stamp_vcvs,
    stamp_voltage_sources,
)

_THERMAL_SLOPE = 40.0


def _add(matrix: np.ndarray, row: int, col: int, value: float) -> None:
    if row >= 0 and col >= 0:
        matrix[row, col] += value


def _node_voltage(state: np.ndarray, node: int) -> float:
    return 0.0 if node == 0 else float(state[node - 1])


def _stamp_capacitors(network: Network, matrix: np.ndarray, timestep: float) -> None:
    offset = network.node_count() - 1 + len(network.voltage_sources)
    for index, capacitor in enumerate(network.capacitors):
        if capacitor.node1 == 0 and capacitor.node2 == 0:
            continue
        row = offset + index
        scale = capacitor.capacitance / timestep
        a, b = capacitor.node1 - 1, capacitor.node2 - 1
        _add(matrix, a, row, 1.0)
        _add(matrix, b, row, -1.0)
        _add(matrix, row, a, scale)
        _add(matrix, row, b, -scale)


def _stamp_inductors(network: Network, matrix: np.ndarray, timestep: float) -> None:
    offset = (
        network.node_count() - 1 + len(network.voltage_sources) + len(network.capacitors)
    )
    for index, inductor in enumerate(network.inductors):
        if inductor.node1 == 0 and inductor.node2 == 0:
            continue
        row = offset + index
        scale = timestep / inductor.inductance
        a, b = inductor.node1 - 1, inductor.node2 - 1
        _add(matrix, a, row, -1.0)
        _add(matrix, b, row, 1.0)
        _add(matrix, row, a, -scale)
        _add(matrix, row, b, scale)


def _stamp_diodes(network: Network, matrix: np.ndarray, state: np.ndarray) -> None:
    for diode in network.diodes:
        if diode.node1 == 0 and diode.node2 == 0:
            continue
        vd = _node_voltage(state, diode.node1) - _node_voltage(state, diode.node2)
        if vd <= 0:
            continue
        try:
            conductance = _THERMAL_SLOPE * diode.isat * math.exp(_THERMAL_SLOPE * vd)
        except OverflowError:
            continue
        if math.isinf(conductance):
            continue
        a, b = diode.node1 - 1, diode.node2 - 1
        _add(matrix, a, a, conductance)
        _add(matrix, b, b, conductance)
        _add(matrix, a, b, -conductance)
        _add(matrix, b, a, -conductance)


def jacobian(network: Network, last_state: np.ndarray, timestep: float) -> np.ndarray:
    """Jacobian of the step equations linearised around ``last_state``.

    Forward-biased diodes contribute their small-signal conductance; a bias
    whose conductance overflows is left out. Raises ValueError for a
    non-positive time step or a state of the wrong length.
    """
    if timestep <= 0:
        raise ValueError("time step must be positive")
    size = network.unknown_count()
    state = np.asarray(last_state, dtype=float).reshape(-1)
    if state.shape[0] != size:
        raise ValueError(f"state has {state.shape[0]} entries, expected {size}")
    matrix = np.zeros((size, size))
    stamp_resistors(network, matrix)
    stamp_voltage_sources(network, matrix)
    _stamp_capacitors(network, matrix, timestep)
    _stamp_inductors(network, matrix, timestep)
    _stamp_diodes(network, matrix, state)
    stamp_vccs(network, matrix)
    stamp_vcvs(network, matrix)
    stamp_cccs(network, matrix)
    stamp_ccvs(network, matrix)
    return matrix