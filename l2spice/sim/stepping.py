"""One implicit (backward Euler) time step of a network's nodal system."""

import math
import sys
from typing import Tuple

import numpy as np

from .jacobian import jacobian
from .mna import StaticSystem, solve_linear
from .network import Network
from .stamps import stamp_current_sources, stamp_source_voltages

_THERMAL_SLOPE = 40.0
_NEWTON_TOLERANCE = 1e-1
_MAX_NEWTON_ITERATIONS = 500


def _node_voltage(state: np.ndarray, node: int) -> float:
    return 0.0 if node == 0 else float(state[node - 1])


def _add(matrix: np.ndarray, row: int, col: int, value: float) -> None:
    if row >= 0 and col >= 0:
        matrix[row, col] += value


def _checked_state(system: StaticSystem, last_state: np.ndarray, timestep: float) -> np.ndarray:
    if timestep <= 0:
        raise ValueError("time step must be positive")
    state = np.asarray(last_state, dtype=float).reshape(-1)
    if state.shape[0] != system.size:
        raise ValueError(f"state has {state.shape[0]} entries, expected {system.size}")
    return state


def assemble(
    network: Network,
    system: StaticSystem,
    last_state: np.ndarray,
    timestep: float,
    current_time: float,
) -> Tuple[np.ndarray, np.ndarray]:
    """Build the linear part of the step equations at ``current_time``.

    Returns a fresh matrix and right-hand side; ``system`` is left untouched.
    Raises ValueError for a non-positive time step or a state of the wrong length.
    """
    state = _checked_state(system, last_state, timestep)
    matrix = system.matrix.copy()
    rhs = np.zeros(system.size)
    stamp_current_sources(network, rhs, current_time)
    stamp_source_voltages(network, rhs, current_time)

    offset = network.node_count() - 1 + len(network.voltage_sources)
    for index, capacitor in enumerate(network.capacitors):
        if capacitor.node1 == 0 and capacitor.node2 == 0:
            continue
        row = offset + index
        scale = capacitor.capacitance / timestep
        _add(matrix, row, capacitor.node1 - 1, scale)
        _add(matrix, row, capacitor.node2 - 1, -scale)
        previous = _node_voltage(state, capacitor.node1) - _node_voltage(state, capacitor.node2)
        rhs[row] += scale * previous

    offset += len(network.capacitors)
    for index, inductor in enumerate(network.inductors):
        if inductor.node1 == 0 and inductor.node2 == 0:
            continue
        row = offset + index
        scale = inductor.inductance / timestep
        matrix[row, row] -= scale
        rhs[row] -= scale * state[row]

    return matrix, rhs


def _diode_currents(network: Network, state: np.ndarray, size: int) -> np.ndarray:
    currents = np.zeros(size)
    for diode in network.diodes:
        if diode.node1 == 0 and diode.node2 == 0:
            continue
        vd = _node_voltage(state, diode.node1) - _node_voltage(state, diode.node2)
        if vd <= 0:
            continue
        try:
            current = diode.isat * (math.exp(_THERMAL_SLOPE * vd) - 1)
        except OverflowError:
            continue
        if not math.isfinite(current) or abs(current) < sys.float_info.min:
            continue
        if diode.node1 != 0:
            currents[diode.node1 - 1] += current
        if diode.node2 != 0:
            currents[diode.node2 - 1] -= current
    return currents


def step(
    network: Network,
    system: StaticSystem,
    last_state: np.ndarray,
    timestep: float,
    current_time: float,
) -> np.ndarray:
    """Solve the state one ``timestep`` after ``last_state``.

    Linear networks are solved directly; networks with diodes use a Newton
    iteration started from ``last_state``. Raises RuntimeError when that
    iteration does not settle.
    """
    matrix, rhs = assemble(network, system, last_state, timestep, current_time)
    if not network.diodes:
        return solve_linear(matrix, rhs)

    current = np.asarray(last_state, dtype=float).reshape(-1).copy()
    for _ in range(_MAX_NEWTON_ITERATIONS):
        nonlinear = _diode_currents(network, current, system.size)
        jac = jacobian(network, current, timestep)
        residual = matrix @ current + nonlinear - rhs
        following = solve_linear(jac, jac @ current - residual)
        difference = float(np.max(np.abs(following - current))) if following.size else 0.0
        current = following
        if difference <= _NEWTON_TOLERANCE:
            return current
    raise RuntimeError("Newton iteration did not converge")