"""The time-independent part of a network's nodal system, and its solver."""

from dataclasses import dataclass

import numpy as np

from .network import CircuitState, Network
from .stamps import (
    stamp_cccs,
    stamp_ccvs,
    stamp_resistors,
    stamp_vccs,
    stamp_vcvs,
    stamp_voltage_sources,
)


@dataclass(frozen=True)
class StaticSystem:
    """The system matrix before time-step dependent terms are added."""

    matrix: np.ndarray

    @property
    def size(self) -> int:
        """Number of unknowns."""
        return self.matrix.shape[0]


def _add(matrix: np.ndarray, row: int, col: int, value: float) -> None:
    if row >= 0 and col >= 0:
        matrix[row, col] += value


def _stamp_capacitor_branches(network: Network, matrix: np.ndarray) -> None:
    offset = network.node_count() - 1 + len(network.voltage_sources)
    for index, capacitor in enumerate(network.capacitors):
        if capacitor.node1 == 0 and capacitor.node2 == 0:
            continue
        row = offset + index
        matrix[row, row] = -1.0
        _add(matrix, capacitor.node1 - 1, row, 1.0)
        _add(matrix, capacitor.node2 - 1, row, -1.0)


def _stamp_inductor_branches(network: Network, matrix: np.ndarray) -> None:
    offset = (
        network.node_count() - 1 + len(network.voltage_sources) + len(network.capacitors)
    )
    for index, inductor in enumerate(network.inductors):
        if inductor.node1 == 0 and inductor.node2 == 0:
            continue
        row = offset + index
        for node, sign in ((inductor.node1 - 1, -1.0), (inductor.node2 - 1, 1.0)):
            _add(matrix, row, node, sign)
            _add(matrix, node, row, sign)


def build_static_system(network: Network) -> StaticSystem:
    """Stamp every element whose contribution does not depend on time.

    Raises ValueError when the network has no elements or no ground.
    """
    state = network.state
    if state is not CircuitState.OK:
        raise ValueError(f"network is not ready for analysis: {state.name}")
    size = network.unknown_count()
    matrix = np.zeros((size, size))
    stamp_resistors(network, matrix)
    stamp_voltage_sources(network, matrix)
    _stamp_capacitor_branches(network, matrix)
    _stamp_inductor_branches(network, matrix)
    stamp_vccs(network, matrix)
    stamp_vcvs(network, matrix)
    stamp_cccs(network, matrix)
    stamp_ccvs(network, matrix)
    return StaticSystem(matrix)


def solve_linear(matrix: np.ndarray, rhs: np.ndarray) -> np.ndarray:
    """Solve ``matrix @ x = rhs``; raises ValueError for bad shapes or a singular matrix."""
    a = np.asarray(matrix, dtype=float)
    b = np.asarray(rhs, dtype=float)
    if a.ndim != 2 or a.shape[0] != a.shape[1]:
        raise ValueError(f"matrix must be square, got shape {a.shape}")
    if b.shape[0] != a.shape[0]:
        raise ValueError(f"right-hand side has {b.shape[0]} rows, expected {a.shape[0]}")
    try:
        return np.linalg.solve(a, b)
    except np.linalg.LinAlgError:
        raise ValueError("singular system") from None