import numpy as np
import pytest

from l2spice.sim.mna import StaticSystem, build_static_system, solve_linear
from l2spice.sim.network import Capacitor, Inductor, Network, Resistor, VoltageSource
from l2spice.sim.stamps import stamp_resistors, stamp_source_voltages, stamp_voltage_sources


def _network(*elements):
    net = Network()
    for element in elements:
        net.add(element)
    return net


def _divider():
    return _network(
        VoltageSource("V1", 0, 1, 10.0),
        Resistor("R1", 1, 2, 1000.0),
        Resistor("R2", 2, 0, 1000.0),
    )


def test_static_system_of_resistive_network_matches_stamps():
    net = _divider()
    system = build_static_system(net)
    expected = np.zeros((net.unknown_count(), net.unknown_count()))
    stamp_resistors(net, expected)
    stamp_voltage_sources(net, expected)
    assert system.size == net.unknown_count()
    assert np.array_equal(system.matrix, expected)


def test_voltage_divider_solution():
    net = _divider()
    system = build_static_system(net)
    rhs = np.zeros(system.size)
    stamp_source_voltages(net, rhs, 0.0)
    x = solve_linear(system.matrix, rhs)
    assert x[0] == pytest.approx(10.0)
    assert x[1] == pytest.approx(5.0)
    assert np.allclose(system.matrix @ x, rhs)


def test_capacitor_branch_entries():
    net = _network(Resistor("R1", 1, 0, 1.0), Capacitor("C1", 1, 0, 1e-6))
    m = build_static_system(net).matrix
    assert m[1, 1] == -1.0
    assert m[0, 1] == 1.0
    assert m[1, 0] == 0.0


def test_inductor_branch_is_symmetric():
    net = _network(
        Resistor("R1", 1, 0, 1.0),
        Resistor("R2", 2, 0, 1.0),
        Inductor("L1", 1, 2, 1e-3),
    )
    m = build_static_system(net).matrix
    assert m[2, 0] == -1.0
    assert m[2, 1] == 1.0
    assert np.array_equal(m, m.T)


def test_empty_network_is_rejected():
    with pytest.raises(ValueError):
        build_static_system(Network())


def test_network_without_ground_is_rejected():
    net = _network(Resistor("R1", 1, 2, 1.0))
    with pytest.raises(ValueError):
        build_static_system(net)


def test_static_system_size():
    system = StaticSystem(np.eye(3))
    assert system.size == 3


def test_solve_linear_round_trip():
    rng = np.random.default_rng(7)
    a = rng.normal(size=(5, 5)) + 5 * np.eye(5)
    x = rng.normal(size=5)
    assert np.allclose(solve_linear(a, a @ x), x)


def test_solve_linear_singular_raises():
    with pytest.raises(ValueError):
        solve_linear(np.zeros((2, 2)), np.ones(2))


def test_solve_linear_shape_mismatch_raises():
    with pytest.raises(ValueError):
        solve_linear(np.eye(2), np.ones(3))
    with pytest.raises(ValueError):
        solve_linear(np.ones((2, 3)), np.ones(2))