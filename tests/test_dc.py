import numpy as np
import pytest

from l2spice.sim.dc import dc_analysis
from l2spice.sim.mna import build_static_system
from l2spice.sim.network import (
    Capacitor,
    CurrentSource,
    Diode,
    Inductor,
    Network,
    Resistor,
    VoltageSource,
)
from l2spice.sim.sources import SineWaveform


def _divider(volts=10.0):
    net = Network()
    net.add(VoltageSource("V1", 0, 1, volts))
    net.add(Resistor("R1", 1, 2, 1000.0))
    net.add(Resistor("R2", 2, 0, 1000.0))
    return net


def test_divider_source_node_and_midpoint():
    x = dc_analysis(_divider(10.0))
    assert x[0] == pytest.approx(10.0)
    assert 2 * x[1] == pytest.approx(x[0])


def test_solution_satisfies_static_system():
    net = _divider(7.0)
    x = dc_analysis(net)
    matrix = build_static_system(net).matrix
    rhs = np.zeros(net.unknown_count())
    rhs[2] = 7.0
    assert np.allclose(matrix @ x, rhs)


def test_current_source_into_resistor():
    net = Network()
    source = net.add(CurrentSource("I1", 1, 0, 2.0))
    resistor = net.add(Resistor("R1", 1, 0, 5.0))
    x = dc_analysis(net)
    assert x[0] == pytest.approx(source.current_at(0) * resistor.resistance)


def test_capacitor_is_open_in_dc():
    net = Network()
    net.add(VoltageSource("V1", 0, 1, 4.0))
    net.add(Resistor("R1", 1, 2, 100.0))
    net.add(Capacitor("C1", 2, 0, 1e-6))
    x = dc_analysis(net)
    assert x[1] == pytest.approx(x[0])
    assert x[3] == pytest.approx(0.0, abs=1e-12)


def test_inductor_is_short_in_dc():
    net = Network()
    net.add(VoltageSource("V1", 0, 1, 5.0))
    net.add(Resistor("R1", 1, 2, 10.0))
    net.add(Inductor("L1", 2, 0, 1e-3))
    x = dc_analysis(net)
    assert x[1] == pytest.approx(0.0, abs=1e-12)
    assert abs(x[3]) == pytest.approx(5.0 / 10.0)


def test_no_dc_source_returns_initial_state():
    net = Network(initial_conditions={1: 3.0})
    net.add(VoltageSource("V1", 0, 1, SineWaveform(0.0, 1.0, 50.0)))
    net.add(Resistor("R1", 1, 0, 10.0))
    x = dc_analysis(net)
    assert np.array_equal(x, net.initial_state())
    assert x[0] == 3.0


def test_off_diode_leaves_node_at_source_voltage():
    net = Network()
    net.add(VoltageSource("V1", 0, 1, 1.0))
    net.add(Resistor("R1", 1, 2, 100.0))
    net.add(Diode("D1", 2, 0, 1e-14))
    x = dc_analysis(net)
    assert x[1] == pytest.approx(x[0])


def test_forward_biased_diode_pulls_node_down():
    net = Network(initial_conditions={2: 0.8})
    net.add(VoltageSource("V1", 0, 1, 1.0))
    net.add(Resistor("R1", 1, 2, 100.0))
    net.add(Diode("D1", 2, 0, 1e-14))
    x = dc_analysis(net)
    assert x[0] == pytest.approx(1.0)
    assert 0.0 < x[1] < x[0]


def test_empty_network_raises():
    with pytest.raises(ValueError):
        dc_analysis(Network())