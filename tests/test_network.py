import numpy as np
import pytest

from l2spice.sim.network import (
    Capacitor,
    CircuitState,
    CurrentControlledCurrentSource,
    CurrentControlledVoltageSource,
    CurrentSource,
    Diode,
    Inductor,
    Network,
    Resistor,
    VoltageControlledCurrentSource,
    VoltageControlledVoltageSource,
    VoltageSource,
)
from l2spice.sim.sources import SineWaveform


def _rc_network():
    net = Network()
    net.add(VoltageSource("V1", 0, 1, 5.0))
    net.add(Resistor("R1", 1, 2, 1000.0))
    net.add(Capacitor("C1", 2, 0, 1e-6))
    return net


def test_empty_network_state():
    assert Network().state is CircuitState.NO_COMPONENT


def test_network_without_ground():
    net = Network()
    net.add(Resistor("R1", 1, 2, 10.0))
    assert net.state is CircuitState.NO_GROUND


def test_grounded_network_is_ok():
    assert _rc_network().state is CircuitState.OK


def test_node_count_counts_ground():
    net = _rc_network()
    assert net.node_count() == 3


def test_unknown_count_grows_with_branch_elements():
    net = _rc_network()
    before = net.unknown_count()
    net.add(Inductor("L1", 2, 0, 1e-3))
    assert net.unknown_count() == before + 1
    net.add(Resistor("R2", 2, 0, 50.0))
    assert net.unknown_count() == before + 1
    net.add(CurrentControlledVoltageSource("H1", 1, 0, 2.0, "V1"))
    assert net.unknown_count() == before + 2


def test_elements_sorted_by_kind():
    net = _rc_network()
    net.add(Diode("D1", 2, 0, 1e-14))
    net.add(CurrentSource("I1", 0, 2, 1e-3))
    assert [r.name for r in net.resistors] == ["R1"]
    assert [c.name for c in net.capacitors] == ["C1"]
    assert [d.name for d in net.diodes] == ["D1"]
    assert [s.name for s in net.current_sources] == ["I1"]
    assert [v.name for v in net.voltage_sources] == ["V1"]


def test_duplicate_names_rejected():
    net = _rc_network()
    with pytest.raises(ValueError):
        net.add(Resistor("R1", 1, 0, 5.0))


def test_negative_node_rejected():
    with pytest.raises(ValueError):
        Resistor("R1", -1, 0, 5.0)


def test_dependent_node_left_and_right():
    net = _rc_network()
    assert net.dependent_node("R1L") == 1
    assert net.dependent_node("R1R") == 2


def test_dependent_node_errors():
    net = _rc_network()
    with pytest.raises(KeyError):
        net.dependent_node("R9L")
    with pytest.raises(KeyError):
        net.dependent_node("R1X")


def test_dependent_branch():
    net = _rc_network()
    assert net.dependent_branch("C1").capacitance == 1e-6
    with pytest.raises(KeyError):
        net.dependent_branch("missing")


def test_voltage_source_index():
    net = _rc_network()
    net.add(VoltageSource("V2", 0, 2, 1.0))
    assert net.voltage_source_index("V1") == 0
    assert net.voltage_source_index("V2") == 1
    with pytest.raises(KeyError):
        net.voltage_source_index("R1")


def test_initial_state_places_node_voltages():
    net = _rc_network()
    net.initial_conditions[2] = 3.0
    net.initial_conditions[0] = 9.0
    state = net.initial_state()
    assert state.shape == (net.unknown_count(),)
    assert state[1] == 3.0
    assert np.count_nonzero(state) == 1


def test_sources_accept_waveforms_and_floats():
    dc = VoltageSource("V1", 0, 1, 4.0)
    assert dc.voltage_at(10.0) == 4.0
    assert dc.is_dc
    sine = VoltageSource("V2", 0, 1, SineWaveform(1.0, 2.0, 50.0))
    assert sine.voltage_at(0.0) == pytest.approx(1.0)
    assert not sine.is_dc
    assert sine.frequency == 50.0
    current = CurrentSource("I1", 1, 0, 0.5)
    assert current.current_at(1.0) == 0.5


def test_controlled_sources_keep_controls():
    net = _rc_network()
    g = net.add(VoltageControlledCurrentSource("G1", 2, 0, 0.1, "R1L", "R1R"))
    e = net.add(VoltageControlledVoltageSource("E1", 0, 2, 3.0, "C1L", "C1R"))
    f = net.add(CurrentControlledCurrentSource("F1", 2, 0, 2.0, "V1"))
    assert net.vccs == (g,)
    assert net.vcvs == (e,)
    assert net.cccs == (f,)
    assert net.dependent_node(g.control2) == 2
    assert net.voltage_source_index(f.branch) == 0