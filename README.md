# l2spice

l2spice is a small circuit tool in two parts:

- `l2spice.netlist` is an interactive netlist editor. It reads commands such as
  `add R1 n1 n2 10k` and keeps track of components and nodes. It also checks that
  a finished circuit has exactly one ground and that its names are unique.
- `l2spice.sim` builds modified nodal analysis systems for networks with numbered
  nodes. It supports resistors, capacitors, inductors, independent sources
  (DC, sine and square waveforms), diodes and the four kinds of controlled source.
  It can solve the DC operating point and single backward-Euler time steps.

## Installation

```
pip install .
```

## The interactive editor

Start a session with:

```
l2spice
```

The `--schematics FOLDER` option sets the folder that `show existing schematics`
browses. The default is `./schematics`.

Then type commands at the prompt:

```
> add R1 n1 GND 1k
Resistor R1 added successfully.
> add C1 n1 n2 10u
Capacitor C1 added successfully.
> add GND GND
Ground connected to node GND successfully.
> .nodes
Available nodes:
n1, GND, n2
> .rename node n2 out
SUCCESS: Node renamed from n2 to out
> delete C1
Capacitor C1 deleted successfully.
> exit
```

Commands it accepts:

- `add R<name> <node1> <node2> <value>`: a resistor. The value takes the suffixes `k`, `K`, `M` or `Meg`.
- `add C<name> ...` and `add L<name> ...`: a capacitor or an inductor. The value takes the suffixes `u`, `n` or `F`.
- `add D<name> <node1> <node2> <model>`: a diode with model `D` or `Z`.
- `add VoltageSource <name> <node1> <node2> <value>`, or `... SIN(<offset> <amplitude> <frequency>)` for a sine source.
- `add CurrentSource <name> <node1> <node2> <value>`.
- `add E<name> <n1> <n2> <c1> <c2> <gain>` and `add G...`: voltage-controlled sources.
- `add H<name> <n1> <n2> <vname> <gain>` and `add F...`: current-controlled sources.
- `add GND <node>` and `delete GND <node>`.
- `delete <name>` removes a resistor, capacitor, inductor or diode.
- `.nodes` lists the nodes.
- `.list [type]` lists the components, or only those of one type such as `Resistor`.
- `.rename node <old> <new>` renames a node.
- `NewFile <path>` creates the file, or opens it if it already exists.
- `another circuit` checks the current circuit and starts a fresh one.
- `show existing schematics` lets you pick a file from the schematics folder, shows it and loads it. A schematic without a `.end` line can be extended entry by entry.
- `exit` checks the circuit and ends the session.

From Python the same commands can be applied with
`l2spice.netlist.commands.handle_command(circuit, line)`. It returns the lines it
reports and raises `CircuitError` subclasses when it rejects a command.
`load_schematic_file` and `parse_schematic_file` read whole files.
`run_session(stdin, stdout)` in `l2spice.netlist.cli` runs a session on any text streams.

## Using the simulator from Python

```python
from l2spice.sim.network import Network, Resistor, VoltageSource
from l2spice.sim.sources import DCWaveform
from l2spice.sim.dc import dc_analysis

network = Network()
network.add(VoltageSource("V1", 0, 1, DCWaveform(5.0)))
network.add(Resistor("R1", 1, 2, 1000.0))
network.add(Resistor("R2", 2, 0, 1000.0))
state = dc_analysis(network)   # state[1] is the voltage of node 2: 2.5
```

Node index `0` is ground. The state vector holds the non-ground node voltages
first. The branch currents of voltage sources, capacitors, inductors,
voltage-controlled voltage sources and current-controlled voltage sources follow.

If the network has no DC source, `dc_analysis` returns `network.initial_state()` unchanged.

To advance a network through time, build the static system once and call `step`:

```python
from l2spice.sim.mna import build_static_system
from l2spice.sim.stepping import step

system = build_static_system(network)
state = dc_analysis(network)
t, dt = 0.0, 1e-6
for _ in range(1000):
    state = step(network, system, state, dt, t)
    t += dt
```

Linear networks are solved directly. Networks with diodes use a Newton
iteration, and `step` raises `RuntimeError` if that iteration does not settle.

## What it does not do

The package has no driver for transient analysis over a whole interval. It does
not choose or adapt the step size. You call `step` yourself, with a time step of
your choice, as in the example above. It has no graphical schematic editor and no
plotting.

The netlist editor and the simulator are separate. A circuit built with the editor
is not turned into a `Network` for you.

## Running the tests

```
pip install .[test]
pytest
```