"""Circuit netlist editing and modified nodal analysis simulation."""

__version__ = "0.1.0"