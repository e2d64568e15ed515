"""Interactive netlist editing: components, nodes, command parsing and sessions."""