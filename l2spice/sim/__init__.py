"""Modified nodal analysis of numbered-node networks: DC operating point and single time steps."""