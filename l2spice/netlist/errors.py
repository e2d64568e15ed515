"""Exceptions raised while building or editing a netlist circuit."""


class CircuitError(Exception):
    """Base class for every error reported by the netlist layer."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ElementNotFound(CircuitError):
    """An element name does not belong to any known element kind."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Error: Element {name} not found in library")
        self.name = name


class _DuplicateElement(CircuitError):
    kind = "Element"

    def __init__(self, name: str) -> None:
        super().__init__(f"Error: {self.kind} {name} already exists in the circuit")
        self.name = name


class DuplicateElementR(_DuplicateElement):
    """A resistor with the same name is already in the circuit."""

    kind = "Resistor"


class DuplicateElementC(_DuplicateElement):
    """A capacitor with the same name is already in the circuit."""

    kind = "Capacitor"


class DuplicateElementI(_DuplicateElement):
    """An inductor (or sine source) with the same name is already in the circuit."""

    kind = "Inductor"


class NetlistSyntaxError(CircuitError):
    """A command or value could not be parsed."""

    def __init__(self, message: str = "Error: Syntax error") -> None:
        super().__init__(message)