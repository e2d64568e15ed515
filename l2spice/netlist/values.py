"""Parsing of element values and identifiers used in netlist commands."""

import re

from .errors import NetlistSyntaxError

_FLOAT_PREFIX = re.compile(
    r"\s*([+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)

_RESISTANCE = re.compile(r"([0-9.]+)(e[+-]?[0-9]+)?(k|K|Meg|M)?")

_RESISTANCE_SCALE = {"k": 1e3, "K": 1e3, "M": 1e6, "Meg": 1e6}

_SMALL_SCALE = {"u": 1e-6, "U": 1e-6, "n": 1e-9, "N": 1e-9, "f": 1.0, "F": 1.0}

_DIGITS = frozenset("0123456789")


def parse_number(text: str) -> float:
    """Parse the longest leading floating point number in ``text``.

    Leading whitespace is skipped and trailing characters are ignored.
    Raises ValueError when no number starts the text.
    """
    match = _FLOAT_PREFIX.match(text)
    if match is None:
        raise ValueError(f"invalid number: {text!r}")
    return float(match.group(1))


def parse_resistance(text: str) -> float:
    """Parse a resistance such as ``470``, ``4.7k`` or ``1Meg``; must be positive."""
    match = _RESISTANCE.fullmatch(text)
    if match is None:
        raise NetlistSyntaxError("Error: Invalid resistance value format")
    mantissa, exponent, suffix = match.groups()
    try:
        value = parse_number(mantissa + (exponent or ""))
    except ValueError:
        raise NetlistSyntaxError("Error: Invalid resistance value format") from None
    if suffix:
        value *= _RESISTANCE_SCALE[suffix]
    if value <= 0:
        raise NetlistSyntaxError("Error: Resistance cannot be zero or negative")
    return value


def _parse_small(text: str, message: str) -> float:
    if not text:
        raise NetlistSyntaxError(message)
    try:
        scale = _SMALL_SCALE.get(text[-1])
        if scale is None:
            return parse_number(text)
        return parse_number(text[:-1]) * scale
    except ValueError:
        raise NetlistSyntaxError(message) from None


def parse_capacitance(text: str) -> float:
    """Parse a capacitance with an optional ``u``, ``n`` or ``F`` suffix."""
    return _parse_small(text, "Error: Invalid capacitor value")


def parse_inductance(text: str) -> float:
    """Parse an inductance with an optional ``u``, ``n`` or ``F`` suffix."""
    return _parse_small(text, "Error: Invalid inductor value")


def _is_ascii_alnum(char: str) -> bool:
    return char.isascii() and char.isalnum()


def is_valid_node_id(text: str) -> bool:
    """Node ids start with a letter or digit and contain only those and ``_``."""
    if not text or not _is_ascii_alnum(text[0]):
        return False
    return all(_is_ascii_alnum(char) or char == "_" for char in text)


def is_number(text: str) -> bool:
    """True when ``text`` is a non-empty run of decimal digits."""
    return bool(text) and all(char in _DIGITS for char in text)