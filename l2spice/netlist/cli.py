"""Interactive command session for building netlist circuits."""

import argparse
import os
import sys
from typing import List, Optional, TextIO

from .circuit import Circuit, validate_circuit
from .commands import handle_command, parse_schematic_file, schematic_line_to_command
from .errors import CircuitError


def _read_line(stream: TextIO) -> Optional[str]:
    line = stream.readline()
    if line == "":
        return None
    return line.rstrip("\n")


def _emit(stream: TextIO, lines: List[str]) -> None:
    for line in lines:
        stream.write(line + "\n")


def _display_name(filename: str) -> str:
    dot = filename.rfind(".")
    return filename[:dot] if dot != -1 else filename


def _extend_schematic(path: str, circuit: Circuit, stdin: TextIO, stdout: TextIO) -> None:
    stdout.write("This schematic has no '.end'. You can add components:\n")
    try:
        out_file = open(path, "a", encoding="utf-8")
    except OSError:
        stdout.write(f"Failed to open file for writing: {path}\n")
        return
    with out_file:
        while True:
            stdout.write("Enter component (e.g., R R1 n1 n2 10) or '.end' to finish:\n")
            entry = _read_line(stdin)
            if entry is None:
                break
            if entry == ".end":
                out_file.write(".end\n")
                break
            command = schematic_line_to_command(entry)
            if command is None:
                stdout.write("Invalid format. Try again.\n")
                continue
            try:
                _emit(stdout, handle_command(circuit, command))
            except CircuitError as exc:
                stdout.write(f"[Handler Error] {exc}\n")
            else:
                out_file.write(entry + "\n")
    stdout.write("Components added and saved.\n")


def show_existing_schematics(
    circuits: List[Circuit], folder: str, stdin: TextIO, stdout: TextIO
) -> None:
    """Let the user pick, view, load and extend schematic files in ``folder``."""
    try:
        filenames = sorted(
            entry.name for entry in os.scandir(folder) if entry.is_file()
        )
    except OSError:
        filenames = []
    if not filenames:
        stdout.write("No schematics found in the 'schematics' folder.\n")
        return

    while True:
        stdout.write("-choose existing schematic:\n")
        for number, filename in enumerate(filenames, start=1):
            stdout.write(f"{number}-{_display_name(filename)}\n")
        stdout.write("Type a number to view schematic, or 'return' to go back:\n")
        choice = _read_line(stdin)
        if choice is None or choice == "return":
            break
        if not (choice.isascii() and choice.isdigit()) or not 1 <= int(choice) <= len(filenames):
            stdout.write("-Error : Inappropriate input\n")
            continue

        filename = filenames[int(choice) - 1]
        full_path = f"{folder}/{filename}"
        try:
            with open(full_path, encoding="utf-8", errors="replace") as view:
                contents = view.read().splitlines()
        except OSError:
            stdout.write(f"Failed to open file: {full_path}\n")
            continue
        stdout.write(f"\nContents of {filename}:\n")
        _emit(stdout, contents)
        stdout.write("\n---------------------------\n\n")

        circuit = Circuit()
        has_end, report = parse_schematic_file(full_path, circuit)
        _emit(stdout, report)
        circuits.append(circuit)
        if not has_end:
            _extend_schematic(full_path, circuit, stdin, stdout)


def _close_circuit(circuits: List[Circuit], circuit: Circuit, stdout: TextIO, header: str) -> None:
    circuits.append(circuit)
    try:
        validate_circuit(circuit)
    except CircuitError as exc:
        stdout.write(f"{header}\n{exc}\n")


def run_session(
    stdin: TextIO, stdout: TextIO, schematics_folder: str = "./schematics"
) -> List[Circuit]:
    """Read commands until ``exit`` (or end of input); return the circuits built."""
    circuits: List[Circuit] = []
    current = Circuit()
    stdout.write("Enter commands (type 'exit' to quit):\n")
    while True:
        stdout.write("> ")
        line = _read_line(stdin)
        if line is None or line == "exit":
            _close_circuit(circuits, current, stdout, "[ERROR] Final circuit is invalid:")
            break
        if line == "another circuit":
            _close_circuit(circuits, current, stdout, "[ERROR] Cannot start a new circuit:")
            current = Circuit()
            stdout.write("Switched to a new circuit.\n")
            continue
        if line == "show existing schematics":
            show_existing_schematics(circuits, schematics_folder, stdin, stdout)
            continue
        try:
            _emit(stdout, handle_command(current, line))
        except CircuitError as exc:
            stdout.write(f"[Exception] {exc}\n")
    return circuits


def main(argv: Optional[List[str]] = None) -> int:
    """Start an interactive session on standard input and output."""
    parser = argparse.ArgumentParser(description="Build circuits from netlist commands.")
    parser.add_argument(
        "--schematics",
        default="./schematics",
        help="folder holding schematic files",
    )
    args = parser.parse_args(argv)
    run_session(sys.stdin, sys.stdout, args.schematics)
    return 0


if __name__ == "__main__":
    sys.exit(main())