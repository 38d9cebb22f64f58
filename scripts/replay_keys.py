#!/usr/bin/env python3
"""
Replay a keystroke sequence against a fresh calculator session.

Each argument is one key, or a number typed digit by digit.

Usage:
    python scripts/replay_keys.py 10 N 5 IY 1000 CHS PV 0 PMT CPT FV

Keys:
    0-9 and "."          digits (multi-digit arguments are typed one by one)
    + - * /  =           arithmetic
    N IY I/Y PV PMT FV   TVM registers
    CPT ON/C 2ND ENTER CLR_TVM CHS SQRT
"""

import sys
import os

# Add the project root to the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.calculator.events import parse_keypad_token
from app.calculator.formatting import format_display
from app.calculator.session import CalculatorSession

TVM_ALIASES = {"N": "N", "IY": "IY", "I/Y": "IY", "PV": "PV", "PMT": "PMT", "FV": "FV"}
CONTROL_ALIASES = {"CPT": "CPT", "ON/C": "ON/C", "2ND": "2ND", "ENTER": "ENTER", "CLR_TVM": "CLR TVM"}


def tokens_for(arg: str):
    """Translate one command-line argument into keypad tokens."""
    key = arg.upper()
    if key in TVM_ALIASES:
        return [("tvm", TVM_ALIASES[key])]
    if key in CONTROL_ALIASES:
        return [("control", CONTROL_ALIASES[key])]
    if key in ("+", "-", "*", "/"):
        return [("operator", key)]
    if key == "=":
        return [("calculate", None)]
    if key in ("CHS", "+/-"):
        return [("func", "CHS")]
    if key == "SQRT":
        return [("math", "SQRT")]
    return [("number", ch) for ch in arg]


def replay(args):
    """Run the keys and print the display after each argument."""
    session = CalculatorSession()

    for arg in args:
        for key_type, value in tokens_for(arg):
            try:
                event = parse_keypad_token(key_type, value)
            except ValueError as e:
                print(f"Error: {e}")
                sys.exit(1)
            session.dispatch(event)

        snapshot = session.snapshot()
        flags = " [CPT]" if snapshot.compute_pending else ""
        print(f"{arg:>8}  {format_display(snapshot.display, snapshot.entry)}{flags}")

    registers = session.registers
    print(
        f"\nN={registers.n} I/Y={registers.iy} PV={registers.pv} "
        f"PMT={registers.pmt} FV={registers.fv}"
    )


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)
    replay(sys.argv[1:])
