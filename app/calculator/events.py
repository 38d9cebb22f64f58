"""
Key Events

Closed set of events the calculator session accepts, plus the mapping from
keypad tokens (the ``type``/``value`` pair each button emits) to events.
"""

from dataclasses import dataclass
from typing import Optional, Union

from app.calculator.arithmetic import Operator
from app.calculator.tvm import TVMRegister

DIGITS = frozenset("0123456789.")


@dataclass(frozen=True)
class Digit:
    digit: str

    def __post_init__(self):
        if len(self.digit) != 1 or self.digit not in DIGITS:
            raise ValueError(f"Not a digit key: {self.digit!r}")


@dataclass(frozen=True)
class OperatorKey:
    operator: Operator


@dataclass(frozen=True)
class Equals:
    pass


@dataclass(frozen=True)
class Clear:
    pass


@dataclass(frozen=True)
class ToggleSecondFunction:
    pass


@dataclass(frozen=True)
class Compute:
    pass


@dataclass(frozen=True)
class Enter:
    pass


@dataclass(frozen=True)
class ClearTVM:
    pass


@dataclass(frozen=True)
class TVMKey:
    register: TVMRegister


@dataclass(frozen=True)
class Negate:
    pass


@dataclass(frozen=True)
class SquareRoot:
    pass


@dataclass(frozen=True)
class Reserved:
    """Keys present on the keypad with no behavior yet (arrow keys)."""

    key: str


KeyEvent = Union[
    Digit,
    OperatorKey,
    Equals,
    Clear,
    ToggleSecondFunction,
    Compute,
    Enter,
    ClearTVM,
    TVMKey,
    Negate,
    SquareRoot,
    Reserved,
]


CONTROL_KEYS = {
    "ON/C": Clear,
    "2ND": ToggleSecondFunction,
    "CPT": Compute,
    "ENTER": Enter,
    "CLR TVM": ClearTVM,
}

RESERVED_FUNC_KEYS = frozenset({"UP", "DOWN"})


def parse_keypad_token(key_type: str, value: Optional[str] = None) -> KeyEvent:
    """
    Convert a keypad token into a key event.

    Args:
        key_type: Button category (number, operator, calculate, control, tvm, func, math)
        value: Button value (e.g., "7", "+", "CPT", "PV", "CHS", "SQRT")

    Returns:
        The matching key event

    Raises:
        ValueError: If the token does not name a known key
    """
    if key_type == "number":
        return Digit(value or "")

    if key_type == "operator":
        return OperatorKey(Operator(value))

    if key_type == "calculate":
        return Equals()

    if key_type == "control":
        if value not in CONTROL_KEYS:
            raise ValueError(f"Unknown control key: {value!r}")
        return CONTROL_KEYS[value]()

    if key_type == "tvm":
        return TVMKey(TVMRegister(value))

    if key_type == "func":
        if value == "CHS":
            return Negate()
        if value in RESERVED_FUNC_KEYS:
            return Reserved(value)
        raise ValueError(f"Unknown function key: {value!r}")

    if key_type == "math":
        if value == "SQRT":
            return SquareRoot()
        raise ValueError(f"Unknown math key: {value!r}")

    raise ValueError(f"Unknown key type: {key_type!r}")
