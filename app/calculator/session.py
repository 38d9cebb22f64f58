"""
Calculator Session

Keystroke state machine for a TVM calculator. One session owns its display
buffer, pending arithmetic, mode flags and TVM registers. Each event runs to
completion before the next is dispatched.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from app.calculator import arithmetic, tvm
from app.calculator.arithmetic import Operator
from app.calculator.display import DisplayValue, checked, render_number
from app.calculator.events import (
    Clear,
    ClearTVM,
    Compute,
    Digit,
    Enter,
    Equals,
    KeyEvent,
    Negate,
    OperatorKey,
    Reserved,
    SquareRoot,
    ToggleSecondFunction,
    TVMKey,
)
from app.calculator.tvm import TVMRegister, TVMRegisters

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CalculatorSnapshot:
    """Read-only view of a session for the presentation layer."""

    display: DisplayValue
    entry: str  # Raw buffer text, may end with "."
    second_function_active: bool
    compute_pending: bool
    registers: TVMRegisters


class CalculatorSession:
    """Single calculator session driven by key events."""

    def __init__(self, registers: Optional[TVMRegisters] = None):
        self.registers = registers if registers is not None else TVMRegisters()
        self._buffer = "0"
        self._error: Optional[DisplayValue] = None
        self.first_operand: Optional[DisplayValue] = None
        self.operator: Optional[Operator] = None
        self.awaiting_second_operand = False
        self.second_function_active = False
        self.compute_pending = False

    # -- display -----------------------------------------------------------

    @property
    def display(self) -> DisplayValue:
        """Current display as a tagged value."""
        if self._error is not None:
            return self._error
        return checked(float(self._buffer))

    def _show(self, value: DisplayValue) -> None:
        if value.is_error:
            self._error = value
            self._buffer = "0"
        else:
            self._error = None
            self._buffer = render_number(value.number)

    def snapshot(self) -> CalculatorSnapshot:
        return CalculatorSnapshot(
            display=self.display,
            entry="Error" if self._error is not None else self._buffer,
            second_function_active=self.second_function_active,
            compute_pending=self.compute_pending,
            registers=self.registers.copy(),
        )

    # -- dispatch ----------------------------------------------------------

    def dispatch(self, event: KeyEvent) -> CalculatorSnapshot:
        """
        Apply one key event and return the resulting snapshot.

        Calculator errors (division by zero, failed solves) end up on the
        display; they are never raised from here.
        """
        if isinstance(event, Digit):
            self._handle_digit(event.digit)
        elif isinstance(event, OperatorKey):
            self._handle_operator(event.operator)
        elif isinstance(event, Equals):
            self._handle_equals()
        elif isinstance(event, Clear):
            self.clear()
        elif isinstance(event, ToggleSecondFunction):
            self.second_function_active = not self.second_function_active
        elif isinstance(event, Compute):
            self.compute_pending = True
        elif isinstance(event, Enter):
            self.awaiting_second_operand = True
        elif isinstance(event, ClearTVM):
            self.registers.reset()
            logger.debug("TVM registers cleared")
        elif isinstance(event, TVMKey):
            self._handle_tvm(event.register)
        elif isinstance(event, Negate):
            self._show(arithmetic.negate(self.display))
        elif isinstance(event, SquareRoot):
            self._show(arithmetic.square_root(self.display))
            self.awaiting_second_operand = True
        elif isinstance(event, Reserved):
            logger.debug(f"Key {event.key} is reserved, ignoring")
        else:
            raise TypeError(f"Unsupported event: {event!r}")

        return self.snapshot()

    def clear(self) -> None:
        """ON/C: reset entry, pending arithmetic and flags. TVM registers are kept."""
        self._buffer = "0"
        self._error = None
        self.first_operand = None
        self.operator = None
        self.awaiting_second_operand = False
        self.second_function_active = False
        self.compute_pending = False

    # -- handlers ----------------------------------------------------------

    def _handle_digit(self, digit: str) -> None:
        # A digit cancels a pending CPT
        self.compute_pending = False

        if self.awaiting_second_operand or self._error is not None:
            self._error = None
            self._buffer = "0." if digit == "." else digit
            self.awaiting_second_operand = False
            return

        if digit == ".":
            if "." not in self._buffer:
                self._buffer += "."
        elif self._buffer == "0":
            self._buffer = digit
        else:
            self._buffer += digit

    def _handle_operator(self, op: Operator) -> None:
        if self.operator is not None and self.awaiting_second_operand:
            self.operator = op
            return

        current = self.display
        if self.first_operand is None:
            self.first_operand = current
        elif self.operator is not None:
            result = arithmetic.perform_calculation(
                self.operator, self.first_operand, current
            )
            self._show(result)
            self.first_operand = result

        self.awaiting_second_operand = True
        self.operator = op

    def _handle_equals(self) -> None:
        if self.operator is None:
            return

        result = arithmetic.perform_calculation(
            self.operator, self.first_operand, self.display
        )
        self._show(result)
        self.first_operand = None
        self.operator = None
        self.awaiting_second_operand = True

    def _handle_tvm(self, register: TVMRegister) -> None:
        if self.compute_pending:
            self._compute(register)
            self.compute_pending = False
            self.awaiting_second_operand = True
            return

        current = self.display
        if current.is_error:
            self.registers.mark_failed(register)
            logger.info(f"Stored an error into {register.value}, register marked failed")
        else:
            self.registers.set(register, current.number)
            logger.debug(f"TVM stored {register.value}={current.number}: {self.registers}")
        self.awaiting_second_operand = True

    def _compute(self, register: TVMRegister) -> None:
        try:
            value = tvm.solve(register, self.registers)
        except tvm.TVMSolveError as e:
            logger.warning(f"TVM solve for {register.value} failed: {e.message}")
            if not isinstance(e, tvm.UnsupportedSolveError):
                self.registers.mark_failed(register)
            self._show(DisplayValue.failed(e.kind))
            return

        self.registers.set(register, value)
        self._show(DisplayValue.of(value))
        logger.debug(f"TVM computed {register.value}={value}")
