"""
Arithmetic Operations

Single-pending-operator accumulator math over display values. Division by
zero, negative square roots and results too large for a float produce error
values instead of raising.
"""

import enum
import math

from app.calculator.display import DisplayValue, ErrorKind, checked


class Operator(str, enum.Enum):
    """Binary operators on the keypad."""

    add = "+"
    subtract = "-"
    multiply = "*"
    divide = "/"


def perform_calculation(
    op: Operator, first: DisplayValue, second: DisplayValue
) -> DisplayValue:
    """
    Apply a binary operator to two display values.

    Args:
        op: Operator to apply
        first: Left operand (the recorded first operand)
        second: Right operand (the value on the display)

    Returns:
        Result value, or the first error found among the operands
    """
    if first.is_error:
        return first
    if second.is_error:
        return second

    a, b = first.number, second.number

    if op == Operator.add:
        return checked(a + b)
    if op == Operator.subtract:
        return checked(a - b)
    if op == Operator.multiply:
        return checked(a * b)
    if op == Operator.divide:
        if b == 0:
            return DisplayValue.failed(ErrorKind.division_by_zero)
        try:
            return checked(a / b)
        except OverflowError:
            return DisplayValue.failed(ErrorKind.overflow)

    return second


def negate(value: DisplayValue) -> DisplayValue:
    """Change sign (CHS key)."""
    if value.is_error:
        return value
    return DisplayValue.of(value.number * -1)


def square_root(value: DisplayValue) -> DisplayValue:
    """Square root; negative input gives an error value."""
    if value.is_error:
        return value
    if value.number < 0:
        return DisplayValue.failed(ErrorKind.negative_square_root)
    return DisplayValue.of(math.sqrt(value.number))
