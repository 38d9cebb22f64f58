"""
Display Values

The calculator display holds either a number or an error tag. Errors are
values, not exceptions: once an error is on the display, every operation that
reads it resolves to that same error.
"""

import enum
import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


class ErrorKind(str, enum.Enum):
    """Error taxonomy for the display and the TVM solver."""

    division_by_zero = "division_by_zero"
    negative_square_root = "negative_square_root"
    overflow = "overflow"
    solve_unsupported = "solve_unsupported"
    solve_no_real_solution = "solve_no_real_solution"
    solve_non_finite = "solve_non_finite"


@dataclass(frozen=True)
class DisplayValue:
    """Tagged display value: exactly one of number or error is set."""

    number: Optional[float] = None
    error: Optional[ErrorKind] = None

    @classmethod
    def of(cls, number: float) -> "DisplayValue":
        return cls(number=float(number))

    @classmethod
    def failed(cls, error: ErrorKind) -> "DisplayValue":
        return cls(error=error)

    @property
    def is_error(self) -> bool:
        return self.error is not None


def checked(number: float) -> DisplayValue:
    """Wrap a computed number; NaN and infinities become an overflow error."""
    if math.isfinite(number):
        return DisplayValue.of(number)
    return DisplayValue.failed(ErrorKind.overflow)


def render_number(value: float) -> str:
    """
    Render a number as entry-buffer text.

    Whole numbers drop the fractional part (3.0 -> "3"), so appending digits
    to a computed result reads the way the device shows it. Exponent notation
    is expanded (1e-07 -> "0.0000001") so the text stays editable.
    """
    if value == 0:
        return "0"
    if value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return format(Decimal(repr(value)), "f")
