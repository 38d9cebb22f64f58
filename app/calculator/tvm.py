"""
Time Value of Money Solver

Solves one of the five TVM registers (N, I/Y, PV, PMT, FV) from the other four,
following the standard annuity identity:

    PV + PMT * [(1 - (1+r)^-n) / r] + FV * (1+r)^-n = 0

Cash-flow sign convention: outflows negative, inflows positive.
All functions here are pure; callers decide what to do with the result.
"""

import enum
import math
from dataclasses import dataclass, asdict
from typing import Callable, Dict, List

from app.calculator.display import ErrorKind


class TVMRegister(str, enum.Enum):
    """TVM register identifiers, named after the keypad keys."""

    n = "N"
    iy = "IY"
    pv = "PV"
    pmt = "PMT"
    fv = "FV"


@dataclass
class TVMRegisters:
    """The five TVM memory slots."""

    n: float = 0.0
    iy: float = 0.0  # Percent per period (e.g., 5 for 5%)
    pv: float = 0.0
    pmt: float = 0.0
    fv: float = 0.0

    def get(self, register: TVMRegister) -> float:
        return getattr(self, register.name)

    def set(self, register: TVMRegister, value: float) -> None:
        setattr(self, register.name, float(value))

    def mark_failed(self, register: TVMRegister) -> None:
        """Record that a register holds a failed result (NaN)."""
        setattr(self, register.name, math.nan)

    def failed_registers(self) -> List[TVMRegister]:
        return [r for r in TVMRegister if math.isnan(self.get(r))]

    def reset(self) -> None:
        """Zero every register (CLR TVM)."""
        for register in TVMRegister:
            self.set(register, 0.0)

    def copy(self) -> "TVMRegisters":
        return TVMRegisters(**asdict(self))

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


class TVMSolveError(ValueError):
    """Raised when a register cannot be solved."""

    kind = ErrorKind.solve_non_finite

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnsupportedSolveError(TVMSolveError):
    """Solving for this register is not available."""

    kind = ErrorKind.solve_unsupported


class NoRealSolutionError(TVMSolveError):
    """The N formula needs the logarithm of a non-positive ratio."""

    kind = ErrorKind.solve_no_real_solution


class NonFiniteResultError(TVMSolveError):
    """The computation produced NaN, an infinity, or a floating-point fault."""

    kind = ErrorKind.solve_non_finite


def period_rate(iy: float) -> float:
    """Convert the I/Y register (percent) to a period rate."""
    return iy / 100


def _finite(value: float, target: str) -> float:
    if math.isnan(value) or math.isinf(value):
        raise NonFiniteResultError(f"{target} solve produced a non-finite result")
    return value


def _annuity_factor(rate: float, periods: float) -> float:
    """Present value of 1 per period: (1 - (1+r)^-n) / r."""
    return (1 - math.pow(1 + rate, -periods)) / rate


def solve_fv(n: float, rate: float, pv: float, pmt: float) -> float:
    """
    Future value.

    Args:
        n: Number of periods
        rate: Period rate as decimal (e.g., 0.05 for 5%)
        pv: Present value
        pmt: Payment per period

    Returns:
        FV that balances the cash flows
    """
    if rate == 0:
        return -(pv + pmt * n)

    growth = math.pow(1 + rate, n)
    return -(pv * growth + pmt * (growth - 1) / rate)


def solve_pv(n: float, rate: float, pmt: float, fv: float) -> float:
    """Present value of the payment stream and future value."""
    if rate == 0:
        return -(fv + pmt * n)

    discount = math.pow(1 + rate, -n)
    return -(fv * discount + pmt * _annuity_factor(rate, n))


def solve_pmt(n: float, rate: float, pv: float, fv: float) -> float:
    """
    Payment per period.

    Raises:
        NonFiniteResultError: If n is zero (zero rate) or the annuity factor is zero
    """
    if rate == 0:
        if n == 0:
            raise NonFiniteResultError("PMT solve needs a non-zero N at zero rate")
        return -(pv + fv) / n

    discount = math.pow(1 + rate, -n)
    factor = _annuity_factor(rate, n)
    if factor == 0:
        raise NonFiniteResultError("PMT solve has a zero annuity factor")
    return (-pv - fv * discount) / factor


def solve_n(rate: float, pv: float, pmt: float, fv: float) -> float:
    """
    Number of periods.

    N = ln((PMT - FV*r) / (PMT + PV*r)) / ln(1+r)

    The signs of PMT, PV and FV must be set so the ratio is positive.

    Raises:
        NoRealSolutionError: If the log ratio is not positive
    """
    if rate == 0:
        return -(pv + fv) / pmt

    numerator = pmt - fv * rate
    denominator = pmt + pv * rate
    # A zero denominator is left to the non-finite check in solve()
    ratio = numerator / denominator
    if ratio <= 0:
        raise NoRealSolutionError(
            "N solve has no real solution: check the cash-flow signs"
        )
    return math.log(ratio) / math.log(1 + rate)


def _solve_iy(registers: TVMRegisters) -> float:
    raise UnsupportedSolveError(
        "Solving I/Y needs an iterative method; only N, PV, PMT and FV can be computed"
    )


_SOLVERS: Dict[TVMRegister, Callable[[TVMRegisters], float]] = {
    TVMRegister.fv: lambda r: solve_fv(r.n, period_rate(r.iy), r.pv, r.pmt),
    TVMRegister.pv: lambda r: solve_pv(r.n, period_rate(r.iy), r.pmt, r.fv),
    TVMRegister.pmt: lambda r: solve_pmt(r.n, period_rate(r.iy), r.pv, r.fv),
    TVMRegister.n: lambda r: solve_n(period_rate(r.iy), r.pv, r.pmt, r.fv),
    TVMRegister.iy: _solve_iy,
}


def solve(target: TVMRegister, registers: TVMRegisters) -> float:
    """
    Solve for one TVM register from the other four.

    Matches the CPT key behavior of a BA II Plus style calculator.

    Args:
        target: Register to compute
        registers: Current register values (not modified)

    Returns:
        The computed value for the target register

    Raises:
        UnsupportedSolveError: If target is I/Y
        NoRealSolutionError: If the N formula has no real solution
        NonFiniteResultError: If the result is NaN or infinite, or an input
            register holds a failed result
    """
    if target != TVMRegister.iy:
        failed = [r.value for r in registers.failed_registers() if r != target]
        if failed:
            raise NonFiniteResultError(
                f"{target.value} solve reads failed register(s): {', '.join(failed)}"
            )

    try:
        value = _SOLVERS[target](registers)
    except TVMSolveError:
        raise
    except (ZeroDivisionError, OverflowError, ValueError) as e:
        raise NonFiniteResultError(
            f"{target.value} solve failed: {str(e)}"
        ) from e

    return _finite(value, target.value)
