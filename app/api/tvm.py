"""
Stateless TVM solve endpoint.
"""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from app.calculator import tvm
from app.calculator.tvm import TVMRegister, TVMRegisters

router = APIRouter()


class SolveInput(BaseModel):
    """Register values and the register to solve for."""

    target: TVMRegister
    n: float = 0.0
    iy: float = 0.0
    pv: float = 0.0
    pmt: float = 0.0
    fv: float = 0.0


class SolveResponse(BaseModel):
    """Solved register value."""

    target: TVMRegister
    value: float


@router.post("/solve", response_model=SolveResponse)
async def solve_endpoint(inputs: SolveInput):
    """Solve one TVM register from the other four."""
    registers = TVMRegisters(
        n=inputs.n, iy=inputs.iy, pv=inputs.pv, pmt=inputs.pmt, fv=inputs.fv
    )

    try:
        value = tvm.solve(inputs.target, registers)
    except tvm.TVMSolveError as e:
        raise HTTPException(
            status_code=400,
            detail={"error": e.kind.value, "message": e.message},
        )

    return SolveResponse(target=inputs.target, value=value)
