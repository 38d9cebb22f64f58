"""
API routes for the calculator.
"""

from fastapi import APIRouter

from app.api import sessions, tvm

router = APIRouter()

# Include sub-routers
router.include_router(sessions.router, prefix="/sessions", tags=["sessions"])
router.include_router(tvm.router, prefix="/tvm", tags=["tvm"])
