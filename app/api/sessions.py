"""
Calculator session API endpoints.

A presentation layer drives a session by posting keypad tokens and renders
the returned snapshot.
"""

import logging
import math

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from typing import Dict, List, Optional

from app.calculator.display import ErrorKind
from app.calculator.events import parse_keypad_token
from app.calculator.formatting import format_display
from app.calculator.session import CalculatorSession, CalculatorSnapshot
from app.config import get_settings
from app.services.sessions import SessionStore, SessionNotFoundError, get_session_store

logger = logging.getLogger(__name__)

router = APIRouter()

UNSUPPORTED_NOTICE = (
    "Computing I/Y requires an iterative solver; "
    "this calculator can compute N, PV, PMT and FV."
)


class KeyPress(BaseModel):
    """A keypad token, as emitted by a button."""

    type: str
    value: Optional[str] = None


class KeyBatch(BaseModel):
    """Keypad tokens applied in order."""

    keys: List[KeyPress]


class DisplayResponse(BaseModel):
    """Display value with its screen text."""

    value: Optional[float] = None
    error: Optional[ErrorKind] = None
    text: str


class SnapshotResponse(BaseModel):
    """Calculator state after the last key."""

    session_id: str
    display: DisplayResponse
    entry: str
    second_function_active: bool
    compute_pending: bool
    registers: Dict[str, Optional[float]]  # None marks a failed register
    notice: Optional[str] = None


def _to_response(session_id: str, snapshot: CalculatorSnapshot) -> SnapshotResponse:
    settings = get_settings()
    display = snapshot.display

    return SnapshotResponse(
        session_id=session_id,
        display=DisplayResponse(
            value=display.number,
            error=display.error,
            text=format_display(
                display,
                snapshot.entry,
                precision=settings.display_precision,
                max_fraction_digits=settings.display_max_fraction_digits,
            ),
        ),
        entry=snapshot.entry,
        second_function_active=snapshot.second_function_active,
        compute_pending=snapshot.compute_pending,
        registers={
            name: None if math.isnan(value) else value
            for name, value in snapshot.registers.to_dict().items()
        },
        notice=UNSUPPORTED_NOTICE
        if display.error == ErrorKind.solve_unsupported
        else None,
    )


def _get_session(store: SessionStore, session_id: str) -> CalculatorSession:
    try:
        return store.get(session_id)
    except SessionNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Session not found",
        )


def _press(session: CalculatorSession, key: KeyPress) -> CalculatorSnapshot:
    try:
        event = parse_keypad_token(key.type, key.value)
    except ValueError as e:
        logger.info(f"Rejected keypad token {key.type}/{key.value}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    return session.dispatch(event)


@router.post("/", response_model=SnapshotResponse, status_code=status.HTTP_201_CREATED)
async def create_session(store: SessionStore = Depends(get_session_store)):
    """Start a new calculator session."""
    session_id = store.create()
    return _to_response(session_id, store.get(session_id).snapshot())


@router.get("/{session_id}", response_model=SnapshotResponse)
async def get_session(
    session_id: str, store: SessionStore = Depends(get_session_store)
):
    """Get the current state of a session."""
    session = _get_session(store, session_id)
    return _to_response(session_id, session.snapshot())


@router.post("/{session_id}/keys", response_model=SnapshotResponse)
async def press_key(
    session_id: str,
    key: KeyPress,
    store: SessionStore = Depends(get_session_store),
):
    """Apply one key press."""
    session = _get_session(store, session_id)
    return _to_response(session_id, _press(session, key))


@router.post("/{session_id}/keys/batch", response_model=SnapshotResponse)
async def press_keys(
    session_id: str,
    batch: KeyBatch,
    store: SessionStore = Depends(get_session_store),
):
    """
    Apply a sequence of key presses.

    Keys before an invalid token are applied; the invalid one fails the request.
    """
    session = _get_session(store, session_id)
    snapshot = session.snapshot()
    for key in batch.keys:
        snapshot = _press(session, key)
    return _to_response(session_id, snapshot)


@router.delete("/{session_id}")
async def delete_session(
    session_id: str, store: SessionStore = Depends(get_session_store)
):
    """Delete a session."""
    if not store.delete(session_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Session not found",
        )
    return {"deleted": True}
