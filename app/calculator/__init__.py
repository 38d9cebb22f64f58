"""
TVM Calculator Engine

Keystroke state machine and Time Value of Money solver for a
BA II Plus style financial calculator.
"""

from app.calculator import arithmetic, display, events, formatting, session, tvm

__all__ = ["arithmetic", "display", "events", "formatting", "session", "tvm"]
