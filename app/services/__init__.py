"""
Application services module.
"""

from app.services.sessions import SessionStore, SessionNotFoundError, get_session_store

__all__ = ["SessionStore", "SessionNotFoundError", "get_session_store"]
