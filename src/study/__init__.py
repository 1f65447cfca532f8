"""
Study Module for Tidepool.

Provides:
- Review session management (SessionManager)
- SQLite persistence (StateStore)
- The tidepool CLI
"""

from src.study.session import ReviewSession, ReviewStep, SessionManager
from src.study.state_store import StateStore

__all__ = [
    "ReviewSession",
    "ReviewStep",
    "SessionManager",
    "StateStore",
]
