"""
Error taxonomy for Tidepool.

Two families:
- InvalidStateError: contract violations by the caller (session misuse).
  Always raised, never retried.
- ConfigurationError: game data that references something unknown.
  Raised by catalog lookups and absorbed by the reward code, which
  degrades to "nothing found" / "no bonus" and logs the anomaly.
"""

from __future__ import annotations


class InvalidStateError(Exception):
    """Raised when an operation is called in the wrong session state."""
    pass


class AlreadyActiveError(InvalidStateError):
    """A session is already open."""

    def __init__(self, session_id: str):
        super().__init__(f"Session {session_id} is already active")
        self.session_id = session_id


class NoActiveSessionError(InvalidStateError):
    """No session is open."""

    def __init__(self):
        super().__init__("No active review session")


class NoCurrentCardError(InvalidStateError):
    """The due queue of the active session is exhausted."""

    def __init__(self, reviewed: int):
        super().__init__(f"No cards left in this session ({reviewed} reviewed)")
        self.reviewed = reviewed


class ConfigurationError(Exception):
    """Raised when game data references an unknown resource, location or tool."""
    pass
