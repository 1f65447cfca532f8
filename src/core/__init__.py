"""
Core Module - Shared providers and errors.

Components:
- providers: clock and random sources injected into the review pipeline
- errors: session state errors and configuration errors
"""

from src.core.errors import (
    AlreadyActiveError,
    ConfigurationError,
    InvalidStateError,
    NoActiveSessionError,
    NoCurrentCardError,
)
from src.core.providers import (
    Clock,
    FixedClock,
    RandomSource,
    SeededRandom,
    SequenceRandom,
    SystemClock,
)

__all__ = [
    # Errors
    "InvalidStateError",
    "AlreadyActiveError",
    "NoActiveSessionError",
    "NoCurrentCardError",
    "ConfigurationError",
    # Providers
    "Clock",
    "SystemClock",
    "FixedClock",
    "RandomSource",
    "SeededRandom",
    "SequenceRandom",
]
