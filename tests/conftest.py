"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import pytest
import sys
from datetime import datetime, timezone
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.core.providers import FixedClock  # noqa: E402
from src.srs.models import CardStatus, ReviewableItem  # noqa: E402

NOW = datetime(2025, 1, 15, 9, 0, tzinfo=timezone.utc)


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (use a temporary SQLite file)")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        # Mark based on test file location
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def clock():
    """Clock pinned to a fixed UTC moment."""
    return FixedClock(NOW)


@pytest.fixture
def make_item():
    """Factory for reviewable items with overridable scheduling fields."""

    def _make(
        item_id: str = "item-1",
        next_due_at: datetime = NOW,
        repetitions: int = 0,
        ease_factor: float = 2.5,
        interval: int = 0,
        status: CardStatus = CardStatus.NEW,
    ) -> ReviewableItem:
        return ReviewableItem(
            id=item_id,
            front=f"front of {item_id}",
            back=f"back of {item_id}",
            next_due_at=next_due_at,
            repetitions=repetitions,
            ease_factor=ease_factor,
            interval=interval,
            status=status,
            created_at=NOW,
        )

    return _make
