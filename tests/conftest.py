"""
Shared pytest fixtures for the ticket inventory tests.

These fixtures provide consistent test data and reset state between tests.
"""

from datetime import datetime, timezone
from pathlib import Path

import pytest

from shared.data_store import DataStore
from shared.models import Event, User
from ticketing.inventory_service import InventoryService
from ticketing.notification_hub import NotificationHub
from ticketing.query_service import QueryService


@pytest.fixture
def data_dir() -> Path:
    """Path to the fixture data directory."""
    return Path(__file__).parent.parent / "data"


@pytest.fixture
def data_store(data_dir: Path) -> DataStore:
    """
    Fresh DataStore instance for each test.

    Uses the real JSON fixtures but creates a new instance
    so bookings made by one test never leak into another.
    """
    return DataStore(data_dir=data_dir)


@pytest.fixture
def hub(data_store: DataStore) -> NotificationHub:
    """Fresh NotificationHub bound to the test store."""
    return NotificationHub(data_store=data_store)


@pytest.fixture
def inventory(data_store: DataStore, hub: NotificationHub) -> InventoryService:
    """InventoryService with no simulated latency."""
    return InventoryService(data_store=data_store, hub=hub, booking_latency=0.0)


@pytest.fixture
def queries(data_store: DataStore) -> QueryService:
    return QueryService(data_store=data_store)


# =============================================================================
# User Fixtures
# =============================================================================

@pytest.fixture
def organizer_id() -> str:
    """Alex Organizer - created the first three events."""
    return "user_2clK3J4fQ6sA8tZ9eR1bYgX0wVf"


@pytest.fixture
def attendee_id() -> str:
    """Sam Attendee - holds no tickets in the fixtures."""
    return "user_1aB2c3d4e5f6g7h8i9j0k1l"


@pytest.fixture
def guest_id() -> str:
    """Jordan Guest - organizer of the last-seat meetup."""
    return "user_9zY8x7W6v5U4t3S2r1Q0pOn"


@pytest.fixture
def make_users(data_store: DataStore):
    """Factory adding `count` throwaway users to the store."""
    def _make(count: int, prefix: str = "user_test") -> list[User]:
        return [
            data_store.add_user(User(
                id=f"{prefix}_{i}",
                email=f"{prefix}_{i}@example.com",
                name=f"Test User {i}",
            ))
            for i in range(count)
        ]
    return _make


# =============================================================================
# Event Fixtures
# =============================================================================

@pytest.fixture
def react_summit_id() -> str:
    """React Summit 2024 - 500 seats, 120 sold."""
    return "a1b2c3d4-e5f6-7890-1234-567890abcdef"


@pytest.fixture
def tailwind_workshop_id() -> str:
    """Tailwind CSS Workshop - 50 seats, 25 sold."""
    return "b2c3d4e5-f6a7-8901-2345-67890abcdef1"


@pytest.fixture
def last_seat_event_id() -> str:
    """Python Meetup - 20 seats, 19 sold, so exactly one left."""
    return "d4e5f6a7-b8c9-0123-4567-890abcdef123"


@pytest.fixture
def make_event(data_store: DataStore, organizer_id: str):
    """Factory adding an event with the given capacity to the store."""
    def _make(event_id: str, total_tickets: int, tickets_sold: int = 0) -> Event:
        return data_store.add_event(Event(
            id=event_id,
            title=f"Test Event {event_id}",
            venue="Test Venue",
            date=datetime(2026, 12, 1, 18, 0, tzinfo=timezone.utc),
            total_tickets=total_tickets,
            tickets_sold=tickets_sold,
            created_by=organizer_id,
        ))
    return _make


@pytest.fixture
def anyio_backend() -> str:
    """The stream tests use asyncio primitives directly, so run them on asyncio."""
    return "asyncio"
