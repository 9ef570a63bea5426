"""
Entity store for the ticket inventory service.

This module holds the canonical collections of users, events and tickets.
It is pure storage: business rules (capacity, one ticket per user) live in
the InventoryService, which is the only writer.

Design decisions:
- Services depend on the EntityStore interface, not on a concrete store
- The in-memory DataStore is seeded from JSON fixture files
- Fixtures are loaded lazily on first access
- A single re-entrant lock guards all collections; `transaction()` exposes it
  so a booking (counter increment + ticket append) commits as one step and a
  multi-read projection sees one consistent state
"""

import json
import logging
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from shared.config import settings
from shared.models import Event, Ticket, User

logger = logging.getLogger("data_store")


class EntityStore(ABC):
    """Interface for event, user and ticket persistence."""

    @abstractmethod
    def transaction(self):
        """Context manager holding the store exclusively for a group of reads/writes."""
        ...

    @abstractmethod
    def list_events(self) -> list[Event]:
        """Return all events in store order."""
        ...

    @abstractmethod
    def get_event(self, event_id: str) -> Optional[Event]:
        """Return an event by ID, or None if not found."""
        ...

    @abstractmethod
    def add_event(self, event: Event) -> Event:
        """Insert or replace an event record."""
        ...

    @abstractmethod
    def get_user(self, user_id: str) -> Optional[User]:
        """Return a user by ID, or None if not found."""
        ...

    @abstractmethod
    def find_user_by_email(self, email: str) -> Optional[User]:
        """Return the user with this email, or None."""
        ...

    @abstractmethod
    def add_user(self, user: User) -> User:
        """Insert or replace a user record."""
        ...

    @abstractmethod
    def get_ticket(self, event_id: str, user_id: str) -> Optional[Ticket]:
        """Return the ticket `user_id` holds for `event_id`, or None."""
        ...

    @abstractmethod
    def get_tickets_for_event(self, event_id: str) -> list[Ticket]:
        """Return all tickets for an event, in creation order."""
        ...

    @abstractmethod
    def record_booking(self, ticket: Ticket) -> Event:
        """
        Append a ticket and bump its event's `tickets_sold` in one transaction.

        Returns the updated event snapshot.
        """
        ...


class DataStore(EntityStore):
    """
    In-memory entity store seeded from JSON fixtures.

    Stands in for the booking backend's database. Every test and demo
    creates its own instance so state never leaks between runs.
    """

    def __init__(self, data_dir: Optional[Path] = None):
        """
        Initialize the data store.

        Args:
            data_dir: Directory containing users.json, events.json and
                     optionally tickets.json. Defaults to settings.DATA_DIR.
        """
        self.data_dir = Path(data_dir) if data_dir is not None else settings.DATA_DIR
        self._lock = threading.RLock()

        # In-memory collections - loaded lazily
        self._users: Optional[dict[str, User]] = None
        self._events: Optional[dict[str, Event]] = None
        self._tickets: Optional[list[Ticket]] = None
        self._tickets_by_holder: dict[tuple[str, str], Ticket] = {}

    # =========================================================================
    # Data Loading (lazy)
    # =========================================================================

    def _load_json(self, filename: str) -> list[dict]:
        """Load a JSON fixture file."""
        filepath = self.data_dir / filename
        if not filepath.exists():
            return []
        with open(filepath, "r") as f:
            return json.load(f)

    def _ensure_loaded(self) -> None:
        """Lazy load all fixtures from JSON."""
        if self._events is not None:
            return
        with self._lock:
            if self._events is not None:
                return
            self._users = {u["id"]: User(**u) for u in self._load_json("users.json")}
            tickets = [Ticket(**t) for t in self._load_json("tickets.json")]
            self._tickets = tickets
            self._tickets_by_holder = {(t.event_id, t.user_id): t for t in tickets}
            self._events = {e["id"]: Event(**e) for e in self._load_json("events.json")}
            logger.debug(
                f"Loaded {len(self._users)} users, {len(self._events)} events, "
                f"{len(tickets)} tickets from {self.data_dir}"
            )

    @contextmanager
    def transaction(self) -> Iterator[None]:
        with self._lock:
            self._ensure_loaded()
            yield

    # =========================================================================
    # Event Operations
    # =========================================================================

    def list_events(self) -> list[Event]:
        with self.transaction():
            return list(self._events.values())

    def get_event(self, event_id: str) -> Optional[Event]:
        with self.transaction():
            return self._events.get(event_id)

    def add_event(self, event: Event) -> Event:
        with self.transaction():
            self._events[event.id] = event
        return event

    # =========================================================================
    # User Operations
    # =========================================================================

    def get_user(self, user_id: str) -> Optional[User]:
        with self.transaction():
            return self._users.get(user_id)

    def get_users(self) -> list[User]:
        """Get all users."""
        with self.transaction():
            return list(self._users.values())

    def find_user_by_email(self, email: str) -> Optional[User]:
        with self.transaction():
            for user in self._users.values():
                if user.email == email:
                    return user
        return None

    def add_user(self, user: User) -> User:
        with self.transaction():
            self._users[user.id] = user
        return user

    # =========================================================================
    # Ticket Operations
    # =========================================================================

    def get_ticket(self, event_id: str, user_id: str) -> Optional[Ticket]:
        with self.transaction():
            return self._tickets_by_holder.get((event_id, user_id))

    def get_tickets_for_event(self, event_id: str) -> list[Ticket]:
        with self.transaction():
            return [t for t in self._tickets if t.event_id == event_id]

    def record_booking(self, ticket: Ticket) -> Event:
        """
        Commit a booking.

        The counter increment and the ticket append happen under the store
        lock, so readers see either neither or both. Raises KeyError if the
        event is missing; Event validation rejects a counter past capacity.
        """
        with self.transaction():
            event = self._events[ticket.event_id]
            updated = event.with_ticket_sold()
            self._events[event.id] = updated
            self._tickets.append(ticket)
            self._tickets_by_holder[(ticket.event_id, ticket.user_id)] = ticket
            return updated

    # =========================================================================
    # Utility Methods
    # =========================================================================

    def reload(self) -> None:
        """
        Force reload all data from JSON files.

        Discards every booking made since the fixtures were loaded.
        """
        with self._lock:
            self._users = None
            self._events = None
            self._tickets = None
            self._tickets_by_holder = {}


# Module-level singleton for convenience
# In tests, create a new DataStore instance with test fixtures
_default_store: Optional[DataStore] = None


def get_data_store() -> DataStore:
    """Get the default data store singleton."""
    global _default_store
    if _default_store is None:
        _default_store = DataStore()
    return _default_store


def reset_data_store(data_dir: Optional[Path] = None) -> DataStore:
    """Replace the default data store with a freshly loaded one."""
    global _default_store
    _default_store = DataStore(data_dir=data_dir)
    return _default_store
