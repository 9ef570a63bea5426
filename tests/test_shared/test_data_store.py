"""
Tests for the DataStore.

These tests verify that the store loads the JSON fixtures and that a
booking commit updates the counter and the ticket list together.
"""

import threading
from datetime import datetime, timezone

import pytest

from shared.data_store import DataStore, EntityStore, get_data_store, reset_data_store
from shared.models import QRPayload, Ticket, User


def _ticket(event_id: str, user_id: str, ticket_id: str = "ticket_test") -> Ticket:
    return Ticket(
        id=ticket_id,
        event_id=event_id,
        user_id=user_id,
        qr_code=QRPayload(event_id=event_id, user_id=user_id, ticket_id=ticket_id).encode(),
        created_at=datetime.now(timezone.utc),
    )


class TestDataStoreEvents:
    """Tests for event-related data store operations."""

    def test_is_an_entity_store(self, data_store: DataStore):
        assert isinstance(data_store, EntityStore)

    def test_list_events_in_fixture_order(self, data_store: DataStore):
        events = data_store.list_events()

        assert [e.title for e in events] == [
            "React Summit 2024",
            "Tailwind CSS Workshop",
            "ViteConf",
            "Python Meetup: Last Seat",
        ]

    def test_get_event(self, data_store: DataStore, react_summit_id: str):
        event = data_store.get_event(react_summit_id)

        assert event is not None
        assert event.total_tickets == 500
        assert event.tickets_sold == 120

    def test_get_nonexistent_event(self, data_store: DataStore):
        assert data_store.get_event("nonexistent-id") is None

    def test_list_events_returns_a_copy(self, data_store: DataStore):
        events = data_store.list_events()
        events.clear()

        assert len(data_store.list_events()) == 4

    def test_add_event(self, data_store: DataStore, make_event):
        make_event("evt-new", total_tickets=3)

        assert data_store.get_event("evt-new").total_tickets == 3
        assert data_store.list_events()[-1].id == "evt-new"


class TestDataStoreUsers:
    """Tests for user-related data store operations."""

    def test_get_user(self, data_store: DataStore, attendee_id: str):
        user = data_store.get_user(attendee_id)

        assert user is not None
        assert user.name == "Sam Attendee"
        assert user.email == "attendee@example.com"

    def test_get_nonexistent_user(self, data_store: DataStore):
        assert data_store.get_user("nobody") is None

    def test_find_user_by_email(self, data_store: DataStore, organizer_id: str):
        user = data_store.find_user_by_email("organizer@example.com")

        assert user is not None
        assert user.id == organizer_id
        assert data_store.find_user_by_email("missing@example.com") is None

    def test_add_user(self, data_store: DataStore):
        data_store.add_user(User(id="user-new", email="new@example.com", name="New"))

        assert data_store.get_user("user-new").name == "New"
        assert len(data_store.get_users()) == 4


class TestDataStoreBookings:
    """Tests for recording bookings."""

    def test_no_tickets_in_fixtures(self, data_store: DataStore, react_summit_id: str):
        assert data_store.get_tickets_for_event(react_summit_id) == []

    def test_record_booking_updates_counter_and_tickets(
        self, data_store: DataStore, react_summit_id: str, attendee_id: str
    ):
        ticket = _ticket(react_summit_id, attendee_id)

        updated = data_store.record_booking(ticket)

        assert updated.tickets_sold == 121
        assert data_store.get_event(react_summit_id).tickets_sold == 121
        assert data_store.get_ticket(react_summit_id, attendee_id) == ticket
        assert data_store.get_tickets_for_event(react_summit_id) == [ticket]

    def test_tickets_for_event_excludes_other_events(
        self, data_store: DataStore, react_summit_id: str, tailwind_workshop_id: str, attendee_id: str
    ):
        data_store.record_booking(_ticket(react_summit_id, attendee_id, "ticket_a"))
        data_store.record_booking(_ticket(tailwind_workshop_id, attendee_id, "ticket_b"))

        tickets = data_store.get_tickets_for_event(tailwind_workshop_id)

        assert [t.id for t in tickets] == ["ticket_b"]

    def test_record_booking_for_unknown_event_raises(self, data_store: DataStore, attendee_id: str):
        with pytest.raises(KeyError):
            data_store.record_booking(_ticket("missing", attendee_id))

        assert data_store.get_ticket("missing", attendee_id) is None

    def test_transaction_blocks_other_threads(
        self, data_store: DataStore, react_summit_id: str, attendee_id: str
    ):
        """A reader holding the transaction sees no booking commit midway."""
        committed = threading.Event()

        def book():
            data_store.record_booking(_ticket(react_summit_id, attendee_id))
            committed.set()

        with data_store.transaction():
            before = data_store.get_event(react_summit_id).tickets_sold
            writer = threading.Thread(target=book)
            writer.start()
            assert not committed.wait(timeout=0.2)
            assert data_store.get_event(react_summit_id).tickets_sold == before
            assert data_store.get_ticket(react_summit_id, attendee_id) is None

        writer.join()
        assert committed.is_set()
        assert data_store.get_event(react_summit_id).tickets_sold == before + 1

    def test_reload_discards_bookings(self, data_store: DataStore, react_summit_id: str, attendee_id: str):
        data_store.record_booking(_ticket(react_summit_id, attendee_id))

        data_store.reload()

        assert data_store.get_event(react_summit_id).tickets_sold == 120
        assert data_store.get_ticket(react_summit_id, attendee_id) is None

    def test_reload_just_before_transaction_is_reloaded_inside(
        self, data_store: DataStore, react_summit_id: str
    ):
        """A reload landing as a transaction acquires the lock leaves loaded data inside it."""
        data_store.list_events()
        inner = data_store._lock

        class ReloadOnFirstAcquire:
            pending = True

            def __enter__(self):
                if self.pending:
                    self.pending = False
                    data_store.reload()
                return inner.__enter__()

            def __exit__(self, *exc_info):
                return inner.__exit__(*exc_info)

        data_store._lock = ReloadOnFirstAcquire()

        assert data_store.get_event(react_summit_id).tickets_sold == 120


class TestDataStoreFixtures:
    """Tests for fixture loading edge cases."""

    def test_missing_data_dir_gives_empty_store(self, tmp_path):
        store = DataStore(data_dir=tmp_path / "nothing-here")

        assert store.list_events() == []
        assert store.get_user("anyone") is None

    def test_seeded_tickets_are_loaded(self, tmp_path):
        (tmp_path / "users.json").write_text(
            '[{"id": "u1", "email": "u1@example.com", "name": "U1"}]'
        )
        (tmp_path / "events.json").write_text(
            '[{"id": "e1", "title": "E1", "venue": "V", "date": "2026-12-01T00:00:00Z",'
            ' "total_tickets": 5, "tickets_sold": 1, "created_by": "u1"}]'
        )
        (tmp_path / "tickets.json").write_text(
            '[{"id": "ticket_1", "event_id": "e1", "user_id": "u1",'
            ' "qr_code": "{}", "created_at": "2026-10-01T00:00:00Z"}]'
        )

        store = DataStore(data_dir=tmp_path)

        assert store.get_ticket("e1", "u1").id == "ticket_1"


class TestDataStoreSingleton:
    """Tests for the module-level singleton functions."""

    def test_reset_data_store(self, data_dir):
        first = get_data_store()
        second = reset_data_store(data_dir=data_dir)

        assert second is not first
        assert get_data_store() is second
