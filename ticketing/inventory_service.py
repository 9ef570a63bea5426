"""
Inventory service: the only writer of bookings.

This service enforces the booking rules and commits tickets to the store:
- an event never sells more tickets than its capacity
- a user holds at most one ticket per event
- every successful booking is announced to the event's subscribers

Design decisions:
- Preconditions are checked in a fixed order, each with its own error
- All checks run before any write, so a failed booking leaves no trace
- Check-and-commit for one event is serialized by a per-event lock;
  bookings for different events never wait on each other
- Fan-out happens inside the event's lock, so subscribers see one round per
  booking, in commit order, carrying the snapshot this booking committed
"""

import logging
import threading
import time
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from shared.config import settings
from shared.data_store import EntityStore, get_data_store
from shared.errors import AlreadyBookedError, EntityKind, NotFoundError, SoldOutError
from shared.models import QRPayload, Ticket
from ticketing.notification_hub import NotificationHub, get_notification_hub

logger = logging.getLogger("inventory_service")


def new_ticket_id() -> str:
    return f"ticket_{uuid4().hex}"


class InventoryService:
    """
    Books tickets against the entity store.

    Example:
        service = InventoryService(data_store=store, hub=hub)

        ticket = service.book_ticket(event_id, user_id)
        ticket.qr_payload().ticket_id == ticket.id   # True

        service.book_ticket(event_id, user_id)       # raises AlreadyBookedError
    """

    def __init__(
        self,
        data_store: Optional[EntityStore] = None,
        hub: Optional[NotificationHub] = None,
        booking_latency: Optional[float] = None,
    ):
        """
        Initialize the inventory service.

        Args:
            data_store: Store holding events, users and tickets
            hub: Notification hub to fan out updates through. Handlers get
                the snapshot committed to `data_store`, whichever store the
                hub itself reads from.
            booking_latency: Seconds to wait before evaluating a booking,
                simulating a remote backend. Defaults to settings.
        """
        self.data_store = data_store or get_data_store()
        self.hub = hub or get_notification_hub()
        if booking_latency is None:
            booking_latency = settings.BOOKING_LATENCY_SECONDS
        self.booking_latency = booking_latency

        self._event_locks: dict[str, threading.RLock] = {}
        self._event_locks_guard = threading.Lock()

    def _lock_for(self, event_id: str) -> threading.RLock:
        with self._event_locks_guard:
            lock = self._event_locks.get(event_id)
            if lock is None:
                lock = threading.RLock()
                self._event_locks[event_id] = lock
            return lock

    def book_ticket(self, event_id: str, user_id: str) -> Ticket:
        """
        Book one ticket for a user.

        Args:
            event_id: The event to attend
            user_id: The user booking (from the caller's session)

        Returns:
            The newly issued Ticket

        Raises:
            NotFoundError: The event or the user does not exist
            SoldOutError: No seats remain
            AlreadyBookedError: The user already holds a ticket for this event
        """
        if self.booking_latency > 0:
            time.sleep(self.booking_latency)

        # Locks exist only for known events; the check repeats under the lock
        if self.data_store.get_event(event_id) is None:
            logger.warning(f"Booking rejected, event not found: {event_id}")
            raise NotFoundError(EntityKind.EVENT, event_id)

        with self._lock_for(event_id):
            event = self.data_store.get_event(event_id)
            if event is None:
                logger.warning(f"Booking rejected, event not found: {event_id}")
                raise NotFoundError(EntityKind.EVENT, event_id)

            user = self.data_store.get_user(user_id)
            if user is None:
                logger.warning(f"Booking rejected, user not found: {user_id}")
                raise NotFoundError(EntityKind.USER, user_id)

            if event.is_sold_out:
                logger.warning(f"Booking rejected, '{event.title}' is sold out")
                raise SoldOutError(event_id)

            if self.data_store.get_ticket(event_id, user_id) is not None:
                logger.warning(f"Booking rejected, {user_id} already holds a ticket for {event_id}")
                raise AlreadyBookedError(event_id, user_id)

            ticket_id = new_ticket_id()
            ticket = Ticket(
                id=ticket_id,
                event_id=event_id,
                user_id=user_id,
                qr_code=QRPayload(event_id=event_id, user_id=user_id, ticket_id=ticket_id).encode(),
                created_at=datetime.now(timezone.utc),
            )
            updated = self.data_store.record_booking(ticket)

            logger.info(
                f"Ticket {ticket.id} booked for {user.name} at '{updated.title}'. "
                f"Remaining: {updated.remaining_tickets}"
            )

            self.hub.notify(event_id, updated)

        return ticket
