"""
Read-only projections over the entity store.

None of these operations mutate state, and none raise for a missing id:
absence is returned as None or an empty list.
"""

import logging
from typing import Optional

from shared.data_store import EntityStore, get_data_store
from shared.models import AttendeeTicket, Event, Ticket, User

logger = logging.getLogger("query_service")


class QueryService:
    """Serves event listings, ticket lookups and attendee lists."""

    def __init__(self, data_store: Optional[EntityStore] = None):
        self.data_store = data_store or get_data_store()

    def list_events(self) -> list[Event]:
        """All events, in store order."""
        return self.data_store.list_events()

    def get_event(self, event_id: str) -> Optional[Event]:
        return self.data_store.get_event(event_id)

    def get_user(self, user_id: str) -> Optional[User]:
        return self.data_store.get_user(user_id)

    def get_ticket(self, event_id: str, user_id: str) -> Optional[Ticket]:
        """The ticket a user holds for an event, if they booked one."""
        return self.data_store.get_ticket(event_id, user_id)

    def list_events_for_organizer(self, user_id: str) -> list[Event]:
        """Events created by an organizer, for their dashboard."""
        return [e for e in self.data_store.list_events() if e.created_by == user_id]

    def list_attendees(self, event_id: str) -> list[AttendeeTicket]:
        """
        Tickets for one event, each joined with its holder and the event.

        Read inside one store transaction so the joined event snapshot always
        accounts for every returned ticket. Ordered by ticket creation.
        """
        with self.data_store.transaction():
            event = self.data_store.get_event(event_id)
            if event is None:
                return []
            attendees = []
            for ticket in self.data_store.get_tickets_for_event(event_id):
                user = self.data_store.get_user(ticket.user_id)
                if user is None:
                    logger.warning(f"Ticket {ticket.id} references unknown user {ticket.user_id}")
                    continue
                attendees.append(AttendeeTicket.from_ticket(ticket, user, event))
        return attendees
