"""
Demonstration scripts for the booking core.

These functions show the inventory service, the notification hub and the
query service working together on the seeded fixtures.
"""

import logging
import threading

from shared.config import settings
from shared.data_store import DataStore
from shared.errors import DomainError
from shared.models import Event, Ticket
from ticketing.inventory_service import InventoryService
from ticketing.notification_hub import NotificationHub
from ticketing.query_service import QueryService

# Configure logging to see what's happening
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format=settings.LOG_FORMAT,
    datefmt="%H:%M:%S",
)

REACT_SUMMIT_ID = "a1b2c3d4-e5f6-7890-1234-567890abcdef"
LAST_SEAT_EVENT_ID = "d4e5f6a7-b8c9-0123-4567-890abcdef123"


def _build_services(data_store: DataStore) -> tuple[InventoryService, NotificationHub, QueryService]:
    hub = NotificationHub(data_store=data_store)
    inventory = InventoryService(data_store=data_store, hub=hub)
    return inventory, hub, QueryService(data_store=data_store)


def run_booking_demo() -> list[Event]:
    """
    Demonstrate the booking flow with a live viewer.

    This shows:
    1. A viewer subscribes to an event page
    2. An attendee books a ticket and gets a QR-coded confirmation
    3. The viewer is told the new remaining-ticket count
    4. A duplicate booking is rejected without selling a second seat
    """
    print("\n" + "=" * 70)
    print("DEMO: Booking a ticket with a live viewer")
    print("=" * 70 + "\n")

    data_store = DataStore()
    inventory, hub, queries = _build_services(data_store)

    updates: list[Event] = []

    def on_update(event: Event) -> None:
        updates.append(event)
        print(f"  [viewer] {event.title}: {event.remaining_tickets} tickets left")

    unsubscribe = hub.subscribe(REACT_SUMMIT_ID, on_update)

    attendee = data_store.find_user_by_email("attendee@example.com")
    event = queries.get_event(REACT_SUMMIT_ID)
    print(f"{attendee.name} is booking '{event.title}' ({event.remaining_tickets} left)")
    print("-" * 70 + "\n")

    ticket = inventory.book_ticket(REACT_SUMMIT_ID, attendee.id)
    payload = ticket.qr_payload()
    print(f"\nConfirmed: {ticket.id}")
    print(f"  QR payload: {ticket.qr_code}")
    print(f"  Decodes to event={payload.event_id} user={payload.user_id}")

    print("\nSubmitting the same booking again...")
    try:
        inventory.book_ticket(REACT_SUMMIT_ID, attendee.id)
    except DomainError as e:
        print(f"  Rejected: {e}")

    unsubscribe()
    return updates


def run_last_seat_demo() -> list[Ticket]:
    """
    Demonstrate two attendees racing for the last seat.

    Both bookings run in parallel threads. The per-event lock serializes them,
    so exactly one ticket is issued and the other caller is told it sold out.
    """
    print("\n" + "=" * 70)
    print("DEMO: Two attendees racing for the last seat")
    print("=" * 70 + "\n")

    data_store = DataStore()
    inventory, _, queries = _build_services(data_store)
    contenders = [
        data_store.find_user_by_email("attendee@example.com"),
        data_store.find_user_by_email("organizer@example.com"),
    ]

    event = queries.get_event(LAST_SEAT_EVENT_ID)
    print(f"'{event.title}': {event.remaining_tickets} seat left, {len(contenders)} bookings in flight\n")

    issued: list[Ticket] = []
    barrier = threading.Barrier(len(contenders))

    def attempt(user_id: str) -> None:
        barrier.wait()
        try:
            issued.append(inventory.book_ticket(LAST_SEAT_EVENT_ID, user_id))
        except DomainError as e:
            print(f"  {user_id}: {e}")

    threads = [threading.Thread(target=attempt, args=(user.id,)) for user in contenders]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    event = queries.get_event(LAST_SEAT_EVENT_ID)
    print(f"\nTickets issued: {len(issued)}")
    print(f"Sold: {event.tickets_sold}/{event.total_tickets}")
    return issued


def run_dashboard_demo() -> None:
    """
    Demonstrate the organizer dashboard.

    A couple of attendees book, then the organizer lists their events and
    the attendees of each one.
    """
    print("\n" + "=" * 70)
    print("DEMO: Organizer dashboard")
    print("=" * 70 + "\n")

    data_store = DataStore()
    inventory, _, queries = _build_services(data_store)

    organizer = data_store.find_user_by_email("organizer@example.com")
    for email in ("attendee@example.com", "guest@example.com"):
        user = data_store.find_user_by_email(email)
        inventory.book_ticket(REACT_SUMMIT_ID, user.id)

    print(f"\nEvents organized by {organizer.name}:")
    for event in queries.list_events_for_organizer(organizer.id):
        attendees = queries.list_attendees(event.id)
        print(f"  {event.title} - {event.tickets_sold}/{event.total_tickets} sold, "
              f"{len(attendees)} booked here")
        for attendee in attendees:
            print(f"    {attendee.user.name} <{attendee.user.email}> {attendee.id}")


if __name__ == "__main__":
    print("\nRunning Ticket Inventory Demos")
    print("=" * 70)

    run_booking_demo()
    run_last_seat_demo()
    run_dashboard_demo()
