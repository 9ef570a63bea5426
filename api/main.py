"""
FastAPI application for the ticket inventory service.

Each booking-core operation maps to one endpoint:
- GET  /events                              list events
- GET  /events/{event_id}                   event detail
- POST /events/{event_id}/bookings          book a ticket
- GET  /events/{event_id}/tickets/{user_id} a user's ticket for an event
- GET  /events/{event_id}/attendees         attendee list for the dashboard
- GET  /events/{event_id}/updates           live updates (server-sent events)
- GET  /organizers/{user_id}/events         events an organizer created

Run with:
    uv run uvicorn api.main:app --reload

Then visit http://localhost:8000/docs for interactive API documentation.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable, Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse, StreamingResponse

from shared.config import settings
from shared.data_store import DataStore, get_data_store
from shared.errors import DomainError, ErrorCode
from shared.models import AttendeeTicket, BookingRequest, Event, EventView, Ticket, User
from ticketing.inventory_service import InventoryService
from ticketing.notification_hub import NotificationHub, get_notification_hub
from ticketing.query_service import QueryService

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format=settings.LOG_FORMAT,
    datefmt="%H:%M:%S",
)

logger = logging.getLogger("api")


# Module-level instances (would use proper DI in production)
_data_store: Optional[DataStore] = None
_hub: Optional[NotificationHub] = None
_inventory: Optional[InventoryService] = None


def get_store() -> DataStore:
    """Get the data store instance."""
    global _data_store
    if _data_store is None:
        _data_store = get_data_store()
    return _data_store


def get_hub() -> NotificationHub:
    """Get the notification hub instance."""
    global _hub
    if _hub is None:
        _hub = get_notification_hub()
    return _hub


def get_inventory() -> InventoryService:
    """Get the inventory service, bound to the current store and hub."""
    global _inventory
    if _inventory is None:
        _inventory = InventoryService(data_store=get_store(), hub=get_hub())
    return _inventory


def get_queries(data_store: DataStore = Depends(get_store)) -> QueryService:
    return QueryService(data_store=data_store)


def reset_api_state(
    data_store: Optional[DataStore] = None,
    hub: Optional[NotificationHub] = None,
) -> None:
    """Reset API state (for testing)."""
    global _data_store, _hub, _inventory
    _data_store = data_store
    _hub = hub
    _inventory = None


# Application lifespan
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown."""
    logging.info(f"Starting {settings.PROJECT_NAME}")
    yield
    logging.info("Shutting down")


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="""
    Event discovery and ticket booking.

    Bookings never oversell an event and a user holds at most one ticket per
    event. Clients can follow an event's remaining-ticket count live through
    the `/events/{event_id}/updates` stream.
    """,
    version=settings.VERSION,
    lifespan=lifespan,
)


ERROR_STATUS = {
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.SOLD_OUT: 409,
    ErrorCode.ALREADY_BOOKED: 409,
}


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Map booking errors to HTTP responses with a stable error code."""
    return JSONResponse(
        status_code=ERROR_STATUS.get(exc.code, 400),
        content={"code": exc.code.value, "detail": exc.message},
    )


# =============================================================================
# Health Check
# =============================================================================

@app.get("/health", tags=["Health"])
def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "ticket-inventory"}


# =============================================================================
# Events
# =============================================================================

@app.get("/events", response_model=list[EventView], tags=["Events"])
def list_events(queries: QueryService = Depends(get_queries)):
    """List all events with their remaining-ticket counts."""
    return [EventView.from_event(e) for e in queries.list_events()]


@app.get("/events/{event_id}", response_model=EventView, tags=["Events"])
def get_event(event_id: str, queries: QueryService = Depends(get_queries)):
    event = queries.get_event(event_id)
    if event is None:
        raise HTTPException(status_code=404, detail=f"Event not found: {event_id}")
    return EventView.from_event(event)


@app.get("/organizers/{user_id}/events", response_model=list[EventView], tags=["Events"])
def list_organizer_events(user_id: str, queries: QueryService = Depends(get_queries)):
    """Events created by an organizer, for the dashboard."""
    return [EventView.from_event(e) for e in queries.list_events_for_organizer(user_id)]


# =============================================================================
# Bookings
# =============================================================================

@app.post(
    "/events/{event_id}/bookings",
    response_model=Ticket,
    status_code=201,
    tags=["Bookings"],
)
def book_ticket(
    event_id: str,
    request: BookingRequest,
    inventory: InventoryService = Depends(get_inventory),
) -> Ticket:
    """
    Book a ticket for the given user.

    Returns 404 for an unknown event or user, and 409 when the event is sold
    out or the user already holds a ticket.
    """
    return inventory.book_ticket(event_id, request.user_id)


@app.get("/events/{event_id}/tickets/{user_id}", response_model=Ticket, tags=["Bookings"])
def get_ticket(event_id: str, user_id: str, queries: QueryService = Depends(get_queries)):
    """The ticket a user holds for an event."""
    ticket = queries.get_ticket(event_id, user_id)
    if ticket is None:
        raise HTTPException(status_code=404, detail="No ticket booked for this event")
    return ticket


@app.get("/events/{event_id}/attendees", response_model=list[AttendeeTicket], tags=["Bookings"])
def list_attendees(event_id: str, queries: QueryService = Depends(get_queries)):
    """Tickets for an event joined with their holders, in booking order."""
    return queries.list_attendees(event_id)


# =============================================================================
# Users
# =============================================================================

@app.get("/users/{user_id}", response_model=User, tags=["Users"])
def get_user(user_id: str, queries: QueryService = Depends(get_queries)):
    user = queries.get_user(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail=f"User not found: {user_id}")
    return user


# =============================================================================
# Live Updates
# =============================================================================

async def stream_event_updates(
    hub: NotificationHub,
    event_id: str,
    is_disconnected: Callable[[], Awaitable[bool]],
    keepalive: float,
) -> AsyncIterator[str]:
    """
    Relay hub notifications for one event as server-sent events.

    Bookings notify from worker threads, so snapshots are handed to the
    event loop through a queue. The queue holds one snapshot: a client
    that falls behind skips straight to the newest state. The subscription
    is released when the client disconnects or the stream is closed.
    """
    loop = asyncio.get_running_loop()
    queue: asyncio.Queue[Event] = asyncio.Queue(maxsize=1)

    def keep_latest(event: Event) -> None:
        if queue.full():
            queue.get_nowait()
        queue.put_nowait(event)

    def forward(event: Event) -> None:
        loop.call_soon_threadsafe(keep_latest, event)

    unsubscribe = hub.subscribe(event_id, forward)
    try:
        while not await is_disconnected():
            try:
                event = await asyncio.wait_for(queue.get(), timeout=keepalive)
            except asyncio.TimeoutError:
                yield ": keep-alive\n\n"
                continue
            view = EventView.from_event(event)
            yield f"event: event_updated\ndata: {view.model_dump_json()}\n\n"
    finally:
        unsubscribe()


@app.get("/events/{event_id}/updates", tags=["Live Updates"])
async def event_updates(
    event_id: str,
    request: Request,
    queries: QueryService = Depends(get_queries),
    hub: NotificationHub = Depends(get_hub),
) -> StreamingResponse:
    """
    Stream the event's snapshot every time a ticket is booked.

    Consume with an EventSource; each message carries the full event record.
    """
    if queries.get_event(event_id) is None:
        raise HTTPException(status_code=404, detail=f"Event not found: {event_id}")

    return StreamingResponse(
        stream_event_updates(hub, event_id, request.is_disconnected, settings.SSE_KEEPALIVE_SECONDS),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache"},
    )
