"""
Domain models for the ticket inventory service.

These models describe the three entities the booking core works with
(users, events and tickets) plus the projections handed to callers.

Design decisions:
- Using Pydantic for validation and serialization
- Models are frozen: a booking replaces an Event snapshot instead of mutating it
- JSON field names match the records served over HTTP
"""

from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, model_validator


# =============================================================================
# Core Domain Models
# =============================================================================

class User(BaseModel):
    """
    A person who books tickets or organizes events.

    Users are seeded externally and never change inside the booking core.
    """
    id: str = Field(..., description="Opaque user identifier supplied by auth")
    email: str = Field(..., description="Contact email address")
    name: str = Field(..., description="Display name")
    avatar: str = Field(default="", description="Avatar image reference")

    model_config = ConfigDict(frozen=True)


class Event(BaseModel):
    """
    A ticketed occasion with finite capacity.

    `tickets_sold` is the inventory counter guarded by the InventoryService.
    Each successful booking produces a new snapshot with the counter bumped by one.
    """
    id: str = Field(..., description="Globally unique event identifier")
    title: str = Field(..., description="Event title")
    description: str = Field(default="")
    venue: str = Field(..., description="Where the event takes place")
    date: datetime = Field(..., description="When the event takes place")
    total_tickets: int = Field(..., ge=0, description="Total capacity")
    tickets_sold: int = Field(default=0, ge=0, description="Tickets booked so far")
    created_by: str = Field(..., description="Organizer's user id")
    image: str = Field(default="", description="Cover image reference")

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_capacity(self) -> "Event":
        if self.tickets_sold > self.total_tickets:
            raise ValueError(
                f"tickets_sold ({self.tickets_sold}) exceeds total_tickets ({self.total_tickets})"
            )
        return self

    @property
    def remaining_tickets(self) -> int:
        """Seats still available for booking."""
        return self.total_tickets - self.tickets_sold

    @property
    def is_sold_out(self) -> bool:
        return self.remaining_tickets <= 0

    def with_ticket_sold(self) -> "Event":
        """Return the snapshot that results from selling one more ticket."""
        return self.model_copy(update={"tickets_sold": self.tickets_sold + 1})


class QRPayload(BaseModel):
    """
    The bundle encoded into a ticket's QR code and scanned at the door.

    It binds the event, the user and the ticket together. There is no
    signature; the payload only has to identify the ticket.
    """
    event_id: str = Field(..., alias="eventId")
    user_id: str = Field(..., alias="userId")
    ticket_id: str = Field(..., alias="ticketId")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def encode(self) -> str:
        return self.model_dump_json(by_alias=True)

    @classmethod
    def decode(cls, raw: str) -> "QRPayload":
        """Parse a scanned payload. Raises pydantic.ValidationError if malformed."""
        return cls.model_validate_json(raw)


class Ticket(BaseModel):
    """
    Proof of a successful booking.

    Created only by InventoryService.book_ticket and never updated afterwards.
    At most one ticket exists per (event_id, user_id) pair.
    """
    id: str = Field(..., description="Unique ticket identifier")
    event_id: str = Field(..., description="Event this ticket admits to")
    user_id: str = Field(..., description="Ticket holder")
    qr_code: str = Field(..., description="Serialized QRPayload")
    created_at: datetime = Field(..., description="When the booking was committed")

    model_config = ConfigDict(frozen=True)

    def qr_payload(self) -> QRPayload:
        """Decode this ticket's QR code."""
        return QRPayload.decode(self.qr_code)


# =============================================================================
# Projections
# =============================================================================

class AttendeeTicket(Ticket):
    """
    A ticket joined with its holder and its event.

    Used by the organizer dashboard to list who is coming.
    """
    user: User
    event: Event

    @classmethod
    def from_ticket(cls, ticket: Ticket, user: User, event: Event) -> "AttendeeTicket":
        return cls(**ticket.model_dump(), user=user, event=event)


class EventView(Event):
    """Event record as served to clients, with the derived seat counts spelled out."""
    remaining: int = Field(..., description="Seats still available")
    sold_out: bool

    @classmethod
    def from_event(cls, event: Event) -> "EventView":
        return cls(
            **event.model_dump(),
            remaining=event.remaining_tickets,
            sold_out=event.is_sold_out,
        )


class BookingRequest(BaseModel):
    """Body of a booking request; the user id comes from the caller's session."""
    user_id: str = Field(..., min_length=1, description="User booking the ticket")

