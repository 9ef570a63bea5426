"""
Shared infrastructure for the ticket inventory service.

This package contains code used by the booking core and the HTTP API:
- Domain models (User, Event, Ticket, QRPayload, ...)
- Entity store interface and the JSON-seeded in-memory store
- Domain errors
- Settings
"""

from shared.models import (
    User,
    Event,
    Ticket,
    QRPayload,
    AttendeeTicket,
    EventView,
)
from shared.data_store import DataStore, EntityStore
from shared.errors import (
    DomainError,
    NotFoundError,
    SoldOutError,
    AlreadyBookedError,
    EntityKind,
    ErrorCode,
)

__all__ = [
    "User",
    "Event",
    "Ticket",
    "QRPayload",
    "AttendeeTicket",
    "EventView",
    "DataStore",
    "EntityStore",
    "DomainError",
    "NotFoundError",
    "SoldOutError",
    "AlreadyBookedError",
    "EntityKind",
    "ErrorCode",
]
