"""Domain errors raised by the booking core."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    NOT_FOUND = "NOT_FOUND"
    SOLD_OUT = "SOLD_OUT"
    ALREADY_BOOKED = "ALREADY_BOOKED"


class EntityKind(str, Enum):
    """Which kind of record a NotFoundError refers to."""

    EVENT = "event"
    USER = "user"


@dataclass(eq=False)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class NotFoundError(DomainError):
    """Raised when a booking references an event or user that does not exist."""

    def __init__(self, kind: EntityKind, entity_id: str) -> None:
        super().__init__(
            code=ErrorCode.NOT_FOUND,
            message=f"{kind.value.capitalize()} not found",
        )
        self.kind = kind
        self.entity_id = entity_id


class SoldOutError(DomainError):
    """Raised when an event has no seats left."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.SOLD_OUT,
            message="Event is sold out",
        )
        self.event_id = event_id


class AlreadyBookedError(DomainError):
    """Raised when the user already holds a ticket for the event."""

    def __init__(self, event_id: str, user_id: str) -> None:
        super().__init__(
            code=ErrorCode.ALREADY_BOOKED,
            message="You have already booked a ticket for this event",
        )
        self.event_id = event_id
        self.user_id = user_id
