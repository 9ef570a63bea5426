"""
HTTP API for the ticket inventory service.

This package exposes the booking core as a FastAPI application:
- Event listing and detail endpoints
- Booking and ticket lookup endpoints
- Attendee lists for the organizer dashboard
- A server-sent events stream of live event updates
"""

from api.main import app

__all__ = ["app"]
