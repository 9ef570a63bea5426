"""
Booking core for the ticket inventory service.

This package implements the services behind event discovery and booking:
- InventoryService books tickets and enforces capacity rules
- NotificationHub fans out live event updates to subscribers
- QueryService serves read-only projections (events, tickets, attendees)
"""

from ticketing.inventory_service import InventoryService
from ticketing.notification_hub import (
    NotificationHub,
    Subscription,
    get_notification_hub,
    reset_notification_hub,
)
from ticketing.query_service import QueryService

__all__ = [
    "InventoryService",
    "NotificationHub",
    "Subscription",
    "get_notification_hub",
    "reset_notification_hub",
    "QueryService",
]
