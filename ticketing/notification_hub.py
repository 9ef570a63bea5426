"""
In-memory notification hub for live event updates.

Viewers of an event page (or an organizer's dashboard) subscribe to an event
id and receive the latest Event snapshot every time a booking changes its
sold/remaining counts. The InventoryService calls `notify` after each commit.

Design decisions:
- Synchronous delivery in the booking's thread, one round per booking
- Subscriptions are keyed by event id, not by event type
- Handlers run in registration order
- Each registration gets its own Subscription token; calling it removes
  exactly that registration, even if the same handler was registered twice
- A failing handler is logged and does not stop the others
- Subscriptions never expire; holders release them
"""

import logging
import threading
from collections import defaultdict
from typing import Callable, Optional

from shared.data_store import EntityStore, get_data_store
from shared.models import Event

logger = logging.getLogger("notification_hub")


# Type alias for event update handler functions
EventUpdateHandler = Callable[[Event], None]


class Subscription:
    """
    Disposable token returned by NotificationHub.subscribe.

    Calling the token (or `unsubscribe()`) removes the registration.
    Repeated calls are no-ops.
    """

    def __init__(self, hub: "NotificationHub", event_id: str, handler: EventUpdateHandler):
        self.hub = hub
        self.event_id = event_id
        self.handler = handler
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def unsubscribe(self) -> bool:
        """
        Release this subscription.

        Returns:
            True if it was removed now, False if it was already released
        """
        if not self._active:
            return False
        self._active = False
        return self.hub._remove(self)

    def __call__(self) -> bool:
        return self.unsubscribe()

    def __repr__(self) -> str:
        state = "active" if self._active else "released"
        return f"Subscription(event_id={self.event_id!r}, {state})"


class NotificationHub:
    """
    Observer registry keyed by event id.

    Example usage:
        hub = NotificationHub(data_store)

        def show_remaining(event):
            print(f"{event.title}: {event.remaining_tickets} left")

        unsubscribe = hub.subscribe("a1b2c3d4-...", show_remaining)
        hub.notify("a1b2c3d4-...")   # show_remaining gets the latest snapshot
        unsubscribe()
    """

    def __init__(self, data_store: Optional[EntityStore] = None):
        """
        Initialize the hub with empty subscriber lists.

        Args:
            data_store: Store used to look up the current Event snapshot
        """
        self.data_store = data_store or get_data_store()

        # Map of event_id -> subscriptions in registration order
        self._subscribers: dict[str, list[Subscription]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscribe(self, event_id: str, handler: EventUpdateHandler) -> Subscription:
        """
        Subscribe to changes of one event.

        Args:
            event_id: The event to watch
            handler: Called with the updated Event after every booking

        Returns:
            Subscription token; call it to unsubscribe
        """
        subscription = Subscription(self, event_id, handler)
        with self._lock:
            self._subscribers[event_id].append(subscription)
        logger.debug(f"Subscribed handler to event '{event_id}'")
        return subscription

    def _remove(self, subscription: Subscription) -> bool:
        with self._lock:
            subscriptions = self._subscribers.get(subscription.event_id, [])
            for index, candidate in enumerate(subscriptions):
                if candidate is subscription:
                    del subscriptions[index]
                    break
            else:
                return False
            if not subscriptions:
                del self._subscribers[subscription.event_id]
        logger.debug(f"Unsubscribed handler from event '{subscription.event_id}'")
        return True

    def notify(self, event_id: str, event: Optional[Event] = None) -> int:
        """
        Deliver the current snapshot of an event to all of its subscribers.

        Args:
            event_id: The event that changed
            event: The committed snapshot, when the caller already holds it.
                Otherwise it is read from the hub's store.

        Returns:
            Number of handlers that were called

        Note: Without an explicit snapshot the store is read at notification
        time, so handlers always see the latest committed state. Handlers
        subscribed or released while a round is in flight take effect from
        the next round.
        """
        with self._lock:
            subscriptions = list(self._subscribers.get(event_id, []))
        if not subscriptions:
            return 0

        if event is None:
            event = self.data_store.get_event(event_id)
        if event is None:
            logger.warning(f"Cannot notify subscribers: event '{event_id}' not found")
            return 0

        logger.info(
            f"Notifying {len(subscriptions)} subscriber(s) of '{event.title}' "
            f"({event.tickets_sold}/{event.total_tickets} sold)"
        )

        handlers_called = 0
        for subscription in subscriptions:
            handlers_called += 1
            try:
                subscription.handler(event)
            except Exception as e:
                logger.error(f"Handler raised exception for event '{event_id}': {e}")

        return handlers_called

    def get_subscriber_count(self, event_id: str) -> int:
        """Get the number of subscribers for an event."""
        with self._lock:
            return len(self._subscribers.get(event_id, []))

    def clear_subscribers(self) -> None:
        """Remove all subscribers (useful for testing)."""
        with self._lock:
            for subscriptions in self._subscribers.values():
                for subscription in subscriptions:
                    subscription._active = False
            self._subscribers.clear()


# Module-level singleton for convenience
# In production, you'd likely use dependency injection instead
_default_hub: Optional[NotificationHub] = None


def get_notification_hub() -> NotificationHub:
    """Get the default notification hub singleton."""
    global _default_hub
    if _default_hub is None:
        _default_hub = NotificationHub()
    return _default_hub


def reset_notification_hub(data_store: Optional[EntityStore] = None) -> NotificationHub:
    """Reset the default notification hub (useful for testing)."""
    global _default_hub
    _default_hub = NotificationHub(data_store=data_store)
    return _default_hub
