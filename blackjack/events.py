"""Events emitted by hands and rounds."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable


class HandEvent(Enum):
    """Events a single hand can emit."""

    NEW_HAND = "new_hand"
    BUST = "bust"
    BLACKJACK = "blackjack"
    CHANGED = "changed"


class RoundEvent(Enum):
    """Events a round can emit."""

    NEW_HAND_CREATED = "new_hand_created"
    STOOD_ALL = "stood_all"
    END = "end"


EventType = HandEvent | RoundEvent


@dataclass(frozen=True)
class GameEvent:
    """
    Immutable game event.

    Events are the only channel from the engine to observers; the payload
    (hands, values, settlement) travels in ``data``.
    """

    event_type: EventType
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"{self.event_type.name}: {self.data}"


# Type alias for event handlers
EventHandler = Callable[[GameEvent], None]


class EventEmitter:
    """
    Simple event emitter for game events.

    Allows subscribing to specific event types or all events. With
    ``buffer_unheard`` set, events emitted while nobody listens for them are
    held back and handed to the first handler that subscribes to them.
    """

    def __init__(self, buffer_unheard: bool = False) -> None:
        """Initialize the event emitter."""
        self._handlers: dict[EventType | None, list[EventHandler]] = {}
        self._event_history: list[GameEvent] = []
        self._buffer_unheard = buffer_unheard
        self._pending: list[GameEvent] = []

    def subscribe(
        self,
        handler: EventHandler,
        event_type: EventType | None = None,
    ) -> None:
        """
        Subscribe to events.

        Args:
            handler: Function to call when event occurs
            event_type: Specific event type to subscribe to, or None for all events
        """
        if event_type not in self._handlers:
            self._handlers[event_type] = []
        self._handlers[event_type].append(handler)
        self._flush_pending(handler, event_type)

    def unsubscribe(
        self,
        handler: EventHandler,
        event_type: EventType | None = None,
    ) -> None:
        """
        Unsubscribe from events.

        Args:
            handler: Handler to remove
            event_type: Event type to unsubscribe from
        """
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def remove_all_handlers(self, event_type: EventType | None = None) -> None:
        """Drop every handler, or only those subscribed to ``event_type``."""
        if event_type is None:
            self._handlers.clear()
        else:
            self._handlers.pop(event_type, None)

    def emit(self, event: GameEvent) -> None:
        """
        Emit an event to all subscribers.

        Args:
            event: The event to emit
        """
        self._event_history.append(event)

        handlers = self._handlers.get(event.event_type, []) + self._handlers.get(None, [])
        if not handlers:
            if self._buffer_unheard:
                self._pending.append(event)
            return

        for handler in handlers:
            handler(event)

    def emit_new(
        self,
        event_type: EventType,
        **data: Any,
    ) -> GameEvent:
        """
        Create and emit a new event.

        Args:
            event_type: Type of event
            **data: Event data

        Returns:
            The created event
        """
        event = GameEvent(event_type=event_type, data=data)
        self.emit(event)
        return event

    def _flush_pending(self, handler: EventHandler, event_type: EventType | None) -> None:
        """Deliver buffered events matching ``event_type`` to a new handler."""
        if not self._pending:
            return

        matching: list[GameEvent] = []
        remaining: list[GameEvent] = []
        for event in self._pending:
            if event_type is None or event.event_type == event_type:
                matching.append(event)
            else:
                remaining.append(event)

        self._pending = remaining
        for event in matching:
            handler(event)

    @property
    def pending(self) -> list[GameEvent]:
        """Return events still waiting for a listener."""
        return self._pending.copy()

    @property
    def history(self) -> list[GameEvent]:
        """Return the event history."""
        return self._event_history.copy()

    def clear_history(self) -> None:
        """Clear the event history."""
        self._event_history.clear()
