import asyncio
from collections import defaultdict
from typing import Awaitable, Callable, Dict, List, Optional, Type

from fukimori_engine.application.ports.event_bus import IEventBus
from fukimori_engine.domain.entities import GameSession
from fukimori_engine.domain.events import DomainEvent

EventHandler = Callable[[DomainEvent, Optional[GameSession]], Awaitable[None]]


class LocalEventBus(IEventBus):
    """
    An in-process event bus for a single-process server.
    Handlers for one event run concurrently.
    """
    _subscriptions: Dict[Type[DomainEvent], List[EventHandler]]

    def __init__(self):
        self._subscriptions = defaultdict(list)

    def subscribe(self, event_type: Type[DomainEvent], handler: EventHandler):
        self._subscriptions[event_type].append(handler)

    async def publish(self, event: DomainEvent, session: Optional[GameSession] = None) -> None:
        # Subscribing to DomainEvent catches every event.
        handlers_to_run = [
            handler
            for subscribed_type, handlers in self._subscriptions.items()
            if isinstance(event, subscribed_type)
            for handler in handlers
        ]
        if handlers_to_run:
            await asyncio.gather(*(handler(event, session) for handler in handlers_to_run))
