from abc import ABC, abstractmethod
from typing import Callable, Optional, Type

from fukimori_engine.domain.events import DomainEvent
from fukimori_engine.domain.entities import GameSession


class IEventBus(ABC):
    """
    An interface (Port) for an event bus.
    Handlers learn about what happened in a session without the use cases
    knowing who listens.
    """

    @abstractmethod
    async def publish(self, event: DomainEvent, session: Optional[GameSession] = None) -> None:
        """
        Publishes a domain event to all subscribed handlers, optionally passing
        the session the event happened in.
        """
        pass

    @abstractmethod
    def subscribe(self, event_type: Type[DomainEvent], handler: Callable):
        """
        Subscribes an awaitable handler to a type of domain event.
        Subscribing to a base class also delivers its subclasses.
        """
        pass
