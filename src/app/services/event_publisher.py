from abc import ABC, abstractmethod

from src.domain.events import DomainEvent


class IEventPublisher(ABC):
    """Fan-out of committed domain events to out-of-core consumers"""

    @abstractmethod
    def publish(self, event: DomainEvent) -> None:
        """Hand off an event; must not block or raise into the caller"""
        pass


class NullEventPublisher(IEventPublisher):
    """Publisher that drops every event (used when nothing subscribes)"""

    def publish(self, event: DomainEvent) -> None:
        return None
