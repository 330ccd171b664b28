import asyncio
import logging
from collections import defaultdict
from typing import Awaitable, Callable, Dict, List, Set, Type

from src.app.services.event_publisher import IEventPublisher
from src.domain.events import DomainEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[DomainEvent], Awaitable[None]]


class InProcessEventBus(IEventPublisher):
    """
    In-process event fan-out.

    Each subscriber runs as its own asyncio task; a failing subscriber is
    logged and never affects the publisher or the other subscribers.
    """

    def __init__(self):
        self._handlers: Dict[Type[DomainEvent], List[EventHandler]] = defaultdict(list)
        self._tasks: Set[asyncio.Task] = set()

    def subscribe(self, event_type: Type[DomainEvent], handler: EventHandler) -> None:
        self._handlers[event_type].append(handler)

    def publish(self, event: DomainEvent) -> None:
        logger.info("Event %s visit=%s", event.name, event.visit_id)

        handlers = [
            handler
            for event_type, registered in self._handlers.items()
            if isinstance(event, event_type)
            for handler in registered
        ]
        for handler in handlers:
            task = asyncio.get_running_loop().create_task(self._deliver(handler, event))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

    async def _deliver(self, handler: EventHandler, event: DomainEvent) -> None:
        try:
            await handler(event)
        except Exception:
            logger.exception("Event handler failed for %s visit=%s", event.name, event.visit_id)

    async def drain(self) -> None:
        """Wait for every in-flight delivery (used on shutdown and in tests)"""
        if self._tasks:
            await asyncio.gather(*list(self._tasks))
