# file: agentstudio/agentstudio/events/event_bus.py
import asyncio
import functools
import inspect
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

from agentstudio.utils.id_generator import IdGenerator
from .event_types import EventType
from .studio_event import StudioEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[StudioEvent], Any]
Unsubscribe = Callable[[], None]


class _Registration:
    """One subscription. Identity, not the handler, is what unsubscribe removes."""
    __slots__ = ("handler", "event_type", "active")

    def __init__(self, handler: EventHandler, event_type: Optional[EventType]):
        self.handler = handler
        self.event_type = event_type
        self.active = True


class EventBus:
    """
    Process-wide publish/subscribe channel for StudioEvents.

    Delivery is synchronous and ordered: type-specific handlers first, then
    all-event handlers, each group in registration order. A handler that raises
    is logged and skipped; it never prevents later handlers from running.
    The bus keeps no history; late subscribers only see future events.
    """

    def __init__(self, id_generator: Optional[IdGenerator] = None):
        self._typed: Dict[EventType, List[_Registration]] = {}
        self._global: List[_Registration] = []
        self._ids = id_generator or IdGenerator()
        logger.debug("EventBus initialized.")

    def subscribe(self, event_type: EventType, handler: EventHandler) -> Unsubscribe:
        """
        Registers a handler for one event type.

        Returns:
            A callable that removes exactly this registration. Calling it more
            than once has no further effect.
        """
        event_type = EventType(event_type)
        registration = _Registration(handler, event_type)
        self._typed.setdefault(event_type, []).append(registration)
        return functools.partial(self._remove, registration)

    def subscribe_all(self, handler: EventHandler) -> Unsubscribe:
        """Registers a handler for every event type. Same contract as subscribe()."""
        registration = _Registration(handler, None)
        self._global.append(registration)
        return functools.partial(self._remove, registration)

    def _remove(self, registration: _Registration) -> None:
        if not registration.active:
            return
        registration.active = False
        if registration.event_type is None:
            bucket = self._global
        else:
            bucket = self._typed.get(registration.event_type, [])
        # Rebuild rather than mutate in place; publish() may be iterating the old list.
        remaining = [r for r in bucket if r is not registration]
        if registration.event_type is None:
            self._global = remaining
        elif remaining:
            self._typed[registration.event_type] = remaining
        else:
            self._typed.pop(registration.event_type, None)

    def publish(self, event: StudioEvent) -> None:
        """Delivers the event to every currently registered matching handler."""
        registrations = list(self._typed.get(event.event_type, ())) + list(self._global)
        for registration in registrations:
            if not registration.active:
                continue
            self._invoke_handler(registration.handler, event)

    def emit(self, event_type: EventType,
             agent_id: Optional[str] = None,
             task_id: Optional[str] = None,
             data: Optional[Mapping[str, Any]] = None) -> StudioEvent:
        """Builds an event with the next sequential id, publishes it and returns it."""
        event = StudioEvent(
            event_id=self._ids.next_int(),
            event_type=event_type,
            agent_id=agent_id,
            task_id=task_id,
            data=data or {},
        )
        self.publish(event)
        return event

    def _invoke_handler(self, handler: EventHandler, event: StudioEvent) -> None:
        """
        Calls one handler with failure isolation. Coroutine handlers are scheduled
        on the running loop and never awaited by the publisher.
        """
        target = handler.func if isinstance(handler, functools.partial) else handler
        try:
            if inspect.iscoroutinefunction(target):
                try:
                    loop = asyncio.get_running_loop()
                except RuntimeError:
                    logger.warning(f"No running event loop; async handler "
                                   f"{getattr(target, '__name__', repr(target))} skipped for {event.event_type.value}.")
                    return
                task = loop.create_task(handler(event))
                task.add_done_callback(functools.partial(self._log_async_failure, event))
            else:
                handler(event)
        except Exception as e:
            logger.error(f"Error invoking event handler {getattr(target, '__name__', repr(target))} "
                         f"for event {event.event_type.value}: {e}", exc_info=True)

    @staticmethod
    def _log_async_failure(event: StudioEvent, task: "asyncio.Future") -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"Async event handler failed for event {event.event_type.value}: {exc}",
                         exc_info=exc)

    def listener_count(self, event_type: Optional[EventType] = None) -> int:
        if event_type is None:
            return len(self._global)
        return len(self._typed.get(EventType(event_type), ()))
