# file: agentstudio/agentstudio/events/__init__.py
"""
The event backbone of the studio: the closed event vocabulary, the immutable
event record, the synchronous publish/subscribe bus and the sinks that
record or log what flows through it.
"""
from .event_types import EventType
from .studio_event import StudioEvent
from .event_bus import EventBus, EventHandler, Unsubscribe
from .timeline import Timeline
from .log_sink import EventLogSink

__all__ = [
    "EventType",
    "StudioEvent",
    "EventBus",
    "EventHandler",
    "Unsubscribe",
    "Timeline",
    "EventLogSink",
]
