# file: agentstudio/agentstudio/events/log_sink.py
import logging
from typing import Optional

from .event_bus import EventBus
from .studio_event import StudioEvent

logger = logging.getLogger(__name__)

_DETAIL_KEYS = ("path", "description", "goal")

class EventLogSink:
    """
    A console-style viewer: writes one log line per event.
    Format: '[<agent id or studio>] <event name> <detail>'.
    """
    def __init__(self, event_bus: EventBus, target_logger: Optional[logging.Logger] = None, level: int = logging.INFO):
        self._logger = target_logger or logger
        self._level = level
        self._unsubscribe = event_bus.subscribe_all(self.handle_event)

    @staticmethod
    def format_event(event: StudioEvent) -> str:
        source = f"[{event.agent_id}]" if event.agent_id else "[studio]"
        detail = next((str(event.data[k]) for k in _DETAIL_KEYS if event.data.get(k)), "")
        return f"{source} {event.event_type.short_name} {detail}".rstrip()

    def handle_event(self, event: StudioEvent) -> None:
        self._logger.log(self._level, self.format_event(event))

    def detach(self) -> None:
        self._unsubscribe()
