# file: agentstudio/agentstudio/events/timeline.py
"""
An append-only history of every event that flows through an EventBus.
Supports filtering, JSON serialization and replay into another bus.
"""
import asyncio
import datetime
import json
import logging
import math
from typing import List, Optional

from .event_bus import EventBus
from .event_types import EventType
from .studio_event import StudioEvent

logger = logging.getLogger(__name__)

class Timeline:
    """
    Records events by subscribing to all events on the bus it is given.
    The bus itself keeps no history; this is the component that does.
    """
    def __init__(self, event_bus: EventBus):
        self._events: List[StudioEvent] = []
        self._event_bus = event_bus
        self._unsubscribe = event_bus.subscribe_all(self._record)
        logger.debug("Timeline attached to EventBus.")

    def _record(self, event: StudioEvent) -> None:
        self._events.append(event)

    def detach(self) -> None:
        """Stops recording. Already-recorded events are kept."""
        self._unsubscribe()

    def all(self) -> List[StudioEvent]:
        return list(self._events)

    def by_type(self, event_type: EventType) -> List[StudioEvent]:
        event_type = EventType(event_type)
        return [e for e in self._events if e.event_type == event_type]

    def by_agent(self, agent_id: str) -> List[StudioEvent]:
        return [e for e in self._events if e.agent_id == agent_id]

    def by_task(self, task_id: str) -> List[StudioEvent]:
        return [e for e in self._events if e.task_id == task_id]

    def between(self, start: datetime.datetime, end: datetime.datetime) -> List[StudioEvent]:
        """Events whose timestamp lies in [start, end]."""
        return [e for e in self._events if start <= e.timestamp <= end]

    def recent(self, n: int = 50) -> List[StudioEvent]:
        if n <= 0:
            return []
        return self._events[-n:]

    def serialize(self) -> str:
        return json.dumps([e.to_dict() for e in self._events])

    def __len__(self) -> int:
        return len(self._events)

    async def replay_into(self, target_bus: EventBus, speed: float = 1.0, start_from: int = 0) -> None:
        """
        Republishes recorded events, in order, to another bus (e.g. for a late-joining viewer).

        Args:
            target_bus: The bus to publish into. Must not be the bus this timeline records.
            speed: Playback multiplier applied to the original gaps between events.
                   math.inf republishes everything immediately.
            start_from: Index of the first event to replay.
        """
        if speed <= 0:
            raise ValueError("Replay speed must be positive.")
        if target_bus is self._event_bus:
            raise ValueError("Cannot replay a timeline into the bus it is recording.")

        events = self._events[start_from:]
        logger.info(f"Replaying {len(events)} events at speed {speed}.")
        for index, event in enumerate(events):
            target_bus.publish(event)
            if math.isinf(speed) or index + 1 >= len(events):
                continue
            gap = (events[index + 1].timestamp - event.timestamp).total_seconds() / speed
            if gap > 0:
                await asyncio.sleep(gap)
