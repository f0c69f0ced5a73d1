# file: agentstudio/agentstudio/events/studio_event.py
"""
Defines StudioEvent, the immutable record of something that happened in the studio.
"""
import copy
import datetime
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from .event_types import EventType


def _freeze(value: Any) -> Any:
    """Recursively copies the payload, turning dicts into read-only mappings and lists/sets into tuples."""
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    if isinstance(value, (set, frozenset)):
        return frozenset(_freeze(v) for v in value)
    if isinstance(value, (str, bytes, int, float, bool, type(None), Enum)):
        return value
    return copy.deepcopy(value)


def _thaw(value: Any) -> Any:
    """Inverse of _freeze, producing plain JSON-friendly containers."""
    if isinstance(value, Mapping):
        return {str(k): _thaw(v) for k, v in value.items()}
    if isinstance(value, (tuple, list, frozenset, set)):
        return [_thaw(v) for v in value]
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime.datetime, datetime.date)):
        return value.isoformat()
    if hasattr(value, "model_dump"):
        return value.model_dump(mode="json")
    return value


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


@dataclass(frozen=True)
class StudioEvent:
    """
    An immutable event. The payload is deep-copied at construction and frozen,
    so later changes to the caller's dict are never visible to consumers.
    """
    event_id: int
    event_type: EventType
    agent_id: Optional[str] = None
    task_id: Optional[str] = None
    data: Mapping[str, Any] = field(default_factory=dict)
    timestamp: datetime.datetime = field(default_factory=_utcnow)

    def __post_init__(self):
        object.__setattr__(self, "event_type", EventType(self.event_type))
        object.__setattr__(self, "data", _freeze(self.data or {}))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_id": self.event_id,
            "event_type": self.event_type.value,
            "agent_id": self.agent_id,
            "task_id": self.task_id,
            "data": _thaw(self.data),
            "timestamp": self.timestamp.isoformat(),
        }

    def __repr__(self) -> str:
        return (f"<StudioEvent #{self.event_id} {self.event_type.value} "
                f"agent={self.agent_id!r} task={self.task_id!r}>")
