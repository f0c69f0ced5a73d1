# file: agentstudio/tests/unit_tests/conftest.py
import pytest

from agentstudio.events.event_bus import EventBus
from agentstudio.events.timeline import Timeline
from agentstudio.task_management.task_queue import TaskQueue

@pytest.fixture
def event_bus() -> EventBus:
    """A fresh bus per test."""
    return EventBus()

@pytest.fixture
def timeline(event_bus: EventBus) -> Timeline:
    """Records everything published on the test's event bus."""
    return Timeline(event_bus)

@pytest.fixture
def task_queue() -> TaskQueue:
    """Provides a clean instance of the task queue for each test."""
    return TaskQueue()
