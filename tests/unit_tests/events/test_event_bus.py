# file: agentstudio/tests/unit_tests/events/test_event_bus.py
import asyncio
import logging

import pytest

from agentstudio.events.event_bus import EventBus
from agentstudio.events.event_types import EventType
from agentstudio.events.studio_event import StudioEvent

def make_event(event_type: EventType = EventType.TASK_CREATED, event_id: int = 1) -> StudioEvent:
    return StudioEvent(event_id=event_id, event_type=event_type, data={"value": event_id})

def test_publish_delivers_to_type_subscriber(event_bus: EventBus):
    received = []
    event_bus.subscribe(EventType.TASK_CREATED, received.append)

    event = make_event()
    event_bus.publish(event)

    assert received == [event]

def test_publish_ignores_other_types(event_bus: EventBus):
    received = []
    event_bus.subscribe(EventType.TASK_FAILED, received.append)

    event_bus.publish(make_event(EventType.TASK_CREATED))

    assert received == []

def test_type_handlers_run_before_global_handlers_in_registration_order(event_bus: EventBus):
    calls = []
    event_bus.subscribe_all(lambda e: calls.append("all-1"))
    event_bus.subscribe(EventType.TASK_CREATED, lambda e: calls.append("typed-1"))
    event_bus.subscribe_all(lambda e: calls.append("all-2"))
    event_bus.subscribe(EventType.TASK_CREATED, lambda e: calls.append("typed-2"))

    event_bus.publish(make_event())

    assert calls == ["typed-1", "typed-2", "all-1", "all-2"]

def test_each_handler_called_exactly_once(event_bus: EventBus):
    counts = {"typed": 0, "all": 0}

    def typed(event):
        counts["typed"] += 1

    def every(event):
        counts["all"] += 1

    event_bus.subscribe(EventType.TASK_CREATED, typed)
    event_bus.subscribe_all(every)
    event_bus.publish(make_event())

    assert counts == {"typed": 1, "all": 1}

def test_failing_handler_does_not_stop_later_handlers(event_bus: EventBus, caplog):
    calls = []

    def broken(event):
        calls.append("broken")
        raise RuntimeError("observer bug")

    event_bus.subscribe(EventType.TASK_CREATED, broken)
    event_bus.subscribe(EventType.TASK_CREATED, lambda e: calls.append("typed"))
    event_bus.subscribe_all(lambda e: calls.append("all"))

    with caplog.at_level(logging.ERROR, logger="agentstudio.events.event_bus"):
        event_bus.publish(make_event())

    assert calls == ["broken", "typed", "all"]
    assert "observer bug" in caplog.text

def test_unsubscribe_removes_registration_and_is_idempotent(event_bus: EventBus):
    received = []
    unsubscribe = event_bus.subscribe(EventType.TASK_CREATED, received.append)

    unsubscribe()
    unsubscribe()
    event_bus.publish(make_event())

    assert received == []
    assert event_bus.listener_count(EventType.TASK_CREATED) == 0

def test_unsubscribe_removes_only_its_own_registration(event_bus: EventBus):
    received = []
    first = event_bus.subscribe_all(received.append)
    event_bus.subscribe_all(received.append)

    first()
    first()
    event_bus.publish(make_event())

    assert len(received) == 1
    assert event_bus.listener_count() == 1

def test_subscribe_from_inside_handler_takes_effect_on_next_publish(event_bus: EventBus):
    late_calls = []

    def registering(event):
        event_bus.subscribe(EventType.TASK_CREATED, late_calls.append)

    event_bus.subscribe(EventType.TASK_CREATED, registering)
    event_bus.publish(make_event(event_id=1))
    assert late_calls == []

    event_bus.publish(make_event(event_id=2))
    assert [e.event_id for e in late_calls] == [2]

def test_unsubscribe_from_inside_handler_is_safe(event_bus: EventBus):
    calls = []
    unsubscribers = {}

    def first(event):
        calls.append("first")
        unsubscribers["second"]()

    def second(event):
        calls.append("second")

    event_bus.subscribe(EventType.TASK_CREATED, first)
    unsubscribers["second"] = event_bus.subscribe(EventType.TASK_CREATED, second)

    event_bus.publish(make_event())
    event_bus.publish(make_event())

    assert calls == ["first", "first"]

def test_emit_assigns_sequential_ids(event_bus: EventBus):
    received = []
    event_bus.subscribe_all(received.append)

    first = event_bus.emit(EventType.STUDIO_STARTED)
    second = event_bus.emit(EventType.TASK_CREATED, task_id="task-1", data={"description": "x"})

    assert (first.event_id, second.event_id) == (1, 2)
    assert received == [first, second]
    assert second.task_id == "task-1"

def test_separate_buses_have_independent_ids():
    assert EventBus().emit(EventType.STUDIO_STARTED).event_id == 1
    assert EventBus().emit(EventType.STUDIO_STARTED).event_id == 1

def test_late_subscriber_does_not_see_past_events(event_bus: EventBus):
    event_bus.emit(EventType.STUDIO_STARTED)
    received = []
    event_bus.subscribe_all(received.append)
    assert received == []

@pytest.mark.asyncio
async def test_async_handler_is_scheduled_not_awaited(event_bus: EventBus):
    received = []

    async def async_handler(event):
        received.append(event.event_id)

    event_bus.subscribe(EventType.TASK_CREATED, async_handler)
    event_bus.publish(make_event(event_id=7))

    assert received == []
    await asyncio.sleep(0)
    assert received == [7]

def test_async_handler_without_loop_is_skipped(event_bus: EventBus, caplog):
    async def async_handler(event):
        pass

    event_bus.subscribe(EventType.TASK_CREATED, async_handler)
    with caplog.at_level(logging.WARNING, logger="agentstudio.events.event_bus"):
        event_bus.publish(make_event())

    assert "No running event loop" in caplog.text
