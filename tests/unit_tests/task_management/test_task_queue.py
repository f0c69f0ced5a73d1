# file: agentstudio/tests/unit_tests/task_management/test_task_queue.py
import pytest
from pydantic import ValidationError

from agentstudio.task_management import (
    InvalidTransitionError,
    TaskDefinition,
    TaskQueue,
    TaskStatus,
    UnknownTaskError,
)
from agentstudio.utils.id_generator import IdGenerator

def _finish(queue: TaskQueue, task_id: str, agent_id: str = "agent-1"):
    queue.transition(task_id, TaskStatus.ASSIGNED, agent_id=agent_id)
    queue.transition(task_id, TaskStatus.ACTIVE)
    return queue.transition(task_id, TaskStatus.COMPLETED, result={"ok": True})

# --- Admission ---

def test_add_applies_defaults(task_queue: TaskQueue):
    task = task_queue.add({"description": "Write code", "task_type": "implement"})

    assert task.task_id == "task-1"
    assert task.status == TaskStatus.PENDING
    assert task.assign_to_role is None
    assert task.depends_on == []
    assert task.context == {}
    assert task.priority == 0
    assert task.assigned_agent_id is None
    assert task.result is None
    assert task.completed_at is None
    assert task.created_at is not None

def test_description_is_optional(task_queue: TaskQueue):
    task = task_queue.add({"task_type": "plan", "assign_to_role": "architect", "priority": 100})
    assert task.description == ""
    assert task_queue.next_for("architect").task_id == task.task_id

def test_ids_are_unique_and_sequential(task_queue: TaskQueue):
    ids = [task_queue.add({"description": f"t{i}", "task_type": "x"}).task_id for i in range(3)]
    assert ids == ["task-1", "task-2", "task-3"]

def test_injected_id_generator():
    queue = TaskQueue(id_generator=IdGenerator(prefix="job", start=10))
    assert queue.add(TaskDefinition(description="a", task_type="x")).task_id == "job-10"

def test_separate_queues_number_independently():
    first, second = TaskQueue(), TaskQueue()
    first.add({"description": "a", "task_type": "x"})
    assert second.add({"description": "b", "task_type": "x"}).task_id == "task-1"

def test_add_rejects_invalid_definition(task_queue: TaskQueue):
    with pytest.raises(ValidationError):
        task_queue.add({"description": "missing type"})
    with pytest.raises(ValidationError):
        task_queue.add({"description": "bad", "task_type": "x", "unexpected": 1})
    assert len(task_queue) == 0

def test_duplicate_dependencies_are_collapsed(task_queue: TaskQueue):
    task = task_queue.add({"description": "a", "task_type": "x", "depends_on": ["task-9", "task-9"]})
    assert task.depends_on == ["task-9"]

def test_add_plan_preserves_order(task_queue: TaskQueue):
    created = task_queue.add_plan([
        {"description": "first", "task_type": "x"},
        {"description": "second", "task_type": "x"},
    ])
    assert [t.description for t in created] == ["first", "second"]
    assert [t.task_id for t in created] == ["task-1", "task-2"]

def test_add_plan_validates_everything_before_admitting(task_queue: TaskQueue):
    with pytest.raises(ValidationError):
        task_queue.add_plan([
            {"description": "fine", "task_type": "x"},
            {"description": "broken"},
        ])
    assert len(task_queue) == 0

# --- Scheduling ---

def test_next_for_respects_role(task_queue: TaskQueue):
    task_queue.add({"description": "design", "task_type": "design", "assign_to_role": "designer"})
    anyone = task_queue.add({"description": "anyone", "task_type": "x"})

    assert task_queue.next_for("programmer").task_id == anyone.task_id
    assert task_queue.next_for("designer").description == "design"

def test_next_for_waits_for_dependencies(task_queue: TaskQueue):
    first = task_queue.add({"description": "first", "task_type": "x"})
    second = task_queue.add({"description": "second", "task_type": "x",
                             "depends_on": [first.task_id], "priority": 50})

    assert task_queue.next_for("programmer").task_id == first.task_id
    _finish(task_queue, first.task_id)
    assert task_queue.next_for("programmer").task_id == second.task_id

def test_next_for_prefers_priority_then_insertion(task_queue: TaskQueue):
    low = task_queue.add({"description": "low", "task_type": "x", "priority": 1})
    high_a = task_queue.add({"description": "high a", "task_type": "x", "priority": 5})
    high_b = task_queue.add({"description": "high b", "task_type": "x", "priority": 5})

    assert task_queue.next_for("any").task_id == high_a.task_id
    assert [t.task_id for t in task_queue.ready_tasks()] == [high_a.task_id, high_b.task_id, low.task_id]

def test_next_for_does_not_mutate(task_queue: TaskQueue):
    task = task_queue.add({"description": "a", "task_type": "x"})
    assert task_queue.next_for("any").task_id == task.task_id
    assert task_queue.next_for("any").task_id == task.task_id
    assert task_queue.get(task.task_id).status == TaskStatus.PENDING

def test_next_for_empty_queue(task_queue: TaskQueue):
    assert task_queue.next_for("programmer") is None

def test_dangling_dependency_never_ready(task_queue: TaskQueue):
    task_queue.add({"description": "orphan", "task_type": "x", "depends_on": ["task-404"]})
    assert task_queue.next_for("programmer") is None
    assert task_queue.ready_tasks() == []

def test_failed_dependency_blocks_dependents(task_queue: TaskQueue):
    first = task_queue.add({"description": "first", "task_type": "x"})
    task_queue.add({"description": "second", "task_type": "x", "depends_on": [first.task_id]})
    task_queue.transition(first.task_id, TaskStatus.FAILED)
    assert task_queue.next_for("programmer") is None

def test_ready_tasks_role_filter(task_queue: TaskQueue):
    task_queue.add({"description": "design", "task_type": "design", "assign_to_role": "designer"})
    task_queue.add({"description": "anyone", "task_type": "x"})
    assert len(task_queue.ready_tasks()) == 2
    assert [t.description for t in task_queue.ready_tasks("tester")] == ["anyone"]

# --- State machine ---

def test_transition_records_agent_and_result(task_queue: TaskQueue):
    task = task_queue.add({"description": "a", "task_type": "x"})

    assigned = task_queue.transition(task.task_id, TaskStatus.ASSIGNED, agent_id="programmer-1")
    assert assigned.assigned_agent_id == "programmer-1"

    completed = _finish_from_assigned(task_queue, task.task_id)
    assert completed.status == TaskStatus.COMPLETED
    assert completed.result == {"files": ["main.py"]}
    assert completed.completed_at is not None
    assert completed.assigned_agent_id == "programmer-1"

def _finish_from_assigned(queue: TaskQueue, task_id: str):
    queue.transition(task_id, TaskStatus.ACTIVE)
    return queue.transition(task_id, TaskStatus.COMPLETED, result={"files": ["main.py"]})

def test_transition_back_to_pending_clears_agent(task_queue: TaskQueue):
    task = task_queue.add({"description": "a", "task_type": "x"})
    task_queue.transition(task.task_id, TaskStatus.ASSIGNED, agent_id="programmer-1")
    rearmed = task_queue.transition(task.task_id, TaskStatus.PENDING)
    assert rearmed.assigned_agent_id is None
    assert rearmed.status == TaskStatus.PENDING

def test_failed_task_can_be_retried(task_queue: TaskQueue):
    task = task_queue.add({"description": "a", "task_type": "x"})
    failed = task_queue.transition(task.task_id, TaskStatus.FAILED, result={"reason": "boom"})
    assert failed.result == {"reason": "boom"}
    assert failed.completed_at is None
    assert task_queue.transition(task.task_id, TaskStatus.PENDING).status == TaskStatus.PENDING

def test_rearmed_task_drops_previous_result(task_queue: TaskQueue):
    task = task_queue.add({"description": "a", "task_type": "x"})
    task_queue.transition(task.task_id, TaskStatus.FAILED, result={"reason": "Max turns exceeded"})

    rearmed = task_queue.transition(task.task_id, TaskStatus.PENDING)
    assert rearmed.result is None

    task_queue.transition(task.task_id, TaskStatus.ASSIGNED, agent_id="programmer-1")
    task_queue.transition(task.task_id, TaskStatus.ACTIVE)
    completed = task_queue.transition(task.task_id, TaskStatus.COMPLETED)
    assert completed.result is None
    assert completed.completed_at is not None

def test_invalid_transition_leaves_task_unchanged(task_queue: TaskQueue):
    task = task_queue.add({"description": "a", "task_type": "x"})
    _finish(task_queue, task.task_id)

    with pytest.raises(InvalidTransitionError) as exc_info:
        task_queue.transition(task.task_id, TaskStatus.PENDING)

    assert exc_info.value.from_status == TaskStatus.COMPLETED
    assert exc_info.value.to_status == TaskStatus.PENDING
    assert task_queue.get(task.task_id).status == TaskStatus.COMPLETED

def test_skipping_assignment_is_rejected(task_queue: TaskQueue):
    task = task_queue.add({"description": "a", "task_type": "x"})
    with pytest.raises(InvalidTransitionError):
        task_queue.transition(task.task_id, TaskStatus.ACTIVE)
    assert task_queue.get(task.task_id).status == TaskStatus.PENDING

def test_unknown_task(task_queue: TaskQueue):
    with pytest.raises(UnknownTaskError, match="Unknown task: task-99"):
        task_queue.transition("task-99", TaskStatus.ASSIGNED)
    with pytest.raises(KeyError):
        task_queue.get("task-99")
    assert task_queue.find("task-99") is None

# --- Completion and inspection ---

def test_all_done(task_queue: TaskQueue):
    assert task_queue.all_done() is True

    first = task_queue.add({"description": "a", "task_type": "x"})
    second = task_queue.add({"description": "b", "task_type": "x"})
    assert task_queue.all_done() is False

    _finish(task_queue, first.task_id)
    assert task_queue.all_done() is False
    task_queue.transition(second.task_id, TaskStatus.FAILED)
    assert task_queue.all_done() is True

def test_snapshots_are_isolated(task_queue: TaskQueue):
    task = task_queue.add({"description": "a", "task_type": "x", "context": {"files": ["a.py"]}})
    task.context["files"].append("b.py")
    task.status = TaskStatus.COMPLETED

    stored = task_queue.get(task.task_id)
    assert stored.context == {"files": ["a.py"]}
    assert stored.status == TaskStatus.PENDING

def test_by_status_and_overview(task_queue: TaskQueue):
    first = task_queue.add({"description": "a", "task_type": "x"})
    task_queue.add({"description": "b", "task_type": "x"})
    _finish(task_queue, first.task_id)

    assert [t.task_id for t in task_queue.by_status(TaskStatus.COMPLETED)] == [first.task_id]
    overview = task_queue.status_overview()
    assert overview["counts"] == {
        "pending": 1, "assigned": 0, "active": 0, "blocked": 0, "completed": 1, "failed": 0,
    }
    assert overview["tasks"][0]["status"] == "completed"
    assert first.task_id in task_queue
    assert len(task_queue.all()) == 2
