# file: agentstudio/agentstudio/task_management/task_queue.py
"""
An in-memory task queue with dependency tracking, role eligibility and
priority scheduling. It is the only owner of task mutation.
"""
import datetime
import logging
from collections import Counter
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from agentstudio.utils.id_generator import IdGenerator
from .exceptions import InvalidTransitionError, UnknownTaskError
from .task import Task, TaskDefinition, TaskStatus

logger = logging.getLogger(__name__)

TaskSpec = Union[TaskDefinition, Mapping[str, Any]]


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class TaskQueue:
    """
    A dictionary-based task set. Suitable for a single coordinating process;
    mutation is not locked, so callers must not mutate it concurrently.

    Every read accessor returns snapshots. Tasks are never removed; completed
    and failed tasks stay in the queue for inspection.
    """
    def __init__(self, id_generator: Optional[IdGenerator] = None):
        self._tasks: Dict[str, Task] = {}
        self._ids = id_generator or IdGenerator(prefix="task")
        self._sequence = 0
        logger.info("TaskQueue initialized.")

    # --- Admission ---

    @staticmethod
    def _to_definition(spec: TaskSpec) -> TaskDefinition:
        if isinstance(spec, TaskDefinition):
            return spec
        return TaskDefinition.model_validate(dict(spec))

    def _admit(self, definition: TaskDefinition) -> Task:
        self._sequence += 1
        task = Task.from_definition(definition, task_id=self._ids.next_id(), sequence=self._sequence)
        self._tasks[task.task_id] = task
        logger.info(f"Task '{task.task_id}' ({task.task_type}) added with priority {task.priority}"
                    f"{f' for role {task.assign_to_role!r}' if task.assign_to_role else ''}.")
        return task.snapshot()

    def add(self, spec: TaskSpec) -> Task:
        """
        Admits a new task in the PENDING state.

        Args:
            spec: A TaskDefinition, or a mapping that validates into one.

        Returns:
            A snapshot of the created task, including its assigned id.
        """
        return self._admit(self._to_definition(spec))

    def add_plan(self, specs: Iterable[TaskSpec]) -> List[Task]:
        """
        Admits several tasks, preserving input order. All definitions are
        validated before the first one is admitted.
        """
        definitions = [self._to_definition(spec) for spec in specs]
        created = [self._admit(definition) for definition in definitions]
        logger.info(f"Added plan of {len(created)} task(s): {[t.task_id for t in created]}")
        return created

    # --- Scheduling ---

    def _dependencies_met(self, task: Task) -> bool:
        for dep_id in task.depends_on:
            dependency = self._tasks.get(dep_id)
            # A dangling reference is simply never satisfied.
            if dependency is None or dependency.status != TaskStatus.COMPLETED:
                return False
        return True

    def _ready(self, role: Optional[str], filter_role: bool) -> List[Task]:
        candidates = [
            task for task in self._tasks.values()
            if task.status == TaskStatus.PENDING
            and (not filter_role or task.is_eligible_for(role))
            and self._dependencies_met(task)
        ]
        candidates.sort(key=lambda t: (-t.priority, t.sequence))
        return candidates

    def ready_tasks(self, role: Optional[str] = None) -> List[Task]:
        """
        Returns every ready task in scheduling order (highest priority first,
        then earliest created). When role is None, role constraints are ignored.
        """
        return [t.snapshot() for t in self._ready(role, filter_role=role is not None)]

    def next_for(self, role: str) -> Optional[Task]:
        """
        Selects the next task a worker with the given role should take, or None.

        A task qualifies when it is PENDING, its role constraint is absent or
        equal to `role`, and every dependency is COMPLETED. Among qualifying
        tasks the highest priority wins; ties go to the earliest created.
        Does not mutate any state.
        """
        candidates = self._ready(role, filter_role=True)
        if not candidates:
            logger.debug(f"No ready task for role '{role}'.")
            return None
        return candidates[0].snapshot()

    # --- State machine ---

    def transition(self, task_id: str, new_status: TaskStatus,
                   agent_id: Optional[str] = None,
                   result: Optional[Any] = None) -> Task:
        """
        Moves a task to a new status after validating the transition.

        Args:
            task_id: The task to transition.
            new_status: The destination status.
            agent_id: Recorded as the assigned agent on entry to ASSIGNED.
            result: Recorded as the result on entry to COMPLETED or FAILED. Entry to
                    PENDING clears both the assigned agent and any earlier result.

        Returns:
            A snapshot of the updated task.

        Raises:
            UnknownTaskError: If the task does not exist.
            InvalidTransitionError: If the transition is not allowed. The task is left unchanged.
        """
        task = self._get_owned(task_id)
        new_status = TaskStatus(new_status)
        old_status = task.status
        if not old_status.can_transition_to(new_status):
            logger.error(f"Rejected transition for task '{task_id}': {old_status.value} -> {new_status.value}.")
            raise InvalidTransitionError(task_id, old_status, new_status)

        task.status = new_status
        if new_status == TaskStatus.ASSIGNED:
            task.assigned_agent_id = agent_id
        elif new_status == TaskStatus.PENDING:
            # A re-armed task starts over; nothing from the previous attempt carries forward.
            task.assigned_agent_id = None
            task.result = None
        if new_status in (TaskStatus.COMPLETED, TaskStatus.FAILED) and result is not None:
            task.result = result
        task.completed_at = _utcnow() if new_status == TaskStatus.COMPLETED else None

        logger.info(f"Status of task '{task_id}' updated from '{old_status.value}' to '{new_status.value}'"
                    f"{f' (agent {task.assigned_agent_id!r})' if task.assigned_agent_id else ''}.")
        return task.snapshot()

    def all_done(self) -> bool:
        """True when every task is COMPLETED or FAILED. An empty queue is done."""
        return all(task.status.is_terminal() for task in self._tasks.values())

    # --- Read accessors ---

    def _get_owned(self, task_id: str) -> Task:
        task = self._tasks.get(task_id)
        if task is None:
            raise UnknownTaskError(task_id)
        return task

    def get(self, task_id: str) -> Task:
        """Returns a snapshot of the task. Raises UnknownTaskError if it does not exist."""
        return self._get_owned(task_id).snapshot()

    def find(self, task_id: str) -> Optional[Task]:
        """Like get(), but returns None for an unknown id."""
        task = self._tasks.get(task_id)
        return task.snapshot() if task else None

    def all(self) -> List[Task]:
        return [task.snapshot() for task in self._tasks.values()]

    def by_status(self, status: TaskStatus) -> List[Task]:
        status = TaskStatus(status)
        return [task.snapshot() for task in self._tasks.values() if task.status == status]

    def status_overview(self) -> Dict[str, Any]:
        """
        Returns a serializable dictionary of the queue's current state.
        """
        counts = Counter(task.status.value for task in self._tasks.values())
        return {
            "counts": {status.value: counts.get(status.value, 0) for status in TaskStatus},
            "tasks": [task.model_dump(mode="json") for task in self._tasks.values()],
        }

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._tasks
