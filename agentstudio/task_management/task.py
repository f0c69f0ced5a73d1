# file: agentstudio/agentstudio/task_management/task.py
"""
Defines the Task model, its lifecycle states and the only legal transitions between them.
"""
import datetime
import logging
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)

class TaskStatus(str, Enum):
    """Enumerates the possible lifecycle states of a task in the TaskQueue."""
    PENDING = "pending"
    ASSIGNED = "assigned"
    ACTIVE = "active"
    BLOCKED = "blocked"
    COMPLETED = "completed"
    FAILED = "failed"

    def is_terminal(self) -> bool:
        """Returns True if the status is a final state."""
        return self in {TaskStatus.COMPLETED, TaskStatus.FAILED}

    def can_transition_to(self, target: "TaskStatus") -> bool:
        return TaskStatus(target) in VALID_TRANSITIONS[self]

    def __str__(self) -> str:
        return self.value

# Anything not listed here is an invalid transition.
VALID_TRANSITIONS: Mapping[TaskStatus, FrozenSet[TaskStatus]] = MappingProxyType({
    TaskStatus.PENDING: frozenset({TaskStatus.ASSIGNED, TaskStatus.FAILED}),
    TaskStatus.ASSIGNED: frozenset({TaskStatus.ACTIVE, TaskStatus.PENDING}),
    TaskStatus.ACTIVE: frozenset({TaskStatus.COMPLETED, TaskStatus.BLOCKED, TaskStatus.FAILED}),
    TaskStatus.BLOCKED: frozenset({TaskStatus.PENDING, TaskStatus.FAILED}),
    TaskStatus.COMPLETED: frozenset(),
    TaskStatus.FAILED: frozenset({TaskStatus.PENDING}),
})


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def _dedupe(ids: List[str]) -> List[str]:
    return list(dict.fromkeys(ids))


class TaskDefinition(BaseModel):
    """
    The admission fields of a task, as supplied by a caller of TaskQueue.add().
    Validated before any queue state is touched.
    """
    model_config = ConfigDict(extra="forbid")

    description: str = Field(default="", description="Human-readable description of the work.")
    task_type: str = Field(..., min_length=1, description="Free-form tag used for routing and metrics, e.g. 'plan_feature'.")
    assign_to_role: Optional[str] = Field(default=None, description="Only workers with this role may take the task. None means any role.")
    depends_on: List[str] = Field(default_factory=list, description="Ids of tasks that must be completed first.")
    context: Dict[str, Any] = Field(default_factory=dict, description="Opaque payload handed to the worker.")
    priority: int = Field(default=0, description="Higher is scheduled sooner.")

    @field_validator("depends_on")
    @classmethod
    def _unique_dependencies(cls, value: List[str]) -> List[str]:
        return _dedupe(value)


class Task(BaseModel):
    """
    A unit of schedulable work. Instances handed out by the TaskQueue are
    snapshots; only the queue mutates the tasks it owns.
    """
    task_id: str
    description: str = ""
    task_type: str
    assign_to_role: Optional[str] = None
    depends_on: List[str] = Field(default_factory=list)
    context: Dict[str, Any] = Field(default_factory=dict)
    priority: int = 0
    status: TaskStatus = TaskStatus.PENDING
    assigned_agent_id: Optional[str] = None
    result: Optional[Any] = None
    created_at: datetime.datetime = Field(default_factory=_utcnow)
    completed_at: Optional[datetime.datetime] = None
    sequence: int = Field(default=0, description="Insertion order within the owning queue; the scheduling tie-breaker.")

    @classmethod
    def from_definition(cls, definition: TaskDefinition, task_id: str, sequence: int) -> "Task":
        return cls(task_id=task_id, sequence=sequence, **definition.model_dump())

    def is_eligible_for(self, role: Optional[str]) -> bool:
        """True if the role constraint is absent or equal to the given role."""
        return self.assign_to_role is None or self.assign_to_role == role

    def snapshot(self) -> "Task":
        return self.model_copy(deep=True)

    def model_post_init(self, __context: Any) -> None:
        logger.debug(f"Task created: ID='{self.task_id}', Type='{self.task_type}', Role='{self.assign_to_role}'")
