# file: agentstudio/agentstudio/task_management/__init__.py
"""
This package defines the task model, its state machine and the in-memory
task queue that schedules tasks by dependency, role and priority, together
with the schema and hook used to turn a planning result into new tasks.
"""
from .task import Task, TaskDefinition, TaskStatus, VALID_TRANSITIONS
from .exceptions import TaskManagementError, UnknownTaskError, InvalidTransitionError, PlanDefinitionError
from .task_queue import TaskQueue, TaskSpec
from .schemas import PlanDefinitionSchema, PlanTaskDefinitionSchema
from .converters import PlanConverter
from .plan_ingestor import PlanIngestor, StructuredPlanIngestor, no_op_plan_ingestor

__all__ = [
    "Task",
    "TaskDefinition",
    "TaskStatus",
    "VALID_TRANSITIONS",
    "TaskManagementError",
    "UnknownTaskError",
    "InvalidTransitionError",
    "PlanDefinitionError",
    "TaskQueue",
    "TaskSpec",
    "PlanDefinitionSchema",
    "PlanTaskDefinitionSchema",
    "PlanConverter",
    "PlanIngestor",
    "StructuredPlanIngestor",
    "no_op_plan_ingestor",
]
