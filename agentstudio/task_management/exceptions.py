# file: agentstudio/agentstudio/task_management/exceptions.py
from .task import TaskStatus

class TaskManagementError(Exception):
    """Base exception class for task management errors."""
    pass

class UnknownTaskError(TaskManagementError, KeyError):
    """Raised when a task id does not exist in the queue."""
    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(f"Unknown task: {task_id}")

    def __str__(self) -> str:
        return self.args[0]

class InvalidTransitionError(TaskManagementError):
    """Raised when a caller requests a status change the transition table does not allow."""
    def __init__(self, task_id: str, from_status: TaskStatus, to_status: TaskStatus):
        self.task_id = task_id
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(f"Invalid transition for task '{task_id}': {from_status.value} -> {to_status.value}")

class PlanDefinitionError(TaskManagementError, ValueError):
    """Raised when a structured plan cannot be turned into task definitions."""
    pass
