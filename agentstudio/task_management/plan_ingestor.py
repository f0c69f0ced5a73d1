# file: agentstudio/agentstudio/task_management/plan_ingestor.py
"""
The plan-ingestion hook: turns the result of a completed planning task into
follow-up tasks.
"""
import json
import logging
from typing import Any, Callable, List, Mapping, Optional

from pydantic import BaseModel, ValidationError

from .converters import PlanConverter
from .exceptions import PlanDefinitionError
from .schemas import PlanDefinitionSchema
from .task import Task, TaskDefinition

logger = logging.getLogger(__name__)

AddTask = Callable[[TaskDefinition], Task]
PlanIngestor = Callable[[Task, Any, AddTask], List[Task]]


def no_op_plan_ingestor(planning_task: Task, result: Any, add_task: AddTask) -> List[Task]:
    """The default hook: planning results are not parsed."""
    return []


class StructuredPlanIngestor:
    """
    Reads a PlanDefinitionSchema out of a planning result and admits its tasks.

    Accepted result shapes: a mapping or pydantic model with a 'tasks' list,
    the same nested under a 'plan' key, or a JSON string of either. A result
    without a plan yields no tasks; a malformed plan raises PlanDefinitionError.
    """
    def __init__(self, link_to_planning_task: bool = True):
        self.link_to_planning_task = link_to_planning_task

    @staticmethod
    def extract_plan(result: Any) -> Optional[PlanDefinitionSchema]:
        if isinstance(result, PlanDefinitionSchema):
            return result
        if isinstance(result, BaseModel):
            result = result.model_dump()
        if isinstance(result, str):
            try:
                result = json.loads(result)
            except json.JSONDecodeError:
                return None
        if not isinstance(result, Mapping):
            return None
        if "tasks" not in result and isinstance(result.get("plan"), (Mapping, str, BaseModel)):
            return StructuredPlanIngestor.extract_plan(result["plan"])
        if "tasks" not in result:
            return None
        try:
            return PlanDefinitionSchema.model_validate(dict(result))
        except ValidationError as e:
            raise PlanDefinitionError(f"Planning result does not match the plan schema: {e}") from e

    def __call__(self, planning_task: Task, result: Any, add_task: AddTask) -> List[Task]:
        plan = self.extract_plan(result)
        if plan is None:
            logger.debug(f"Planning task '{planning_task.task_id}' produced no structured plan.")
            return []
        extra_context = {"planned_by_task_id": planning_task.task_id} if self.link_to_planning_task else None
        return PlanConverter.admit(plan, add_task, extra_context=extra_context)
