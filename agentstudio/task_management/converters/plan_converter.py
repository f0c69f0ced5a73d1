# file: agentstudio/agentstudio/task_management/converters/plan_converter.py
"""
Contains the converter that turns a structured plan into queue-ready task
definitions, admitting them in dependency order so name references can be
hydrated into real task ids.
"""
import logging
from typing import Callable, Dict, List

from agentstudio.task_management.exceptions import PlanDefinitionError
from agentstudio.task_management.schemas import PlanDefinitionSchema, PlanTaskDefinitionSchema
from agentstudio.task_management.task import Task, TaskDefinition

logger = logging.getLogger(__name__)

class PlanConverter:
    """Admits the tasks of a PlanDefinitionSchema through a caller-supplied add function."""

    @staticmethod
    def order_by_dependencies(plan: PlanDefinitionSchema) -> List[PlanTaskDefinitionSchema]:
        """
        Returns the plan's tasks so that every task follows the tasks it depends on,
        otherwise keeping the plan's own order. Unknown dependency names are ignored here.

        Raises:
            PlanDefinitionError: If the plan's dependencies form a cycle.
        """
        by_name = {t.name: t for t in plan.tasks}
        ordered: List[PlanTaskDefinitionSchema] = []
        placed = set()
        remaining = list(plan.tasks)
        while remaining:
            progressed = False
            for task_def in list(remaining):
                known_deps = [d for d in task_def.depends_on if d in by_name]
                if all(d in placed for d in known_deps):
                    ordered.append(task_def)
                    placed.add(task_def.name)
                    remaining.remove(task_def)
                    progressed = True
                    break
            if not progressed:
                raise PlanDefinitionError(
                    f"Plan dependencies form a cycle among: {[t.name for t in remaining]}")
        return ordered

    @staticmethod
    def admit(plan: PlanDefinitionSchema, add_task: Callable[[TaskDefinition], Task],
              extra_context: Dict = None) -> List[Task]:
        """
        Converts and admits every task of the plan.

        Args:
            plan: The validated plan.
            add_task: Admits one TaskDefinition and returns the created Task.
            extra_context: Merged under each task's own context (task values win).

        Returns:
            The created tasks, in admission order.
        """
        ordered = PlanConverter.order_by_dependencies(plan)
        name_to_id: Dict[str, str] = {}
        created: List[Task] = []
        for task_def in ordered:
            depends_on = []
            for dep_name in task_def.depends_on:
                if dep_name in name_to_id:
                    depends_on.append(name_to_id[dep_name])
                else:
                    logger.warning(f"Plan task '{task_def.name}' depends on unknown task '{dep_name}'; dependency dropped.")
            context = {**(extra_context or {}), **task_def.context, "plan_task_name": task_def.name}
            task = add_task(TaskDefinition(
                description=task_def.description,
                task_type=task_def.task_type,
                assign_to_role=task_def.assign_to_role,
                depends_on=depends_on,
                context=context,
                priority=task_def.priority,
            ))
            name_to_id[task_def.name] = task.task_id
            created.append(task)
        logger.info(f"Admitted {len(created)} task(s) from plan for goal '{plan.overall_goal}'.")
        return created
