# file: agentstudio/agentstudio/task_management/schemas/plan_definition.py
"""
Defines the Pydantic schema a planning task's result must follow for its
sub-tasks to be admitted to the queue.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

class PlanTaskDefinitionSchema(BaseModel):
    """
    One sub-task in a plan. Dependencies refer to other entries of the same
    plan by name; they are hydrated into queue ids on admission.
    """
    name: str = Field(..., min_length=1, description="Unique name of this task within the plan.")
    description: str = Field(..., description="What the task entails.")
    task_type: str = Field(default="implement", min_length=1, description="Routing tag, e.g. 'implement', 'design', 'test'.")
    assign_to_role: Optional[str] = Field(default=None, description="The role that should take this task.")
    depends_on: List[str] = Field(default_factory=list, description="Names of other tasks in this plan that must complete first.")
    priority: int = Field(default=0, description="Higher is scheduled sooner.")
    context: Dict[str, Any] = Field(default_factory=dict, description="Extra payload for the worker.")

    @field_validator("depends_on")
    @classmethod
    def _unique(cls, value: List[str]) -> List[str]:
        return list(dict.fromkeys(value))

class PlanDefinitionSchema(BaseModel):
    """The structured output of a planning task."""
    overall_goal: Optional[str] = Field(default=None, description="The goal this plan decomposes.")
    tasks: List[PlanTaskDefinitionSchema] = Field(..., description="The sub-tasks of the plan.")

    @model_validator(mode="after")
    def _unique_names(self) -> "PlanDefinitionSchema":
        names = [t.name for t in self.tasks]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Task names must be unique within a plan; duplicated: {duplicates}")
        return self
