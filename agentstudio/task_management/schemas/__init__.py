"""
Exposes the public schema models for the task management module.
"""
from .plan_definition import PlanDefinitionSchema, PlanTaskDefinitionSchema

__all__ = [
    "PlanDefinitionSchema",
    "PlanTaskDefinitionSchema",
]
