from .plan_converter import PlanConverter

__all__ = [
    "PlanConverter",
]
