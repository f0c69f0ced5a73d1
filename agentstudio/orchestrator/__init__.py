# file: agentstudio/agentstudio/orchestrator/__init__.py
"""
The tick-driven control loop that pairs idle agents with ready tasks, drives
their turns and escalates blocked work.
"""
from .orchestrator_status import OrchestratorStatus
from .tick_scheduler import TickScheduler, AsyncioTickScheduler, ManualTickScheduler
from .orchestrator import Orchestrator, MAX_TURNS_EXCEEDED, TURN_TIMED_OUT

__all__ = [
    "OrchestratorStatus",
    "TickScheduler",
    "AsyncioTickScheduler",
    "ManualTickScheduler",
    "Orchestrator",
    "MAX_TURNS_EXCEEDED",
    "TURN_TIMED_OUT",
]
