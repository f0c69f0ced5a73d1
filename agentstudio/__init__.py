# file: agentstudio/agentstudio/__init__.py
"""
agentstudio: the control plane of a multi-agent execution framework.
It decides which agent works on which task, when, and what happens when
work stalls, fails or spawns new work.
"""
from .config import StudioConfig
from .events import EventBus, EventType, StudioEvent, Timeline, EventLogSink
from .task_management import Task, TaskDefinition, TaskQueue, TaskStatus
from .agent import (AgentPool, BaseAgent, ScriptedAgent, HelpRequest,
                    Completed, Blocked, Errored, Continue, TurnResult)
from .orchestrator import Orchestrator, OrchestratorStatus, ManualTickScheduler, AsyncioTickScheduler
from .studio import Studio

__all__ = [
    "StudioConfig",
    "EventBus",
    "EventType",
    "StudioEvent",
    "Timeline",
    "EventLogSink",
    "Task",
    "TaskDefinition",
    "TaskQueue",
    "TaskStatus",
    "AgentPool",
    "BaseAgent",
    "ScriptedAgent",
    "HelpRequest",
    "Completed",
    "Blocked",
    "Errored",
    "Continue",
    "TurnResult",
    "Orchestrator",
    "OrchestratorStatus",
    "ManualTickScheduler",
    "AsyncioTickScheduler",
    "Studio",
]
