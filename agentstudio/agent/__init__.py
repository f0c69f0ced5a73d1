# file: agentstudio/agentstudio/agent/__init__.py
"""
The worker side of the studio as seen by the orchestrator: the turn result
union, the agent base class, a scripted agent and the agent pool.
"""
from .turn_result import HelpRequest, Completed, Blocked, Errored, Continue, TurnResult
from .agent_status import AgentStatus
from .exceptions import UnknownAgentError
from .base_agent import BaseAgent
from .scripted_agent import ScriptedAgent
from .agent_pool import AgentPool, AgentFactory, default_agent_factory

__all__ = [
    "HelpRequest",
    "Completed",
    "Blocked",
    "Errored",
    "Continue",
    "TurnResult",
    "AgentStatus",
    "UnknownAgentError",
    "BaseAgent",
    "ScriptedAgent",
    "AgentPool",
    "AgentFactory",
    "default_agent_factory",
]
