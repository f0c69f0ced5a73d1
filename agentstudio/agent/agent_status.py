# file: agentstudio/agentstudio/agent/agent_status.py
from enum import Enum

class AgentStatus(str, Enum):
    """Operational status of a worker, as seen by the pool and the orchestrator."""
    IDLE = "idle"
    THINKING = "thinking"
    BLOCKED = "blocked"
    ERROR = "error"

    def __str__(self) -> str:
        return self.value
