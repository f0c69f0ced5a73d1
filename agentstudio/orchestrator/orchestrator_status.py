# file: agentstudio/agentstudio/orchestrator/orchestrator_status.py
from enum import Enum

class OrchestratorStatus(str, Enum):
    """Run state of the orchestrator: stopped -> running <-> paused -> stopped."""
    STOPPED = "stopped"
    RUNNING = "running"
    PAUSED = "paused"

    def is_running(self) -> bool:
        return self == OrchestratorStatus.RUNNING

    def __str__(self) -> str:
        return self.value
