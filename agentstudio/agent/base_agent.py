# file: agentstudio/agentstudio/agent/base_agent.py
import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

from agentstudio.events.event_types import EventType
from .agent_status import AgentStatus
from .turn_result import Errored, TurnResult

if TYPE_CHECKING:
    from agentstudio.events.event_bus import EventBus
    from agentstudio.task_management.task import Task

logger = logging.getLogger(__name__)

class BaseAgent(ABC):
    """
    Abstract base class for a studio worker.

    Subclasses implement _run_turn() to perform one unit of work on a task and
    report a TurnResult. How a turn decides what to do (e.g. calling a
    language model) is entirely up to the subclass.
    """

    def __init__(self, agent_id: str, role: str, event_bus: Optional['EventBus'] = None):
        if not agent_id:
            raise ValueError("An agent requires a non-empty agent_id.")
        if not role:
            raise ValueError("An agent requires a non-empty role.")
        self.agent_id = agent_id
        self.role = role
        self.status: AgentStatus = AgentStatus.IDLE
        self.current_task_id: Optional[str] = None
        self.event_bus: Optional['EventBus'] = event_bus

    def attach_event_bus(self, event_bus: 'EventBus') -> None:
        self.event_bus = event_bus

    def _emit(self, event_type: EventType, **data) -> None:
        if self.event_bus is not None:
            self.event_bus.emit(event_type, agent_id=self.agent_id, task_id=self.current_task_id, data=data)

    @property
    def is_idle(self) -> bool:
        return self.status == AgentStatus.IDLE

    async def execute_turn(self, task: 'Task') -> TurnResult:
        """
        Executes one turn of work on the task.

        An exception raised by _run_turn() is reported as an Errored result
        rather than propagated.
        """
        self.status = AgentStatus.THINKING
        self.current_task_id = task.task_id
        self._emit(EventType.AGENT_THINKING, task_id=task.task_id)
        try:
            result = await self._run_turn(task)
        except Exception as e:
            logger.error(f"Agent '{self.agent_id}' failed during turn on task '{task.task_id}': {e}", exc_info=True)
            self.status = AgentStatus.ERROR
            self._emit(EventType.AGENT_ERROR, error=str(e))
            return Errored(result={"error": str(e)})
        self.status = AgentStatus.IDLE
        return result

    @abstractmethod
    async def _run_turn(self, task: 'Task') -> TurnResult:
        raise NotImplementedError

    def _clear_context(self) -> None:
        """Hook for subclasses holding per-task state (e.g. conversation history)."""
        pass

    def reset_context(self) -> None:
        """Drops all per-task state so nothing leaks into the next task."""
        self._clear_context()
        self.status = AgentStatus.IDLE
        logger.debug(f"Agent '{self.agent_id}' context reset.")

    def release_task(self) -> None:
        """Forgets the current task. Called by the orchestrator after a terminal or blocked outcome."""
        self.current_task_id = None

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.agent_id!r} role={self.role!r} status={self.status.value}>"
