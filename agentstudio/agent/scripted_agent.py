# file: agentstudio/agentstudio/agent/scripted_agent.py
"""
A deterministic agent that replays a predefined script of turn results.
Used for demos, the command line runner and tests, where no real model is involved.
"""
import inspect
import logging
from typing import TYPE_CHECKING, Any, Callable, Iterable, List, Optional, Union

from .base_agent import BaseAgent
from .turn_result import Completed, TurnResult, TURN_RESULT_TYPES

if TYPE_CHECKING:
    from agentstudio.events.event_bus import EventBus
    from agentstudio.task_management.task import Task

logger = logging.getLogger(__name__)

ScriptStep = Union[TurnResult, Callable[['Task'], Any]]

class ScriptedAgent(BaseAgent):
    """
    Plays back `script` one step per turn. A step is either a TurnResult or a
    callable taking the task and returning one (sync or async). Once the script
    is exhausted, every further turn completes the task with a short summary.
    """
    def __init__(self, agent_id: str, role: str,
                 script: Optional[Iterable[ScriptStep]] = None,
                 event_bus: Optional['EventBus'] = None):
        super().__init__(agent_id, role, event_bus=event_bus)
        self._script: List[ScriptStep] = list(script or [])
        self.turns_taken = 0
        self.history: List[str] = []
        self.context_resets = 0

    def extend_script(self, steps: Iterable[ScriptStep]) -> None:
        self._script.extend(steps)

    @property
    def remaining_steps(self) -> int:
        return len(self._script)

    async def _run_turn(self, task: 'Task') -> TurnResult:
        self.turns_taken += 1
        self.history.append(task.task_id)
        if not self._script:
            return Completed(result={"summary": f"{self.role} finished: {task.description}"})

        step = self._script.pop(0)
        if isinstance(step, TURN_RESULT_TYPES):
            return step
        if callable(step):
            outcome = step(task)
            if inspect.isawaitable(outcome):
                outcome = await outcome
            return outcome
        raise TypeError(f"Unsupported script step for agent '{self.agent_id}': {step!r}")

    def _clear_context(self) -> None:
        self.history.clear()
        self.context_resets += 1
