# file: agentstudio/agentstudio/agent/agent_pool.py
import logging
from typing import Callable, Dict, Iterable, List, Optional, TYPE_CHECKING

from agentstudio.events.event_types import EventType
from .base_agent import BaseAgent
from .exceptions import UnknownAgentError
from .scripted_agent import ScriptedAgent

if TYPE_CHECKING:
    from agentstudio.events.event_bus import EventBus

logger = logging.getLogger(__name__)

AgentFactory = Callable[[str, str], BaseAgent]

def default_agent_factory(agent_id: str, role: str) -> BaseAgent:
    return ScriptedAgent(agent_id=agent_id, role=role)

class AgentPool:
    """
    Tracks the studio's workers and answers the two questions the orchestrator
    asks every tick: which workers are idle, and which exist at all.
    Spawning and removal policy belongs to the caller.
    """
    def __init__(self, event_bus: Optional['EventBus'] = None, agent_factory: Optional[AgentFactory] = None):
        self._agents: Dict[str, BaseAgent] = {}
        self._event_bus = event_bus
        self._agent_factory = agent_factory or default_agent_factory
        self._spawned_per_role: Dict[str, int] = {}

    def add(self, agent: BaseAgent) -> BaseAgent:
        """Registers an existing agent and attaches the pool's event bus to it."""
        if agent.agent_id in self._agents:
            raise ValueError(f"An agent with id '{agent.agent_id}' is already in the pool.")
        if self._event_bus is not None and agent.event_bus is None:
            agent.attach_event_bus(self._event_bus)
        self._agents[agent.agent_id] = agent
        logger.info(f"Agent '{agent.agent_id}' with role '{agent.role}' added to pool.")
        if self._event_bus is not None:
            self._event_bus.emit(EventType.AGENT_SPAWNED, agent_id=agent.agent_id, data={"role": agent.role})
        return agent

    def spawn(self, role: str, agent_id: Optional[str] = None) -> BaseAgent:
        """Creates an agent for the role through the pool's factory. Ids default to '<role>-<n>'."""
        if agent_id is None:
            count = self._spawned_per_role.get(role, 0)
            while True:
                count += 1
                agent_id = f"{role}-{count}"
                if agent_id not in self._agents:
                    break
            self._spawned_per_role[role] = count
        return self.add(self._agent_factory(agent_id, role))

    def spawn_crew(self, roles: Iterable[str]) -> List[BaseAgent]:
        return [self.spawn(role) for role in roles]

    def remove(self, agent_id: str) -> BaseAgent:
        agent = self.get(agent_id)
        del self._agents[agent_id]
        logger.info(f"Agent '{agent_id}' removed from pool.")
        return agent

    def get(self, agent_id: str) -> BaseAgent:
        agent = self._agents.get(agent_id)
        if agent is None:
            raise UnknownAgentError(agent_id)
        return agent

    def by_role(self, role: str) -> List[BaseAgent]:
        return [a for a in self._agents.values() if a.role == role]

    def idle(self) -> List[BaseAgent]:
        return [a for a in self._agents.values() if a.is_idle]

    def all(self) -> List[BaseAgent]:
        return list(self._agents.values())

    def __len__(self) -> int:
        return len(self._agents)
