# file: agentstudio/agentstudio/studio.py
import logging
from typing import Iterable, Optional

from agentstudio.agent.agent_pool import AgentFactory, AgentPool
from agentstudio.config.config import StudioConfig
from agentstudio.events.event_bus import EventBus
from agentstudio.events.log_sink import EventLogSink
from agentstudio.events.timeline import Timeline
from agentstudio.orchestrator.orchestrator import Orchestrator
from agentstudio.orchestrator.tick_scheduler import TickScheduler
from agentstudio.task_management.plan_ingestor import PlanIngestor

logger = logging.getLogger(__name__)

DEFAULT_ROLES = ("architect", "programmer", "designer", "tester")

class Studio:
    """
    Wires a complete studio: event bus, timeline, agent pool and orchestrator.

    Usage:
        studio = Studio.create(roles=["architect", "programmer"])
        await studio.start("Build a card game about food chains")
    """
    def __init__(self, event_bus: EventBus, timeline: Timeline, agent_pool: AgentPool,
                 orchestrator: Orchestrator, config: StudioConfig):
        self.event_bus = event_bus
        self.timeline = timeline
        self.agent_pool = agent_pool
        self.orchestrator = orchestrator
        self.config = config
        self._log_sink: Optional[EventLogSink] = None

    @classmethod
    def create(cls,
               config: Optional[StudioConfig] = None,
               roles: Optional[Iterable[str]] = None,
               agent_factory: Optional[AgentFactory] = None,
               scheduler: Optional[TickScheduler] = None,
               plan_ingestor: Optional[PlanIngestor] = None) -> "Studio":
        config = config or StudioConfig()
        event_bus = EventBus()
        timeline = Timeline(event_bus)
        agent_pool = AgentPool(event_bus=event_bus, agent_factory=agent_factory)
        agent_pool.spawn_crew(DEFAULT_ROLES if roles is None else roles)
        orchestrator = Orchestrator(agent_pool, event_bus, config=config,
                                    scheduler=scheduler, plan_ingestor=plan_ingestor)
        logger.info(f"Studio created with {len(agent_pool)} agent(s).")
        return cls(event_bus, timeline, agent_pool, orchestrator, config)

    def attach_console_log(self, level: int = logging.INFO) -> EventLogSink:
        if self._log_sink is None:
            self._log_sink = EventLogSink(self.event_bus, level=level)
        return self._log_sink

    async def start(self, goal: Optional[str] = None) -> None:
        """Sets the goal, if given, and starts the orchestration loop."""
        if goal:
            self.orchestrator.set_goal(goal)
        await self.orchestrator.start()

    async def run(self, goal: Optional[str] = None, timeout: Optional[float] = None) -> None:
        """Sets the goal, if given, and runs until the orchestrator pauses or stops."""
        if goal:
            self.orchestrator.set_goal(goal)
        await self.orchestrator.run_until_done(timeout=timeout)
