# file: agentstudio/agentstudio/orchestrator/orchestrator.py
"""
The orchestrator drives a studio run. Each tick it:
  1. matches idle agents with the highest-priority ready task for their role,
  2. drives another turn for agents still holding an active task,
  3. enforces the per-task turn budget,
  4. turns a blocked outcome into a prioritized help task for another role,
  5. stops once every task is completed or failed.
"""
import asyncio
import logging
from typing import Any, Dict, Iterable, List, Optional

from agentstudio.agent.agent_pool import AgentPool
from agentstudio.agent.base_agent import BaseAgent
from agentstudio.agent.turn_result import Blocked, Completed, Continue, Errored, HelpRequest, TurnResult
from agentstudio.config.config import StudioConfig
from agentstudio.events.event_bus import EventBus
from agentstudio.events.event_types import EventType
from agentstudio.task_management.plan_ingestor import PlanIngestor
from agentstudio.task_management.task import Task, TaskDefinition, TaskStatus
from agentstudio.task_management.task_queue import TaskQueue, TaskSpec
from .orchestrator_status import OrchestratorStatus
from .tick_scheduler import AsyncioTickScheduler, TickScheduler

logger = logging.getLogger(__name__)

MAX_TURNS_EXCEEDED = "Max turns exceeded"
TURN_TIMED_OUT = "Turn timed out"


class Orchestrator:
    """
    Single-threaded, cooperative scheduler for one task queue and one agent pool.

    Workers are processed strictly one after another and every turn is awaited
    before the next worker is considered, so the task queue is never mutated
    concurrently. Parallelism means running several orchestrators over
    disjoint task sets, not parallelizing one loop.
    """

    def __init__(self,
                 agent_pool: AgentPool,
                 event_bus: EventBus,
                 config: Optional[StudioConfig] = None,
                 task_queue: Optional[TaskQueue] = None,
                 scheduler: Optional[TickScheduler] = None,
                 plan_ingestor: Optional[PlanIngestor] = None):
        self._pool = agent_pool
        self._event_bus = event_bus
        self._config = config or StudioConfig()
        self._task_queue = task_queue or TaskQueue()
        self._scheduler = scheduler or AsyncioTickScheduler()
        self._plan_ingestor = plan_ingestor
        self._status = OrchestratorStatus.STOPPED
        self._turns_per_task: Dict[str, int] = {}
        self._tick_task: Optional[asyncio.Task] = None
        self._tick_idle = asyncio.Event()
        self._tick_idle.set()
        self._halted = asyncio.Event()
        self._stall_reported = False
        self.tick_count = 0
        logger.info(f"Orchestrator initialized (tick interval {self._config.tick_interval_seconds}s, "
                    f"max {self._config.max_turns_per_task} turns per task).")

    # --- Accessors ---

    @property
    def tasks(self) -> TaskQueue:
        return self._task_queue

    @property
    def status(self) -> OrchestratorStatus:
        return self._status

    @property
    def config(self) -> StudioConfig:
        return self._config

    def turns_used(self, task_id: str) -> int:
        return self._turns_per_task.get(task_id, 0)

    # --- Goal intake and admission ---

    def set_goal(self, goal: str) -> Task:
        """
        Publishes the goal and seeds the queue with one top-priority planning
        task for the planning role.
        """
        if not goal or not goal.strip():
            raise ValueError("A goal description must be a non-empty string.")
        self._event_bus.emit(EventType.STUDIO_GOAL_SET, data={"goal": goal})
        task = self.add_task(TaskDefinition(
            description=f"Plan implementation for: {goal}",
            task_type=self._config.planning_task_types[0] if self._config.planning_task_types else "plan_feature",
            assign_to_role=self._config.planning_role,
            priority=self._config.planning_priority,
            context={"goal": goal},
        ))
        logger.info(f"Goal set: '{goal}'. Planning task '{task.task_id}' created for role '{self._config.planning_role}'.")
        return task

    def add_task(self, spec: TaskSpec) -> Task:
        task = self._task_queue.add(spec)
        self._publish_task_created(task)
        return task

    def add_plan(self, specs: Iterable[TaskSpec]) -> List[Task]:
        created = self._task_queue.add_plan(specs)
        for task in created:
            self._publish_task_created(task)
        return created

    def _publish_task_created(self, task: Task) -> None:
        self._stall_reported = False
        self._event_bus.emit(EventType.TASK_CREATED, task_id=task.task_id, data={
            "description": task.description,
            "task_type": task.task_type,
            "assign_to_role": task.assign_to_role,
            "priority": task.priority,
            "depends_on": list(task.depends_on),
        })

    # --- Run control ---

    async def start(self) -> None:
        """Starts the loop and runs the first tick. No-op if already running."""
        if self._status == OrchestratorStatus.RUNNING:
            logger.debug("Orchestrator.start() called while already running.")
            return
        self._status = OrchestratorStatus.RUNNING
        self._halted.clear()
        logger.info("Orchestrator started.")
        self._event_bus.emit(EventType.STUDIO_STARTED)
        await self.tick()

    async def pause(self) -> None:
        """Cancels the next tick and keeps all task and agent state for a later start()."""
        if self._status != OrchestratorStatus.RUNNING:
            return
        await self._halt(OrchestratorStatus.PAUSED)
        logger.info("Orchestrator paused.")
        self._event_bus.emit(EventType.STUDIO_PAUSED)

    async def stop(self) -> None:
        """Terminal exit, used on completion or abort."""
        if self._status == OrchestratorStatus.STOPPED:
            return
        await self._halt(OrchestratorStatus.STOPPED)
        logger.info("Orchestrator stopped.")
        self._event_bus.emit(EventType.STUDIO_STOPPED)

    async def _halt(self, new_status: OrchestratorStatus) -> None:
        self._status = new_status
        self._scheduler.cancel()
        self._halted.set()
        # Wait out a tick that is in flight on another task; it will not reschedule.
        if self._tick_task is not None and self._tick_task is not asyncio.current_task():
            await self._tick_idle.wait()

    async def run_until_done(self, timeout: Optional[float] = None) -> OrchestratorStatus:
        """Starts the loop and waits until it is paused or stopped."""
        await self.start()
        await asyncio.wait_for(self._halted.wait(), timeout=timeout)
        return self._status

    def _schedule_next_tick(self) -> None:
        if self._status != OrchestratorStatus.RUNNING:
            return
        self._scheduler.schedule(self._config.tick_interval_seconds, self.tick)

    # --- Tick ---

    async def tick(self) -> None:
        """
        Runs one scheduling pass. An unexpected error is logged and the next
        tick is scheduled anyway.
        """
        if self._status != OrchestratorStatus.RUNNING:
            return
        self.tick_count += 1
        self._tick_task = asyncio.current_task()
        self._tick_idle.clear()
        try:
            try:
                await self._assign_and_drive()
                if self._task_queue.all_done():
                    logger.info(f"All {len(self._task_queue)} task(s) are done after tick {self.tick_count}.")
                    await self.stop()
                    return
                self._report_stall()
            except Exception as e:
                logger.error(f"Orchestrator tick error: {e}", exc_info=True)
            self._schedule_next_tick()
        finally:
            self._tick_task = None
            self._tick_idle.set()

    async def _assign_and_drive(self) -> None:
        for agent in self._pool.idle():
            if self._status != OrchestratorStatus.RUNNING:
                return
            if self._active_task_of(agent) is not None:
                continue
            task = self._task_queue.next_for(agent.role)
            if task is None:
                continue

            self._task_queue.transition(task.task_id, TaskStatus.ASSIGNED, agent_id=agent.agent_id)
            task = self._task_queue.transition(task.task_id, TaskStatus.ACTIVE)
            self._turns_per_task[task.task_id] = 0
            agent.current_task_id = task.task_id
            logger.info(f"Task '{task.task_id}' assigned to agent '{agent.agent_id}' ({agent.role}).")
            self._event_bus.emit(EventType.TASK_ASSIGNED, agent_id=agent.agent_id, task_id=task.task_id,
                                 data={"description": task.description})
            self._event_bus.emit(EventType.TASK_IN_PROGRESS, agent_id=agent.agent_id, task_id=task.task_id)

            await self._execute_agent_turn(agent, task)

        # Any agent idle again with an active task gets another turn, including one assigned above.
        for agent in self._pool.all():
            if self._status != OrchestratorStatus.RUNNING:
                return
            if not agent.is_idle:
                continue
            task = self._active_task_of(agent)
            if task is not None:
                await self._execute_agent_turn(agent, task)

    def _active_task_of(self, agent: BaseAgent) -> Optional[Task]:
        if not agent.current_task_id:
            return None
        task = self._task_queue.find(agent.current_task_id)
        if task is None or task.status != TaskStatus.ACTIVE or task.assigned_agent_id != agent.agent_id:
            return None
        return task

    def _report_stall(self) -> None:
        """Logs once when nothing is active and no agent can pick up a ready task."""
        if self._task_queue.by_status(TaskStatus.ACTIVE) or self._task_queue.by_status(TaskStatus.ASSIGNED):
            self._stall_reported = False
            return
        roles = {agent.role for agent in self._pool.all()}
        if any(self._task_queue.next_for(role) for role in roles):
            self._stall_reported = False
            return
        if not self._stall_reported:
            waiting = [t.task_id for t in self._task_queue.all() if not t.status.is_terminal()]
            logger.warning(f"No progress possible: no agent can take any of the unfinished tasks {waiting}.")
            self._stall_reported = True

    # --- Turn execution ---

    async def _execute_agent_turn(self, agent: BaseAgent, task: Task) -> None:
        turn_count = self._turns_per_task.get(task.task_id, 0) + 1
        self._turns_per_task[task.task_id] = turn_count

        max_turns = self._config.max_turns_per_task
        if turn_count > max_turns:
            logger.warning(f"Task '{task.task_id}' exceeded {max_turns} turns; failing it.")
            self._fail_task(agent, task, {"reason": MAX_TURNS_EXCEEDED, "turns": max_turns})
            return

        outcome = await self._run_turn(agent, task)

        if isinstance(outcome, Completed):
            completed = self._task_queue.transition(task.task_id, TaskStatus.COMPLETED, result=outcome.result)
            self._release(agent)
            logger.info(f"Task '{task.task_id}' completed by agent '{agent.agent_id}'.")
            self._event_bus.emit(EventType.TASK_COMPLETED, agent_id=agent.agent_id, task_id=task.task_id,
                                 data={"result": outcome.result})
            self._on_task_completed(completed, outcome.result)
        elif isinstance(outcome, Blocked):
            self._task_queue.transition(task.task_id, TaskStatus.BLOCKED)
            self._release(agent)
            logger.info(f"Task '{task.task_id}' blocked; agent '{agent.agent_id}' requests help from "
                        f"'{outcome.help_request.target_role}'.")
            self._event_bus.emit(EventType.TASK_BLOCKED, agent_id=agent.agent_id, task_id=task.task_id,
                                 data={"target_role": outcome.help_request.target_role,
                                       "request": outcome.help_request.request})
            self._handle_help_request(task, outcome.help_request, agent)
        elif isinstance(outcome, Errored):
            self._fail_task(agent, task, outcome.result)
        elif isinstance(outcome, Continue):
            logger.debug(f"Agent '{agent.agent_id}' needs more turns on task '{task.task_id}' "
                         f"({turn_count}/{max_turns}).")
        else:
            logger.error(f"Agent '{agent.agent_id}' returned an unrecognized turn result: {outcome!r}")
            self._fail_task(agent, task, {"reason": f"Unrecognized turn result: {type(outcome).__name__}"})

    async def _run_turn(self, agent: BaseAgent, task: Task) -> TurnResult:
        timeout = self._config.turn_timeout_seconds
        if timeout is None:
            return await agent.execute_turn(task)
        try:
            return await asyncio.wait_for(agent.execute_turn(task), timeout=timeout)
        except asyncio.TimeoutError:
            logger.error(f"Agent '{agent.agent_id}' turn on task '{task.task_id}' timed out after {timeout}s.")
            return Errored(result={"reason": TURN_TIMED_OUT, "timeout_seconds": timeout})

    def _release(self, agent: BaseAgent) -> None:
        agent.reset_context()
        agent.release_task()

    def _fail_task(self, agent: BaseAgent, task: Task, result: Any) -> None:
        self._task_queue.transition(task.task_id, TaskStatus.FAILED, result=result)
        self._release(agent)
        reason = result.get("reason") if isinstance(result, dict) else None
        logger.info(f"Task '{task.task_id}' failed on agent '{agent.agent_id}': {reason or result!r}")
        self._event_bus.emit(EventType.TASK_FAILED, agent_id=agent.agent_id, task_id=task.task_id,
                             data={"reason": reason, "result": result})
        self._on_help_task_finished(task, succeeded=False)

    # --- Outcome follow-ups ---

    def _on_task_completed(self, task: Task, result: Any) -> None:
        if self._config.is_planning_task_type(task.task_type):
            self._handle_planning_output(task, result)
        self._on_help_task_finished(task, succeeded=True)

    def _handle_planning_output(self, task: Task, result: Any) -> None:
        """
        Hands a completed planning task's result to the plan ingestor.
        Without an ingestor, planning results are not parsed.
        """
        if self._plan_ingestor is None:
            return
        created = self._plan_ingestor(task, result, self.add_task)
        if created:
            logger.info(f"Planning task '{task.task_id}' produced {len(created)} task(s): "
                        f"{[t.task_id for t in created]}")

    def _handle_help_request(self, blocked_task: Task, help_request: HelpRequest, agent: BaseAgent) -> Task:
        """Creates a help task for the requested role, ahead of the blocked task's priority."""
        requested_by = blocked_task.assigned_agent_id or agent.agent_id
        new_task = self.add_task(TaskDefinition(
            description=help_request.request,
            task_type=self._config.assist_task_type,
            assign_to_role=help_request.target_role,
            priority=blocked_task.priority + self._config.escalation_priority_bonus,
            context={
                "requested_by": requested_by,
                "blocked_task_id": blocked_task.task_id,
            },
        ))
        self._event_bus.emit(EventType.REQUEST_CREATED, agent_id=requested_by, task_id=new_task.task_id, data={
            "target_role": help_request.target_role,
            "request": help_request.request,
            "blocked_task_id": blocked_task.task_id,
        })
        return new_task

    def _on_help_task_finished(self, task: Task, succeeded: bool) -> None:
        """
        When a help task ends, re-arms the task that was waiting on it (or fails
        it if the help task failed).
        """
        if not self._config.resume_blocked_on_assist or task.task_type != self._config.assist_task_type:
            return
        blocked_task_id = task.context.get("blocked_task_id")
        blocked = self._task_queue.find(blocked_task_id) if blocked_task_id else None
        if blocked is None or blocked.status != TaskStatus.BLOCKED:
            return
        if succeeded:
            self._task_queue.transition(blocked.task_id, TaskStatus.PENDING)
            logger.info(f"Help task '{task.task_id}' completed; task '{blocked.task_id}' is pending again.")
            self._event_bus.emit(EventType.REQUEST_FULFILLED, task_id=blocked.task_id,
                                 data={"help_task_id": task.task_id})
        else:
            self._task_queue.transition(blocked.task_id, TaskStatus.FAILED,
                                        result={"reason": "Help request failed", "help_task_id": task.task_id})
            logger.info(f"Help task '{task.task_id}' failed; task '{blocked.task_id}' failed with it.")
            self._event_bus.emit(EventType.TASK_FAILED, task_id=blocked.task_id,
                                 data={"reason": "Help request failed", "help_task_id": task.task_id})
