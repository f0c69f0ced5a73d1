# file: agentstudio/tests/unit_tests/test_studio_facade.py
import logging

import pytest

from agentstudio import ManualTickScheduler, OrchestratorStatus, Studio, StudioConfig
from agentstudio.studio import DEFAULT_ROLES

def test_create_spawns_default_crew():
    studio = Studio.create()
    assert [a.role for a in studio.agent_pool.all()] == list(DEFAULT_ROLES)
    assert len(studio.timeline) == len(DEFAULT_ROLES)
    assert studio.orchestrator.config is studio.config

def test_attach_console_log_is_reused():
    studio = Studio.create(roles=[])
    sink = studio.attach_console_log(level=logging.DEBUG)
    assert studio.attach_console_log() is sink

@pytest.mark.asyncio
async def test_start_with_goal_runs_first_tick():
    scheduler = ManualTickScheduler()
    studio = Studio.create(config=StudioConfig(tick_interval_seconds=0), roles=["architect"], scheduler=scheduler)

    await studio.start("Ship a landing page")

    [planning] = studio.orchestrator.tasks.all()
    assert planning.description == "Plan implementation for: Ship a landing page"
    assert planning.status.is_terminal()
    assert studio.orchestrator.status == OrchestratorStatus.STOPPED
