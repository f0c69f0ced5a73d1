# file: agentstudio/agentstudio/cli/studio_cli.py
import asyncio
import logging
from pathlib import Path
from typing import Optional, Tuple

import click

from agentstudio.config.config import StudioConfig
from agentstudio.studio import DEFAULT_ROLES, Studio
from agentstudio.task_management.plan_ingestor import StructuredPlanIngestor

logger = logging.getLogger(__name__)

def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

@click.group()
def cli():
    """Run and inspect agentstudio orchestration."""
    pass

@cli.command()
@click.option("--goal", required=True, help="High-level goal to decompose and execute.")
@click.option("--role", "roles", multiple=True, help="Agent role to spawn (repeatable). Defaults to the standard crew.")
@click.option("--tick-interval", type=float, default=None, help="Seconds between ticks.")
@click.option("--max-turns", type=int, default=None, help="Maximum turns per task.")
@click.option("--timeout", type=float, default=None, help="Give up after this many seconds.")
@click.option("--timeline-out", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Write the serialized event timeline to this file.")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def run(goal: str, roles: Tuple[str, ...], tick_interval: Optional[float], max_turns: Optional[int],
        timeout: Optional[float], timeline_out: Optional[Path], verbose: bool):
    """Run a studio of scripted agents until every task is done."""
    _configure_logging(verbose)
    config = StudioConfig.from_env(tick_interval_seconds=tick_interval, max_turns_per_task=max_turns)
    studio = Studio.create(config=config, roles=roles or DEFAULT_ROLES, plan_ingestor=StructuredPlanIngestor())
    studio.attach_console_log()

    try:
        asyncio.run(studio.run(goal, timeout=timeout))
    except asyncio.TimeoutError:
        raise click.ClickException(f"Studio did not finish within {timeout} seconds.")

    overview = studio.orchestrator.tasks.status_overview()
    click.echo(f"Status: {studio.orchestrator.status.value}")
    for status, count in overview["counts"].items():
        if count:
            click.echo(f"  {status}: {count}")

    if timeline_out is not None:
        timeline_out.write_text(studio.timeline.serialize(), encoding="utf-8")
        click.echo(f"Timeline with {len(studio.timeline)} events written to {timeline_out}")

def main():
    cli()

if __name__ == "__main__":  # pragma: no cover
    main()
