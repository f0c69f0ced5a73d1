# file: agentstudio/agentstudio/config/config.py
import logging
import os
from dataclasses import dataclass, fields, replace
from typing import Any, Optional, Tuple

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

ENV_PREFIX = "AGENTSTUDIO_"


def _env_float(name: str) -> Optional[float]:
    raw = os.getenv(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return None
    return float(raw)


def _env_int(name: str) -> Optional[int]:
    raw = os.getenv(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return None
    return int(raw)


@dataclass(frozen=True)
class StudioConfig:
    """
    Static configuration for a studio run: tick pacing, turn budget and
    escalation policy. The orchestrator reads these values and does not
    validate anything beyond what __post_init__ enforces.
    """
    tick_interval_seconds: float = 2.0
    max_turns_per_task: int = 20
    escalation_priority_bonus: int = 10
    planning_role: str = "architect"
    planning_priority: int = 100
    planning_task_types: Tuple[str, ...] = ("plan_feature",)
    turn_timeout_seconds: Optional[float] = None
    resume_blocked_on_assist: bool = False
    assist_task_type: str = "assist"

    def __post_init__(self):
        if self.tick_interval_seconds < 0:
            raise ValueError("The 'tick_interval_seconds' in StudioConfig must not be negative.")
        if self.max_turns_per_task < 1:
            raise ValueError("The 'max_turns_per_task' in StudioConfig must be at least 1.")
        if not self.planning_role or not isinstance(self.planning_role, str):
            raise ValueError("The 'planning_role' in StudioConfig must be a non-empty string.")
        if self.turn_timeout_seconds is not None and self.turn_timeout_seconds <= 0:
            raise ValueError("The 'turn_timeout_seconds' in StudioConfig must be positive when set.")
        # Accept any iterable of type names but store an immutable tuple.
        object.__setattr__(self, "planning_task_types", tuple(self.planning_task_types))
        logger.debug(f"StudioConfig validated: {self}")

    def is_planning_task_type(self, task_type: str) -> bool:
        return task_type in self.planning_task_types

    def with_overrides(self, **overrides: Any) -> "StudioConfig":
        """Returns a copy with the given non-None fields replaced."""
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise TypeError(f"Unknown StudioConfig field(s): {sorted(unknown)}")
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    @classmethod
    def from_env(cls, **overrides: Any) -> "StudioConfig":
        """
        Builds a config from AGENTSTUDIO_* environment variables (a .env file is
        loaded first), then applies explicit keyword overrides.
        """
        load_dotenv()
        env_values = {
            "tick_interval_seconds": _env_float("TICK_INTERVAL"),
            "max_turns_per_task": _env_int("MAX_TURNS_PER_TASK"),
            "escalation_priority_bonus": _env_int("ESCALATION_BONUS"),
            "planning_role": os.getenv(ENV_PREFIX + "PLANNING_ROLE") or None,
            "turn_timeout_seconds": _env_float("TURN_TIMEOUT"),
        }
        return cls().with_overrides(**env_values).with_overrides(**overrides)


def load_config(**overrides: Any) -> StudioConfig:
    return StudioConfig.from_env(**overrides)
