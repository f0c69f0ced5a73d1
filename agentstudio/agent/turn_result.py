# file: agentstudio/agentstudio/agent/turn_result.py
"""
The outcome of one worker turn, as a closed set of variants. Each variant
carries only the fields relevant to it.
"""
from dataclasses import dataclass, field
from typing import Any, Optional, Union

@dataclass(frozen=True)
class HelpRequest:
    """A blocked worker's request for another role to do something first."""
    target_role: str
    request: str

    def __post_init__(self):
        if not self.target_role:
            raise ValueError("HelpRequest requires a non-empty target_role.")

@dataclass(frozen=True)
class Completed:
    """The task is done."""
    result: Optional[Any] = None

@dataclass(frozen=True)
class Blocked:
    """The task cannot proceed until another role handles the help request."""
    help_request: HelpRequest

@dataclass(frozen=True)
class Errored:
    """The worker's own logic failed on this task."""
    result: Optional[Any] = None

@dataclass(frozen=True)
class Continue:
    """The worker needs more turns; the task stays active."""
    note: Optional[str] = field(default=None)

TurnResult = Union[Completed, Blocked, Errored, Continue]

TURN_RESULT_TYPES = (Completed, Blocked, Errored, Continue)
