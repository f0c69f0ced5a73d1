# file: agentstudio/agentstudio/utils/id_generator.py
import itertools
import threading
from typing import Optional


class IdGenerator:
    """
    A monotonic id source owned by the component that issues the ids.

    Each TaskQueue and EventBus holds its own generator, so independent
    instances (e.g. in tests) never share a counter.
    """

    def __init__(self, prefix: Optional[str] = None, start: int = 1):
        if start < 0:
            raise ValueError("IdGenerator start must be non-negative.")
        self.prefix = prefix
        self._counter = itertools.count(start)
        self._lock = threading.Lock()
        self._last: Optional[int] = None

    def next_int(self) -> int:
        """Returns the next integer in the sequence."""
        with self._lock:
            value = next(self._counter)
            self._last = value
            return value

    def next_id(self) -> str:
        """Returns the next id, rendered as '<prefix>-<n>' when a prefix is set."""
        value = self.next_int()
        if self.prefix:
            return f"{self.prefix}-{value}"
        return str(value)

    @property
    def last_issued(self) -> Optional[int]:
        return self._last

    def __repr__(self) -> str:
        return f"<IdGenerator prefix={self.prefix!r} last_issued={self._last}>"
