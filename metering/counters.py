"""
Process-wide request counters.

Each counter is guarded by its own lock so that increments to unrelated
counters never contend with one another.  Values only ever go up; the
registry has no reset and no decrement.
"""
from __future__ import annotations

import threading
from typing import Dict, Iterable

TOTAL_REQUESTS = "total_requests"
SUCCESSFUL_REQUESTS = "successful_requests"
FAILED_REQUESTS = "failed_requests"
REDIRECTS_BLOCKED = "redirects_blocked"
DELAYS_BLOCKED = "delays_blocked"
BYTES_BLOCKED = "bytes_blocked"
DANGEROUS_URLS_BLOCKED = "dangerous_urls_blocked"

COUNTER_NAMES = (
    TOTAL_REQUESTS,
    SUCCESSFUL_REQUESTS,
    FAILED_REQUESTS,
    REDIRECTS_BLOCKED,
    DELAYS_BLOCKED,
    BYTES_BLOCKED,
    DANGEROUS_URLS_BLOCKED,
)

BLOCK_COUNTERS = (
    REDIRECTS_BLOCKED,
    DELAYS_BLOCKED,
    BYTES_BLOCKED,
    DANGEROUS_URLS_BLOCKED,
)


class _Counter:
    __slots__ = ("_lock", "_value")

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value = 0

    def increment(self) -> None:
        with self._lock:
            self._value += 1

    @property
    def value(self) -> int:
        return self._value


class CounterRegistry:
    """A fixed set of named, monotonically increasing counters."""

    def __init__(self, names: Iterable[str] = COUNTER_NAMES) -> None:
        self._counters: Dict[str, _Counter] = {name: _Counter() for name in names}

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._counters)

    def increment(self, name: str) -> None:
        """Add one to ``name``.

        An unknown name raises ``KeyError``: the set of counters is fixed at
        construction and asking for anything else is a bug in the caller.
        """
        self._counters[name].increment()

    def value(self, name: str) -> int:
        return self._counters[name].value

    def snapshot(self) -> Dict[str, int]:
        """Read every counter.

        Each value is read on its own; the result is not a consistent cut
        across counters while traffic is flowing.
        """
        return {name: counter.value for name, counter in self._counters.items()}
