"""Per-endpoint invocation counts, keyed by endpoint identifier."""
from __future__ import annotations

import threading
from collections import Counter
from typing import Dict


class EndpointFrequencyTable:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counts: Counter[str] = Counter()

    def record(self, endpoint: str) -> None:
        """Count one call to ``endpoint``; unseen endpoints start at 1."""
        with self._lock:
            self._counts[endpoint] += 1

    def snapshot(self) -> Dict[str, int]:
        # Plain dict copy so callers can serialise it without the lock
        with self._lock:
            return dict(self._counts)

    def __len__(self) -> int:
        with self._lock:
            return len(self._counts)
