"""
Per-request accounting.

Handlers wrap their body in ``recorder.track(endpoint)``.  Entering the block
counts the request and its endpoint; leaving it settles exactly one outcome:

* an explicit ``succeed()``, ``fail()`` or ``reject(verdict)`` call wins;
* otherwise a normal exit is a success and an ``Exception`` is a failure;
* a ``BaseException`` that is not an ``Exception`` (task cancellation, the
  client going away mid-delay) settles nothing, so ``total_requests`` keeps
  the aborted request while neither outcome counter does.

Recording is best effort.  A fault inside the counters is logged and dropped
so that metrics can never break the request they describe.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from .counters import (
    FAILED_REQUESTS,
    SUCCESSFUL_REQUESTS,
    TOTAL_REQUESTS,
    CounterRegistry,
)
from .frequency import EndpointFrequencyTable
from .policies import Verdict

logger = logging.getLogger(__name__)


class RequestOutcome:
    """Terminal state of one tracked request; settles at most once."""

    def __init__(self, recorder: "RequestOutcomeRecorder", endpoint: str) -> None:
        self._recorder = recorder
        self.endpoint = endpoint
        self.status: Optional[str] = None

    @property
    def settled(self) -> bool:
        return self.status is not None

    def succeed(self) -> None:
        if self._settle("success"):
            self._recorder.increment(SUCCESSFUL_REQUESTS)

    def fail(self) -> None:
        if self._settle("failure"):
            self._recorder.increment(FAILED_REQUESTS)

    def reject(self, verdict: Verdict) -> None:
        """Settle as a guardrail rejection: block counter (if any) plus failure."""
        if not self._settle("rejected"):
            return
        logger.warning(
            "Blocked %s: %s (requested=%s, limit=%s)",
            self.endpoint,
            verdict.code,
            verdict.requested,
            verdict.limit,
        )
        if verdict.block_counter:
            self._recorder.increment(verdict.block_counter)
        self._recorder.increment(FAILED_REQUESTS)

    def _settle(self, status: str) -> bool:
        if self.status is not None:
            logger.debug(
                "Outcome for %s already settled as %s; ignoring %s",
                self.endpoint,
                self.status,
                status,
            )
            return False
        self.status = status
        return True


class RequestOutcomeRecorder:
    def __init__(self, counters: CounterRegistry, endpoints: EndpointFrequencyTable) -> None:
        self.counters = counters
        self.endpoints = endpoints

    def increment(self, name: str) -> None:
        try:
            self.counters.increment(name)
        except Exception:
            logger.warning("Failed to increment counter %r", name, exc_info=True)

    def record_endpoint(self, endpoint: str) -> None:
        try:
            self.endpoints.record(endpoint)
        except Exception:
            logger.warning("Failed to record endpoint %r", endpoint, exc_info=True)

    def begin(self, endpoint: str) -> RequestOutcome:
        """Count a new request for ``endpoint`` and return its pending outcome."""
        self.record_endpoint(endpoint)
        self.increment(TOTAL_REQUESTS)
        return RequestOutcome(self, endpoint)

    @contextmanager
    def track(self, endpoint: str) -> Iterator[RequestOutcome]:
        outcome = self.begin(endpoint)
        try:
            yield outcome
        except Exception:
            outcome.fail()
            raise
        if not outcome.settled:
            outcome.succeed()
