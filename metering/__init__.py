"""
Request metering and abuse guardrails.

``Metering`` bundles one counter registry, one endpoint table and the
recorder/producer built on them.  The web app creates a single instance at
startup and hands it to handlers; tests create a fresh one each.
"""
from __future__ import annotations

from .counters import COUNTER_NAMES, CounterRegistry
from .frequency import EndpointFrequencyTable
from .policies import Verdict
from .recorder import RequestOutcome, RequestOutcomeRecorder
from .snapshot import MetricsSnapshot, MetricsSnapshotProducer


class Metering:
    def __init__(self) -> None:
        self.counters = CounterRegistry()
        self.endpoints = EndpointFrequencyTable()
        self.recorder = RequestOutcomeRecorder(self.counters, self.endpoints)
        self.producer = MetricsSnapshotProducer(self.counters, self.endpoints)

    def track(self, endpoint: str):
        return self.recorder.track(endpoint)

    def snapshot(self) -> MetricsSnapshot:
        return self.producer.produce()


__all__ = [
    "COUNTER_NAMES",
    "CounterRegistry",
    "EndpointFrequencyTable",
    "Metering",
    "MetricsSnapshot",
    "MetricsSnapshotProducer",
    "RequestOutcome",
    "RequestOutcomeRecorder",
    "Verdict",
]
