"""Point-in-time view of the counters and endpoint table for reporting."""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping

from .counters import (
    BLOCK_COUNTERS,
    FAILED_REQUESTS,
    SUCCESSFUL_REQUESTS,
    TOTAL_REQUESTS,
    CounterRegistry,
)
from .frequency import EndpointFrequencyTable


@dataclass(frozen=True)
class MetricsSnapshot:
    total_requests: int
    successful_requests: int
    failed_requests: int
    security_blocks: Mapping[str, int] = field(default_factory=dict)
    endpoint_stats: Mapping[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_requests": self.total_requests,
            "successful_requests": self.successful_requests,
            "failed_requests": self.failed_requests,
            "security_blocks": dict(self.security_blocks),
            "endpoint_stats": dict(self.endpoint_stats),
        }


class MetricsSnapshotProducer:
    """Builds ``MetricsSnapshot`` objects without mutating anything.

    Counters are read one by one, so a snapshot taken under live traffic may
    show ``successful + failed`` lagging ``total`` or a block counter ahead of
    ``failed_requests``.  Consumers should not infer ordering from it.
    """

    def __init__(self, counters: CounterRegistry, endpoints: EndpointFrequencyTable) -> None:
        self.counters = counters
        self.endpoints = endpoints

    def produce(self) -> MetricsSnapshot:
        values = self.counters.snapshot()
        return MetricsSnapshot(
            total_requests=values[TOTAL_REQUESTS],
            successful_requests=values[SUCCESSFUL_REQUESTS],
            failed_requests=values[FAILED_REQUESTS],
            security_blocks=MappingProxyType({name: values[name] for name in BLOCK_COUNTERS}),
            endpoint_stats=MappingProxyType(self.endpoints.snapshot()),
        )
