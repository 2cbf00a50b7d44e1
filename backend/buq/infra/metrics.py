"""Counters and gauges emitted by the remark and quantification services.

Counters are named ``<entity>_<action>_total`` and only ever grow. Gauges
hold the latest observed value, e.g. the line-item count of the last saved
quantification.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from threading import Lock
from typing import Dict, Protocol

from .logging import get_logger

logger = get_logger(__name__)


class MetricsClient(Protocol):  # pragma: no cover - interface only
    def increment(self, metric: str, value: int = 1) -> None: ...

    def gauge(self, metric: str, value: float) -> None: ...


@dataclass
class InMemoryMetricsClient(MetricsClient):
    """Process-local sink; read back through :meth:`snapshot`."""

    counters: Counter[str] = field(default_factory=Counter)
    gauges: Dict[str, float] = field(default_factory=dict)
    _lock: Lock = field(default_factory=Lock, repr=False, compare=False)

    def increment(self, metric: str, value: int = 1) -> None:
        if value < 0:
            raise ValueError(f"counter {metric} cannot decrease (got {value})")
        with self._lock:
            self.counters[metric] += value
        logger.debug("metric_incremented", extra={"metric": metric, "value": value})

    def gauge(self, metric: str, value: float) -> None:
        with self._lock:
            self.gauges[metric] = value
        logger.debug("metric_gauged", extra={"metric": metric, "value": value})

    def snapshot(self) -> Dict[str, Dict[str, float]]:
        with self._lock:
            return {"counters": dict(self.counters), "gauges": dict(self.gauges)}


_shared_client = InMemoryMetricsClient()


def get_metrics_client() -> MetricsClient:
    """Client the services fall back to when none is injected."""

    return _shared_client
