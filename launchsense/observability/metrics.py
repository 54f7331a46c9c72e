"""
Pipeline Metrics.

Recorders are passed into the DecisionPipeline; nothing here is a
process-wide singleton.

- MetricsRecorder: no-op base, the default
- InMemoryMetricsRecorder: counters + soft alerts (admin snapshot)
- PrometheusMetricsRecorder: prometheus_client counters/histograms
  registered on an injected CollectorRegistry
"""

import threading
import time
from typing import Optional

from prometheus_client import CollectorRegistry, Counter, Histogram

# ── Soft alert thresholds ─────────────────────────────────────────────────

SLOW_PIPELINE_SECONDS: float = 1.5
ERROR_RATE_ALERT: float = 0.05
SLOW_COUNT_ALERT: int = 20
KILL_DOMINANCE_RATIO: int = 3


class MetricsRecorder:
    """No-op recorder. Subclasses override what they track."""

    def record_decision(self, source: str, decision: str, duration_seconds: float) -> None:
        pass

    def record_error(self, code: str, duration_seconds: float = 0.0) -> None:
        pass

    def record_stage(self, stage: str, duration_seconds: float) -> None:
        pass


class InMemoryMetricsRecorder(MetricsRecorder):
    """
    Counters kept in process memory, with soft (non-blocking) alerts:
    - HIGH_ERROR_RATE: more than 5% of invocations failed
    - LATENCY_DEGRADATION: more than 20 slow invocations
    - KILL_DOMINANCE: KILL decisions outnumber GO three to one
    """

    def __init__(self, slow_seconds: float = SLOW_PIPELINE_SECONDS):
        self.slow_seconds = slow_seconds
        self._lock = threading.Lock()
        self.invocations = 0
        self.errors: dict[str, int] = {}
        self.slow_invocations = 0
        self.decisions: dict[str, int] = {"GO": 0, "ITERATE": 0, "KILL": 0}
        self.sources: dict[str, int] = {}
        self.stage_seconds: dict[str, float] = {}
        self.started_at = time.monotonic()

    def _count_invocation(self, duration_seconds: float) -> None:
        self.invocations += 1
        if duration_seconds > self.slow_seconds:
            self.slow_invocations += 1

    def record_decision(self, source: str, decision: str, duration_seconds: float) -> None:
        with self._lock:
            self._count_invocation(duration_seconds)
            self.decisions[decision] = self.decisions.get(decision, 0) + 1
            self.sources[source] = self.sources.get(source, 0) + 1

    def record_error(self, code: str, duration_seconds: float = 0.0) -> None:
        with self._lock:
            self._count_invocation(duration_seconds)
            self.errors[code] = self.errors.get(code, 0) + 1

    def record_stage(self, stage: str, duration_seconds: float) -> None:
        with self._lock:
            self.stage_seconds[stage] = self.stage_seconds.get(stage, 0.0) + duration_seconds

    @property
    def error_count(self) -> int:
        return sum(self.errors.values())

    def alerts(self) -> list[dict]:
        with self._lock:
            return self._alerts()

    def _alerts(self) -> list[dict]:
        # Caller holds self._lock
        alerts: list[dict] = []

        error_rate = self.error_count / self.invocations if self.invocations else 0.0
        if error_rate > ERROR_RATE_ALERT:
            alerts.append({
                "type": "HIGH_ERROR_RATE",
                "value": f"{error_rate * 100:.2f}%",
            })

        if self.slow_invocations > SLOW_COUNT_ALERT:
            alerts.append({
                "type": "LATENCY_DEGRADATION",
                "count": self.slow_invocations,
            })

        if self.decisions.get("KILL", 0) > self.decisions.get("GO", 0) * KILL_DOMINANCE_RATIO:
            alerts.append({
                "type": "KILL_DOMINANCE",
                "note": "Too many KILL decisions compared to GO",
            })

        return alerts

    def snapshot(self) -> dict:
        with self._lock:
            return {
                "uptime_minutes": round((time.monotonic() - self.started_at) / 60),
                "invocations": self.invocations,
                "errors": dict(self.errors),
                "slow_invocations": self.slow_invocations,
                "decisions": dict(self.decisions),
                "sources": dict(self.sources),
                "alerts": self._alerts(),
            }


class PrometheusMetricsRecorder(MetricsRecorder):
    """
    Prometheus export. Metric names follow Prometheus conventions:
    snake_case, _total for counters, _seconds for durations.
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry or CollectorRegistry()

        self.decisions_total = Counter(
            "launchsense_decisions_total",
            "Total decisions produced by the pipeline",
            ["source", "decision"],
            registry=self.registry,
        )
        self.errors_total = Counter(
            "launchsense_pipeline_errors_total",
            "Total failed pipeline invocations",
            ["code"],
            registry=self.registry,
        )
        self.pipeline_latency = Histogram(
            "launchsense_pipeline_latency_seconds",
            "End-to-end pipeline latency",
            buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
            registry=self.registry,
        )
        self.stage_latency = Histogram(
            "launchsense_stage_latency_seconds",
            "Latency per pipeline stage",
            ["stage"],
            buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0],
            registry=self.registry,
        )

    def record_decision(self, source: str, decision: str, duration_seconds: float) -> None:
        self.decisions_total.labels(source=source, decision=decision).inc()
        self.pipeline_latency.observe(duration_seconds)

    def record_error(self, code: str, duration_seconds: float = 0.0) -> None:
        self.errors_total.labels(code=code).inc()
        self.pipeline_latency.observe(duration_seconds)

    def record_stage(self, stage: str, duration_seconds: float) -> None:
        self.stage_latency.labels(stage=stage).observe(duration_seconds)
