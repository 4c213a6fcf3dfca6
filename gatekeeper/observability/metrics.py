"""Prometheus-style metrics collector. Thread-safe, in-memory. No real Prometheus dependency."""

import threading
from typing import Any, Mapping

ACCESS_DECISIONS = "access_decisions_total"
PAYLOAD_MALFORMED = "payload_malformed_total"
STORE_FAILURES = "store_failures_total"
AUDIT_WRITE_FAILURES = "audit_write_failures_total"
PUBLISH_FAILURES = "publish_failures_total"
PIPELINE_LATENCY = "access_pipeline_ms"


def _label_key(name: str, labels: Mapping[str, str]) -> str:
    rendered = ",".join(f"{k}={labels[k]}" for k in sorted(labels))
    return f"{name}:{rendered}"


class MetricsCollector:
    """
    In-memory Prometheus-style registry. Tracks counters and histograms.
    Thread-safe. Exposes increment, observe_latency, export_metrics.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counters: dict[str, float] = {}
        self._counters_by_labels: dict[str, dict[str, float]] = {}
        # name -> [count, sum]; samples are not retained.
        self._histograms: dict[str, list[float]] = {}

    def increment(
        self,
        name: str,
        value: float = 1.0,
        *,
        labels: Mapping[str, str] | None = None,
    ) -> None:
        """Increment a counter. Optional labels (e.g. decision, credential_kind) for dimensional metrics."""
        with self._lock:
            if labels:
                key = _label_key(name, labels)
                series = self._counters_by_labels.setdefault(name, {})
                series[key] = series.get(key, 0) + value
            else:
                self._counters[name] = self._counters.get(name, 0) + value

    def observe_latency(self, name: str, latency_ms: float) -> None:
        """Record a latency observation (histogram-style)."""
        with self._lock:
            totals = self._histograms.setdefault(name, [0, 0.0])
            totals[0] += 1
            totals[1] += latency_ms

    def export_metrics(self) -> dict[str, Any]:
        """Export all metrics as a dict (simulated Prometheus-style)."""
        with self._lock:
            return {
                "counters": dict(self._counters),
                "counters_by_labels": {
                    k: dict(v) for k, v in self._counters_by_labels.items()
                },
                "histograms": {
                    k: {
                        "count": v[0],
                        "sum": v[1],
                    }
                    for k, v in self._histograms.items()
                },
            }

    def reset(self) -> None:
        """Reset all metrics (for tests)."""
        with self._lock:
            self._counters.clear()
            self._counters_by_labels.clear()
            self._histograms.clear()
