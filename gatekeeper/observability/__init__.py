"""Observability layer: in-memory metrics. No external SaaS."""

from gatekeeper.observability.metrics import MetricsCollector

__all__ = ["MetricsCollector"]
