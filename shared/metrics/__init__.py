"""Metrics module using Prometheus."""

from .prometheus_metrics import StartupMetrics

__all__ = ["StartupMetrics"]
