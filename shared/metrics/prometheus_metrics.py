"""Prometheus metrics definitions and helpers.

The entrypoint replaces itself with the server process, so there is no
long-lived HTTP endpoint to scrape. Metrics live on a private registry and
can be dumped to a node-exporter textfile before the hand-off, or when
startup aborts.
"""

from typing import Optional

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    write_to_textfile,
)


class StartupMetrics:
    """Container startup metrics."""

    def __init__(self, registry: Optional[CollectorRegistry] = None) -> None:
        """Initialize startup metrics.

        Args:
            registry: Prometheus registry to use (a fresh one if omitted)
        """
        self.registry = registry if registry is not None else CollectorRegistry()

        # Step outcomes
        self.steps_total = Counter(
            "startup_steps_total",
            "Startup steps executed, by outcome",
            ["step", "status"],
            registry=self.registry,
        )

        # Step duration
        self.step_duration = Histogram(
            "startup_step_duration_seconds",
            "Time spent running each startup step",
            ["step"],
            buckets=[0.5, 1.0, 5.0, 10.0, 30.0, 60.0, 120.0, 300.0, 600.0],
            registry=self.registry,
        )

        # Port polling
        self.wait_attempts = Counter(
            "startup_wait_attempts_total",
            "TCP connection attempts made while waiting for a dependency",
            ["target"],
            registry=self.registry,
        )

        self.wait_duration = Gauge(
            "startup_wait_duration_seconds",
            "Seconds spent waiting for a dependency to accept connections",
            ["target"],
            registry=self.registry,
        )

    def record_step(self, step: str, status: str, duration_seconds: float) -> None:
        """Record a finished step."""
        self.steps_total.labels(step=step, status=status).inc()
        self.step_duration.labels(step=step).observe(duration_seconds)

    def record_wait(self, target: str, attempts: int, duration_seconds: float) -> None:
        """Record a completed dependency wait."""
        self.wait_attempts.labels(target=target).inc(attempts)
        self.wait_duration.labels(target=target).set(duration_seconds)

    def write_textfile(self, path: str) -> None:
        """Write all metrics to a Prometheus textfile collector file."""
        write_to_textfile(path, self.registry)

