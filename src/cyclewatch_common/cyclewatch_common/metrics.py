# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Prometheus metrics recorded by the cycle engine."""

from prometheus_client import Counter, Histogram

# --- Metric definitions ---

TRAVERSALS = Counter(
    "cyclewatch_traversals_total",
    "Total cycle-engine traversals",
    ["operation"],
)

CYCLES_FOUND = Counter(
    "cyclewatch_cycles_found_total",
    "Total cycles reported by the cycle engine",
    ["operation"],
)

TRAVERSAL_DURATION = Histogram(
    "cyclewatch_traversal_duration_seconds",
    "Cycle-engine traversal duration in seconds",
    ["operation"],
    buckets=(0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 10.0),
)


def record_traversal(operation: str, duration_s: float, cycles: int) -> None:
    """Record one completed engine call."""
    TRAVERSALS.labels(operation=operation).inc()
    TRAVERSAL_DURATION.labels(operation=operation).observe(duration_s)
    if cycles:
        CYCLES_FOUND.labels(operation=operation).inc(cycles)
