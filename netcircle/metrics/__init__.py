"""Derived statistics: degree, bridges, density and network health."""

from netcircle.metrics.health import compute_metrics
from netcircle.metrics.schemas import NetworkMetrics

__all__ = [
    "NetworkMetrics",
    "compute_metrics",
]
