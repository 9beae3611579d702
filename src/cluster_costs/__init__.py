"""
Cluster Costs - Kubernetes cluster cost aggregation from Prometheus telemetry.

Combines node and volume capacity metrics with the hourly prices exported by a
cost model to report monthly-rate costs for:
- CPU and GPU (cores)
- Memory
- Persistent and node-local storage
- The cluster total
"""

__version__ = "0.1.0"
