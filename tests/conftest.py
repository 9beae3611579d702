"""Pytest configuration and fixtures."""

import threading
from datetime import datetime
from typing import Any

import pytest

from cluster_costs.prometheus.client import MetricsClient
from cluster_costs.providers.base import DefaultProvider


def vector_response(*entries: tuple[dict[str, str], float, float]) -> dict[str, Any]:
    """Build an instant query response from (labels, timestamp, value) entries."""
    return {
        "status": "success",
        "data": {
            "resultType": "vector",
            "result": [
                {"metric": labels, "value": [timestamp, str(value)]}
                for labels, timestamp, value in entries
            ],
        },
    }


def matrix_response(*entries: tuple[dict[str, str], list[tuple[float, float]]]) -> dict[str, Any]:
    """Build a range query response from (labels, [(timestamp, value), ...]) entries."""
    return {
        "status": "success",
        "data": {
            "resultType": "matrix",
            "result": [
                {"metric": labels, "values": [[ts, str(value)] for ts, value in points]}
                for labels, points in entries
            ],
        },
    }


EMPTY_VECTOR = vector_response()


def dimension_of(query: str) -> str:
    """Identify which cost dimension a generated query belongs to."""
    if "node_total_hourly_cost" in query:
        return "total"
    if "node_cpu_hourly_cost" in query:
        return "cores"
    if "node_ram_hourly_cost" in query:
        return "memory"
    if "pv_hourly_cost" in query:
        return "storage"
    raise AssertionError(f"Unexpected query: {query}")


class FakeMetricsClient(MetricsClient):
    """MetricsClient serving canned responses per dimension and recording calls."""

    def __init__(
        self,
        responses: dict[str, Any] | None = None,
        errors: dict[str, Exception] | None = None,
        default: Any = EMPTY_VECTOR,
    ):
        self.responses = responses or {}
        self.errors = errors or {}
        self.default = default
        self.calls: list[tuple[str, str]] = []
        self.range_calls: list[dict[str, Any]] = []
        self._lock = threading.Lock()

    def _respond(self, query: str) -> Any:
        dimension = dimension_of(query)
        if dimension in self.errors:
            raise self.errors[dimension]
        return self.responses.get(dimension, self.default)

    def query(self, query: str, time: datetime | None = None) -> dict[str, Any]:
        with self._lock:
            self.calls.append(("query", query))
        return self._respond(query)

    def query_range(
        self,
        query: str,
        start: datetime,
        end: datetime,
        step_seconds: float,
    ) -> dict[str, Any]:
        with self._lock:
            self.calls.append(("query_range", query))
            self.range_calls.append(
                {"query": query, "start": start, "end": end, "step_seconds": step_seconds}
            )
        return self._respond(query)


@pytest.fixture
def provider():
    """Provider contributing no local storage term."""
    return DefaultProvider()


@pytest.fixture
def sample_config_dict():
    """Sample configuration dictionary."""
    return {
        "project_name": "test-cluster-costs",
        "environment": "dev",
        "prometheus": {
            "url": "http://prometheus.test:9090",
            "timeout_seconds": 10,
        },
        "cluster": {
            "default_cluster_id": "cluster-one",
        },
        "provider": {
            "name": "gcp",
            "local_storage_price_per_gb": 0.05,
        },
        "aggregation": {
            "default_window": "2h",
            "max_workers": 2,
        },
    }
