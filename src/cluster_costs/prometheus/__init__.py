"""Prometheus access: HTTP client, query execution and result decoding."""

from cluster_costs.prometheus.client import MetricsClient, PrometheusClient, PrometheusClientError
from cluster_costs.prometheus.executor import QueryExecutor, QueryRange
from cluster_costs.prometheus.results import (
    MatrixResult,
    QueryResult,
    Sample,
    Series,
    VectorResult,
    decode_query_result,
    parse_query_result,
)

__all__ = [
    "MetricsClient",
    "PrometheusClient",
    "PrometheusClientError",
    "QueryExecutor",
    "QueryRange",
    "Sample",
    "Series",
    "VectorResult",
    "MatrixResult",
    "QueryResult",
    "decode_query_result",
    "parse_query_result",
]
