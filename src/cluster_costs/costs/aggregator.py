"""Cluster cost aggregation.

Runs the cores, memory, storage and total cost queries and shapes their
results into Totals using one of three policies:

- single total: the first sample of the first series, for one cluster
- per cluster: the first sample of every series, keyed by cluster label
- time series: every sample of every series, in backend order
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from cluster_costs.config.schema import Config
from cluster_costs.costs.models import CostPair, Totals, sample_to_pair
from cluster_costs.costs.queries import CostQueries, build_cost_queries, format_offset
from cluster_costs.errors import NoDataError, ParseError
from cluster_costs.prometheus.client import MetricsClient, PrometheusClient
from cluster_costs.prometheus.executor import QueryExecutor, QueryRange
from cluster_costs.prometheus.results import Series, parse_query_result
from cluster_costs.providers.base import CloudProvider
from cluster_costs.providers.factory import create_provider

logger = logging.getLogger(__name__)

# Dimension name -> Totals field, in merge order
DIMENSION_FIELDS = {
    "cores": "cpu_cost",
    "memory": "mem_cost",
    "storage": "storage_cost",
    "total": "total_cost",
}


def single_total(series: list[Series], dimension: str = "") -> list[CostPair]:
    """
    Take the first sample of the first series, ignoring its labels.

    Raises:
        NoDataError: If there is no series or the first series is empty.
    """
    if not series or not series[0].samples:
        message = "Not enough data available in the selected time range"
        if dimension:
            message = f"{message} ({dimension} cost)"
        raise NoDataError(message)
    return [sample_to_pair(series[0].samples[0])]


def per_cluster_totals(
    series: list[Series],
    default_cluster_id: str = "",
    cluster_id_label: str = "cluster_id",
) -> dict[str, list[CostPair]]:
    """
    Key the first sample of every series by its cluster label, one pair per cluster.

    Series without a cluster label are attributed to default_cluster_id.
    Series without samples are skipped with a warning. When several series
    resolve to the same cluster only the first is kept.
    """
    totals: dict[str, list[CostPair]] = {}
    for result in series:
        cluster_id = result.label(cluster_id_label) or default_cluster_id

        if not result.samples:
            logger.warning(
                "Metric values did not contain any valid data for cluster '%s'", cluster_id
            )
            continue

        # Snapshot queries are expected to yield one value per cluster
        if len(result.samples) > 1:
            logger.warning(
                "Series for cluster '%s' returned %d samples, discarding all but the first",
                cluster_id,
                len(result.samples),
            )

        pair = sample_to_pair(result.samples[0])
        if cluster_id in totals:
            # First write wins; a snapshot field holds at most one pair
            logger.warning(
                "Cluster '%s' already has a value, dropping duplicate value %s at %s",
                cluster_id,
                pair[1],
                pair[0],
            )
            continue
        totals[cluster_id] = [pair]

    return totals


def time_series_totals(series: list[Series], dimension: str = "") -> list[CostPair]:
    """
    Flatten every sample of every series, preserving backend order.

    Raises:
        NoDataError: If the query returned no series.
    """
    if not series:
        message = "Not enough data available in the selected time range"
        if dimension:
            message = f"{message} ({dimension} cost)"
        raise NoDataError(message)
    return [sample_to_pair(sample) for result in series for sample in result.samples]


class ClusterCostAggregator:
    """
    Aggregate monthly-rate cluster costs from Prometheus.

    The four dimension queries are independent and run concurrently; their
    results are merged on the calling thread once all of them have returned.
    """

    def __init__(
        self,
        client: MetricsClient,
        provider: CloudProvider,
        default_cluster_id: str = "",
        cluster_id_label: str = "cluster_id",
        max_workers: int = 4,
    ):
        """
        Initialize the aggregator.

        Args:
            client: Metrics backend client.
            provider: Cloud provider contributing the local storage term.
            default_cluster_id: Cluster attributed to series without a cluster label.
            cluster_id_label: Label carrying the cluster identifier.
            max_workers: Maximum number of dimension queries in flight.
        """
        self.executor = QueryExecutor(client)
        self.provider = provider
        self.default_cluster_id = default_cluster_id
        self.cluster_id_label = cluster_id_label
        self.max_workers = max_workers

    @classmethod
    def from_config(cls, config: Config, client: MetricsClient | None = None) -> ClusterCostAggregator:
        """Create an aggregator from application configuration."""
        if client is None:
            client = PrometheusClient(
                url=config.prometheus.url,
                timeout=config.prometheus.timeout_seconds,
                verify_tls=config.prometheus.verify_tls,
                headers=config.prometheus.headers,
            )
        return cls(
            client=client,
            provider=create_provider(config.provider),
            default_cluster_id=config.cluster.default_cluster_id,
            cluster_id_label=config.cluster.cluster_id_label,
            max_workers=config.aggregation.max_workers,
        )

    def cluster_costs(self, window: str, offset: str = "") -> Totals:
        """
        Get the current full cluster costs averaged over a window of time.

        Returns:
            Totals with one (timestamp, value) pair per dimension.

        Raises:
            ExecutionError, ParseError: If any dimension query fails.
            NoDataError: If any dimension returned no data.
        """
        queries = self._build_queries(window, offset)
        results = self._run_dimensions(queries, self.executor.run_instant)

        totals = Totals()
        for dimension, field in DIMENSION_FIELDS.items():
            setattr(totals, field, single_total(results[dimension], dimension))
        return totals

    def cluster_costs_for_all_clusters(self, window: str, offset: str = "") -> dict[str, Totals]:
        """
        Get the cluster costs averaged over a window of time for all clusters.

        A cluster missing from a dimension's result keeps an empty list for
        that dimension.

        Raises:
            ExecutionError, ParseError: If any dimension query fails.
        """
        queries = self._build_queries(window, offset)
        results = self._run_dimensions(queries, self.executor.run_instant)

        totals_by_cluster: dict[str, Totals] = {}
        for dimension, field in DIMENSION_FIELDS.items():
            cluster_totals = per_cluster_totals(
                results[dimension],
                default_cluster_id=self.default_cluster_id,
                cluster_id_label=self.cluster_id_label,
            )
            for cluster_id, pairs in cluster_totals.items():
                if cluster_id not in totals_by_cluster:
                    totals_by_cluster[cluster_id] = Totals()
                getattr(totals_by_cluster[cluster_id], field).extend(pairs)

        logger.debug("Aggregated costs for %d cluster(s)", len(totals_by_cluster))
        return totals_by_cluster

    def cluster_costs_over_time(
        self,
        start: str,
        end: str,
        window: str,
        offset: str = "",
    ) -> Totals:
        """
        Get the full cluster costs over time, one value per window-sized step.

        Args:
            start: Range start, formatted YYYY-MM-DDTHH:MM:SS.mmmZ.
            end: Range end, same format.
            window: Look-back window, also used as the evaluation step.
            offset: Optional offset duration.

        Raises:
            TimeParseError: Before any query runs, if start, end or window is malformed.
            ExecutionError, ParseError: If any dimension query fails.
            NoDataError: If any dimension returned no series.
        """
        query_range = QueryRange.parse(start, end, window)
        queries = self._build_queries(window, offset)

        def run_range(query: str) -> dict[str, Any]:
            return self.executor.run_range_window(query, query_range)

        results = self._run_dimensions(queries, run_range)

        totals = Totals()
        for dimension, field in DIMENSION_FIELDS.items():
            setattr(totals, field, time_series_totals(results[dimension], dimension))
        return totals

    def _build_queries(self, window: str, offset: str) -> CostQueries:
        local_storage_query = self.provider.get_local_storage_query(format_offset(offset))
        return build_cost_queries(window, offset, local_storage_query)

    def _run_dimensions(
        self,
        queries: CostQueries,
        run: Callable[[str], dict[str, Any]],
    ) -> dict[str, list[Series]]:
        """
        Run and parse every dimension query.

        Results are collected in dimension order, so when several dimensions
        fail the first one in that order is raised.
        """
        jobs = {dimension: getattr(queries, dimension) for dimension in DIMENSION_FIELDS}

        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(jobs))) as pool:
            futures = {
                dimension: pool.submit(self._fetch, run, query)
                for dimension, query in jobs.items()
            }
            return {dimension: future.result() for dimension, future in futures.items()}

    @staticmethod
    def _fetch(run: Callable[[str], dict[str, Any]], query: str) -> list[Series]:
        raw = run(query)
        try:
            return parse_query_result(raw)
        except ParseError as e:
            raise ParseError(f"Error for query {query}: {e}") from e
