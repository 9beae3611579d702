"""PromQL templates for cluster cost dimensions.

Hourly prices exported by the cost model are averaged over the window and
converted to a monthly rate with a fixed 730 hours per month.
"""

from __future__ import annotations

from dataclasses import dataclass

HOURS_PER_MONTH = 730

QUERY_CLUSTER_CORES = """sum(
    avg(avg_over_time(kube_node_status_capacity_cpu_cores[{window}] {offset})) by (node, cluster_id) * avg(avg_over_time(node_cpu_hourly_cost[{window}] {offset})) by (node, cluster_id) * {hours} +
    avg(avg_over_time(node_gpu_hourly_cost[{window}] {offset})) by (node, cluster_id) * {hours}
  ) by (cluster_id)"""

QUERY_CLUSTER_RAM = """sum(
    avg(avg_over_time(kube_node_status_capacity_memory_bytes[{window}] {offset})) by (node, cluster_id) / 1024 / 1024 / 1024 * avg(avg_over_time(node_ram_hourly_cost[{window}] {offset})) by (node, cluster_id) * {hours}
  ) by (cluster_id)"""

QUERY_CLUSTER_STORAGE = """sum(
    avg(avg_over_time(pv_hourly_cost[{window}] {offset})) by (persistentvolume, cluster_id) * {hours}
    * avg(avg_over_time(kube_persistentvolume_capacity_bytes[{window}] {offset})) by (persistentvolume, cluster_id) / 1024 / 1024 / 1024
  ) by (cluster_id) {local_storage}"""

QUERY_CLUSTER_TOTAL = """sum(
    avg(avg_over_time(node_total_hourly_cost[{window}] {offset})) by (node, cluster_id) * {hours}
  ) by (cluster_id) +
  sum(
    avg(avg_over_time(pv_hourly_cost[{window}] {offset})) by (persistentvolume, cluster_id) * {hours}
    * avg(avg_over_time(kube_persistentvolume_capacity_bytes[{window}] {offset})) by (persistentvolume, cluster_id) / 1024 / 1024 / 1024
  ) by (cluster_id) {local_storage}"""


@dataclass(frozen=True)
class CostQueries:
    """The four cost dimension queries for one window and offset."""

    cores: str
    memory: str
    storage: str
    total: str


def format_offset(offset: str) -> str:
    """Turn an offset like "1h" into the "offset 1h" clause, or "" if empty."""
    if not offset:
        return ""
    return f"offset {offset}"


def format_local_storage(local_storage_query: str) -> str:
    """Turn a provider fragment into an additive term, or "" if empty."""
    if not local_storage_query:
        return ""
    return f"+ {local_storage_query}"


def build_cost_queries(window: str, offset: str = "", local_storage_query: str = "") -> CostQueries:
    """
    Build the cores, memory, storage and total cost queries.

    Args:
        window: PromQL duration used as the look-back range (e.g. "1d").
        offset: Raw offset duration (e.g. "1h") or empty for no offset.
        local_storage_query: Provider fragment for node-local storage, or empty.

    Returns:
        CostQueries with every expression aggregated by cluster_id.
    """
    params = {
        "window": window,
        "offset": format_offset(offset),
        "hours": HOURS_PER_MONTH,
        "local_storage": format_local_storage(local_storage_query),
    }

    return CostQueries(
        cores=QUERY_CLUSTER_CORES.format(**params),
        memory=QUERY_CLUSTER_RAM.format(**params),
        storage=QUERY_CLUSTER_STORAGE.format(**params),
        total=QUERY_CLUSTER_TOTAL.format(**params),
    )
