"""Cluster cost queries, aggregation and output models."""

from cluster_costs.costs.models import Totals
from cluster_costs.costs.queries import HOURS_PER_MONTH, CostQueries, build_cost_queries
from cluster_costs.costs.aggregator import ClusterCostAggregator

__all__ = [
    "Totals",
    "CostQueries",
    "HOURS_PER_MONTH",
    "build_cost_queries",
    "ClusterCostAggregator",
]
