"""Configuration management for Cluster Costs."""

from cluster_costs.config.schema import (
    AggregationConfig,
    ClusterConfig,
    Config,
    LoggingConfig,
    PrometheusConfig,
    ProviderConfig,
)
from cluster_costs.config.loader import get_cached_config, load_config

__all__ = [
    "Config",
    "PrometheusConfig",
    "ClusterConfig",
    "ProviderConfig",
    "AggregationConfig",
    "LoggingConfig",
    "load_config",
    "get_cached_config",
]
