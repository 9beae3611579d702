"""Pydantic configuration schema for Cluster Costs."""

from typing import Literal

from pydantic import BaseModel, Field


class PrometheusConfig(BaseModel):
    """Metrics backend connection configuration."""

    url: str = "http://localhost:9090"
    timeout_seconds: float = Field(default=30.0, gt=0)
    verify_tls: bool = True
    headers: dict[str, str] = Field(default_factory=dict)  # e.g. Authorization


class ClusterConfig(BaseModel):
    """Cluster identification configuration."""

    # Attributed to series that carry no cluster label
    default_cluster_id: str = ""
    cluster_id_label: str = "cluster_id"


class ProviderConfig(BaseModel):
    """Cloud provider configuration."""

    name: Literal["default", "aws", "azure", "gcp"] = "default"
    # GCP only; local disk type is not discoverable from telemetry
    local_storage_price_per_gb: float = Field(default=0.04, ge=0)


class AggregationConfig(BaseModel):
    """Cost aggregation configuration."""

    default_window: str = "1d"
    max_workers: int = Field(default=4, ge=1, le=16)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"


class Config(BaseModel):
    """Root configuration for Cluster Costs."""

    project_name: str = "cluster-costs"
    environment: Literal["dev", "staging", "prod"] = "dev"

    prometheus: PrometheusConfig = Field(default_factory=PrometheusConfig)
    cluster: ClusterConfig = Field(default_factory=ClusterConfig)
    provider: ProviderConfig = Field(default_factory=ProviderConfig)
    aggregation: AggregationConfig = Field(default_factory=AggregationConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
