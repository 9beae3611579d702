"""Google Cloud provider."""

from __future__ import annotations

from cluster_costs.providers.base import CloudProvider

# GiB-month price of standard persistent disk, used for node boot disks
DEFAULT_LOCAL_STORAGE_PRICE_PER_GB = 0.04


class GCPProvider(CloudProvider):
    """
    GCP bills node boot disks separately from the instance.

    The disk type behind a node's root filesystem cannot be determined from
    telemetry, so a single configured GiB-month price is applied.
    """

    provider_name = "gcp"

    def __init__(self, local_storage_price_per_gb: float = DEFAULT_LOCAL_STORAGE_PRICE_PER_GB):
        self.local_storage_price_per_gb = local_storage_price_per_gb

    def get_local_storage_query(self, offset: str) -> str:
        return (
            f'sum(sum(container_fs_limit_bytes{{device!="tmpfs", id="/"}} {offset}) '
            f"by (instance, cluster_id)) by (cluster_id) / 1024 / 1024 / 1024 "
            f"* {self.local_storage_price_per_gb:f}"
        )
