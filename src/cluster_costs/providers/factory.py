"""Factory for creating the cloud provider from application settings."""

import logging

from cluster_costs.config.schema import ProviderConfig
from cluster_costs.providers.base import CloudProvider, DefaultProvider
from cluster_costs.providers.gcp import GCPProvider

logger = logging.getLogger(__name__)


def create_provider(config: ProviderConfig) -> CloudProvider:
    """Create the cloud provider named in configuration."""
    if config.name == "gcp":
        provider: CloudProvider = GCPProvider(
            local_storage_price_per_gb=config.local_storage_price_per_gb
        )
    else:
        provider = DefaultProvider(name=config.name)

    logger.info("Cloud provider initialized: %s", provider.provider_name)
    return provider
