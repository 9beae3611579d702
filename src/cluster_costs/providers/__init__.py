"""Cloud providers contributing provider-specific cost terms."""

from cluster_costs.providers.base import CloudProvider, DefaultProvider
from cluster_costs.providers.gcp import GCPProvider
from cluster_costs.providers.factory import create_provider

__all__ = [
    "CloudProvider",
    "DefaultProvider",
    "GCPProvider",
    "create_provider",
]
