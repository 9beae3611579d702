"""Base classes for cloud providers."""

from abc import ABC, abstractmethod


class CloudProvider(ABC):
    """
    Abstract base class for cloud providers.

    A provider contributes cost terms that depend on how the cloud bills
    resources outside of the node and persistent volume prices.
    """

    @abstractmethod
    def get_local_storage_query(self, offset: str) -> str:
        """
        Return a PromQL fragment for node-local storage cost.

        Args:
            offset: Rewritten offset clause (e.g. "offset 1h") or empty string.

        Returns:
            A PromQL expression aggregated by cluster_id, or an empty string
            when the provider contributes no local storage term.
        """
        pass

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the name of this provider."""
        pass


class DefaultProvider(CloudProvider):
    """Provider for clouds whose local disks are priced into the node (AWS, Azure, on-prem)."""

    def __init__(self, name: str = "default"):
        self._name = name

    @property
    def provider_name(self) -> str:
        return self._name

    def get_local_storage_query(self, offset: str) -> str:
        return ""
