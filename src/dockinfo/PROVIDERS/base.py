"""
Interface of the container inventory consumed by the refresher.
"""
from abc import ABC, abstractmethod
from typing import List

from ..MODELS.container import NodeInfo, RawContainer


class InventoryProvider(ABC):
    """
    Source of running containers and swarm node metadata.
    """

    @abstractmethod
    def list_containers(self) -> List[RawContainer]:
        """
        Lists all running containers.

        :raises ProviderUnavailable: If the inventory cannot be listed.
        """

    @abstractmethod
    def inspect_node(self, node_id: str) -> NodeInfo:
        """
        Returns metadata of a swarm node.

        :raises NodeMetadataUnavailable: If the node cannot be inspected.
        """

    def close(self) -> None:
        """
        Releases connections held by the provider.
        """
