# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Rebuilds the container snapshot from the inventory provider.
"""
import logging
import time
from datetime import datetime, timezone
from typing import Callable, Dict, Optional

from .record_flattener import RecordFlattener
from ..MODELS.container import RawContainer
from ..MODELS.container_record import ContainerRecord
from ..MODELS.snapshot import Snapshot
from ..PROVIDERS.base import InventoryProvider
from ..UTILS.addresses import container_key
from ..errors import NodeMetadataUnavailable

logger = logging.getLogger(__name__)


class Refresher:
    """
    Produces complete snapshots: one container listing, best-effort
    node lookups, then flattening of every container.
    """

    def __init__(self,
                 provider: InventoryProvider,
                 flattener: Optional[RecordFlattener] = None,
                 clock: Callable[[], float] = time.monotonic):
        """
        Initializes the refresher.

        :param provider: Source of containers and node metadata.
        :param flattener: Record builder, a default one is created if omitted.
        :param clock: Monotonic clock stamped on new snapshots.
        """
        self.provider = provider
        self.flattener = flattener or RecordFlattener()
        self.clock = clock

    def refresh(self) -> Snapshot:
        """
        Builds a new snapshot.

        :return: Snapshot of all running containers.
        :raises ProviderUnavailable: If the containers cannot be listed.
        """
        logger.debug("Refreshing containers info cache")
        containers = self.provider.list_containers()

        # node id -> public ip, None when the node has none or couldn't be inspected
        node_ips: Dict[str, Optional[str]] = {}
        records: Dict[str, ContainerRecord] = {}

        for raw in containers:
            node_ip = None
            if raw.node_id:
                if raw.node_id not in node_ips:
                    node_ips[raw.node_id] = self._node_public_ip(raw)
                node_ip = node_ips[raw.node_id]

            records[container_key(raw.id)] = self.flattener.flatten(raw, node_public_ip=node_ip)

        logger.debug(f"Loaded info for {len(records)} containers")
        return Snapshot.build(
            records,
            captured_at=self.clock(),
            captured_wall=datetime.now(timezone.utc),
        )

    def _node_public_ip(self, raw: RawContainer) -> Optional[str]:
        """
        Looks up the public IP label of the container's swarm node.
        Failures are logged and yield None.
        """
        logger.debug(f"Getting Swarm node label for public Ip (node={raw.node_id})")
        try:
            node = self.provider.inspect_node(raw.node_id)
        except NodeMetadataUnavailable as e:
            logger.warning(f"Couldn't get node inspect data. err={e}")
            return None

        if node.public_ip is not None:
            logger.debug(f"Node public ip={node.public_ip}")
        return node.public_ip
