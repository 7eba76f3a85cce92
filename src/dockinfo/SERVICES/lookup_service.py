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
Container lookups over the cached snapshot.
"""
import logging

from ..CACHE.snapshot_cache import SnapshotCache
from ..MODELS.container_record import ContainerRecord
from ..UTILS.addresses import container_key, same_address
from ..errors import ContainerNotFound

logger = logging.getLogger(__name__)


class LookupService:
    """
    Finds container records by id or by network address.
    Both lookups go through the cache, which refreshes it when stale.
    """
    def __init__(self, cache: SnapshotCache):
        """
        Initializes the lookup service.

        :param cache: Cache holding the container snapshot.
        """
        self.cache = cache

    def by_key(self, container_id: str) -> ContainerRecord:
        """
        Looks up a container by full or short id.

        :param container_id: The container id.
        :return: The container record.
        :raises ContainerNotFound: If no container has this id.
        :raises ProviderUnavailable: If the snapshot could not be refreshed.
        """
        snapshot = self.cache.get()
        record = snapshot.get(container_key(container_id))
        if record is None:
            raise ContainerNotFound(f"Container info not found for {container_id}")
        return record

    def by_address(self, source_address: str) -> ContainerRecord:
        """
        Finds the container that owns a network address.
        If several containers share the address the first one in the snapshot wins.

        :param source_address: IP address of the container.
        :return: The container record.
        :raises ContainerNotFound: If no container has this address.
        :raises ProviderUnavailable: If the snapshot could not be refreshed.
        """
        snapshot = self.cache.get()
        for record in snapshot:
            for ip in record.ips:
                if same_address(ip, source_address):
                    logger.debug(f"Address {source_address} belongs to container {record.id[:12]}")
                    return record
        raise ContainerNotFound(f"Couldn't find container info for {source_address}")
