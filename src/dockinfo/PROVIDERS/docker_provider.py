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
Inventory provider backed by the Docker Engine API.
"""
import logging
from typing import Any, List, Optional

import docker
from docker.errors import DockerException
from pydantic import ValidationError
from requests.exceptions import RequestException

from .base import InventoryProvider
from ..MODELS.container import NodeInfo, RawContainer
from ..MODELS.settings import ServerSettings
from ..errors import NodeMetadataUnavailable, ProviderUnavailable

logger = logging.getLogger(__name__)


class DockerInventoryProvider(InventoryProvider):
    """
    Lists containers and inspects swarm nodes through the docker SDK.
    Every call is bounded by the client timeout.
    """

    def __init__(self,
                 base_url: Optional[str] = None,
                 version: str = "1.38",
                 timeout: float = 10.0,
                 client: Optional[Any] = None):
        """
        Initializes the provider.

        Args:
            base_url: Docker Engine URL. Defaults to the environment (DOCKER_HOST).
            version: Engine API version to pin.
            timeout: Seconds before a call to the engine is abandoned.
            client: Pre-built docker.DockerClient, mainly for tests.
        """
        self.timeout = timeout
        if client is not None:
            self.client = client
            return

        logger.debug("Preparing Docker client")
        try:
            if base_url:
                self.client = docker.DockerClient(base_url=base_url, version=version, timeout=timeout)
            else:
                self.client = docker.from_env(version=version, timeout=timeout)
        except DockerException as e:
            raise ProviderUnavailable(f"Error creating Docker client instance: {e}") from e

    @classmethod
    def from_settings(cls, settings: ServerSettings) -> "DockerInventoryProvider":
        return cls(
            base_url=settings.docker_url,
            version=settings.docker_api_version,
            timeout=settings.docker_timeout,
        )

    def list_containers(self) -> List[RawContainer]:
        try:
            entries = self.client.api.containers()
        except (DockerException, RequestException) as e:
            logger.error(f"Error listing containers. err={e}")
            raise ProviderUnavailable(f"Error listing containers: {e}") from e

        containers = []
        for entry in entries:
            try:
                containers.append(RawContainer.model_validate(entry))
            except ValidationError as e:
                logger.warning(f"Skipping malformed container entry {entry.get('Id', '?')!r}: {e}")
        return containers

    def inspect_node(self, node_id: str) -> NodeInfo:
        try:
            data = self.client.api.inspect_node(node_id)
            return NodeInfo.model_validate(data)
        except (DockerException, RequestException, ValidationError) as e:
            raise NodeMetadataUnavailable(node_id, str(e)) from e

    def close(self) -> None:
        self.client.close()
