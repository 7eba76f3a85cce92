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
Conversion of raw container descriptions into ContainerRecords.
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from ..MODELS.container import PUBLIC_IP_LABEL, RawContainer, RawPort
from ..MODELS.container_record import ContainerRecord, PortBinding

logger = logging.getLogger(__name__)


def _port_order(port: RawPort):
    return (port.private_port, port.type, port.ip, port.public_port)


class RecordFlattener:
    """
    Builds the record kept in a snapshot for one container.

    Networks are ordered by network name and port bindings by private port,
    so an unchanged container keeps the same ``ip:<n>`` and port indices
    across refreshes.
    """

    @staticmethod
    def format_created(created: int) -> str:
        """
        Formats a unix timestamp (seconds) as RFC3339 in UTC.
        """
        stamp = datetime.fromtimestamp(created, tz=timezone.utc)
        return stamp.isoformat().replace("+00:00", "Z")

    def flatten(self, raw: RawContainer,
                node_public_ip: Optional[str] = None) -> ContainerRecord:
        """
        Creates a ContainerRecord from a raw container description.

        :param raw: Container as listed by the inventory provider.
        :param node_public_ip: Public IP published by the container's swarm node, if resolved.
        :return: The container record.
        """
        ips = tuple(
            raw.network_settings.networks[name].ip_address
            for name in sorted(raw.network_settings.networks)
        )
        ports = tuple(
            PortBinding(
                host_ip=p.ip,
                public_port=p.public_port,
                private_port=p.private_port,
                protocol=p.type,
            )
            for p in sorted(raw.ports, key=_port_order)
        )

        record = ContainerRecord(
            id=raw.id,
            created=self.format_created(raw.created),
            image=raw.image,
            status=raw.status,
            state=raw.state,
            network_mode=raw.host_config.network_mode,
            labels=tuple(raw.labels.items()),
            ips=ips,
            ports=ports,
            node_public_ip=node_public_ip,
            label_public_ip=raw.labels.get(PUBLIC_IP_LABEL),
        )
        if record.public_ip is not None:
            logger.debug(f"Container {raw.id[:12]} public ip={record.public_ip}")
        return record
