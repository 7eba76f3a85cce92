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
The queryable record kept for every container in a snapshot.
"""
from typing import Dict, Optional, Tuple
from pydantic import BaseModel, ConfigDict


class PortBinding(BaseModel):
    """
    One exposed port of a container.
    """
    model_config = ConfigDict(frozen=True)

    host_ip: str = ""
    public_port: int = 0
    private_port: int = 0
    protocol: str = "tcp"


class ContainerRecord(BaseModel):
    """
    Structured metadata of one container at snapshot time.

    Repeated groups are kept as ordered tuples; ``to_flat`` renders the
    record in the flat ``key -> string`` shape served to clients, where
    each group becomes a family of indexed keys (``ip:0``, ``ip:1``, ...).
    """
    model_config = ConfigDict(frozen=True)

    id: str
    created: str
    image: str = ""
    status: str = ""
    state: str = ""
    network_mode: str = ""

    labels: Tuple[Tuple[str, str], ...] = ()
    ips: Tuple[str, ...] = ()
    ports: Tuple[PortBinding, ...] = ()

    node_public_ip: Optional[str] = None
    label_public_ip: Optional[str] = None

    @property
    def public_ip(self) -> Optional[str]:
        """
        Public address of the container. A ``publicIp`` container label
        wins over the one published by its swarm node.
        """
        if self.label_public_ip is not None:
            return self.label_public_ip
        return self.node_public_ip

    def to_flat(self) -> Dict[str, str]:
        """
        Renders the record as a flat mapping of string keys to string values.

        :return: The wire representation of the record.
        """
        flat = {
            "id": self.id,
            "created": self.created,
            "image": self.image,
            "status": self.status,
            "state": self.state,
            "networkMode": self.network_mode,
        }

        if self.node_public_ip is not None:
            flat["nodePublicIp"] = self.node_public_ip
        if self.label_public_ip is not None:
            flat["labelPublicIp"] = self.label_public_ip
        if self.public_ip is not None:
            flat["publicIp"] = self.public_ip

        for name, value in self.labels:
            flat[f"label:{name}"] = value

        for n, ip in enumerate(self.ips):
            flat[f"ip:{n}"] = ip

        for n, port in enumerate(self.ports):
            flat[f"hostBindPort:{n}"] = port.host_ip
            flat[f"publicPort:{n}"] = str(port.public_port)
            flat[f"privatePort:{n}"] = str(port.private_port)

        return flat
