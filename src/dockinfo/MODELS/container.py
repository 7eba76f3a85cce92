"""
Models for raw container and node descriptions as returned by the Docker Engine API.
"""
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

SWARM_NODE_LABEL = "com.docker.swarm.node.id"
PUBLIC_IP_LABEL = "publicIp"


class _EngineModel(BaseModel):
    """
    Base for Engine API payloads: CamelCase aliases, unknown fields ignored.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class RawPort(_EngineModel):
    """
    A single port binding of a container.
    """
    ip: str = Field("", alias="IP")
    private_port: int = Field(0, alias="PrivatePort")
    public_port: int = Field(0, alias="PublicPort")
    type: str = Field("tcp", alias="Type")


class RawNetwork(_EngineModel):
    """
    Settings of one network a container is attached to.
    """
    ip_address: str = Field("", alias="IPAddress")

    @field_validator("ip_address", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return value or ""


class RawHostConfig(_EngineModel):
    network_mode: str = Field("", alias="NetworkMode")


class RawNetworkSettings(_EngineModel):
    networks: Dict[str, RawNetwork] = Field(default_factory=dict, alias="Networks")

    @field_validator("networks", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return value or {}


class RawContainer(_EngineModel):
    """
    One entry of the container list, before flattening.
    """
    id: str = Field(alias="Id")
    created: int = Field(0, alias="Created")  # unix seconds
    image: str = Field("", alias="Image")
    status: str = Field("", alias="Status")
    state: str = Field("", alias="State")
    host_config: RawHostConfig = Field(default_factory=RawHostConfig, alias="HostConfig")
    labels: Dict[str, str] = Field(default_factory=dict, alias="Labels")
    network_settings: RawNetworkSettings = Field(
        default_factory=RawNetworkSettings, alias="NetworkSettings"
    )
    ports: List[RawPort] = Field(default_factory=list, alias="Ports")

    @field_validator("labels", "host_config", "network_settings", mode="before")
    @classmethod
    def _none_as_empty_mapping(cls, value):
        return value or {}

    @field_validator("ports", mode="before")
    @classmethod
    def _none_as_empty_list(cls, value):
        return value or []

    @property
    def node_id(self) -> Optional[str]:
        """Swarm node the container is scheduled on, if any."""
        return self.labels.get(SWARM_NODE_LABEL) or None


class NodeSpec(_EngineModel):
    labels: Dict[str, str] = Field(default_factory=dict, alias="Labels")

    @field_validator("labels", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return value or {}


class NodeInfo(_EngineModel):
    """
    Swarm node metadata, as returned by a node inspect.
    """
    id: str = Field("", alias="ID")
    spec: NodeSpec = Field(default_factory=NodeSpec, alias="Spec")

    @property
    def public_ip(self) -> Optional[str]:
        return self.spec.labels.get(PUBLIC_IP_LABEL)
