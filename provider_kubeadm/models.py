"""Data models exchanged with the plugin host.

The host hands the provider a ``Cluster`` value and expects a ``Plan`` back.
Bus events and their responses travel as ``Event``/``EventResponse`` JSON.
"""
from enum import Enum
from typing import Dict, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator


PLAN_NAME = "Kubeadm Kairos Cluster Provider"
BOOT_BEFORE = "boot.before"


class NodeRole(str, Enum):
    """Roles a node can take in the cluster."""
    INIT = 'init'
    CONTROL_PLANE = 'controlplane'
    WORKER = 'worker'


class Cluster(BaseModel):
    """Cluster input as handed over by the host."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    role: NodeRole
    control_plane_host: str = ""
    cluster_token: str = ""
    options: str = Field(default="", alias="config")
    env: Dict[str, str] = Field(default_factory=dict)
    provider_options: Dict[str, str] = Field(default_factory=dict)
    local_images_path: str = ""
    import_local_images: bool = False

    @field_validator("env", "provider_options", mode="before")
    @classmethod
    def none_as_empty(cls, v):
        return v if v is not None else {}

    @field_validator("control_plane_host", "cluster_token", "options", "local_images_path", mode="before")
    @classmethod
    def none_as_blank(cls, v):
        return v if v is not None else ""


class ClusterConfig(BaseModel):
    """Top level of the config document carried in event payloads."""
    model_config = ConfigDict(extra="ignore")

    cluster: Optional[Cluster] = None

    @classmethod
    def from_event_data(cls, data: str) -> "ClusterConfig":
        """Decode the ``{"config": "<yaml>"}`` JSON carried by a bus event.

        Raises:
            ValueError: If the JSON or the cluster section is invalid
            yaml.YAMLError: If the config document is not YAML
        """
        payload = EventPayload.model_validate_json(data or "{}")
        document = yaml.safe_load(payload.config) if payload.config else None
        return cls.model_validate(document or {})


class EventPayload(BaseModel):
    """JSON carried in ``Event.data``."""
    model_config = ConfigDict(extra="ignore")

    config: str = ""


class Event(BaseModel):
    """A bus event delivered by the host."""
    name: str = ""
    data: str = ""


class EventResponse(BaseModel):
    """Response returned to the host for a bus event."""
    state: str = ""
    data: str = ""
    error: str = ""


class File(BaseModel):
    """A file to materialize on the node."""
    path: str
    permissions: int = 0o640
    content: str = ""


class Systemctl(BaseModel):
    """Systemd units to enable or start."""
    enable: Optional[List[str]] = None
    start: Optional[List[str]] = None


class Stage(BaseModel):
    """A named, optionally guarded unit of files and commands."""
    model_config = ConfigDict(populate_by_name=True)

    name: str
    if_: Optional[str] = Field(default=None, alias="if")
    systemctl: Optional[Systemctl] = None
    commands: Optional[List[str]] = None
    files: Optional[List[File]] = None


class Plan(BaseModel):
    """A boot-phase automation script."""
    name: str = PLAN_NAME
    stages: Dict[str, List[Stage]] = Field(default_factory=dict)

    @property
    def boot_before(self) -> List[Stage]:
        return self.stages.get(BOOT_BEFORE, [])

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.to_dict(), default_flow_style=False, sort_keys=False)
