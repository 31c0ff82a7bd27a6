"""
OCI image configuration models.

Follows the OCI Image Configuration Specification
https://github.com/opencontainers/image-spec/blob/main/config.md
"""

from __future__ import annotations

from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
)
from pydantic.alias_generators import to_pascal

__all__ = [
    "BaseImageConfiguration",
    "Config",
    "History",
    "RootFs",
]


class Config(BaseModel):
    """Execution parameters to use as a base when running a container."""

    # Docker stores its runtime extension inside the same object, so unknown
    # keys are ignored here and picked up by ``ConfigExtension``.
    model_config = ConfigDict(
        frozen=True, populate_by_name=True, alias_generator=to_pascal, extra="ignore"
    )

    user: str | None = None
    exposed_ports: tuple[str, ...] | None = None
    env: tuple[str, ...] | None = None
    entrypoint: tuple[str, ...] | None = None
    cmd: tuple[str, ...] | None = None
    volumes: tuple[str, ...] | None = None
    working_dir: str | None = None
    labels: dict[str, str] | None = None
    stop_signal: str | None = None

    @field_validator("exposed_ports", "volumes", mode="before")
    @classmethod
    def _keys_of_set(cls, value: Any) -> Any:
        # Serialized as a JSON object whose values are always {}.
        if isinstance(value, dict):
            return tuple(value)
        return value

    @field_serializer("exposed_ports", "volumes")
    def _as_set(self, value: tuple[str, ...] | None) -> dict[str, dict] | None:
        if value is None:
            return None
        return {key: {} for key in value}

    def is_empty(self) -> bool:
        return all(getattr(self, name) is None for name in type(self).model_fields)


class RootFs(BaseModel):
    """Layer content addresses referenced by the image."""

    model_config = ConfigDict(frozen=True)

    type: str = "layers"
    diff_ids: tuple[str, ...] = Field(default_factory=tuple)


class History(BaseModel):
    """One entry of the image build history."""

    model_config = ConfigDict(frozen=True)

    created: str | None = None
    author: str | None = None
    created_by: str | None = None
    comment: str | None = None
    empty_layer: bool | None = None


class BaseImageConfiguration(BaseModel):
    """
    The standards-body part of an image configuration.

    ``architecture``, ``os`` and ``rootfs`` are mandatory per the OCI spec.
    Top-level keys outside the OCI schema (Docker writes ``container``,
    ``container_config``, ``docker_version`` ...) are kept as extra fields
    so they survive a load/store cycle.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    created: str | None = None
    author: str | None = None
    architecture: str
    os: str
    os_version: str | None = Field(default=None, alias="os.version")
    os_features: tuple[str, ...] | None = Field(default=None, alias="os.features")
    variant: str | None = None
    config: Config | None = None
    rootfs: RootFs
    history: tuple[History, ...] | None = None

    @field_validator("config")
    @classmethod
    def _empty_config(cls, value: Config | None) -> Config | None:
        # On the wire an empty config cannot be told apart from a missing one.
        if value is not None and value.is_empty():
            return None
        return value

    @classmethod
    def default(cls) -> "BaseImageConfiguration":
        """Return the minimal configuration: linux/amd64 with no layers."""
        return cls(architecture="amd64", os="linux", rootfs=RootFs())
