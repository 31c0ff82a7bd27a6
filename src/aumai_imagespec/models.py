"""Pydantic models for the Docker image specification documents."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import timedelta
from pathlib import Path
from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    RootModel,
    field_validator,
    model_serializer,
    model_validator,
)
from pydantic.alias_generators import to_camel, to_pascal

from . import core
from .digest import Digest, parse_digest, parse_reference
from .errors import MissingRequiredField
from .oci import BaseImageConfiguration

__all__ = [
    "ConfigExtension",
    "Descriptor",
    "HealthcheckConfig",
    "ImageConfiguration",
    "ImageConfigurationExtension",
    "ImageManifest",
    "ManifestItem",
    "Repositories",
]


class _Document:
    """Load/store helpers shared by the top-level documents."""

    @classmethod
    def from_bytes(cls, data: bytes):
        """Load the document from bytes of JSON text."""
        return core.decode(data, cls)

    @classmethod
    def from_str(cls, text: str):
        """Load the document from a JSON string."""
        return core.decode(text, cls)

    @classmethod
    def from_file(cls, path: str | Path):
        """Load the document from a file; ``OSError`` propagates."""
        return core.decode(core.read_bytes(path), cls)

    def to_bytes(self, indent: int | None = None) -> bytes:
        return core.encode(self, indent=indent)

    def to_dict(self) -> Any:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ---------------------------------------------------------------------------
# Manifest
# ---------------------------------------------------------------------------


class Descriptor(BaseModel):
    """
    OCI content descriptor.

    ref: https://github.com/opencontainers/image-spec/blob/main/descriptor.md
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    media_type: str
    digest: str
    size: int = Field(ge=0)
    urls: tuple[str, ...] | None = None
    annotations: dict[str, str] | None = None

    @field_validator("digest")
    @classmethod
    def _check_digest(cls, value: str) -> str:
        parse_digest(value)
        return value


class ManifestItem(BaseModel):
    """
    One image entry of ``manifest.json``.

    ``config`` locates the configuration blob and ``layers`` the layer
    blobs, in the order they must be applied.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_pascal)

    config: str
    repo_tags: tuple[str, ...] = ()
    layers: tuple[str, ...]
    parent: str | None = None
    layer_sources: dict[str, Descriptor] | None = None

    @model_validator(mode="before")
    @classmethod
    def _require_fields(cls, data: Any) -> Any:
        if isinstance(data, dict):
            for name in ("config", "layers"):
                alias = cls.model_fields[name].alias
                if data.get(alias, data.get(name)) is None:
                    raise MissingRequiredField(name)
        return data

    @field_validator("config")
    @classmethod
    def _non_empty_config(cls, value: str) -> str:
        if not value:
            raise MissingRequiredField("config")
        return value

    @field_validator("repo_tags", mode="before")
    @classmethod
    def _untagged(cls, value: Any) -> Any:
        # docker save writes null for untagged images
        return () if value is None else value

    @field_validator("repo_tags")
    @classmethod
    def _check_tags(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        for tag in value:
            parse_reference(tag)
        return value

    @field_validator("layers")
    @classmethod
    def _non_empty_layers(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if not value or not all(value):
            raise MissingRequiredField("layers")
        return value

    @field_validator("layer_sources")
    @classmethod
    def _check_sources(
        cls, value: dict[str, Descriptor] | None
    ) -> dict[str, Descriptor] | None:
        for diff_id in value or {}:
            parse_digest(diff_id)
        return value


class ImageManifest(_Document, RootModel[tuple[ManifestItem, ...]]):
    """
    The ``manifest.json`` document: an ordered array of ``ManifestItem``.

    Items may share layers; no uniqueness is enforced across them.
    """

    model_config = ConfigDict(frozen=True)

    def __iter__(self) -> Iterator[ManifestItem]:  # type: ignore[override]
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)

    def __getitem__(self, index: int) -> ManifestItem:
        return self.root[index]

    def find(self, repo_tag: str) -> ManifestItem | None:
        """Return the first item tagged with *repo_tag*, if any."""
        for item in self.root:
            if repo_tag in item.repo_tags:
                return item
        return None


# ---------------------------------------------------------------------------
# Image configuration
# ---------------------------------------------------------------------------


_DURATIONS = ("interval", "timeout", "start_interval")


class HealthcheckConfig(BaseModel):
    """
    Settings of the HEALTHCHECK instruction.

    Durations are integer nanoseconds, as Docker's Go ``time.Duration``
    writes them, so any value read from disk is written back unchanged.
    A ``timedelta`` is accepted wherever a duration is set.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_pascal)

    test: tuple[str, ...] | None = None
    interval: int | None = Field(default=None, ge=0)
    timeout: int | None = Field(default=None, ge=0)
    start_interval: int | None = Field(default=None, ge=0)
    retries: int | None = Field(default=None, ge=0)

    @field_validator(*_DURATIONS, mode="before")
    @classmethod
    def _from_timedelta(cls, value: Any) -> Any:
        if isinstance(value, timedelta):
            return (value // timedelta(microseconds=1)) * 1000
        return value

    def duration(self, name: str) -> timedelta | None:
        """Return the duration field *name* as a ``timedelta``, truncated to microseconds."""
        if name not in _DURATIONS:
            raise KeyError(name)
        value = getattr(self, name)
        if value is None:
            return None
        return timedelta(microseconds=value // 1000)


class ConfigExtension(BaseModel):
    """Fields Docker adds to the ``config`` object of the OCI configuration."""

    # Shares its JSON object with the OCI ``Config`` fields.
    model_config = ConfigDict(
        frozen=True, populate_by_name=True, alias_generator=to_pascal, extra="ignore"
    )

    memory: int | None = Field(default=None, ge=0)
    memory_swap: int | None = Field(default=None, ge=0)
    cpu_shares: int | None = Field(default=None, gt=0)
    args_escaped: bool | None = None
    health_check: HealthcheckConfig | None = Field(
        default=None,
        validation_alias=AliasChoices("Healthcheck", "HealthCheck", "health_check"),
        serialization_alias="Healthcheck",
    )
    on_build: tuple[str, ...] | None = None
    shell: tuple[str, ...] | None = None

    def is_empty(self) -> bool:
        return all(getattr(self, name) is None for name in type(self).model_fields)


class ImageConfigurationExtension(BaseModel):
    """Docker's extension block, nested beside the OCI configuration."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    config: ConfigExtension | None = None

    def is_empty(self) -> bool:
        return self.config is None or self.config.is_empty()


# Keys of the `config` object owned by the Docker extension.
_EXTENSION_KEYS = frozenset(
    {"Memory", "MemorySwap", "CpuShares", "ArgsEscaped", "Healthcheck",
     "HealthCheck", "OnBuild", "Shell"}
)


class ImageConfiguration(_Document, BaseModel):
    """
    A Docker image configuration: the OCI base spec plus Docker's extension.

    On disk both parts share one flat JSON object; Docker's keys live in the
    same ``config`` object as the OCI ``User``, ``Env`` ... keys.
    """

    model_config = ConfigDict(frozen=True)

    oci_spec: BaseImageConfiguration
    docker_oci_extension: ImageConfigurationExtension | None = None

    @model_validator(mode="before")
    @classmethod
    def _split_document(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        if "oci_spec" in data:
            extension = data.get("docker_oci_extension")
            if isinstance(extension, ImageConfigurationExtension) and extension.is_empty():
                data = {**data, "docker_oci_extension": None}
            return data
        # Flat document: both parts are read from the same object.
        extension = ImageConfigurationExtension.model_validate(data)
        oci_data = data
        config = data.get("config")
        if isinstance(config, dict) and config and set(config) <= _EXTENSION_KEYS:
            oci_data = {key: value for key, value in data.items() if key != "config"}
        return {
            "oci_spec": oci_data,
            "docker_oci_extension": None if extension.is_empty() else extension,
        }

    @model_serializer(mode="wrap")
    def _merge_extension(self, handler) -> dict[str, Any]:
        dumped = handler(self)
        merged = dict(dumped.get("oci_spec") or {})
        extension = dumped.get("docker_oci_extension")
        if extension:
            core.merge(merged, extension)
        return merged


# ---------------------------------------------------------------------------
# Repositories
# ---------------------------------------------------------------------------


class Repositories(_Document, RootModel[dict[str, dict[str, str]]]):
    """
    The ``repositories`` index: repository name -> tag -> digest.

    Every digest is validated at load time and unknown algorithms are
    rejected.  Values stay plain strings so they re-serialize verbatim.
    """

    model_config = ConfigDict(frozen=True)

    root: dict[str, dict[str, str]] = Field(default_factory=dict)

    @field_validator("root")
    @classmethod
    def _check_digests(cls, value: dict[str, dict[str, str]]) -> dict[str, dict[str, str]]:
        for tags in value.values():
            for digest in tags.values():
                parse_digest(digest)
        return value

    def __iter__(self) -> Iterator[str]:  # type: ignore[override]
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)

    def __contains__(self, name: object) -> bool:
        return name in self.root

    def names(self) -> list[str]:
        return list(self.root)

    def tags(self, name: str) -> dict[str, str]:
        """Return a copy of the tag -> digest map of *name* (empty if unknown)."""
        return dict(self.root.get(name, {}))

    def get(self, name: str, tag: str) -> str | None:
        return self.root.get(name, {}).get(tag)

    def digest(self, name: str, tag: str) -> Digest:
        """Return the parsed digest of ``name:tag``; ``KeyError`` if absent."""
        value = self.get(name, tag)
        if value is None:
            raise KeyError(f"{name}:{tag}")
        return parse_digest(value)

    def resolve(self, reference: str) -> str | None:
        """Look up a ``name:tag`` reference string."""
        parsed = parse_reference(reference)
        if parsed.tag is None:
            return None
        return self.get(parsed.name, parsed.tag)

    def with_tag(self, name: str, tag: str, digest: str) -> "Repositories":
        """Return a copy with ``name:tag`` pointing at *digest* (overwrites)."""
        parse_digest(digest)
        root = {repo: dict(tags) for repo, tags in self.root.items()}
        root.setdefault(name, {})[tag] = digest
        return type(self)(root)

    def without_tag(self, name: str, tag: str) -> "Repositories":
        """Return a copy without ``name:tag``; empty repositories are dropped."""
        root = {repo: dict(tags) for repo, tags in self.root.items()}
        tags = root.get(name)
        if tags is not None:
            tags.pop(tag, None)
            if not tags:
                del root[name]
        return type(self)(root)
