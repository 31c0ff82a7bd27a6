"""
Staged builders for the document models.

Each builder accumulates fields through chained setters and validates them
exactly once, in ``build()``.  A builder is single use: ``build()`` caches
its result and any setter called afterwards raises ``RuntimeError``.

Example::

    item = (
        ManifestItemBuilder()
        .config("c.json")
        .repo_tags(["postgres:15.4"])
        .layers(["l1/layer.tar", "l2/layer.tar"])
        .build()
    )
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import timedelta
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel

from . import core
from .models import (
    ConfigExtension,
    Descriptor,
    HealthcheckConfig,
    ImageConfiguration,
    ImageConfigurationExtension,
    ImageManifest,
    ManifestItem,
)
from .oci import BaseImageConfiguration

__all__ = [
    "ConfigExtensionBuilder",
    "HealthcheckConfigBuilder",
    "ImageConfigurationBuilder",
    "ImageConfigurationExtensionBuilder",
    "ImageManifestBuilder",
    "ManifestItemBuilder",
]

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _strings(value: Iterable[str]) -> tuple[str, ...]:
    # a bare string would otherwise be split into characters
    if isinstance(value, str):
        raise TypeError("expected a sequence of strings, got a single string")
    return tuple(value)


class _Builder(Generic[ModelT]):
    """Draft holding staged fields until ``build()`` materializes the model."""

    model: ClassVar[type[BaseModel]]

    def __init__(self) -> None:
        self._fields: dict[str, Any] = {}
        self._built: ModelT | None = None

    def _ensure_open(self) -> None:
        if self._built is not None:
            raise RuntimeError(
                f"{type(self).__name__} already built; start a new builder"
            )

    def _set(self, name: str, value: Any):
        self._ensure_open()
        self._fields[name] = value
        return self

    def _draft(self) -> dict[str, Any]:
        return dict(self._fields)

    def build(self) -> ModelT:
        """Validate the staged fields and return the immutable model."""
        if self._built is None:
            self._built = core.validate(self.model, self._draft())
            logger.debug("Built %s", self.model.__name__)
        return self._built


# ---------------------------------------------------------------------------
# Manifest
# ---------------------------------------------------------------------------


class ManifestItemBuilder(_Builder[ManifestItem]):
    """Builds a ``ManifestItem``; ``config`` and ``layers`` are required."""

    model = ManifestItem

    def config(self, value: str) -> "ManifestItemBuilder":
        return self._set("config", value)

    def repo_tags(self, value: Iterable[str]) -> "ManifestItemBuilder":
        return self._set("repo_tags", _strings(value))

    def layers(self, value: Iterable[str]) -> "ManifestItemBuilder":
        return self._set("layers", _strings(value))

    def parent(self, value: str) -> "ManifestItemBuilder":
        return self._set("parent", value)

    def layer_sources(
        self, value: Mapping[str, Descriptor]
    ) -> "ManifestItemBuilder":
        return self._set("layer_sources", dict(value))


class ImageManifestBuilder(_Builder[ImageManifest]):
    """Collects already built ``ManifestItem`` values, in order."""

    model = ImageManifest

    def __init__(self) -> None:
        super().__init__()
        self._items: list[ManifestItem] = []

    def item(self, value: ManifestItem) -> "ImageManifestBuilder":
        if not isinstance(value, ManifestItem):
            raise TypeError(f"expected a built ManifestItem, got {type(value).__name__}")
        self._ensure_open()
        self._items.append(value)
        return self

    def items(self, values: Iterable[ManifestItem]) -> "ImageManifestBuilder":
        for value in values:
            self.item(value)
        return self

    def _draft(self) -> Any:
        return tuple(self._items)


# ---------------------------------------------------------------------------
# Image configuration
# ---------------------------------------------------------------------------


class HealthcheckConfigBuilder(_Builder[HealthcheckConfig]):
    """Builds a ``HealthcheckConfig``; durations take a ``timedelta`` or nanoseconds."""

    model = HealthcheckConfig

    def test(self, value: Iterable[str]) -> "HealthcheckConfigBuilder":
        return self._set("test", _strings(value))

    def interval(self, value: timedelta | int) -> "HealthcheckConfigBuilder":
        return self._set("interval", value)

    def timeout(self, value: timedelta | int) -> "HealthcheckConfigBuilder":
        return self._set("timeout", value)

    def start_interval(self, value: timedelta | int) -> "HealthcheckConfigBuilder":
        return self._set("start_interval", value)

    def retries(self, value: int) -> "HealthcheckConfigBuilder":
        return self._set("retries", value)


class ConfigExtensionBuilder(_Builder[ConfigExtension]):
    """Builds the ``ConfigExtension`` holding Docker's runtime settings."""

    model = ConfigExtension

    def memory(self, value: int) -> "ConfigExtensionBuilder":
        return self._set("memory", value)

    def memory_swap(self, value: int) -> "ConfigExtensionBuilder":
        return self._set("memory_swap", value)

    def cpu_shares(self, value: int) -> "ConfigExtensionBuilder":
        return self._set("cpu_shares", value)

    def args_escaped(self, value: bool) -> "ConfigExtensionBuilder":
        return self._set("args_escaped", value)

    def health_check(self, value: HealthcheckConfig) -> "ConfigExtensionBuilder":
        return self._set("health_check", value)

    def on_build(self, value: Iterable[str]) -> "ConfigExtensionBuilder":
        return self._set("on_build", _strings(value))

    def shell(self, value: Iterable[str]) -> "ConfigExtensionBuilder":
        return self._set("shell", _strings(value))


class ImageConfigurationExtensionBuilder(_Builder[ImageConfigurationExtension]):
    """Wraps a built ``ConfigExtension`` into Docker's extension block."""

    model = ImageConfigurationExtension

    def config(self, value: ConfigExtension) -> "ImageConfigurationExtensionBuilder":
        return self._set("config", value)


class ImageConfigurationBuilder(_Builder[ImageConfiguration]):
    """
    Composes an OCI base configuration with Docker's extension.

    ``oci_spec`` defaults to ``BaseImageConfiguration.default()``.  The
    extension must already be built; it is not validated a second time.
    """

    model = ImageConfiguration

    def oci_spec(self, value: BaseImageConfiguration) -> "ImageConfigurationBuilder":
        if not isinstance(value, BaseImageConfiguration):
            raise TypeError(
                f"expected a BaseImageConfiguration, got {type(value).__name__}"
            )
        return self._set("oci_spec", value)

    def docker_oci_extension(
        self, value: ImageConfigurationExtension
    ) -> "ImageConfigurationBuilder":
        if not isinstance(value, ImageConfigurationExtension):
            raise TypeError(
                "expected a built ImageConfigurationExtension, "
                f"got {type(value).__name__}"
            )
        return self._set("docker_oci_extension", value)

    def _draft(self) -> dict[str, Any]:
        draft = super()._draft()
        draft.setdefault("oci_spec", BaseImageConfiguration.default())
        return draft
