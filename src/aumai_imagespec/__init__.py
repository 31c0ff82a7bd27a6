"""aumai-imagespec: models, builders and codecs for Docker image documents."""

from .builders import (
    ConfigExtensionBuilder,
    HealthcheckConfigBuilder,
    ImageConfigurationBuilder,
    ImageConfigurationExtensionBuilder,
    ImageManifestBuilder,
    ManifestItemBuilder,
)
from .digest import Digest, Reference, parse_digest, parse_reference
from .errors import (
    ImageSpecError,
    InvalidDigest,
    InvalidReference,
    MalformedDocument,
    MissingRequiredField,
)
from .models import (
    ConfigExtension,
    Descriptor,
    HealthcheckConfig,
    ImageConfiguration,
    ImageConfigurationExtension,
    ImageManifest,
    ManifestItem,
    Repositories,
)
from .oci import BaseImageConfiguration, Config, History, RootFs

__version__ = "0.1.0"

__all__ = [
    "BaseImageConfiguration",
    "Config",
    "ConfigExtension",
    "ConfigExtensionBuilder",
    "Descriptor",
    "Digest",
    "HealthcheckConfig",
    "HealthcheckConfigBuilder",
    "History",
    "ImageConfiguration",
    "ImageConfigurationBuilder",
    "ImageConfigurationExtension",
    "ImageConfigurationExtensionBuilder",
    "ImageManifest",
    "ImageManifestBuilder",
    "ImageSpecError",
    "InvalidDigest",
    "InvalidReference",
    "MalformedDocument",
    "ManifestItem",
    "ManifestItemBuilder",
    "MissingRequiredField",
    "Reference",
    "Repositories",
    "RootFs",
    "parse_digest",
    "parse_reference",
]
