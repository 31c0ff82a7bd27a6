"""
aumai-imagespec quickstart — build, serialize and reload Docker image documents.

Run directly:

    python examples/quickstart.py

All demos work in memory or in a temporary directory.
"""

from __future__ import annotations

import json
import pathlib
import tempfile
from datetime import timedelta


# ---------------------------------------------------------------------------
# Demo 1: Build and reload a manifest.json
# ---------------------------------------------------------------------------

def demo_manifest() -> None:
    """Build a one-image manifest, write it to disk and load it back."""
    print("\n=== Demo 1: Image manifest ===")

    from aumai_imagespec.builders import ManifestItemBuilder
    from aumai_imagespec.models import ImageManifest

    item = (
        ManifestItemBuilder()
        .config("ee56d70bcdf1aeca472a9899de653eb4d72f4a3ac31d9b0b95e677488ce766f3.json")
        .repo_tags(["postgres:15.4"])
        .layers(["3b05311756d9/layer.tar", "454d82adf13f/layer.tar"])
        .build()
    )
    manifest = ImageManifest((item,))

    with tempfile.TemporaryDirectory() as tmp:
        path = pathlib.Path(tmp) / "manifest.json"
        path.write_bytes(manifest.to_bytes(indent=2))
        reloaded = ImageManifest.from_file(path)

    print(f"  Images   : {len(reloaded)}")
    print(f"  Tags     : {list(reloaded[0].repo_tags)}")
    print(f"  Layers   : {list(reloaded[0].layers)}")
    print(f"  Identical: {reloaded == manifest}")


# ---------------------------------------------------------------------------
# Demo 2: Compose an OCI configuration with Docker's extension
# ---------------------------------------------------------------------------

def demo_configuration() -> None:
    """Show that Docker's keys are merged into the OCI ``config`` object."""
    print("\n=== Demo 2: Image configuration ===")

    from aumai_imagespec.builders import (
        ConfigExtensionBuilder,
        HealthcheckConfigBuilder,
        ImageConfigurationBuilder,
        ImageConfigurationExtensionBuilder,
    )
    from aumai_imagespec.oci import BaseImageConfiguration, Config, RootFs

    health_check = (
        HealthcheckConfigBuilder()
        .test(["CMD-SHELL", "pg_isready"])
        .interval(timedelta(seconds=30))
        .retries(3)
        .build()
    )
    extension = (
        ImageConfigurationExtensionBuilder()
        .config(
            ConfigExtensionBuilder()
            .memory(512 * 1024 * 1024)
            .shell(["/bin/bash", "-c"])
            .health_check(health_check)
            .build()
        )
        .build()
    )
    config = (
        ImageConfigurationBuilder()
        .oci_spec(
            BaseImageConfiguration(
                architecture="amd64",
                os="linux",
                config=Config(user="postgres", cmd=("postgres",)),
                rootfs=RootFs(diff_ids=("sha256:" + "1" * 64,)),
            )
        )
        .docker_oci_extension(extension)
        .build()
    )
    print(json.dumps(config.to_dict(), indent=2))


# ---------------------------------------------------------------------------
# Demo 3: Look up tags in a repositories index
# ---------------------------------------------------------------------------

def demo_repositories() -> None:
    """Parse a repositories index, add a tag and resolve references."""
    print("\n=== Demo 3: Repositories index ===")

    from aumai_imagespec.errors import InvalidDigest
    from aumai_imagespec.models import Repositories

    repositories = Repositories.from_str(
        json.dumps({"postgres": {"15.4": "sha256:" + "b" * 64}})
    )
    updated = repositories.with_tag("postgres", "latest", "sha256:" + "b" * 64)
    print(f"  postgres:15.4  -> {repositories.get('postgres', '15.4')}")
    print(f"  postgres:latest-> {updated.resolve('postgres:latest')}")
    print(f"  original untouched: {repositories.get('postgres', 'latest') is None}")

    try:
        Repositories.from_str('{"postgres": {"15.4": "sha256:abc"}}')
    except InvalidDigest as exc:
        print(f"  Rejected: {exc}")


if __name__ == "__main__":
    demo_manifest()
    demo_configuration()
    demo_repositories()
