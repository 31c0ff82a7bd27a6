"""Shared test fixtures for aumai-imagespec."""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path

import pytest

from aumai_imagespec.builders import (
    ConfigExtensionBuilder,
    HealthcheckConfigBuilder,
    ImageConfigurationBuilder,
    ImageConfigurationExtensionBuilder,
    ManifestItemBuilder,
)
from aumai_imagespec.models import ImageConfiguration, ImageManifest
from aumai_imagespec.oci import BaseImageConfiguration, Config, History, RootFs

DATA_DIR = Path(__file__).parent / "data"


# ---------------------------------------------------------------------------
# Fixture documents
# ---------------------------------------------------------------------------


@pytest.fixture()
def data_dir() -> Path:
    return DATA_DIR


@pytest.fixture()
def manifest_path() -> Path:
    return DATA_DIR / "manifest.json"


@pytest.fixture()
def config_path() -> Path:
    return DATA_DIR / "config.json"


@pytest.fixture()
def repositories_path() -> Path:
    return DATA_DIR / "repositories.json"


# ---------------------------------------------------------------------------
# Expected values of the fixture documents
# ---------------------------------------------------------------------------


@pytest.fixture()
def expected_manifest() -> ImageManifest:
    item = (
        ManifestItemBuilder()
        .config("ee56d70bcdf1aeca472a9899de653eb4d72f4a3ac31d9b0b95e677488ce766f3.json")
        .repo_tags(["postgres:15.4"])
        .layers(
            [
                "3b05311756d94678c1ea8e45bf7665a4e29f850c31c6f58d6c28403c6fdc0cdc/layer.tar",
                "454d82adf13f02e53baeae05d06b595b34bbab2836977c6b679488ec038449c3/layer.tar",
                "c039956656e1c9cd1e2d72dba02179b8d9008e0c0771af344944e218c7dc3351/layer.tar",
            ]
        )
        .build()
    )
    return ImageManifest((item,))


@pytest.fixture()
def oci_spec() -> BaseImageConfiguration:
    return BaseImageConfiguration(
        created="2023-08-16T06:40:57.929475525Z",
        author="author",
        architecture="arm64",
        os="linux",
        config=Config(
            user="1001",
            exposed_ports=("5432/tcp",),
            env=(
                "PATH=/usr/local/sbin:/usr/local/bin:/usr/sbin:/usr/bin:/sbin:/bin:/usr/lib/postgresql/15/bin",
                "GOSU_VERSION=1.16",
                "LANG=en_US.utf8",
                "PG_MAJOR=15",
                "PG_VERSION=15.4-1.pgdg120+1",
                "PGDATA=/var/lib/postgresql/data",
            ),
            entrypoint=("docker-entrypoint.sh",),
            cmd=("postgres",),
            volumes=("/var/lib/postgresql/data",),
            working_dir="/postgres",
            labels={"maintainer": "someone"},
            stop_signal="SIGINT",
        ),
        rootfs=RootFs(
            type="layers",
            diff_ids=(
                "sha256:1c3daa06574284614db07a23682ab6d1c344f09f8093ee10e5de4152a51677a1",
                "sha256:310729fcb068da6941441d9627a3d8979e7dbd015c220324331e34af28b7e20c",
                "sha256:6cc6868915f4c4d399ec0026fd321acfd0b92e84cd2a51076e89041b3e3118b6",
            ),
        ),
        history=(
            History(
                created="2023-08-15T23:39:57.178505081Z",
                created_by="/bin/sh -c #(nop) ADD file:bc58956fa3d1aff2efb0264655d039fedfff28dc4ff19a65a235e82754ee1cfa in / ",
            ),
            History(
                created="2023-08-15T23:39:57.574431303Z",
                created_by='/bin/sh -c #(nop)  CMD ["bash"]',
                empty_layer=True,
            ),
            History(
                created="2023-08-16T06:38:58.796057889Z",
                created_by="/bin/sh -c set -eux; \tgroupadd -r postgres --gid=999; \tuseradd -r -g postgres --uid=999 --home-dir=/var/lib/postgresql --shell=/bin/bash postgres; \tmkdir -p /var/lib/postgresql; \tchown -R postgres:postgres /var/lib/postgresql",
            ),
        ),
        variant="v8",
    )


@pytest.fixture()
def expected_config(oci_spec: BaseImageConfiguration) -> ImageConfiguration:
    health_check = (
        HealthcheckConfigBuilder()
        .test(["CMD-SHELL", "/usr/bin/check-health localhost"])
        .interval(timedelta(seconds=30))
        .timeout(timedelta(seconds=10))
        .start_interval(timedelta(seconds=3))
        .retries(3)
        .build()
    )
    extension = (
        ImageConfigurationExtensionBuilder()
        .config(
            ConfigExtensionBuilder()
            .memory(2048)
            .memory_swap(4096)
            .cpu_shares(8)
            .args_escaped(False)
            .shell(["/bin/bash", "-o", "pipefail", "-c"])
            .on_build(["a", "b"])
            .health_check(health_check)
            .build()
        )
        .build()
    )
    return (
        ImageConfigurationBuilder()
        .oci_spec(oci_spec)
        .docker_oci_extension(extension)
        .build()
    )
