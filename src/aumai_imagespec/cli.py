"""CLI entry point for aumai-imagespec."""

from __future__ import annotations

import sys

import click

from .digest import parse_digest, parse_reference
from .errors import ImageSpecError
from .log import setup_logging
from .models import ImageConfiguration, ImageManifest, Repositories

_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _load(model, path: str):
    try:
        return model.from_file(path)
    except (ImageSpecError, OSError) as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)


def _echo_json(value) -> None:
    click.echo(value.to_bytes(indent=2).decode("utf-8"))


@click.group()
@click.version_option(package_name="aumai-imagespec")
@click.option(
    "--log-level",
    default="WARNING",
    show_default=True,
    envvar="AUMAI_IMAGESPEC_LOG_LEVEL",
    type=click.Choice(_LOG_LEVELS, case_sensitive=False),
    help="Logging verbosity.",
)
def main(log_level: str) -> None:
    """AumAI ImageSpec — validate Docker image manifests, configs and indexes."""
    setup_logging(log_level)


@main.command("manifest")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--json", "as_json", is_flag=True, help="Re-emit canonical JSON.")
def manifest_command(path: str, as_json: bool) -> None:
    """Validate a manifest.json and summarize its images."""
    manifest = _load(ImageManifest, path)
    if as_json:
        _echo_json(manifest)
        return

    click.echo(f"Images ({len(manifest)}):")
    for item in manifest:
        tags = ", ".join(item.repo_tags) or "<untagged>"
        click.echo(f"  Config : {item.config}")
        click.echo(f"  Tags   : {tags}")
        click.echo(f"  Layers : {len(item.layers)}")
        for layer in item.layers:
            click.echo(f"    {layer}")


@main.command("config")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--json", "as_json", is_flag=True, help="Re-emit canonical JSON.")
def config_command(path: str, as_json: bool) -> None:
    """Validate an image configuration and summarize it."""
    config = _load(ImageConfiguration, path)
    if as_json:
        _echo_json(config)
        return

    oci = config.oci_spec
    platform = f"{oci.os}/{oci.architecture}"
    if oci.variant:
        platform += f"/{oci.variant}"
    click.echo(f"Platform : {platform}")
    click.echo(f"Created  : {oci.created or '(unknown)'}")
    click.echo(f"Author   : {oci.author or '(unknown)'}")
    click.echo(f"Layers   : {len(oci.rootfs.diff_ids)}")
    click.echo(f"History  : {len(oci.history or ())}")

    extension = config.docker_oci_extension
    if extension is None or extension.config is None:
        click.echo("Docker extension: none")
        return
    ext = extension.config
    click.echo("Docker extension:")
    if ext.memory is not None:
        click.echo(f"  Memory     : {ext.memory}")
    if ext.memory_swap is not None:
        click.echo(f"  MemorySwap : {ext.memory_swap}")
    if ext.cpu_shares is not None:
        click.echo(f"  CpuShares  : {ext.cpu_shares}")
    if ext.shell is not None:
        click.echo(f"  Shell      : {' '.join(ext.shell)}")
    if ext.on_build:
        click.echo(f"  OnBuild    : {len(ext.on_build)} trigger(s)")
    if ext.health_check is not None and ext.health_check.test:
        click.echo(f"  Healthcheck: {' '.join(ext.health_check.test)}")
    if ext.health_check is not None and ext.health_check.interval is not None:
        click.echo(f"  Interval   : {ext.health_check.duration('interval')}")


@main.command("repositories")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--json", "as_json", is_flag=True, help="Re-emit canonical JSON.")
def repositories_command(path: str, as_json: bool) -> None:
    """Validate a repositories index and list its tags."""
    repositories = _load(Repositories, path)
    if as_json:
        _echo_json(repositories)
        return

    for name in sorted(repositories):
        for tag, digest in sorted(repositories.tags(name).items()):
            click.echo(f"{name}:{tag} -> {digest}")


@main.command("digest")
@click.argument("value")
def digest_command(value: str) -> None:
    """Check that VALUE is a valid content digest."""
    try:
        digest = parse_digest(value)
    except ImageSpecError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    click.echo(f"Algorithm: {digest.algorithm}")
    click.echo(f"Hex      : {digest.hex}")


@main.command("reference")
@click.argument("value")
def reference_command(value: str) -> None:
    """Check that VALUE is a valid name:tag or name@digest reference."""
    try:
        reference = parse_reference(value)
    except ImageSpecError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    click.echo(f"Name  : {reference.name}")
    if reference.tag is not None:
        click.echo(f"Tag   : {reference.tag}")
    if reference.digest is not None:
        click.echo(f"Digest: {reference.digest}")


if __name__ == "__main__":
    main()
