"""Tests for aumai_imagespec CLI."""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from aumai_imagespec.cli import main

HEX64 = "a" * 64


# ---------------------------------------------------------------------------
# Version
# ---------------------------------------------------------------------------


class TestVersionFlag:
    def test_version_exits_zero(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output


# ---------------------------------------------------------------------------
# Document commands
# ---------------------------------------------------------------------------


class TestManifestCommand:
    def test_summary(self, manifest_path: Path) -> None:
        result = CliRunner().invoke(main, ["manifest", str(manifest_path)])
        assert result.exit_code == 0, result.output
        assert "Images (1)" in result.output
        assert "postgres:15.4" in result.output
        assert "Layers : 3" in result.output

    def test_json_output(self, manifest_path: Path) -> None:
        result = CliRunner().invoke(main, ["manifest", str(manifest_path), "--json"])
        assert result.exit_code == 0
        assert json.loads(result.output) == json.loads(manifest_path.read_text())

    def test_invalid_manifest_fails(self, tmp_path: Path) -> None:
        bad = tmp_path / "manifest.json"
        bad.write_text('[{"Config": "c.json", "RepoTags": []}]', encoding="utf-8")
        result = CliRunner().invoke(main, ["manifest", str(bad)])
        assert result.exit_code == 1
        assert "missing required field: layers" in result.output

    def test_missing_file_fails(self, tmp_path: Path) -> None:
        result = CliRunner().invoke(main, ["manifest", str(tmp_path / "nope.json")])
        assert result.exit_code != 0


class TestConfigCommand:
    def test_summary(self, config_path: Path) -> None:
        result = CliRunner().invoke(main, ["config", str(config_path)])
        assert result.exit_code == 0, result.output
        assert "linux/arm64/v8" in result.output
        assert "Memory     : 2048" in result.output
        assert "CMD-SHELL" in result.output
        assert "Interval   : 0:00:30" in result.output

    def test_without_extension(self, tmp_path: Path) -> None:
        doc = tmp_path / "config.json"
        doc.write_text(
            json.dumps({"architecture": "amd64", "os": "linux", "rootfs": {"type": "layers"}}),
            encoding="utf-8",
        )
        result = CliRunner().invoke(main, ["config", str(doc)])
        assert result.exit_code == 0, result.output
        assert "Docker extension: none" in result.output

    def test_json_output(self, config_path: Path) -> None:
        result = CliRunner().invoke(main, ["config", str(config_path), "--json"])
        assert result.exit_code == 0
        assert json.loads(result.output) == json.loads(config_path.read_text())


class TestRepositoriesCommand:
    def test_listing(self, repositories_path: Path) -> None:
        result = CliRunner().invoke(main, ["repositories", str(repositories_path)])
        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert lines[0].startswith("library/redis:7 -> sha256:")
        assert len(lines) == 3

    def test_invalid_digest_fails(self, tmp_path: Path) -> None:
        doc = tmp_path / "repositories"
        doc.write_text('{"postgres": {"15.4": "sha256:abc"}}', encoding="utf-8")
        result = CliRunner().invoke(main, ["repositories", str(doc)])
        assert result.exit_code == 1
        assert "invalid digest" in result.output


# ---------------------------------------------------------------------------
# Primitive commands
# ---------------------------------------------------------------------------


class TestPrimitiveCommands:
    def test_valid_digest(self) -> None:
        result = CliRunner().invoke(main, ["digest", "sha256:" + HEX64])
        assert result.exit_code == 0
        assert "sha256" in result.output

    def test_invalid_digest(self) -> None:
        result = CliRunner().invoke(main, ["digest", "SHA256:" + HEX64])
        assert result.exit_code == 1

    def test_valid_reference(self) -> None:
        result = CliRunner().invoke(main, ["reference", "postgres:15.4"])
        assert result.exit_code == 0
        assert "Tag   : 15.4" in result.output

    def test_digest_reference(self) -> None:
        result = CliRunner().invoke(main, ["reference", "postgres@sha256:" + HEX64])
        assert result.exit_code == 0
        assert "Digest: sha256:" in result.output

    def test_invalid_reference(self) -> None:
        result = CliRunner().invoke(main, ["reference", "postgres"])
        assert result.exit_code == 1

    def test_log_level_option(self) -> None:
        result = CliRunner().invoke(main, ["--log-level", "error", "digest", "sha256:" + HEX64])
        assert result.exit_code == 0
