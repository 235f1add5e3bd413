"""Minecraft Bedrock dedicated server: fetch configuration and installation."""

from __future__ import annotations

import stat
import zipfile
from pathlib import Path

from loguru import logger

from provisioner.fetchers import (
    Artifact,
    ContainerExtractFetcher,
    ContainerRuntime,
    DirectDownloadFetcher,
    DnsOverrideFetcher,
)
from provisioner.fetchers.base import BaseFetcher
from provisioner.settings import Settings

ARTIFACT_NAME = "bedrock-server"
ARCHIVE_NAME = "bedrock-server.zip"
SERVER_BINARY = "bedrock_server"

DOWNLOAD_HOSTS = [
    "minecraft.azureedge.net",
    "minecraft.net",
    "download.minecraft.net",
]

DEFAULT_PROPERTIES = {
    "server-name": "Krish Home Server",
    "gamemode": "survival",
    "difficulty": "easy",
    "allow-cheats": "false",
    "max-players": "20",
    "online-mode": "true",
    "allow-list": "false",
    "server-port": "19132",
    "server-portv6": "19133",
    "enable-lan-visibility": "true",
    "view-distance": "32",
    "tick-distance": "4",
    "player-idle-timeout": "30",
    "max-threads": "8",
}


class InstallError(Exception):
    """The fetched archive could not be turned into a runnable server."""


def download_urls(version: str) -> list[str]:
    """Return the CDN URLs that have served bedrock-server-<version>.zip."""
    return [
        f"https://{host}/bin-linux/bedrock-server-{version}.zip"
        for host in DOWNLOAD_HOSTS
    ]


def bedrock_artifact(settings: Settings) -> Artifact:
    return Artifact(
        name=ARTIFACT_NAME,
        version=settings.minecraft_version,
        dest=Path(settings.server_dir) / ARCHIVE_NAME,
        min_size=settings.min_size,
    )


def default_strategies(settings: Settings) -> list[BaseFetcher]:
    """Cheapest first: plain download, explicit resolvers, then the image pull."""
    urls = download_urls(settings.minecraft_version)
    return [
        DirectDownloadFetcher(
            urls,
            timeout=settings.timeout,
            attempts=settings.attempts,
            retry_delay=settings.retry_delay,
            progress=settings.progress,
        ),
        DnsOverrideFetcher(
            urls,
            resolvers=settings.resolvers,
            timeout=settings.timeout,
            attempts=settings.attempts,
            retry_delay=settings.retry_delay,
            progress=settings.progress,
        ),
        ContainerExtractFetcher(
            settings.container_image,
            settings.container_path,
            runtime=ContainerRuntime(
                sudo=settings.container_sudo, strategy=ContainerExtractFetcher.name
            ),
        ),
    ]


def install_server(archive: Path, server_dir: Path) -> Path:
    """Unpack *archive* into *server_dir* and mark the server binary executable.

    Returns the path of the server binary.

    Raises:
        InstallError: If the archive is not a zip or lacks the server binary.
    """
    archive = Path(archive)
    server_dir = Path(server_dir)
    server_dir.mkdir(parents=True, exist_ok=True)

    try:
        with zipfile.ZipFile(archive) as zf:
            zf.extractall(server_dir)
    except (zipfile.BadZipFile, FileNotFoundError) as exc:
        raise InstallError(f"Cannot unpack {archive}: {exc}") from exc

    binary = server_dir / SERVER_BINARY
    if not binary.is_file():
        raise InstallError(f"{SERVER_BINARY} missing after unpacking {archive}")

    mode = binary.stat().st_mode
    binary.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    logger.info(f"Installed {binary}")
    return binary


def write_default_properties(server_dir: Path) -> bool:
    """Write server.properties unless one exists. Returns True if written."""
    path = Path(server_dir) / "server.properties"
    if path.exists():
        logger.info(f"Keeping existing {path}")
        return False

    path.write_text("".join(f"{k}={v}\n" for k, v in DEFAULT_PROPERTIES.items()))
    logger.info(f"Created default {path}")
    return True
