"""Environment-driven settings for the provisioning fetcher."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from provisioner.fetchers.base import MIN_PLAUSIBLE_SIZE
from provisioner.fetchers.dns_fetcher import DEFAULT_RESOLVERS

load_dotenv()

DEFAULT_MINECRAFT_VERSION = "1.21.44.01"
DEFAULT_CONTAINER_IMAGE = "itzg/minecraft-bedrock-server:latest"
DEFAULT_CONTAINER_PATH = "/bedrock"

TRUTHY = {"1", "true", "yes", "on"}


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = os.getenv(name)
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in TRUTHY


@dataclass
class Settings:
    minecraft_version: str = DEFAULT_MINECRAFT_VERSION
    server_dir: Path = field(
        default_factory=lambda: Path.home() / "server-data" / "minecraft"
    )
    min_size: int = MIN_PLAUSIBLE_SIZE
    timeout: float = 20.0
    attempts: int = 3
    retry_delay: float = 3.0
    resolvers: list[str] = field(default_factory=lambda: list(DEFAULT_RESOLVERS))
    container_image: str = DEFAULT_CONTAINER_IMAGE
    container_path: str = DEFAULT_CONTAINER_PATH
    container_sudo: bool = False
    progress: bool = True
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the environment (and a .env file, if present).

        Raises:
            ValueError: If a numeric variable cannot be parsed.
        """
        defaults = cls()
        server_dir = os.getenv("MINECRAFT_DIR")
        return cls(
            minecraft_version=os.getenv(
                "MINECRAFT_VERSION", defaults.minecraft_version
            ),
            server_dir=(
                Path(server_dir).expanduser() if server_dir else defaults.server_dir
            ),
            min_size=int(os.getenv("FETCH_MIN_SIZE", defaults.min_size)),
            timeout=float(os.getenv("FETCH_TIMEOUT", defaults.timeout)),
            attempts=int(os.getenv("FETCH_ATTEMPTS", defaults.attempts)),
            retry_delay=float(os.getenv("FETCH_RETRY_DELAY", defaults.retry_delay)),
            resolvers=_env_list("FETCH_RESOLVERS", defaults.resolvers),
            container_image=os.getenv(
                "FETCH_CONTAINER_IMAGE", defaults.container_image
            ),
            container_path=os.getenv("FETCH_CONTAINER_PATH", defaults.container_path),
            container_sudo=_env_bool("FETCH_CONTAINER_SUDO", defaults.container_sudo),
            progress=_env_bool("FETCH_PROGRESS", defaults.progress),
            log_level=os.getenv("LOG_LEVEL", defaults.log_level).upper(),
        )
