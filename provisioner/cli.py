"""bedrock-fetch: obtain and install the Minecraft Bedrock dedicated server."""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path

from loguru import logger

from provisioner.bedrock import (
    InstallError,
    bedrock_artifact,
    default_strategies,
    install_server,
    write_default_properties,
)
from provisioner.fetchers import AllStrategiesExhausted, FetchStrategyManager
from provisioner.settings import Settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bedrock-fetch",
        description="Download the Minecraft Bedrock server, falling back "
        "through direct, DNS-overridden and container-image strategies.",
    )
    parser.add_argument("--version", dest="minecraft_version", help="Server version")
    parser.add_argument("--dir", dest="server_dir", type=Path, help="Install dir")
    parser.add_argument(
        "--min-size", type=int, help="Smallest plausible archive size in bytes"
    )
    parser.add_argument(
        "--timeout", type=float, help="Per network call timeout in seconds"
    )
    parser.add_argument(
        "--resolver",
        dest="resolvers",
        action="append",
        help="Nameserver for the DNS-overridden strategy (repeatable)",
    )
    parser.add_argument(
        "--sudo-docker",
        dest="container_sudo",
        action="store_true",
        default=None,
        help="Run docker through sudo for the container strategy",
    )
    parser.add_argument(
        "--no-install", action="store_true", help="Only fetch the archive"
    )
    parser.add_argument(
        "--no-progress",
        dest="progress",
        action="store_false",
        default=None,
        help="Hide download progress bars",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def _apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    fields = (
        "minecraft_version",
        "server_dir",
        "min_size",
        "timeout",
        "resolvers",
        "container_sudo",
        "progress",
    )
    overrides = {
        name: getattr(args, name)
        for name in fields
        if getattr(args, name) is not None
    }
    if args.verbose:
        overrides["log_level"] = "DEBUG"
    return replace(settings, **overrides)


def configure_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level)


def main(argv: list[str] | None = None) -> int:
    """Run the fetch (and install) workflow. Returns the process exit code."""
    args = build_parser().parse_args(argv)
    settings = _apply_overrides(Settings.from_env(), args)
    configure_logging(settings.log_level)

    artifact = bedrock_artifact(settings)
    manager = FetchStrategyManager(default_strategies(settings))

    try:
        result = manager.fetch(artifact)
    except AllStrategiesExhausted as exc:
        logger.error(f"Failed to obtain {artifact}: {exc}")
        if exc.report is not None:
            print(exc.report.summary(), file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        logger.warning("Interrupted; partial download removed")
        return 130

    print(result.report.summary())

    if args.no_install:
        return 0

    try:
        install_server(result.path, settings.server_dir)
    except InstallError as exc:
        logger.error(str(exc))
        return 1
    except KeyboardInterrupt:
        logger.warning(
            f"Interrupted while unpacking; rerun to finish installing into "
            f"{settings.server_dir}"
        )
        return 130
    write_default_properties(settings.server_dir)
    logger.info(f"Bedrock server {artifact.version} ready in {settings.server_dir}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
