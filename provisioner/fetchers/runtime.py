"""ContainerRuntime: the handful of docker CLI calls the extraction strategy needs."""

from __future__ import annotations

from pathlib import Path

import sh
from loguru import logger

from .exceptions import IntegrityFailure, NetworkFailure, RuntimeUnavailable

UNAVAILABLE_SIGNATURES = [
    "permission denied",
    "cannot connect to the docker daemon",
    "is the docker daemon running",
    "a password is required",
    "command not found",
]


def _stderr(exc: sh.ErrorReturnCode) -> str:
    raw = exc.stderr or b""
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="replace")
    return raw.strip()


class ContainerRuntime:
    """Thin wrapper over the docker CLI invoked through ``sh``.

    Whether to go through ``sudo`` is the caller's decision; nothing here
    escalates on its own.
    """

    def __init__(
        self,
        command: str = "docker",
        sudo: bool = False,
        timeout: float = 900.0,
        strategy: str = "container",
    ):
        self.command = command
        self.sudo = sudo
        self.timeout = timeout
        self.strategy = strategy

    def _cli(self) -> sh.Command:
        try:
            if self.sudo:
                return sh.Command("sudo").bake("-n", self.command)
            return sh.Command(self.command)
        except sh.CommandNotFound as exc:
            raise RuntimeUnavailable(
                f"Container runtime not installed: {exc}", strategy=self.strategy
            ) from exc

    def _run(self, *args: str, on_error=NetworkFailure) -> str:
        cli = self._cli()
        try:
            output = cli(*args, _timeout=self.timeout)
        except sh.TimeoutException as exc:
            raise NetworkFailure(
                f"`{self.command} {args[0]}` timed out after {self.timeout}s",
                strategy=self.strategy,
            ) from exc
        except sh.ErrorReturnCode as exc:
            stderr = _stderr(exc)
            lowered = stderr.lower()
            if any(sig in lowered for sig in UNAVAILABLE_SIGNATURES):
                raise RuntimeUnavailable(
                    f"Container runtime refused `{args[0]}`: {stderr}",
                    strategy=self.strategy,
                ) from exc
            raise on_error(
                f"`{self.command} {args[0]}` failed: {stderr or exc}",
                strategy=self.strategy,
            ) from exc
        return str(output).strip()

    def pull(self, image: str) -> None:
        logger.info(f"Pulling image {image}")
        self._run("pull", image, on_error=NetworkFailure)

    def create_and_copy(self, image: str, internal_path: str, dest: Path) -> str:
        """Create a throwaway container from *image* and copy *internal_path* out.

        Returns the container id; the caller owns removing it. If the copy
        fails the container is removed here before the error propagates.
        """
        container_id = self._run("create", image, on_error=RuntimeUnavailable)
        try:
            self._run(
                "cp",
                f"{container_id}:{internal_path}",
                str(dest),
                on_error=IntegrityFailure,
            )
        except BaseException:
            self.remove_container(container_id)
            raise
        return container_id

    def remove_container(self, container_id: str) -> None:
        """Force-remove *container_id*; failures are logged, not raised."""
        try:
            self._run("rm", "-f", container_id)
        except (NetworkFailure, RuntimeUnavailable) as exc:
            logger.warning(f"Could not remove container {container_id}: {exc}")
