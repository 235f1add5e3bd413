"""ContainerExtractFetcher: last-resort extraction of files baked into an image."""

from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path

from loguru import logger

from .base import Artifact, FetchResult
from .exceptions import IntegrityFailure
from .runtime import ContainerRuntime
from .verify import verify_download


class ContainerExtractFetcher:
    """Pull *image*, copy *internal_path* out of a throwaway container.

    A copied directory is zipped so the destination has the same shape as a
    downloaded distribution archive.
    """

    name = "container"

    def __init__(
        self,
        image: str,
        internal_path: str,
        runtime: ContainerRuntime | None = None,
    ):
        self.image = image
        self.internal_path = internal_path
        self.runtime = runtime or ContainerRuntime(strategy=self.name)

    def fetch(self, artifact: Artifact) -> FetchResult:
        """Extract *artifact* from the image. Raises FetchError on failure."""
        self.runtime.pull(self.image)

        with tempfile.TemporaryDirectory(
            prefix=f".{artifact.name}-", dir=artifact.dest.parent
        ) as staging:
            extracted = Path(staging) / "extracted"
            container_id = self.runtime.create_and_copy(
                self.image, self.internal_path, extracted
            )
            self.runtime.remove_container(container_id)
            self._place(extracted, artifact.dest, Path(staging))

        size = verify_download(artifact.dest, artifact.min_size, self.name)
        logger.info(f"[{self.name}] Extracted {size} bytes from {self.image}")
        return FetchResult(
            path=artifact.dest,
            size_bytes=size,
            strategy_used=self.name,
            source=f"{self.image}:{self.internal_path}",
        )

    def _place(self, extracted: Path, dest: Path, staging: Path) -> None:
        if extracted.is_dir():
            archive = shutil.make_archive(
                str(staging / "archive"), "zip", root_dir=extracted
            )
            os.replace(archive, dest)
        elif extracted.is_file():
            os.replace(extracted, dest)
        else:
            raise IntegrityFailure(
                f"Nothing copied out of {self.image}:{self.internal_path}",
                strategy=self.name,
            )
