"""DirectDownloadFetcher: plain HTTPS download from an ordered URL list."""

from __future__ import annotations

import time
from typing import Callable, Iterator, Sequence

from loguru import logger

from .base import Artifact, FetchResult
from .exceptions import FetchError, IntegrityFailure, NetworkFailure
from .transfer import download_with_curl_cffi, download_with_requests
from .verify import discard_partial, verify_download

# (label, callable(url, dest, timeout=, progress=, strategy=))
Transport = tuple[str, Callable[..., int]]

DEFAULT_TRANSPORTS: list[Transport] = [
    ("curl_cffi", download_with_curl_cffi),
    ("requests", download_with_requests),
]


class DirectDownloadFetcher:
    """Try every URL with every transport, a few times each, until one verifies."""

    name = "direct"

    def __init__(
        self,
        urls: Sequence[str],
        timeout: float = 20.0,
        attempts: int = 3,
        retry_delay: float = 3.0,
        transports: Sequence[Transport] | None = None,
        progress: bool = False,
    ):
        if not urls:
            raise ValueError(f"{type(self).__name__} needs at least one URL")
        if attempts < 1:
            raise ValueError("attempts must be at least 1")
        self.urls = list(urls)
        self.timeout = timeout
        self.attempts = attempts
        self.retry_delay = retry_delay
        self.transports = list(transports or DEFAULT_TRANSPORTS)
        self.progress = progress

    def fetch(self, artifact: Artifact) -> FetchResult:
        """Download *artifact* from the first URL that yields a verified file."""
        errors: list[FetchError] = []

        for url in self.urls:
            logger.info(f"[{self.name}] Trying {url}")
            try:
                size = self._fetch_url(url, artifact, errors)
            except IntegrityFailure as exc:
                # The URL answers, but with the wrong thing; retrying won't help.
                logger.warning(f"[{self.name}] {exc}")
                errors.append(exc)
                discard_partial(artifact.dest)
                continue
            if size is not None:
                return FetchResult(
                    path=artifact.dest,
                    size_bytes=size,
                    strategy_used=self.name,
                    source=url,
                )

        discard_partial(artifact.dest)
        raise self._exhausted(errors)

    def _transfers(self, url: str) -> Iterator[tuple[str, Callable]]:
        """Yield (label, transfer) pairs to try for *url*, in order."""
        for label, transport in self.transports:

            def transfer(dest, transport=transport):
                return transport(
                    url,
                    dest,
                    timeout=self.timeout,
                    progress=self.progress,
                    strategy=self.name,
                )

            yield label, transfer

    def _fetch_url(
        self, url: str, artifact: Artifact, errors: list[FetchError]
    ) -> int | None:
        for label, transfer in self._transfers(url):
            for attempt in range(1, self.attempts + 1):
                discard_partial(artifact.dest)
                try:
                    transfer(artifact.dest)
                except NetworkFailure as exc:
                    logger.warning(
                        f"[{self.name}] {label} attempt {attempt}/{self.attempts} "
                        f"failed: {exc}"
                    )
                    errors.append(exc)
                    if not exc.retryable:
                        # The URL itself is unusable; no transport will fare better.
                        return None
                    if attempt < self.attempts and self.retry_delay:
                        time.sleep(self.retry_delay)
                    continue
                return verify_download(artifact.dest, artifact.min_size, self.name)
        return None

    def _exhausted(self, errors: list[FetchError]) -> FetchError:
        detail = "; ".join(str(e) for e in errors) or "no attempts made"
        message = f"All URLs failed ({', '.join(self.urls)}): {detail}"
        if errors and all(isinstance(e, IntegrityFailure) for e in errors):
            return IntegrityFailure(message, strategy=self.name)
        return NetworkFailure(message, strategy=self.name)
