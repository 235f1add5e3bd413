"""Bounded, streaming HTTP transfers to a destination file.

Each function performs exactly one network call with its own connect/stall
timeout and raises NetworkFailure on any transport-level problem. Whether the
bytes on disk are the artifact is decided by verification, not here.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

import requests
from curl_cffi import CurlECode, CurlOpt
from curl_cffi import requests as curl_requests
from curl_cffi.requests.exceptions import RequestException
from tqdm import tqdm

from .exceptions import NetworkFailure

CHUNK_SIZE = 1024 * 64

# Errors that say the URL itself is unusable; retrying cannot help.
PERMANENT_CURL_CODES = {CurlECode.UNSUPPORTED_PROTOCOL, CurlECode.URL_MALFORMAT}
PERMANENT_REQUESTS_ERRORS = (
    requests.exceptions.InvalidSchema,
    requests.exceptions.InvalidURL,
    requests.exceptions.MissingSchema,
)


def _write_stream(
    chunks: Iterable[bytes], dest: Path, total: int | None, label: str, progress: bool
) -> int:
    written = 0
    with open(dest, "wb") as f, tqdm(
        total=total,
        unit="B",
        unit_scale=True,
        desc=label[:50],
        disable=not progress,
        leave=False,
    ) as pbar:
        for chunk in chunks:
            if not chunk:
                continue
            f.write(chunk)
            written += len(chunk)
            pbar.update(len(chunk))
    return written


def _content_length(headers) -> int | None:
    value = headers.get("content-length") if headers else None
    try:
        return int(value) if value else None
    except (TypeError, ValueError):
        return None


def download_with_curl_cffi(
    url: str,
    dest: Path,
    timeout: float = 20.0,
    resolve: list[str] | None = None,
    progress: bool = False,
    strategy: str = "curl_cffi",
) -> int:
    """Stream *url* into *dest* with curl-cffi. Returns bytes written.

    *resolve* takes curl ``host:port:address`` pins so a lookup done against an
    explicit resolver is honoured for this one transfer only.
    """
    # Connect and stall bounds only; total transfer time is unbounded.
    curl_options = {
        CurlOpt.CONNECTTIMEOUT: max(1, int(timeout)),
        CurlOpt.LOW_SPEED_LIMIT: 1,
        CurlOpt.LOW_SPEED_TIME: max(1, int(timeout)),
    }
    if resolve:
        curl_options[CurlOpt.RESOLVE] = list(resolve)

    try:
        response = curl_requests.get(
            url,
            impersonate="chrome",
            timeout=None,
            allow_redirects=True,
            stream=True,
            curl_options=curl_options,
        )
    except RequestException as exc:
        raise NetworkFailure(
            f"curl-cffi connection failed for {url}: {exc}",
            strategy=strategy,
            retryable=getattr(exc, "code", None) not in PERMANENT_CURL_CODES,
        ) from exc

    try:
        if not 200 <= response.status_code < 300:
            raise NetworkFailure(
                f"HTTP error {response.status_code} for {url}", strategy=strategy
            )
        return _write_stream(
            response.iter_content(chunk_size=CHUNK_SIZE),
            Path(dest),
            _content_length(response.headers),
            url,
            progress,
        )
    except RequestException as exc:
        raise NetworkFailure(
            f"curl-cffi transfer interrupted for {url}: {exc}", strategy=strategy
        ) from exc
    finally:
        response.close()


def download_with_requests(
    url: str,
    dest: Path,
    timeout: float = 20.0,
    progress: bool = False,
    strategy: str = "requests",
) -> int:
    """Stream *url* into *dest* with requests. Returns bytes written."""
    try:
        with requests.get(
            url, stream=True, timeout=(timeout, timeout), allow_redirects=True
        ) as response:
            response.raise_for_status()
            return _write_stream(
                response.iter_content(chunk_size=CHUNK_SIZE),
                Path(dest),
                _content_length(response.headers),
                url,
                progress,
            )
    except requests.RequestException as exc:
        raise NetworkFailure(
            f"requests transfer failed for {url}: {exc}",
            strategy=strategy,
            retryable=not isinstance(exc, PERMANENT_REQUESTS_ERRORS),
        ) from exc
