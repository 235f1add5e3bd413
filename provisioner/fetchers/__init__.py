"""Fetch strategy module: direct download, DNS-overridden download, container extraction."""

from .base import Artifact, FetchReport, FetchResult
from .container_fetcher import ContainerExtractFetcher
from .direct_fetcher import DirectDownloadFetcher
from .dns_fetcher import DnsOverrideFetcher
from .exceptions import (
    AllStrategiesExhausted,
    FetchError,
    IntegrityFailure,
    NetworkFailure,
    RuntimeUnavailable,
)
from .manager import FetchStrategyManager, fetch
from .runtime import ContainerRuntime

__all__ = [
    "Artifact",
    "FetchReport",
    "FetchResult",
    "FetchStrategyManager",
    "fetch",
    "DirectDownloadFetcher",
    "DnsOverrideFetcher",
    "ContainerExtractFetcher",
    "ContainerRuntime",
    "FetchError",
    "NetworkFailure",
    "IntegrityFailure",
    "RuntimeUnavailable",
    "AllStrategiesExhausted",
]
