"""DnsOverrideFetcher: download with name resolution done by explicit resolvers.

The host's resolver configuration is never touched. Each lookup goes straight
to one of the configured nameservers and the answer is pinned onto that single
curl transfer.
"""

from __future__ import annotations

import ipaddress
from typing import Callable, Iterator, Sequence
from urllib.parse import urlparse

import dns.exception
import dns.resolver
from loguru import logger

from .direct_fetcher import DirectDownloadFetcher
from .exceptions import NetworkFailure
from .transfer import download_with_curl_cffi

DEFAULT_RESOLVERS = ["8.8.8.8", "1.1.1.1", "8.8.4.4"]

DEFAULT_PORTS = {"http": 80, "https": 443}


def resolve_host(
    host: str, nameserver: str, timeout: float = 5.0, strategy: str = "dns_override"
) -> list[str]:
    """Look up IPv4 addresses for *host* using only *nameserver*."""
    resolver = dns.resolver.Resolver(configure=False)
    resolver.nameservers = [nameserver]
    resolver.timeout = timeout
    resolver.lifetime = timeout
    try:
        answer = resolver.resolve(host, "A")
    except dns.exception.DNSException as exc:
        raise NetworkFailure(
            f"Lookup of {host} via {nameserver} failed: {exc}", strategy=strategy
        ) from exc

    addresses = [record.address for record in answer]
    if not addresses:
        raise NetworkFailure(
            f"{nameserver} returned no addresses for {host}", strategy=strategy
        )
    return addresses


def _is_ip(host: str) -> bool:
    try:
        ipaddress.ip_address(host)
    except ValueError:
        return False
    return True


class DnsOverrideFetcher(DirectDownloadFetcher):
    """Direct download whose lookups go to an explicit resolver list."""

    name = "dns_override"

    def __init__(
        self,
        urls: Sequence[str],
        resolvers: Sequence[str] | None = None,
        timeout: float = 20.0,
        attempts: int = 3,
        retry_delay: float = 3.0,
        progress: bool = False,
    ):
        super().__init__(
            urls,
            timeout=timeout,
            attempts=attempts,
            retry_delay=retry_delay,
            progress=progress,
        )
        self.resolvers = list(DEFAULT_RESOLVERS if resolvers is None else resolvers)
        if not self.resolvers:
            raise ValueError("DnsOverrideFetcher needs at least one resolver")

    def _transfers(self, url: str) -> Iterator[tuple[str, Callable]]:
        for nameserver in self.resolvers:

            def transfer(dest, nameserver=nameserver):
                return download_with_curl_cffi(
                    url,
                    dest,
                    timeout=self.timeout,
                    resolve=self._pins(url, nameserver),
                    progress=self.progress,
                    strategy=self.name,
                )

            yield f"resolver {nameserver}", transfer

    def _pins(self, url: str, nameserver: str) -> list[str]:
        """Build curl ``host:port:addr[,addr]`` entries for *url*."""
        parsed = urlparse(url)
        host = parsed.hostname
        if not host:
            raise NetworkFailure(
                f"No host in URL {url!r}", strategy=self.name, retryable=False
            )
        if parsed.scheme not in DEFAULT_PORTS:
            raise NetworkFailure(
                f"Unsupported URL scheme {parsed.scheme!r} in {url}",
                strategy=self.name,
                retryable=False,
            )
        if _is_ip(host):
            return []

        port = parsed.port or DEFAULT_PORTS[parsed.scheme]
        addresses = resolve_host(
            host, nameserver, timeout=self.timeout, strategy=self.name
        )
        logger.debug(f"[{self.name}] {host} -> {addresses} via {nameserver}")
        return [f"{host}:{port}:{','.join(addresses)}"]
