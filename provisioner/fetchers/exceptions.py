"""Custom exceptions for the fetch strategy module."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .base import FetchReport


class FetchError(Exception):
    """A single fetch strategy failed."""

    kind = "generic"

    def __init__(self, message: str, strategy: str):
        self.strategy = strategy
        super().__init__(message)


class NetworkFailure(FetchError):
    """Timeout, DNS failure, refused connection or non-2xx response."""

    kind = "network"

    def __init__(self, message: str, strategy: str, retryable: bool = True):
        # False for malformed URLs and unsupported schemes.
        self.retryable = retryable
        super().__init__(message, strategy)


class IntegrityFailure(FetchError):
    """The strategy produced no file, or one too small to be the artifact."""

    kind = "integrity"


class RuntimeUnavailable(FetchError):
    """The container runtime is not installed or the user may not use it."""

    kind = "runtime"


class AllStrategiesExhausted(Exception):
    """All fetch strategies failed for an artifact."""

    def __init__(self, message: str, report: FetchReport | None = None):
        self.report = report
        super().__init__(message)

    @property
    def errors(self) -> list[FetchError]:
        if self.report is None:
            return []
        return self.report.failures
