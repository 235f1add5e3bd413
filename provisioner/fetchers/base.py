"""Base types for the fetch strategy module."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from .exceptions import FetchError

# Anything at or below this is an error page or a truncated transfer, not a
# server distribution.
MIN_PLAUSIBLE_SIZE = 1_000_000


@dataclass(frozen=True)
class Artifact:
    """Logical identity of the thing being fetched."""

    name: str
    version: str
    dest: Path
    min_size: int = MIN_PLAUSIBLE_SIZE

    def __post_init__(self):
        if not self.name:
            raise ValueError("Artifact name must not be empty")
        if not self.version:
            raise ValueError("Artifact version must not be empty")
        if self.min_size < 0:
            raise ValueError("min_size must not be negative")
        object.__setattr__(self, "dest", Path(self.dest))

    def __str__(self) -> str:
        return f"{self.name} {self.version}"


@dataclass
class FetchResult:
    """Successful outcome: a verified file at the destination."""

    path: Path
    size_bytes: int
    strategy_used: str
    source: str
    report: FetchReport | None = field(default=None, repr=False, compare=False)


@dataclass
class Attempt:
    """One (strategy, outcome) pair in a fetch session."""

    strategy: str
    result: FetchResult | None = None
    error: FetchError | None = None

    @property
    def succeeded(self) -> bool:
        return self.result is not None

    def describe(self) -> str:
        if self.result is not None:
            return (
                f"{self.strategy}: ok ({self.result.size_bytes} bytes "
                f"from {self.result.source})"
            )
        kind = getattr(self.error, "kind", "generic")
        return f"{self.strategy}: {kind} failure: {self.error}"


@dataclass
class FetchReport:
    """Ordered log of every strategy attempt made by one fetch call.

    Diagnostic only: the manager's single decision is whether any attempt
    succeeded.
    """

    artifact: Artifact
    attempts: list[Attempt] = field(default_factory=list)

    def record_success(self, strategy: str, result: FetchResult) -> None:
        self.attempts.append(Attempt(strategy=strategy, result=result))

    def record_failure(self, strategy: str, error: FetchError) -> None:
        self.attempts.append(Attempt(strategy=strategy, error=error))

    @property
    def succeeded(self) -> bool:
        return any(attempt.succeeded for attempt in self.attempts)

    @property
    def failures(self) -> list[FetchError]:
        return [a.error for a in self.attempts if a.error is not None]

    def __len__(self) -> int:
        return len(self.attempts)

    def summary(self) -> str:
        lines = [f"Fetch report for {self.artifact} -> {self.artifact.dest}"]
        for index, attempt in enumerate(self.attempts, start=1):
            lines.append(f"  {index}. {attempt.describe()}")
        return "\n".join(lines)


class BaseFetcher(Protocol):
    """Protocol that all fetch strategies must implement."""

    name: str

    def fetch(self, artifact: Artifact) -> FetchResult:
        """Place *artifact* at its destination. Raises FetchError on failure."""
        ...
