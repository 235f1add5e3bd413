"""FetchStrategyManager: orchestrates fetch strategies with fallback and cleanup."""

from __future__ import annotations

from typing import Sequence

from loguru import logger

from .base import Artifact, BaseFetcher, FetchReport, FetchResult
from .exceptions import AllStrategiesExhausted, FetchError
from .verify import discard_partial, verify_download


class FetchStrategyManager:
    """Tries fetch strategies strictly in order and stops at the first verified file."""

    def __init__(self, strategies: Sequence[BaseFetcher]) -> None:
        if not strategies:
            raise ValueError("FetchStrategyManager needs at least one strategy")
        self.strategies = list(strategies)

    def fetch(self, artifact: Artifact) -> FetchResult:
        """Fetch *artifact*, falling back through the strategies.

        Each strategy starts from a clean destination. The returned result
        carries the session's FetchReport; on total failure the report rides
        on AllStrategiesExhausted and nothing is left at the destination.
        """
        report = FetchReport(artifact=artifact)
        artifact.dest.parent.mkdir(parents=True, exist_ok=True)
        succeeded = False

        try:
            for strategy in self.strategies:
                name = getattr(strategy, "name", type(strategy).__name__)
                discard_partial(artifact.dest)
                logger.info(f"Fetching {artifact} with strategy {name}")

                try:
                    result = strategy.fetch(artifact)
                    # Success is decided here, not by the strategy.
                    result.size_bytes = verify_download(
                        artifact.dest, artifact.min_size, name
                    )
                except FetchError as exc:
                    logger.warning(f"Strategy {name} failed for {artifact}: {exc}")
                    report.record_failure(name, exc)
                    continue
                except Exception as exc:
                    logger.exception(f"Strategy {name} crashed for {artifact}")
                    report.record_failure(
                        name, FetchError(f"Unexpected error: {exc}", strategy=name)
                    )
                    continue

                result.path = artifact.dest
                result.report = report
                report.record_success(name, result)
                succeeded = True
                logger.info(
                    f"Fetched {artifact} via {name} ({result.size_bytes} bytes)"
                )
                return result
        finally:
            if not succeeded:
                discard_partial(artifact.dest)

        raise AllStrategiesExhausted(
            f"All strategies exhausted for {artifact}",
            report=report,
        )


def fetch(artifact: Artifact, strategies: Sequence[BaseFetcher]) -> FetchResult:
    """Fetch *artifact* with a one-off manager over *strategies*."""
    return FetchStrategyManager(strategies).fetch(artifact)
