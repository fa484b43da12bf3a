"""Concurrent metric dispatch with per-metric latency measurement."""

import asyncio
import logging
import time
from collections.abc import Sequence

from pkgtrust.errors import MetricError, MetricTimeoutError
from pkgtrust.metrics.base import MetricFunction
from pkgtrust.models.schemas import ConcurrentLatencies, LatencyResult

logger = logging.getLogger(__name__)


def _label(fn: MetricFunction) -> str:
    name = getattr(fn, "name", None)
    if name is not None:
        return getattr(name, "value", str(name))
    return getattr(fn, "__name__", repr(fn))


def _elapsed(start: float) -> float:
    """Seconds since start, rounded to millisecond precision."""
    return round(time.perf_counter() - start, 3)


async def _timed_call(
    fn: MetricFunction,
    owner: str,
    repo: str,
    timeout: float | None,
) -> LatencyResult:
    """Invoke one metric function, capturing its outcome and latency.

    Exceptions are captured rather than raised; cancellation still propagates.
    A function that resolves to None is recorded as a MetricError.
    """
    label = _label(fn)
    deadline = asyncio.timeout(timeout)
    start = time.perf_counter()
    try:
        async with deadline:
            result = await fn(owner, repo)
    except TimeoutError as e:
        latency = _elapsed(start)
        # Only our own deadline counts as a timeout, not one raised by the metric
        if not deadline.expired():
            logger.warning(f"{label} for {owner}/{repo} failed after {latency}s: {e!r}")
            return LatencyResult(latency=latency, error=e)
        error = MetricTimeoutError(timeout)
        error.__cause__ = e
        logger.warning(f"{label} for {owner}/{repo} timed out after {latency}s")
        return LatencyResult(latency=latency, error=error)
    except Exception as e:
        latency = _elapsed(start)
        logger.warning(f"{label} for {owner}/{repo} failed after {latency}s: {e}")
        return LatencyResult(latency=latency, error=e)

    latency = _elapsed(start)
    if result is None:
        logger.warning(f"{label} for {owner}/{repo} returned no score after {latency}s")
        return LatencyResult(latency=latency, error=MetricError(f"{label} returned no score"))
    logger.debug(f"{label} for {owner}/{repo} returned {result} in {latency}s")
    return LatencyResult(latency=latency, result=result)


async def measure_concurrent_latencies(
    fns: Sequence[MetricFunction],
    owner: str,
    repo: str,
    timeout: float | None = None,
) -> ConcurrentLatencies:
    """Run metric functions concurrently against one repository.

    Every function is started immediately; the call returns once all of them
    have settled. A failing function never aborts the others.

    Args:
        fns: Ordered metric functions; output lists follow this order.
        owner: Repository owner.
        repo: Repository name.
        timeout: Optional per-function limit in seconds. Expiry is recorded
            as a MetricTimeoutError for that function. None waits indefinitely.

    Returns:
        ConcurrentLatencies with latencies, results and errors index-aligned with fns.

    Raises:
        ValueError: If fns is empty.
    """
    if not fns:
        raise ValueError("At least one metric function is required")

    outcomes = await asyncio.gather(
        *(_timed_call(fn, owner, repo, timeout) for fn in fns)
    )

    return ConcurrentLatencies(
        latencies=[outcome.latency for outcome in outcomes],
        results=[outcome.result for outcome in outcomes],
        errors=[outcome.error for outcome in outcomes],
    )
