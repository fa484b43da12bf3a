"""Data models and schemas."""

from pkgtrust.models.schemas import (
    ConcurrentLatencies,
    LatencyResult,
    MetricName,
    PackageMetadata,
    RepoRef,
    ScoreReport,
)

__all__ = [
    "ConcurrentLatencies",
    "LatencyResult",
    "MetricName",
    "PackageMetadata",
    "RepoRef",
    "ScoreReport",
]
