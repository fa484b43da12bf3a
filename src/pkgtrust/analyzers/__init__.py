"""Analyzers for fetching repository data and scoring it."""

from pkgtrust.analyzers.github import GitHubFetcher
from pkgtrust.analyzers.latency import measure_concurrent_latencies
from pkgtrust.analyzers.pipeline import ScoringPipeline
from pkgtrust.analyzers.scorer import Scorer

__all__ = ["GitHubFetcher", "ScoringPipeline", "Scorer", "measure_concurrent_latencies"]
