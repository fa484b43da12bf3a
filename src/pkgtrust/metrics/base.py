"""Shared metric types."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from pkgtrust.models.schemas import MetricName

if TYPE_CHECKING:
    from pkgtrust.analyzers.github import GitHubFetcher

# (owner, repo) -> normalized score in [0, 1]; failures are raised, never returned
MetricFunction = Callable[[str, str], Awaitable[float]]


def clamp_score(value: float) -> float:
    """Clamp a score into [0, 1]."""
    return max(0.0, min(1.0, value))


class GitHubMetric(ABC):
    """A metric provider computed from GitHub repository data.

    Instances are MetricFunctions: awaiting metric(owner, repo) yields the score.
    """

    name: MetricName

    def __init__(self, github: GitHubFetcher) -> None:
        self.github = github

    @abstractmethod
    async def __call__(self, owner: str, repo: str) -> float:
        """Compute the normalized score for owner/repo."""
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
