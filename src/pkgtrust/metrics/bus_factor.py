"""Bus factor metric."""

import logging
from collections import Counter

from pkgtrust.errors import MetricError
from pkgtrust.metrics.base import GitHubMetric, clamp_score
from pkgtrust.models.schemas import MetricName

logger = logging.getLogger(__name__)

# Share of total commits the top contributors must reach
COMMIT_SHARE = 0.5
# Bus factor at which the score saturates to 1.0
BUS_FACTOR_TARGET = 5
COMMIT_SAMPLE = 100


def calculate_bus_factor(authors: list[str]) -> int:
    """Minimum number of top authors whose commits reach 50% of all commits.

    Args:
        authors: One author name per commit.

    Returns:
        The bus factor; 0 when there are no commits.
    """
    total = len(authors)
    if total == 0:
        return 0

    counts = Counter(authors)
    for author, count in counts.most_common():
        logger.debug(f"{author}: {count} commits")

    cumulative = 0
    bus_factor = 0
    for _, count in counts.most_common():
        cumulative += count
        bus_factor += 1
        if cumulative >= total * COMMIT_SHARE:
            break

    logger.info(f"Bus factor {bus_factor} over {total} commits")
    return bus_factor


def bus_factor_score(bus_factor: int) -> float:
    """Normalize a bus factor to [0, 1]."""
    return clamp_score(bus_factor / BUS_FACTOR_TARGET)


class BusFactorMetric(GitHubMetric):
    """Contributor concentration over the most recent commits."""

    name = MetricName.BUS_FACTOR

    async def __call__(self, owner: str, repo: str) -> float:
        authors = await self.github.fetch_commit_authors(owner, repo, limit=COMMIT_SAMPLE)
        if authors is None:
            raise MetricError(f"{owner}/{repo} has no default branch")
        return bus_factor_score(calculate_bus_factor(authors))
