"""Responsive maintainer metric (issue response time)."""

import logging
from datetime import datetime
from typing import Any

from pkgtrust.metrics.base import GitHubMetric, clamp_score
from pkgtrust.models.schemas import MetricName

logger = logging.getLogger(__name__)

# Response times at or beyond this many minutes score zero
MAX_RESPONSE_MINUTES = 4 * 7 * 24 * 60
ISSUE_SAMPLE = 100


def _parse_time(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _minutes_between(start: str, end: str) -> int:
    """Whole minutes from start to end, truncated toward zero."""
    return int((_parse_time(end) - _parse_time(start)).total_seconds() / 60)


def response_minutes(issue: dict[str, Any]) -> int:
    """Response time of a single issue.

    Uses the first comment if any, else the closing time, else the maximum.
    """
    if issue.get("first_comment_at"):
        return _minutes_between(issue["created_at"], issue["first_comment_at"])
    if issue.get("closed_at"):
        return _minutes_between(issue["created_at"], issue["closed_at"])
    return MAX_RESPONSE_MINUTES


def average_response_minutes(issues: list[dict[str, Any]]) -> float:
    """Average response time in minutes; 0 when there are no issues."""
    if not issues:
        return 0.0
    return sum(response_minutes(issue) for issue in issues) / len(issues)


def normalize_response_time(average_minutes: float, max_minutes: int = MAX_RESPONSE_MINUTES) -> float:
    """Map an average response time to [0, 1]; faster is better."""
    clamped = min(average_minutes, max_minutes)
    return clamp_score(1 - clamped / max_minutes)


class ResponsivenessMetric(GitHubMetric):
    """Inverse of the average time maintainers take to respond to open issues."""

    name = MetricName.RESPONSIVE_MAINTAINER

    async def __call__(self, owner: str, repo: str) -> float:
        issues = await self.github.fetch_open_issues(owner, repo, limit=ISSUE_SAMPLE)
        average = average_response_minutes(issues)
        score = normalize_response_time(average)
        logger.info(
            f"Average issue response for {owner}/{repo}: {average:.1f} minutes, score {score:.3f}"
        )
        return score
