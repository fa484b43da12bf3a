"""Exception hierarchy for pkgtrust.

All exceptions inherit from PkgTrustError (single catch point).
"""

from __future__ import annotations


class PkgTrustError(Exception):
    """Base exception for all pkgtrust errors."""


class MetricError(PkgTrustError):
    """A metric provider could not compute its score."""


class MetricTimeoutError(MetricError):
    """A metric provider did not settle within the allotted time."""

    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(f"Metric did not complete within {timeout}s")


class GitHubAPIError(PkgTrustError):
    """Error communicating with the GitHub GraphQL API."""


class RepositoryNotFoundError(GitHubAPIError):
    """Repository does not exist or is not accessible with the current token."""

    def __init__(self, owner: str, repo: str) -> None:
        self.owner = owner
        self.repo = repo
        super().__init__(f"Repository {owner}/{repo} not found or is inaccessible")


class UrlResolutionError(PkgTrustError):
    """A URL could not be resolved to a GitHub owner/repo pair."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Cannot resolve {url}: {reason}")
