"""End-to-end scoring pipeline for input URLs."""

import logging
from collections.abc import AsyncIterator, Iterable

import httpx

from pkgtrust.adapters.npm import NpmAdapter
from pkgtrust.adapters.resolver import UrlResolver
from pkgtrust.analyzers.github import GitHubFetcher
from pkgtrust.analyzers.scorer import Scorer
from pkgtrust.config import Settings
from pkgtrust.errors import UrlResolutionError
from pkgtrust.metrics import (
    BusFactorMetric,
    CorrectnessMetric,
    LicenseMetric,
    RampUpMetric,
    ResponsivenessMetric,
)
from pkgtrust.metrics.base import MetricFunction
from pkgtrust.models.schemas import ScoreReport

logger = logging.getLogger(__name__)


class ScoringPipeline:
    """Orchestrates scoring for repository and package URLs.

    Pipeline stages:
    1. Resolve the URL to a GitHub owner/repo (npm packages via the registry)
    2. Run all metric providers concurrently
    3. Aggregate outcomes into a ScoreReport

    Use as an async context manager so the shared HTTP client is closed.
    """

    def __init__(self, settings: Settings) -> None:
        """Initialize the pipeline.

        Args:
            settings: Process configuration.
        """
        self.settings = settings
        self._http_client: httpx.AsyncClient | None = None
        self.github: GitHubFetcher | None = None
        self.resolver: UrlResolver | None = None
        self.scorer: Scorer | None = None

    async def __aenter__(self) -> "ScoringPipeline":
        """Set up shared HTTP client and providers."""
        self._http_client = httpx.AsyncClient(timeout=self.settings.http_timeout)
        self.github = GitHubFetcher(token=self.settings.github_token, client=self._http_client)
        self.resolver = UrlResolver(NpmAdapter(client=self._http_client))
        self.scorer = Scorer(self.build_metrics(), timeout=self.settings.metric_timeout)

        if not self.settings.github_token:
            logger.warning("GITHUB_TOKEN is not set; GitHub metrics will score 0")
        return self

    async def __aexit__(self, *args) -> None:
        """Clean up HTTP client."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    def build_metrics(self) -> tuple[MetricFunction, ...]:
        """Build the metric providers in Scorer.METRIC_ORDER."""
        return (
            RampUpMetric(self.github),
            CorrectnessMetric(self.settings),
            BusFactorMetric(self.github),
            ResponsivenessMetric(self.github),
            LicenseMetric(self.github),
        )

    def _require_open(self) -> None:
        if self.scorer is None or self.resolver is None:
            raise RuntimeError("ScoringPipeline must be used as an async context manager")

    async def score_url(self, url: str) -> ScoreReport:
        """Resolve and score a single URL.

        Returns:
            ScoreReport for the URL.

        Raises:
            UrlResolutionError: If the URL cannot be resolved to a GitHub repository.
        """
        self._require_open()
        repo_ref = await self.resolver.resolve(url)
        logger.info(f"Resolved {url} to {repo_ref.owner}/{repo_ref.repo}")
        return await self.scorer.score(repo_ref.owner, repo_ref.repo, url)

    async def score_urls(
        self, urls: Iterable[str]
    ) -> AsyncIterator[tuple[str, ScoreReport | UrlResolutionError]]:
        """Score URLs one after another, in input order.

        Yields:
            (url, report) on success or (url, error) if the URL could not be resolved.
        """
        for url in urls:
            try:
                yield url, await self.score_url(url)
            except UrlResolutionError as e:
                logger.error(f"Could not resolve {url}: {e}")
                yield url, e
