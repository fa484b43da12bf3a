"""Score aggregator combining metric outcomes into a trust report."""

import logging
import math
from collections.abc import Sequence

from pkgtrust.analyzers.latency import measure_concurrent_latencies
from pkgtrust.metrics.base import MetricFunction
from pkgtrust.models.schemas import ConcurrentLatencies, MetricName, ScoreReport

logger = logging.getLogger(__name__)


class Scorer:
    """Runs the metric providers for a repository and builds its ScoreReport.

    Scoring weights (total 100%):
    - RampUp: 12.5%
    - Correctness: 12.5%
    - BusFactor: 25%
    - ResponsiveMaintainer: 25%
    - License: 25%

    A metric that failed, timed out or returned an unusable value is scored
    DEFAULT_SCORE and reported with DEFAULT_LATENCY.
    """

    # Dispatch order; metrics are correlated with their outcomes by position
    METRIC_ORDER = (
        MetricName.RAMP_UP,
        MetricName.CORRECTNESS,
        MetricName.BUS_FACTOR,
        MetricName.RESPONSIVE_MAINTAINER,
        MetricName.LICENSE,
    )

    # Score weights
    WEIGHTS = {
        MetricName.RAMP_UP: 0.125,
        MetricName.CORRECTNESS: 0.125,
        MetricName.BUS_FACTOR: 0.25,
        MetricName.RESPONSIVE_MAINTAINER: 0.25,
        MetricName.LICENSE: 0.25,
    }

    DEFAULT_SCORE = 0.0
    DEFAULT_LATENCY = -1.0

    def __init__(
        self,
        metrics: Sequence[MetricFunction],
        timeout: float | None = None,
    ) -> None:
        """Initialize the scorer.

        Args:
            metrics: One provider per entry of METRIC_ORDER, in that order.
            timeout: Optional per-metric timeout in seconds.

        Raises:
            ValueError: If the number of metrics does not match METRIC_ORDER.
        """
        if len(metrics) != len(self.METRIC_ORDER):
            raise ValueError(
                f"Expected {len(self.METRIC_ORDER)} metrics "
                f"({', '.join(m.value for m in self.METRIC_ORDER)}), got {len(metrics)}"
            )
        self.metrics = tuple(metrics)
        self.timeout = timeout

    def _usable_score(self, name: MetricName, value: object) -> float | None:
        """Return value as a score if it is a finite number in [0, 1]."""
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, int | float):
            logger.warning(f"{name.value} returned non-numeric score {value!r}")
            return None
        if not math.isfinite(value) or not 0 <= value <= 1:
            logger.warning(f"{name.value} returned out-of-range score {value!r}")
            return None
        return float(value)

    def aggregate(self, url: str, outcomes: ConcurrentLatencies) -> ScoreReport:
        """Combine per-metric outcomes into a ScoreReport.

        Args:
            url: Input URL, echoed into the report.
            outcomes: Harness output, index-aligned with METRIC_ORDER.

        Returns:
            ScoreReport with every field populated.
        """
        fields: dict[str, str | float] = {"URL": url}
        net_score = 0.0
        net_latency = 0.0

        for index, name in enumerate(self.METRIC_ORDER):
            outcome = outcomes[index] if index < len(outcomes) else None
            score = self._usable_score(name, outcome.result) if outcome else None

            if score is None:
                if outcome is not None and outcome.error is not None:
                    logger.info(f"{name.value} defaulted after error: {outcome.error!r}")
                score = self.DEFAULT_SCORE
                latency = self.DEFAULT_LATENCY
            else:
                latency = outcome.latency

            net_score += self.WEIGHTS[name] * score
            net_latency += latency
            fields[name.value] = score
            fields[f"{name.value}_Latency"] = latency

        # Clamp float drift from the weighted sum before validation
        fields["NetScore"] = min(max(round(net_score, 3), 0.0), 1.0)
        fields["NetScore_Latency"] = round(net_latency, 3)

        return ScoreReport.model_validate(fields)

    async def score(self, owner: str, repo: str, url: str) -> ScoreReport:
        """Run every metric concurrently and aggregate the outcomes.

        Metric failures never propagate; they are absorbed as defaults.
        """
        logger.info(f"Scoring {owner}/{repo} ({url})")
        outcomes = await measure_concurrent_latencies(
            self.metrics, owner, repo, timeout=self.timeout
        )
        report = self.aggregate(url, outcomes)
        logger.info(
            f"{owner}/{repo}: NetScore={report.net_score} "
            f"NetScore_Latency={report.net_score_latency}"
        )
        return report

    async def get_scores(self, owner: str, repo: str, url: str) -> str:
        """Score a repository and return the report as one JSON line."""
        report = await self.score(owner, repo, url)
        return report.to_json()
