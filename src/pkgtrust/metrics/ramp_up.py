"""Ramp-up (documentation coverage) metric."""

import logging
from html.parser import HTMLParser

from pkgtrust.errors import MetricError
from pkgtrust.metrics.base import GitHubMetric
from pkgtrust.models.schemas import MetricName

logger = logging.getLogger(__name__)

KEYWORDS = ("installation", "usage", "api", "examples")


class _TextExtractor(HTMLParser):
    """Collects text content, dropping tags and script/style bodies."""

    _SKIP = {"script", "style"}

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.parts: list[str] = []
        self._skipping = 0

    def handle_starttag(self, tag, attrs):
        if tag in self._SKIP:
            self._skipping += 1

    def handle_endtag(self, tag):
        if tag in self._SKIP and self._skipping:
            self._skipping -= 1

    def handle_data(self, data):
        if not self._skipping:
            self.parts.append(data)


def readme_text(content: str) -> str:
    """Reduce README markup (Markdown with embedded HTML) to plain text."""
    parser = _TextExtractor()
    parser.feed(content)
    parser.close()
    return "".join(parser.parts)


def documentation_score(text: str) -> float:
    """Fraction of documentation keywords present in the text."""
    lowered = text.lower()
    found = [keyword for keyword in KEYWORDS if keyword in lowered]
    logger.debug(f"Documentation keywords found: {found}")
    return len(found) / len(KEYWORDS)


class RampUpMetric(GitHubMetric):
    """How quickly a newcomer can get started, judged from the README."""

    name = MetricName.RAMP_UP

    async def __call__(self, owner: str, repo: str) -> float:
        content = await self.github.fetch_readme(owner, repo)
        if content is None:
            raise MetricError(f"No README found for {owner}/{repo}")
        score = documentation_score(readme_text(content))
        logger.info(f"Ramp-up score for {owner}/{repo}: {score}")
        return score
