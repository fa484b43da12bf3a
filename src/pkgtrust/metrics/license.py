"""License compatibility metric."""

import logging

from pkgtrust.metrics.base import GitHubMetric
from pkgtrust.models.schemas import MetricName

logger = logging.getLogger(__name__)

# SPDX identifiers compatible with LGPL-2.1
COMPATIBLE_LICENSES = frozenset(
    {
        "LGPL-2.1",
        "LGPL-2.1-only",
        "LGPL-2.1-or-later",
        "GPL-2.0",
        "GPL-2.0-only",
        "GPL-2.0-or-later",
        "MIT",
        "BSD-2-Clause",
        "BSD-3-Clause",
        "Apache-2.0",
        "CC0-1.0",
        "ISC",
        "Zlib",
        "Unlicense",
    }
)


def is_license_compatible(spdx_id: str | None) -> bool:
    """Check whether an SPDX license id is compatible with LGPL-2.1."""
    return spdx_id in COMPATIBLE_LICENSES


class LicenseMetric(GitHubMetric):
    """1.0 when the repository's license is LGPL-2.1 compatible, else 0.0.

    A repository with no detected license scores 0.0.
    """

    name = MetricName.LICENSE

    async def __call__(self, owner: str, repo: str) -> float:
        spdx_id = await self.github.fetch_license(owner, repo)
        compatible = is_license_compatible(spdx_id)
        logger.info(
            f"License {spdx_id} for {owner}/{repo} is "
            f"{'compatible' if compatible else 'not compatible'} with LGPL-2.1"
        )
        return 1.0 if compatible else 0.0
