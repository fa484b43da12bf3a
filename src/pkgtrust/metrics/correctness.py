"""Correctness metric: clone the repository and lint it."""

import asyncio
import json
import logging
import shutil
import tempfile
from pathlib import Path
from typing import Any

from pkgtrust.config import Settings
from pkgtrust.errors import MetricError
from pkgtrust.models.schemas import MetricName
from pkgtrust.utils.subprocess import run_command

logger = logging.getLogger(__name__)

# Problems per linted file at which the score reaches zero
PROBLEMS_PER_FILE_LIMIT = 10
# ESLint exit codes: 0 clean, 1 lint problems found, 2 configuration/internal error
_LINT_OK_CODES = (0, 1)


def compute_lint_score(results: list[dict[str, Any]]) -> float:
    """Score ESLint JSON results.

    score = max(0, 1 - problems / (files * 10)), rounded to 2 places, where
    problems counts errors and warnings. No linted files scores 0.
    """
    if not results:
        return 0.0
    problems = sum(r.get("errorCount", 0) + r.get("warningCount", 0) for r in results)
    files = len(results)
    logger.info(f"Lint found {problems} problems in {files} files")
    return round(max(0.0, 1 - problems / (files * PROBLEMS_PER_FILE_LIMIT)), 2)


class CorrectnessMetric:
    """Lint-based code quality of a fresh shallow clone."""

    name = MetricName.CORRECTNESS

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def __repr__(self) -> str:
        return "CorrectnessMetric()"

    async def __call__(self, owner: str, repo: str) -> float:
        git = shutil.which("git")
        if git is None:
            raise MetricError("git is not installed")
        linter = self.settings.lint_command
        if not linter or shutil.which(linter[0]) is None:
            raise MetricError(f"Lint command not available: {' '.join(linter) or '(empty)'}")

        tmp = tempfile.mkdtemp(prefix="pkgtrust-")
        try:
            repo_dir = Path(tmp) / repo
            await self._clone(git, owner, repo, repo_dir)
            results = await self._lint(repo_dir)
        finally:
            # Removed in a worker thread; the event loop keeps serving other metrics
            await asyncio.to_thread(shutil.rmtree, tmp, ignore_errors=True)

        return compute_lint_score(results)

    async def _clone(self, git: str, owner: str, repo: str, dest: Path) -> None:
        url = f"https://github.com/{owner}/{repo}.git"
        logger.info(f"Cloning {url} into {dest}")
        code, _, stderr = await run_command(
            [git, "clone", "--depth", "1", "--quiet", url, str(dest)],
            timeout=self.settings.clone_timeout,
        )
        if code != 0:
            raise MetricError(f"Clone of {owner}/{repo} failed: {stderr.strip()}")

    async def _lint(self, repo_dir: Path) -> list[dict[str, Any]]:
        cmd = [*self.settings.lint_command, "."]
        logger.debug(f"Running {' '.join(cmd)} in {repo_dir}")
        code, stdout, stderr = await run_command(
            cmd, cwd=repo_dir, timeout=self.settings.clone_timeout
        )
        if code not in _LINT_OK_CODES:
            raise MetricError(f"Lint failed with exit code {code}: {stderr.strip()[:500]}")

        try:
            results = json.loads(stdout or "[]")
        except json.JSONDecodeError as e:
            raise MetricError(f"Unparsable lint output: {e}") from e
        if not isinstance(results, list):
            raise MetricError("Lint output is not a list of file results")
        return results
