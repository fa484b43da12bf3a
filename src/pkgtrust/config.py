"""Runtime configuration.

Settings are read once at process start and passed explicitly to every
component that needs them. Values come from the environment, optionally
populated from a .env file.
"""

import os
import shlex
from collections.abc import Mapping
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

DEFAULT_LINT_COMMAND = ("eslint", "--format", "json", "--no-error-on-unmatched-pattern")
DEFAULT_METRIC_TIMEOUT = 120.0

# LOG_LEVEL values understood by configure_logging()
LOG_SILENT = 0
LOG_INFO = 1
LOG_DEBUG = 2


class Settings(BaseModel):
    """Immutable process configuration."""

    model_config = ConfigDict(frozen=True)

    github_token: str | None = None
    log_file: Path | None = None
    log_level: int = Field(default=LOG_SILENT, ge=LOG_SILENT, le=LOG_DEBUG)
    metric_timeout: float | None = DEFAULT_METRIC_TIMEOUT
    http_timeout: float = 30.0
    clone_timeout: float = 120.0
    lint_command: tuple[str, ...] = DEFAULT_LINT_COMMAND

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        dotenv: bool = True,
    ) -> "Settings":
        """Build settings from environment variables.

        Args:
            environ: Mapping to read from. Defaults to os.environ.
            dotenv: Load a .env file into os.environ first.

        Returns:
            Settings instance.
        """
        if environ is None:
            if dotenv:
                load_dotenv()
            environ = os.environ

        token = environ.get("GITHUB_TOKEN", "").strip() or None
        log_file = environ.get("LOG_FILE", "").strip()

        lint_command = DEFAULT_LINT_COMMAND
        raw_lint = environ.get("PKGTRUST_LINT_COMMAND", "").strip()
        if raw_lint:
            lint_command = tuple(shlex.split(raw_lint))

        return cls(
            github_token=token,
            log_file=Path(log_file) if log_file else None,
            log_level=_parse_log_level(environ.get("LOG_LEVEL")),
            metric_timeout=_parse_timeout(environ.get("PKGTRUST_METRIC_TIMEOUT")),
            lint_command=lint_command,
        )


def _parse_log_level(raw: str | None) -> int:
    """Map LOG_LEVEL to 0/1/2, treating anything else as silent."""
    try:
        level = int(raw) if raw is not None else LOG_SILENT
    except ValueError:
        return LOG_SILENT
    if level not in (LOG_SILENT, LOG_INFO, LOG_DEBUG):
        return LOG_SILENT
    return level


def _parse_timeout(raw: str | None) -> float | None:
    """Parse the per-metric timeout; zero or negative disables it."""
    if raw is None or not raw.strip():
        return DEFAULT_METRIC_TIMEOUT
    try:
        value = float(raw)
    except ValueError:
        return DEFAULT_METRIC_TIMEOUT
    return value if value > 0 else None
