"""Tests for the command-line interface (cli.py)."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from pkgtrust.cli import app, build_table, read_urls
from pkgtrust.config import Settings
from pkgtrust.errors import UrlResolutionError
from pkgtrust.models.schemas import MetricName, ScoreReport

runner = CliRunner()

# --- Helpers ---------------------------------------------------------------


def _report(url: str, net: float = 0.5, failed: tuple[MetricName, ...] = ()) -> ScoreReport:
    fields = {"URL": url, "NetScore": net, "NetScore_Latency": 1.0}
    for name in MetricName:
        fields[name.value] = 0.0 if name in failed else net
        fields[f"{name.value}_Latency"] = -1.0 if name in failed else 0.2
    return ScoreReport.model_validate(fields)


class FakePipeline:
    """Stands in for ScoringPipeline; URLs containing 'bad' fail to resolve."""

    instances: list[FakePipeline] = []

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.seen: list[str] = []
        FakePipeline.instances.append(self)

    async def __aenter__(self) -> FakePipeline:
        return self

    async def __aexit__(self, *args) -> None:
        return None

    async def score_urls(self, urls):
        for url in urls:
            self.seen.append(url)
            if "bad" in url:
                yield url, UrlResolutionError(url, "not a GitHub repository or npm package URL")
            else:
                yield url, _report(url)


@pytest.fixture(autouse=True)
def fake_pipeline():
    FakePipeline.instances = []
    with (
        patch("pkgtrust.cli.ScoringPipeline", FakePipeline),
        patch("pkgtrust.cli.Settings.from_env", return_value=Settings()),
    ):
        yield FakePipeline


def _url_file(tmp_path: Path, *lines: str) -> Path:
    path = tmp_path / "urls.txt"
    path.write_text("\n".join(lines) + "\n")
    return path


def _json_lines(output: str) -> list[dict]:
    return [json.loads(line) for line in output.splitlines() if line.startswith("{")]


# --- read_urls -------------------------------------------------------------


class TestReadUrls:
    def test_strips_and_skips_blank_lines(self, tmp_path: Path):
        path = _url_file(tmp_path, "  https://github.com/a/b  ", "", "   ", "https://www.npmjs.com/package/x")
        assert read_urls(path) == ["https://github.com/a/b", "https://www.npmjs.com/package/x"]

    def test_crlf(self, tmp_path: Path):
        path = tmp_path / "urls.txt"
        path.write_bytes(b"https://github.com/a/b\r\nhttps://github.com/c/d\r\n")
        assert read_urls(path) == ["https://github.com/a/b", "https://github.com/c/d"]


# --- score command ---------------------------------------------------------


class TestScoreCommand:
    def test_one_json_line_per_url_in_order(self, tmp_path: Path):
        path = _url_file(tmp_path, "https://github.com/a/b", "", "https://www.npmjs.com/package/x")

        result = runner.invoke(app, [str(path)])

        assert result.exit_code == 0
        reports = _json_lines(result.stdout)
        assert [r["URL"] for r in reports] == ["https://github.com/a/b", "https://www.npmjs.com/package/x"]
        assert list(reports[0])[:3] == ["URL", "NetScore", "NetScore_Latency"]

    def test_unresolvable_url_exits_nonzero_after_earlier_reports(self, tmp_path: Path):
        path = _url_file(tmp_path, "https://github.com/a/b", "bad-url", "https://github.com/c/d")

        result = runner.invoke(app, [str(path)])

        assert result.exit_code == 1
        assert [r["URL"] for r in _json_lines(result.stdout)] == ["https://github.com/a/b"]
        assert "Cannot resolve" in result.output
        # scoring stops at the first unresolvable URL
        assert FakePipeline.instances[0].seen == ["https://github.com/a/b", "bad-url"]

    def test_missing_file(self, tmp_path: Path):
        result = runner.invoke(app, [str(tmp_path / "missing.txt")])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_missing_argument(self):
        result = runner.invoke(app, [])
        assert result.exit_code == 2

    def test_extra_argument(self, tmp_path: Path):
        path = _url_file(tmp_path, "https://github.com/a/b")
        result = runner.invoke(app, [str(path), "extra"])
        assert result.exit_code == 2

    def test_empty_file(self, tmp_path: Path):
        path = tmp_path / "urls.txt"
        path.write_text("\n\n")
        result = runner.invoke(app, [str(path)])
        assert result.exit_code == 0
        assert _json_lines(result.stdout) == []

    def test_table(self, tmp_path: Path):
        path = _url_file(tmp_path, "https://github.com/a/b")
        result = runner.invoke(app, [str(path), "--table"])
        assert result.exit_code == 0
        assert "Trust Scores" in result.output

    def test_clear_log(self, tmp_path: Path):
        log_file = tmp_path / "run.log"
        log_file.write_text("previous run\n")
        path = _url_file(tmp_path, "https://github.com/a/b")

        with patch("pkgtrust.cli.Settings.from_env", return_value=Settings(log_file=log_file, log_level=1)):
            result = runner.invoke(app, [str(path), "--clear-log"])

        assert result.exit_code == 0
        assert "previous run" not in log_file.read_text()

    def test_settings_passed_to_pipeline(self, tmp_path: Path):
        settings = Settings(github_token="ghp_x")
        path = _url_file(tmp_path, "https://github.com/a/b")
        with patch("pkgtrust.cli.Settings.from_env", return_value=settings):
            runner.invoke(app, [str(path)])
        assert FakePipeline.instances[0].settings is settings


class TestBuildTable:
    def test_rows_and_columns(self):
        table = build_table([_report("https://github.com/a/b"), _report("https://github.com/c/d")])
        headers = [column.header for column in table.columns]
        assert headers[:2] == ["URL", "NetScore"]
        assert "ResponsiveMaintainer" in headers
        assert table.row_count == 2

    def test_failed_metric_shown_as_unavailable(self):
        table = build_table([_report("https://github.com/a/b", failed=(MetricName.LICENSE,))])
        license_column = next(c for c in table.columns if c.header == "License")
        assert list(license_column.cells) == ["[dim]n/a[/dim]"]
