"""CLI entry point for pkgtrust."""

import asyncio
from contextlib import aclosing
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from pkgtrust.analyzers.pipeline import ScoringPipeline
from pkgtrust.analyzers.scorer import Scorer
from pkgtrust.config import Settings
from pkgtrust.errors import UrlResolutionError
from pkgtrust.log import configure_logging
from pkgtrust.models.schemas import ScoreReport

app = typer.Typer(help="Package trust scoring tool.")

# stdout carries the NDJSON reports; everything for humans goes to stderr
console = Console(stderr=True)


def read_urls(path: Path) -> list[str]:
    """Read a newline-delimited URL file, skipping blank lines."""
    lines = path.read_text(encoding="utf-8").splitlines()
    return [line.strip() for line in lines if line.strip()]


def _score_style(score: float) -> str:
    if score >= 0.7:
        return "green"
    elif score >= 0.4:
        return "yellow"
    return "red"


def build_table(reports: list[ScoreReport]) -> Table:
    """Build a summary table of scores, one row per URL."""
    table = Table(title="Trust Scores")
    table.add_column("URL", style="cyan", overflow="fold")
    table.add_column("NetScore", justify="right")
    for name in Scorer.METRIC_ORDER:
        table.add_column(name.value, justify="right")
    table.add_column("Latency (s)", justify="right", style="dim")

    for report in reports:
        cells = [
            report.url,
            f"[{_score_style(report.net_score)}]{report.net_score:.3f}[/]",
        ]
        for name in Scorer.METRIC_ORDER:
            score, latency = report.metric(name)
            if latency < 0:
                cells.append("[dim]n/a[/dim]")
            else:
                cells.append(f"[{_score_style(score)}]{score:.2f}[/]")
        cells.append(f"{report.net_score_latency:.3f}")
        table.add_row(*cells)

    return table


@app.command()
def score(
    url_file: Path = typer.Argument(..., help="File with one GitHub or npm URL per line"),
    clear_log: bool = typer.Option(False, "--clear-log", help="Truncate LOG_FILE before running"),
    table: bool = typer.Option(False, "--table", "-t", help="Also print a summary table to stderr"),
) -> None:
    """Score every URL in URL_FILE and print one JSON report per line."""
    settings = Settings.from_env()
    configure_logging(settings, clear=clear_log)

    if not url_file.is_file():
        console.print(f"[red]URL file not found: {url_file}[/red]")
        raise typer.Exit(1)

    try:
        urls = read_urls(url_file)
    except (OSError, UnicodeDecodeError) as e:
        console.print(f"[red]Cannot read {url_file}: {e}[/red]")
        raise typer.Exit(1)

    reports, error = asyncio.run(_score_urls(settings, urls))

    if table and reports:
        console.print(build_table(reports))

    if error is not None:
        console.print(f"[red]{error}[/red]")
        raise typer.Exit(1)


async def _score_urls(
    settings: Settings, urls: list[str]
) -> tuple[list[ScoreReport], UrlResolutionError | None]:
    """Async implementation of score.

    Reports are echoed as they are produced. Stops at the first URL that
    cannot be resolved.
    """
    reports: list[ScoreReport] = []
    async with ScoringPipeline(settings) as pipeline:
        async with aclosing(pipeline.score_urls(urls)) as results:
            async for _, outcome in results:
                if isinstance(outcome, UrlResolutionError):
                    return reports, outcome
                typer.echo(outcome.to_json())
                reports.append(outcome)
    return reports, None


if __name__ == "__main__":
    app()
