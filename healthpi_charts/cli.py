# healthpi_charts/cli.py
from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import structlog
import typer

from .charts import CHARTS, get_chart
from .client import RecordFetcher
from .config import get_settings
from .errors import FetchError, HealthPiError, MalformedRecordError
from .models import ChartData, Record
from .view import ChartView

app = typer.Typer(no_args_is_help=True, help="healthpi-charts CLI")
log = structlog.get_logger()


# ---------- helpers ----------

def _configure_logging(level: str) -> None:
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level.upper(), logging.INFO)),
        logger_factory=lambda *args: structlog.PrintLogger(sys.stderr),
    )


@app.callback()
def main() -> None:
    _configure_logging(get_settings().LOG_LEVEL)


def _resolve_charts(names: Optional[List[str]]):
    if not names:
        return list(CHARTS.values())
    try:
        return [get_chart(n) for n in names]
    except KeyError as e:
        raise typer.BadParameter(str(e.args[0])) from e


async def _load(charts) -> list[tuple[object, ChartData]]:
    async with RecordFetcher() as fetcher:
        out = []
        for chart in charts:
            data = await ChartView(chart, fetcher).initialize()
            out.append((chart, data))
        return out


def _run_load(charts) -> list[tuple[object, ChartData]]:
    try:
        return asyncio.run(_load(charts))
    except HealthPiError as e:
        log.error("load_failed", error=str(e))
        typer.echo(f"[ERR] {e}")
        raise typer.Exit(code=1)


# ---------- commands ----------

@app.command("diag")
def diag() -> None:
    """Show the effective settings (.env + environment)."""
    s = get_settings()
    typer.echo(f"HEALTHPI_URL: {s.HEALTHPI_URL}")
    typer.echo(f"HEALTHPI_TIMEOUT: {s.HEALTHPI_TIMEOUT}")
    typer.echo(f"LOG_LEVEL: {s.LOG_LEVEL}")


@app.command()
def show(chart: str = typer.Argument(..., help="Chart name: " + "|".join(CHARTS))) -> None:
    """Fetch records, build one chart and print its datasets as JSON."""
    [(_, data)] = _run_load(_resolve_charts([chart]))
    typer.echo(json.dumps(data.to_dict(), indent=2))


@app.command()
def render(
    out: Path = typer.Option(Path("healthpi.html"), "--out", "-o", help="Output HTML file"),
    chart: Optional[List[str]] = typer.Option(None, "--chart", "-c", help="Chart(s) to draw (default: all)"),
) -> None:
    """Fetch records and write the dashboard as a single HTML page."""
    from .render import to_figure, write_html

    loaded = _run_load(_resolve_charts(chart))
    path = write_html([to_figure(data, title=mod.TITLE) for mod, data in loaded], out)
    typer.echo(f"OK — wrote {len(loaded)} chart(s) to {path}")


@app.command()
def push(file: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON array of records")) -> None:
    """Upload records from a JSON file to the HealthPi API."""
    try:
        raw = json.loads(file.read_text(encoding="utf-8"))
        if not isinstance(raw, list):
            raise MalformedRecordError("file must contain a JSON array of records")
        records = [Record.from_json(item) for item in raw]
    except ValueError as e:
        raise typer.BadParameter(str(e))

    async def _post() -> None:
        async with RecordFetcher() as fetcher:
            await fetcher.post_records(records)

    try:
        asyncio.run(_post())
    except FetchError as e:
        typer.echo(f"[ERR] {e}")
        raise typer.Exit(code=1)
    typer.echo(f"OK — posted {len(records)} record(s).")


if __name__ == "__main__":
    app()
