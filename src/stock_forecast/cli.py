"""Click-based CLI for stock-forecast.

Thin wrapper around library modules. Zero business logic: every operation
delegates to the pipeline, the storage backends, or the mock provider.
"""

from __future__ import annotations

import asyncio
import json
import logging
import random

import click
from rich.console import Console
from rich.table import Table

console = Console(stderr=True)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run_async(coro):
    """Run an async coroutine from synchronous Click code."""
    return asyncio.run(coro)


def _load_config(ctx: click.Context):
    """Load config lazily, caching on first call."""
    if "config" not in ctx.obj:
        from stock_forecast.core import load_config

        ctx.obj["config"] = load_config(config_path=ctx.obj.get("config_path"))
    return ctx.obj["config"]


def _fail(exc: Exception) -> None:
    console.print(f"[red]Error:[/red] {exc}")
    raise SystemExit(1)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True),
    envvar="STOCK_FORECAST_CONFIG",
    default=None,
    help="Path to stock-forecast.yml config file.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Enable debug logging.",
)
@click.version_option(package_name="stock-forecast")
@click.pass_context
def cli(ctx: click.Context, config: str | None, verbose: bool) -> None:
    """Stock Forecast: price history and forecasts from blob storage."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config
    ctx.obj["verbose"] = verbose
    ctx.obj["console"] = console
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# ---------------------------------------------------------------------------
# fetch
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("symbol")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    help="Output format.",
)
@click.pass_context
def fetch(ctx: click.Context, symbol: str, output_format: str) -> None:
    """Fetch historical and forecast data for SYMBOL."""
    from stock_forecast.core import StockForecastError

    async def _run(config):
        from stock_forecast.pipeline import ForecastPipeline
        from stock_forecast.storage import create_blob_store

        store = create_blob_store(config.storage)
        try:
            return await ForecastPipeline(store, config).fetch_and_build(symbol)
        finally:
            await store.close()

    try:
        config = _load_config(ctx)
        data = _run_async(_run(config))
    except StockForecastError as exc:
        _fail(exc)

    if output_format == "json":
        _output_stock_data_json(data)
    else:
        _output_stock_data_table(symbol.upper(), data)


def _output_stock_data_table(symbol: str, data, title_suffix: str = "") -> None:
    """Render metrics and series endpoints as a Rich table."""
    m = data.metrics
    table = Table(title=f"{symbol}{title_suffix}")
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")

    table.add_row("Current price", f"{m.current_price:.2f}")
    table.add_row("Day change", f"{m.day_change:+.2f}%")
    table.add_row("Forecast price", f"{m.forecast_price:.2f}")
    table.add_row(
        "Forecast change",
        f"{m.forecast_change:+.2f} ({m.forecast_change_percent:+.2f}%)",
    )
    table.add_row("Confidence", f"{m.confidence}% ({m.confidence_level.value})")
    table.add_section()
    table.add_row("Volume", m.volume)
    table.add_row("Market cap", m.market_cap)
    table.add_row("P/E ratio", f"{m.pe_ratio:.1f}")
    table.add_section()
    table.add_row("Historical points", str(len(data.historical)))
    table.add_row(
        "History range",
        f"{data.historical[0].date} → {data.historical[-1].date}"
        if data.historical
        else "N/A",
    )
    table.add_row("Forecast points", str(len(data.forecast)))
    table.add_row(
        "Forecast range",
        f"{data.forecast[0].date} → {data.forecast[-1].date}"
        if data.forecast
        else "N/A",
    )

    console.print(table)


def _output_stock_data_json(data) -> None:
    """Write stock data as JSON to stdout, in the API's shape."""
    click.echo(json.dumps(data.model_dump(mode="json", by_alias=True), indent=2))


# ---------------------------------------------------------------------------
# stocks
# ---------------------------------------------------------------------------


@cli.command()
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    help="Output format.",
)
@click.pass_context
def stocks(ctx: click.Context, output_format: str) -> None:
    """List symbols available in blob storage."""
    from stock_forecast.core import StockForecastError

    async def _run(config):
        from stock_forecast.pipeline import ForecastPipeline
        from stock_forecast.storage import create_blob_store

        store = create_blob_store(config.storage)
        try:
            return await ForecastPipeline(store, config).list_stocks()
        finally:
            await store.close()

    try:
        config = _load_config(ctx)
        available = _run_async(_run(config))
    except StockForecastError as exc:
        _fail(exc)

    if output_format == "json":
        click.echo(json.dumps({"stocks": [s.model_dump() for s in available]}, indent=2))
        return

    table = Table(title=f"Available Stocks ({config.storage.container})")
    table.add_column("Symbol", style="bold")
    table.add_column("Name")
    for s in available:
        table.add_row(s.symbol, s.name)
    console.print(table)


# ---------------------------------------------------------------------------
# demo
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("symbol")
@click.option("--seed", type=int, default=None, help="Random seed for repeatable output.")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    help="Output format.",
)
def demo(symbol: str, seed: int | None, output_format: str) -> None:
    """Show randomly generated MOCK data for SYMBOL (no storage access)."""
    from stock_forecast.fixtures import MockDataProvider

    data = MockDataProvider(rng=random.Random(seed)).generate(symbol)
    if output_format == "json":
        _output_stock_data_json(data)
    else:
        console.print("[yellow]Mock data: randomly generated, not a forecast.[/yellow]")
        _output_stock_data_table(symbol.upper(), data, title_suffix=" (mock)")


# ---------------------------------------------------------------------------
# serve
# ---------------------------------------------------------------------------


@cli.command()
@click.option("--host", type=str, default="0.0.0.0", help="Bind address.")
@click.option("--port", "-p", type=int, default=8000, help="Port number.")
@click.option("--reload", is_flag=True, default=False, help="Auto-reload on code changes.")
@click.pass_context
def serve(ctx: click.Context, host: str, port: int, reload: bool) -> None:
    """Start the REST API server."""
    import uvicorn

    console.print(f"Starting stock-forecast API on [bold]{host}:{port}[/bold]")
    console.print(f"API docs: http://{host}:{port}/docs")

    uvicorn.run(
        "stock_forecast.api.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
    )


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
