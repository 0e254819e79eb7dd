"""
fundwise CLI — command-line interface.

Usage:
    fundwise indicators snapshot.yaml --output report.md
    fundwise rate USDC COP
    fundwise quote cashout 100 --wallet 0x...
    fundwise assets
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import typer
import yaml
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from fundwise import __version__
from fundwise.config import FundwiseConfig
from fundwise.models.funding import FundingQuote, FundingRequest, SupportedAsset, TransactionType
from fundwise.models.indicators import INDICATOR_CATALOG, CalculatedIndicators, IndicatorStatus

app = typer.Typer(
    name="fundwise",
    help="📈 fundwise — financial indicators and funding quotes",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
console = Console()

STATUS_STYLES = {
    IndicatorStatus.GOOD: "green",
    IndicatorStatus.NORMAL: "yellow",
    IndicatorStatus.BAD: "red",
    IndicatorStatus.INSUFFICIENT_DATA: "dim",
    IndicatorStatus.NOT_APPLICABLE: "dim",
}


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"[bold]fundwise[/bold] v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version",
        callback=_version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging",
    ),
    config: str = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file",
    ),
) -> None:
    """📈 fundwise — Measure the business. Price the funding."""
    settings = FundwiseConfig.load(config)
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level.upper(), logging.WARNING)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    ctx.obj = settings


@app.command()
def indicators(
    ctx: typer.Context,
    snapshot: str = typer.Argument(..., help="YAML or JSON file with 'financial' and 'business' sections"),
    output: str = typer.Option(
        None,
        "--output",
        "-o",
        help="Output file path (.md, .json)",
    ),
) -> None:
    """Compute financial indicators for a snapshot file."""
    from fundwise.analyzers.indicators import calculate_indicators

    settings: FundwiseConfig = ctx.obj or FundwiseConfig()
    path = Path(snapshot)
    if not path.exists():
        console.print(f"[red]Error: File not found: {snapshot}[/red]")
        raise typer.Exit(1)

    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        console.print("[red]Error: Snapshot file must contain a mapping[/red]")
        raise typer.Exit(1)

    result = calculate_indicators(
        data.get("financial") or {},
        data.get("business"),
        assumed_capital_request_ratio=settings.indicators.assumed_capital_request_ratio,
    )
    company = (data.get("business") or {}).get("name") or path.stem

    console.print(Panel.fit(
        f"[bold blue]📈 fundwise[/bold blue] — Financial Indicators for [bold]{company}[/bold]",
        subtitle=f"v{__version__}",
    ))
    _display_indicators(result)

    if output:
        _save_indicators(result, output)


@app.command()
def rate(
    ctx: typer.Context,
    from_asset: str = typer.Argument(..., help="Asset to convert from (USDC, COP, USD, ETH, BTC)"),
    to_asset: str = typer.Argument(..., help="Asset to convert to"),
) -> None:
    """Show the current exchange rate for a pair."""
    from fundwise.rates.service import RateService

    settings: FundwiseConfig = ctx.obj or FundwiseConfig()
    source, target = _parse_asset(from_asset), _parse_asset(to_asset)

    async def _run():  # noqa: ANN202
        async with RateService.from_config(settings) as service:
            return await service.get_exchange_rate(source, target)

    with console.status("[bold green]Fetching rate...[/bold green]"):
        response = asyncio.run(_run())

    table = Table(title=f"{source.value} → {target.value}", show_lines=True)
    table.add_column("Field", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Rate", f"{response.rate:,.6g}")
    table.add_row("Source", response.source)
    console.print(table)

    if not response.success:
        console.print(f"[yellow]⚠ {response.error}[/yellow]")


@app.command()
def quote(
    ctx: typer.Context,
    type: str = typer.Argument(..., help="cashin or cashout"),
    amount: float = typer.Argument(..., help="Amount of the asset being sold"),
    wallet: str = typer.Option(
        None,
        "--wallet",
        "-w",
        help="Destination/source wallet address (required for cashout)",
    ),
    output: str = typer.Option(
        None,
        "--output",
        "-o",
        help="Save the quote as Markdown",
    ),
) -> None:
    """Build a cash-in or cash-out quote."""
    from fundwise.funding.quotes import FundingRequestError, QuoteBuilder
    from fundwise.rates.service import RateService

    settings: FundwiseConfig = ctx.obj or FundwiseConfig()
    try:
        transaction_type = TransactionType(type.lower())
    except ValueError:
        console.print(f"[red]Error: Unknown transaction type '{type}' (use cashin or cashout)[/red]")
        raise typer.Exit(1) from None

    request = FundingRequest.for_type(transaction_type, amount, wallet_address=wallet)

    async def _run() -> FundingQuote:
        async with RateService.from_config(settings) as service:
            return await QuoteBuilder.from_config(service, settings).build_quote(request)

    try:
        with console.status("[bold green]Pricing quote...[/bold green]"):
            result = asyncio.run(_run())
    except FundingRequestError as e:
        for field, message in e.errors.items():
            console.print(f"[red]✗ {field}: {message}[/red]")
        raise typer.Exit(1) from None

    _display_quote(result)

    if output:
        Path(output).write_text(result.to_markdown())
        console.print(f"[green]✓[/green] Quote saved to [bold]{output}[/bold]")


@app.command()
def assets() -> None:
    """List supported assets."""
    from fundwise.rates.assets import ASSET_INFO

    table = Table(title="Supported Assets")
    table.add_column("Symbol", style="bold")
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("Decimals", justify="right")
    table.add_column("Network")

    for info in ASSET_INFO.values():
        kind = "Fiat" if info.is_fiat else "Stablecoin" if info.is_stablecoin else "Crypto"
        table.add_row(
            f"{info.icon} {info.symbol.value}",
            info.name,
            kind,
            str(info.decimals),
            info.network or "—",
        )

    console.print(table)


def _parse_asset(code: str) -> SupportedAsset:
    try:
        return SupportedAsset(code.upper())
    except ValueError:
        supported = ", ".join(a.value for a in SupportedAsset)
        console.print(f"[red]Error: Unsupported asset '{code}'. Supported: {supported}[/red]")
        raise typer.Exit(1) from None


def _display_indicators(result: CalculatedIndicators) -> None:
    """Display indicators grouped by category."""
    from fundwise.exporters.markdown import STATUS_LABELS, format_indicator_value

    console.print()
    table = Table(title="Financial Indicators", show_lines=True)
    table.add_column("Category", style="dim")
    table.add_column("Indicator", style="bold")
    table.add_column("Value", justify="right")
    table.add_column("Status")

    for category, entries in result.by_category().items():
        for key, indicator in entries:
            style = STATUS_STYLES[indicator.status]
            table.add_row(
                category,
                INDICATOR_CATALOG[key].title,
                format_indicator_value(indicator, result.currency),
                f"[{style}]{STATUS_LABELS[indicator.status]}[/{style}]",
            )

    console.print(table)
    console.print()
    console.print(f"[bold]Overall score:[/bold] {result.overall_score}/100")


def _display_quote(result: FundingQuote) -> None:
    from fundwise.rates.assets import format_currency

    sell, buy = result.asset_sell.value, result.asset_buy.value
    table = Table(title=f"Quote — {result.type.value}", show_lines=True)
    table.add_column("Item", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("You send", format_currency(result.total_sent, sell))
    table.add_row("Market rate", f"{result.rate:,.6g}")
    table.add_row("Applied rate", f"{result.adjusted_rate:,.6g}")
    table.add_row(f"Fee ({result.fee_percentage:.1f}%)", format_currency(result.fee, buy))
    table.add_row("You receive", format_currency(result.total_received, buy))
    table.add_row("Rate source", result.rate_source)
    console.print(table)

    if result.uses_fallback_rate:
        console.print("[yellow]⚠ Live rates unavailable — quote uses a reference rate[/yellow]")


def _save_indicators(result: CalculatedIndicators, output: str) -> None:
    """Save indicators to file."""
    path = Path(output)
    if path.suffix == ".json":
        content = result.to_json()
    else:
        content = result.to_markdown()

    path.write_text(content)
    console.print(f"[green]✓[/green] Report saved to [bold]{path}[/bold]")


if __name__ == "__main__":
    app()
