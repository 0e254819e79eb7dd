"""
Markdown exporter.

Renders an indicator report or a funding quote as Markdown, suitable for
GitHub, Notion, or attaching to a funding application.
"""

from __future__ import annotations

from datetime import datetime, timezone

from fundwise.models.funding import FundingQuote, SupportedAsset, TransactionType
from fundwise.models.indicators import (
    INDICATOR_CATALOG,
    CalculatedIndicators,
    FinancialIndicator,
    IndicatorKind,
    IndicatorStatus,
)
from fundwise.rates.assets import format_currency

_ASSET_CODES = {asset.value for asset in SupportedAsset}

STATUS_EMOJI = {
    IndicatorStatus.GOOD: "🟢",
    IndicatorStatus.NORMAL: "🟡",
    IndicatorStatus.BAD: "🔴",
    IndicatorStatus.INSUFFICIENT_DATA: "⚪",
    IndicatorStatus.NOT_APPLICABLE: "➖",
}

STATUS_LABELS = {
    IndicatorStatus.GOOD: "Good",
    IndicatorStatus.NORMAL: "Normal",
    IndicatorStatus.BAD: "Bad",
    IndicatorStatus.INSUFFICIENT_DATA: "No data",
    IndicatorStatus.NOT_APPLICABLE: "N/A",
}


def format_indicator_value(indicator: FinancialIndicator, currency: str = "USD") -> str:
    """Format an indicator value according to its kind."""
    if indicator.status == IndicatorStatus.NOT_APPLICABLE:
        return "N/A"
    if indicator.status == IndicatorStatus.INSUFFICIENT_DATA:
        return "—"

    value = indicator.value
    if indicator.kind == IndicatorKind.CURRENCY:
        return _money(value, currency)
    if indicator.kind == IndicatorKind.PERCENTAGE:
        return f"{value * 100:.1f}%"
    if indicator.kind == IndicatorKind.RATIO:
        return f"{value:.2f}x"
    if indicator.kind == IndicatorKind.MONTHS:
        return f"{value:.1f} months"
    return f"{value:,.2f}"


def _money(value: float, currency: str) -> str:
    if currency in _ASSET_CODES:
        return format_currency(value, currency)
    # Reporting currencies outside the asset table (EUR, MXN, ...)
    return f"{currency} {value:,.2f}"


def _timestamp(ms: int) -> str:
    return datetime.fromtimestamp(ms / 1000, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")


def render_indicators_markdown(
    indicators: CalculatedIndicators,
    currency: str | None = None,
    company_name: str | None = None,
) -> str:
    """Render calculated indicators as Markdown."""
    currency = currency or indicators.currency
    counts = indicators.status_counts
    lines: list[str] = []

    title = "# 📈 Financial Indicators"
    if company_name:
        title += f" — {company_name}"
    lines.append(title)
    lines.append("")
    lines.append(f"*Generated: {datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M UTC')}*")
    lines.append(f"*Currency: {currency}*")
    lines.append("")

    lines.append("## 📊 Summary")
    lines.append("")
    lines.append("| Metric | Value |")
    lines.append("|--------|-------|")
    lines.append(f"| **Overall Score** | {indicators.overall_score}/100 |")
    lines.append(f"| **Good** | {counts[IndicatorStatus.GOOD]} |")
    lines.append(f"| **Normal** | {counts[IndicatorStatus.NORMAL]} |")
    lines.append(f"| **Bad** | {counts[IndicatorStatus.BAD]} |")
    lines.append(f"| **Without Data** | {counts[IndicatorStatus.INSUFFICIENT_DATA]} |")
    lines.append(f"| **N/A** | {counts[IndicatorStatus.NOT_APPLICABLE]} |")
    lines.append("")

    lines.append("## 🔍 Indicators")
    lines.append("")

    for category, entries in indicators.by_category().items():
        lines.append(f"### {category}")
        lines.append("")
        lines.append("| Indicator | Value | Status | Recommendation |")
        lines.append("|-----------|-------|--------|----------------|")
        for key, indicator in entries:
            spec = INDICATOR_CATALOG[key]
            emoji = STATUS_EMOJI[indicator.status]
            label = STATUS_LABELS[indicator.status]
            lines.append(
                f"| **{spec.title}** | {format_indicator_value(indicator, currency)} "
                f"| {emoji} {label} | {indicators.recommendation(key)} |"
            )
        lines.append("")

    lines.append("## 📖 Definitions")
    lines.append("")
    for key, indicator in indicators.items():
        lines.append(f"- **{INDICATOR_CATALOG[key].title}:** {indicator.description}")
    lines.append("")

    lines.append("---")
    lines.append("*Generated by fundwise*")
    return "\n".join(lines)


def render_quote_markdown(quote: FundingQuote) -> str:
    """Render a funding quote as Markdown."""
    sell = quote.asset_sell.value
    buy = quote.asset_buy.value
    direction = "Cash In" if quote.type == TransactionType.CASHIN else "Cash Out"
    lines: list[str] = []

    lines.append(f"# 💱 Funding Quote — {direction}")
    lines.append("")
    lines.append(f"*Created: {_timestamp(quote.created_at)}*")
    lines.append(f"*Valid until: {_timestamp(quote.valid_until)}*")
    lines.append("")

    if quote.uses_fallback_rate:
        lines.append("> ⚠️ Live rates were unavailable; this quote uses a reference rate.")
        lines.append("")

    lines.append("| Item | Value |")
    lines.append("|------|-------|")
    lines.append(f"| **You send** | {format_currency(quote.total_sent, sell)} |")
    lines.append(f"| **Market rate** | 1 {sell} = {quote.rate:,.6g} {buy} |")
    lines.append(f"| **Applied rate** | 1 {sell} = {quote.adjusted_rate:,.6g} {buy} |")
    lines.append(f"| **Margin** | {quote.margin:+.1f}% |")
    lines.append(f"| **Fee ({quote.fee_percentage:.1f}%)** | {format_currency(quote.fee, buy)} |")
    lines.append(f"| **You receive** | {format_currency(quote.total_received, buy)} |")
    lines.append(f"| **Rate source** | {quote.rate_source} |")
    lines.append("")
    return "\n".join(lines)
