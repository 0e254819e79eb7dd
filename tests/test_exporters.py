"""Tests for the Markdown exporter."""

from fundwise.analyzers.indicators import calculate_indicators
from fundwise.exporters.markdown import format_indicator_value, render_indicators_markdown, render_quote_markdown
from fundwise.models.funding import FundingQuote, SupportedAsset, TransactionType
from fundwise.models.indicators import FinancialIndicator, IndicatorKind, IndicatorStatus

SNAPSHOT = {
    "report_details": {"revenue_model": "transactional"},
    "income_statement": {"domestic_sales": 500_000, "cost_of_sales": 300_000, "operating_expenses": 150_000},
    "balance_sheet": {"current_assets": 120_000, "current_liabilities": 100_000, "cash": 60_000},
    "operations": {"monthly_burn_rate": 10_000},
}


def _indicator(value: float, kind: IndicatorKind, status: IndicatorStatus = IndicatorStatus.GOOD) -> FinancialIndicator:
    return FinancialIndicator(value=value, status=status, description="test", kind=kind)


class TestFormatIndicatorValue:
    def test_by_kind(self) -> None:
        assert format_indicator_value(_indicator(0.256, IndicatorKind.PERCENTAGE)) == "25.6%"
        assert format_indicator_value(_indicator(1.5, IndicatorKind.RATIO)) == "1.50x"
        assert format_indicator_value(_indicator(6, IndicatorKind.MONTHS)) == "6.0 months"
        assert format_indicator_value(_indicator(50_000, IndicatorKind.CURRENCY)) == "$50,000.00"

    def test_currency_follows_report(self) -> None:
        assert format_indicator_value(_indicator(4100, IndicatorKind.CURRENCY), "COP") == "$ 4.100,00"
        assert format_indicator_value(_indicator(1200, IndicatorKind.CURRENCY), "EUR") == "EUR 1,200.00"

    def test_unmeasured(self) -> None:
        no_data = _indicator(0, IndicatorKind.RATIO, IndicatorStatus.INSUFFICIENT_DATA)
        not_applicable = _indicator(0, IndicatorKind.RATIO, IndicatorStatus.NOT_APPLICABLE)
        assert format_indicator_value(no_data) == "—"
        assert format_indicator_value(not_applicable) == "N/A"


class TestIndicatorsMarkdown:
    def test_basic_render(self) -> None:
        result = calculate_indicators(SNAPSHOT, {"name": "Tienda Sol", "employee_count": 4})
        md = render_indicators_markdown(result, company_name="Tienda Sol")

        assert "Tienda Sol" in md
        assert "Overall Score" in md
        assert f"{result.overall_score}/100" in md
        assert "### Profitability" in md
        assert "### Liquidity" in md
        assert "| **Gross Margin** | 40.0% | 🟢 Good |" in md
        assert "| **Runway** | 6.0 months | 🟡 Normal |" in md

    def test_to_markdown_delegates(self) -> None:
        result = calculate_indicators(SNAPSHOT)
        md = result.to_markdown()
        assert md.startswith("# 📈 Financial Indicators")
        assert "LTV (Transactional)" in md
        assert "LTV (Subscription)" not in md

    def test_summary_counts_cover_every_row(self) -> None:
        result = calculate_indicators({**SNAPSHOT, "report_details": {"revenue_model": "mixed"}})
        md = render_indicators_markdown(result)

        assert "| **N/A** | 1 |" in md
        assert sum(result.status_counts.values()) == len(result.items())


class TestQuoteMarkdown:
    def _quote(self, source: str = "exchangerate-api") -> FundingQuote:
        return FundingQuote(
            type=TransactionType.CASHOUT,
            amount=100,
            asset_sell=SupportedAsset.USDC,
            asset_buy=SupportedAsset.COP,
            rate=4000.0,
            adjusted_rate=3920.0,
            total_received=384_160.0,
            total_sent=100,
            fee=7840.0,
            fee_percentage=2.0,
            margin=-2.0,
            rate_source=source,
            created_at=1_700_000_000_000,
            valid_until=1_700_000_300_000,
        )

    def test_render(self) -> None:
        md = render_quote_markdown(self._quote())
        assert "Cash Out" in md
        assert "100.00 USDC" in md
        assert "$ 384.160,00" in md
        assert "-2.0%" in md
        assert "2023-11-14 22:18:20 UTC" in md
        assert "reference rate" not in md

    def test_fallback_warning(self) -> None:
        md = self._quote(source="fallback").to_markdown()
        assert "reference rate" in md
