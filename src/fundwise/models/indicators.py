"""
Indicator models — the computed financial indicators and their report.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, NamedTuple

from pydantic import BaseModel, ConfigDict, Field


class IndicatorStatus(str, Enum):
    """Health classification of a single indicator."""

    GOOD = "good"
    NORMAL = "normal"
    BAD = "bad"
    INSUFFICIENT_DATA = "insufficient_data"  # Inputs missing or divisor not positive
    NOT_APPLICABLE = "not_applicable"  # Does not apply to the revenue model

    @property
    def is_classified(self) -> bool:
        return self in (IndicatorStatus.GOOD, IndicatorStatus.NORMAL, IndicatorStatus.BAD)


class IndicatorKind(str, Enum):
    """Unit of an indicator value, used for display."""

    CURRENCY = "currency"
    PERCENTAGE = "percentage"  # Stored as a fraction (0.25 == 25%)
    RATIO = "ratio"
    MONTHS = "months"
    NUMBER = "number"


class IndicatorSpec(NamedTuple):
    title: str
    category: str
    kind: IndicatorKind


# Display order, titles and grouping for every indicator key.
INDICATOR_CATALOG: dict[str, IndicatorSpec] = {
    "ebitda": IndicatorSpec("EBITDA", "Profitability", IndicatorKind.CURRENCY),
    "gross_margin": IndicatorSpec("Gross Margin", "Profitability", IndicatorKind.PERCENTAGE),
    "operating_margin": IndicatorSpec("Operating Margin", "Profitability", IndicatorKind.PERCENTAGE),
    "current_ratio": IndicatorSpec("Current Ratio", "Liquidity", IndicatorKind.RATIO),
    "debt_to_equity": IndicatorSpec("Debt/Equity", "Leverage", IndicatorKind.RATIO),
    "roe": IndicatorSpec("ROE", "Profitability", IndicatorKind.PERCENTAGE),
    "roa": IndicatorSpec("ROA", "Efficiency", IndicatorKind.PERCENTAGE),
    "runway": IndicatorSpec("Runway", "Liquidity", IndicatorKind.MONTHS),
    "revenue_per_employee": IndicatorSpec("Revenue per Employee", "Productivity", IndicatorKind.CURRENCY),
    "yoy_growth": IndicatorSpec("YoY Growth", "Growth", IndicatorKind.PERCENTAGE),
    "rnd_percentage": IndicatorSpec("R&D %", "Innovation", IndicatorKind.PERCENTAGE),
    "export_percentage": IndicatorSpec("Export %", "Diversification", IndicatorKind.PERCENTAGE),
    "capex_ratio": IndicatorSpec("CAPEX Ratio", "Investment", IndicatorKind.PERCENTAGE),
    "cac": IndicatorSpec("CAC", "Marketing", IndicatorKind.CURRENCY),
    "churn": IndicatorSpec("Churn Rate", "Retention", IndicatorKind.PERCENTAGE),
    "ltv_sub": IndicatorSpec("LTV (Subscription)", "Business Model", IndicatorKind.CURRENCY),
    "ltv_tx": IndicatorSpec("LTV (Transactional)", "Business Model", IndicatorKind.CURRENCY),
    "ltv_cac": IndicatorSpec("LTV/CAC", "Business Model", IndicatorKind.RATIO),
    "capital_gap": IndicatorSpec("Capital Gap", "Funding", IndicatorKind.PERCENTAGE),
}

STATUS_SCORES: dict[IndicatorStatus, int] = {
    IndicatorStatus.GOOD: 100,
    IndicatorStatus.NORMAL: 70,
    IndicatorStatus.BAD: 30,
}

_NORMAL_ADVICE = {
    "gross_margin": "Consider optimizing production costs.",
    "operating_margin": "Review operating efficiency.",
    "current_ratio": "Monitor short-term liquidity.",
    "debt_to_equity": "Consider reducing leverage.",
    "runway": "Plan additional funding sources.",
    "yoy_growth": "Look for opportunities to accelerate growth.",
    "churn": "Put customer retention strategies in place.",
}

_BAD_ADVICE = {
    "ebitda": "Urgent: review the cost structure.",
    "gross_margin": "Critical: optimize pricing and costs.",
    "current_ratio": "Liquidity risk: improve working capital.",
    "runway": "Critical: secure financing immediately.",
    "ltv_cac": "Unsustainable model: reduce CAC or increase LTV.",
}


class FinancialIndicator(BaseModel):
    """A single computed indicator."""

    model_config = ConfigDict(frozen=True)

    value: float = 0.0
    status: IndicatorStatus
    description: str
    kind: IndicatorKind = IndicatorKind.NUMBER
    category: str = ""

    @property
    def is_measured(self) -> bool:
        return self.status.is_classified


class CalculatedIndicators(BaseModel):
    """All indicators computed for one financial snapshot.

    Created once per review and never mutated; recompute when the snapshot
    changes. Exactly one of ``ltv_sub`` / ``ltv_tx`` is set for subscription
    and transactional businesses, neither for mixed ones.
    """

    model_config = ConfigDict(frozen=True)

    ebitda: FinancialIndicator
    gross_margin: FinancialIndicator
    operating_margin: FinancialIndicator
    current_ratio: FinancialIndicator
    debt_to_equity: FinancialIndicator
    roe: FinancialIndicator
    roa: FinancialIndicator
    runway: FinancialIndicator
    revenue_per_employee: FinancialIndicator
    yoy_growth: FinancialIndicator
    rnd_percentage: FinancialIndicator
    export_percentage: FinancialIndicator
    capex_ratio: FinancialIndicator
    cac: FinancialIndicator
    churn: FinancialIndicator
    ltv_sub: FinancialIndicator | None = None
    ltv_tx: FinancialIndicator | None = None
    ltv_cac: FinancialIndicator
    capital_gap: FinancialIndicator
    currency: str = Field(default="USD", description="Reporting currency of monetary values")

    def items(self) -> list[tuple[str, FinancialIndicator]]:
        """Populated indicators in display order."""
        result: list[tuple[str, FinancialIndicator]] = []
        for key in INDICATOR_CATALOG:
            indicator = getattr(self, key)
            if indicator is not None:
                result.append((key, indicator))
        return result

    def by_category(self) -> dict[str, list[tuple[str, FinancialIndicator]]]:
        """Group populated indicators by category, preserving display order."""
        groups: dict[str, list[tuple[str, FinancialIndicator]]] = {}
        for key, indicator in self.items():
            groups.setdefault(INDICATOR_CATALOG[key].category, []).append((key, indicator))
        return groups

    @property
    def overall_score(self) -> int:
        """Mean status score (good=100, normal=70, bad=30) of classified indicators."""
        scores = [STATUS_SCORES[ind.status] for _, ind in self.items() if ind.status.is_classified]
        if not scores:
            return 0
        return round(sum(scores) / len(scores))

    @property
    def status_counts(self) -> dict[IndicatorStatus, int]:
        counts = {status: 0 for status in IndicatorStatus}
        for _, indicator in self.items():
            counts[indicator.status] += 1
        return counts

    def recommendation(self, key: str) -> str:
        """Short advice for an indicator based on its status."""
        indicator = getattr(self, key, None)
        if indicator is None:
            return "Not applicable to this business."
        if indicator.status == IndicatorStatus.GOOD:
            return "Keep up these excellent levels."
        if indicator.status == IndicatorStatus.NORMAL:
            return _NORMAL_ADVICE.get(key, "Monitor and look for improvements.")
        if indicator.status == IndicatorStatus.BAD:
            return _BAD_ADVICE.get(key, "Requires immediate attention.")
        if indicator.status == IndicatorStatus.NOT_APPLICABLE:
            return "Not applicable to this business."
        return "Insufficient data for analysis."

    def to_markdown(self) -> str:
        """Export indicators as Markdown."""
        from fundwise.exporters.markdown import render_indicators_markdown

        return render_indicators_markdown(self)

    def to_json(self) -> str:
        """Export indicators as JSON."""
        return self.model_dump_json(indent=2)

    def to_dict(self) -> dict[str, Any]:
        """Export indicators as dictionary."""
        return self.model_dump()
