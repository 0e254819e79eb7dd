"""
Financial Indicator Calculator — derive credit and business health indicators.

Turns one submitted financial snapshot into ~18 indicators used by the
onboarding review:
- Profitability: EBITDA proxy, gross/operating margin, ROE
- Liquidity & leverage: current ratio, debt/equity, runway
- Efficiency & growth: ROA, revenue per employee, YoY growth
- Unit economics: CAC, churn, LTV, LTV/CAC
- Funding: capital gap

Each indicator is classified good / normal / bad against fixed thresholds.
Missing inputs and non-positive divisors never raise; they produce a zero
value with status ``insufficient_data`` so "unknown" stays distinguishable
from a measured zero.
"""

from __future__ import annotations

import logging
from typing import Any

from fundwise.models.company import BusinessProfile
from fundwise.models.financial import FinancialSnapshot, RevenueModel
from fundwise.models.indicators import (
    INDICATOR_CATALOG,
    CalculatedIndicators,
    FinancialIndicator,
    IndicatorStatus,
)

logger = logging.getLogger("fundwise.analyzers.indicators")

GOOD = IndicatorStatus.GOOD
NORMAL = IndicatorStatus.NORMAL
BAD = IndicatorStatus.BAD
NO_DATA = IndicatorStatus.INSUFFICIENT_DATA

DEFAULT_CAPITAL_REQUEST_RATIO = 0.30

DESCRIPTIONS: dict[str, str] = {
    "ebitda": "Operating profit before interest, taxes, depreciation and amortization",
    "gross_margin": "Share of revenue left after cost of sales",
    "operating_margin": "Share of revenue left after operating expenses",
    "current_ratio": "Ability to pay short-term obligations",
    "debt_to_equity": "Financial leverage",
    "roe": "Return generated on shareholders' equity",
    "roa": "Efficiency of assets in generating profit",
    "runway": "Months of operation covered by current cash",
    "revenue_per_employee": "Labor productivity measured as revenue per employee",
    "yoy_growth": "Year-over-year revenue growth",
    "rnd_percentage": "Innovation spend as a share of revenue",
    "export_percentage": "International diversification of revenue",
    "capex_ratio": "Investment in productive assets as a share of revenue",
    "cac": "Average cost to acquire a new customer",
    "churn": "Monthly customer loss rate",
    "ltv_sub": "Customer lifetime value for a subscription model",
    "ltv_tx": "Customer lifetime value for a transactional model",
    "ltv_cac": "Customer lifetime value relative to acquisition cost",
    "capital_gap": "Reasonableness of the capital request relative to revenue",
}


def _total(*values: float | None) -> float | None:
    """Sum the supplied values; ``None`` only when every value is missing."""
    present = [v for v in values if v is not None]
    if not present:
        return None
    return float(sum(present))


def _ratio(numerator: float | None, denominator: float | None) -> float | None:
    """Divide, or ``None`` when an operand is missing or the divisor is not positive."""
    if numerator is None or denominator is None or denominator <= 0:
        return None
    return numerator / denominator


def classify(value: float, good: float, normal: float, *, percentage: bool = False) -> IndicatorStatus:
    """Higher-is-better classification. Percentages compare in percentage space."""
    if percentage:
        value = value * 100
    if value >= good:
        return GOOD
    if value >= normal:
        return NORMAL
    return BAD


class FinancialCalculator:
    """Compute all financial indicators for one snapshot.

    Usage::

        calc = FinancialCalculator(snapshot, BusinessProfile(employee_count=12))
        indicators = calc.calculate_all()
        print(indicators.gross_margin.status)
    """

    def __init__(
        self,
        snapshot: FinancialSnapshot,
        profile: BusinessProfile | None = None,
        *,
        assumed_capital_request_ratio: float = DEFAULT_CAPITAL_REQUEST_RATIO,
    ) -> None:
        self.snapshot = snapshot
        self.profile = profile if profile is not None else BusinessProfile()
        self.assumed_capital_request_ratio = assumed_capital_request_ratio

    def calculate_all(self) -> CalculatedIndicators:
        """Run every indicator calculation and assemble the report."""
        revenue = self.total_revenue
        gross_profit = self.gross_profit
        operating_profit = self.operating_profit
        model = self.snapshot.revenue_model

        cac = self.calculate_cac()
        ltv_sub = self.calculate_ltv_subscription(cac) if model == RevenueModel.SUBSCRIPTION else None
        ltv_tx = self.calculate_ltv_transactional(cac) if model == RevenueModel.TRANSACTIONAL else None

        indicators = CalculatedIndicators(
            ebitda=self.calculate_ebitda(operating_profit),
            gross_margin=self.calculate_gross_margin(gross_profit, revenue),
            operating_margin=self.calculate_operating_margin(operating_profit, revenue),
            current_ratio=self.calculate_current_ratio(),
            debt_to_equity=self.calculate_debt_to_equity(self.total_liabilities),
            roe=self.calculate_roe(),
            roa=self.calculate_roa(self.total_assets),
            runway=self.calculate_runway(),
            revenue_per_employee=self.calculate_revenue_per_employee(revenue),
            yoy_growth=self.calculate_yoy_growth(revenue),
            rnd_percentage=self.calculate_rnd_percentage(revenue),
            export_percentage=self.calculate_export_percentage(revenue),
            capex_ratio=self.calculate_capex_ratio(revenue),
            cac=cac,
            churn=self.calculate_churn(),
            ltv_sub=ltv_sub,
            ltv_tx=ltv_tx,
            ltv_cac=self.calculate_ltv_cac(ltv_sub if ltv_sub is not None else ltv_tx, cac),
            capital_gap=self.calculate_capital_gap(revenue),
            currency=self.snapshot.currency,
        )

        logger.debug(
            "Calculated %d indicators (%s model), overall score %d",
            len(indicators.items()),
            model.value,
            indicators.overall_score,
        )
        return indicators

    # ------------------------------------------------------------------
    # Derived base quantities
    # ------------------------------------------------------------------

    @property
    def total_revenue(self) -> float | None:
        income = self.snapshot.income_statement
        return _total(income.domestic_sales, income.export_sales)

    @property
    def gross_profit(self) -> float | None:
        revenue = self.total_revenue
        cost = self.snapshot.income_statement.cost_of_sales
        if revenue is None and cost is None:
            return None
        return (revenue or 0.0) - (cost or 0.0)

    @property
    def operating_profit(self) -> float | None:
        gross = self.gross_profit
        opex = self.snapshot.income_statement.operating_expenses
        if gross is None and opex is None:
            return None
        return (gross or 0.0) - (opex or 0.0)

    @property
    def total_assets(self) -> float | None:
        balance = self.snapshot.balance_sheet
        return _total(balance.current_assets, balance.non_current_assets)

    @property
    def total_liabilities(self) -> float | None:
        balance = self.snapshot.balance_sheet
        return _total(balance.current_liabilities, balance.non_current_liabilities)

    @property
    def monthly_churn_rate(self) -> float | None:
        """Churned / starting customers, normalized to a monthly rate.

        ``None`` when churned or starting customers were not reported.
        """
        commercial = self.snapshot.commercial
        if commercial.churned_customers is None or not commercial.starting_customers:
            return None
        period_churn = commercial.churned_customers / commercial.starting_customers
        return period_churn / commercial.periodicity.months

    # ------------------------------------------------------------------
    # Indicators
    # ------------------------------------------------------------------

    def _indicator(self, key: str, value: float | None, status: IndicatorStatus) -> FinancialIndicator:
        spec = INDICATOR_CATALOG[key]
        if value is None:
            value, status = 0.0, NO_DATA
        return FinancialIndicator(
            value=value,
            status=status,
            description=DESCRIPTIONS[key],
            kind=spec.kind,
            category=spec.category,
        )

    def _thresholded(
        self, key: str, value: float | None, good: float, normal: float, *, percentage: bool = False
    ) -> FinancialIndicator:
        if value is None:
            return self._indicator(key, None, NO_DATA)
        return self._indicator(key, value, classify(value, good, normal, percentage=percentage))

    def calculate_ebitda(self, operating_profit: float | None) -> FinancialIndicator:
        # Operating profit stands in for EBITDA; depreciation and amortization are not collected.
        if operating_profit is None:
            return self._indicator("ebitda", None, NO_DATA)
        if operating_profit > 0:
            status = GOOD
        elif operating_profit == 0:
            status = NORMAL
        else:
            status = BAD
        return self._indicator("ebitda", operating_profit, status)

    def calculate_gross_margin(self, gross_profit: float | None, revenue: float | None) -> FinancialIndicator:
        return self._thresholded("gross_margin", _ratio(gross_profit, revenue), 30, 20, percentage=True)

    def calculate_operating_margin(
        self, operating_profit: float | None, revenue: float | None
    ) -> FinancialIndicator:
        return self._thresholded("operating_margin", _ratio(operating_profit, revenue), 15, 5, percentage=True)

    def calculate_current_ratio(self) -> FinancialIndicator:
        balance = self.snapshot.balance_sheet
        ratio = _ratio(balance.current_assets, balance.current_liabilities)
        return self._thresholded("current_ratio", ratio, 1.5, 1.0)

    def calculate_debt_to_equity(self, total_liabilities: float | None) -> FinancialIndicator:
        ratio = _ratio(total_liabilities, self.snapshot.balance_sheet.equity)
        if ratio is None:
            return self._indicator("debt_to_equity", None, NO_DATA)
        # Lower is better
        if ratio < 1.0:
            status = GOOD
        elif ratio <= 2.0:
            status = NORMAL
        else:
            status = BAD
        return self._indicator("debt_to_equity", ratio, status)

    def calculate_roe(self) -> FinancialIndicator:
        roe = _ratio(self.snapshot.income_statement.net_income, self.snapshot.balance_sheet.equity)
        return self._thresholded("roe", roe, 12, 6, percentage=True)

    def calculate_roa(self, total_assets: float | None) -> FinancialIndicator:
        roa = _ratio(self.snapshot.income_statement.net_income, total_assets)
        return self._thresholded("roa", roa, 8, 3, percentage=True)

    def calculate_runway(self) -> FinancialIndicator:
        runway = _ratio(self.snapshot.balance_sheet.cash, self.snapshot.operations.monthly_burn_rate)
        return self._thresholded("runway", runway, 12, 6)

    def calculate_revenue_per_employee(self, revenue: float | None) -> FinancialIndicator:
        if revenue is None:
            return self._indicator("revenue_per_employee", None, NO_DATA)
        employees = max(self.profile.employee_count or 0, 1)
        value = revenue / employees
        if not self.profile.has_headcount:
            return self._indicator("revenue_per_employee", value, NO_DATA)
        return self._indicator("revenue_per_employee", value, classify(value, 100_000, 50_000))

    def calculate_yoy_growth(self, revenue: float | None) -> FinancialIndicator:
        prior = self.snapshot.income_statement.prior_year_revenue
        growth = _ratio(None if revenue is None else revenue - (prior or 0.0), prior)
        return self._thresholded("yoy_growth", growth, 15, 5, percentage=True)

    def calculate_rnd_percentage(self, revenue: float | None) -> FinancialIndicator:
        pct = _ratio(self.snapshot.income_statement.rnd_expense, revenue)
        if pct is None:
            return self._indicator("rnd_percentage", None, NO_DATA)
        # Optimal band is 5-15%
        if 0.05 <= pct <= 0.15:
            status = GOOD
        elif 0.01 <= pct < 0.05 or pct > 0.15:
            status = NORMAL
        else:
            status = BAD
        return self._indicator("rnd_percentage", pct, status)

    def calculate_export_percentage(self, revenue: float | None) -> FinancialIndicator:
        pct = _ratio(self.snapshot.income_statement.export_sales, revenue)
        return self._thresholded("export_percentage", pct, 20, 10, percentage=True)

    def calculate_capex_ratio(self, revenue: float | None) -> FinancialIndicator:
        pct = _ratio(self.snapshot.income_statement.capex, revenue)
        if pct is None:
            return self._indicator("capex_ratio", None, NO_DATA)
        # Optimal band is 5-15%; 15-20% is the only bad band
        if 0.05 <= pct <= 0.15:
            status = GOOD
        elif pct < 0.05 or pct > 0.20:
            status = NORMAL
        else:
            status = BAD
        return self._indicator("capex_ratio", pct, status)

    def calculate_cac(self) -> FinancialIndicator:
        commercial = self.snapshot.commercial
        if commercial.acquisition_spend is None:
            return self._indicator("cac", None, NO_DATA)
        value = commercial.acquisition_spend / max(commercial.new_customers or 0, 1)
        # No absolute benchmark exists for CAC
        status = NORMAL if commercial.new_customers else NO_DATA
        return self._indicator("cac", value, status)

    def calculate_churn(self) -> FinancialIndicator:
        commercial = self.snapshot.commercial
        if commercial.churned_customers is None:
            return self._indicator("churn", None, NO_DATA)
        monthly = self.monthly_churn_rate
        if monthly is None:
            value = commercial.churned_customers / commercial.periodicity.months
            return self._indicator("churn", value, NO_DATA)
        # Lower is better
        if monthly < 0.03:
            status = GOOD
        elif monthly <= 0.05:
            status = NORMAL
        else:
            status = BAD
        return self._indicator("churn", monthly, status)

    def _ltv_status(self, ltv: float, cac: FinancialIndicator) -> IndicatorStatus:
        if not cac.is_measured:
            return NO_DATA
        if ltv > cac.value * 3:
            return GOOD
        if ltv > cac.value * 2:
            return NORMAL
        return BAD

    def calculate_ltv_subscription(self, cac: FinancialIndicator | None = None) -> FinancialIndicator:
        if cac is None:
            cac = self.calculate_cac()
        commercial = self.snapshot.commercial
        if commercial.mrr is None:
            return self._indicator("ltv_sub", None, NO_DATA)
        arpu = commercial.mrr / max(commercial.average_active_customers or 0, 1)
        churn = self.monthly_churn_rate
        if not churn:
            return self._indicator("ltv_sub", None, NO_DATA)
        ltv = arpu / churn
        if not commercial.average_active_customers:
            return self._indicator("ltv_sub", ltv, NO_DATA)
        return self._indicator("ltv_sub", ltv, self._ltv_status(ltv, cac))

    def calculate_ltv_transactional(self, cac: FinancialIndicator | None = None) -> FinancialIndicator:
        if cac is None:
            cac = self.calculate_cac()
        commercial = self.snapshot.commercial
        factors = (commercial.average_ticket, commercial.annual_purchase_frequency, commercial.retention_years)
        if any(f is None for f in factors):
            return self._indicator("ltv_tx", None, NO_DATA)
        ticket, frequency, years = factors
        ltv = ticket * frequency * years
        return self._indicator("ltv_tx", ltv, self._ltv_status(ltv, cac))

    def calculate_ltv_cac(self, ltv: FinancialIndicator | None, cac: FinancialIndicator) -> FinancialIndicator:
        if self.snapshot.revenue_model == RevenueModel.MIXED:
            return self._indicator("ltv_cac", 0.0, IndicatorStatus.NOT_APPLICABLE)
        if ltv is None or ltv.status == NO_DATA or not cac.is_measured:
            return self._indicator("ltv_cac", None, NO_DATA)
        return self._thresholded("ltv_cac", _ratio(ltv.value, cac.value), 3, 2)

    def calculate_capital_gap(self, revenue: float | None) -> FinancialIndicator:
        requested = self.snapshot.capital_request.requested_amount
        if requested is None and revenue is not None:
            # Placeholder until the business supplies a requested amount
            requested = revenue * self.assumed_capital_request_ratio
        pct = _ratio(requested, revenue)
        if pct is None:
            return self._indicator("capital_gap", None, NO_DATA)
        if pct <= 0.20:
            status = GOOD
        elif pct <= 0.40:
            status = NORMAL
        else:
            status = BAD
        return self._indicator("capital_gap", pct, status)


def calculate_indicators(
    snapshot: FinancialSnapshot | dict[str, Any],
    profile: BusinessProfile | dict[str, Any] | None = None,
    **kwargs: Any,
) -> CalculatedIndicators:
    """Convenience function for indicator calculation.

    Accepts models or plain dicts. See FinancialCalculator for options.
    """
    if isinstance(snapshot, dict):
        snapshot = FinancialSnapshot.from_dict(snapshot)
    if isinstance(profile, dict):
        profile = BusinessProfile.model_validate(profile)
    return FinancialCalculator(snapshot, profile, **kwargs).calculate_all()
