"""
Financial statement models — the snapshot a business submits for review.

Every numeric field is optional: ``None`` means the value was not supplied,
which is kept distinct from a reported ``0``.
"""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ReportingCurrency(str, Enum):
    """Currencies a statement can be reported in."""

    USD = "USD"
    EUR = "EUR"
    COP = "COP"
    MXN = "MXN"
    BRL = "BRL"
    ARS = "ARS"


class RevenueModel(str, Enum):
    """How the business earns revenue. Selects the LTV formula."""

    SUBSCRIPTION = "subscription"
    TRANSACTIONAL = "transactional"
    MIXED = "mixed"


class Periodicity(str, Enum):
    """Length of the period the customer counts cover."""

    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ANNUAL = "annual"

    @property
    def months(self) -> int:
        return {"monthly": 1, "quarterly": 3, "annual": 12}[self.value]


class _Group(BaseModel):
    model_config = ConfigDict(frozen=True)


class ReportDetails(_Group):
    """Currency, revenue model and reporting period."""

    reporting_currency: ReportingCurrency = ReportingCurrency.USD
    revenue_model: RevenueModel = RevenueModel.MIXED
    period_start: date | None = None
    period_end: date | None = None


class IncomeStatement(_Group):
    """Profit and loss figures for the period."""

    domestic_sales: float | None = None
    export_sales: float | None = None
    prior_year_revenue: float | None = Field(default=None, description="Revenue for the previous year")
    cost_of_sales: float | None = None
    operating_expenses: float | None = None
    rnd_expense: float | None = Field(default=None, description="Research and development spend")
    capex: float | None = Field(default=None, description="Capital expenditure")
    net_income: float | None = None


class Commercial(_Group):
    """Customer acquisition and retention figures.

    ``mrr`` and ``average_active_customers`` apply to subscription businesses;
    ``average_ticket``, ``annual_purchase_frequency`` and ``retention_years``
    apply to transactional ones.
    """

    periodicity: Periodicity = Periodicity.MONTHLY
    acquisition_spend: float | None = None
    new_customers: float | None = Field(default=None, ge=0)
    starting_customers: float | None = Field(default=None, ge=0)
    churned_customers: float | None = Field(default=None, ge=0)
    ending_customers: float | None = Field(default=None, ge=0)
    mrr: float | None = Field(default=None, description="Monthly recurring revenue")
    average_active_customers: float | None = Field(default=None, ge=0)
    average_ticket: float | None = None
    annual_purchase_frequency: float | None = Field(default=None, ge=0)
    retention_years: float | None = Field(default=None, ge=0)


class BalanceSheet(_Group):
    """Point-in-time balance sheet at period end."""

    current_assets: float | None = None
    cash: float | None = None
    receivables: float | None = None
    inventory: float | None = None
    non_current_assets: float | None = None
    current_liabilities: float | None = None
    payables: float | None = None
    short_term_debt: float | None = None
    non_current_liabilities: float | None = None
    equity: float | None = None


class Operations(_Group):
    monthly_burn_rate: float | None = None


class CapitalRequest(_Group):
    """Investment amount the business is asking for."""

    requested_amount: float | None = Field(default=None, ge=0)


class FinancialSnapshot(_Group):
    """Complete financial submission for one review.

    This is what the onboarding form produces and the calculator consumes.
    """

    report_details: ReportDetails = Field(default_factory=ReportDetails)
    income_statement: IncomeStatement = Field(default_factory=IncomeStatement)
    commercial: Commercial = Field(default_factory=Commercial)
    balance_sheet: BalanceSheet = Field(default_factory=BalanceSheet)
    operations: Operations = Field(default_factory=Operations)
    capital_request: CapitalRequest = Field(default_factory=CapitalRequest)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> FinancialSnapshot:
        """Build a snapshot from plain data (e.g. a parsed YAML file)."""
        return cls.model_validate(data or {})

    @property
    def revenue_model(self) -> RevenueModel:
        return self.report_details.revenue_model

    @property
    def currency(self) -> str:
        return self.report_details.reporting_currency.value
