"""Data models — snapshots, indicators, rates and quotes."""
from fundwise.models.company import BusinessProfile
from fundwise.models.financial import (
    BalanceSheet,
    CapitalRequest,
    Commercial,
    FinancialSnapshot,
    IncomeStatement,
    Operations,
    Periodicity,
    ReportDetails,
    ReportingCurrency,
    RevenueModel,
)
from fundwise.models.funding import (
    AssetInfo,
    Conversion,
    ExchangeRate,
    FundingQuote,
    FundingRequest,
    RateResponse,
    SupportedAsset,
    TransactionType,
)
from fundwise.models.indicators import (
    CalculatedIndicators,
    FinancialIndicator,
    IndicatorKind,
    IndicatorStatus,
)

__all__ = [
    "AssetInfo",
    "BalanceSheet",
    "BusinessProfile",
    "CalculatedIndicators",
    "CapitalRequest",
    "Commercial",
    "Conversion",
    "ExchangeRate",
    "FinancialIndicator",
    "FinancialSnapshot",
    "FundingQuote",
    "FundingRequest",
    "IncomeStatement",
    "IndicatorKind",
    "IndicatorStatus",
    "Operations",
    "Periodicity",
    "RateResponse",
    "ReportDetails",
    "ReportingCurrency",
    "RevenueModel",
    "SupportedAsset",
    "TransactionType",
]
