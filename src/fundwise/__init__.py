"""
fundwise — Business onboarding analytics and funding quotes.

Financial indicators for KYB review. Exchange rates and cash-in/cash-out
quotes for stablecoin funding.
"""

__version__ = "0.1.0"
__all__ = ["FinancialCalculator", "QuoteBuilder", "RateService"]

from fundwise.analyzers.indicators import FinancialCalculator  # noqa: E402
from fundwise.funding.quotes import QuoteBuilder  # noqa: E402
from fundwise.rates.service import RateService  # noqa: E402
