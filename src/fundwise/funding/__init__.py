"""Funding package — cash-in / cash-out quotes."""
from fundwise.funding.quotes import FundingRequestError, QuoteBuilder, is_valid_evm_address

__all__ = ["FundingRequestError", "QuoteBuilder", "is_valid_evm_address"]
