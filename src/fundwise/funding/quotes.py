"""
Quote Builder — validate funding requests and price them into quotes.

A quote freezes the rate, margin and fee for a short window (5 minutes by
default). Expired quotes must never be executed; callers request a new one.
"""

from __future__ import annotations

import logging
import math
import re
import time
from typing import TYPE_CHECKING, Callable

from fundwise.config import AssetLimits, FundingConfig
from fundwise.models.funding import FundingQuote, FundingRequest, TransactionType
from fundwise.rates.assets import format_currency
from fundwise.rates.service import CASHOUT_MARGIN

if TYPE_CHECKING:
    from fundwise.config import FundwiseConfig
    from fundwise.rates.service import RateService

logger = logging.getLogger("fundwise.funding.quotes")

DEFAULT_VALIDITY_SECONDS = 300

_EVM_ADDRESS = re.compile(r"^0x[a-fA-F0-9]{40}$")


class FundingRequestError(ValueError):
    """Raised when a funding request fails validation.

    ``errors`` maps field names to user-facing messages.
    """

    def __init__(self, errors: dict[str, str]) -> None:
        self.errors = errors
        super().__init__("; ".join(f"{field}: {msg}" for field, msg in errors.items()))


def is_valid_evm_address(address: str) -> bool:
    return bool(_EVM_ADDRESS.match(address))


class QuoteBuilder:
    """Turn funding requests into priced, time-limited quotes.

    Usage::

        builder = QuoteBuilder(rate_service)
        request = FundingRequest.for_type(TransactionType.CASHIN, 250_000)
        quote = await builder.build_quote(request)
    """

    def __init__(
        self,
        rate_service: RateService,
        *,
        limits: dict[str, AssetLimits] | None = None,
        validity_seconds: int = DEFAULT_VALIDITY_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.rate_service = rate_service
        self.limits = limits if limits is not None else FundingConfig().limits
        self.validity_seconds = validity_seconds
        self._clock = clock

    @classmethod
    def from_config(cls, rate_service: RateService, config: FundwiseConfig | None = None) -> QuoteBuilder:
        from fundwise.config import FundwiseConfig

        funding = (config or FundwiseConfig()).funding
        return cls(rate_service, limits=funding.limits, validity_seconds=funding.quote_validity_seconds)

    def validate_request(self, request: FundingRequest) -> dict[str, str]:
        """Return field errors for the request; empty when it is valid."""
        errors: dict[str, str] = {}
        sell = request.asset_sell.value

        if not math.isfinite(request.amount) or request.amount <= 0:
            errors["amount"] = "Amount must be a number greater than 0"
        elif sell in self.limits:
            limit = self.limits[sell]
            if request.amount < limit.minimum:
                errors["amount"] = f"Minimum amount: {format_currency(limit.minimum, sell)}"
            elif request.amount > limit.maximum:
                errors["amount"] = f"Maximum amount: {format_currency(limit.maximum, sell)}"

        if request.asset_sell == request.asset_buy:
            errors["asset_buy"] = "Buy and sell assets must differ"

        wallet = (request.wallet_address or "").strip()
        if request.type == TransactionType.CASHOUT and not wallet:
            errors["wallet_address"] = "Wallet address is required for cash out"
        elif wallet and not is_valid_evm_address(wallet):
            errors["wallet_address"] = "Invalid wallet address"

        return errors

    async def build_quote(self, request: FundingRequest) -> FundingQuote:
        """Validate, fetch the current rate and price the request.

        Raises:
            FundingRequestError: If the request is invalid.
        """
        errors = self.validate_request(request)
        if errors:
            raise FundingRequestError(errors)

        rate = await self.rate_service.get_exchange_rate(request.asset_sell, request.asset_buy)
        if not rate.success:
            logger.warning(
                "Quoting %s/%s on fallback rate %s",
                request.asset_sell.value,
                request.asset_buy.value,
                rate.rate,
            )

        conversion = self.rate_service.calculate_conversion(request.amount, rate.rate, request.type)
        now_ms = int(self._clock() * 1000)

        quote = FundingQuote(
            type=request.type,
            amount=request.amount,
            asset_sell=request.asset_sell,
            asset_buy=request.asset_buy,
            rate=rate.rate,
            adjusted_rate=conversion.adjusted_rate,
            total_received=conversion.total_received,
            total_sent=request.amount,
            fee=conversion.fee,
            fee_percentage=conversion.fee_percentage,
            margin=round((CASHOUT_MARGIN - 1) * 100, 4) if request.type == TransactionType.CASHOUT else 0.0,
            rate_source=rate.source,
            created_at=now_ms,
            valid_until=now_ms + self.validity_seconds * 1000,
        )
        logger.info(
            "Quote %s %s %s -> %s %s (valid until %d)",
            request.type.value,
            request.amount,
            request.asset_sell.value,
            round(quote.total_received, 6),
            request.asset_buy.value,
            quote.valid_until,
        )
        return quote

    def is_expired(self, quote: FundingQuote) -> bool:
        """Whether the quote is past its validity window on this builder's clock."""
        return quote.is_expired(int(self._clock() * 1000))
