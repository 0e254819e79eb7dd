"""
Rate Service — exchange rates and conversions for funding quotes.

Resolution order for a pair:
1. Same asset on both sides (rate 1, no lookup)
2. Fresh cache entry
3. Primary source, then backup source
4. Static fallback table (reciprocal of the inverse entry if needed),
   and as a last resort a rate of 1

Every resolved rate is cached for the freshness window. Fallback rates come
back with ``success=False`` so the UI can flag stale pricing, but a usable
number is always returned.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any, Callable

from fundwise.models.funding import (
    AssetInfo,
    Conversion,
    ExchangeRate,
    RateResponse,
    SupportedAsset,
    TransactionType,
)
from fundwise.rates import assets
from fundwise.rates.cache import DEFAULT_TTL_SECONDS, RateCache
from fundwise.rates.sources import (
    BaseRateSource,
    ExchangeRateAPISource,
    OpenERAPISource,
    normalize_asset,
)

if TYPE_CHECKING:
    import httpx

    from fundwise.config import FundwiseConfig

logger = logging.getLogger("fundwise.rates.service")

# Pricing policy
CASHOUT_MARGIN = 0.98  # Cash-out gets a 2% less favorable rate
CASHOUT_FEE_PCT = 2.0  # Fee on the destination amount, cash-out only

FALLBACK_SOURCE = "fallback"
FALLBACK_ERROR = "Failed to fetch current rate, using fallback"

DEFAULT_FALLBACK_RATES: dict[str, float] = {
    "USD/COP": 4100.0,
    "COP/USD": 0.000244,
}


class RateService:
    """Resolve exchange rates and price conversions.

    Usage::

        async with RateService.from_config() as rates:
            resp = await rates.get_exchange_rate("USDC", "COP")
            conv = rates.calculate_conversion(100, resp.rate, TransactionType.CASHOUT)

    Args:
        sources: Providers tried in order. Defaults to the primary and backup APIs.
        cache: Rate cache. Defaults to a 60-second cache on the wall clock.
        fallback_rates: Static ``"FROM/TO" -> rate`` table.
    """

    def __init__(
        self,
        sources: list[BaseRateSource] | None = None,
        *,
        cache: RateCache | None = None,
        fallback_rates: dict[str, float] | None = None,
        cache_ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if sources is None:
            sources = [ExchangeRateAPISource(), OpenERAPISource()]
        self.sources = sources
        self.cache = cache if cache is not None else RateCache(cache_ttl_seconds, clock=clock)
        self.fallback_rates = dict(fallback_rates if fallback_rates is not None else DEFAULT_FALLBACK_RATES)

    @classmethod
    def from_config(
        cls,
        config: FundwiseConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        **kwargs: Any,
    ) -> RateService:
        """Build a service with sources, TTL and fallbacks taken from config."""
        from fundwise.config import FundwiseConfig

        config = config or FundwiseConfig()
        rates = config.rates
        sources: list[BaseRateSource] = [
            ExchangeRateAPISource(rates.primary_url, timeout=rates.timeout_seconds, transport=transport),
            OpenERAPISource(rates.backup_url, timeout=rates.timeout_seconds, transport=transport),
        ]
        return cls(
            sources,
            fallback_rates=rates.fallback_rates,
            cache_ttl_seconds=rates.cache_ttl_seconds,
            **kwargs,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def close(self) -> None:
        for source in self.sources:
            await source.close()

    async def __aenter__(self) -> RateService:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    def clear_cache(self) -> None:
        self.cache.clear()

    # ------------------------------------------------------------------
    # Rates
    # ------------------------------------------------------------------

    async def get_exchange_rate(
        self,
        from_asset: SupportedAsset | str,
        to_asset: SupportedAsset | str,
    ) -> RateResponse:
        """Rate for 1 unit of ``from_asset`` expressed in ``to_asset``."""
        from_asset = SupportedAsset(from_asset)
        to_asset = SupportedAsset(to_asset)
        pair = f"{from_asset.value}/{to_asset.value}"

        if from_asset == to_asset:
            return RateResponse(success=True, rate=1.0, source="identity", timestamp=self.cache.now_ms())

        cached = self.cache.get(pair)
        if cached is not None:
            logger.debug("Cache hit for %s (%s)", pair, cached.source)
            return self._response(cached)

        for source in self.sources:
            try:
                rate = await source.fetch_rate(from_asset, to_asset)
            except Exception:
                logger.exception("Rate source %s raised for %s", source.name, pair)
                rate = None
            if rate is not None:
                entry = ExchangeRate(rate=rate, timestamp=self.cache.now_ms(), source=source.name)
                self.cache.set(pair, entry)
                logger.info("Resolved %s = %s from %s", pair, rate, source.name)
                return self._response(entry)

        rate = self.get_fallback_rate(from_asset, to_asset)
        if rate is None:
            logger.warning("No fallback rate found for %s, using 1", pair)
            rate = 1.0
        else:
            logger.warning("All rate sources failed for %s, using fallback %s", pair, rate)

        entry = ExchangeRate(rate=rate, timestamp=self.cache.now_ms(), source=FALLBACK_SOURCE)
        self.cache.set(pair, entry)
        return self._response(entry)

    @staticmethod
    def _response(entry: ExchangeRate) -> RateResponse:
        is_fallback = entry.source == FALLBACK_SOURCE
        return RateResponse(
            success=not is_fallback,
            rate=entry.rate,
            source=entry.source,
            timestamp=entry.timestamp,
            error=FALLBACK_ERROR if is_fallback else None,
        )

    def get_fallback_rate(self, from_asset: SupportedAsset, to_asset: SupportedAsset) -> float | None:
        """Static rate for the pair, treating stablecoins as their peg.

        Uses the reciprocal when only the inverse pair is tabulated. ``None``
        when neither direction is known.
        """
        base = normalize_asset(from_asset).value
        target = normalize_asset(to_asset).value
        if base == target:
            return 1.0

        direct = self.fallback_rates.get(f"{base}/{target}")
        if direct:
            return direct

        reverse = self.fallback_rates.get(f"{target}/{base}")
        if reverse:
            return ExchangeRate(rate=reverse, timestamp=self.cache.now_ms(), source=FALLBACK_SOURCE).inverse.rate
        return None

    # ------------------------------------------------------------------
    # Pricing
    # ------------------------------------------------------------------

    @staticmethod
    def apply_margin(rate: float, type: TransactionType | str) -> float:
        """Cash-out uses a 2% less favorable rate; cash-in uses the market rate."""
        if TransactionType(type) == TransactionType.CASHOUT:
            return rate * CASHOUT_MARGIN
        return rate

    def calculate_conversion(self, amount: float, rate: float, type: TransactionType | str) -> Conversion:
        """Convert ``amount`` at ``rate`` including margin and fee.

        The fee is charged on the destination amount:
        ``total_received + fee == amount * adjusted_rate``.
        """
        type = TransactionType(type)
        adjusted_rate = self.apply_margin(rate, type)
        gross = amount * adjusted_rate
        fee_pct = CASHOUT_FEE_PCT if type == TransactionType.CASHOUT else 0.0
        fee = gross * fee_pct / 100

        return Conversion(
            adjusted_rate=adjusted_rate,
            total_received=gross - fee,
            fee=fee,
            fee_percentage=fee_pct,
        )

    # ------------------------------------------------------------------
    # Presentation helpers
    # ------------------------------------------------------------------

    @staticmethod
    def format_currency(amount: float, asset: SupportedAsset | str) -> str:
        return assets.format_currency(amount, asset)

    @staticmethod
    def get_asset_info(asset: SupportedAsset | str) -> AssetInfo:
        return assets.get_asset_info(asset)
