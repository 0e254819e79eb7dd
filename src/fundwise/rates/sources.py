"""
Rate sources — external FX providers queried by the RateService.

Each source answers ``fetch_rate(from, to)`` with a number or ``None``.
Network, HTTP and payload errors are logged and reported as ``None`` so the
service can fall through to the next source; they are never raised.

Only fiat pairs are priced. USD-pegged stablecoins are normalized to USD
(1 USDC == 1 USD) before querying.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

from fundwise.models.funding import SupportedAsset
from fundwise.rates.assets import is_fiat_or_pegged

logger = logging.getLogger("fundwise.rates.sources")

# Stablecoins and the fiat currency they track
_PEGS: dict[SupportedAsset, SupportedAsset] = {
    SupportedAsset.USDC: SupportedAsset.USD,
}


def normalize_asset(asset: SupportedAsset) -> SupportedAsset:
    """Map a pegged stablecoin to its fiat currency."""
    return _PEGS.get(asset, asset)


def fiat_pair(from_asset: SupportedAsset, to_asset: SupportedAsset) -> tuple[str, str] | None:
    """Normalized ``(base, target)`` codes, or ``None`` if either side is not fiat."""
    from_asset = SupportedAsset(from_asset)
    to_asset = SupportedAsset(to_asset)
    if not (is_fiat_or_pegged(from_asset) and is_fiat_or_pegged(to_asset)):
        return None
    return normalize_asset(from_asset).value, normalize_asset(to_asset).value


class BaseRateSource(ABC):
    """Abstract base class for rate providers.

    Subclasses implement ``_extract_rate()`` to read one target rate out of a
    ``GET {base_url}/latest/{BASE}`` JSON payload.
    """

    name: str = "base"
    default_url: str = ""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or self.default_url).rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._http: httpx.AsyncClient | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create a reusable httpx client."""
        if self._http is None or self._http.is_closed:
            self._http = httpx.AsyncClient(
                timeout=self.timeout,
                headers={"Accept": "application/json"},
                transport=self._transport,
            )
        return self._http

    async def close(self) -> None:
        """Clean up HTTP client."""
        if self._http and not self._http.is_closed:
            await self._http.aclose()

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    async def fetch_rate(self, from_asset: SupportedAsset, to_asset: SupportedAsset) -> float | None:
        """Rate for 1 unit of ``from_asset`` in ``to_asset``, or ``None`` if unavailable."""
        pair = fiat_pair(from_asset, to_asset)
        if pair is None:
            logger.debug("%s does not price %s/%s", self.name, from_asset, to_asset)
            return None
        base, target = pair
        if base == target:
            return 1.0

        try:
            data = await self._get_latest(base)
            rate = self._extract_rate(data, target)
        except (httpx.HTTPError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning("%s lookup for %s/%s failed: %s", self.name, base, target, e)
            return None

        if rate is None or rate <= 0:
            logger.warning("%s returned no usable rate for %s/%s", self.name, base, target)
            return None
        return rate

    async def _get_latest(self, base: str) -> dict[str, Any]:
        client = await self._get_client()
        resp = await client.get(f"{self.base_url}/latest/{base}")
        resp.raise_for_status()
        data = resp.json()
        if not isinstance(data, dict):
            raise ValueError(f"Unexpected payload type {type(data).__name__}")
        return data

    @abstractmethod
    def _extract_rate(self, data: dict[str, Any], target: str) -> float | None:
        """Read the target rate from a provider payload."""
        ...


class ExchangeRateAPISource(BaseRateSource):
    """Primary source: exchangerate-api.com v4 (no key required).

    ``GET /v4/latest/USD`` returns ``{"base": "USD", "rates": {"COP": 4100.5, ...}}``.
    """

    name = "exchangerate-api"
    default_url = "https://api.exchangerate-api.com/v4"

    def _extract_rate(self, data: dict[str, Any], target: str) -> float | None:
        rate = data["rates"].get(target)
        return float(rate) if rate is not None else None


class OpenERAPISource(BaseRateSource):
    """Backup source: open.er-api.com v6 (no key required).

    Same ``rates`` shape as the primary, plus a ``result`` field that must be
    ``"success"``.
    """

    name = "open-er-api"
    default_url = "https://open.er-api.com/v6"

    def _extract_rate(self, data: dict[str, Any], target: str) -> float | None:
        if data.get("result") != "success":
            raise ValueError(f"provider reported {data.get('error-type') or data.get('result')!r}")
        rate = data["rates"].get(target)
        return float(rate) if rate is not None else None
