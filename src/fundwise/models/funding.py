"""
Funding models — assets, exchange rates, conversions and quotes.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SupportedAsset(str, Enum):
    """Assets that can be bought or sold through the funding desk."""

    USDC = "USDC"
    COP = "COP"
    USD = "USD"
    ETH = "ETH"
    BTC = "BTC"


class TransactionType(str, Enum):
    """Direction of a funding operation."""

    CASHIN = "cashin"  # Fiat -> stablecoin
    CASHOUT = "cashout"  # Stablecoin -> fiat


class AssetInfo(BaseModel):
    """Static metadata for a supported asset."""

    model_config = ConfigDict(frozen=True)

    symbol: SupportedAsset
    name: str
    decimals: int
    icon: str
    is_stablecoin: bool = False
    is_fiat: bool = False
    contract_address: str | None = None
    network: str | None = None


class ExchangeRate(BaseModel):
    """A point-in-time rate for an ordered asset pair."""

    model_config = ConfigDict(frozen=True)

    rate: float
    timestamp: int = Field(description="Epoch milliseconds when the rate was resolved")
    source: str

    @property
    def inverse(self) -> ExchangeRate:
        """Get inverse rate."""
        return ExchangeRate(
            rate=1.0 / self.rate if self.rate != 0 else 0.0,
            timestamp=self.timestamp,
            source=self.source,
        )


class RateResponse(BaseModel):
    """Result of a rate lookup.

    ``success`` is false when the rate comes from the static fallback table;
    ``rate`` is always usable.
    """

    success: bool
    rate: float
    source: str
    timestamp: int
    error: str | None = None


class Conversion(BaseModel):
    """Amounts after applying margin and fee to a market rate."""

    adjusted_rate: float
    total_received: float = Field(description="Net destination amount after fee")
    fee: float = Field(description="Fee in the destination asset")
    fee_percentage: float


class FundingRequest(BaseModel):
    """What the user asks to convert."""

    type: TransactionType
    amount: float
    asset_sell: SupportedAsset
    asset_buy: SupportedAsset
    wallet_address: str | None = None
    notes: str | None = None

    @classmethod
    def for_type(
        cls,
        type: TransactionType,
        amount: float,
        *,
        wallet_address: str | None = None,
        notes: str | None = None,
    ) -> FundingRequest:
        """Build a request with the default asset pair for the direction.

        Cash-in sells COP for USDC; cash-out sells USDC for COP.
        """
        if type == TransactionType.CASHIN:
            sell, buy = SupportedAsset.COP, SupportedAsset.USDC
        else:
            sell, buy = SupportedAsset.USDC, SupportedAsset.COP
        return cls(
            type=type,
            amount=amount,
            asset_sell=sell,
            asset_buy=buy,
            wallet_address=wallet_address,
            notes=notes,
        )


class FundingQuote(BaseModel):
    """A priced conversion offer, valid for a short window."""

    model_config = ConfigDict(frozen=True)

    type: TransactionType
    amount: float
    asset_sell: SupportedAsset
    asset_buy: SupportedAsset
    rate: float
    adjusted_rate: float
    total_received: float
    total_sent: float
    fee: float
    fee_percentage: float
    margin: float = Field(description="Margin applied in percent, e.g. -2 for cash-out")
    rate_source: str = "api"
    created_at: int = Field(description="Epoch milliseconds")
    valid_until: int = Field(description="Epoch milliseconds after which the quote must be re-requested")

    @property
    def uses_fallback_rate(self) -> bool:
        return self.rate_source == "fallback"

    def is_expired(self, now_ms: int) -> bool:
        return now_ms > self.valid_until

    def to_markdown(self) -> str:
        """Export quote as Markdown."""
        from fundwise.exporters.markdown import render_quote_markdown

        return render_quote_markdown(self)
