"""
Supported assets — static metadata and display formatting.
"""

from __future__ import annotations

from typing import NamedTuple

from fundwise.models.funding import AssetInfo, SupportedAsset

ASSET_INFO: dict[SupportedAsset, AssetInfo] = {
    SupportedAsset.USDC: AssetInfo(
        symbol=SupportedAsset.USDC,
        name="USD Coin",
        decimals=6,
        icon="💰",
        is_stablecoin=True,
        contract_address="0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48",
        network="Ethereum",
    ),
    SupportedAsset.USD: AssetInfo(symbol=SupportedAsset.USD, name="US Dollar", decimals=2, icon="💵", is_fiat=True),
    SupportedAsset.COP: AssetInfo(
        symbol=SupportedAsset.COP, name="Colombian Peso", decimals=0, icon="💸", is_fiat=True
    ),
    SupportedAsset.ETH: AssetInfo(symbol=SupportedAsset.ETH, name="Ethereum", decimals=18, icon="💎"),
    SupportedAsset.BTC: AssetInfo(symbol=SupportedAsset.BTC, name="Bitcoin", decimals=8, icon="₿"),
}


class _FormatRule(NamedTuple):
    prefix: str
    suffix: str
    min_fraction: int
    max_fraction: int
    thousands: str
    decimal: str


# USD in en-US style, COP in es-CO style, crypto as plain numbers with a ticker.
_FORMAT_RULES: dict[SupportedAsset, _FormatRule] = {
    SupportedAsset.USD: _FormatRule("$", "", 2, 2, ",", "."),
    SupportedAsset.COP: _FormatRule("$ ", "", 2, 2, ".", ","),
    SupportedAsset.USDC: _FormatRule("", " USDC", 2, 6, ",", "."),
    SupportedAsset.ETH: _FormatRule("", " ETH", 4, 6, ",", "."),
    SupportedAsset.BTC: _FormatRule("", " BTC", 6, 8, ",", "."),
}


def get_asset_info(asset: SupportedAsset | str) -> AssetInfo:
    """Static metadata for an asset. Raises ValueError for unknown codes."""
    return ASSET_INFO[SupportedAsset(asset)]


def is_fiat_or_pegged(asset: SupportedAsset) -> bool:
    """Whether the asset can be priced from a fiat FX feed."""
    info = ASSET_INFO[asset]
    return info.is_fiat or info.is_stablecoin


def format_number(
    amount: float,
    *,
    min_fraction: int = 2,
    max_fraction: int = 2,
    thousands: str = ",",
    decimal: str = ".",
) -> str:
    """Group digits and trim trailing fraction zeros down to ``min_fraction``."""
    text = f"{abs(amount):,.{max_fraction}f}"
    if max_fraction > min_fraction:
        whole, _, fraction = text.partition(".")
        fraction = fraction.rstrip("0").ljust(min_fraction, "0")
        text = f"{whole}.{fraction}" if fraction else whole
    text = text.replace(",", "\0").replace(".", decimal).replace("\0", thousands)
    return f"-{text}" if amount < 0 and float(f"{abs(amount):.{max_fraction}f}") != 0 else text


def format_currency(amount: float, asset: SupportedAsset | str = SupportedAsset.USD) -> str:
    """Format an amount for display, e.g. ``$1,234.56`` or ``12.50 USDC``."""
    try:
        rule = _FORMAT_RULES[SupportedAsset(asset)]
    except ValueError:
        rule = _FORMAT_RULES[SupportedAsset.USD]
    number = format_number(
        amount,
        min_fraction=rule.min_fraction,
        max_fraction=rule.max_fraction,
        thousands=rule.thousands,
        decimal=rule.decimal,
    )
    if number.startswith("-"):
        return f"-{rule.prefix}{number[1:]}{rule.suffix}"
    return f"{rule.prefix}{number}{rule.suffix}"
