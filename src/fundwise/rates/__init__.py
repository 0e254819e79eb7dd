"""Rates package — exchange-rate sources, cache and service."""
from fundwise.rates.assets import ASSET_INFO, format_currency, get_asset_info
from fundwise.rates.cache import RateCache
from fundwise.rates.service import RateService
from fundwise.rates.sources import BaseRateSource, ExchangeRateAPISource, OpenERAPISource

__all__ = [
    "ASSET_INFO",
    "BaseRateSource",
    "ExchangeRateAPISource",
    "OpenERAPISource",
    "RateCache",
    "RateService",
    "format_currency",
    "get_asset_info",
]
