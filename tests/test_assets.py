"""Tests for supported asset metadata and formatting."""

import pytest

from fundwise.models.funding import SupportedAsset
from fundwise.rates.assets import ASSET_INFO, format_currency, format_number, get_asset_info, is_fiat_or_pegged


class TestAssetInfo:
    def test_every_asset_has_info(self):
        assert set(ASSET_INFO) == set(SupportedAsset)

    def test_usdc(self):
        info = get_asset_info("USDC")
        assert info.decimals == 6
        assert info.is_stablecoin
        assert info.network == "Ethereum"
        assert info.contract_address.startswith("0x")

    def test_fiat(self):
        assert get_asset_info(SupportedAsset.COP).is_fiat
        assert get_asset_info(SupportedAsset.USD).is_fiat

    def test_unknown_asset(self):
        with pytest.raises(ValueError):
            get_asset_info("DOGE")

    def test_priced_from_fx(self):
        assert is_fiat_or_pegged(SupportedAsset.USDC)
        assert not is_fiat_or_pegged(SupportedAsset.ETH)


class TestFormatting:
    def test_usd(self):
        assert format_currency(1234.5, "USD") == "$1,234.50"

    def test_cop_uses_colombian_separators(self):
        assert format_currency(4100, "COP") == "$ 4.100,00"
        assert format_currency(1_250_000.5, SupportedAsset.COP) == "$ 1.250.000,50"

    def test_usdc_trims_trailing_zeros(self):
        assert format_currency(12.5, "USDC") == "12.50 USDC"
        assert format_currency(1234.567891, "USDC") == "1,234.567891 USDC"

    def test_crypto_precision(self):
        assert format_currency(1.5, "ETH") == "1.5000 ETH"
        assert format_currency(0.00012345, "BTC") == "0.00012345 BTC"

    def test_negative(self):
        assert format_currency(-5, "USD") == "-$5.00"

    def test_unknown_code_formats_as_usd(self):
        assert format_currency(10, "XYZ") == "$10.00"

    def test_format_number(self):
        assert format_number(1000) == "1,000.00"
        assert format_number(1000, thousands=".", decimal=",") == "1.000,00"
        assert format_number(2.0, min_fraction=0, max_fraction=4) == "2"
