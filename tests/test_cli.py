"""Tests for the fundwise command-line interface."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml
from typer.testing import CliRunner

from fundwise import __version__
from fundwise.cli import app
from fundwise.models.funding import RateResponse
from fundwise.rates.service import RateService

runner = CliRunner()

WALLET = "0x" + "b2" * 20


@pytest.fixture
def snapshot_file(tmp_path: Path) -> Path:
    path = tmp_path / "tienda.yaml"
    path.write_text(
        yaml.dump(
            {
                "financial": {
                    "report_details": {"revenue_model": "subscription"},
                    "income_statement": {"domestic_sales": 500_000, "cost_of_sales": 300_000},
                    "commercial": {
                        "acquisition_spend": 5_000,
                        "new_customers": 10,
                        "starting_customers": 100,
                        "churned_customers": 2,
                        "mrr": 10_000,
                        "average_active_customers": 100,
                    },
                },
                "business": {"name": "Tienda Sol", "employee_count": 5},
            }
        )
    )
    return path


@pytest.fixture
def offline_rates(monkeypatch: pytest.MonkeyPatch) -> None:
    """Answer every rate lookup from a fixed table instead of the network."""

    async def fake_get_exchange_rate(self, from_asset, to_asset):  # noqa: ANN001, ANN202
        rates = {("USDC", "COP"): 4000.0, ("COP", "USDC"): 0.00025}
        key = (str(getattr(from_asset, "value", from_asset)), str(getattr(to_asset, "value", to_asset)))
        return RateResponse(success=True, rate=rates.get(key, 1.0), source="test", timestamp=0)

    monkeypatch.setattr(RateService, "get_exchange_rate", fake_get_exchange_rate)


class TestCLI:
    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_assets(self) -> None:
        result = runner.invoke(app, ["assets"])
        assert result.exit_code == 0
        assert "USDC" in result.stdout
        assert "Colombian Peso" in result.stdout

    def test_indicators(self, snapshot_file: Path) -> None:
        result = runner.invoke(app, ["indicators", str(snapshot_file)])
        assert result.exit_code == 0
        assert "Tienda Sol" in result.stdout
        assert "Gross Margin" in result.stdout
        assert "Overall score" in result.stdout

    def test_indicators_json_output(self, snapshot_file: Path, tmp_path: Path) -> None:
        output = tmp_path / "report.json"
        result = runner.invoke(app, ["indicators", str(snapshot_file), "--output", str(output)])
        assert result.exit_code == 0

        data = json.loads(output.read_text())
        assert data["ltv_sub"]["value"] == pytest.approx(5_000)
        assert data["ltv_tx"] is None

    def test_indicators_markdown_output(self, snapshot_file: Path, tmp_path: Path) -> None:
        output = tmp_path / "report.md"
        result = runner.invoke(app, ["indicators", str(snapshot_file), "-o", str(output)])
        assert result.exit_code == 0
        assert "Overall Score" in output.read_text()

    def test_indicators_missing_file(self) -> None:
        result = runner.invoke(app, ["indicators", "/nonexistent/snapshot.yaml"])
        assert result.exit_code == 1
        assert "not found" in result.stdout

    def test_rate(self, offline_rates: None) -> None:
        result = runner.invoke(app, ["rate", "usdc", "cop"])
        assert result.exit_code == 0
        assert "4,000" in result.stdout
        assert "test" in result.stdout

    def test_rate_unknown_asset(self) -> None:
        result = runner.invoke(app, ["rate", "DOGE", "COP"])
        assert result.exit_code == 1
        assert "Unsupported asset" in result.stdout

    def test_quote_cashout(self, offline_rates: None, tmp_path: Path) -> None:
        output = tmp_path / "quote.md"
        result = runner.invoke(app, ["quote", "cashout", "100", "--wallet", WALLET, "--output", str(output)])
        assert result.exit_code == 0
        assert "You receive" in result.stdout
        assert "$ 384.160,00" in output.read_text()

    def test_quote_requires_wallet(self, offline_rates: None) -> None:
        result = runner.invoke(app, ["quote", "cashout", "100"])
        assert result.exit_code == 1
        assert "Wallet address is required" in result.stdout

    def test_quote_unknown_type(self) -> None:
        result = runner.invoke(app, ["quote", "transfer", "100"])
        assert result.exit_code == 1
        assert "Unknown transaction type" in result.stdout

    def test_indicators_help(self) -> None:
        result = runner.invoke(app, ["indicators", "--help"])
        assert result.exit_code == 0
        assert "--output" in result.stdout
