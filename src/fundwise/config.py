"""
fundwise configuration management.

Supports loading from YAML files, environment variables, and keyword overrides.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


class RatesConfig(BaseModel):
    """Exchange-rate provider settings."""

    primary_url: str = Field(
        default="https://api.exchangerate-api.com/v4",
        description="Base URL of the primary rate API (GET /latest/{BASE})",
    )
    backup_url: str = Field(
        default="https://open.er-api.com/v6",
        description="Base URL of the backup rate API (GET /latest/{BASE})",
    )
    cache_ttl_seconds: float = Field(default=60.0, gt=0, description="Per-pair cache freshness window")
    timeout_seconds: float = Field(default=5.0, gt=0, description="Per-source request timeout")
    fallback_rates: dict[str, float] = Field(
        default_factory=lambda: {"USD/COP": 4100.0, "COP/USD": 0.000244},
        description="Static rates used when every live source fails",
    )


class AssetLimits(BaseModel):
    """Minimum and maximum amount a user may sell of one asset."""

    minimum: float = Field(ge=0.0)
    maximum: float = Field(gt=0.0)


class FundingConfig(BaseModel):
    """Quote settings for cash-in / cash-out."""

    quote_validity_seconds: int = Field(default=300, ge=1)
    limits: dict[str, AssetLimits] = Field(
        default_factory=lambda: {
            "COP": AssetLimits(minimum=10_000, maximum=10_000_000),
            "USDC": AssetLimits(minimum=5, maximum=50_000),
        }
    )


class IndicatorConfig(BaseModel):
    """Financial indicator settings."""

    assumed_capital_request_ratio: float = Field(
        default=0.30,
        ge=0.0,
        description="Share of revenue assumed as capital request when none is supplied",
    )


class FundwiseConfig(BaseModel):
    """Root configuration for fundwise."""

    rates: RatesConfig = Field(default_factory=RatesConfig)
    funding: FundingConfig = Field(default_factory=FundingConfig)
    indicators: IndicatorConfig = Field(default_factory=IndicatorConfig)

    locale: str = Field(default="es_CO")
    log_level: str = Field(default="WARNING")

    @classmethod
    def load(cls, config_path: str | None = None, **overrides: Any) -> FundwiseConfig:
        """Load configuration from file, env vars, and overrides.

        Priority: overrides > env vars > config file > defaults.
        """
        data: dict[str, Any] = {}

        # 1. Load from YAML file if provided
        if config_path:
            path = Path(config_path)
            if path.exists():
                with open(path) as f:
                    data = yaml.safe_load(f) or {}

        # 2. Override from environment variables
        env_primary = os.environ.get("FUNDWISE_PRIMARY_RATE_URL")
        env_backup = os.environ.get("FUNDWISE_BACKUP_RATE_URL")
        env_ttl = os.environ.get("FUNDWISE_RATE_CACHE_TTL")
        env_timeout = os.environ.get("FUNDWISE_RATE_TIMEOUT")
        env_level = os.environ.get("FUNDWISE_LOG_LEVEL")

        if env_primary or env_backup or env_ttl or env_timeout:
            rates = data.get("rates", {})
            if env_primary:
                rates["primary_url"] = env_primary
            if env_backup:
                rates["backup_url"] = env_backup
            if env_ttl:
                rates["cache_ttl_seconds"] = float(env_ttl)
            if env_timeout:
                rates["timeout_seconds"] = float(env_timeout)
            data["rates"] = rates

        if env_level:
            data["log_level"] = env_level.upper()

        # 3. Apply keyword overrides
        data.update(overrides)

        return cls.model_validate(data)
