# cryptocollection/config/settings.py
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional


def parse_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


def parse_int(value: str | None, default: int) -> int:
    if value is None or value.strip() == "":
        return default
    return int(value)


def parse_optional_float(value: str | None) -> Optional[float]:
    """Empty or missing means "leave it to the transport default"."""
    if value is None or value.strip() == "":
        return None
    return float(value)


@dataclass(frozen=True)
class Settings:
    FAVORITES_DB_URL: str
    COINGECKO_BASE_URL: str
    COINGECKO_API_KEY: Optional[str]
    VS_CURRENCY: str
    SPARKLINE_ENABLED: bool
    HTTP_TIMEOUT_SECONDS: Optional[float]
    TRENDING_COIN_LIMIT: int
    TRENDING_NFT_LIMIT: int

    @staticmethod
    def from_env() -> "Settings":
        return Settings(
            FAVORITES_DB_URL=os.getenv("FAVORITES_DB_URL", "sqlite+aiosqlite:///./favorites.db"),
            COINGECKO_BASE_URL=os.getenv("COINGECKO_BASE_URL", "https://api.coingecko.com/api/v3").rstrip("/"),
            COINGECKO_API_KEY=os.getenv("COINGECKO_API_KEY") or None,
            VS_CURRENCY=os.getenv("VS_CURRENCY", "krw").strip().lower(),
            SPARKLINE_ENABLED=parse_bool(os.getenv("SPARKLINE_ENABLED"), True),
            HTTP_TIMEOUT_SECONDS=parse_optional_float(os.getenv("HTTP_TIMEOUT_SECONDS")),
            TRENDING_COIN_LIMIT=parse_int(os.getenv("TRENDING_COIN_LIMIT"), 14),
            TRENDING_NFT_LIMIT=parse_int(os.getenv("TRENDING_NFT_LIMIT"), 7),
        )


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings
