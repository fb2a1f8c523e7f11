"""Pydantic models for the CoinGecko payloads this app decodes."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class _Wire(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class Sparkline(_Wire):
    price: list[float] = Field(default_factory=list)


class CoinSummary(_Wire):
    """One element of the /coins/markets array."""

    id: str
    symbol: str
    name: str
    image: str = ""
    current_price: Optional[float] = None
    price_change_percentage_24h: Optional[float] = None
    market_cap: Optional[float] = None
    market_cap_rank: Optional[int] = None
    fully_diluted_valuation: Optional[float] = None
    total_volume: Optional[float] = None
    high_24h: Optional[float] = None
    low_24h: Optional[float] = None
    ath: Optional[float] = None
    ath_date: Optional[datetime] = None
    atl: Optional[float] = None
    atl_date: Optional[datetime] = None
    last_updated: Optional[datetime] = None
    sparkline_in_7d: Optional[Sparkline] = None

    @property
    def sparkline(self) -> list[float]:
        if self.sparkline_in_7d is None:
            return []
        return list(self.sparkline_in_7d.price)


# ---------- /search/trending ----------


class TrendingPriceChange(_Wire):
    price_change_percentage_24h: dict[str, float] = Field(default_factory=dict)


class TrendingCoin(_Wire):
    id: str
    symbol: str
    name: str
    thumb: str = ""
    score: int = 0
    market_cap_rank: Optional[int] = None
    data: Optional[TrendingPriceChange] = None


class TrendingItem(_Wire):
    item: TrendingCoin


class NftData(_Wire):
    floor_price: str = ""
    floor_price_in_usd_24h_percentage_change: str = ""


class TrendingNft(_Wire):
    id: str
    name: str
    thumb: str = ""
    data: Optional[NftData] = None


class TrendingResponse(_Wire):
    coins: list[TrendingItem] = Field(default_factory=list)
    nfts: list[TrendingNft] = Field(default_factory=list)


# ---------- /search ----------


class SearchCoin(_Wire):
    id: str
    name: str
    symbol: str
    market_cap_rank: Optional[int] = None
    thumb: str = ""
    large: str = ""


class SearchResponse(_Wire):
    coins: list[SearchCoin] = Field(default_factory=list)
