from __future__ import annotations

from typing import Callable, Optional, Protocol

from pydantic import BaseModel, Field

from cryptocollection.schemas.coingecko import TrendingResponse
from cryptocollection.services.coingecko import APIError
from cryptocollection.utils.formatting import format_percent, format_percent_text, is_rising


class TrendingSource(Protocol):
    async def get_trending(self) -> TrendingResponse: ...


class TrendingCoinRow(BaseModel):
    id: str
    rank: int
    thumb: str
    symbol: str
    name: str
    rate: str
    rising: Optional[bool] = None


class TrendingNftRow(BaseModel):
    id: str
    name: str
    thumb: str
    floor_price: str
    rate: str


class TrendingState(BaseModel):
    coins: list[TrendingCoinRow] = Field(default_factory=list)
    nfts: list[TrendingNftRow] = Field(default_factory=list)


def build_trending_state(
    response: TrendingResponse,
    *,
    currency: str = "krw",
    coin_limit: int = 14,
    nft_limit: int = 7,
) -> TrendingState:
    coins: list[TrendingCoinRow] = []
    for entry in sorted(response.coins, key=lambda e: e.item.score)[:coin_limit]:
        coin = entry.item
        change = None
        if coin.data is not None:
            change = coin.data.price_change_percentage_24h.get(currency)
        coins.append(
            TrendingCoinRow(
                id=coin.id,
                rank=coin.score + 1,  # score is 0-based
                thumb=coin.thumb,
                symbol=coin.symbol,
                name=coin.name,
                rate=format_percent(change),
                rising=is_rising(change),
            )
        )

    nfts = [
        TrendingNftRow(
            id=nft.id,
            name=nft.name,
            thumb=nft.thumb,
            floor_price=nft.data.floor_price if nft.data else "-",
            rate=format_percent_text(nft.data.floor_price_in_usd_24h_percentage_change if nft.data else None),
        )
        for nft in response.nfts[:nft_limit]
    ]
    return TrendingState(coins=coins, nfts=nfts)


class TrendingViewModel:
    def __init__(
        self,
        *,
        client: TrendingSource,
        currency: str = "krw",
        coin_limit: int = 14,
        nft_limit: int = 7,
        on_state: Optional[Callable[[TrendingState], None]] = None,
        on_error: Optional[Callable[[APIError], None]] = None,
    ) -> None:
        self.client = client
        self.currency = currency
        self.coin_limit = coin_limit
        self.nft_limit = nft_limit
        self.on_state = on_state
        self.on_error = on_error

    async def refresh(self) -> TrendingState | APIError:
        try:
            response = await self.client.get_trending()
        except APIError as exc:
            if self.on_error:
                self.on_error(exc)
            return exc

        state = build_trending_state(
            response,
            currency=self.currency,
            coin_limit=self.coin_limit,
            nft_limit=self.nft_limit,
        )
        if self.on_state:
            self.on_state(state)
        return state
