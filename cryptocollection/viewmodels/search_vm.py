from __future__ import annotations

import logging
from typing import Callable, Optional, Protocol

from pydantic import BaseModel

from cryptocollection.schemas.coingecko import SearchCoin, SearchResponse
from cryptocollection.schemas.detail import FavoriteRecord, SettingAction
from cryptocollection.services.coingecko import APIError
from cryptocollection.services.favorite_store import FavoriteStoreError
from cryptocollection.viewmodels.detail_vm import FavoriteStoreLike

logger = logging.getLogger("cryptocollection.viewmodels.search")


class SearchSource(Protocol):
    async def search(self, query: str) -> SearchResponse: ...


class SearchRow(BaseModel):
    id: str
    thumb: str
    symbol: str
    name: str
    rank: str = ""
    is_favorite: Optional[bool] = False


class SearchViewModel:
    """Coin search results, each row carrying its star state."""

    def __init__(
        self,
        *,
        client: SearchSource,
        store: FavoriteStoreLike,
        on_rows: Optional[Callable[[list[SearchRow]], None]] = None,
        on_error: Optional[Callable[[APIError], None]] = None,
        on_favorite_result: Optional[Callable[[SettingAction], None]] = None,
    ) -> None:
        self.client = client
        self.store = store
        self.on_rows = on_rows
        self.on_error = on_error
        self.on_favorite_result = on_favorite_result
        self._coins: dict[str, SearchCoin] = {}

    async def search(self, query: str) -> list[SearchRow] | APIError:
        text = query.strip()
        if not text:
            self._coins = {}
            rows: list[SearchRow] = []
            if self.on_rows:
                self.on_rows(rows)
            return rows

        try:
            response = await self.client.search(text)
        except APIError as exc:
            if self.on_error:
                self.on_error(exc)
            return exc

        self._coins = {coin.id: coin for coin in response.coins}
        rows = [await self._row(coin) for coin in response.coins]
        if self.on_rows:
            self.on_rows(rows)
        return rows

    async def toggle_favorite(self, coin_id: str) -> SettingAction:
        coin = self._coins.get(coin_id)
        try:
            if await self.store.exists(coin_id):
                await self.store.remove(coin_id)
                result = SettingAction.ITEM_DELETED
            elif coin is None:
                result = SettingAction.ITEM_ERROR
            else:
                await self.store.add(FavoriteRecord.from_search(coin))
                result = SettingAction.ITEM_ADDED
        except FavoriteStoreError:
            logger.exception("favorite toggle failed | coin=%s", coin_id)
            result = SettingAction.ITEM_ERROR

        if self.on_favorite_result:
            self.on_favorite_result(result)
        return result

    async def _row(self, coin: SearchCoin) -> SearchRow:
        try:
            favorite = await self.store.exists(coin.id)
        except FavoriteStoreError:
            logger.warning("favorite lookup failed | coin=%s", coin.id, exc_info=True)
            favorite = None
        return SearchRow(
            id=coin.id,
            thumb=coin.thumb,
            symbol=coin.symbol,
            name=coin.name,
            rank=f"#{coin.market_cap_rank}" if coin.market_cap_rank else "",
            is_favorite=favorite,
        )
