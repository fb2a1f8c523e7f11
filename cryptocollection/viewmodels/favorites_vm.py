from __future__ import annotations

from typing import Callable, Optional

from pydantic import BaseModel

from cryptocollection.services.coingecko import APIError
from cryptocollection.services.favorite_store import FavoriteStore
from cryptocollection.utils.formatting import format_money, format_percent, is_rising
from cryptocollection.viewmodels.detail_vm import CoinSource


class FavoriteCard(BaseModel):
    id: str
    name: str
    symbol: str
    thumb: str
    price: str = "-"
    rate: str = "-"
    rising: Optional[bool] = None


class FavoritesViewModel:
    """
    Favorites screen: stored records plus their live prices, fetched in a
    single comma-joined markets request.
    """

    def __init__(
        self,
        *,
        client: CoinSource,
        store: FavoriteStore,
        currency: str = "krw",
        on_cards: Optional[Callable[[list[FavoriteCard]], None]] = None,
        on_error: Optional[Callable[[APIError], None]] = None,
    ) -> None:
        self.client = client
        self.store = store
        self.currency = currency
        self.on_cards = on_cards
        self.on_error = on_error

    async def load(self) -> list[FavoriteCard] | APIError:
        records = await self.store.list_all()
        if not records:
            cards: list[FavoriteCard] = []
        else:
            try:
                coins = await self.client.get_coin_information(",".join(r.id for r in records))
            except APIError as exc:
                if self.on_error:
                    self.on_error(exc)
                return exc

            by_id = {coin.id: coin for coin in coins}
            cards = []
            for record in records:
                coin = by_id.get(record.id)
                change = coin.price_change_percentage_24h if coin else None
                cards.append(
                    FavoriteCard(
                        id=record.id,
                        name=record.name,
                        symbol=record.symbol,
                        thumb=record.thumb,
                        price=format_money(coin.current_price if coin else None, self.currency),
                        rate=format_percent(change),
                        rising=is_rising(change),
                    )
                )

        if self.on_cards:
            self.on_cards(cards)
        return cards
