from __future__ import annotations

import pytest

from cryptocollection.schemas.coingecko import CoinSummary
from cryptocollection.scripts import coin_detail
from cryptocollection.services.coingecko import APIError, APIErrorKind
from cryptocollection.services.favorite_store import FavoriteStoreError


class FakeClient:
    def __init__(self, response) -> None:
        self.response = response

    async def get_coin_information(self, ids: str):
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


class MemoryStore:
    def __init__(self) -> None:
        self.ids: set[str] = set()

    async def exists(self, coin_id: str) -> bool:
        return coin_id in self.ids

    async def add(self, record) -> None:
        self.ids.add(record.id)

    async def remove(self, coin_id: str) -> None:
        self.ids.discard(coin_id)


ETHEREUM = CoinSummary(
    id="ethereum",
    symbol="eth",
    name="Ethereum",
    current_price=4800000,
    price_change_percentage_24h=0.5,
    high_24h=4900000,
    low_24h=4700000,
    ath=6500000,
    ath_date="2021-11-10T14:24:11.849Z",
)


@pytest.mark.asyncio
async def test_run_and_render_with_toggle():
    store = MemoryStore()
    state = await coin_detail.run("ethereum", toggle_favorite=True, client=FakeClient([ETHEREUM]), store=store)

    text = coin_detail.render(state)
    assert store.ids == {"ethereum"}
    assert text.splitlines()[0] == "ETH ★"
    assert "₩4,800,000  +0.50%" in text
    assert "[종목정보]" in text
    assert "  24시간 고가: ₩4,900,000" in text
    assert "  역대 최고가: ₩6,500,000 (21년 11월 10일)" in text
    assert "💬 즐겨찾기에 추가되었습니다" in text


@pytest.mark.asyncio
async def test_render_alert_on_failure():
    state = await coin_detail.run(
        "ethereum",
        toggle_favorite=True,
        client=FakeClient(APIError(APIErrorKind.NETWORK_ERROR)),
        store=MemoryStore(),
    )
    text = coin_detail.render(state)
    assert text.startswith("⚠️ ")
    assert "(retry)" in text


class UnreadableStore(MemoryStore):
    async def exists(self, coin_id: str) -> bool:
        raise FavoriteStoreError("database is locked")


@pytest.mark.asyncio
async def test_render_unknown_star():
    state = await coin_detail.run("ethereum", client=FakeClient([ETHEREUM]), store=UnreadableStore())
    assert coin_detail.render(state).splitlines()[0] == "ETH ?"
