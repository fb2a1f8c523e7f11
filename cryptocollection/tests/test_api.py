from __future__ import annotations

import asyncio

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

import cryptocollection.db.models  # noqa: F401
from cryptocollection.api import deps
from cryptocollection.api.detail import router as detail_router
from cryptocollection.api.favorites import router as favorites_router
from cryptocollection.api.health import router as health_router
from cryptocollection.api.search import router as search_router
from cryptocollection.api.trending import router as trending_router
from cryptocollection.db import session as db_session
from cryptocollection.db.session import Base
from cryptocollection.services.coingecko import CoinGeckoClient

BITCOIN = {
    "id": "bitcoin",
    "symbol": "btc",
    "name": "Bitcoin",
    "image": "https://example.test/bitcoin.png",
    "current_price": 65000,
    "price_change_percentage_24h": 1.5,
    "market_cap": 1280000000000,
    "market_cap_rank": 1,
    "high_24h": 66000,
    "low_24h": 64000,
    "ath": 73000,
    "ath_date": "2024-03-14T07:10:36.635Z",
    "atl": 67.81,
    "atl_date": "2013-07-06T00:00:00.000Z",
    "last_updated": "2024-03-20T05:00:00.000Z",
    "sparkline_in_7d": {"price": [64000.0, 65000.0]},
}


@pytest.fixture()
def api(monkeypatch):
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")

    async def _setup():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    asyncio.run(_setup())

    Session = async_sessionmaker(engine, expire_on_commit=False)
    monkeypatch.setattr(db_session, "engine", engine)
    monkeypatch.setattr(db_session, "SessionLocal", Session)

    upstream = {"status": 200, "requests": []}

    def handler(request: httpx.Request) -> httpx.Response:
        upstream["requests"].append(request)
        if upstream["status"] != 200:
            return httpx.Response(upstream["status"], json={"error": "upstream"})
        path = request.url.path
        if path.endswith("/coins/markets"):
            ids = request.url.params["ids"].split(",")
            return httpx.Response(200, json=[BITCOIN] if "bitcoin" in ids else [])
        if path.endswith("/search/trending"):
            return httpx.Response(
                200,
                json={
                    "coins": [{"item": {"id": "bitcoin", "symbol": "BTC", "name": "Bitcoin", "thumb": "b", "score": 0,
                                        "data": {"price_change_percentage_24h": {"krw": 1.25}}}}],
                    "nfts": [],
                },
            )
        if path.endswith("/search"):
            return httpx.Response(
                200,
                json={"coins": [{"id": "bitcoin", "name": "Bitcoin", "symbol": "BTC", "market_cap_rank": 1, "thumb": "b"}]},
            )
        return httpx.Response(404)

    coingecko = CoinGeckoClient(base_url="https://api.coingecko.test/api/v3", transport=httpx.MockTransport(handler))

    app = FastAPI()
    for router in (health_router, trending_router, search_router, detail_router, favorites_router):
        app.include_router(router)
    app.dependency_overrides[deps.get_coingecko_client] = lambda: coingecko
    client = TestClient(app)

    yield client, upstream

    asyncio.run(engine.dispose())


def test_detail_screen(api):
    client, _ = api
    resp = client.get("/coins/bitcoin")
    assert resp.status_code == 200
    body = resp.json()

    assert body["header"]["symbol"] == "BTC"
    assert body["header"]["price"] == "₩65,000"
    assert body["is_favorite"] is False
    market, indicators = body["sections"]
    assert market["title"] == "종목정보"
    assert market["items"][0] == {
        "title": "24시간 고가",
        "value": 66000.0,
        "date": None,
        "money": "₩66,000",
        "date_text": "",
    }
    assert market["items"][1]["value"] == 64000.0
    assert indicators["title"] == "투자지표"


def test_unknown_coin_is_404(api):
    client, _ = api
    resp = client.get("/coins/not-a-coin")
    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "not_found"
    assert resp.json()["error"]["details"]["retryable"] is True


def test_upstream_failure_is_502(api):
    client, upstream = api
    upstream["status"] = 500
    resp = client.get("/coins/bitcoin")
    assert resp.status_code == 502
    assert resp.json()["error"]["code"] == "unknown_error"


def test_favorite_toggle_round_trip(api):
    client, _ = api

    resp = client.post("/coins/bitcoin/favorite")
    assert resp.status_code == 200
    assert resp.json()["is_favorite"] is True
    assert resp.json()["toast"] == "즐겨찾기에 추가되었습니다"

    favorites = client.get("/favorites").json()
    assert [f["id"] for f in favorites] == ["bitcoin"]
    assert favorites[0]["market_cap_rank"] == 1

    assert client.get("/coins/bitcoin").json()["is_favorite"] is True

    resp = client.post("/coins/bitcoin/favorite")
    assert resp.json()["is_favorite"] is False
    assert resp.json()["toast"] == "즐겨찾기에서 삭제되었습니다"
    assert client.get("/favorites").json() == []


def test_favorite_toggle_without_data_is_error(api):
    client, upstream = api
    upstream["status"] = 429
    resp = client.post("/coins/bitcoin/favorite")
    assert resp.status_code == 500
    assert resp.json()["error"]["code"] == "favorite_error"
    assert client.get("/favorites").json() == []


def test_favorite_markets_and_delete(api):
    client, upstream = api
    client.post("/coins/bitcoin/favorite")

    cards = client.get("/favorites/markets").json()
    assert cards[0]["id"] == "bitcoin"
    assert cards[0]["price"] == "₩65,000"
    assert upstream["requests"][-1].url.params["ids"] == "bitcoin"

    assert client.delete("/favorites/bitcoin").status_code == 204
    assert client.delete("/favorites/bitcoin").status_code == 204
    assert client.get("/favorites").json() == []


def test_trending_and_search(api):
    client, _ = api
    trending = client.get("/trending").json()
    assert trending["coins"][0]["rank"] == 1
    assert trending["coins"][0]["rate"] == "+1.25%"

    rows = client.get("/search", params={"query": "bit"}).json()
    assert rows[0]["is_favorite"] is False

    resp = client.post("/search/bitcoin/favorite", params={"query": "bit"})
    assert resp.json()["result"] == "added"
    assert client.get("/search", params={"query": "bit"}).json()[0]["is_favorite"] is True


def test_ready_reports_favorites_table(api):
    client, _ = api
    resp = client.get("/ready")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["checks"]["favorites"]["count"] == 0
    assert client.get("/live").json() == {"status": "ok"}
