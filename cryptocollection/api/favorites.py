from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from cryptocollection.api.deps import (
    api_error_response,
    get_coingecko_client,
    get_favorite_store,
    store_error_response,
)
from cryptocollection.config.settings import get_settings
from cryptocollection.schemas.detail import FavoriteRecord
from cryptocollection.services.coingecko import APIError, CoinGeckoClient
from cryptocollection.services.favorite_store import FavoriteStore, FavoriteStoreError
from cryptocollection.viewmodels.favorites_vm import FavoriteCard, FavoritesViewModel

router = APIRouter(prefix="/favorites", tags=["favorites"])


@router.get("", response_model=list[FavoriteRecord])
async def list_favorites(store: FavoriteStore = Depends(get_favorite_store)):
    try:
        return await store.list_all()
    except FavoriteStoreError:
        return store_error_response()


@router.get("/markets", response_model=list[FavoriteCard])
async def favorite_markets(
    client: CoinGeckoClient = Depends(get_coingecko_client),
    store: FavoriteStore = Depends(get_favorite_store),
):
    vm = FavoritesViewModel(client=client, store=store, currency=get_settings().VS_CURRENCY)
    try:
        result = await vm.load()
    except FavoriteStoreError:
        return store_error_response()
    if isinstance(result, APIError):
        return api_error_response(result)
    return result


@router.delete("/{coin_id}", status_code=204)
async def delete_favorite(coin_id: str, store: FavoriteStore = Depends(get_favorite_store)):
    try:
        await store.remove(coin_id)
    except FavoriteStoreError:
        return store_error_response()
    return Response(status_code=204)
