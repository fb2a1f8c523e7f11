# cryptocollection/api/detail.py
from __future__ import annotations

from fastapi import APIRouter, Depends

from cryptocollection.api.deps import (
    error_response,
    get_coingecko_client,
    get_favorite_store,
    upstream_error_response,
)
from cryptocollection.config.settings import get_settings
from cryptocollection.schemas.detail import DetailScreenState, SettingAction
from cryptocollection.services.coingecko import CoinGeckoClient
from cryptocollection.services.favorite_store import FavoriteStore
from cryptocollection.views.detail_controller import DetailController

router = APIRouter(prefix="/coins", tags=["detail"])


def _controller(coin_id: str, client: CoinGeckoClient, store: FavoriteStore) -> DetailController:
    return DetailController(coin_id, client=client, store=store, currency=get_settings().VS_CURRENCY)


@router.get("/{coin_id}", response_model=DetailScreenState)
async def get_coin_detail(
    coin_id: str,
    client: CoinGeckoClient = Depends(get_coingecko_client),
    store: FavoriteStore = Depends(get_favorite_store),
):
    """
    Detail screen: header, two metric sections and the star state.
    Example: /coins/bitcoin
    """
    controller = _controller(coin_id, client, store)
    state = await controller.load()
    if controller.last_error is not None:
        return upstream_error_response(controller.last_error.code, controller.last_error.message)
    return state


@router.post("/{coin_id}/favorite", response_model=DetailScreenState)
async def toggle_coin_favorite(
    coin_id: str,
    client: CoinGeckoClient = Depends(get_coingecko_client),
    store: FavoriteStore = Depends(get_favorite_store),
):
    controller = _controller(coin_id, client, store)
    state = await controller.favorite_tapped()
    if controller.last_favorite_result is SettingAction.ITEM_ERROR:
        return error_response(
            code="favorite_error",
            message=state.toast or "",
            status_code=500,
            details={"retryable": True},
        )
    return state
