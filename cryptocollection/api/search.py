from __future__ import annotations

from fastapi import APIRouter, Depends

from cryptocollection.api.deps import api_error_response, error_response, get_coingecko_client, get_favorite_store
from cryptocollection.schemas.detail import SettingAction
from cryptocollection.services.coingecko import APIError, CoinGeckoClient
from cryptocollection.services.favorite_store import FavoriteStore
from cryptocollection.viewmodels.search_vm import SearchRow, SearchViewModel
from cryptocollection.views.detail_controller import TOAST_MESSAGES

router = APIRouter(prefix="/search", tags=["search"])


@router.get("", response_model=list[SearchRow])
async def search_coins(
    query: str = "",
    client: CoinGeckoClient = Depends(get_coingecko_client),
    store: FavoriteStore = Depends(get_favorite_store),
):
    """
    Coin search with star state per row.
    Example: /search?query=bit
    """
    vm = SearchViewModel(client=client, store=store)
    result = await vm.search(query)
    if isinstance(result, APIError):
        return api_error_response(result)
    return result


@router.post("/{coin_id}/favorite")
async def toggle_search_favorite(
    coin_id: str,
    query: str,
    client: CoinGeckoClient = Depends(get_coingecko_client),
    store: FavoriteStore = Depends(get_favorite_store),
):
    """Star toggle on a search row; the query re-resolves the row's data."""
    vm = SearchViewModel(client=client, store=store)
    result = await vm.search(query)
    if isinstance(result, APIError):
        return api_error_response(result)

    action = await vm.toggle_favorite(coin_id)
    if action is SettingAction.ITEM_ERROR:
        return error_response(
            code="favorite_error",
            message=TOAST_MESSAGES[action],
            status_code=500,
            details={"retryable": True},
        )
    return {
        "coin_id": coin_id,
        "result": action.value,
        "is_favorite": action is SettingAction.ITEM_ADDED,
        "toast": TOAST_MESSAGES[action],
    }
