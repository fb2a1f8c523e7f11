from __future__ import annotations

from fastapi import APIRouter, Depends

from cryptocollection.api.deps import api_error_response, get_coingecko_client
from cryptocollection.config.settings import get_settings
from cryptocollection.services.coingecko import APIError, CoinGeckoClient
from cryptocollection.viewmodels.trending_vm import TrendingState, TrendingViewModel

router = APIRouter(prefix="/trending", tags=["trending"])


@router.get("", response_model=TrendingState)
async def get_trending(client: CoinGeckoClient = Depends(get_coingecko_client)):
    s = get_settings()
    vm = TrendingViewModel(
        client=client,
        currency=s.VS_CURRENCY,
        coin_limit=s.TRENDING_COIN_LIMIT,
        nft_limit=s.TRENDING_NFT_LIMIT,
    )
    result = await vm.refresh()
    if isinstance(result, APIError):
        return api_error_response(result)
    return result
