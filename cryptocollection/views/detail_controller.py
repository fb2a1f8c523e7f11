from __future__ import annotations

from typing import Optional

from cryptocollection.schemas.coingecko import CoinSummary
from cryptocollection.schemas.detail import (
    Alert,
    DetailError,
    DetailHeader,
    DetailScreenState,
    DetailSection,
    SettingAction,
)
from cryptocollection.utils.formatting import format_money, format_percent, format_updated, is_rising
from cryptocollection.viewmodels.detail_vm import CoinSource, DetailViewModel, FavoriteStoreLike

TOAST_MESSAGES = {
    SettingAction.ITEM_ADDED: "즐겨찾기에 추가되었습니다",
    SettingAction.ITEM_DELETED: "즐겨찾기에서 삭제되었습니다",
    SettingAction.ITEM_ERROR: "즐겨찾기 처리 중 오류가 발생했습니다",
}


class DetailController:
    """
    Binds DetailViewModel outputs into a DetailScreenState.

    The state object stands in for the screen's widgets: whatever the
    view-model emits lands on it, and routers or the terminal renderer
    read it back.
    """

    def __init__(
        self,
        coin_id: str,
        *,
        client: CoinSource,
        store: FavoriteStoreLike,
        currency: str = "krw",
    ) -> None:
        self.coin_id = coin_id
        self.currency = currency
        self.state = DetailScreenState(coin_id=coin_id)
        self.snapshot: Optional[CoinSummary] = None
        self.last_error: Optional[DetailError] = None
        self.last_favorite_result: Optional[SettingAction] = None
        self.viewmodel = DetailViewModel(
            client=client,
            store=store,
            currency=currency,
            on_action=self._bind_action,
            on_data=self._bind_data,
            on_sections=self._bind_sections,
            on_favorite_result=self._bind_favorite_result,
            on_error=self._bind_error,
        )

    # intents
    async def load(self) -> DetailScreenState:
        self.state.alert = None
        self.last_error = None
        await self.viewmodel.load_detail(self.coin_id)
        self.state.is_favorite = await self.viewmodel.is_favorite(self.coin_id)
        return self.state

    async def retry(self) -> DetailScreenState:
        return await self.load()

    async def favorite_tapped(self) -> DetailScreenState:
        await self.viewmodel.toggle_favorite(self.coin_id, self.snapshot)
        self.state.is_favorite = await self.viewmodel.is_favorite(self.coin_id)
        return self.state

    def back_tapped(self) -> DetailScreenState:
        self.viewmodel.back_tapped()
        return self.state

    # bindings
    def _bind_action(self, action: SettingAction) -> None:
        if action is SettingAction.POP_VIEW_CONTROLLER:
            self.state.popped = True

    def _bind_data(self, summary: CoinSummary) -> None:
        self.snapshot = summary
        self.state.header = DetailHeader(
            image=summary.image,
            symbol=summary.symbol.upper(),
            price=format_money(summary.current_price, self.currency),
            rate=format_percent(summary.price_change_percentage_24h),
            rising=is_rising(summary.price_change_percentage_24h),
            updated=format_updated(summary.last_updated),
            sparkline=summary.sparkline,
        )

    def _bind_sections(self, sections: list[DetailSection]) -> None:
        self.state.sections = sections

    def _bind_favorite_result(self, result: SettingAction) -> None:
        self.last_favorite_result = result
        self.state.toast = TOAST_MESSAGES.get(result)

    def _bind_error(self, error: DetailError) -> None:
        self.last_error = error
        self.state.alert = Alert(message=error.message, action="retry")
