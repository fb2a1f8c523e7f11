from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from cryptocollection.schemas.coingecko import CoinSummary
from cryptocollection.schemas.detail import (
    DetailError,
    DetailInformation,
    DetailSection,
    FavoriteRecord,
    SettingAction,
)
from cryptocollection.services.coingecko import APIError, APIErrorKind
from cryptocollection.services.favorite_store import FavoriteStoreError
from cryptocollection.utils.formatting import format_date, format_money
from cryptocollection.utils.latest import LatestOnly, Superseded

logger = logging.getLogger("cryptocollection.viewmodels.detail")

SECTION_MARKET = "종목정보"
SECTION_INDICATORS = "투자지표"


class CoinSource(Protocol):
    async def get_coin_information(self, ids: str) -> list[CoinSummary]: ...


class FavoriteStoreLike(Protocol):
    async def exists(self, coin_id: str) -> bool: ...

    async def add(self, record: FavoriteRecord) -> None: ...

    async def remove(self, coin_id: str) -> None: ...


@dataclass(frozen=True)
class DetailState:
    summary: CoinSummary
    sections: list[DetailSection]


def build_sections(summary: CoinSummary, currency: str = "krw") -> list[DetailSection]:
    """Two sections in a fixed order; rebuilt from scratch on every fetch."""

    def info(title: str, value: Optional[float], date=None) -> DetailInformation:
        return DetailInformation(
            title=title,
            value=value,
            date=date,
            money=format_money(value, currency),
            date_text=format_date(date),
        )

    return [
        DetailSection(
            title=SECTION_MARKET,
            items=[
                info("24시간 고가", summary.high_24h),
                info("24시간 저가", summary.low_24h),
                info("역대 최고가", summary.ath, summary.ath_date),
                info("역대 최소가", summary.atl, summary.atl_date),
            ],
        ),
        DetailSection(
            title=SECTION_INDICATORS,
            items=[
                info("시가총액", summary.market_cap),
                info("완전 희석 가치(FDV)", summary.fully_diluted_valuation),
                info("총 거래량", summary.total_volume),
            ],
        ),
    ]


class DetailViewModel:
    """
    Coin detail screen logic, no rendering here.

    Outputs are plain callbacks; any of them may be left unset. Fetch
    failures go to on_error as DetailError values and are never raised.
    """

    def __init__(
        self,
        *,
        client: CoinSource,
        store: FavoriteStoreLike,
        currency: str = "krw",
        on_action: Optional[Callable[[SettingAction], None]] = None,
        on_data: Optional[Callable[[CoinSummary], None]] = None,
        on_sections: Optional[Callable[[list[DetailSection]], None]] = None,
        on_favorite_result: Optional[Callable[[SettingAction], None]] = None,
        on_error: Optional[Callable[[DetailError], None]] = None,
    ) -> None:
        self.client = client
        self.store = store
        self.currency = currency
        self.on_action = on_action
        self.on_data = on_data
        self.on_sections = on_sections
        self.on_favorite_result = on_favorite_result
        self.on_error = on_error

        self._latest: LatestOnly[list[CoinSummary]] = LatestOnly()
        self._snapshots: dict[str, CoinSummary] = {}

    # ------------------------------------------------------------------
    # Intents
    # ------------------------------------------------------------------
    def back_tapped(self) -> SettingAction:
        self._emit(self.on_action, SettingAction.POP_VIEW_CONTROLLER)
        return SettingAction.POP_VIEW_CONTROLLER

    async def load_detail(self, coin_id: str) -> DetailState | DetailError | None:
        """
        Returns the new state, a DetailError, or None when a newer
        load_detail call replaced this one.
        """
        try:
            coins = await self._latest.run(lambda: self.client.get_coin_information(coin_id))
        except Superseded:
            logger.info("detail fetch superseded | coin=%s", coin_id)
            return None
        except APIError as exc:
            error = DetailError(coin_id=coin_id, code=exc.kind.value, message=exc.message)
            self._emit(self.on_error, error)
            return error

        summary = next((c for c in coins if c.id == coin_id), None)
        if summary is None:
            error = DetailError(
                coin_id=coin_id,
                code=APIErrorKind.NOT_FOUND.value,
                message=APIError(APIErrorKind.NOT_FOUND).message,
            )
            self._emit(self.on_error, error)
            return error

        sections = build_sections(summary, self.currency)
        self._snapshots[summary.id] = summary
        self._emit(self.on_data, summary)
        self._emit(self.on_sections, sections)
        return DetailState(summary=summary, sections=sections)

    async def toggle_favorite(self, coin_id: str, snapshot: CoinSummary | None = None) -> SettingAction:
        result = await self._toggle(coin_id, snapshot)
        self._emit(self.on_favorite_result, result)
        return result

    async def is_favorite(self, coin_id: str) -> Optional[bool]:
        """None when the store could not be read; the star state is unknown."""
        try:
            return await self.store.exists(coin_id)
        except FavoriteStoreError:
            logger.exception("favorite lookup failed | coin=%s", coin_id)
            return None

    # ------------------------------------------------------------------
    def _emit(self, callback, value) -> None:
        if callback is not None:
            callback(value)

    async def _toggle(self, coin_id: str, snapshot: CoinSummary | None) -> SettingAction:
        try:
            if await self.store.exists(coin_id):
                await self.store.remove(coin_id)
                return SettingAction.ITEM_DELETED

            snapshot = snapshot or self._snapshots.get(coin_id)
            if snapshot is None:
                snapshot = await self._fetch_snapshot(coin_id)
            if snapshot is None:
                return SettingAction.ITEM_ERROR
            if snapshot.id != coin_id:
                logger.warning("snapshot does not match coin | coin=%s | snapshot=%s", coin_id, snapshot.id)
                return SettingAction.ITEM_ERROR

            await self.store.add(FavoriteRecord.from_summary(snapshot))
            return SettingAction.ITEM_ADDED
        except FavoriteStoreError:
            logger.exception("favorite toggle failed | coin=%s", coin_id)
            return SettingAction.ITEM_ERROR

    async def _fetch_snapshot(self, coin_id: str) -> CoinSummary | None:
        try:
            coins = await self.client.get_coin_information(coin_id)
        except APIError as exc:
            logger.warning("snapshot fetch failed | coin=%s | err=%s", coin_id, exc)
            return None
        for coin in coins:
            if coin.id == coin_id:
                self._snapshots[coin_id] = coin
                return coin
        return None
