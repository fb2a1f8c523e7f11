"""Display-side models shared by the view-models, controllers and routers."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from cryptocollection.schemas.coingecko import CoinSummary, SearchCoin


class SettingAction(str, Enum):
    POP_VIEW_CONTROLLER = "pop_view_controller"
    ITEM_ADDED = "added"
    ITEM_DELETED = "removed"
    ITEM_ERROR = "error"


class DetailInformation(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    value: Optional[float] = None
    date: Optional[datetime] = None
    money: str = "-"
    date_text: str = ""


class DetailSection(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    items: list[DetailInformation]


class DetailError(BaseModel):
    """A fetch failure handed to the view instead of being raised."""

    model_config = ConfigDict(frozen=True)

    coin_id: str
    code: str
    message: str
    retryable: bool = True


class FavoriteRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    symbol: str
    market_cap_rank: Optional[int] = None
    thumb: str = ""
    created_at: Optional[datetime] = None

    @classmethod
    def from_summary(cls, summary: CoinSummary) -> "FavoriteRecord":
        return cls(
            id=summary.id,
            name=summary.name,
            symbol=summary.symbol,
            market_cap_rank=summary.market_cap_rank,
            thumb=summary.image,
        )

    @classmethod
    def from_search(cls, coin: SearchCoin) -> "FavoriteRecord":
        return cls(
            id=coin.id,
            name=coin.name,
            symbol=coin.symbol,
            market_cap_rank=coin.market_cap_rank,
            thumb=coin.thumb,
        )


class DetailHeader(BaseModel):
    image: str = ""
    symbol: str = ""
    price: str = "-"
    rate: str = "-"
    rising: Optional[bool] = None
    updated: str = ""
    sparkline: list[float] = Field(default_factory=list)


class Alert(BaseModel):
    message: str
    action: str = "retry"


class DetailScreenState(BaseModel):
    coin_id: str
    header: Optional[DetailHeader] = None
    sections: list[DetailSection] = Field(default_factory=list)
    is_favorite: Optional[bool] = False
    toast: Optional[str] = None
    alert: Optional[Alert] = None
    popped: bool = False
