from __future__ import annotations

import logging
from typing import Callable

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cryptocollection.db.models import FavoriteCoin
from cryptocollection.schemas.detail import FavoriteRecord

logger = logging.getLogger("cryptocollection.favorites")


class FavoriteStoreError(Exception):
    """A favorites read or write did not go through."""


def _to_record(row: FavoriteCoin) -> FavoriteRecord:
    return FavoriteRecord(
        id=row.coin_id,
        name=row.name,
        symbol=row.symbol,
        market_cap_rank=row.market_cap_rank,
        thumb=row.thumb or "",
        created_at=row.created_at,
    )


class FavoriteStore:
    """
    Which coin ids are favorited. Every call opens its own session and
    every mutation is one transaction, so a failed write leaves nothing
    behind.
    """

    def __init__(self, session_factory: Callable[[], AsyncSession]) -> None:
        self._session_factory = session_factory

    async def exists(self, coin_id: str) -> bool:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(FavoriteCoin.id).where(FavoriteCoin.coin_id == coin_id).limit(1)
                )
                return result.scalar_one_or_none() is not None
        except SQLAlchemyError as exc:
            raise FavoriteStoreError(f"exists({coin_id}) failed") from exc

    async def add(self, record: FavoriteRecord) -> None:
        # No existence check here: callers check first, the unique key rejects the rest.
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    session.add(
                        FavoriteCoin(
                            coin_id=record.id,
                            name=record.name,
                            symbol=record.symbol,
                            market_cap_rank=record.market_cap_rank,
                            thumb=record.thumb,
                        )
                    )
        except SQLAlchemyError as exc:
            logger.warning("favorite add failed | coin=%s | err=%s", record.id, exc)
            raise FavoriteStoreError(f"add({record.id}) failed") from exc

    async def remove(self, coin_id: str) -> None:
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    await session.execute(delete(FavoriteCoin).where(FavoriteCoin.coin_id == coin_id))
        except SQLAlchemyError as exc:
            logger.warning("favorite remove failed | coin=%s | err=%s", coin_id, exc)
            raise FavoriteStoreError(f"remove({coin_id}) failed") from exc

    async def list_all(self) -> list[FavoriteRecord]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(FavoriteCoin).order_by(FavoriteCoin.created_at, FavoriteCoin.id)
                )
                return [_to_record(row) for row in result.scalars().all()]
        except SQLAlchemyError as exc:
            raise FavoriteStoreError("list_all failed") from exc
