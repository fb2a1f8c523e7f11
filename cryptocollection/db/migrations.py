from __future__ import annotations

import logging
from typing import Sequence

from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncEngine

from cryptocollection.db import session as db_session

logger = logging.getLogger("cryptocollection.db")

_FAVORITE_DUP_SQL = """
    SELECT coin_id, COUNT(*) AS count
    FROM favorite_coins
    GROUP BY coin_id
    HAVING count > 1
    LIMIT 1
"""


async def create_tables(engine: AsyncEngine | None = None) -> None:
    # registers FavoriteCoin on Base.metadata
    import cryptocollection.db.models  # noqa: F401

    eng = engine or db_session.engine
    async with eng.begin() as conn:
        await conn.run_sync(db_session.Base.metadata.create_all)


async def enforce_integrity_constraints(engine: AsyncEngine | None = None) -> None:
    """
    Fails fast if an older database holds duplicate coin ids. New writes
    are covered by the table's unique key on coin_id.
    """
    eng = engine or db_session.engine

    async with eng.begin() as conn:
        await _assert_no_duplicates(conn, _FAVORITE_DUP_SQL, "favorite_coins", ("coin_id",))

    logger.info("favorite_coins integrity constraints verified")


async def _assert_no_duplicates(conn, sql: str, table: str, keys: Sequence[str]) -> None:
    try:
        result = await conn.execute(text(sql))
    except OperationalError:
        # fresh DB without the table yet
        return

    row = result.first()
    if row:
        mapping = row._mapping
        joined_keys = ", ".join(f"{k}={mapping.get(k)}" for k in keys if k in mapping)
        raise RuntimeError(
            f"Duplicate rows detected in {table} for ({joined_keys}). Clean data before enforcing constraints."
        )
