# cryptocollection/api/health.py
from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Response
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from cryptocollection.db import session as db_session

router = APIRouter(tags=["health"])

APP_STARTED_AT = time.time()


def _now_meta() -> Dict[str, Any]:
    now_ts = time.time()
    now_dt = datetime.fromtimestamp(now_ts, tz=timezone.utc)
    return {
        "now_unix": int(now_ts),
        "now_iso": now_dt.isoformat().replace("+00:00", "Z"),
        "uptime_s": int(now_ts - APP_STARTED_AT),
    }


async def _check_db() -> Dict[str, Any]:
    t0 = time.time()
    try:
        async with db_session.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return {"ok": True, "latency_ms": int((time.time() - t0) * 1000)}
    except SQLAlchemyError as e:
        return {"ok": False, "latency_ms": int((time.time() - t0) * 1000), "error": str(e)}


async def _check_favorites() -> Dict[str, Any]:
    """Confirms the favorites table is readable and reports its size."""
    t0 = time.time()
    try:
        async with db_session.engine.connect() as conn:
            res = await conn.execute(text("SELECT COUNT(*) FROM favorite_coins"))
            count = res.scalar_one()
        return {"ok": True, "latency_ms": int((time.time() - t0) * 1000), "count": int(count)}
    except SQLAlchemyError as e:
        return {"ok": False, "latency_ms": int((time.time() - t0) * 1000), "error": str(e)}


@router.get("/live")
async def live():
    return {"status": "ok"}


@router.get("/ready")
async def ready(response: Response):
    checks = {
        "db": await _check_db(),
        "favorites": await _check_favorites(),
    }
    degraded_reasons = [f"{name}_unhealthy" for name, check in checks.items() if not check["ok"]]

    payload: Dict[str, Any] = {**_now_meta(), "checks": checks}
    if degraded_reasons:
        payload["status"] = "degraded"
        payload["degraded_reasons"] = degraded_reasons
        response.status_code = 503
    else:
        payload["status"] = "ok"
        payload["degraded_reasons"] = []
    return payload
