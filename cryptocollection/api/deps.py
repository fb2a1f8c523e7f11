from __future__ import annotations

from typing import Any

from fastapi.responses import JSONResponse

from cryptocollection.config.settings import get_settings
from cryptocollection.db import session as db_session
from cryptocollection.services.coingecko import APIError, APIErrorKind, CoinGeckoClient
from cryptocollection.services.favorite_store import FavoriteStore

_UPSTREAM_STATUS = {
    APIErrorKind.NOT_FOUND: 404,
    APIErrorKind.BAD_REQUEST: 400,
}


def get_coingecko_client() -> CoinGeckoClient:
    return CoinGeckoClient.from_settings(get_settings())


def get_favorite_store() -> FavoriteStore:
    return FavoriteStore(db_session.session_factory)


def error_response(
    *,
    code: str,
    message: str,
    status_code: int = 400,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    payload: dict[str, Any] = {"error": {"code": code, "message": message}}
    if details:
        payload["error"]["details"] = details
    return JSONResponse(status_code=status_code, content=payload)


def upstream_error_response(code: str, message: str) -> JSONResponse:
    kind = APIErrorKind(code)
    return error_response(
        code=code,
        message=message,
        status_code=_UPSTREAM_STATUS.get(kind, 502),
        details={"retryable": True},
    )


def api_error_response(exc: APIError) -> JSONResponse:
    return upstream_error_response(exc.kind.value, exc.message)


def store_error_response() -> JSONResponse:
    return error_response(
        code="store_error",
        message="즐겨찾기 저장소에 접근할 수 없습니다.",
        status_code=500,
        details={"retryable": True},
    )
