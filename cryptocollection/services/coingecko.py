"""Typed client for the public CoinGecko API."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Iterable, Optional

import httpx
from pydantic import TypeAdapter, ValidationError

from cryptocollection.config.settings import Settings, get_settings
from cryptocollection.schemas.coingecko import CoinSummary, SearchResponse, TrendingResponse

logger = logging.getLogger("cryptocollection.coingecko")

API_KEY_HEADER = "x-cg-demo-api-key"

_COIN_LIST = TypeAdapter(list[CoinSummary])


class APIErrorKind(str, Enum):
    BAD_REQUEST = "bad_request"  # 400
    UNAUTHORIZED = "unauthorized"  # 401
    NOT_FOUND = "not_found"  # 404
    RATE_LIMITED = "rate_limited"  # 429
    NETWORK_ERROR = "network_error"
    DECODE_ERROR = "decode_error"
    UNKNOWN_ERROR = "unknown_error"


_STATUS_KINDS = {
    400: APIErrorKind.BAD_REQUEST,
    401: APIErrorKind.UNAUTHORIZED,
    404: APIErrorKind.NOT_FOUND,
    429: APIErrorKind.RATE_LIMITED,
}

_MESSAGES = {
    APIErrorKind.BAD_REQUEST: "잘못된 요청입니다.",
    APIErrorKind.UNAUTHORIZED: "인증에 실패했습니다.",
    APIErrorKind.NOT_FOUND: "코인 정보를 찾을 수 없습니다.",
    APIErrorKind.RATE_LIMITED: "요청이 너무 많습니다. 잠시 후 다시 시도해주세요.",
    APIErrorKind.NETWORK_ERROR: "네트워크 연결이 원활하지 않습니다.",
    APIErrorKind.DECODE_ERROR: "응답을 해석할 수 없습니다.",
    APIErrorKind.UNKNOWN_ERROR: "알 수 없는 오류가 발생했습니다.",
}


class APIError(Exception):
    def __init__(self, kind: APIErrorKind, detail: str = "", status_code: int | None = None) -> None:
        self.kind = kind
        self.detail = detail
        self.status_code = status_code
        super().__init__(f"{kind.value}: {detail}" if detail else kind.value)

    @property
    def message(self) -> str:
        return _MESSAGES[self.kind]

    @classmethod
    def from_status(cls, status_code: int, detail: str = "") -> "APIError":
        kind = _STATUS_KINDS.get(status_code, APIErrorKind.UNKNOWN_ERROR)
        return cls(kind, detail, status_code=status_code)


class CoinGeckoClient:
    """
    One short-lived httpx.AsyncClient per request.

    `transport` exists for tests (httpx.MockTransport); `timeout=None`
    keeps httpx's own default.
    """

    def __init__(
        self,
        *,
        base_url: str,
        vs_currency: str = "krw",
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        sparkline: bool = True,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.vs_currency = vs_currency
        self.api_key = api_key
        self.timeout = timeout
        self.sparkline = sparkline
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings | None = None, **overrides: Any) -> "CoinGeckoClient":
        s = settings or get_settings()
        kwargs: dict[str, Any] = {
            "base_url": s.COINGECKO_BASE_URL,
            "vs_currency": s.VS_CURRENCY,
            "api_key": s.COINGECKO_API_KEY,
            "timeout": s.HTTP_TIMEOUT_SECONDS,
            "sparkline": s.SPARKLINE_ENABLED,
        }
        kwargs.update(overrides)
        return cls(**kwargs)

    def _client_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {"base_url": self.base_url, "headers": {"accept": "application/json"}}
        if self.api_key:
            kwargs["headers"][API_KEY_HEADER] = self.api_key
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout
        if self._transport is not None:
            kwargs["transport"] = self._transport
        return kwargs

    async def _get_json(self, path: str, params: dict[str, Any]) -> Any:
        try:
            async with httpx.AsyncClient(**self._client_kwargs()) as client:
                response = await client.get(path, params=params)
        except httpx.HTTPError as exc:
            logger.warning("coingecko transport failure | path=%s | err=%s", path, exc)
            raise APIError(APIErrorKind.NETWORK_ERROR, str(exc)) from exc

        if response.status_code >= 400:
            logger.warning("coingecko bad status | path=%s | status=%s", path, response.status_code)
            raise APIError.from_status(response.status_code, response.text[:200])

        try:
            return response.json()
        except ValueError as exc:
            raise APIError(APIErrorKind.DECODE_ERROR, "response body is not JSON") from exc

    async def get_coin_information(self, ids: str | Iterable[str]) -> list[CoinSummary]:
        """GET /coins/markets for one or more ids (sent comma-joined)."""
        joined = ids if isinstance(ids, str) else ",".join(ids)
        params = {
            "vs_currency": self.vs_currency,
            "ids": joined,
            "sparkline": str(self.sparkline).lower(),
        }
        payload = await self._get_json("/coins/markets", params)
        try:
            return _COIN_LIST.validate_python(payload)
        except ValidationError as exc:
            raise APIError(APIErrorKind.DECODE_ERROR, str(exc)) from exc

    async def get_trending(self) -> TrendingResponse:
        payload = await self._get_json("/search/trending", {})
        try:
            return TrendingResponse.model_validate(payload)
        except ValidationError as exc:
            raise APIError(APIErrorKind.DECODE_ERROR, str(exc)) from exc

    async def search(self, query: str) -> SearchResponse:
        payload = await self._get_json("/search", {"query": query})
        try:
            return SearchResponse.model_validate(payload)
        except ValidationError as exc:
            raise APIError(APIErrorKind.DECODE_ERROR, str(exc)) from exc
