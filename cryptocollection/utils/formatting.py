"""
Display strings for prices, rates and dates.

Dates render in Korea Standard Time, matching the labels they sit next to.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

KST = timezone(timedelta(hours=9), name="KST")

CURRENCY_SYMBOLS = {
    "krw": "₩",
    "usd": "$",
    "eur": "€",
    "jpy": "¥",
}

# currencies without minor units
_WHOLE_UNIT_CURRENCIES = frozenset({"krw", "jpy"})


def currency_symbol(currency: str) -> str:
    c = currency.lower()
    return CURRENCY_SYMBOLS.get(c, f"{c.upper()} ")


def format_money(value: float | None, currency: str = "krw") -> str:
    if value is None:
        return "-"

    symbol = currency_symbol(currency)
    magnitude = abs(value)
    sign = "-" if value < 0 else ""

    if magnitude >= 1:
        if currency.lower() in _WHOLE_UNIT_CURRENCIES:
            body = f"{magnitude:,.0f}"
        else:
            body = f"{magnitude:,.2f}"
    else:
        # sub-unit coins: keep significant decimals, drop trailing zeros
        body = f"{magnitude:.8f}".rstrip("0").rstrip(".") or "0"

    return f"{sign}{symbol}{body}"


def format_percent(value: float | None) -> str:
    if value is None:
        return "-"
    rounded = round(value, 2)
    if rounded > 0:
        return f"+{rounded:.2f}%"
    if rounded == 0:
        return "0.00%"
    return f"{rounded:.2f}%"


def format_percent_text(value: str | None) -> str:
    """Same as format_percent for the string-typed NFT fields."""
    if value is None or value.strip() == "":
        return "-"
    try:
        return format_percent(float(value))
    except ValueError:
        return value


def is_rising(value: float | None) -> bool | None:
    if value is None:
        return None
    return value >= 0


def _to_kst(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(KST)


def format_date(dt: datetime | None) -> str:
    """21년 11월 10일"""
    if dt is None:
        return ""
    local = _to_kst(dt)
    return f"{local:%y}년 {local.month}월 {local.day}일"


def format_updated(dt: datetime | None) -> str:
    """3/8 14:00:00 업데이트"""
    if dt is None:
        return ""
    local = _to_kst(dt)
    return f"{local.month}/{local.day} {local:%H:%M:%S} 업데이트"
