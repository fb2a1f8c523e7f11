# cryptocollection/scripts/coin_detail.py
from __future__ import annotations

import argparse
import asyncio
import sys
from typing import Optional, TextIO

from cryptocollection.config.settings import get_settings
from cryptocollection.db import session as db_session
from cryptocollection.db.migrations import create_tables
from cryptocollection.schemas.detail import DetailScreenState
from cryptocollection.services.coingecko import CoinGeckoClient
from cryptocollection.services.favorite_store import FavoriteStore
from cryptocollection.views.detail_controller import DetailController


def render(state: DetailScreenState) -> str:
    """Plain-text rendering of the detail screen."""
    lines: list[str] = []
    if state.is_favorite is None:
        star = "?"
    else:
        star = "★" if state.is_favorite else "☆"

    if state.alert is not None:
        lines.append(f"⚠️ {state.alert.message} ({state.alert.action})")
        return "\n".join(lines)

    header = state.header
    if header is not None:
        lines.append(f"{header.symbol} {star}")
        lines.append(f"{header.price}  {header.rate}")
        if header.updated:
            lines.append(header.updated)

    for section in state.sections:
        lines.append("")
        lines.append(f"[{section.title}]")
        for item in section.items:
            row = f"  {item.title}: {item.money}"
            if item.date_text:
                row += f" ({item.date_text})"
            lines.append(row)

    if state.toast:
        lines.append("")
        lines.append(f"💬 {state.toast}")

    return "\n".join(lines)


async def run(
    coin_id: str,
    *,
    toggle_favorite: bool = False,
    client: Optional[CoinGeckoClient] = None,
    store: Optional[FavoriteStore] = None,
) -> DetailScreenState:
    controller = DetailController(
        coin_id,
        client=client or CoinGeckoClient.from_settings(),
        store=store or FavoriteStore(db_session.session_factory),
        currency=get_settings().VS_CURRENCY,
    )
    state = await controller.load()
    if toggle_favorite and controller.last_error is None:
        state = await controller.favorite_tapped()
    return state


def main(argv: Optional[list[str]] = None, out: TextIO = sys.stdout) -> int:
    parser = argparse.ArgumentParser(description="Show a coin's detail screen in the terminal.")
    parser.add_argument("coin_id", help="CoinGecko coin id, e.g. bitcoin")
    parser.add_argument("--toggle-favorite", action="store_true", help="Flip the coin's favorite state")
    args = parser.parse_args(argv)

    async def _go() -> DetailScreenState:
        await create_tables()
        return await run(args.coin_id, toggle_favorite=args.toggle_favorite)

    state = asyncio.run(_go())
    print(render(state), file=out)
    return 1 if state.alert is not None else 0


if __name__ == "__main__":
    raise SystemExit(main())
