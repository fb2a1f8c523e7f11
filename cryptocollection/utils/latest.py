from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Generic, TypeVar

T = TypeVar("T")


class Superseded(Exception):
    """The run was replaced by a newer one before its result could be used."""


class LatestOnly(Generic[T]):
    """
    Runs one coroutine at a time; starting a new run cancels the previous
    one. Each run carries a generation number, and a result that comes back
    after a newer run started raises Superseded instead of being returned.

    Cancelling the caller itself still raises CancelledError, even when a
    newer run exists.
    """

    def __init__(self) -> None:
        self._generation = 0
        self._task: asyncio.Task | None = None

    def is_current(self, generation: int) -> bool:
        return generation == self._generation

    async def run(self, factory: Callable[[], Awaitable[T]]) -> T:
        self._generation += 1
        generation = self._generation

        previous = self._task
        if previous is not None and not previous.done():
            previous.cancel()

        task = asyncio.ensure_future(factory())
        self._task = task

        try:
            result = await task
        except asyncio.CancelledError:
            caller = asyncio.current_task()
            if not self.is_current(generation) and not (caller and caller.cancelling()):
                raise Superseded() from None
            task.cancel()
            raise

        if not self.is_current(generation):
            raise Superseded()
        return result
