"""Effect runner: the loop that feeds events to ``update`` and runs effects.

The loop is ``update -> (state, effect) -> run effect -> event -> update``.
Events are consumed one at a time from a queue, so ``update`` never runs
concurrently with itself. A fetch effect runs as a background task and only
reports back by enqueuing ``Finished``; workers never touch the state.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from storyfeed import program
from storyfeed.deferred import Finished, is_settled
from storyfeed.program import Dispatch, NoEffect, RunFetch

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from storyfeed.deferred import AsyncOperationEvent
    from storyfeed.program import Effect, State
    from storyfeed.result import Result
    from storyfeed.schema import Record

    Fetch = Callable[[], Awaitable[Result[list[Record], str]]]
    Listener = Callable[[State], None]
    Event = AsyncOperationEvent[Result[list[Record], str]]

logger = logging.getLogger(__name__)


class Program:
    """Owns the single ``State`` value and drives it to resolution.

    Listeners are read-only observers: they receive each complete snapshot
    after ``init`` and after every processed event.
    """

    def __init__(
        self,
        fetch: Fetch,
        *,
        init: Callable[[], tuple[State, Effect]] = program.init,
        update: Callable[[State, Event], tuple[State, Effect]] = program.update,
    ) -> None:
        self._fetch = fetch
        self._init = init
        self._update = update
        self._queue: asyncio.Queue[Event | Exception] = asyncio.Queue()
        self._listeners: list[Listener] = []
        self._tasks: set[asyncio.Task[None]] = set()
        self._state: State | None = None

    @property
    def state(self) -> State:
        """Current snapshot."""
        if self._state is None:
            raise RuntimeError("Program has not been started")
        return self._state

    def subscribe(self, listener: Listener) -> None:
        """Register ``listener`` for every future snapshot."""
        self._listeners.append(listener)

    def dispatch(self, event: Event) -> None:
        """Queue ``event`` for processing."""
        self._queue.put_nowait(event)

    async def run_until_settled(self) -> State:
        """Start the program and process events until the stories resolve."""
        state, effect = self._init()
        self._commit(state)
        self._run_effect(effect)

        while not is_settled(self.state.stories):
            event = await self._queue.get()
            if isinstance(event, Exception):
                raise event
            state, effect = self._update(self.state, event)
            self._commit(state)
            self._run_effect(effect)

        if self._tasks:
            await asyncio.gather(*self._tasks)
        return self.state

    def _commit(self, state: State) -> None:
        self._state = state
        for listener in self._listeners:
            listener(state)

    def _run_effect(self, effect: Effect) -> None:
        match effect:
            case NoEffect():
                return
            case Dispatch(event=event):
                self.dispatch(event)
            case RunFetch():
                task = asyncio.create_task(self._fetch_and_report())
                self._tasks.add(task)
                task.add_done_callback(self._tasks.discard)

    async def _fetch_and_report(self) -> None:
        logger.debug("Running fetch")
        try:
            result = await self._fetch()
        except Exception as exc:
            # Re-raised by run_until_settled.
            self._queue.put_nowait(exc)
            return
        self.dispatch(Finished(result))
