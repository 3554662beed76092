"""
Observable Screen State

DESIGN DECISION: A screen's state is an immutable pydantic snapshot held
by a StateStore. Changing state means publishing a new snapshot; every
subscriber is called with it. Nothing here knows about any UI framework.

ScreenStateHolder adds the request bookkeeping every screen needs:
- A generation counter per request channel. Each new request bumps it,
  and a response is applied only if its generation is still the latest.
  Overlapping refreshes therefore resolve to the newest one.
- close(): cancels the in-flight task and marks the holder disposed, so
  a response that arrives later never touches the state.
"""

import asyncio
from typing import Callable, Coroutine, Generic, Optional, TypeVar

import structlog
from pydantic import BaseModel

from src.audit import AuditLogger


S = TypeVar("S", bound=BaseModel)


class StateStore(Generic[S]):
    """Current snapshot plus subscribe."""

    def __init__(self, initial: S):
        self._value = initial
        self._subscribers: list[Callable[[S], None]] = []
        self._closed = False
        self._logger = structlog.get_logger("finance.state")

    @property
    def value(self) -> S:
        return self._value

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(
        self,
        callback: Callable[[S], None],
        emit_current: bool = True,
    ) -> Callable[[], None]:
        """
        Register a callback for every new snapshot.

        The callback is called right away with the current snapshot
        unless emit_current is False.

        Returns:
            A function that removes the subscription
        """
        self._subscribers.append(callback)
        if emit_current:
            callback(self._value)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def set(self, snapshot: S) -> None:
        """Publish a new snapshot. Ignored once the store is closed."""
        if self._closed:
            return
        self._value = snapshot
        for callback in list(self._subscribers):
            try:
                callback(snapshot)
            except Exception:
                # One broken subscriber must not starve the others
                self._logger.exception("state_subscriber_failed")

    def update(self, **changes) -> S:
        """Publish a copy of the current snapshot with some fields replaced."""
        self.set(self._value.model_copy(update=changes))
        return self._value

    def close(self) -> None:
        self._closed = True
        self._subscribers.clear()


class ScreenStateHolder(Generic[S]):
    """
    Base class for per-screen state holders.

    Subclasses publish through self._store and guard every response
    with _begin_request / _is_current.
    """

    screen_name = "screen"

    def __init__(self, initial: S, audit_logger: Optional[AuditLogger] = None):
        self._store: StateStore[S] = StateStore(initial)
        self._audit_logger = audit_logger or AuditLogger()
        self._generations: dict[str, int] = {}
        self._tasks: dict[str, asyncio.Task] = {}
        self._closed = False

    @property
    def state(self) -> S:
        """The current snapshot."""
        return self._store.value

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(
        self,
        callback: Callable[[S], None],
        emit_current: bool = True,
    ) -> Callable[[], None]:
        return self._store.subscribe(callback, emit_current)

    def _begin_request(self, channel: str = "load") -> int:
        generation = self._generations.get(channel, 0) + 1
        self._generations[channel] = generation
        return generation

    def _is_current(self, generation: int, channel: str = "load") -> bool:
        """True if a response for `generation` may still be applied."""
        if self._closed:
            return False
        current = self._generations.get(channel, 0)
        if generation != current:
            self._audit_logger.log_stale_response(
                screen=f"{self.screen_name}:{channel}",
                generation=generation,
                current_generation=current,
            )
            return False
        return True

    def _launch(
        self,
        coro: Coroutine,
        channel: str = "load",
    ) -> asyncio.Task:
        """
        Run coro as a task, cancelling the previous task on this channel.

        Must be called from inside a running event loop.
        """
        previous = self._tasks.get(channel)
        if previous is not None and not previous.done():
            previous.cancel()
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks[channel] = task
        return task

    async def close(self) -> None:
        """Dispose the holder; in-flight work is cancelled and ignored."""
        self._closed = True
        tasks = [t for t in self._tasks.values() if not t.done()]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()
        self._store.close()
