from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Generic, Optional, Sequence
import asyncio
import logging

from .config import StoreConfig
from .history import History
from .middleware import compose
from .protocol import A, Middleware, Reducer, S

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Store(Generic[S, A]):
    """
    Single state value advanced by a pure reducer through a middleware chain,
    with a bounded undo history.

    Usage:
        store = Store(CounterState(), reduce, [logging_middleware()])
        await store.dispatch(Increment())
        if store.can_undo:
            await store.undo()

    Caller obligations (not guarded here):
      - a middleware unit that never calls `next` drops the action silently;
        one that never returns hangs the dispatch.
      - re-entrant dispatch from middleware runs the full chain again,
        including the unit that issued it; unbounded recursion is on the caller.
      - without single_flight, overlapping dispatches interleave in whatever
        order the event loop resumes them.
      - re-entrant dispatch skips the single_flight queue. That is only safe
        while the issuing middleware awaits it; a dispatch started as a
        detached task from middleware also skips the queue and can interleave
        with later top-level dispatches.
    """
    initial_state: S
    reducer: Reducer
    middleware: Sequence[Middleware] = ()
    max_history_items: int = 10
    single_flight: bool = False
    _state: Any = field(init=False, repr=False)
    _history: History = field(init=False, repr=False)
    _lock: Optional[asyncio.Lock] = field(init=False, repr=False, default=None)

    def __post_init__(self) -> None:
        if not callable(self.reducer):
            raise TypeError("reducer must be callable")
        self.middleware = tuple(self.middleware)
        for i, unit in enumerate(self.middleware):
            if not callable(unit):
                raise TypeError(f"middleware[{i}] is not callable: {unit!r}")
        if self.max_history_items < 0:
            raise ValueError(f"max_history_items must be >= 0, got {self.max_history_items}")
        self._state = self.initial_state
        self._history = History(self.max_history_items)
        if self.single_flight:
            self._lock = asyncio.Lock()

    @classmethod
    def from_config(
        cls,
        initial_state: S,
        reducer: Reducer,
        middleware: Sequence[Middleware] = (),
        config: Optional[StoreConfig] = None,
    ) -> "Store[S, A]":
        config = config or StoreConfig()
        return cls(
            initial_state,
            reducer,
            middleware,
            max_history_items=config.max_history_items,
            single_flight=config.single_flight,
        )

    @property
    def state(self) -> S:
        """Current committed snapshot. Read-only; never mutate in place."""
        return self._state

    @property
    def can_undo(self) -> bool:
        return bool(self._history)

    async def dispatch(self, action: A) -> None:
        """Run `action` through the chain; returns once everything has settled."""
        if self._lock is None:
            await self._dispatch(action)
            return
        async with self._lock:
            await self._dispatch(action)

    async def undo(self) -> None:
        """Restore the most recent history entry. No reducer, no middleware."""
        if self._lock is None:
            self._undo()
            return
        async with self._lock:
            self._undo()

    # ----- internals -----

    def _get_state(self) -> S:
        return self._state

    async def _dispatch(self, action: A) -> None:
        # Middleware re-enters here directly so a single-flight lock held by
        # the outer dispatch is not re-acquired.
        self._history.push(self._state)
        logger.debug("dispatch %r (history=%d)", action, len(self._history))
        chain = compose(self.middleware, self._get_state, self._dispatch, self._commit)
        await chain(action)

    def _commit(self, action: A) -> None:
        self._state = self.reducer(self._state, action)
        logger.debug("committed %s", type(action).__name__)

    def _undo(self) -> None:
        if not self._history:
            logger.debug("undo: history empty, nothing to do")
            return
        self._state = self._history.pop()
        logger.debug("undo: restored previous state (history=%d)", len(self._history))
