from __future__ import annotations
from typing import Any, Callable, Optional, Sequence
import asyncio
import inspect
import logging

from .protocol import Dispatch, GetState, Middleware, Next

logger = logging.getLogger(__name__)


class _Chain:
    """
    Index cursor over an immutable middleware sequence plus a terminal step.

    Built once per dispatch. Unit i receives a `next` bound to i + 1; the last
    unit's `next` is the terminal step (reduce + commit). Units may call `next`
    zero, one or several times; each call re-enters the chain at i + 1.
    """

    def __init__(
        self,
        middleware: Sequence[Middleware],
        get_state: GetState,
        dispatch: Dispatch,
        terminal: Callable[[Any], None],
    ) -> None:
        self._middleware = middleware
        self._get_state = get_state
        self._dispatch = dispatch
        self._terminal = terminal

    def at(self, index: int) -> Next:
        async def next_(action: Any) -> None:
            if index >= len(self._middleware):
                self._terminal(action)
                return
            unit = self._middleware[index]
            await unit(self._get_state, self._dispatch, self.at(index + 1), action)
        return next_


def compose(
    middleware: Sequence[Middleware],
    get_state: GetState,
    dispatch: Dispatch,
    terminal: Callable[[Any], None],
) -> Next:
    """
    Onion composition: middleware[0] is outermost (first in, last out).

    For [m0, m1] a single call runs:
        m0-pre, m1-pre, terminal, m1-post, m0-post
    """
    return _Chain(tuple(middleware), get_state, dispatch, terminal).at(0)


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


# ----- stock middleware -----

def logging_middleware(log: Optional[logging.Logger] = None, level: int = logging.DEBUG) -> Middleware:
    """Log each action on the way in and the settled state on the way out."""
    log = log or logger

    async def _logging(get_state, dispatch, next, action):
        log.log(level, "action: %r", action)
        await next(action)
        log.log(level, "state after %s: %r", type(action).__name__, get_state())

    return _logging


def guard(
    predicate: Callable[[Any, Any], bool],
    on_reject: Optional[Callable[[Any, Any], Any]] = None,
) -> Middleware:
    """
    Forward only when predicate(state, action) holds.

    A rejected action never reaches the reducer. If on_reject(state, action)
    returns an action it is issued as a fresh top-level dispatch, so the
    rejection can be recorded as ordinary state (e.g. an error field).
    """

    async def _guard(get_state, dispatch, next, action):
        state = get_state()
        if predicate(state, action):
            await next(action)
            return
        logger.debug("guard rejected %r", action)
        if on_reject is not None:
            replacement = on_reject(state, action)
            if replacement is not None:
                await dispatch(replacement)

    return _guard


def map_action(transform: Callable[[Any], Any]) -> Middleware:
    """Forward transform(action); inner units and the reducer only see the result."""

    async def _map(get_state, dispatch, next, action):
        await next(transform(action))

    return _map


def delay(seconds: float) -> Middleware:
    """Suspend for `seconds` before forwarding."""
    if seconds < 0:
        raise ValueError(f"delay must be >= 0, got {seconds}")

    async def _delay(get_state, dispatch, next, action):
        await asyncio.sleep(seconds)
        await next(action)

    return _delay


def persist_with(save: Callable[[Any], Any]) -> Middleware:
    """
    Forward first, then hand the settled state to save(state).

    `save` may be a plain function or a coroutine function. Errors raised by
    it propagate out of dispatch; the state is already committed by then.
    """

    async def _persist(get_state, dispatch, next, action):
        await next(action)
        await _resolve(save(get_state()))

    return _persist


def when_changed(
    selector: Callable[[Any], Any],
    effect: Callable[[Any], Any],
    wait: float = 0.0,
) -> Middleware:
    """
    Run effect(new_value) when selector(state) differs before/after the action.

    The effect may be sync or async. If it returns an action, that action is
    dispatched as a new top-level dispatch.
    """

    async def _when_changed(get_state, dispatch, next, action):
        before = selector(get_state())
        await next(action)
        after = selector(get_state())
        if before == after:
            return
        if wait > 0:
            await asyncio.sleep(wait)
        follow_up = await _resolve(effect(after))
        if follow_up is not None:
            await dispatch(follow_up)

    return _when_changed
