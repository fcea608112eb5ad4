from __future__ import annotations
from typing import Any, Awaitable, Callable, Protocol, TypeVar


S = TypeVar("S")
A = TypeVar("A")

Reducer = Callable[[S, A], S]
GetState = Callable[[], S]
Dispatch = Callable[[A], Awaitable[None]]
Next = Callable[[A], Awaitable[None]]
Middleware = Callable[[GetState, Dispatch, Next, A], Awaitable[None]]


class StoreProtocol(Protocol):
    """
    Minimal contract shared by the engine store and anything wrapping it.

    Implementations must provide:
      - state -> current committed snapshot (treat as read-only)
      - can_undo -> True iff there is history to pop
      - dispatch(action) -> coroutine, resolves once the chain has settled
      - undo() -> coroutine, restores the previous snapshot (no-op if none)
    """
    @property
    def state(self) -> Any: ...
    @property
    def can_undo(self) -> bool: ...
    async def dispatch(self, action: Any) -> None: ...
    async def undo(self) -> None: ...
