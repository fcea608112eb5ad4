from __future__ import annotations

from statekit import Middleware, guard

from .commands import AddTodo, SetError

LOADING_ERROR = "Cannot add a todo while loading"


def block_while_loading(message: str = LOADING_ERROR) -> Middleware:
    """Drop AddTodo while a load is in flight and record why in `error`."""
    return guard(
        lambda state, action: not (isinstance(action, AddTodo) and state.is_loading),
        on_reject=lambda state, action: SetError(message),
    )
