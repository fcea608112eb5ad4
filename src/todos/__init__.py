"""
Todo list domain built on statekit.

    from todos import (
        Todo, TodoState,
        TodoAction, AddTodo, RemoveTodo, ToggleTodo, EditTodo, SetLoading, SetError,
        reduce, block_while_loading, create_store,
    )
"""
from typing import Optional, Sequence

from statekit import Middleware, Store, StoreConfig

from .model import Todo, TodoState
from .commands import (
    TodoAction, AddTodo, RemoveTodo, ToggleTodo, EditTodo, SetLoading, SetError,
)
from .reducer import reduce
from .middleware import LOADING_ERROR, block_while_loading


def create_store(
    initial_state: Optional[TodoState] = None,
    middleware: Sequence[Middleware] = (),
    config: Optional[StoreConfig] = None,
) -> Store:
    return Store.from_config(initial_state or TodoState(), reduce, middleware, config)


__all__ = [
    # model
    "Todo", "TodoState",
    # actions
    "TodoAction", "AddTodo", "RemoveTodo", "ToggleTodo", "EditTodo", "SetLoading", "SetError",
    # reducer & middleware & store
    "reduce", "LOADING_ERROR", "block_while_loading", "create_store",
]
