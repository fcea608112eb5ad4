from __future__ import annotations
from dataclasses import replace
from typing import Callable
import uuid

from .model import Todo, TodoState
from .commands import (
    TodoAction, AddTodo, RemoveTodo, ToggleTodo, EditTodo, SetLoading, SetError,
)


def reduce(state: TodoState, action: TodoAction) -> TodoState:
    """
    Pure state transformer. Never mutates the input state and never raises:
    an action that does not apply (unknown id, unknown type) returns `state` as is.
    """
    if isinstance(action, AddTodo):
        todo = Todo(id=action.id, text=action.text)
        return replace(state, todos=state.todos + (todo,))

    if isinstance(action, RemoveTodo):
        if state.find(action.id) is None:
            return state
        return replace(state, todos=tuple(t for t in state.todos if t.id != action.id))

    if isinstance(action, ToggleTodo):
        return _update(state, action.id, lambda t: replace(t, is_completed=not t.is_completed))

    if isinstance(action, EditTodo):
        return _update(state, action.id, lambda t: replace(t, text=action.text))

    if isinstance(action, SetLoading):
        return replace(state, is_loading=action.is_loading)

    if isinstance(action, SetError):
        return replace(state, error=action.message)

    # Unhandled action → no-op
    return state


# ----- helpers -----

def _update(state: TodoState, todo_id: uuid.UUID, fn: Callable[[Todo], Todo]) -> TodoState:
    if state.find(todo_id) is None:
        return state
    return replace(state, todos=tuple(fn(t) if t.id == todo_id else t for t in state.todos))
