from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional
import uuid


class TodoAction:
    """Marker base class for all todo actions (intents)."""
    pass


@dataclass(frozen=True)
class AddTodo(TodoAction):
    """Id is minted here, not in the reducer, so reduce() stays deterministic."""
    text: str
    id: uuid.UUID = field(default_factory=uuid.uuid4)


@dataclass(frozen=True)
class RemoveTodo(TodoAction):
    id: uuid.UUID


@dataclass(frozen=True)
class ToggleTodo(TodoAction):
    id: uuid.UUID


@dataclass(frozen=True)
class EditTodo(TodoAction):
    id: uuid.UUID
    text: str


@dataclass(frozen=True)
class SetLoading(TodoAction):
    is_loading: bool


@dataclass(frozen=True)
class SetError(TodoAction):
    message: Optional[str]
