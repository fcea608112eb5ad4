from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional, Tuple
import uuid


@dataclass(frozen=True)
class Todo:
    id: uuid.UUID
    text: str
    is_completed: bool = False


@dataclass(frozen=True)
class TodoState:
    todos: Tuple[Todo, ...] = field(default_factory=tuple)
    is_loading: bool = False
    error: Optional[str] = None

    def find(self, todo_id: uuid.UUID) -> Optional[Todo]:
        """Convenience lookup; O(n) but lists are small."""
        for t in self.todos:
            if t.id == todo_id:
                return t
        return None

    @property
    def open_count(self) -> int:
        return sum(1 for t in self.todos if not t.is_completed)
