"""Ordered, session-serializable queues carried between turns.

Queues are unbounded. The effective limit is the transport's maximum serialized payload
size, which this layer does not enforce. Lookups are linear scans; conversational state is
expected to stay in the tens of items.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Generic, Iterable, Iterator, List, Optional, TypeVar

from skill_engine.core.models import ApplicationParameter, CommandDefinition, InputItem

T = TypeVar("T")


class PersistentQueue(Generic[T]):
    """FIFO list of typed items with bulk replace semantics."""

    def __init__(self, items: Iterable[T] | None = None) -> None:
        self._items: List[T] = list(items or [])

    def enqueue(self, item: T) -> None:
        """Append ``item`` to the tail."""
        self._items.append(item)

    def dequeue(self) -> Optional[T]:
        """Remove and return the head, or ``None`` when empty."""
        if not self._items:
            return None
        return self._items.pop(0)

    def peek(self) -> Optional[T]:
        """Return the head without removing it."""
        return self._items[0] if self._items else None

    def dequeue_all(self) -> List[T]:
        """Return the full ordered contents and clear the queue."""
        drained, self._items = self._items, []
        return drained

    def replace(self, items: Iterable[T]) -> None:
        """Overwrite the contents wholesale."""
        self._items = list(items)

    def find(self, predicate: Callable[[T], bool]) -> Optional[T]:
        """Return the first item matching ``predicate``."""
        for item in self._items:
            if predicate(item):
                return item
        return None

    def remove(self, predicate: Callable[[T], bool]) -> int:
        """Drop every item matching ``predicate`` and return how many were removed."""
        kept = [item for item in self._items if not predicate(item)]
        removed = len(self._items) - len(kept)
        self._items = kept
        return removed

    def clear(self) -> None:
        self._items = []

    def items(self) -> List[T]:
        """Return a copy of the current contents."""
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._items))

    def __bool__(self) -> bool:
        return bool(self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PersistentQueue):
            return NotImplemented
        return type(self) is type(other) and self._items == other._items

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._items!r})"


class ParameterQueue(PersistentQueue[ApplicationParameter]):
    """Application parameters addressed by name."""

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Return the value stored under ``name``."""
        match = self.find(lambda param: param.name == name)
        return match.value if match is not None else default

    def set(self, name: str, value: str) -> None:
        """Overwrite the parameter named ``name`` in place, or append it."""
        for index, param in enumerate(self._items):
            if param.name == name:
                self._items[index] = ApplicationParameter(name=name, value=value)
                return
        self.enqueue(ApplicationParameter(name=name, value=value))

    def discard(self, name: str) -> bool:
        """Remove ``name`` if present; return whether anything was removed."""
        return self.remove(lambda param: param.name == name) > 0

    def as_dict(self) -> dict[str, str]:
        return {param.name: param.value for param in self._items}


class CommandQueue(PersistentQueue[CommandDefinition]):
    """Deferred follow-up commands, first in first out."""

    def for_intent(self, intent_name: str) -> Optional[CommandDefinition]:
        return self.find(lambda command: command.intent_name == intent_name)


class InputQueue(PersistentQueue[InputItem]):
    """Pending expected inputs, first in first out."""

    def match(self, value: str) -> Optional[InputItem]:
        """Return the first pending input equal to ``value`` ignoring case."""
        wanted = value.strip().casefold()
        return self.find(lambda item: item.value.strip().casefold() == wanted)

    def with_tag(self, tag: str) -> List[InputItem]:
        return [item for item in self._items if tag in item.tags]


@dataclass(slots=True)
class IntentQueues:
    """The three queues a handler may read and mutate during one dispatch."""

    parameters: ParameterQueue = field(default_factory=ParameterQueue)
    commands: CommandQueue = field(default_factory=CommandQueue)
    inputs: InputQueue = field(default_factory=InputQueue)

    def is_empty(self) -> bool:
        return not (self.parameters or self.commands or self.inputs)


__all__ = [
    "PersistentQueue",
    "ParameterQueue",
    "CommandQueue",
    "InputQueue",
    "IntentQueues",
]
