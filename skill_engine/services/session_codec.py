"""Codec between the untyped session attribute bag and the typed intent queues.

Only this module reads or writes the reserved ``_PersistentQueue_*`` keys. A reserved key that
is absent, ``None``, or holds an empty list decodes to an empty queue, and empty queues are
never written, so absent and present-but-empty are indistinguishable.
"""

from __future__ import annotations

from typing import Any, Generic, List, Mapping, Type, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from skill_engine.core.exceptions import StateCorruptError
from skill_engine.core.logging import get_logger
from skill_engine.core.models import (
    ApplicationParameter,
    CommandDefinition,
    InputItem,
    SessionAttributes,
    WireModel,
)
from skill_engine.core.queues import (
    CommandQueue,
    InputQueue,
    IntentQueues,
    ParameterQueue,
    PersistentQueue,
)

logger = get_logger(__name__)

PARAMETERS_KEY = "_PersistentQueue_Parameters"
COMMANDS_KEY = "_PersistentQueue_Commands"
INPUTS_KEY = "_PersistentQueue_Inputs"
RESERVED_KEYS = (PARAMETERS_KEY, COMMANDS_KEY, INPUTS_KEY)

ItemT = TypeVar("ItemT", bound=WireModel)


class _QueueField(Generic[ItemT]):
    """Binds one reserved key to its item model and queue attribute."""

    def __init__(self, key: str, attribute: str, item_type: Type[ItemT]) -> None:
        self.key = key
        self.attribute = attribute
        self.item_type = item_type
        self._adapter: TypeAdapter[List[ItemT]] = TypeAdapter(
            List[item_type]  # type: ignore[valid-type]
        )

    def decode(self, raw: Any) -> List[ItemT]:
        if raw is None:
            return []
        if not isinstance(raw, (list, tuple)):
            raise StateCorruptError(self.key, f"expected a list, got {type(raw).__name__}")
        items = []
        for item in raw:
            if isinstance(item, BaseModel):
                if not isinstance(item, self.item_type):
                    raise StateCorruptError(
                        self.key, f"unexpected item type {type(item).__name__}"
                    )
                item = item.model_dump()
            items.append(item)
        try:
            return self._adapter.validate_python(items)
        except ValidationError as exc:
            raise StateCorruptError(self.key, f"{exc.error_count()} invalid item field(s)") from exc

    def encode(self, queue: PersistentQueue[ItemT]) -> List[dict[str, Any]]:
        encoded = []
        for item in queue:
            if not isinstance(item, self.item_type):
                raise StateCorruptError(
                    self.key, f"cannot store {type(item).__name__} as {self.item_type.__name__}"
                )
            encoded.append(item.to_wire())
        return encoded


_FIELDS = (
    _QueueField(PARAMETERS_KEY, "parameters", ApplicationParameter),
    _QueueField(COMMANDS_KEY, "commands", CommandDefinition),
    _QueueField(INPUTS_KEY, "inputs", InputItem),
)


class SessionStateCodec:
    """Translate between session attributes and :class:`IntentQueues`."""

    def decode(self, attributes: Mapping[str, Any] | None) -> IntentQueues:
        """Rebuild the three queues; raises :class:`StateCorruptError` on malformed data."""
        attributes = attributes or {}
        decoded = {
            queue_field.attribute: queue_field.decode(attributes.get(queue_field.key))
            for queue_field in _FIELDS
        }
        queues = IntentQueues(
            parameters=ParameterQueue(decoded["parameters"]),
            commands=CommandQueue(decoded["commands"]),
            inputs=InputQueue(decoded["inputs"]),
        )
        logger.debug(
            "[session-codec] Decoded parameters=%d commands=%d inputs=%d",
            len(queues.parameters),
            len(queues.commands),
            len(queues.inputs),
        )
        return queues

    def encode(self, queues: IntentQueues) -> SessionAttributes:
        """Return the attribute patch for ``queues``; empty queues are omitted.

        Raises :class:`StateCorruptError` when a queue holds an item of the wrong type.
        """
        patch: SessionAttributes = {}
        for queue_field in _FIELDS:
            queue = getattr(queues, queue_field.attribute)
            if queue:
                patch[queue_field.key] = queue_field.encode(queue)
        return patch

    def merge(
        self, attributes: Mapping[str, Any] | None, queues: IntentQueues
    ) -> SessionAttributes:
        """Copy ``attributes``, drop stale reserved keys, and apply the encoded patch."""
        merged = strip_reserved(attributes)
        merged.update(self.encode(queues))
        return merged


def strip_reserved(attributes: Mapping[str, Any] | None) -> SessionAttributes:
    """Return a copy of ``attributes`` without any reserved keys."""
    return {key: value for key, value in (attributes or {}).items() if key not in RESERVED_KEYS}


__all__ = [
    "SessionStateCodec",
    "PARAMETERS_KEY",
    "COMMANDS_KEY",
    "INPUTS_KEY",
    "RESERVED_KEYS",
    "strip_reserved",
]
