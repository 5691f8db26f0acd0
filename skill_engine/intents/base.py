"""Base class for intent handlers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from skill_engine.core.models import IntentResult, Slots
from skill_engine.core.queues import IntentQueues


def slot_value(slots: Slots, name: str, default: Optional[str] = None) -> Optional[str]:
    """Return the trimmed value of slot ``name``, or ``default`` when missing or blank."""
    slot = slots.get(name)
    if slot is None or slot.value is None or not slot.value.strip():
        return default
    return slot.value.strip()


class SkillIntent(ABC):
    """Implements :class:`~skill_engine.core.ports.IntentHandler` over ``get_response``.

    Subclasses build their reply with :meth:`tell` or :meth:`ask` and may read or mutate the
    session queues they are handed.
    """

    def handle(self, slots: Slots, queues: IntentQueues) -> IntentResult:
        return self.get_response(slots, queues)

    @abstractmethod
    def get_response(self, slots: Slots, queues: IntentQueues) -> IntentResult:
        """Return the reply for this turn."""

    @staticmethod
    def tell(text: str) -> IntentResult:
        return IntentResult.tell(text)

    @staticmethod
    def ask(text: str, reprompt: Optional[str] = None) -> IntentResult:
        return IntentResult.ask(text, reprompt)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


__all__ = ["SkillIntent", "slot_value"]
