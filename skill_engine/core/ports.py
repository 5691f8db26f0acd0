"""Protocol definitions for handlers and infrastructure collaborators."""

# pylint: disable=unnecessary-ellipsis

from __future__ import annotations

from typing import Mapping, Optional, Protocol, runtime_checkable

from skill_engine.core.exceptions import HandlerFault, StateCorruptError
from skill_engine.core.models import IntentResult, Slots
from skill_engine.core.queues import IntentQueues


@runtime_checkable
class IntentHandler(Protocol):
    """Capability shared by every intent implementation."""

    def handle(self, slots: Slots, queues: IntentQueues) -> IntentResult:
        """Produce the response for one turn; may mutate ``queues`` in place."""
        ...


class AnomalyReporter(Protocol):
    """Observability collaborator notified of recovered failures."""

    def report_state_anomaly(self, error: StateCorruptError) -> None:
        """Record that persisted session state was discarded."""
        ...

    def report_handler_fault(self, fault: HandlerFault) -> None:
        """Record that a handler failed and the user received an apology."""
        ...


class ContentPort(Protocol):
    """Port exposing remote intent content retrieval."""

    def fetch(
        self, intent_key: str, user_id: str, params: Optional[Mapping[str, str]] = None
    ) -> str:
        """Return the text content published for ``intent_key``."""
        ...


__all__ = ["IntentHandler", "AnomalyReporter", "ContentPort"]
