"""Application service layer: registry, codec, dispatcher, and their container."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from skill_engine.core.ports import AnomalyReporter, ContentPort

from .dispatcher import IntentDispatcher
from .intent_registry import IntentRegistry
from .session_codec import SessionStateCodec


@dataclass(slots=True)
class ServiceContainer:
    """Aggregate of application-level services available to the transport adapters."""

    registry: IntentRegistry
    dispatcher: IntentDispatcher
    content: Optional[ContentPort] = None


def build_default_services(
    *,
    registry: Optional[IntentRegistry] = None,
    content_port: Optional[ContentPort] = None,
    reporter: Optional[AnomalyReporter] = None,
) -> ServiceContainer:
    """Return a service container whose dispatcher is bound to ``registry``."""

    registry = registry if registry is not None else IntentRegistry()
    dispatcher = IntentDispatcher(registry, SessionStateCodec(), reporter)
    return ServiceContainer(registry=registry, dispatcher=dispatcher, content=content_port)


__all__ = ["ServiceContainer", "build_default_services"]
