"""Application bootstrap helpers for assembling the registry and service container."""

from __future__ import annotations

from typing import Optional

from skill_engine.adapters.content import ContentService
from skill_engine.core.config import config
from skill_engine.core.logging import get_logger
from skill_engine.core.ports import ContentPort
from skill_engine.intents import (
    CancelIntent,
    ContentIntent,
    HelpIntent,
    LaunchIntent,
    SessionEndedIntent,
    StopIntent,
)
from skill_engine.services import ServiceContainer, build_default_services
from skill_engine.services.intent_registry import IntentRegistry

logger = get_logger(__name__)

HELP_INTENT = "AMAZON.HelpIntent"
STOP_INTENT = "AMAZON.StopIntent"
CANCEL_INTENT = "AMAZON.CancelIntent"


def build_default_registry() -> IntentRegistry:
    """Return a registry holding the built-in intents.

    Raises :class:`~skill_engine.core.exceptions.DuplicateIntentError` if the configured
    launch or session-ended names collide with a built-in name.
    """

    registry = IntentRegistry()
    registry.register_factory(config.LAUNCH_INTENT_NAME, LaunchIntent)
    registry.register_factory(HELP_INTENT, HelpIntent)
    registry.register_factory(STOP_INTENT, StopIntent)
    registry.register_factory(CANCEL_INTENT, CancelIntent)
    registry.register_factory(config.SESSION_ENDED_INTENT_NAME, SessionEndedIntent)
    return registry


def build_default_content_port() -> Optional[ContentPort]:
    """Return the HTTP content service when ``CONTENT_BASE_URL`` is configured."""

    if not config.CONTENT_BASE_URL:
        return None
    return ContentService(config.CONTENT_BASE_URL)


def register_content_intents(registry: IntentRegistry, content_port: ContentPort) -> None:
    """Register a :class:`ContentIntent` for every ``CONTENT_INTENTS`` entry."""

    for intent_name, content_key in sorted(config.CONTENT_INTENTS.items()):
        registry.register(intent_name, ContentIntent(content_port, content_key))


def build_default_service_container() -> ServiceContainer:
    """Return the default service container wired to production adapters."""

    registry = build_default_registry()
    content_port = build_default_content_port()
    if content_port is not None:
        register_content_intents(registry, content_port)
    elif config.CONTENT_INTENTS:
        logger.warning(
            "CONTENT_INTENTS configured without CONTENT_BASE_URL; skipping %d content intents",
            len(config.CONTENT_INTENTS),
        )
    logger.info("Wired %d intents: %s", len(registry), ", ".join(sorted(registry.names())))
    return build_default_services(
        registry=registry,
        content_port=content_port,
    )


__all__ = [
    "build_default_registry",
    "build_default_content_port",
    "register_content_intents",
    "build_default_service_container",
    "HELP_INTENT",
    "STOP_INTENT",
    "CANCEL_INTENT",
]
