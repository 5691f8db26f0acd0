"""Core exception types shared across layers."""

from __future__ import annotations


class SkillEngineError(Exception):
    """Base exception for the skill engine."""


class UnknownIntentError(SkillEngineError, LookupError):
    """Raised when no handler is registered for the requested intent."""

    def __init__(self, intent_name: str) -> None:
        super().__init__(f"No handler registered for intent {intent_name!r}")
        self.intent_name = intent_name


class DuplicateIntentError(SkillEngineError):
    """Raised when an intent name is registered more than once."""

    def __init__(self, intent_name: str) -> None:
        super().__init__(f"Intent {intent_name!r} is already registered")
        self.intent_name = intent_name


class StateCorruptError(SkillEngineError):
    """Raised when a reserved session attribute does not hold the expected shape."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"Session attribute {key!r} is corrupt: {reason}")
        self.key = key
        self.reason = reason


class EmptyUtteranceError(SkillEngineError, ValueError):
    """Raised when a response would carry no speech."""


class HandlerFault(SkillEngineError):
    """Wraps an uncaught failure raised inside intent handler logic."""

    def __init__(self, intent_name: str, cause: BaseException | None = None) -> None:
        detail = f": {cause!r}" if cause is not None else ""
        super().__init__(f"Handler for intent {intent_name!r} failed{detail}")
        self.intent_name = intent_name
        self.cause = cause


class ContentFetchError(SkillEngineError):
    """Raised when remote intent content cannot be retrieved."""


class InvalidEnvelopeError(SkillEngineError, ValueError):
    """Raised when an inbound transport envelope cannot be parsed."""


__all__ = [
    "SkillEngineError",
    "UnknownIntentError",
    "DuplicateIntentError",
    "StateCorruptError",
    "EmptyUtteranceError",
    "HandlerFault",
    "ContentFetchError",
    "InvalidEnvelopeError",
]
