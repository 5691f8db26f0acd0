"""Intent registry mapping intent names to handler instances."""

from __future__ import annotations

from typing import Callable, Mapping, MutableMapping, Union

from skill_engine.core.exceptions import DuplicateIntentError, UnknownIntentError
from skill_engine.core.logging import get_logger
from skill_engine.core.models import IntentResult, Slots
from skill_engine.core.ports import IntentHandler
from skill_engine.core.queues import IntentQueues

logger = get_logger(__name__)

HandlerFunction = Callable[[Slots, IntentQueues], IntentResult]
HandlerFactory = Callable[[], IntentHandler]


class FunctionIntentHandler:  # pylint: disable=too-few-public-methods
    """Adapt a plain ``(slots, queues) -> IntentResult`` function to :class:`IntentHandler`."""

    def __init__(self, func: HandlerFunction) -> None:
        self.func = func

    def handle(self, slots: Slots, queues: IntentQueues) -> IntentResult:
        return self.func(slots, queues)

    def __repr__(self) -> str:
        return f"FunctionIntentHandler({getattr(self.func, '__name__', self.func)!r})"


class IntentRegistry:
    """Exact-match lookup of handlers by intent name.

    Registration happens once while the process is wired together; afterwards the registry is
    only read and may be shared between concurrent dispatch calls.
    """

    def __init__(self, handlers: Mapping[str, IntentHandler] | None = None) -> None:
        self._handlers: MutableMapping[str, IntentHandler] = {}
        for name, handler in (handlers or {}).items():
            self.register(name, handler)

    def register(
        self, name: str, handler: Union[IntentHandler, HandlerFunction, HandlerFactory]
    ) -> None:
        """Register ``handler`` for ``name``; raises :class:`DuplicateIntentError` on reuse.

        A handler class is treated as a factory and instantiated here, so a class whose
        instances are not handlers fails at wiring time rather than on dispatch.
        """

        if name in self._handlers:
            raise DuplicateIntentError(name)
        if isinstance(handler, type):
            instance = handler()
            if not isinstance(instance, IntentHandler):
                raise TypeError(f"Handler class for intent {name!r} is not an IntentHandler")
            handler = instance
        if not isinstance(handler, IntentHandler):
            if not callable(handler):
                raise TypeError(f"Handler for intent {name!r} is not callable: {handler!r}")
            handler = FunctionIntentHandler(handler)
        self._handlers[name] = handler
        logger.debug("[intent-registry] Registered intent=%s handler=%r", name, handler)

    def register_factory(self, name: str, factory: HandlerFactory) -> IntentHandler:
        """Build a handler from ``factory`` now and register it under ``name``."""

        if name in self._handlers:
            raise DuplicateIntentError(name)
        handler = factory()
        self.register(name, handler)
        return handler

    def intent(self, name: str) -> Callable[[HandlerFunction], HandlerFunction]:
        """Decorator registering a plain function as the handler for ``name``."""

        def decorator(func: HandlerFunction) -> HandlerFunction:
            self.register(name, func)
            return func

        return decorator

    def resolve(self, name: str) -> IntentHandler:
        """Return the handler for ``name``; raises :class:`UnknownIntentError` if absent."""

        try:
            return self._handlers[name]
        except KeyError as exc:
            raise UnknownIntentError(name) from exc

    def names(self) -> frozenset[str]:
        """Return the registered intent names."""

        return frozenset(self._handlers)

    def handlers(self) -> Mapping[str, IntentHandler]:
        """Return a shallow copy of the current intent handler registry."""

        return dict(self._handlers)

    def __contains__(self, name: object) -> bool:
        return name in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)


__all__ = [
    "IntentRegistry",
    "FunctionIntentHandler",
    "HandlerFunction",
    "HandlerFactory",
]
