"""Access to the request being dispatched on the current execution context."""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

from skill_engine.core.models import SkillRequest

_current_request: ContextVar[Optional[SkillRequest]] = ContextVar("current_request", default=None)


@contextmanager
def request_context(request: SkillRequest) -> Iterator[None]:
    """Bind ``request`` as the current request for the duration of the block."""

    token = _current_request.set(request)
    try:
        yield
    finally:
        _current_request.reset(token)


def get_current_request() -> Optional[SkillRequest]:
    """Return the request currently being dispatched, if any."""

    return _current_request.get()


__all__ = ["request_context", "get_current_request"]
