"""Intent whose utterance is published remotely and fetched per request."""

from __future__ import annotations

from typing import Optional

from skill_engine.core.context import get_current_request
from skill_engine.core.models import IntentResult, Slots
from skill_engine.core.ports import ContentPort
from skill_engine.core.queues import IntentQueues

from .base import SkillIntent

ANONYMOUS_USER = "anonymous"


class ContentIntent(SkillIntent):
    """Speak the text returned by the content service for ``content_key``.

    Request parameters are the session's application parameters overlaid with the non-empty
    slot values of this turn.
    """

    def __init__(
        self,
        content: ContentPort,
        content_key: str,
        *,
        end_session: bool = True,
        reprompt: Optional[str] = None,
    ) -> None:
        self.content = content
        self.content_key = content_key
        self.end_session = end_session
        self.reprompt = reprompt

    def get_response(self, slots: Slots, queues: IntentQueues) -> IntentResult:
        params = queues.parameters.as_dict()
        params.update({name: slot.value for name, slot in slots.items() if slot.value})
        text = self.content.fetch(self.content_key, self._user_id(), params)
        if self.end_session:
            return self.tell(text)
        return self.ask(text, self.reprompt)

    @staticmethod
    def _user_id() -> str:
        request = get_current_request()
        if request is None or not request.session.user_id:
            return ANONYMOUS_USER
        return request.session.user_id

    def __repr__(self) -> str:
        return f"ContentIntent({self.content_key!r})"


__all__ = ["ContentIntent", "ANONYMOUS_USER"]
