"""Construction of outbound skill responses."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from skill_engine.core.exceptions import EmptyUtteranceError
from skill_engine.core.models import SkillResponse


class ResponseBuilder:  # pylint: disable=too-few-public-methods
    """Build :class:`SkillResponse` values; a voice surface must always say something."""

    def build(
        self,
        utterance: str,
        should_end_session: bool,
        attributes: Mapping[str, Any] | None = None,
        reprompt: Optional[str] = None,
    ) -> SkillResponse:
        if not isinstance(utterance, str) or not utterance.strip():
            raise EmptyUtteranceError("Responses require a non-empty utterance")
        return SkillResponse(
            utterance=utterance,
            should_end_session=bool(should_end_session),
            session_attributes=dict(attributes or {}),
            reprompt=reprompt or None,
        )


__all__ = ["ResponseBuilder"]
