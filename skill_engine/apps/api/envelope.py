"""Translation between transport envelopes and dispatcher requests/responses."""

from __future__ import annotations

import uuid
from typing import Any, Mapping

from pydantic import ValidationError

from skill_engine.core.api_models import (
    INTENT_REQUEST,
    LAUNCH_REQUEST,
    SESSION_ENDED_REQUEST,
    OutputSpeech,
    Reprompt,
    ResponseBody,
    SkillRequestEnvelope,
    SkillResponseEnvelope,
)
from skill_engine.core.config import config
from skill_engine.core.exceptions import InvalidEnvelopeError
from skill_engine.core.models import Session, SkillRequest, SkillResponse, Slot


def parse_envelope(payload: Mapping[str, Any]) -> SkillRequestEnvelope:
    """Validate a raw JSON payload; raises :class:`InvalidEnvelopeError`."""
    try:
        return SkillRequestEnvelope.model_validate(payload)
    except ValidationError as exc:
        raise InvalidEnvelopeError(
            f"Malformed skill envelope: {exc.error_count()} error(s)"
        ) from exc


def _intent_name(envelope: SkillRequestEnvelope) -> str:
    request = envelope.request
    if request.type == INTENT_REQUEST:
        if request.intent is None:
            raise InvalidEnvelopeError("IntentRequest is missing its intent")
        return request.intent.name
    if request.type == LAUNCH_REQUEST:
        return config.LAUNCH_INTENT_NAME
    if request.type == SESSION_ENDED_REQUEST:
        return config.SESSION_ENDED_INTENT_NAME
    raise InvalidEnvelopeError(f"Unsupported request type {request.type!r}")


def to_skill_request(envelope: SkillRequestEnvelope) -> SkillRequest:
    """Normalize ``envelope`` into a :class:`SkillRequest`."""
    intent_name = _intent_name(envelope)
    if envelope.session is not None:
        session = Session(
            session_id=envelope.session.session_id,
            new=envelope.session.new,
            attributes=dict(envelope.session.attributes or {}),
            user_id=envelope.session.user.user_id if envelope.session.user else None,
        )
    else:
        session = Session(session_id=f"generated.{uuid.uuid4().hex}", new=True)

    slots: dict[str, Slot] = {}
    if envelope.request.intent is not None:
        for key, slot in envelope.request.intent.slots.items():
            slots[key] = Slot(name=slot.name or key, value=slot.value)

    return SkillRequest(
        intent_name=intent_name,
        session=session,
        slots=slots,
        context=envelope.context,
        request_id=envelope.request.request_id,
    )


def to_envelope(response: SkillResponse) -> SkillResponseEnvelope:
    """Render a dispatcher response in the transport's response shape."""
    reprompt = (
        Reprompt(output_speech=OutputSpeech(text=response.reprompt))
        if response.reprompt
        else None
    )
    return SkillResponseEnvelope(
        session_attributes=dict(response.session_attributes),
        response=ResponseBody(
            output_speech=OutputSpeech(text=response.utterance),
            reprompt=reprompt,
            should_end_session=response.should_end_session,
        ),
    )


__all__ = ["parse_envelope", "to_skill_request", "to_envelope"]
