"""Wire models for the Alexa-style request and response envelopes."""

from __future__ import annotations

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

INTENT_REQUEST = "IntentRequest"
LAUNCH_REQUEST = "LaunchRequest"
SESSION_ENDED_REQUEST = "SessionEndedRequest"


class _Envelope(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class EnvelopeSlot(_Envelope):
    """Slot as sent by the host; extra resolution metadata is ignored."""

    name: str
    value: Optional[str] = None


class EnvelopeIntent(_Envelope):
    name: str
    slots: Dict[str, EnvelopeSlot] = Field(default_factory=dict)


class EnvelopeUser(_Envelope):
    user_id: str = Field(..., alias="userId")


class EnvelopeSession(_Envelope):
    new: bool = False
    session_id: str = Field(..., alias="sessionId")
    attributes: Optional[Dict[str, Any]] = None
    user: Optional[EnvelopeUser] = None


class EnvelopeRequest(_Envelope):
    type: str
    request_id: Optional[str] = Field(default=None, alias="requestId")
    intent: Optional[EnvelopeIntent] = None
    reason: Optional[str] = None


class SkillRequestEnvelope(_Envelope):
    """Request model for POST /skill."""

    version: str = "1.0"
    session: Optional[EnvelopeSession] = None
    request: EnvelopeRequest
    context: Optional[Dict[str, Any]] = None


class OutputSpeech(_Envelope):
    type: Literal["PlainText"] = "PlainText"
    text: str


class Reprompt(_Envelope):
    output_speech: OutputSpeech = Field(..., alias="outputSpeech")


class ResponseBody(_Envelope):
    output_speech: OutputSpeech = Field(..., alias="outputSpeech")
    reprompt: Optional[Reprompt] = None
    should_end_session: bool = Field(..., alias="shouldEndSession")


class SkillResponseEnvelope(_Envelope):
    """Response model for POST /skill."""

    version: str = "1.0"
    session_attributes: Dict[str, Any] = Field(default_factory=dict, alias="sessionAttributes")
    response: ResponseBody


__all__ = [
    "INTENT_REQUEST",
    "LAUNCH_REQUEST",
    "SESSION_ENDED_REQUEST",
    "EnvelopeSlot",
    "EnvelopeIntent",
    "EnvelopeUser",
    "EnvelopeSession",
    "EnvelopeRequest",
    "SkillRequestEnvelope",
    "OutputSpeech",
    "Reprompt",
    "ResponseBody",
    "SkillResponseEnvelope",
]
