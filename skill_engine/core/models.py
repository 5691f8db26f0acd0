"""Core data transfer objects shared across layers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

SessionAttributes = Dict[str, Any]


class WireModel(BaseModel):
    """Base for items persisted in session attributes.

    Field aliases match the PascalCase names written by earlier skill hosts; the snake_case
    attribute names are accepted as well. Unknown fields are rejected so that an item of the
    wrong kind never decodes silently.
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    def to_wire(self) -> dict[str, Any]:
        """Return the JSON-compatible representation stored in session attributes."""
        return self.model_dump(mode="json", by_alias=True)


class Slot(WireModel):
    """A named value attached to an intent instance."""

    name: str = Field(alias="Name")
    value: Optional[str] = Field(default=None, alias="Value")


class ApplicationParameter(WireModel):
    """Durable key/value state remembered across turns."""

    name: str = Field(alias="Name")
    value: str = Field(alias="Value")


class CommandDefinition(WireModel):
    """A deferred follow-up: run ``intent_name`` next with ``payload`` slots."""

    intent_name: str = Field(alias="IntentName")
    payload: Dict[str, Slot] = Field(default_factory=dict, alias="Payload")


class InputItem(WireModel):
    """A pending expected user input annotated with classification tags."""

    value: str = Field(alias="Value")
    tags: List[str] = Field(default_factory=list, alias="Tags")


Slots = Mapping[str, Slot]


@dataclass(slots=True)
class Session:
    """Conversational continuity unit supplied by the transport on every turn."""

    session_id: str
    new: bool = True
    attributes: SessionAttributes = field(default_factory=dict)
    user_id: Optional[str] = None


@dataclass(slots=True)
class SkillRequest:
    """Normalized inbound request: intent name, slots, and session state."""

    intent_name: str
    session: Session
    slots: Dict[str, Slot] = field(default_factory=dict)
    context: Optional[Mapping[str, Any]] = None
    request_id: Optional[str] = None


@dataclass(slots=True)
class SkillResponse:
    """Outbound response handed back to the transport."""

    utterance: str
    should_end_session: bool
    session_attributes: SessionAttributes = field(default_factory=dict)
    reprompt: Optional[str] = None


@dataclass(slots=True)
class IntentResult:
    """What a handler produces: speech plus whether the session should close."""

    utterance: str
    should_end_session: bool
    reprompt: Optional[str] = None

    @classmethod
    def tell(cls, text: str) -> "IntentResult":
        """Speak ``text`` and end the session."""
        return cls(utterance=text, should_end_session=True)

    @classmethod
    def ask(cls, text: str, reprompt: Optional[str] = None) -> "IntentResult":
        """Speak ``text`` and keep the session open for a reply."""
        return cls(utterance=text, should_end_session=False, reprompt=reprompt)


def build_slots(*slots: Slot) -> Dict[str, Slot]:
    """Key ``slots`` by name; later duplicates win."""
    return {slot.name: slot for slot in slots}


__all__ = [
    "SessionAttributes",
    "WireModel",
    "Slot",
    "Slots",
    "ApplicationParameter",
    "CommandDefinition",
    "InputItem",
    "Session",
    "SkillRequest",
    "SkillResponse",
    "IntentResult",
    "build_slots",
]
