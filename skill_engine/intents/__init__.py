"""Intent handler base classes and the built-in intents."""

from .base import SkillIntent, slot_value
from .builtin import (
    CancelIntent,
    HelpIntent,
    LaunchIntent,
    SessionEndedIntent,
    StopIntent,
)
from .content import ContentIntent

__all__ = [
    "SkillIntent",
    "slot_value",
    "ContentIntent",
    "LaunchIntent",
    "HelpIntent",
    "StopIntent",
    "CancelIntent",
    "SessionEndedIntent",
]
