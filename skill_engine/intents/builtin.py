"""Built-in intents every skill registers: launch, help, stop, cancel, session end."""

from __future__ import annotations

from skill_engine.core.models import IntentResult, Slots
from skill_engine.core.queues import IntentQueues

from .base import SkillIntent

WELCOME_TEXT = "Welcome. What would you like to do?"
HELP_TEXT = "You can ask me for something, or say stop to finish."
GOODBYE_TEXT = "Goodbye."


class LaunchIntent(SkillIntent):
    """Greet the user when the skill is opened without an intent."""

    def __init__(self, text: str = WELCOME_TEXT) -> None:
        self.text = text

    def get_response(self, slots: Slots, queues: IntentQueues) -> IntentResult:
        return self.ask(self.text, reprompt=HELP_TEXT)


class HelpIntent(SkillIntent):
    """Explain what the skill can do and keep listening."""

    def __init__(self, text: str = HELP_TEXT) -> None:
        self.text = text

    def get_response(self, slots: Slots, queues: IntentQueues) -> IntentResult:
        return self.ask(self.text)


class StopIntent(SkillIntent):
    """End the conversation and drop anything still pending."""

    def get_response(self, slots: Slots, queues: IntentQueues) -> IntentResult:
        queues.commands.clear()
        queues.inputs.clear()
        return self.tell(GOODBYE_TEXT)


class CancelIntent(StopIntent):
    """Same as stop."""


class SessionEndedIntent(SkillIntent):
    """Acknowledge the transport closing the session."""

    def get_response(self, slots: Slots, queues: IntentQueues) -> IntentResult:
        return self.tell(GOODBYE_TEXT)


__all__ = [
    "LaunchIntent",
    "HelpIntent",
    "StopIntent",
    "CancelIntent",
    "SessionEndedIntent",
    "WELCOME_TEXT",
    "HELP_TEXT",
    "GOODBYE_TEXT",
]
