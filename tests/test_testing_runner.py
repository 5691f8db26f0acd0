"""Tests for the multi-turn conversation runner."""

from __future__ import annotations

import pytest

from skill_engine.core.context import get_current_request
from skill_engine.core.models import (
    CommandDefinition,
    InputItem,
    IntentResult,
    Session,
    Slot,
    Slots,
)
from skill_engine.core.queues import IntentQueues
from skill_engine.intents import HelpIntent, slot_value
from skill_engine.services.dispatcher import IntentDispatcher
from skill_engine.services.intent_registry import IntentRegistry
from skill_engine.testing import ConversationRunner


def order(slots: Slots, queues: IntentQueues) -> IntentResult:
    flavor = slot_value(slots, "Flavor")
    if flavor is None:
        queues.inputs.enqueue(InputItem(value="Flavor", tags=["question", "order"]))
        return IntentResult.ask("Which flavor would you like?")
    queues.parameters.set("Flavor", flavor)
    queues.commands.enqueue(CommandDefinition(intent_name="Confirm"))
    return IntentResult.ask(f"{flavor}. Shall I confirm?")


def answer(slots: Slots, queues: IntentQueues) -> IntentResult:
    pending = queues.inputs.dequeue()
    value = slot_value(slots, "Value")
    if pending is None or value is None:
        return IntentResult.ask("Sorry, what was that?")
    queues.parameters.set(pending.value, value)
    return IntentResult.ask(f"Got it, {value}.")


def count(slots: Slots, queues: IntentQueues) -> IntentResult:
    total = int(queues.parameters.get("Count", "0") or "0") + 1
    queues.parameters.set("Count", str(total))
    return IntentResult.ask(f"Count is {total}.")


@pytest.fixture(name="conversation")
def _conversation() -> ConversationRunner:
    registry = IntentRegistry()
    registry.register("Order", order)
    registry.register("Answer", answer)
    registry.register("Count", count)
    registry.register("Help", HelpIntent("Help"))
    return ConversationRunner(IntentDispatcher(registry), user_id="user-1")


def test_multi_turn_dialog_resumes_pending_input(conversation: ConversationRunner):
    """A question asked in one turn is answered in the next."""
    (
        conversation.run_initial("Order")
        .verify_output_speech_value("Which flavor would you like?")
        .verify_should_end_session(False)
        .verify_input_queued("Flavor", tags=["order", "question"])
        .run_again("Answer", {"Value": Slot(name="Value", value="Chocolate")})
        .verify_output_speech_contains("chocolate", ignore_case=True)
        .verify_parameter("Flavor", "Chocolate")
    )

    assert not conversation.queues().inputs


def test_commands_are_visible_to_the_runner(conversation: ConversationRunner):
    """Queued follow-up commands can be asserted on."""
    conversation.run_initial("Order", {"Flavor": Slot(name="Flavor", value="Mint")})

    conversation.verify_command_queued("Confirm").verify_parameter("Flavor", "Mint")


def test_run_again_iterates_in_one_session(conversation: ConversationRunner):
    """Repeated turns accumulate state through the attribute bag."""
    conversation.run_initial("Count").run_again("Count", iterations=3)

    conversation.verify_output_speech_value("Count is 4.").verify_parameter("Count", "4")
    assert conversation.session.new is False


def test_run_all_intents_and_loaded_checks(conversation: ConversationRunner):
    """Every registered intent produces speech."""
    conversation.run_initial("Help").verify_intent_is_loaded("Order")
    conversation.run_all_intents().verify_output_is_not_empty()


def test_text_matches_another_intent(conversation: ConversationRunner):
    """Speech can be compared with a fresh dispatch of another intent."""
    conversation.run_initial("Help").verify_text_matches_intent("Help")


def test_failed_verification_raises_assertion(conversation: ConversationRunner):
    """Mismatches surface as assertion errors with context."""
    conversation.run_initial("Help")

    with pytest.raises(AssertionError, match="Expected"):
        conversation.verify_output_speech_value("Something else")
    with pytest.raises(AssertionError):
        conversation.verify_parameter("Flavor", "Mint")


def test_verifying_before_running_is_an_error(conversation: ConversationRunner):
    """The runner needs a response before it can verify anything."""
    with pytest.raises(RuntimeError):
        conversation.verify_output_is_not_empty()


def test_dump_output_speech(conversation: ConversationRunner):
    """The latest speech can be sent to any sink."""
    lines: list[str] = []

    conversation.run_initial("Help").dump_output_speech(lines.append)

    assert lines == ["Help"]


def test_follow_up_turns_keep_the_given_session_user(conversation: ConversationRunner):
    """A session passed to run_initial keeps its user on later turns."""
    seen: list[str | None] = []

    def whoami(slots: Slots, queues: IntentQueues) -> IntentResult:
        request = get_current_request()
        seen.append(request.session.user_id if request else None)
        return IntentResult.ask("Noted.")

    conversation.dispatcher.registry.register("WhoAmI", whoami)
    session = Session(session_id="session-9", new=True, user_id="other-user")

    conversation.run_initial("WhoAmI", session=session).run_again("WhoAmI")

    assert seen == ["other-user", "other-user"]
    assert conversation.session.user_id == "other-user"
