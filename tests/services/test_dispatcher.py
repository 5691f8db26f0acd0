"""Tests for the intent dispatcher."""

from __future__ import annotations

from typing import Any

import pytest

from skill_engine.core.config import config
from skill_engine.core.context import get_current_request
from skill_engine.core.exceptions import EmptyUtteranceError, HandlerFault, StateCorruptError
from skill_engine.core.logging import get_session_id
from skill_engine.core.models import (
    CommandDefinition,
    InputItem,
    IntentResult,
    Session,
    SkillRequest,
    Slot,
    Slots,
)
from skill_engine.core.queues import IntentQueues
from skill_engine.services.dispatcher import IntentDispatcher
from skill_engine.services.intent_registry import IntentRegistry
from skill_engine.services.session_codec import (
    COMMANDS_KEY,
    INPUTS_KEY,
    PARAMETERS_KEY,
    RESERVED_KEYS,
    SessionStateCodec,
)


class RecordingReporter:
    """Collects anomaly reports instead of logging them."""

    def __init__(self) -> None:
        self.anomalies: list[StateCorruptError] = []
        self.faults: list[HandlerFault] = []

    def report_state_anomaly(self, error: StateCorruptError) -> None:
        self.anomalies.append(error)

    def report_handler_fault(self, fault: HandlerFault) -> None:
        self.faults.append(fault)


@pytest.fixture(name="registry")
def _registry() -> IntentRegistry:
    return IntentRegistry()


@pytest.fixture(name="reporter")
def _reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture(name="dispatcher")
def _dispatcher(registry: IntentRegistry, reporter: RecordingReporter) -> IntentDispatcher:
    return IntentDispatcher(registry, SessionStateCodec(), reporter)


def _request(
    intent_name: str,
    attributes: dict[str, Any] | None = None,
    slots: dict[str, Slot] | None = None,
    *,
    new: bool = False,
) -> SkillRequest:
    return SkillRequest(
        intent_name=intent_name,
        session=Session(session_id="session-1", new=new, attributes=attributes or {}),
        slots=slots or {},
    )


def test_help_scenario(registry: IntentRegistry, dispatcher: IntentDispatcher):
    """A handler that only speaks leaves no reserved keys behind."""
    registry.register("Help", lambda slots, queues: IntentResult.ask("Help"))

    response = dispatcher.dispatch(_request("Help", new=True))

    assert response.utterance == "Help"
    assert response.should_end_session is False
    assert not set(RESERVED_KEYS) & set(response.session_attributes)


def test_parameters_round_trip_between_turns(
    registry: IntentRegistry, dispatcher: IntentDispatcher
):
    """A parameter set in one turn is readable in the next."""
    seen: dict[str, Any] = {}

    def choose(slots: Slots, queues: IntentQueues) -> IntentResult:
        queues.parameters.set("Flavor", "Chocolate")
        return IntentResult.ask("Chocolate it is.")

    def recall(slots: Slots, queues: IntentQueues) -> IntentResult:
        seen["flavor"] = queues.parameters.get("Flavor")
        return IntentResult.tell(f"You chose {seen['flavor']}.")

    registry.register("Choose", choose)
    registry.register("Recall", recall)

    first = dispatcher.dispatch(_request("Choose", new=True))
    assert first.session_attributes[PARAMETERS_KEY] == [{"Name": "Flavor", "Value": "Chocolate"}]

    second = dispatcher.dispatch(_request("Recall", first.session_attributes))

    assert seen["flavor"] == "Chocolate"
    assert second.utterance == "You chose Chocolate."


def test_replayed_operations_match_final_parameters(
    registry: IntentRegistry, dispatcher: IntentDispatcher
):
    """Final parameters equal the in-order replay of every handler's writes."""

    def setter(slots: Slots, queues: IntentQueues) -> IntentResult:
        for name, slot in slots.items():
            queues.parameters.set(name, slot.value or "")
        return IntentResult.ask("Noted.")

    registry.register("Set", setter)
    turns = [
        {"Flavor": "Vanilla"},
        {"Size": "Small"},
        {"Flavor": "Chocolate", "Topping": "Sprinkles"},
        {"Size": "Large"},
    ]

    attributes: dict[str, Any] = {}
    expected: dict[str, str] = {}
    for turn in turns:
        slots = {name: Slot(name=name, value=value) for name, value in turn.items()}
        attributes = dispatcher.dispatch(_request("Set", attributes, slots)).session_attributes
        expected.update(turn)

    final = SessionStateCodec().decode(attributes)
    assert final.parameters.as_dict() == expected
    assert [p.name for p in final.parameters] == ["Flavor", "Size", "Topping"]


def test_unknown_intent_returns_fallback(dispatcher: IntentDispatcher, reporter):
    """Unregistered intents get a fallback utterance and keep attributes untouched."""
    attributes = {"other": "value", PARAMETERS_KEY: [{"Name": "A", "Value": "1"}]}

    response = dispatcher.dispatch(_request("Missing", attributes))

    assert response.utterance == config.FALLBACK_UTTERANCE
    assert response.should_end_session is config.FALLBACK_ENDS_SESSION
    assert response.session_attributes == attributes
    assert reporter.faults == []


def test_corrupt_commands_reset_state_and_report_once(
    registry: IntentRegistry, dispatcher: IntentDispatcher, reporter: RecordingReporter
):
    """Malformed reserved state is discarded and reported exactly once."""
    seen: dict[str, int] = {}

    def inspect(slots: Slots, queues: IntentQueues) -> IntentResult:
        seen["commands"] = len(queues.commands)
        return IntentResult.ask("Carrying on.")

    registry.register("Inspect", inspect)

    response = dispatcher.dispatch(_request("Inspect", {COMMANDS_KEY: {"bad": "shape"}}))

    assert response.utterance == "Carrying on."
    assert seen["commands"] == 0
    assert len(reporter.anomalies) == 1
    assert reporter.anomalies[0].key == COMMANDS_KEY
    assert COMMANDS_KEY not in response.session_attributes
    assert SessionStateCodec().decode(response.session_attributes).commands.items() == []


def test_non_reserved_attributes_are_preserved(
    registry: IntentRegistry, dispatcher: IntentDispatcher
):
    """Keys written by other subsystems pass through untouched."""
    registry.register("Help", lambda slots, queues: IntentResult.ask("Help"))

    response = dispatcher.dispatch(_request("Help", {"visits": 4, "theme": "dark"}))

    assert response.session_attributes == {"visits": 4, "theme": "dark"}


def test_drained_queue_disappears_from_attributes(
    registry: IntentRegistry, dispatcher: IntentDispatcher
):
    """Consuming every pending input removes the reserved key."""
    consumed: list[InputItem] = []

    def answer(slots: Slots, queues: IntentQueues) -> IntentResult:
        consumed.extend(queues.inputs.dequeue_all())
        return IntentResult.tell("Thanks.")

    registry.register("Answer", answer)
    incoming = {INPUTS_KEY: [{"Value": "Chocolate", "Tags": ["flavor"]}]}

    response = dispatcher.dispatch(_request("Answer", incoming))

    assert consumed == [InputItem(value="Chocolate", tags=["flavor"])]
    assert INPUTS_KEY not in response.session_attributes
    assert INPUTS_KEY in incoming


def test_handler_exception_maps_to_apology(
    registry: IntentRegistry, dispatcher: IntentDispatcher, reporter: RecordingReporter
):
    """Handler failures never escape; partial queue writes are discarded."""

    def explode(slots: Slots, queues: IntentQueues) -> IntentResult:
        queues.parameters.set("Half", "done")
        raise RuntimeError("boom")

    registry.register("Explode", explode)
    attributes = {"keep": 1}

    response = dispatcher.dispatch(_request("Explode", attributes))

    assert response.utterance == config.APOLOGY_UTTERANCE
    assert response.should_end_session is True
    assert response.session_attributes == {"keep": 1}
    assert len(reporter.faults) == 1
    assert reporter.faults[0].intent_name == "Explode"
    assert isinstance(reporter.faults[0].cause, RuntimeError)


def test_handler_fault_after_corrupt_state_drops_the_corrupt_key(
    registry: IntentRegistry, dispatcher: IntentDispatcher, reporter: RecordingReporter
):
    """A reset session is not handed back its corrupt reserved key on apology."""

    def explode(slots: Slots, queues: IntentQueues) -> IntentResult:
        raise RuntimeError("boom")

    registry.register("Explode", explode)
    attributes = {COMMANDS_KEY: {"bad": 1}, "keep": 1}

    response = dispatcher.dispatch(_request("Explode", attributes))

    assert response.utterance == config.APOLOGY_UTTERANCE
    assert response.session_attributes == {"keep": 1}
    assert len(reporter.anomalies) == 1
    assert len(reporter.faults) == 1
    assert SessionStateCodec().decode(response.session_attributes).is_empty()


def test_empty_utterance_maps_to_apology(
    registry: IntentRegistry, dispatcher: IntentDispatcher, reporter: RecordingReporter
):
    """A silent handler is a programming error surfaced as an apology."""
    registry.register("Silent", lambda slots, queues: IntentResult.ask(""))

    response = dispatcher.dispatch(_request("Silent"))

    assert response.utterance == config.APOLOGY_UTTERANCE
    assert response.should_end_session is True
    assert isinstance(reporter.faults[0].cause, EmptyUtteranceError)


def test_wrong_return_type_maps_to_apology(
    registry: IntentRegistry, dispatcher: IntentDispatcher, reporter: RecordingReporter
):
    """Handlers must return an IntentResult."""
    registry.register("Wrong", lambda slots, queues: ("Hello", False))

    response = dispatcher.dispatch(_request("Wrong"))

    assert response.utterance == config.APOLOGY_UTTERANCE
    assert isinstance(reporter.faults[0].cause, TypeError)


def test_unpersistable_queue_item_maps_to_apology(
    registry: IntentRegistry, dispatcher: IntentDispatcher, reporter: RecordingReporter
):
    """Putting a foreign item into a queue fails the turn safely."""

    def misuse(slots: Slots, queues: IntentQueues) -> IntentResult:
        queues.commands.enqueue(InputItem(value="oops"))  # type: ignore[arg-type]
        return IntentResult.ask("Done.")

    registry.register("Misuse", misuse)

    response = dispatcher.dispatch(_request("Misuse"))

    assert response.utterance == config.APOLOGY_UTTERANCE
    assert isinstance(reporter.faults[0].cause, StateCorruptError)


def test_queued_command_runs_on_a_later_turn(
    registry: IntentRegistry, dispatcher: IntentDispatcher
):
    """Commands enqueued in one turn can be dequeued and dispatched later."""

    def order(slots: Slots, queues: IntentQueues) -> IntentResult:
        queues.commands.enqueue(
            CommandDefinition(
                intent_name="Confirm",
                payload={"Flavor": Slot(name="Flavor", value="Mint")},
            )
        )
        return IntentResult.ask("Shall I confirm?")

    def confirm(slots: Slots, queues: IntentQueues) -> IntentResult:
        return IntentResult.tell(f"Confirmed {slots['Flavor'].value}.")

    registry.register("Order", order)
    registry.register("Confirm", confirm)

    first = dispatcher.dispatch(_request("Order", new=True))
    queues = SessionStateCodec().decode(first.session_attributes)
    command = queues.commands.dequeue()
    assert command is not None

    attributes = SessionStateCodec().merge(first.session_attributes, queues)
    second = dispatcher.dispatch_command(
        command, Session(session_id="session-1", new=False, attributes=attributes)
    )

    assert second.utterance == "Confirmed Mint."
    assert COMMANDS_KEY not in second.session_attributes


def test_handler_sees_request_and_session_context(
    registry: IntentRegistry, dispatcher: IntentDispatcher
):
    """The current request and session id are bound while the handler runs."""
    seen: dict[str, Any] = {}

    def peek(slots: Slots, queues: IntentQueues) -> IntentResult:
        request = get_current_request()
        seen["intent"] = request.intent_name if request else None
        seen["session"] = get_session_id()
        return IntentResult.tell("ok")

    registry.register("Peek", peek)

    dispatcher.dispatch(_request("Peek"))

    assert seen == {"intent": "Peek", "session": "session-1"}
    assert get_current_request() is None
    assert get_session_id() is None


def test_incoming_attributes_are_not_mutated(
    registry: IntentRegistry, dispatcher: IntentDispatcher
):
    """Each call works on its own copy of the incoming bag."""

    def setter(slots: Slots, queues: IntentQueues) -> IntentResult:
        queues.parameters.set("A", "1")
        return IntentResult.ask("ok")

    registry.register("Set", setter)
    attributes: dict[str, Any] = {"other": True}

    response = dispatcher.dispatch(_request("Set", attributes))

    assert attributes == {"other": True}
    assert response.session_attributes[PARAMETERS_KEY] == [{"Name": "A", "Value": "1"}]
