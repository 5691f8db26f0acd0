"""Multi-turn conversation runner for exercising a dispatcher in tests.

Each ``run_*`` call feeds the previous turn's outgoing session attributes back in as the next
turn's incoming attributes, the way a transport does between real requests.
"""

from __future__ import annotations

import uuid
from typing import Callable, Iterable, Mapping, Optional

from skill_engine.core.models import Session, SkillRequest, SkillResponse, Slot
from skill_engine.core.queues import IntentQueues
from skill_engine.services.dispatcher import IntentDispatcher
from skill_engine.services.session_codec import SessionStateCodec


class ConversationRunner:
    """Drive a dispatcher through a conversation and assert on the latest response."""

    def __init__(self, dispatcher: IntentDispatcher, *, user_id: Optional[str] = None) -> None:
        self.dispatcher = dispatcher
        self.user_id = user_id
        self.codec = SessionStateCodec()
        self.session_id: Optional[str] = None
        self.session_user_id: Optional[str] = user_id
        self.response: Optional[SkillResponse] = None

    # -- running -------------------------------------------------------------------

    def run_initial(
        self,
        intent_name: str,
        slots: Optional[Mapping[str, Slot]] = None,
        *,
        session: Optional[Session] = None,
    ) -> "ConversationRunner":
        """Start a conversation (a new session unless ``session`` is given)."""
        if session is None:
            session = Session(
                session_id=f"test.{uuid.uuid4().hex}", new=True, user_id=self.user_id
            )
        return self._run(intent_name, slots, session)

    def run_again(
        self,
        intent_name: str,
        slots: Optional[Mapping[str, Slot]] = None,
        iterations: int = 1,
    ) -> "ConversationRunner":
        """Run another turn in the same session ``iterations`` times."""
        for _ in range(max(iterations, 1)):
            self._run(intent_name, slots, self.session)
        return self

    def run_all_intents(self, slots: Optional[Mapping[str, Slot]] = None) -> "ConversationRunner":
        """Start a fresh conversation with every registered intent in turn."""
        for name in sorted(self.dispatcher.registry.names()):
            self.run_initial(name, slots)
        return self

    def _run(
        self, intent_name: str, slots: Optional[Mapping[str, Slot]], session: Session
    ) -> "ConversationRunner":
        self.session_id = session.session_id
        self.session_user_id = session.user_id
        request = SkillRequest(intent_name=intent_name, session=session, slots=dict(slots or {}))
        self.response = self.dispatcher.dispatch(request)
        return self

    # -- state ---------------------------------------------------------------------

    @property
    def session(self) -> Session:
        """The session a follow-up turn would carry."""
        response = self._require_response()
        assert self.session_id is not None
        return Session(
            session_id=self.session_id,
            new=False,
            attributes=dict(response.session_attributes),
            user_id=self.session_user_id,
        )

    def queues(self) -> IntentQueues:
        """Decode the reserved queues from the latest outgoing attributes."""
        return self.codec.decode(self._require_response().session_attributes)

    @property
    def utterance(self) -> str:
        return self._require_response().utterance

    # -- verification --------------------------------------------------------------

    def verify_intent_is_loaded(self, intent_name: str) -> "ConversationRunner":
        assert intent_name in self.dispatcher.registry, f"Intent {intent_name!r} is not loaded"
        return self

    def verify_output_speech_value(self, expected: str) -> "ConversationRunner":
        assert self.utterance == expected, f"Expected {expected!r}, got {self.utterance!r}"
        return self

    def verify_output_speech_contains(
        self, *values: str, ignore_case: bool = False
    ) -> "ConversationRunner":
        text = self.utterance.casefold() if ignore_case else self.utterance
        for value in values:
            wanted = value.casefold() if ignore_case else value
            assert wanted in text, f"Output text doesn't contain {value!r}: {self.utterance!r}"
        return self

    def verify_output_is_not_empty(self) -> "ConversationRunner":
        assert self.utterance.strip(), "Output speech should not be empty"
        return self

    def verify_should_end_session(self, expected: bool) -> "ConversationRunner":
        actual = self._require_response().should_end_session
        assert actual is expected, f"Expected should_end_session={expected} but was {actual}"
        return self

    def verify_text_matches_intent(
        self, intent_name: str, slots: Optional[Mapping[str, Slot]] = None
    ) -> "ConversationRunner":
        """Compare the latest speech with what ``intent_name`` says in a fresh session."""
        counterpart = self.dispatcher.dispatch(
            SkillRequest(
                intent_name=intent_name,
                session=Session(session_id=f"test.{uuid.uuid4().hex}", new=True),
                slots=dict(slots or {}),
            )
        )
        assert self.utterance == counterpart.utterance, (
            f"{self.utterance!r} does not match {intent_name!r}: {counterpart.utterance!r}"
        )
        return self

    def verify_parameter(self, name: str, value: str) -> "ConversationRunner":
        actual = self.queues().parameters.get(name)
        assert actual is not None, f"No application parameter named {name!r}"
        assert actual == value, f"Parameter {name!r} is {actual!r}, expected {value!r}"
        return self

    def verify_command_queued(self, intent_name: str) -> "ConversationRunner":
        assert self.queues().commands.for_intent(intent_name) is not None, (
            f"No queued command for intent {intent_name!r}"
        )
        return self

    def verify_input_queued(
        self, value: str, tags: Optional[Iterable[str]] = None
    ) -> "ConversationRunner":
        item = self.queues().inputs.find(lambda candidate: candidate.value == value)
        assert item is not None, f"No pending input with value {value!r}"
        if tags is not None:
            expected = list(tags)
            assert sorted(item.tags) == sorted(expected), (
                f"Tags for {value!r} are {item.tags!r}, expected {expected!r}"
            )
        return self

    def dump_output_speech(self, sink: Callable[[str], None]) -> "ConversationRunner":
        sink(self.utterance)
        return self

    def _require_response(self) -> SkillResponse:
        if self.response is None:
            raise RuntimeError("Run a turn with run_initial before verifying the output")
        return self.response


__all__ = ["ConversationRunner"]
