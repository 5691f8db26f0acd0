"""Intent dispatcher: resolve, reconstitute, invoke, persist, respond.

Each call runs to completion synchronously on its own copy of the incoming session attributes.
When the transport delivers several requests for the same session at once, whichever outgoing
attributes it persists last win; ordering between them is the transport's concern.
"""

from __future__ import annotations

from typing import Optional

from skill_engine.core.config import config
from skill_engine.core.context import request_context
from skill_engine.core.exceptions import (
    EmptyUtteranceError,
    HandlerFault,
    StateCorruptError,
    UnknownIntentError,
)
from skill_engine.core.logging import get_logger, log_user_id_context, session_id_context
from skill_engine.core.models import (
    CommandDefinition,
    IntentResult,
    Session,
    SessionAttributes,
    SkillRequest,
    SkillResponse,
)
from skill_engine.core.ports import AnomalyReporter, IntentHandler
from skill_engine.core.queues import IntentQueues
from skill_engine.services.intent_registry import IntentRegistry
from skill_engine.services.observability import LoggingAnomalyReporter
from skill_engine.services.response_builder import ResponseBuilder
from skill_engine.services.session_codec import SessionStateCodec, strip_reserved
from skill_engine.utils.identifiers import get_log_safe_user_id

logger = get_logger(__name__)


class IntentDispatcher:
    """Route a :class:`SkillRequest` to its handler and carry queue state across turns."""

    def __init__(
        self,
        registry: IntentRegistry,
        codec: SessionStateCodec | None = None,
        reporter: AnomalyReporter | None = None,
        builder: ResponseBuilder | None = None,
        *,
        fallback_utterance: Optional[str] = None,
        fallback_ends_session: Optional[bool] = None,
        apology_utterance: Optional[str] = None,
    ) -> None:
        self.registry = registry
        self.codec = codec or SessionStateCodec()
        self.reporter: AnomalyReporter = reporter or LoggingAnomalyReporter()
        self.builder = builder or ResponseBuilder()
        self.fallback_utterance = fallback_utterance or config.FALLBACK_UTTERANCE
        self.fallback_ends_session = (
            config.FALLBACK_ENDS_SESSION if fallback_ends_session is None else fallback_ends_session
        )
        self.apology_utterance = apology_utterance or config.APOLOGY_UTTERANCE

    def dispatch(self, request: SkillRequest) -> SkillResponse:
        """Run one turn; never raises for user-facing failures."""

        session = request.session
        log_user = get_log_safe_user_id(session.user_id) if session.user_id else None
        with (
            session_id_context(session.session_id),
            log_user_id_context(log_user),
            request_context(request),
        ):
            return self._dispatch(request)

    def dispatch_command(self, command: CommandDefinition, session: Session) -> SkillResponse:
        """Dispatch a dequeued follow-up command as a new turn of ``session``."""

        logger.info("[dispatcher] Running queued command intent=%s", command.intent_name)
        return self.dispatch(
            SkillRequest(
                intent_name=command.intent_name,
                session=session,
                slots=dict(command.payload),
            )
        )

    def _dispatch(self, request: SkillRequest) -> SkillResponse:
        incoming: SessionAttributes = dict(request.session.attributes or {})
        intent_name = request.intent_name
        logger.info(
            "[dispatcher] Dispatching intent=%s new_session=%s slots=%d",
            intent_name,
            request.session.new,
            len(request.slots),
        )

        try:
            handler = self.registry.resolve(intent_name)
        except UnknownIntentError:
            logger.warning("[dispatcher] Unknown intent=%s, using fallback", intent_name)
            return self.builder.build(
                self.fallback_utterance, self.fallback_ends_session, incoming
            )

        queues, baseline = self._reconstitute(incoming)

        try:
            result = self._invoke(intent_name, handler, request, queues)
            outgoing = self.codec.merge(incoming, queues)
            response = self.builder.build(
                result.utterance, result.should_end_session, outgoing, result.reprompt
            )
        except HandlerFault as fault:
            self.reporter.report_handler_fault(fault)
            return self._apology(baseline)
        except (EmptyUtteranceError, StateCorruptError) as exc:
            self.reporter.report_handler_fault(HandlerFault(intent_name, exc))
            return self._apology(baseline)

        logger.info(
            "[dispatcher] Completed intent=%s end_session=%s parameters=%d commands=%d inputs=%d",
            intent_name,
            response.should_end_session,
            len(queues.parameters),
            len(queues.commands),
            len(queues.inputs),
        )
        return response

    def _reconstitute(
        self, incoming: SessionAttributes
    ) -> tuple[IntentQueues, SessionAttributes]:
        """Return the decoded queues and the attributes an apology should carry.

        Corrupt state is reset, so the reserved keys are dropped from that baseline.
        """
        try:
            return self.codec.decode(incoming), incoming
        except StateCorruptError as exc:
            self.reporter.report_state_anomaly(exc)
            return IntentQueues(), strip_reserved(incoming)

    def _invoke(
        self,
        intent_name: str,
        handler: IntentHandler,
        request: SkillRequest,
        queues: IntentQueues,
    ) -> IntentResult:
        try:
            result = handler.handle(dict(request.slots), queues)
        except Exception as exc:  # pylint: disable=broad-except
            raise HandlerFault(intent_name, exc) from exc
        if not isinstance(result, IntentResult):
            raise HandlerFault(
                intent_name, TypeError(f"expected IntentResult, got {type(result).__name__}")
            )
        return result

    def _apology(self, attributes: SessionAttributes) -> SkillResponse:
        return self.builder.build(self.apology_utterance, True, attributes)


__all__ = ["IntentDispatcher"]
