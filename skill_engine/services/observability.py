"""Default observability collaborator backed by structured logging."""

from __future__ import annotations

from skill_engine.core.exceptions import HandlerFault, StateCorruptError
from skill_engine.core.logging import get_logger

logger = get_logger(__name__)


class LoggingAnomalyReporter:
    """Report recovered dispatch anomalies to the application log."""

    def report_state_anomaly(self, error: StateCorruptError) -> None:
        logger.warning(
            "[dispatcher] Discarding corrupt session state key=%s reason=%s",
            error.key,
            error.reason,
            extra={"event": "state_anomaly", "attribute_key": error.key},
        )

    def report_handler_fault(self, fault: HandlerFault) -> None:
        cause = fault.cause
        logger.error(
            "[dispatcher] Handler fault for intent=%s",
            fault.intent_name,
            exc_info=(type(cause), cause, cause.__traceback__) if cause is not None else None,
            extra={"event": "handler_fault", "intent": fault.intent_name},
        )


__all__ = ["LoggingAnomalyReporter"]
