"""Skill endpoint: the transport adapter in front of the intent dispatcher."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, HTTPException, status
from fastapi.responses import JSONResponse

from skill_engine.apps.api.envelope import parse_envelope, to_envelope, to_skill_request
from skill_engine.core.exceptions import InvalidEnvelopeError
from skill_engine.core.logging import get_logger
from skill_engine.services import ServiceContainer

from ..dependencies import get_service_container

router = APIRouter(tags=["skill"])
logger = get_logger(__name__)


# Plain ``def`` so FastAPI runs the synchronous dispatcher in its threadpool.
@router.post("/skill")
def handle_skill_request(
    payload: Annotated[dict[str, Any], Body(...)],
    services: Annotated[ServiceContainer, Depends(get_service_container)],
) -> JSONResponse:
    """Dispatch one skill turn and return the response envelope."""
    try:
        request = to_skill_request(parse_envelope(payload))
    except InvalidEnvelopeError as exc:
        logger.warning("[skill] Rejected envelope: %s", exc)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    response = services.dispatcher.dispatch(request)
    envelope = to_envelope(response)
    return JSONResponse(envelope.model_dump(mode="json", by_alias=True, exclude_none=True))


__all__ = ["router"]
