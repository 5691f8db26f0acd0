"""Health and readiness routes."""

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from skill_engine.services import ServiceContainer

from ..dependencies import get_service_container

router = APIRouter()


@router.get("/")
def read_root() -> dict[str, str]:
    """Health/info endpoint with a short usage message."""
    return {"message": "Skill engine is running. POST skill envelopes to /skill."}


@router.get("/alive")
def alive_check(
    services: Annotated[ServiceContainer, Depends(get_service_container)],
) -> JSONResponse:
    """Health check reporting how many intents are wired."""
    return JSONResponse({"status": "ok", "intents": len(services.registry)})


__all__ = ["router"]
