"""Shared FastAPI dependencies for service access."""

from fastapi import HTTPException, Request, status

from skill_engine.services import ServiceContainer, runtime


def get_service_container(request: Request) -> ServiceContainer:
    """Resolve the service container from app state, then the runtime registry."""
    services = getattr(request.app.state, "services", None)
    if isinstance(services, ServiceContainer):
        return services
    try:
        return runtime.get_services()
    except RuntimeError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Service container not configured",
        ) from exc


__all__ = ["get_service_container"]
