"""FastAPI dependency injection providers."""

from fastapi import HTTPException, Request, status

from pricefetch.fetchers.orchestrator import FetchOrchestrator


def get_orchestrator(request: Request) -> FetchOrchestrator:
    """Orchestrator built during application startup.

    Raises 503 if startup has not completed.
    """
    orchestrator = getattr(request.app.state, "orchestrator", None)
    if orchestrator is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Fetch engine is not initialized",
        )
    return orchestrator
