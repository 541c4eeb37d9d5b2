"""
Health check endpoint for monitoring.
"""
from datetime import datetime, timezone
from fastapi import APIRouter, Request
from spellcheck_service.schemas.spellcheck import HealthResponse
from spellcheck_service.utils.logger import get_logger

logger = get_logger("health")
router = APIRouter()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check application and dictionary loading status",
    responses={
        200: {"description": "Service is running"}
    }
)
async def health_check(request: Request) -> HealthResponse:
    """
    Health check endpoint.

    Dictionaries load in the background, so the service reports 'loading'
    rather than failing while the selected dictionaries are not all loaded.
    A service running with spell-check disabled is always 'healthy'.

    Returns:
        HealthResponse with status and timestamp
    """
    dictionary_set = getattr(request.app.state, "dictionary_set", None)

    if dictionary_set is None:
        loaded, ready = 0, True
    else:
        loaded, ready = len(dictionary_set.get_loaded()), dictionary_set.is_ready()

    if not ready:
        logger.debug("Health check: dictionaries still loading", loaded=loaded)

    return HealthResponse(
        status="healthy" if ready else "loading",
        dictionaries_loaded=loaded,
        ready=ready,
        timestamp=datetime.now(timezone.utc)
    )
