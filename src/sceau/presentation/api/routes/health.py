"""
Health check API routes.
"""

from fastapi import APIRouter, Depends, Response, status

from sceau import __version__
from sceau.di.dependencies import get_nonce_store
from sceau.domain.services.i_nonce_store import INonceStore
from sceau.presentation.schemas.health_schemas import (
    ComponentHealth,
    HealthResponse,
)

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(
    response: Response,
    nonce_store: INonceStore = Depends(get_nonce_store),
) -> HealthResponse:
    """
    Service health.

    Checks nonce store reachability. Returns 503 when degraded.
    """
    store_ok = await nonce_store.ping()

    if not store_ok:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return HealthResponse(
        status="healthy" if store_ok else "degraded",
        version=__version__,
        components={
            "nonce_store": ComponentHealth(
                status="healthy" if store_ok else "unavailable",
                backend=type(nonce_store).__name__,
            ),
        },
    )
