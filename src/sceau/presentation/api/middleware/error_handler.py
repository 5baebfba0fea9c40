"""
Global error handling middleware.
"""

from fastapi import Request, status
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from sceau.di.container import get_container
from sceau.domain.exceptions import MalformedRequestError, SceauException
from sceau.infrastructure.monitoring import get_logger

logger = get_logger(__name__)

VERIFY_ROUTE_SUFFIX = "/verifySIWS"
SIGN_IN_METHOD = "signIn"


async def sceau_exception_handler(
    request: Request, exc: SceauException
) -> JSONResponse:
    """
    Handle Sceau domain exceptions.

    Converts domain exceptions to appropriate HTTP responses.
    """
    status_code_map = {
        "MALFORMED_REQUEST": status.HTTP_400_BAD_REQUEST,
        "NONCE_STORE_UNAVAILABLE": status.HTTP_503_SERVICE_UNAVAILABLE,
    }

    status_code = status_code_map.get(exc.code, status.HTTP_400_BAD_REQUEST)

    logger.warning(
        f"{request.method} {request.url.path} -> {exc.code}: {exc.message}"
    )

    return JSONResponse(
        status_code=status_code,
        content={
            "error": exc.code,
            "message": exc.message,
        },
    )


def describe_validation_error(
    exc: RequestValidationError,
) -> MalformedRequestError:
    """Summarize the first schema violation as a MalformedRequestError."""
    errors = exc.errors()
    if not errors:
        return MalformedRequestError("body", "schema validation failed")

    first = errors[0]
    location = ".".join(
        str(part) for part in first.get("loc", ()) if part != "body"
    )
    return MalformedRequestError(location or "body", first.get("msg", "invalid"))


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Handle request schema violations (422).

    A malformed sign-in proof is still a sign-in attempt, so it is
    recorded as an error outcome before the standard 422 response.
    """
    if request.url.path.endswith(VERIFY_ROUTE_SUFFIX):
        error = describe_validation_error(exc)
        logger.warning(f"Malformed sign-in proof: {error.message}")
        get_container().outcome_emitter.record(SIGN_IN_METHOD, error)

    return await request_validation_exception_handler(request, exc)
