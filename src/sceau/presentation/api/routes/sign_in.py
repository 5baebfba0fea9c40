"""
Sign-In-With-Solana API routes.
"""

from fastapi import APIRouter, Depends, status

from sceau.application.services.session_outcome_emitter import (
    SessionOutcomeEmitter,
)
from sceau.application.use_cases.create_sign_in_data import CreateSignInData
from sceau.application.use_cases.verify_sign_in import VerifySignIn
from sceau.di.dependencies import (
    get_create_sign_in_data,
    get_outcome_emitter,
    get_verify_sign_in,
)
from sceau.domain.entities.challenge import Challenge
from sceau.domain.exceptions import SceauException, VerificationError
from sceau.infrastructure.monitoring import get_logger
from sceau.infrastructure.monitoring import metrics
from sceau.presentation.schemas.sign_in_schemas import (
    CreateSignInDataRequest,
    VerifySignInRequest,
    VerifySignInResponse,
)

logger = get_logger(__name__)

router = APIRouter(tags=["Sign In"])

SIGN_IN_METHOD = "signIn"


# ================================================================
# Create Sign-In Data Endpoint
# ================================================================


@router.post(
    "/createSignInData",
    response_model=Challenge,
    response_model_by_alias=True,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="Issue sign-in challenge",
    description="Issue a fresh, domain-bound Sign-In-With-Solana challenge",
)
async def create_sign_in_data(
    request: CreateSignInDataRequest,
    use_case: CreateSignInData = Depends(get_create_sign_in_data),
) -> Challenge:
    """
    Issue sign-in challenge.

    Flow:
    1. Derive domain from the requesting page's URI
    2. Generate nonce and validity window
    3. Record nonce for single use

    Malformed or foreign URIs are rejected with 400 by the
    exception handler.
    """
    challenge = await use_case.execute(request.uri)
    metrics.challenges_issued_total.inc()
    logger.info(f"Issued sign-in challenge for {challenge.domain}")
    return challenge


# ================================================================
# Verify Sign-In Endpoint
# ================================================================


@router.post(
    "/verifySIWS",
    response_model=VerifySignInResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="Verify sign-in output",
    description="Verify a wallet's sign-in output against its challenge",
)
async def verify_sign_in(
    request: VerifySignInRequest,
    use_case: VerifySignIn = Depends(get_verify_sign_in),
    emitter: SessionOutcomeEmitter = Depends(get_outcome_emitter),
) -> VerifySignInResponse:
    """
    Verify sign-in output.

    Flow:
    1. Check domain, freshness and nonce
    2. Rebuild the canonical message and compare with signed bytes
    3. Verify the Ed25519 signature
    4. Record the outcome in the audit log

    Policy failures answer 200 with ok=false; they are never 5xx.
    """
    try:
        identity = await use_case.execute(
            challenge=request.input,
            output=request.output.to_domain(),
        )

    except VerificationError as e:
        metrics.verification_failures_total.labels(kind=e.code).inc()
        emitter.record(SIGN_IN_METHOD, e)
        return VerifySignInResponse(ok=False, error=e.code)

    except SceauException as e:
        emitter.record(SIGN_IN_METHOD, e)
        raise

    emitter.record(SIGN_IN_METHOD, identity)
    return VerifySignInResponse(ok=True, address=identity.address)
