"""
===============================================================================
TARJETA CRC - app/interfaces/api/http/routers/activation.py
===============================================================================

Name:
    Activation Router

Responsibilities:
    - Emitir token de activación para un usuario no activo.
    - Activar una cuenta con el token (uso único, con expiración).
    - Desactivar una cuenta (optimistic locking).

Collaborators:
    - application.usecases.activation
    - container (factories)
    - error_mapping.raise_user_error
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from app.application.usecases import (
    ActivateUserUseCase,
    DeactivateUserUseCase,
    RequestActivationUseCase,
)
from app.container import (
    get_activate_user_use_case,
    get_deactivate_user_use_case,
    get_request_activation_use_case,
)
from fastapi import APIRouter, Depends, status

from ..error_mapping import raise_user_error
from ..schemas.activation import (
    ActivateRequest,
    ActivationEnvelope,
    ActivationRequestedEnvelope,
    ActivationTokenResponse,
    DeactivateRequest,
)
from ..schemas.common import to_user_response

router = APIRouter(tags=["activation"])


@router.post(
    "/users/{user_id}/activation",
    response_model=ActivationRequestedEnvelope,
    status_code=status.HTTP_201_CREATED,
)
def request_activation(
    user_id: UUID,
    use_case: RequestActivationUseCase = Depends(get_request_activation_use_case),
):
    result = use_case.execute(user_id)
    if result.error:
        raise_user_error(result.error)

    token = result.token
    return ActivationRequestedEnvelope(
        message="Activation token generated successfully",
        data=ActivationTokenResponse(
            token=token.token, user_id=token.user_id, expires_at=token.expires_at
        ),
    )


@router.post("/activation/activate", response_model=ActivationEnvelope)
def activate_user(
    req: ActivateRequest,
    use_case: ActivateUserUseCase = Depends(get_activate_user_use_case),
):
    result = use_case.execute(req.token)
    if result.error:
        raise_user_error(result.error)
    return ActivationEnvelope(
        message="User activated successfully", data=to_user_response(result.user)
    )


@router.post("/users/{user_id}/deactivate", response_model=ActivationEnvelope)
def deactivate_user(
    user_id: UUID,
    req: DeactivateRequest,
    use_case: DeactivateUserUseCase = Depends(get_deactivate_user_use_case),
):
    result = use_case.execute(
        user_id,
        version=req.version,
        deactivated_by=req.deactivated_by,
        reason=req.reason,
    )
    if result.error:
        raise_user_error(result.error)
    return ActivationEnvelope(
        message="User deactivated successfully", data=to_user_response(result.user)
    )
