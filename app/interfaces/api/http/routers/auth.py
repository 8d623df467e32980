"""
===============================================================================
TARJETA CRC - app/interfaces/api/http/routers/auth.py
===============================================================================

Name:
    Auth Router (sesiones opacas + cookie HttpOnly)

Responsibilities:
    - Login / registro: crean sesión y setean cookie `session_id`.
    - Validación pública de sesión (query, cookie o Authorization).
    - Endpoints protegidos: logout, me, refresh, cambio de contraseña, sesiones.
    - Emitir el token CSRF (GET /auth/csrf-token).

Collaborators:
    - application.usecases.auth (casos de uso)
    - container (factories)
    - identity.session_auth (require_session, cookies, IP / user-agent)
    - error_mapping (AuthError -> HTTP)

Notes:
    - Todo el grupo /auth está protegido por CSRFMiddleware (double submit).
===============================================================================
"""

from __future__ import annotations

from app.application.usecases import (
    ChangePasswordInput,
    ChangePasswordUseCase,
    ListUserSessionsUseCase,
    LoginInput,
    LoginUseCase,
    LogoutUseCase,
    RefreshSessionUseCase,
    RegisterInput,
    RegisterUseCase,
    ValidateSessionUseCase,
)
from app.container import (
    get_change_password_use_case,
    get_list_user_sessions_use_case,
    get_login_use_case,
    get_logout_use_case,
    get_refresh_session_use_case,
    get_register_use_case,
    get_validate_session_use_case,
)
from app.crosscutting.error_responses import (
    AppHTTPException,
    ErrorCode,
    validation_error,
)
from app.identity.session_auth import (
    AuthContext,
    clear_session_cookie,
    client_ip,
    extract_session_id,
    require_session,
    set_session_cookie,
    user_agent,
)
from fastapi import APIRouter, Depends, Header, Query, Request, Response, status

from ..dependencies import csrf_token_from
from ..error_mapping import raise_auth_error
from ..schemas.auth import (
    AuthResponse,
    ChangePasswordRequest,
    CsrfTokenResponse,
    LoginRequest,
    RefreshSessionResponse,
    RegisterRequest,
    SessionsResponse,
    ValidateSessionResponse,
)
from ..schemas.common import (
    MessageResponse,
    SessionDetailResponse,
    UserResponse,
    to_session_response,
    to_user_response,
)

router = APIRouter(prefix="/auth", tags=["auth"])


# -----------------------------------------------------------------------------
# Públicos
# -----------------------------------------------------------------------------


@router.post("/login", response_model=AuthResponse)
def login(
    req: LoginRequest,
    request: Request,
    response: Response,
    use_case: LoginUseCase = Depends(get_login_use_case),
):
    result = use_case.execute(
        LoginInput(
            email=req.email,
            password=req.password,
            ip_address=client_ip(request),
            user_agent=user_agent(request),
        )
    )
    if result.error:
        raise_auth_error(result.error)

    set_session_cookie(response, result.session)
    return AuthResponse(
        user=to_user_response(result.user),
        session=to_session_response(result.session),
        message="Login successful",
    )


@router.post(
    "/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED
)
def register(
    req: RegisterRequest,
    request: Request,
    response: Response,
    use_case: RegisterUseCase = Depends(get_register_use_case),
):
    result = use_case.execute(
        RegisterInput(
            email=req.email,
            password=req.password,
            first_name=req.first_name,
            last_name=req.last_name,
            ip_address=client_ip(request),
            user_agent=user_agent(request),
        )
    )
    if result.error:
        raise_auth_error(result.error)

    set_session_cookie(response, result.session)
    return AuthResponse(
        user=to_user_response(result.user),
        session=to_session_response(result.session),
        message="Registration successful",
    )


@router.get("/validate", response_model=ValidateSessionResponse)
def validate_session(
    request: Request,
    session_id: str | None = Query(None),
    authorization: str | None = Header(None, alias="Authorization"),
    use_case: ValidateSessionUseCase = Depends(get_validate_session_use_case),
):
    """Valida una sesión sin exigir autenticación (útil para otros servicios)."""
    candidate = (session_id or "").strip() or extract_session_id(request, authorization)
    if not candidate:
        raise validation_error("session_id is required", field="session_id")

    result = use_case.execute(candidate)
    if not result.valid or result.user is None or result.session is None:
        raise AppHTTPException(
            401, ErrorCode.INVALID_SESSION, "Session is invalid or expired"
        )

    return ValidateSessionResponse(
        valid=True,
        user=to_user_response(result.user),
        session=to_session_response(result.session),
    )


@router.get("/csrf-token", response_model=CsrfTokenResponse)
def csrf_token(request: Request):
    return CsrfTokenResponse(csrf_token=csrf_token_from(request))


# -----------------------------------------------------------------------------
# Protegidos (sesión requerida)
# -----------------------------------------------------------------------------


@router.post("/logout", response_model=MessageResponse)
def logout(
    response: Response,
    auth: AuthContext = Depends(require_session),
    use_case: LogoutUseCase = Depends(get_logout_use_case),
):
    result = use_case.execute(auth.session.id)
    if result.error:
        raise_auth_error(result.error)

    clear_session_cookie(response)
    return MessageResponse(message="Logout successful")


@router.get("/me", response_model=UserResponse)
def me(auth: AuthContext = Depends(require_session)):
    return to_user_response(auth.user)


@router.post("/refresh", response_model=RefreshSessionResponse)
def refresh_session(
    response: Response,
    auth: AuthContext = Depends(require_session),
    use_case: RefreshSessionUseCase = Depends(get_refresh_session_use_case),
):
    result = use_case.execute(auth.session.id)
    if result.error:
        raise_auth_error(result.error)

    set_session_cookie(response, result.session)
    return RefreshSessionResponse(
        message="Session refreshed successfully",
        data=to_session_response(result.session),
    )


@router.put("/password", response_model=MessageResponse)
def change_password(
    req: ChangePasswordRequest,
    request: Request,
    response: Response,
    auth: AuthContext = Depends(require_session),
    use_case: ChangePasswordUseCase = Depends(get_change_password_use_case),
):
    result = use_case.execute(
        ChangePasswordInput(
            user_id=auth.user.id,
            old_password=req.old_password,
            new_password=req.new_password,
            ip_address=client_ip(request),
            user_agent=user_agent(request),
        )
    )
    if result.error:
        raise_auth_error(result.error)

    # R: Todas las sesiones fueron revocadas, incluida la actual.
    clear_session_cookie(response)
    return MessageResponse(message="Password changed successfully. Please log in again.")


@router.get("/sessions", response_model=SessionsResponse)
def list_sessions(
    auth: AuthContext = Depends(require_session),
    use_case: ListUserSessionsUseCase = Depends(get_list_user_sessions_use_case),
):
    result = use_case.execute(auth.user.id)
    if result.error:
        raise_auth_error(result.error)

    sessions = [
        SessionDetailResponse(
            id=s.id,
            expires_at=s.expires_at,
            created_at=s.created_at,
            ip_address=s.ip_address,
            user_agent=s.user_agent,
            current=s.id == auth.session.id,
        )
        for s in result.sessions
    ]
    return SessionsResponse(sessions=sessions, total=len(sessions))
