"""
===============================================================================
TARJETA CRC - identity/session_auth.py (Autenticación por sesión opaca)
===============================================================================

Responsabilidades:
  - Resolver el session id desde cookie, `Authorization: Bearer <id>` o el
    valor crudo de Authorization.
  - Validar la sesión (ValidateSessionUseCase) y exponer AuthContext.
  - Setear / borrar la cookie de sesión de forma consistente.
  - Helpers de borde: user-agent (la IP se resuelve en crosscutting.middleware).

Colaboradores:
  - container.get_validate_session_use_case
  - crosscutting.config.get_settings (nombre de cookie, Secure, duración)
  - crosscutting.error_responses (401 UNAUTHORIZED)
  - context.set_user_context (correlación de logs)

Política:
  - Sin credenciales -> 401 "Authentication required".
  - Sesión inválida/expirada -> 401 "Invalid or expired session" + cookie borrada.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Depends, Header, Request, Response

from ..application.usecases import ValidateSessionUseCase
from ..container import get_validate_session_use_case
from ..context import set_user_context
from ..crosscutting.config import get_settings
from ..crosscutting.error_responses import unauthorized
from ..crosscutting.middleware import client_ip
from ..domain.sessions import Session
from ..domain.users import User


@dataclass(frozen=True)
class AuthContext:
    """Usuario + sesión del request autenticado."""

    user: User
    session: Session


# ---------------------------------------------------------------------------
# Cookie de sesión
# ---------------------------------------------------------------------------


def session_cookie_name() -> str:
    return get_settings().session_cookie_name


def set_session_cookie(response: Response, session: Session) -> None:
    settings = get_settings()
    response.set_cookie(
        key=settings.session_cookie_name,
        value=session.id,
        max_age=settings.session_duration_hours * 3600,
        path="/",
        secure=settings.session_cookie_secure,
        httponly=True,
        samesite="strict",
    )


def clear_session_cookie(response: Response) -> None:
    settings = get_settings()
    response.delete_cookie(
        key=settings.session_cookie_name,
        path="/",
        secure=settings.session_cookie_secure,
        httponly=True,
        samesite="strict",
    )


# ---------------------------------------------------------------------------
# Extracción de credenciales
# ---------------------------------------------------------------------------


def _session_id_from_authorization(authorization: str | None) -> str | None:
    """Acepta `Bearer <id>` y también el id crudo."""
    if not authorization:
        return None
    value = authorization.strip()
    scheme, _, rest = value.partition(" ")
    if scheme.lower() == "bearer":
        return rest.strip() or None
    return value or None


def extract_session_id(request: Request, authorization: str | None) -> str | None:
    """Cookie primero; luego Authorization."""
    cookie_value = (request.cookies.get(session_cookie_name()) or "").strip()
    if cookie_value:
        return cookie_value
    return _session_id_from_authorization(authorization)


def user_agent(request: Request) -> str:
    return request.headers.get("user-agent") or ""


# ---------------------------------------------------------------------------
# Dependencias FastAPI
# ---------------------------------------------------------------------------


def require_session(
    request: Request,
    authorization: str | None = Header(None, alias="Authorization"),
    use_case: ValidateSessionUseCase = Depends(get_validate_session_use_case),
) -> AuthContext:
    """Dependency FastAPI: requiere una sesión válida y usuario activo."""
    session_id = extract_session_id(request, authorization)
    if not session_id:
        raise unauthorized("Authentication required")

    result = use_case.execute(session_id)
    if not result.valid or result.user is None or result.session is None:
        exc = unauthorized("Invalid or expired session")
        exc.clear_cookies.append(session_cookie_name())
        raise exc

    set_user_context(str(result.user.id))
    request.state.user = result.user
    request.state.session = result.session
    return AuthContext(user=result.user, session=result.session)


__all__ = [
    "AuthContext",
    "require_session",
    "extract_session_id",
    "set_session_cookie",
    "clear_session_cookie",
    "session_cookie_name",
    "client_ip",
    "user_agent",
]
