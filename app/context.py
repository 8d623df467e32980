"""
===============================================================================
TARJETA CRC - app/context.py (Contexto por request)
===============================================================================

Responsabilidades:
  - Guardar el contexto de correlación del request en ContextVars.
  - Exponerlo como dict plano para logs y metadata de auditoría.

Colaboradores:
  - crosscutting.middleware.RequestContextMiddleware: abre/cierra el contexto.
  - identity.session_auth: agrega user_id cuando la sesión es válida.
  - crosscutting.logger / app.audit: leen get_context_dict().

Restricciones:
  - Solo strings; "" significa "no disponible" y se omite del dict.
  - El usuario autenticado NO vive acá: viaja explícito como AuthContext.
===============================================================================
"""

from __future__ import annotations

from contextvars import ContextVar

request_id_var: ContextVar[str] = ContextVar("request_id", default="")
http_method_var: ContextVar[str] = ContextVar("http_method", default="")
http_path_var: ContextVar[str] = ContextVar("http_path", default="")
client_ip_var: ContextVar[str] = ContextVar("client_ip", default="")
user_id_var: ContextVar[str] = ContextVar("user_id", default="")

# Clave en el dict de salida -> variable.
_CONTEXT_FIELDS: tuple[tuple[str, ContextVar[str]], ...] = (
    ("request_id", request_id_var),
    ("method", http_method_var),
    ("path", http_path_var),
    ("client_ip", client_ip_var),
    ("user_id", user_id_var),
)


def set_request_context(
    *, request_id: str = "", method: str = "", path: str = "", client_ip: str = ""
) -> None:
    request_id_var.set(request_id or "")
    http_method_var.set(method or "")
    http_path_var.set(path or "")
    client_ip_var.set(client_ip or "")


def set_user_context(user_id: str) -> None:
    user_id_var.set(user_id or "")


def get_context_dict() -> dict[str, str]:
    return {key: value for key, var in _CONTEXT_FIELDS if (value := var.get())}


def clear_context() -> None:
    """Vacía todas las variables; el worker reutiliza el contexto entre requests."""
    for _, var in _CONTEXT_FIELDS:
        var.set("")
