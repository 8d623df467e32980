"""
===============================================================================
MÓDULO: Logger estructurado (JSON) con contexto de request
===============================================================================

Objetivo
--------
Loguear de forma:
- Parseable (JSON)
- Correlacionable (request_id / user_id)
- Segura (redacción de secretos: passwords, session ids, tokens CSRF)

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  JSONFormatter + setup_logger() + configure_logging()

Responsabilidades:
  - Formatear logs como JSON
  - Enriquecer con contexto (request_id, path, method, user_id)
  - Redactar campos sensibles y limitar tamaños

Colaboradores:
  - app/context.py (ContextVars)
  - crosscutting/config.py (nivel y formato, aplicado en startup)
===============================================================================
"""

from __future__ import annotations

import json
import logging
import os
import sys
import traceback
from datetime import datetime, timezone
from typing import Any

from ..context import get_context_dict

LOGGER_NAME = "accounts-api"

# R: Atributos estándar del LogRecord; todo lo demás vino por `extra=`.
_RESERVED_LOGRECORD_KEYS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime", "taskName"}


class _Redactor:
    """
    Redacta claves sensibles y recorta valores gigantes antes de serializar.
    """

    SENSITIVE_KEYS = {
        "password",
        "old_password",
        "new_password",
        "password_hash",
        "passwd",
        "secret",
        "token",
        "authorization",
        "cookie",
        "set-cookie",
        "session_id",
        "csrf_token",
        "x-csrf-token",
        "admin_token",
        "x-admin-token",
        "activation_token",
        "database_url",
    }

    def __init__(self, max_str: int = 4_000, max_depth: int = 4):
        self._max_str = max_str
        self._max_depth = max_depth

    def sanitize(self, value: Any, *, depth: int = 0, key: str | None = None) -> Any:
        if key and key.lower() in self.SENSITIVE_KEYS:
            return "***REDACTADO***"

        if depth > self._max_depth:
            return "***TRUNCADO***"

        if isinstance(value, str):
            if len(value) <= self._max_str:
                return value
            return value[: self._max_str] + "…(truncado)"

        if isinstance(value, (bytes, bytearray)):
            return f"<bytes {len(value)}B>"

        if isinstance(value, dict):
            return {
                str(k): self.sanitize(v, depth=depth + 1, key=str(k))
                for k, v in value.items()
            }

        if isinstance(value, (list, tuple)):
            return [self.sanitize(v, depth=depth + 1, key=key) for v in value]

        if isinstance(value, (int, float, bool)) or value is None:
            return value

        return str(value)


class JSONFormatter(logging.Formatter):
    """
    LogRecord -> JSON de una línea, con contexto de request y stacktrace.
    """

    def __init__(self):
        super().__init__()
        self._redactor = _Redactor()

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "pid": os.getpid(),
        }

        payload.update(get_context_dict())

        for k, v in record.__dict__.items():
            if k in _RESERVED_LOGRECORD_KEYS:
                continue
            payload[k] = self._redactor.sanitize(v, key=k)

        if record.exc_info:
            exc_type = record.exc_info[0].__name__ if record.exc_info[0] else None
            exc_msg = str(record.exc_info[1]) if record.exc_info[1] else None
            payload["exception"] = {
                "type": exc_type,
                "message": exc_msg,
                "stacktrace": traceback.format_exception(*record.exc_info),
            }

        return json.dumps(
            payload, ensure_ascii=False, default=str, separators=(",", ":")
        )


def _build_formatter(use_json: bool) -> logging.Formatter:
    if use_json:
        return JSONFormatter()
    return logging.Formatter("%(levelname)s %(name)s %(message)s")


def setup_logger(
    name: str = LOGGER_NAME,
    *,
    level: str | None = None,
    use_json: bool | None = None,
) -> logging.Logger:
    """
    Crea y configura un logger.

    - Evita duplicación de handlers en reimport
    - Sin Settings disponibles usa LOG_LEVEL / LOG_JSON del entorno
    """
    log = logging.getLogger(name)

    level = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    if use_json is None:
        use_json = os.getenv("LOG_JSON", "true").strip().lower() in {"1", "true", "yes"}

    log.setLevel(getattr(logging, level, logging.INFO))

    if not log.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(_build_formatter(use_json))
        log.addHandler(handler)
    else:
        for handler in log.handlers:
            handler.setFormatter(_build_formatter(use_json))

    return log


def configure_logging(settings) -> logging.Logger:
    """Re-aplica nivel/formato desde Settings (se llama en el startup)."""
    return setup_logger(
        LOGGER_NAME, level=settings.log_level, use_json=settings.log_json
    )


# Instancia global (import-friendly)
logger = setup_logger()
