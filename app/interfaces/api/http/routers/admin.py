"""
===============================================================================
TARJETA CRC - app/interfaces/api/http/routers/admin.py
===============================================================================

Name:
    Admin Router

Responsibilities:
    - Endpoints administrativos del backend (guardia X-Admin-Token).
    - Mantenimiento: limpieza de sesiones y tokens vencidos (disparo externo).
    - Auditoría: consulta de eventos con filtros y paginación.
    - Validaciones de borde (rangos de fechas).

Collaborators:
    - application.usecases (CleanupExpiredSessions / CleanupExpiredTokens)
    - domain.repositories.AuditEventRepository
    - container (factories)
    - dependencies.require_admin_token
    - schemas.admin

===============================================================================
"""

from __future__ import annotations

from datetime import datetime

from app.application.usecases import (
    CleanupExpiredSessionsUseCase,
    CleanupExpiredTokensUseCase,
)
from app.container import (
    get_audit_repository,
    get_cleanup_expired_sessions_use_case,
    get_cleanup_expired_tokens_use_case,
)
from app.domain.audit import AuditEvent
from app.domain.repositories import AuditEventRepository
from fastapi import APIRouter, Depends, Query

from ..dependencies import require_admin_token, validate_date_range
from ..schemas.admin import AuditEventRes, AuditEventsRes, CleanupRes

router = APIRouter(
    prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin_token)]
)


def _to_audit_event_res(event: AuditEvent) -> AuditEventRes:
    """Adapter: AuditEvent (dominio) -> DTO HTTP."""
    return AuditEventRes(
        id=event.id,
        event_id=event.event_id,
        event_type=event.event_type,
        aggregate_id=event.aggregate_id,
        aggregate_type=event.aggregate_type,
        user_id=event.user_id,
        action=event.action,
        resource=event.resource,
        resource_id=event.resource_id,
        details=event.details or {},
        metadata=event.metadata or {},
        occurred_at=event.occurred_at,
    )


@router.post("/maintenance/cleanup", response_model=CleanupRes)
def run_cleanup(
    sessions_use_case: CleanupExpiredSessionsUseCase = Depends(
        get_cleanup_expired_sessions_use_case
    ),
    tokens_use_case: CleanupExpiredTokensUseCase = Depends(
        get_cleanup_expired_tokens_use_case
    ),
):
    return CleanupRes(
        sessions_deleted=sessions_use_case.execute(),
        tokens_deleted=tokens_use_case.execute(),
    )


@router.get("/audit", response_model=AuditEventsRes)
def list_audit_events(
    user_id: str | None = Query(None),
    event_type_prefix: str | None = Query(None),
    start_at: datetime | None = Query(None),
    end_at: datetime | None = Query(None),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    audit_repo: AuditEventRepository = Depends(get_audit_repository),
):
    validate_date_range(start_at, end_at, start_field="start_at", end_field="end_at")

    events = audit_repo.list_events(
        user_id=user_id,
        event_type_prefix=event_type_prefix,
        start_at=start_at,
        end_at=end_at,
        limit=limit,
        offset=offset,
    )

    next_offset = offset + limit if len(events) == limit else None
    return AuditEventsRes(
        events=[_to_audit_event_res(e) for e in events],
        next_offset=next_offset,
    )
