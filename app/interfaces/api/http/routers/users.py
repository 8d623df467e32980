"""
===============================================================================
TARJETA CRC - app/interfaces/api/http/routers/users.py
===============================================================================

Name:
    Users Router

Responsibilities:
    - CRUD de usuarios con optimistic locking (version en el body).
    - Listado con filtros + paginación offset-based.
    - Traducir UserError -> HTTP (error_mapping).

Collaborators:
    - application.usecases.users
    - container (factories)
    - schemas.users / schemas.common
===============================================================================
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from app.application.usecases import (
    ChangeUserPasswordUseCase,
    ChangeUserStatusUseCase,
    CreateUserInput,
    CreateUserUseCase,
    DeleteUserUseCase,
    GetUserByEmailUseCase,
    GetUserUseCase,
    ListUsersInput,
    ListUsersUseCase,
    UpdateUserEmailUseCase,
    UpdateUserUseCase,
)
from app.container import (
    get_change_user_password_use_case,
    get_change_user_status_use_case,
    get_create_user_use_case,
    get_delete_user_use_case,
    get_get_user_by_email_use_case,
    get_get_user_use_case,
    get_list_users_use_case,
    get_update_user_email_use_case,
    get_update_user_use_case,
)
from fastapi import APIRouter, Depends, Query, status

from ..dependencies import validate_date_range
from ..error_mapping import raise_user_error
from ..schemas.common import MessageResponse, UserResponse, to_user_response
from ..schemas.users import (
    ChangeStatusRequest,
    ChangeUserPasswordRequest,
    CreateUserRequest,
    UpdateEmailRequest,
    UpdateUserRequest,
    UserEnvelope,
    UserListResponse,
)

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=UserEnvelope, status_code=status.HTTP_201_CREATED)
def create_user(
    req: CreateUserRequest,
    use_case: CreateUserUseCase = Depends(get_create_user_use_case),
):
    result = use_case.execute(
        CreateUserInput(
            email=req.email,
            password=req.password,
            first_name=req.first_name,
            last_name=req.last_name,
        )
    )
    if result.error:
        raise_user_error(result.error)
    return UserEnvelope(
        message="User created successfully", data=to_user_response(result.user)
    )


@router.get("", response_model=UserListResponse)
def list_users(
    status_filter: str | None = Query(None, alias="status"),
    email: str | None = Query(None),
    first_name: str | None = Query(None),
    last_name: str | None = Query(None),
    created_after: datetime | None = Query(None),
    created_before: datetime | None = Query(None),
    limit: int = Query(0),
    offset: int = Query(0),
    use_case: ListUsersUseCase = Depends(get_list_users_use_case),
):
    validate_date_range(
        created_after,
        created_before,
        start_field="created_after",
        end_field="created_before",
    )
    result = use_case.execute(
        ListUsersInput(
            status=status_filter,
            email=email,
            first_name=first_name,
            last_name=last_name,
            created_after=created_after,
            created_before=created_before,
            limit=limit,
            offset=offset,
        )
    )
    if result.error:
        raise_user_error(result.error)
    return UserListResponse(
        users=[to_user_response(u) for u in result.users],
        total=result.total,
        limit=result.limit,
        offset=result.offset,
        has_more=result.has_more,
    )


@router.get("/by-email/{email}", response_model=UserResponse)
def get_user_by_email(
    email: str,
    use_case: GetUserByEmailUseCase = Depends(get_get_user_by_email_use_case),
):
    result = use_case.execute(email)
    if result.error:
        raise_user_error(result.error)
    return to_user_response(result.user)


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: UUID,
    use_case: GetUserUseCase = Depends(get_get_user_use_case),
):
    result = use_case.execute(user_id)
    if result.error:
        raise_user_error(result.error)
    return to_user_response(result.user)


@router.put("/{user_id}", response_model=UserEnvelope)
def update_user(
    user_id: UUID,
    req: UpdateUserRequest,
    use_case: UpdateUserUseCase = Depends(get_update_user_use_case),
):
    result = use_case.execute(
        user_id, first_name=req.first_name, last_name=req.last_name, version=req.version
    )
    if result.error:
        raise_user_error(result.error)
    return UserEnvelope(
        message="User updated successfully", data=to_user_response(result.user)
    )


@router.put("/{user_id}/email", response_model=UserEnvelope)
def update_user_email(
    user_id: UUID,
    req: UpdateEmailRequest,
    use_case: UpdateUserEmailUseCase = Depends(get_update_user_email_use_case),
):
    result = use_case.execute(user_id, email=req.email, version=req.version)
    if result.error:
        raise_user_error(result.error)
    return UserEnvelope(
        message="User email updated successfully", data=to_user_response(result.user)
    )


@router.put("/{user_id}/password", response_model=UserEnvelope)
def change_user_password(
    user_id: UUID,
    req: ChangeUserPasswordRequest,
    use_case: ChangeUserPasswordUseCase = Depends(get_change_user_password_use_case),
):
    result = use_case.execute(
        user_id,
        old_password=req.old_password,
        new_password=req.new_password,
        version=req.version,
    )
    if result.error:
        raise_user_error(result.error)
    return UserEnvelope(
        message="Password changed successfully", data=to_user_response(result.user)
    )


@router.put("/{user_id}/status", response_model=UserEnvelope)
def change_user_status(
    user_id: UUID,
    req: ChangeStatusRequest,
    use_case: ChangeUserStatusUseCase = Depends(get_change_user_status_use_case),
):
    result = use_case.execute(
        user_id,
        status=req.status,
        version=req.version,
        changed_by=req.changed_by,
        reason=req.reason,
    )
    if result.error:
        raise_user_error(result.error)
    return UserEnvelope(
        message="User status changed successfully", data=to_user_response(result.user)
    )


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: UUID,
    deleted_by: str = Query(""),
    reason: str = Query(""),
    use_case: DeleteUserUseCase = Depends(get_delete_user_use_case),
):
    result = use_case.execute(user_id, deleted_by=deleted_by, reason=reason)
    if result.error:
        raise_user_error(result.error)
    return MessageResponse(message="User deleted successfully")
