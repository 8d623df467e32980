"""
===============================================================================
TARJETA CRC - app/container.py (Composition Root / DI manual)
===============================================================================

Responsabilidades:
  - Componer dependencias (repositorios, hasher, event bus, limiters) siguiendo DIP.
  - Exponer factories para FastAPI (Depends) y para scripts de mantenimiento.
  - Mantener singletons con caching (lru_cache) para recursos compartidos.
  - Centralizar decisiones runtime basadas en Settings (config).

Colaboradores:
  - app.crosscutting.config.get_settings
  - app.domain.repositories.* (puertos)
  - app.domain.services.* (puertos)
  - app.infrastructure.* (implementaciones)
  - app.application.usecases.* (casos de uso)
  - app.audit.register_audit_handler

Patrones aplicados:
  - Composition Root
  - Dependency Inversion (use cases dependen de puertos)
  - Lazy singletons con lru_cache

Notas:
  - Este archivo NO contiene lógica de negocio.
  - Este archivo NO debe depender de FastAPI (solo expone factories).
  - APP_ENV ∈ {test, testing, ci} => adapters in-memory + InMemoryUnitOfWork.
===============================================================================
"""

from __future__ import annotations

from datetime import timedelta
from functools import lru_cache

from .application.event_bus import EventBus
from .application.rate_limiting import AttemptLimiter
from .application.usecases import (
    ActivateUserUseCase,
    ChangePasswordUseCase,
    ChangeUserPasswordUseCase,
    ChangeUserStatusUseCase,
    CleanupExpiredSessionsUseCase,
    CleanupExpiredTokensUseCase,
    CreateUserUseCase,
    DeactivateUserUseCase,
    DeleteUserUseCase,
    GetUserByEmailUseCase,
    GetUserUseCase,
    ListUserSessionsUseCase,
    ListUsersUseCase,
    LoginUseCase,
    LogoutUseCase,
    RefreshSessionUseCase,
    RegisterUseCase,
    RequestActivationUseCase,
    UpdateUserEmailUseCase,
    UpdateUserUseCase,
    ValidateSessionUseCase,
)
from .audit import register_audit_handler
from .crosscutting.config import get_settings
from .domain.repositories import (
    ActivationTokenRepository,
    AuditEventRepository,
    SessionRepository,
    UnitOfWork,
    UserRepository,
)
from .domain.services import PasswordHasher
from .identity.passwords import Argon2PasswordHasher
from .infrastructure.db import PostgresUnitOfWork
from .infrastructure.repositories import (
    InMemoryActivationTokenRepository,
    InMemoryAuditEventRepository,
    InMemorySessionRepository,
    InMemoryUnitOfWork,
    InMemoryUserRepository,
    PostgresActivationTokenRepository,
    PostgresAuditEventRepository,
    PostgresSessionRepository,
    PostgresUserRepository,
)

# =============================================================================
# Helpers internos
# =============================================================================


def _is_test_env() -> bool:
    """
    Determina si estamos en entorno de test.

    Regla:
      - app_env ∈ {"test", "testing", "ci"} => se favorecen in-memory adapters.
    """
    return get_settings().is_test()


def _session_duration() -> timedelta:
    return timedelta(hours=get_settings().session_duration_hours)


# =============================================================================
# Repositorios (singletons)
# =============================================================================


@lru_cache(maxsize=1)
def get_user_repository() -> UserRepository:
    """Repositorio de usuarios (in-memory en test; Postgres en runtime)."""
    if _is_test_env():
        return InMemoryUserRepository()
    return PostgresUserRepository()


@lru_cache(maxsize=1)
def get_session_repository() -> SessionRepository:
    if _is_test_env():
        return InMemorySessionRepository()
    return PostgresSessionRepository()


@lru_cache(maxsize=1)
def get_activation_token_repository() -> ActivationTokenRepository:
    if _is_test_env():
        return InMemoryActivationTokenRepository()
    return PostgresActivationTokenRepository()


@lru_cache(maxsize=1)
def get_audit_repository() -> AuditEventRepository:
    """Repositorio de auditoría (escribe dentro de la transacción del caso de uso)."""
    if _is_test_env():
        return InMemoryAuditEventRepository()
    return PostgresAuditEventRepository()


@lru_cache(maxsize=1)
def get_unit_of_work() -> UnitOfWork:
    """
    Límite transaccional compartido por todos los casos de uso.

    En test, la UoW in-memory hace snapshot/restore de TODOS los repos para
    emular el rollback de PostgreSQL.
    """
    if _is_test_env():
        return InMemoryUnitOfWork(
            [
                get_user_repository(),
                get_session_repository(),
                get_activation_token_repository(),
                get_audit_repository(),
            ]
        )
    return PostgresUnitOfWork()


# =============================================================================
# Servicios (singletons)
# =============================================================================


@lru_cache(maxsize=1)
def get_password_hasher() -> PasswordHasher:
    return Argon2PasswordHasher()


@lru_cache(maxsize=1)
def get_event_bus() -> EventBus:
    """Event bus in-process con el suscriptor de auditoría registrado."""
    bus = EventBus()
    register_audit_handler(bus, get_audit_repository())
    return bus


@lru_cache(maxsize=1)
def get_login_limiter() -> AttemptLimiter:
    settings = get_settings()
    return AttemptLimiter(
        settings.login_max_attempts,
        timedelta(seconds=settings.login_window_seconds),
        timedelta(seconds=settings.login_lockout_seconds),
    )


@lru_cache(maxsize=1)
def get_register_limiter() -> AttemptLimiter:
    settings = get_settings()
    return AttemptLimiter(
        settings.register_max_attempts,
        timedelta(seconds=settings.register_window_seconds),
        timedelta(seconds=settings.register_lockout_seconds),
    )


# =============================================================================
# Casos de uso: auth
# =============================================================================


def get_login_use_case() -> LoginUseCase:
    return LoginUseCase(
        get_user_repository(),
        get_session_repository(),
        get_unit_of_work(),
        get_password_hasher(),
        get_event_bus(),
        get_login_limiter(),
        session_duration=_session_duration(),
    )


def get_register_use_case() -> RegisterUseCase:
    return RegisterUseCase(
        get_user_repository(),
        get_session_repository(),
        get_unit_of_work(),
        get_password_hasher(),
        get_event_bus(),
        get_register_limiter(),
        session_duration=_session_duration(),
        allow_unicode_names=get_settings().allow_unicode_names,
    )


def get_logout_use_case() -> LogoutUseCase:
    return LogoutUseCase(get_session_repository(), get_unit_of_work(), get_event_bus())


def get_validate_session_use_case() -> ValidateSessionUseCase:
    return ValidateSessionUseCase(
        get_session_repository(),
        get_user_repository(),
        get_unit_of_work(),
        get_event_bus(),
    )


def get_refresh_session_use_case() -> RefreshSessionUseCase:
    return RefreshSessionUseCase(
        get_session_repository(),
        get_unit_of_work(),
        session_duration=_session_duration(),
    )


def get_change_password_use_case() -> ChangePasswordUseCase:
    return ChangePasswordUseCase(
        get_user_repository(),
        get_session_repository(),
        get_unit_of_work(),
        get_password_hasher(),
        get_event_bus(),
    )


def get_list_user_sessions_use_case() -> ListUserSessionsUseCase:
    return ListUserSessionsUseCase(get_session_repository())


def get_cleanup_expired_sessions_use_case() -> CleanupExpiredSessionsUseCase:
    return CleanupExpiredSessionsUseCase(get_session_repository())


# =============================================================================
# Casos de uso: users
# =============================================================================


def get_create_user_use_case() -> CreateUserUseCase:
    return CreateUserUseCase(
        get_user_repository(),
        get_unit_of_work(),
        get_password_hasher(),
        get_event_bus(),
        allow_unicode_names=get_settings().allow_unicode_names,
    )


def get_get_user_use_case() -> GetUserUseCase:
    return GetUserUseCase(get_user_repository())


def get_get_user_by_email_use_case() -> GetUserByEmailUseCase:
    return GetUserByEmailUseCase(get_user_repository())


def get_list_users_use_case() -> ListUsersUseCase:
    return ListUsersUseCase(get_user_repository())


def get_update_user_use_case() -> UpdateUserUseCase:
    return UpdateUserUseCase(
        get_user_repository(),
        get_unit_of_work(),
        get_event_bus(),
        allow_unicode_names=get_settings().allow_unicode_names,
    )


def get_update_user_email_use_case() -> UpdateUserEmailUseCase:
    return UpdateUserEmailUseCase(
        get_user_repository(), get_unit_of_work(), get_event_bus()
    )


def get_change_user_password_use_case() -> ChangeUserPasswordUseCase:
    return ChangeUserPasswordUseCase(
        get_user_repository(),
        get_unit_of_work(),
        get_password_hasher(),
        get_event_bus(),
    )


def get_change_user_status_use_case() -> ChangeUserStatusUseCase:
    return ChangeUserStatusUseCase(
        get_user_repository(), get_unit_of_work(), get_event_bus()
    )


def get_delete_user_use_case() -> DeleteUserUseCase:
    return DeleteUserUseCase(get_user_repository(), get_unit_of_work(), get_event_bus())


# =============================================================================
# Casos de uso: activation
# =============================================================================


def get_request_activation_use_case() -> RequestActivationUseCase:
    return RequestActivationUseCase(
        get_user_repository(),
        get_activation_token_repository(),
        get_unit_of_work(),
        get_event_bus(),
        token_ttl=timedelta(hours=get_settings().activation_token_ttl_hours),
    )


def get_activate_user_use_case() -> ActivateUserUseCase:
    return ActivateUserUseCase(
        get_user_repository(),
        get_activation_token_repository(),
        get_unit_of_work(),
        get_event_bus(),
    )


def get_deactivate_user_use_case() -> DeactivateUserUseCase:
    return DeactivateUserUseCase(
        get_user_repository(),
        get_activation_token_repository(),
        get_unit_of_work(),
        get_event_bus(),
    )


def get_cleanup_expired_tokens_use_case() -> CleanupExpiredTokensUseCase:
    return CleanupExpiredTokensUseCase(get_activation_token_repository())


# =============================================================================
# Tests
# =============================================================================

_CACHED_FACTORIES = (
    get_user_repository,
    get_session_repository,
    get_activation_token_repository,
    get_audit_repository,
    get_unit_of_work,
    get_password_hasher,
    get_event_bus,
    get_login_limiter,
    get_register_limiter,
)


def reset_container() -> None:
    """Limpia los singletons (tests cambian APP_ENV / settings entre casos)."""
    for factory in _CACHED_FACTORIES:
        factory.cache_clear()
