"""
Name: Authentication Use Case Tests

Responsibilities:
  - Login (credentials, status rules, rate limiting, session + event)
  - Register (validation, common passwords, per-IP limit, duplicate email)
  - Session validation / refresh / logout / listing / cleanup
  - Password change revokes every session

Collaborators:
  - In-memory repositories + InMemoryUnitOfWork (conftest)
  - AttemptLimiter with generous or tight limits per test
"""

from datetime import datetime, timedelta, timezone

import pytest
from app.application.rate_limiting import AttemptLimiter
from app.application.usecases import (
    AuthErrorCode,
    ChangePasswordInput,
    ChangePasswordUseCase,
    CleanupExpiredSessionsUseCase,
    ListUserSessionsUseCase,
    LoginInput,
    LoginUseCase,
    LogoutUseCase,
    RefreshSessionUseCase,
    RegisterInput,
    RegisterUseCase,
    ValidateSessionUseCase,
)
from app.domain.users import UserStatus

pytestmark = pytest.mark.unit

PASSWORD = "Str0ngPassw0rd"


def _limiter(max_attempts: int = 5) -> AttemptLimiter:
    return AttemptLimiter(max_attempts, timedelta(minutes=15), timedelta(minutes=30))


@pytest.fixture
def login(users, sessions, uow, hasher, bus):
    return LoginUseCase(users, sessions, uow, hasher, bus, _limiter(3))


@pytest.fixture
def register(users, sessions, uow, hasher, bus):
    return RegisterUseCase(users, sessions, uow, hasher, bus, _limiter(3))


def _register_input(email: str = "ada@example.com", **overrides) -> RegisterInput:
    data = dict(
        email=email,
        password=PASSWORD,
        first_name="Ada",
        last_name="Lovelace",
        ip_address="10.0.0.1",
        user_agent="pytest",
    )
    data.update(overrides)
    return RegisterInput(**data)


class TestLogin:
    def test_success_creates_session_and_event(self, login, sessions, audit, user_factory):
        user = user_factory.create(email="ada@example.com")

        result = login.execute(
            LoginInput(
                email=" ADA@example.com",
                password=PASSWORD,
                ip_address="10.0.0.1",
                user_agent="pytest",
            )
        )

        assert result.error is None
        assert result.user.id == user.id
        assert sessions.get_by_id(result.session.id) is not None
        assert result.session.ip_address == "10.0.0.1"
        assert audit.event_types() == ["auth.user.logged_in"]

    def test_unknown_email_is_invalid_credentials(self, login):
        result = login.execute(LoginInput(email="ghost@example.com", password=PASSWORD))
        assert result.error.code == AuthErrorCode.INVALID_CREDENTIALS
        assert result.error.message == "Invalid email or password"

    def test_wrong_password_is_invalid_credentials(self, login, user_factory):
        user_factory.create(email="ada@example.com")
        result = login.execute(LoginInput(email="ada@example.com", password="Wr0ngPass"))
        assert result.error.code == AuthErrorCode.INVALID_CREDENTIALS

    def test_suspended_account(self, login, user_factory):
        user_factory.create(email="ada@example.com", status=UserStatus.SUSPENDED)
        result = login.execute(LoginInput(email="ada@example.com", password=PASSWORD))
        assert result.error.code == AuthErrorCode.ACCOUNT_SUSPENDED

    def test_inactive_account_looks_like_bad_credentials(self, login, user_factory):
        user_factory.create(email="ada@example.com", status=UserStatus.INACTIVE)
        result = login.execute(LoginInput(email="ada@example.com", password=PASSWORD))
        assert result.error.code == AuthErrorCode.INVALID_CREDENTIALS

    def test_validation(self, login):
        result = login.execute(LoginInput(email="", password=""))
        assert result.error.code == AuthErrorCode.VALIDATION_ERROR
        assert {d["field"] for d in result.error.details} == {"email", "password"}

    def test_lockout_after_failures_even_with_right_password(self, login, user_factory):
        user_factory.create(email="ada@example.com")
        for _ in range(3):
            login.execute(LoginInput(email="ada@example.com", password="Wr0ngPass"))

        result = login.execute(LoginInput(email="ada@example.com", password=PASSWORD))

        assert result.error.code == AuthErrorCode.RATE_LIMIT_EXCEEDED
        assert result.error.retry_after == 30 * 60
        assert "Too many attempts" in result.error.message

    def test_success_resets_failures(self, users, sessions, uow, hasher, bus, user_factory):
        limiter = _limiter(3)
        use_case = LoginUseCase(users, sessions, uow, hasher, bus, limiter)
        user_factory.create(email="ada@example.com")

        use_case.execute(LoginInput(email="ada@example.com", password="Wr0ngPass"))
        use_case.execute(LoginInput(email="ada@example.com", password=PASSWORD))

        assert limiter.attempts("login:ada@example.com") == 0


class TestRegister:
    def test_success(self, register, users, sessions, audit):
        result = register.execute(_register_input())

        assert result.error is None
        assert users.get_by_email("ada@example.com") is not None
        assert sessions.get_by_id(result.session.id).user_id == result.user.id
        assert audit.event_types() == ["user.created", "auth.user.registered"]

    def test_common_password_rejected(self, register):
        result = register.execute(_register_input(password="password123"))

        assert result.error.code == AuthErrorCode.VALIDATION_ERROR
        messages = [d["message"] for d in result.error.details]
        assert "password is too common, please choose a stronger password" in messages

    def test_duplicate_email(self, register):
        register.execute(_register_input())
        result = register.execute(_register_input(email="ADA@example.com"))
        assert result.error.code == AuthErrorCode.USER_ALREADY_EXISTS

    def test_every_attempt_counts_towards_ip_limit(self, register):
        for i in range(3):
            assert register.execute(_register_input(email=f"u{i}@example.com")).error is None

        result = register.execute(_register_input(email="u4@example.com"))

        assert result.error.code == AuthErrorCode.RATE_LIMIT_EXCEEDED

    def test_other_ip_is_not_limited(self, register):
        for i in range(3):
            register.execute(_register_input(email=f"u{i}@example.com"))

        result = register.execute(
            _register_input(email="other@example.com", ip_address="10.0.0.2")
        )

        assert result.error is None

    def test_invalid_input_does_not_consume_attempts(self, users, sessions, uow, hasher, bus):
        limiter = _limiter(3)
        use_case = RegisterUseCase(users, sessions, uow, hasher, bus, limiter)

        use_case.execute(_register_input(email="bad"))

        assert limiter.attempts("register:10.0.0.1") == 0


class TestValidateSession:
    def test_valid(self, users, sessions, uow, bus, user_factory, session_for):
        user = user_factory.create()
        session = session_for(user)

        result = ValidateSessionUseCase(sessions, users, uow, bus).execute(session.id)

        assert result.valid
        assert result.user.id == user.id

    def test_unknown_session(self, users, sessions, uow, bus):
        assert not ValidateSessionUseCase(sessions, users, uow, bus).execute("nope").valid

    def test_empty_id(self, users, sessions, uow, bus):
        assert not ValidateSessionUseCase(sessions, users, uow, bus).execute("").valid

    def test_expired_session_is_removed_and_audited(
        self, users, sessions, uow, bus, audit, user_factory, session_for
    ):
        user = user_factory.create()
        session = session_for(user)
        session.expires_at = datetime.now(timezone.utc) - timedelta(seconds=1)
        sessions.update(session)

        result = ValidateSessionUseCase(sessions, users, uow, bus).execute(session.id)

        assert not result.valid
        assert sessions.get_by_id(session.id) is None
        assert audit.event_types() == ["auth.session.expired"]

    def test_inactive_user_invalidates_session(
        self, users, sessions, uow, bus, user_factory, session_for
    ):
        user = user_factory.create(status=UserStatus.SUSPENDED)
        session = session_for(user)

        result = ValidateSessionUseCase(sessions, users, uow, bus).execute(session.id)

        assert not result.valid


class TestSessionLifecycle:
    def test_refresh_extends(self, sessions, uow, user_factory, session_for):
        user = user_factory.create()
        session = session_for(user, duration=timedelta(minutes=1))

        result = RefreshSessionUseCase(
            sessions, uow, session_duration=timedelta(hours=24)
        ).execute(session.id)

        assert result.error is None
        assert sessions.get_by_id(session.id).expires_at > session.expires_at

    def test_refresh_unknown(self, sessions, uow):
        result = RefreshSessionUseCase(sessions, uow).execute("missing")
        assert result.error.code == AuthErrorCode.SESSION_EXPIRED

    def test_logout(self, sessions, uow, bus, audit, user_factory, session_for):
        session = session_for(user_factory.create())

        result = LogoutUseCase(sessions, uow, bus).execute(session.id)

        assert result.error is None
        assert sessions.get_by_id(session.id) is None
        assert audit.list_events()[0].details["logout_type"] == "manual"

    def test_logout_unknown(self, sessions, uow, bus):
        result = LogoutUseCase(sessions, uow, bus).execute("missing")
        assert result.error.code == AuthErrorCode.SESSION_NOT_FOUND

    def test_list_only_valid_sessions(self, sessions, user_factory, session_for):
        user = user_factory.create()
        keep = session_for(user)
        expired = session_for(user)
        expired.expires_at = datetime.now(timezone.utc) - timedelta(minutes=1)
        sessions.update(expired)

        result = ListUserSessionsUseCase(sessions).execute(user.id)

        assert [s.id for s in result.sessions] == [keep.id]

    def test_cleanup_expired(self, sessions, user_factory, session_for):
        user = user_factory.create()
        session_for(user)
        expired = session_for(user)
        expired.expires_at = datetime.now(timezone.utc) - timedelta(minutes=1)
        sessions.update(expired)

        assert CleanupExpiredSessionsUseCase(sessions).execute() == 1


class TestChangePassword:
    def test_revokes_all_sessions(
        self, users, sessions, uow, hasher, bus, audit, user_factory, session_for
    ):
        user = user_factory.create()
        session_for(user)
        session_for(user)

        result = ChangePasswordUseCase(users, sessions, uow, hasher, bus).execute(
            ChangePasswordInput(
                user_id=user.id, old_password=PASSWORD, new_password="N3wPassw0rd!"
            )
        )

        assert result.error is None
        assert result.sessions_revoked == 2
        assert sessions.get_by_user_id(user.id) == []
        stored = users.get_by_id(user.id)
        assert stored.version == 2
        assert hasher.verify("N3wPassw0rd!", stored.password_hash)
        assert audit.list_events()[0].details["sessions_revoked"] == 2

    def test_same_password_rejected(self, users, sessions, uow, hasher, bus, user_factory):
        user = user_factory.create()

        result = ChangePasswordUseCase(users, sessions, uow, hasher, bus).execute(
            ChangePasswordInput(user_id=user.id, old_password=PASSWORD, new_password=PASSWORD)
        )

        assert result.error.code == AuthErrorCode.VALIDATION_ERROR
        assert result.error.field == "new_password"

    def test_wrong_old_password(
        self, users, sessions, uow, hasher, bus, user_factory, session_for
    ):
        user = user_factory.create()
        session = session_for(user)

        result = ChangePasswordUseCase(users, sessions, uow, hasher, bus).execute(
            ChangePasswordInput(
                user_id=user.id, old_password="Wr0ngPassw0rd", new_password="N3wPassw0rd!"
            )
        )

        assert result.error.code == AuthErrorCode.INVALID_CREDENTIALS
        assert sessions.get_by_id(session.id) is not None
