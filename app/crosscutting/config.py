"""
Name: Application Configuration (Settings)

Responsibilities:
  - Centralized, typed configuration using pydantic-settings
  - Validate environment variables at startup
  - Provide defaults for sessions, CSRF, activation tokens and rate limits

Collaborators:
  - api/main.py: reads settings for CORS, pool sizing and startup validation
  - container.py: reads settings for adapters and use case parameters
  - crosscutting/csrf.py, identity/session_auth.py: cookie configuration

Constraints:
  - Lives in API/infrastructure layer, NOT in domain/application
  - No business logic - pure configuration

Notes:
  - Uses pydantic-settings for env parsing and validation
  - Singleton via lru_cache for performance
"""

from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        database_url: PostgreSQL connection string
        app_env: Application environment (development/test/production)
        api_prefix: Prefix for the versioned API (default: /api/v1)
        allowed_origins: Comma-separated CORS origins
        session_duration_hours: Session lifetime and cookie max-age (default: 24)
        session_cookie_name: Cookie that carries the session id
        session_cookie_secure: Set Secure on session/CSRF cookies
        csrf_protected_prefixes: Comma-separated path prefixes guarded by CSRF
        activation_token_ttl_hours: Activation token lifetime (default: 24)
        allow_unicode_names: Accept non-ASCII letters in first/last names
        admin_token: Shared secret for maintenance endpoints (empty = disabled)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Required (no defaults)
    database_url: str

    # Environment
    app_env: str = "development"
    api_prefix: str = "/api/v1"

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    # CORS configuration
    allowed_origins: str = "http://localhost:3000"
    cors_allow_credentials: bool = True

    # Security - Hardening
    max_body_bytes: int = 1 * 1024 * 1024  # 1MB

    # Database - Connection Pool
    db_pool_min_size: int = 2
    db_pool_max_size: int = 10
    db_statement_timeout_ms: int = 30000  # 30 seconds
    db_slow_query_seconds: float = 0.25
    db_healthcheck_on_acquire: bool = False

    # Sessions
    session_duration_hours: int = 24
    session_cookie_name: str = "session_id"
    session_cookie_secure: bool = False

    # CSRF (double submit)
    csrf_cookie_name: str = "csrf_token"
    csrf_header_name: str = "X-CSRF-Token"
    csrf_form_field: str = "_csrf_token"
    csrf_token_ttl_seconds: int = 3600
    csrf_protected_prefixes: str = "/api/v1/auth"

    # Users / activation
    activation_token_ttl_hours: int = 24
    allow_unicode_names: bool = False

    # Rate limiting (login / registration attempts)
    login_max_attempts: int = 5
    login_window_seconds: int = 15 * 60
    login_lockout_seconds: int = 30 * 60
    register_max_attempts: int = 3
    register_window_seconds: int = 60 * 60
    register_lockout_seconds: int = 2 * 60 * 60

    # Maintenance endpoints
    admin_token: str = ""

    @field_validator(
        "session_duration_hours",
        "activation_token_ttl_hours",
        "csrf_token_ttl_seconds",
    )
    @classmethod
    def durations_must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("durations must be greater than 0")
        return v

    @field_validator("login_max_attempts", "register_max_attempts")
    @classmethod
    def attempts_must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("max attempts must be greater than 0")
        return v

    @field_validator("api_prefix")
    @classmethod
    def normalize_prefix(cls, v: str) -> str:
        prefix = (v or "").strip().rstrip("/")
        if prefix and not prefix.startswith("/"):
            prefix = f"/{prefix}"
        return prefix

    def get_allowed_origins_list(self) -> list[str]:
        """Parse comma-separated origins into a list."""
        return [
            origin.strip()
            for origin in self.allowed_origins.split(",")
            if origin.strip()
        ]

    def get_csrf_protected_prefixes(self) -> list[str]:
        """Parse comma-separated CSRF path prefixes into a list."""
        return [
            prefix.strip().rstrip("/")
            for prefix in self.csrf_protected_prefixes.split(",")
            if prefix.strip()
        ]

    @model_validator(mode="after")
    def validate_security_requirements(self):
        if not self.is_production():
            return self

        if not self.session_cookie_secure:
            raise ValueError("SESSION_COOKIE_SECURE must be true in production")

        insecure_tokens = {"changeme", "change-me", "admin", "password"}
        admin_token = (self.admin_token or "").strip()
        if admin_token and (admin_token in insecure_tokens or len(admin_token) < 32):
            raise ValueError(
                "ADMIN_TOKEN must be at least 32 characters and non-default in production"
            )

        return self

    def is_production(self) -> bool:
        return self.app_env.strip().lower() == "production"

    def is_test(self) -> bool:
        return self.app_env.strip().lower() in {"test", "testing", "ci"}


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() in tests to reset.
    """
    return Settings()
