"""
Name: Application Configuration (Settings)

Responsibilities:
  - Centralized, typed configuration using pydantic-settings
  - Validate environment variables at startup
  - Provide defaults for local development and tests

Collaborators:
  - api/main.py: reads settings for CORS, pool and bootstrap admins
  - container.py: picks in-memory/fake adapters and Google credentials
  - identity/auth_users.py: JWT secret, TTL and cookie settings

Constraints:
  - Lives in API/infrastructure layer, NOT in domain/application
  - No business logic, pure configuration

Notes:
  - Uses pydantic-settings for env parsing and validation
  - Singleton via lru_cache
"""

from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_TEST_ENVS = {"test", "testing", "ci"}


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        database_url: PostgreSQL connection string (optional only in test envs)
        app_env: Application environment (development/test/production)
        allowed_origins: Comma-separated CORS origins
        log_level: Logger level (default: INFO)
        log_json: Emit JSON logs (default: True)
        jwt_secret: Secret for signing JWT access tokens
        jwt_access_ttl_minutes: Access token TTL in minutes (default: 7 days)
        google_client_id: OAuth client id (audience of Google ID tokens)
        google_client_secret: OAuth client secret (Calendar refresh exchange)
        google_refresh_token: Refresh token of the calendar owner account
        google_calendar_id: Calendar where demo events are created
        meeting_provider_timeout_seconds: Deadline for the Calendar call
        meeting_link_host: Host used by locally generated fallback links
        retry_max_attempts: Attempts for transient Google API failures
        retry_base_delay_seconds: Initial backoff between attempts
        retry_max_delay_seconds: Backoff ceiling
        fake_identity: Accept fake:<email> tokens instead of Google tokens
        fake_meetings: Use the fake meeting provisioner
        bootstrap_admin_emails: Comma-separated emails pre-assigned to admin
        max_notes_chars: Maximum length of slot/booking notes
    """

    database_url: str = ""

    # Environment
    app_env: str = "development"

    # CORS configuration
    allowed_origins: str = "http://localhost:3000"
    cors_allow_credentials: bool = False

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    # Security - JWT Auth
    jwt_secret: str = "dev-secret"
    jwt_access_ttl_minutes: int = 7 * 24 * 60
    jwt_cookie_name: str = "access_token"
    jwt_cookie_secure: bool = False

    # Database - Connection Pool
    db_pool_min_size: int = 2
    db_pool_max_size: int = 10
    db_statement_timeout_ms: int = 30000  # 30 seconds

    # Google (login + Calendar/Meet)
    google_client_id: str = ""
    google_client_secret: str = ""
    google_refresh_token: str = ""
    google_calendar_id: str = "primary"
    meeting_provider_timeout_seconds: float = 10.0
    meeting_link_host: str = "meet.google.com"

    # Retry (transient Google failures)
    retry_max_attempts: int = 2
    retry_base_delay_seconds: float = 0.2
    retry_max_delay_seconds: float = 1.0

    # Testing/CI
    fake_identity: bool = False
    fake_meetings: bool = False

    # Bootstrap
    bootstrap_admin_emails: str = ""

    # API limits
    max_notes_chars: int = 2_000

    @field_validator("jwt_access_ttl_minutes")
    @classmethod
    def ttl_must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("jwt_access_ttl_minutes must be greater than 0")
        return v

    @field_validator("meeting_provider_timeout_seconds")
    @classmethod
    def meeting_timeout_must_be_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("meeting_provider_timeout_seconds must be greater than 0")
        return v

    def get_allowed_origins_list(self) -> list[str]:
        """Parse comma-separated origins into a list."""
        return [
            origin.strip()
            for origin in self.allowed_origins.split(",")
            if origin.strip()
        ]

    def get_bootstrap_admin_emails(self) -> list[str]:
        """Parse comma-separated bootstrap admin emails (order kept, no dups)."""
        emails: list[str] = []
        for raw in self.bootstrap_admin_emails.split(","):
            email = raw.strip()
            if email and email not in emails:
                emails.append(email)
        return emails

    @model_validator(mode="after")
    def validate_database_requirements(self):
        if not self.database_url.strip() and not self.is_test_env():
            raise ValueError("DATABASE_URL is required outside test environments")
        return self

    @model_validator(mode="after")
    def validate_identity_requirements(self):
        if self.is_test_env() or self.fake_identity:
            return self
        if not self.google_client_id.strip():
            raise ValueError("GOOGLE_CLIENT_ID is required unless FAKE_IDENTITY=1")
        return self

    @model_validator(mode="after")
    def validate_security_requirements(self):
        if not self.is_production():
            return self

        insecure_secrets = {"dev-secret", "changeme", "change-me", "password"}
        jwt_secret = (self.jwt_secret or "").strip()
        if not jwt_secret or jwt_secret in insecure_secrets:
            raise ValueError(
                "JWT_SECRET must be set to a strong, non-default value in production"
            )
        if len(jwt_secret) < 32:
            raise ValueError("JWT_SECRET must be at least 32 characters in production")
        if not self.jwt_cookie_secure:
            raise ValueError("JWT_COOKIE_SECURE must be true in production")
        if self.fake_identity or self.fake_meetings:
            raise ValueError(
                "FAKE_IDENTITY/FAKE_MEETINGS are not allowed in production"
            )

        return self

    def is_production(self) -> bool:
        return self.app_env.strip().lower() == "production"

    def is_test_env(self) -> bool:
        return self.app_env.strip().lower() in _TEST_ENVS

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore unknown env vars
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get singleton Settings instance.

    Raises:
        ValidationError: If required env vars are missing or invalid
    """
    return Settings()
