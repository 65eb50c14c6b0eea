"""Application settings and configuration.

This module defines all configuration options for the Debate Stage application.
Settings are loaded from environment variables with sensible defaults.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Debate Stage", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")

    # Security and authentication
    secret_key: str = Field(alias="SECRET_KEY")
    debug: bool = Field(default=False, alias="DEBUG")

    # Database configuration
    database_url: str = Field(default="sqlite:///./debate_stage.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # JWT authentication settings
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60 * 24 * 7,
        alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )

    # Claim score aggregation
    score_eligible_statuses: list[str] = Field(
        default=["approved"],
        alias="SCORE_ELIGIBLE_STATUSES",
    )
    claim_score_policy: Literal["net_votes", "weighted_position"] = Field(
        default="net_votes",
        alias="CLAIM_SCORE_POLICY",
    )
    evidence_position_weight: float = Field(default=1.0, alias="EVIDENCE_POSITION_WEIGHT")
    perspective_position_weight: float = Field(
        default=0.5,
        alias="PERSPECTIVE_POSITION_WEIGHT",
    )
    # Children with more total votes than this count double under weighted scoring.
    weighted_vote_threshold: int = Field(default=10, alias="WEIGHTED_VOTE_THRESHOLD")

    perspective_auto_approve: bool = Field(default=True, alias="PERSPECTIVE_AUTO_APPROVE")

    # Notification dispatch (bounded queue, retried off the request path)
    notification_queue_size: int = Field(default=1000, alias="NOTIFICATION_QUEUE_SIZE")
    notification_max_retries: int = Field(default=3, alias="NOTIFICATION_MAX_RETRIES")
    notification_retry_backoff_seconds: float = Field(
        default=0.5,
        alias="NOTIFICATION_RETRY_BACKOFF_SECONDS",
    )
    notification_timeout_seconds: float = Field(
        default=2.0,
        alias="NOTIFICATION_TIMEOUT_SECONDS",
    )

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides."""
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url


settings = Settings()  # type: ignore[call-arg]
