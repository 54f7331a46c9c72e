"""
LaunchSense Configuration.

Pydantic Settings v2 — loads from .env, environment variables.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── Application ──────────────────────────────────────────────────────
    app_name: str = "LaunchSense"
    app_version: str = "1.0.0"
    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")

    # ── Database ─────────────────────────────────────────────────────────
    database_url: str = Field(
        default="sqlite+aiosqlite:///./launchsense.db",
        alias="DATABASE_URL",
    )
    db_pool_size: int = Field(default=10, alias="DB_POOL_SIZE")
    db_max_overflow: int = Field(default=20, alias="DB_MAX_OVERFLOW")
    db_pool_recycle: int = Field(default=3600, alias="DB_POOL_RECYCLE")

    # ── Risk Model ────────────────────────────────────────────────────────
    short_session_minutes: float = Field(default=8.0, alias="SHORT_SESSION_MINUTES")
    early_quit_rate_threshold: float = Field(default=0.4, alias="EARLY_QUIT_RATE_THRESHOLD")
    avg_deaths_threshold: float = Field(default=5.0, alias="AVG_DEATHS_THRESHOLD")
    restart_rate_threshold: float = Field(default=0.35, alias="RESTART_RATE_THRESHOLD")

    weight_short_sessions: float = Field(default=30.0, alias="RISK_WEIGHT_SHORT_SESSIONS")
    weight_early_quit: float = Field(default=25.0, alias="RISK_WEIGHT_EARLY_QUIT")
    weight_difficulty: float = Field(default=25.0, alias="RISK_WEIGHT_DIFFICULTY")
    weight_frustration: float = Field(default=20.0, alias="RISK_WEIGHT_FRUSTRATION")

    # Decision bands
    iterate_threshold: float = Field(default=40.0, alias="ITERATE_THRESHOLD")
    kill_threshold: float = Field(default=70.0, alias="KILL_THRESHOLD")

    # ── Temporal ──────────────────────────────────────────────────────────
    temporal_min_points: int = Field(default=3, ge=2, alias="TEMPORAL_MIN_POINTS")
    trend_threshold: float = Field(default=2.0, alias="TREND_THRESHOLD")
    shock_threshold: float = Field(default=25.0, alias="SHOCK_THRESHOLD")
    history_limit: int = Field(
        default=20, alias="HISTORY_LIMIT",
        description="Past decisions fetched per game when history is not supplied",
    )

    # ── Rule Store ────────────────────────────────────────────────────────
    strict_rule_store: bool = Field(
        default=False, alias="STRICT_RULE_STORE",
        description="Fail the pipeline when the rule store is unreachable",
    )

    # ── Operational ────────────────────────────────────────────────────────
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: str = Field(default="console", alias="LOG_FORMAT")
    slow_pipeline_seconds: float = Field(default=1.5, alias="SLOW_PIPELINE_SECONDS")

    @property
    def async_database_url(self) -> str:
        """Ensure the database URL uses an async driver."""
        url = self.database_url
        if url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        if url.startswith("sqlite://"):
            url = url.replace("sqlite://", "sqlite+aiosqlite://", 1)
        return url


settings = Settings()
