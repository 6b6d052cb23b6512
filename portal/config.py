"""
Application configuration loaded from environment variables.
Uses pydantic-settings for typed, validated config.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """All environment variables required by the application."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # ── Supabase ──────────────────────────────────────────────
    supabase_url: str
    supabase_key: str                # anon key (client-facing)
    supabase_service_role_key: str   # service role key (bypasses RLS)
    supabase_jwt_secret: str
    jwt_audience: str = "authenticated"

    # ── App ───────────────────────────────────────────────────
    app_name: str = "internship-portal"
    debug: bool = False
    log_level: str = "INFO"
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # ── Internship workflow ───────────────────────────────────
    # Reports for month M may be submitted from the 1st of M+1
    # until this day of M+1 (inclusive) without being flagged overdue.
    report_window_end_day: int = Field(10, ge=1, le=28)
    max_upload_bytes: int = 10 * 1024 * 1024
    signed_url_ttl_seconds: int = 900

    # ── Scheduler ─────────────────────────────────────────────
    scheduler_enabled: bool = True
    scheduler_timezone: str = "Asia/Kolkata"


# Singleton — import this wherever config is needed
settings = Settings()  # type: ignore[call-arg]
