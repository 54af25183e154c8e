"""Application configuration."""

from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from portal.domain.value import FetchOptions, ReactionId, SortOrder


class APISettings(BaseModel):
    """Portal REST API configuration."""

    base_url: str = "http://localhost:5000"
    timeout_seconds: float = 30.0


class AuthSettings(BaseModel):
    """Bearer tokens of the signed-in accounts.

    Either may be unset; the service selector only routes a call to a role
    whose session exists or that is explicitly requested.
    """

    admin_token: str | None = None
    student_token: str | None = None


class CommentSettings(BaseModel):
    """Comment listing and reaction defaults."""

    page_size: int = Field(default=50, ge=1, le=200)
    sort_by: str = "created_at"
    sort_order: SortOrder = SortOrder.ASC

    # Reaction applied by a plain "like"
    default_reaction_id: int = 1

    @property
    def fetch_options(self) -> FetchOptions:
        return FetchOptions(
            page=1,
            limit=self.page_size,
            sort_by=self.sort_by,
            sort_order=self.sort_order,
        )

    @property
    def reaction_id(self) -> ReactionId:
        return ReactionId(self.default_reaction_id)


class ClockSettings(BaseModel):
    """Trusted clock configuration."""

    # Seconds a fetched server time is reused for placeholders
    cache_ttl_seconds: float = 30.0


class ObservabilitySettings(BaseModel):
    """Observability configuration for Logfire."""

    # Logfire API token (optional - if not set, logs only go to console)
    # Can be set via OBSERVABILITY__LOGFIRE_TOKEN env var
    logfire_token: str | None = None

    # Whether to send telemetry to Logfire cloud
    # If None, will auto-determine: sends if token is present, otherwise console-only
    send_to_logfire: bool | None = None


class Settings(BaseSettings):
    """Application settings.

    Set environment variables to override, using `__` for nested values:

        ENVIRONMENT=production
        API__BASE_URL=https://portal.example.edu
        AUTH__STUDENT_TOKEN=...
        COMMENTS__PAGE_SIZE=20
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",  # Allows API__BASE_URL syntax
        extra="ignore",
    )

    environment: Literal["test", "development", "staging", "production"] = "development"
    debug: bool = False

    # Nested settings
    api: APISettings = APISettings()
    auth: AuthSettings = AuthSettings()
    comments: CommentSettings = CommentSettings()
    clock: ClockSettings = ClockSettings()
    observability: ObservabilitySettings = ObservabilitySettings()
