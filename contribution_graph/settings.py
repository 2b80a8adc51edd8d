from pydantic import Field
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict

from contribution_graph.models import LayoutOptions
from contribution_graph.models import MAX_LEVEL_LIMIT


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Values are read from process environment and optionally from `.env`.
    """

    sentry_dsn: str | None = None
    environment: str = "development"
    release: str | None = None
    sentry_traces_sample_rate: float = 0.1
    log_level: str = "INFO"
    rate_limit_per_minute: int = 30
    rate_limit_window_seconds: int = 60
    max_range_days: int = 3660

    block_size: int = Field(default=12, ge=0)
    block_margin: int = Field(default=4, ge=0)
    font_size: int = Field(default=14, ge=0)
    week_start: int = Field(default=0, ge=0, le=6)
    max_level: int = Field(default=4, le=MAX_LEVEL_LIMIT)

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    def default_layout_options(self) -> LayoutOptions:
        """Build layout options from the configured defaults."""

        return LayoutOptions(
            week_start=self.week_start,
            max_level=self.max_level,
            block_size=self.block_size,
            block_margin=self.block_margin,
            font_size=self.font_size,
        )
