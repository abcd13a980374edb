from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Values are read from process environment and optionally from `.env`.
    Without `GITHUB_TOKEN` contribution data is scraped from the public
    contributions page instead of the GraphQL API.
    """

    github_graphql_url: str = "https://api.github.com/graphql"
    github_base_url: str = "https://github.com"
    github_token: str | None = None
    default_theme: str = "github"
    chart_cache_max_age: int = 14400
    data_cache_max_age: int = 3600
    log_level: str = "INFO"
    sentry_dsn: str | None = None
    environment: str = "development"
    release: str | None = None
    sentry_traces_sample_rate: float = 0.1
    rate_limit_per_minute: int = 30
    rate_limit_window_seconds: int = 60

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


def get_settings() -> Settings:
    """Return settings for request handlers; overridable in tests."""

    return Settings()
