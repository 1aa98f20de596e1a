from collections.abc import Callable, Iterable
from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

CredentialCheck = Callable[[str | None], bool]


def make_credential_check(placeholders: Iterable[str], min_length: int) -> CredentialCheck:
    """Build a predicate deciding whether an API key is worth sending upstream.

    A key is valid only if it is present, is not one of the known placeholder
    values and is at least ``min_length`` characters long.
    """
    rejected = frozenset(p.strip() for p in placeholders)

    def check(api_key: str | None) -> bool:
        if not api_key:
            return False
        key = api_key.strip()
        return key not in rejected and len(key) >= min_length

    return check


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    news_api_key: str | None = Field(default=None, description="NewsAPI key (optional)")

    tmdb_api_key: str | None = Field(default=None, description="TMDB API key (optional)")

    placeholder_api_keys: list[str] = Field(
        default=[
            "demo_key",
            "your_news_api_key_here",
            "your_tmdb_api_key_here",
            "77407bc80c6b4eb0a4d9bd14962fe690",
        ],
        description="Known placeholder or revoked keys that must never be sent upstream",
    )

    min_api_key_length: int = Field(
        default=11,
        ge=1,
        le=256,
        description="Shortest API key considered real",
    )

    news_base_url: str = Field(
        default="https://newsapi.org/v2",
        description="Base URL of the news provider",
    )

    news_country: str = Field(
        default="us",
        min_length=2,
        max_length=2,
        description="Country code for top headlines",
    )

    news_page_size: int = Field(
        default=20,
        ge=1,
        le=100,
        description="Number of articles requested per news call",
    )

    news_max_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts for transient news provider failures before falling back",
    )

    news_retry_wait_seconds: float = Field(
        default=0.5,
        ge=0,
        le=30.0,
        description="Base wait between news retries (exponential)",
    )

    tmdb_base_url: str = Field(
        default="https://api.themoviedb.org/3",
        description="Base URL of the movie provider",
    )

    tmdb_image_base_url: str = Field(
        default="https://image.tmdb.org/t/p/w500",
        description="Prefix for movie poster paths",
    )

    social_latency_seconds: float = Field(
        default=0.4,
        ge=0,
        le=10.0,
        description="Simulated latency of the social provider",
    )

    news_feed_limit: int = Field(
        default=8,
        ge=1,
        le=100,
        description="Maximum news items in a personalized feed",
    )

    movie_feed_limit: int = Field(
        default=6,
        ge=1,
        le=100,
        description="Maximum movie items in a personalized feed",
    )

    social_feed_limit: int = Field(
        default=8,
        ge=1,
        le=100,
        description="Maximum social items in a personalized feed",
    )

    search_limit_per_source: int = Field(
        default=5,
        ge=1,
        le=100,
        description="Maximum search results kept per source",
    )

    http_timeout_seconds: float = Field(
        default=10.0,
        ge=1.0,
        le=120.0,
        description="Timeout for HTTP requests in seconds",
    )

    source_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        le=300.0,
        description="Deadline for a single source call; exceeding it fails that source only",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    @field_validator("news_base_url", "tmdb_base_url", "tmdb_image_base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("Base URLs must use http or https")
        return v.rstrip("/")

    @field_validator("news_country")
    @classmethod
    def validate_country(cls, v: str) -> str:
        return v.lower()

    def credential_check(self) -> CredentialCheck:
        return make_credential_check(self.placeholder_api_keys, self.min_api_key_length)

    def __repr__(self) -> str:
        return (
            f"Settings("
            f"news_api_key={'*****' if self.news_api_key else None}, "
            f"tmdb_api_key={'*****' if self.tmdb_api_key else None}, "
            f"news_base_url={self.news_base_url!r}, "
            f"tmdb_base_url={self.tmdb_base_url!r}, "
            f"source_timeout_seconds={self.source_timeout_seconds!r}, "
            f"log_level={self.log_level!r}"
            f")"
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
