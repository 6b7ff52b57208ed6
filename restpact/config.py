# restpact/config.py
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized, env-driven configuration for contract runs.
    Override via RESTPACT_* environment variables or a .env file at repo root.
    """
    log_level: str = Field(default="INFO")
    default_timeout_ms: int = Field(default=30000, gt=0)
    verify_ssl: bool = Field(default=True)
    follow_redirects: bool = Field(default=True)

    # Scheduling
    parallel: bool = Field(default=False)
    max_concurrency: int = Field(default=4, ge=1)
    suite_timeout_s: Optional[float] = Field(default=None, gt=0)

    # Reports
    reports_dir: str = Field(default="reports")
    write_reports: bool = Field(default=False)

    # Fake data
    faker_seed: Optional[int] = Field(default=None)
    faker_locale: str = Field(default="en_US")

    # External APIs under test
    fakestore_base_url: str = Field(default="https://fakestoreapi.com")
    simpleapi_base_url: str = Field(default="https://apichallenges.eviltester.com/simpleapi")
    openlibrary_base_url: str = Field(default="https://openlibrary.org")
    thetestrequest_base_url: str = Field(default="https://thetestrequest.com")

    model_config = SettingsConfigDict(
        env_prefix="RESTPACT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
