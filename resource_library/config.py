"""Service configuration loaded from environment variables."""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Repository coordinates and service settings, read from env / ``.env``."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    app_name: str = "resource-library"
    debug: bool = False
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8080
    cors_origins: str = ""

    # Repository being browsed
    repo_owner: str = ""
    repo_name: str = ""
    # Empty branch means "use the repository's default branch"
    branch: str = ""
    github_token: str = ""

    # "tree": one recursive Git tree request (all depths).
    # "walk": root + one listing per top-level directory (two levels only).
    enumeration_strategy: Literal["tree", "walk"] = "tree"
    rebuild_on_startup: bool = True

    github_api_url: str = "https://api.github.com"
    github_web_url: str = "https://github.com"
    github_raw_url: str = "https://raw.githubusercontent.com"


settings = Settings()
