from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from textgrep.core.constants import DEFAULT_MAX_FILES_TO_SEARCH, DEFAULT_STREAM_THRESHOLD_BYTES


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="TEXTGREP_",
        case_sensitive=True,
        extra="ignore"
    )

    # --- PROJECT ---
    PROJECT_ROOT: str = str(Path.cwd())

    # --- ENGINE LIMITS ---
    STREAM_THRESHOLD_BYTES: int = DEFAULT_STREAM_THRESHOLD_BYTES
    MAX_FILES_TO_SEARCH: int = DEFAULT_MAX_FILES_TO_SEARCH

    # --- LOGGING ---
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True


settings = Settings()
