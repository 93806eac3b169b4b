from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    app_name: str = Field("Fee Reconciliation Service", alias="APP_NAME")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    # Calendar month (1-12) on which a new academic year begins.
    academic_year_start_month: int = Field(6, ge=1, le=12, alias="ACADEMIC_YEAR_START_MONTH")
    year_options_before: int = Field(2, ge=0, alias="YEAR_OPTIONS_BEFORE")
    year_options_after: int = Field(2, ge=0, alias="YEAR_OPTIONS_AFTER")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()
