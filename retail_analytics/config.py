"""
Configuration settings for Retail Sales Analytics.

Uses Pydantic Settings to load environment variables for database connections,
logging, data sources, and report defaults.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Database
    db_host: str = Field("localhost", alias="DB_HOST")
    db_port: int = Field(5432, alias="DB_PORT")
    db_user: str = Field("postgres", alias="DB_USER")
    db_password: str = Field("postgres", alias="DB_PASSWORD")
    db_name: str = Field("retail_analytics", alias="DB_NAME")
    db_statement_timeout_ms: int = Field(30_000, alias="DB_STATEMENT_TIMEOUT_MS")

    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    # Data source
    data_source: Literal["csv", "db"] = Field("csv", alias="DATA_SOURCE")
    data_csv_path: str = Field("data/retail_sales.csv", alias="DATA_CSV_PATH")

    # Report defaults
    top_customers: int = Field(5, alias="TOP_CUSTOMERS", gt=0)
    high_value_threshold: int = Field(1000, alias="HIGH_VALUE_THRESHOLD", ge=0)
    results_dir: str = Field("results", alias="RESULTS_DIR")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
