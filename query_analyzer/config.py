from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    # Application settings
    app_name: str = "Query Analyzer"
    environment: str = "development"

    # Database settings
    database_url: Optional[str] = None

    # Analyzer gating
    analyzer_enabled: Optional[bool] = None
    analyzer_environment: Optional[str] = None
    slow_query_threshold_ms: float = 1000

    # Report settings
    report_dir: str = "analyzer"

    # EXPLAIN options
    explain_verbose: bool = False
    explain_costs: bool = False
    explain_settings: bool = False
    explain_buffers: bool = False
    explain_serialize: Literal["NONE", "TEXT", "BINARY"] = "NONE"
    explain_wal: bool = False
    explain_timing: bool = False
    explain_summary: bool = False

    # Logging settings
    log_level: str = "INFO"
    log_json: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


settings = Settings()
