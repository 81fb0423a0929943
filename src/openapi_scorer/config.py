"""Runtime configuration using Pydantic Settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings, overridable through OPENAPI_SCORER_* variables."""

    model_config = SettingsConfigDict(env_prefix="OPENAPI_SCORER_", env_file=".env", extra="ignore")

    app_name: str = "OpenAPI Scorer"
    version: str = "1.0.0"
    log_level: str = "INFO"

    # Reports
    output_dir: str = "./reports"
    report_format: str = "all"

    # Document loading
    request_timeout: float = 30.0
    example_spec_url: str = "https://petstore3.swagger.io/api/v3/openapi.json"

    # HTTP server
    host: str = "127.0.0.1"
    port: int = 3001
    max_upload_size: int = 5 * 1024 * 1024  # 5MB


# Global settings instance
settings = Settings()
