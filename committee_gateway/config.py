"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Storage
    storage_backend: str = "json"  # json | mysql
    data_file: str = "data.json"
    database_url: str = "mysql+pymysql://root:@localhost:3306/tierra_esperanza"

    # Accounts
    default_user_password: str = "te2024"
    default_admin_password: str = "Lio061624"

    # Assemblies
    quorum_threshold_percent: int = 50

    # Service
    service_name: str = "committee-gateway"
    log_level: str = "INFO"

    # HTTP Client
    api_base_url: str = "http://localhost:3000"
    http_timeout_seconds: float = 15.0
    client_max_retries: int = 3
    client_backoff_base: float = 1.0  # Exponential backoff base in seconds


settings = Settings()
