from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Loading priority (highest to lowest):
    1. Environment variables
    2. .env file
    3. Default values below
    """

    # Environment
    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # Application
    app_name: str = "Link Stats"
    app_version: str = "1.0.0"

    # Database (links + analytics events)
    database_url: str = "sqlite:///./linkstats.db"

    # Link management
    base_url: str = "http://127.0.0.1:8000"
    short_url_length: int = 6
    max_retries: int = 5
    custom_code_max_length: int = 32

    # Short code generation strategy
    short_code_strategy: str = "base62"  # Options: "random", "base62"
    short_code_salt: int = 238328  # 62^3, keeps early codes at 4+ characters

    # Cache settings (link lookups on the visit path)
    cache_backend: str = "memory"  # Options: "redis", "memory", "null"
    redis_url: str = "redis://localhost:6379/0"
    cache_ttl: int = 300  # Seconds; short so expiry/activation changes show up quickly

    # Event store settings
    event_store_backend: str = "sqlalchemy"  # Options: "sqlalchemy", "memory"

    # Geolocation settings
    geolocation_backend: str = "static"  # Options: "ipapi", "static", "null"
    geolocation_base_url: str = "https://ipapi.co"
    geolocation_timeout: float = 2.0

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Create settings instance
settings = Settings()
