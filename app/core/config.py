from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings (environment variables / .env)"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    environment: str = "development"

    # Gemini
    gemini_api_key: str | None = None
    gemini_model: str = "gemini-2.5-flash"
    gemini_max_concurrent: int = 2
    gemini_max_retries: int = 3
    gemini_timeout_seconds: float = 60.0

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:5173"

    # Test sessions
    local_match_threshold: int = 3
    session_ttl_seconds: int = 3600
    timer_interval_seconds: float = 1.0

    @property
    def allowed_origins_list(self) -> list[str]:
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]


settings = Settings()
