from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Supabase
    supabase_url: str
    supabase_key: str
    feedback_table: str = "feedback"

    # Redis (optional)
    redis_url: str | None = None
    list_cache_ttl: int = 30  # секунды

    # App settings
    debug: bool = False
    log_level: str = "INFO"
    log_json: bool = False
    host: str = "0.0.0.0"
    port: int = 5001

    # Clients (dashboard, submission form)
    api_url: str = "http://localhost:5001"
    api_timeout: float = 10.0

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    return Settings()
