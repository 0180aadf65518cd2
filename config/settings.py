"""
Configuration settings for the Slangify translation API.
"""
from pydantic_settings import BaseSettings
from functools import lru_cache
from dotenv import load_dotenv
load_dotenv()

class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # API Configuration
    APP_NAME: str = "Slangify Translation API"
    APP_VERSION: str = "1.0.0"
    API_PREFIX: str = "/api"
    DEBUG: bool = False
    HOST: str = "127.0.0.1"
    PORT: int = 8000
    REQUEST_BODY_TIMEOUT: float = 30  # seconds to receive the whole request body

    # Operator kill switch: disables every upstream call immediately
    KILL_SWITCH_ENABLED: bool = False

    # Input limits
    MAX_CHARACTERS: int = 80
    MAX_WORDS: int = 20

    # Rate Limiting (per device / ip)
    RATE_LIMIT_REQUESTS: int = 10
    RATE_LIMIT_WINDOW: int = 60 * 60  # seconds

    # Caching
    CACHE_TTL: int = 24 * 60 * 60  # seconds
    CACHE_MAX_ENTRIES: int = 100

    # State store: "memory" or "redis"
    STORE_BACKEND: str = "memory"
    REDIS_URL: str = ""
    REDIS_KEY_PREFIX: str = "slangify:"

    # OpenAI API
    OPENAI_API_KEY: str = ""
    OPENAI_BASE_URL: str = "https://api.openai.com/v1"
    OPENAI_MODEL: str = "gpt-4o-mini"
    # 6 generations + slangWords need ~900-1200 tokens to avoid truncation
    OPENAI_MAX_TOKENS: int = 1100
    OPENAI_TEMPERATURE: float = 0.4
    UPSTREAM_TIMEOUT: int = 30  # seconds
    UPSTREAM_RETRY_AFTER: int = 30  # seconds, hint sent when the provider throttles us

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Application settings
    """
    return Settings()


# Export for easy imports
settings = get_settings()
