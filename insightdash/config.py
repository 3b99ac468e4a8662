from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    OPENAI_API_KEY: str = ""
    OPENAI_MODEL: str = "gpt-4o"
    OPENAI_TIMEOUT_SECONDS: float = 30.0
    AI_SUGGESTIONS_ENABLED: bool = True
    MAX_UPLOAD_MB: int = 50
    ALLOWED_ORIGINS: list[str] = ["http://localhost:3000"]
    CSV_ESCAPE_QUOTES: bool = False
    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False

    class Config:
        env_file = ".env"


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
