from pydantic_settings import BaseSettings
from typing import Optional



class Settings(BaseSettings):
    PROJECT_NAME: str = "Room Chat"
    DEBUG: bool = False

    DATABASE_URL: str = "sqlite+aiosqlite:///./roomchat.db"
    DB_ECHO: bool = False

    # Reflects the request origin back, like cors({ origin: true })
    CORS_ORIGIN_REGEX: str = ".*"
    GZIP_MINIMUM_SIZE: int = 500

    LOG_DIR: str = "logs"
    LOG_LEVEL: Optional[str] = None

    class Config:
        env_file = ".env"


settings = Settings()
