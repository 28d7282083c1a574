import os
import tempfile
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./inventory.db"
    APP_HOST: str = "127.0.0.1"
    APP_PORT: int = 5000
    FRONTEND_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5173"]
    LOW_STOCK_THRESHOLD: int = 5
    LOG_LEVEL: str = "INFO"
    LOCK_DIR: str = os.path.join(tempfile.gettempdir(), "inventory_locks")

    # used by the HTTP client and the CLI
    API_BASE_URL: str = "http://127.0.0.1:5000"
    CLIENT_TIMEOUT_SECONDS: float = 10.0

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

settings = Settings()
