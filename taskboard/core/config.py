from functools import lru_cache

from dotenv import load_dotenv
from fastapi import Depends
from pydantic_settings import BaseSettings
from typing_extensions import Annotated

load_dotenv()


class Settings(BaseSettings):
    app_name: str = "Taskboard API"
    version: str = "1.0.0"
    environment: str = "development"  # development | production | test

    database_url: str = "sqlite+aiosqlite:///./taskboard.db"
    database_echo: bool = False

    host: str = "0.0.0.0"
    port: int = 4000
    api_prefix: str = "/api"
    cors_origins: list[str] = ["*"]

    log_level: str = "INFO"
    seed_categories: bool = True

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    return Settings()


SettingsDep = Annotated[Settings, Depends(get_settings)]
