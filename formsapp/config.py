from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    host: str = "127.0.0.1"
    port: int = 9000
    store_file: Path = Path("formsapp.json")
    log_level: str = "INFO"
    flash_duration: float = 0.6  # seconds a dropped question stays highlighted
    api_base_url: str = "http://127.0.0.1:9000"
    request_timeout: float = 10.0

    model_config = {"env_prefix": "FORMSAPP_", "env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
