from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuración del servicio, leída desde variables de entorno o .env"""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: str = "sqlite:///./certmgmt.db"

    # Secreto simétrico para el payload embebido en los PDF; cambiarlo invalida
    # todas las marcas de agua emitidas previamente.
    qr_secret: str = "change-me"

    blob_dir: str = "uploads"
    max_file_size: int = 10 * 1024 * 1024  # 10 MB

    jwt_secret_key: str = "your-secret-key-here"
    jwt_algorithm: str = "HS256"

    log_level: str = "INFO"
    cors_origins: List[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]


@lru_cache
def get_settings() -> Settings:
    return Settings()
