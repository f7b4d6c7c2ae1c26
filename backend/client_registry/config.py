from __future__ import annotations

from pydantic import BaseModel
from pydantic_settings import BaseSettings

# Fixed at build time; never taken from a request.
CLIENT_TABLE = "clientes"


class Settings(BaseSettings):
    app_name: str = "Registro de Clientes"
    debug: bool = False
    log_level: str = "INFO"
    api_path: str = "/api"

    # Any SQLAlchemy URL, e.g. postgresql+psycopg://postgres:pw@localhost:5432/clientes_bd
    database_url: str = "sqlite:///./clientes.db"

    cors_origins: str = "http://localhost:5173,http://127.0.0.1:5500"

    model_config = {"env_file": ".env"}


class StoreConfig(BaseModel):
    """Connection parameters handed to the record store at startup."""

    database_url: str
    echo: bool = False

    model_config = {"frozen": True}

    @classmethod
    def from_settings(cls, settings: Settings) -> StoreConfig:
        return cls(database_url=settings.database_url, echo=settings.debug)


settings = Settings()
