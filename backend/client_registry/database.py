from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from client_registry.config import StoreConfig

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


def _is_memory_sqlite(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in url


def build_engine(config: StoreConfig) -> Engine:
    connect_args = {}
    kwargs = {}
    if config.database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
        if _is_memory_sqlite(config.database_url):
            # Every connection must see the same in-memory database.
            kwargs["poolclass"] = StaticPool

    return create_engine(
        config.database_url,
        connect_args=connect_args,
        pool_pre_ping=True,
        echo=config.echo,
        **kwargs,
    )


def create_tables(engine: Engine) -> None:
    """Ensure the clients table exists; existing tables are left untouched."""
    import client_registry.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ensured (%d models registered)", len(Base.metadata.tables))
