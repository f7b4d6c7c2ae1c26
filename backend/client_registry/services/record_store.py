"""Persistence for client records: one SELECT and one INSERT on the clients table.

Failures never leave this module as exceptions. Each operation returns either
``StoreOk`` carrying the value or ``StoreFailure`` carrying the error kind and
the driver's message.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING, Generic, TypeVar, Union

from pydantic import BaseModel
from sqlalchemy import select, text
from sqlalchemy.exc import DBAPIError, IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from client_registry.database import build_engine, create_tables
from client_registry.models.client import ClientRecord
from client_registry.schemas.client import ClientRecordInput, ClientRow
from client_registry.schemas.envelope import ErrorKind

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from client_registry.config import StoreConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")


class StoreOk(BaseModel, Generic[T]):
    value: T

    model_config = {"frozen": True}


class StoreFailure(BaseModel):
    kind: ErrorKind
    detail: str

    model_config = {"frozen": True}


StoreResult = Union[StoreOk[T], StoreFailure]


def _detail(exc: Exception) -> str:
    if isinstance(exc, DBAPIError) and exc.orig is not None:
        return str(exc.orig).strip()
    return str(exc)


def _parse_date(value: str | None) -> date | None:
    if not value:
        return None
    return date.fromisoformat(value)


class RecordStore:
    def __init__(self, engine: Engine, create_schema: bool = False) -> None:
        self._engine = engine
        self._create_schema = create_schema
        self._schema_ready = False

    @classmethod
    def from_config(cls, config: StoreConfig, create_schema: bool = False) -> RecordStore:
        return cls(build_engine(config), create_schema=create_schema)

    @property
    def engine(self) -> Engine:
        return self._engine

    def ensure_schema(self) -> bool:
        """Create the clients table if missing. False when the database refused."""
        try:
            create_tables(self._engine)
        except SQLAlchemyError as e:
            logger.warning("Could not ensure client tables: %s", e)
            return False
        self._schema_ready = True
        return True

    def _open(self, session: Session) -> StoreFailure | None:
        try:
            session.connection()
        except SQLAlchemyError as e:
            logger.error("Could not connect to the client store: %s", e)
            return StoreFailure(kind=ErrorKind.STORE_UNAVAILABLE, detail=_detail(e))
        # A database that was down at startup gets its table on first contact.
        if self._create_schema and not self._schema_ready:
            self.ensure_schema()
        return None

    def list_all(self) -> StoreResult[list[ClientRow]]:
        """Every stored client, newest id first."""
        stmt = select(ClientRecord).order_by(ClientRecord.id.desc())
        with Session(self._engine) as session:
            failure = self._open(session)
            if failure is not None:
                return failure
            try:
                records = session.scalars(stmt).all()
                rows = [ClientRow.model_validate(r) for r in records]
            except SQLAlchemyError as e:
                logger.exception("Listing clients failed")
                return StoreFailure(kind=ErrorKind.QUERY_FAILED, detail=_detail(e))
        return StoreOk(value=rows)

    def insert(self, record: ClientRecordInput) -> StoreResult[int]:
        """Write one client and return the id the database generated for it.

        All values are bound parameters of the INSERT; only the table name,
        a module constant, is part of the statement text.
        """
        with Session(self._engine, expire_on_commit=False) as session:
            failure = self._open(session)
            if failure is not None:
                return failure
            try:
                row = ClientRecord(
                    name=record.name,
                    paternal_surname=record.paternal_surname,
                    maternal_surname=record.maternal_surname,
                    birth_date=_parse_date(record.birth_date),
                    address=record.address,
                    phone=record.phone,
                    registration_date=_parse_date(record.registration_date),
                )
                session.add(row)
                session.commit()
            except IntegrityError as e:
                session.rollback()
                logger.warning("Client row rejected by the store: %s", _detail(e))
                return StoreFailure(kind=ErrorKind.VALIDATION_REJECTED, detail=_detail(e))
            except (SQLAlchemyError, ValueError) as e:
                session.rollback()
                logger.exception("Inserting client failed")
                return StoreFailure(kind=ErrorKind.QUERY_FAILED, detail=_detail(e))

        if row.id is None:
            return StoreFailure(kind=ErrorKind.NOT_SAVED, detail="no id was generated")
        logger.info("Registered client %d (%s %s)", row.id, row.name, row.paternal_surname)
        return StoreOk(value=row.id)

    def ping(self) -> bool:
        try:
            with self._engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.warning("Client store ping failed: %s", e)
            return False
        return True
