from datetime import date
from typing import Optional

from sqlalchemy import Date, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from client_registry.config import CLIENT_TABLE
from client_registry.database import Base


class ClientRecord(Base):
    __tablename__ = CLIENT_TABLE

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column("nombre", String(100), nullable=False)
    paternal_surname: Mapped[str] = mapped_column(
        "apellidopaterno", String(100), nullable=False
    )
    maternal_surname: Mapped[Optional[str]] = mapped_column(
        "apellidomaterno", String(100), nullable=True
    )
    birth_date: Mapped[Optional[date]] = mapped_column(
        "fechanacimiento", Date, nullable=True
    )
    address: Mapped[Optional[str]] = mapped_column("direccion", Text, nullable=True)
    phone: Mapped[Optional[str]] = mapped_column("telefono", String(30), nullable=True)
    registration_date: Mapped[date] = mapped_column(
        "fecharegistro", Date, nullable=False
    )
