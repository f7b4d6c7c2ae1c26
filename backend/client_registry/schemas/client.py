from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field


class ClientRecordInput(BaseModel):
    """The seven writable fields of a client, already trimmed.

    Dates travel as ISO ``yyyy-mm-dd`` text; the store converts them when the
    row is written, so a malformed date fails the INSERT like a column type
    error would.
    """

    name: str
    paternal_surname: str
    maternal_surname: str | None = None
    birth_date: str | None = None
    address: str | None = None
    phone: str | None = None
    registration_date: str


class ClientRow(BaseModel):
    id: int
    name: str = Field(serialization_alias="nombre")
    paternal_surname: str = Field(serialization_alias="apellidopaterno")
    maternal_surname: str | None = Field(serialization_alias="apellidomaterno")
    birth_date: date | None = Field(serialization_alias="fechanacimiento")
    address: str | None = Field(serialization_alias="direccion")
    phone: str | None = Field(serialization_alias="telefono")
    registration_date: date | None = Field(serialization_alias="fecharegistro")

    model_config = {"from_attributes": True}
