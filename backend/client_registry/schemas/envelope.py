"""Response envelopes returned by the client endpoint.

Every response is one of three closed variants. Successes answer 200;
failures carry their own status, normally derived from the error kind with
``Failure.of``. Only ``to_body()`` is written to the wire.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Union

from pydantic import BaseModel

from client_registry.schemas.client import ClientRow


class ErrorKind(StrEnum):
    STORE_UNAVAILABLE = "StoreUnavailable"
    QUERY_FAILED = "QueryFailed"
    VALIDATION_REJECTED = "ValidationRejected"
    NOT_SAVED = "NotSaved"
    NOT_SUPPORTED = "NotSupported"


_STATUS_BY_KIND = {
    ErrorKind.STORE_UNAVAILABLE: 500,
    ErrorKind.QUERY_FAILED: 500,
    ErrorKind.NOT_SAVED: 500,
    ErrorKind.VALIDATION_REJECTED: 400,
    ErrorKind.NOT_SUPPORTED: 405,
}


class ListSuccess(BaseModel):
    clientes: list[ClientRow]

    @property
    def status_code(self) -> int:
        return 200

    def to_body(self) -> dict[str, Any]:
        return {
            "success": True,
            "clientes": [
                row.model_dump(mode="json", by_alias=True) for row in self.clientes
            ],
        }


class CreateSuccess(BaseModel):
    id: int
    message: str = "Cliente registrado correctamente."

    @property
    def status_code(self) -> int:
        return 200

    def to_body(self) -> dict[str, Any]:
        return {"success": True, "message": self.message, "id": self.id}


class Failure(BaseModel):
    kind: ErrorKind
    message: str
    status_code: int

    @classmethod
    def of(cls, kind: ErrorKind, message: str) -> Failure:
        return cls(kind=kind, message=message, status_code=_STATUS_BY_KIND[kind])

    def to_body(self) -> dict[str, Any]:
        return {"success": False, "message": self.message}


Envelope = Union[ListSuccess, CreateSuccess, Failure]
