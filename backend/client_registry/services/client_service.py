"""List and register clients on behalf of the HTTP endpoint."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import date
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from client_registry.schemas.client import ClientRecordInput
from client_registry.schemas.envelope import (
    CreateSuccess,
    Envelope,
    ErrorKind,
    Failure,
    ListSuccess,
)
from client_registry.services.record_store import StoreFailure

if TYPE_CHECKING:
    from client_registry.services.record_store import RecordStore

logger = logging.getLogger(__name__)

MIN_NAME_LENGTH = 3

NOT_ALLOWED_MESSAGE = "Método o acción no permitida."
REQUIRED_FIELDS_MESSAGE = "Todos los campos son obligatorios."
NOT_SAVED_MESSAGE = "Error: No se pudo guardar el cliente."
LIST_ERROR_PREFIX = "Error al listar clientes: "
INSERT_ERROR_PREFIX = "Error al ejecutar el INSERT: "


class Operation(StrEnum):
    LIST = "load"
    CREATE = "save"


def resolve_operation(method: str, action: str | None) -> Operation | None:
    """Pick the operation for a request.

    The method is checked before the action at each step, so a GET always
    lists, even with ``action=save``.
    """
    method = method.upper()
    if method == "GET" or action == Operation.LIST.value:
        return Operation.LIST
    if method == "POST" or action == Operation.CREATE.value:
        return Operation.CREATE
    return None


def _field(form: Mapping[str, Any], key: str) -> str | None:
    value = form.get(key)
    if not isinstance(value, str):
        return None
    return value.strip()


def read_client_form(
    form: Mapping[str, Any], today: date | None = None
) -> ClientRecordInput:
    registration_date = _field(form, "fechaRegistro")
    if not registration_date:
        registration_date = (today or date.today()).isoformat()

    return ClientRecordInput(
        name=_field(form, "nombre") or "",
        paternal_surname=_field(form, "apellidoPaterno") or "",
        maternal_surname=_field(form, "apellidoMaterno"),
        birth_date=_field(form, "fechaNacimiento"),
        address=_field(form, "direccion"),
        phone=_field(form, "telefono"),
        registration_date=registration_date,
    )


def validate_client(record: ClientRecordInput) -> Failure | None:
    if (
        not record.name
        or not record.paternal_surname
        or len(record.name) < MIN_NAME_LENGTH
    ):
        return Failure.of(ErrorKind.VALIDATION_REJECTED, REQUIRED_FIELDS_MESSAGE)
    return None


def list_clients(store: RecordStore) -> Envelope:
    result = store.list_all()
    if isinstance(result, StoreFailure):
        return Failure(
            kind=result.kind,
            message=LIST_ERROR_PREFIX + result.detail,
            status_code=500,
        )
    return ListSuccess(clientes=result.value)


def register_client(
    store: RecordStore, form: Mapping[str, Any], today: date | None = None
) -> Envelope:
    record = read_client_form(form, today)
    rejected = validate_client(record)
    if rejected is not None:
        logger.info("Rejected client registration with incomplete fields")
        return rejected

    result = store.insert(record)
    if isinstance(result, StoreFailure):
        if result.kind is ErrorKind.NOT_SAVED:
            return Failure(kind=result.kind, message=NOT_SAVED_MESSAGE, status_code=500)
        # 400 is reserved for the field checks above.
        return Failure(
            kind=result.kind,
            message=INSERT_ERROR_PREFIX + result.detail,
            status_code=500,
        )
    return CreateSuccess(id=result.value)


def handle_request(
    store: RecordStore,
    method: str,
    action: str | None,
    form: Mapping[str, Any],
    today: date | None = None,
) -> Envelope:
    operation = resolve_operation(method, action)
    if operation is Operation.LIST:
        return list_clients(store)
    if operation is Operation.CREATE:
        return register_client(store, form, today)
    return Failure.of(ErrorKind.NOT_SUPPORTED, NOT_ALLOWED_MESSAGE)
