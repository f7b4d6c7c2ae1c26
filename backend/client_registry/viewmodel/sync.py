"""Browser-side view-model for the client registration page.

Keeps the rendered client table in step with the server and submits the
registration form. Network calls go through an ``httpx.AsyncClient``; each
user action is awaited as its own coroutine and nothing de-duplicates
overlapping submissions, so the last response to arrive wins.
"""

from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import Callable, Mapping
from datetime import date, datetime, timezone
from enum import StrEnum
from typing import Any

import httpx
from pydantic import BaseModel

logger = logging.getLogger(__name__)

FORM_FIELDS = (
    "nombre",
    "apellidoPaterno",
    "apellidoMaterno",
    "fechaNacimiento",
    "direccion",
    "telefono",
)
ROW_FIELDS = (
    "nombre",
    "apellidopaterno",
    "apellidomaterno",
    "fechanacimiento",
    "direccion",
    "telefono",
    "fecharegistro",
)

PLACEHOLDER_TEXT = "No hay clientes registrados aún."
DATE_FORMAT_ERROR = "El formato debe ser dd/mm/aaaa."
LOAD_ERROR = "Error al cargar los datos."
SUBMIT_FALLBACK_ERROR = "Error al registrar cliente."
TRANSPORT_ERROR = "Error al comunicar con la API."

MESSAGE_TIMEOUT_SECONDS = 5.0

# ASCII digits only, whole value.
_DISPLAY_DATE = re.compile(r"[0-9]{2}/[0-9]{2}/[0-9]{4}")


class ViewState(StrEnum):
    IDLE = "idle"
    LOADING = "loading"
    RENDERED = "rendered"
    SUBMITTING = "submitting"


class MessageKind(StrEnum):
    OK = "ok"
    ERROR = "error"


class Message(BaseModel):
    text: str
    kind: MessageKind

    model_config = {"frozen": True}


class TableRow(BaseModel):
    number: int
    nombre: str
    apellidopaterno: str
    apellidomaterno: str
    fechanacimiento: str
    direccion: str
    telefono: str
    fecharegistro: str

    model_config = {"frozen": True}


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def to_sql_date(value: str) -> str | None:
    """Turn ``dd/mm/yyyy`` into ``yyyy-mm-dd``; None when the shape is wrong."""
    if not _DISPLAY_DATE.fullmatch(value):
        return None
    day, month, year = value.split("/")
    return f"{year}-{month}-{day}"


def _cell(record: Mapping[str, Any], key: str) -> str:
    value = record.get(key)
    if not value:
        return ""
    return str(value)


def build_rows(clientes: list[Any]) -> list[TableRow]:
    rows = []
    for index, record in enumerate(clientes, start=1):
        if not isinstance(record, Mapping):
            record = {}
        rows.append(
            TableRow(number=index, **{key: _cell(record, key) for key in ROW_FIELDS})
        )
    return rows


class ClientRegistryViewModel:
    def __init__(
        self,
        http_client: httpx.AsyncClient,
        api_url: str = "/api",
        *,
        message_timeout: float = MESSAGE_TIMEOUT_SECONDS,
        today: Callable[[], date] = utc_today,
    ) -> None:
        self._http = http_client
        self._api_url = api_url
        self._message_timeout = message_timeout
        self._today = today
        self._message_timer: asyncio.TimerHandle | None = None

        self.state = ViewState.IDLE
        self.rows: list[TableRow] = []
        self.placeholder: str | None = None
        self.message: Message | None = None
        self.form: dict[str, str] = {}
        self.reset_form()

    # ------------------------------------------------------------------
    # Form and messages
    # ------------------------------------------------------------------

    def set_field(self, name: str, value: str) -> None:
        if name not in FORM_FIELDS:
            raise KeyError(f"Unknown form field '{name}'")
        self.form[name] = value

    def reset_form(self) -> None:
        self.form = {name: "" for name in FORM_FIELDS}

    def show_message(self, text: str, kind: MessageKind) -> None:
        self.message = Message(text=text, kind=kind)
        if self._message_timer is not None:
            self._message_timer.cancel()
        loop = asyncio.get_running_loop()
        self._message_timer = loop.call_later(self._message_timeout, self.clear_message)

    def clear_message(self) -> None:
        self.message = None
        if self._message_timer is not None:
            self._message_timer.cancel()
            self._message_timer = None

    # ------------------------------------------------------------------
    # Server round trips
    # ------------------------------------------------------------------

    async def load(self) -> None:
        """Fetch the client list and rebuild the table."""
        self.state = ViewState.LOADING
        try:
            response = await self._http.get(self._api_url, params={"action": "load"})
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Loading clients failed: %s", e)
            self.show_message(LOAD_ERROR, MessageKind.ERROR)
            self.state = ViewState.IDLE
            return

        self.rows = []
        self.placeholder = None
        if not isinstance(data, dict):
            data = {}
        clientes = data.get("clientes")
        if not data.get("success") or not isinstance(clientes, list):
            self.placeholder = PLACEHOLDER_TEXT
        else:
            self.rows = build_rows(clientes)
        self.state = ViewState.RENDERED

    async def submit(self) -> bool:
        """Send the current form as a new client.

        Returns True when the server registered the client. A birth date that
        is not ``dd/mm/yyyy`` stops the submission before any request is made.
        """
        self.clear_message()
        fields = dict(self.form)

        birth_date = fields.get("fechaNacimiento")
        if birth_date:
            sql_date = to_sql_date(birth_date)
            if sql_date is None:
                self.show_message(DATE_FORMAT_ERROR, MessageKind.ERROR)
                return False
            fields["fechaNacimiento"] = sql_date

        fields["action"] = "save"
        fields["fechaRegistro"] = self._today().isoformat()

        self.state = ViewState.SUBMITTING
        try:
            response = await self._http.post(self._api_url, data=fields)
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Client registration request failed: %s", e)
            self.show_message(TRANSPORT_ERROR, MessageKind.ERROR)
            self.state = ViewState.IDLE
            return False

        if not isinstance(data, dict) or not data.get("success"):
            server_message = data.get("message") if isinstance(data, dict) else None
            self.show_message(server_message or SUBMIT_FALLBACK_ERROR, MessageKind.ERROR)
            self.state = ViewState.IDLE
            return False

        self.show_message(data.get("message") or "", MessageKind.OK)
        self.reset_form()
        await self.load()
        return True
