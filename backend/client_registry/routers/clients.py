from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException

from client_registry.services import client_service
from client_registry.services.record_store import RecordStore

logger = logging.getLogger(__name__)


class EnvelopeResponse(JSONResponse):
    media_type = "application/json; charset=utf-8"


def get_record_store(request: Request) -> RecordStore:
    return request.app.state.record_store


async def _read_form(request: Request) -> Mapping[str, Any]:
    # Only POST bodies carry form fields.
    if request.method != "POST":
        return {}
    try:
        return await request.form()
    except HTTPException as e:
        logger.warning("Unreadable form body: %s", e.detail)
        return {}


async def clients_endpoint(request: Request) -> EnvelopeResponse:
    """Single client endpoint, mounted without a method restriction."""
    store = get_record_store(request)
    form = await _read_form(request)
    action = form.get("action")
    if not isinstance(action, str):
        action = request.query_params.get("action")

    envelope = await run_in_threadpool(
        client_service.handle_request, store, request.method, action, form
    )
    return EnvelopeResponse(envelope.to_body(), status_code=envelope.status_code)
