from fastapi import APIRouter, Depends, Request

from client_registry.routers.clients import get_record_store
from client_registry.services.record_store import RecordStore

router = APIRouter()


@router.get("/health")
def health_check(request: Request, store: RecordStore = Depends(get_record_store)) -> dict:
    database = store.ping()
    return {
        "status": "healthy" if database else "degraded",
        "app_name": request.app.title,
        "database": database,
    }
