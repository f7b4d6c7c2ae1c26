from client_registry.models.client import ClientRecord

__all__ = [
    "ClientRecord",
]
