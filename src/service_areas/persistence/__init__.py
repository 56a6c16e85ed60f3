"""Service-area storage backends."""

from __future__ import annotations

from functools import lru_cache

from ..config import settings
from .repository import InMemoryServiceAreaRepository, ServiceAreaRepository


def create_repository(backend: str) -> ServiceAreaRepository:
    match backend:
        case "memory":
            return InMemoryServiceAreaRepository()
        case "file":
            from .filesystem import JsonFileServiceAreaRepository

            return JsonFileServiceAreaRepository()
        case "supabase":
            from ..db.supabase import get_supabase_client
            from .database import SupabaseServiceAreaRepository

            client = get_supabase_client()
            if client is None:
                raise ValueError(
                    "Supabase storage selected but not configured. "
                    "Set DELIVERY_SUPABASE_URL and DELIVERY_SUPABASE_KEY."
                )
            return SupabaseServiceAreaRepository(client)
        case _:
            raise ValueError(f"Unknown storage backend '{backend}'.")


@lru_cache()
def get_repository() -> ServiceAreaRepository:
    """Process-wide store selected by ``settings.storage_backend``."""
    return create_repository(settings.storage_backend)


__all__ = [
    "ServiceAreaRepository",
    "InMemoryServiceAreaRepository",
    "create_repository",
    "get_repository",
]
