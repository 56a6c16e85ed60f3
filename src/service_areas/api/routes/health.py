"""Health endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status

from ...config import settings
from ...persistence import ServiceAreaRepository, get_repository

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/database", status_code=status.HTTP_200_OK)
def check_database(repository: ServiceAreaRepository = Depends(get_repository)) -> dict:
    """Report which store backs the service areas and whether it answers."""
    backend = settings.storage_backend
    try:
        total = repository.count()
    except Exception as exc:
        logging.warning(f"Service area store check failed: {exc}")
        return {
            "backend": backend,
            "connected": False,
            "error": str(exc),
            "message": f"Store connection error: {exc}",
        }
    return {
        "backend": backend,
        "connected": True,
        "areas_count": total,
        "message": f"Store reachable. Found {total} service areas.",
    }
