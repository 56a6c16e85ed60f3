"""FastAPI dependencies shared by the routers."""

from __future__ import annotations

import hmac
import logging
from typing import Optional

from fastapi import Depends, Header, HTTPException, status

from ..config import settings
from ..persistence import ServiceAreaRepository, get_repository
from ..services.areas.service import ServiceAreaService
from ..services.validation.validator import DeliveryAreaValidator

logger = logging.getLogger(__name__)


def get_validator(repository: ServiceAreaRepository = Depends(get_repository)) -> DeliveryAreaValidator:
    return DeliveryAreaValidator(repository)


def get_service_area_service(
    repository: ServiceAreaRepository = Depends(get_repository),
    validator: DeliveryAreaValidator = Depends(get_validator),
) -> ServiceAreaService:
    return ServiceAreaService(repository, validator)


def require_admin_token(x_admin_token: Optional[str] = Header(None, alias="X-Admin-Token")) -> None:
    """Require the admin token. With no token configured every request is rejected."""
    if not settings.admin_token:
        logger.warning("DELIVERY_ADMIN_TOKEN not configured, admin endpoints are blocked")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Admin access required")
    if not x_admin_token or not hmac.compare_digest(x_admin_token, settings.admin_token):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or missing admin token")
