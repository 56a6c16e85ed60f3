"""Delivery service-area endpoints."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query, status

from ...config import settings
from ...errors import ServiceAreaConflictError, ServiceAreaNotFoundError
from ...models.domain import PolygonBoundary, PostalCodeBoundary, RadiusBoundary, ServiceArea, ServiceConfig
from ...persistence import ServiceAreaRepository, get_repository
from ...schemas.delivery import (
    AreaCreateRequest,
    BulkValidationRequest,
    DayScheduleModel,
    LocationRequest,
    PostalCodesRequest,
    ServiceConfigModel,
    StatusUpdateRequest,
)
from ...services.areas.service import ServiceAreaService
from ...services.operating_hours import operating_hours_to_dict
from ...services.postal_codes import is_valid_postal_prefix
from ...services.service_config import CAPABILITY_NAMES, service_config_to_dict
from ...services.stats import compute_delivery_stats
from ...services.validation.validator import DeliveryAreaValidator
from ..deps import get_service_area_service, get_validator, require_admin_token
from ..errors import ApiError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/delivery", tags=["delivery"])


def _area_reference(area: ServiceArea | None) -> dict[str, Any] | None:
    if area is None:
        return None
    return {"id": area.id, "name": area.name, "description": area.description}


def _area_summary(area: ServiceArea) -> dict[str, Any]:
    """Area listing entry; only the fields of the area's own boundary type are included."""
    summary: dict[str, Any] = {
        "id": area.id,
        "name": area.name,
        "description": area.description,
        "status": area.status,
        "boundaryType": area.boundary_type,
    }
    boundary = area.boundaries
    if isinstance(boundary, PostalCodeBoundary):
        summary["postalCodes"] = list(boundary.postal_codes)
    elif isinstance(boundary, RadiusBoundary):
        summary["radius"] = {
            "center": {"lat": boundary.center.lat, "lng": boundary.center.lng},
            "radiusKm": boundary.radius_km,
        }
    elif isinstance(boundary, PolygonBoundary):
        summary["polygon"] = {
            "type": "Polygon",
            "coordinates": [[[lng, lat] for lng, lat in ring] for ring in boundary.coordinates],
        }
    summary["serviceConfig"] = service_config_to_dict(area.service_config)
    summary["priority"] = area.priority
    if area.operating_hours:
        summary["operatingHours"] = operating_hours_to_dict(area.operating_hours)
    return summary


def _not_found(area_id: str) -> ApiError:
    return ApiError(status.HTTP_404_NOT_FOUND, f"Service area '{area_id}' not found")


@router.post("/validate", status_code=status.HTTP_200_OK)
def validate_delivery_location(
    payload: LocationRequest,
    service: ServiceAreaService = Depends(get_service_area_service),
) -> dict:
    """Check whether a location can be served and with which capabilities."""
    if not payload.has_coordinates and not payload.postalCode:
        raise ApiError(status.HTTP_400_BAD_REQUEST, "Please provide either coordinates (lat/lng) or postal code")

    try:
        validation = service.validate_location_for_booking(payload.lat, payload.lng, payload.postalCode)
    except Exception as exc:
        logger.exception(f"Delivery validation error: {exc}")
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Error validating delivery location", exc) from exc

    return {
        "success": True,
        "data": {
            "canDeliver": validation.can_serve,
            "serviceArea": _area_reference(validation.service_area),
            "availableServices": validation.available_services,
            "message": validation.message,
            "restrictions": {name: name in validation.available_services for name in CAPABILITY_NAMES},
        },
    }


@router.get("/areas", status_code=status.HTTP_200_OK)
def list_service_areas(service: ServiceAreaService = Depends(get_service_area_service)) -> dict:
    try:
        areas = service.get_active_areas()
    except Exception as exc:
        logger.exception(f"Error fetching service areas: {exc}")
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Error fetching service areas", exc) from exc
    return {"success": True, "data": [_area_summary(area) for area in areas]}


@router.get("/postal/{code}", status_code=status.HTTP_200_OK)
def check_postal_code(
    code: str,
    service: ServiceAreaService = Depends(get_service_area_service),
    validator: DeliveryAreaValidator = Depends(get_validator),
) -> dict:
    if not is_valid_postal_prefix(code):
        raise ApiError(status.HTTP_400_BAD_REQUEST, "Invalid postal code format. Use format like V6B")

    try:
        areas = service.get_areas_for_postal_code(code)
        validation = validator.validate_postal_code(code)
    except Exception as exc:
        logger.exception(f"Error checking postal code {code}: {exc}")
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Error checking postal code", exc) from exc

    primary = areas[0] if areas else None
    return {
        "success": True,
        "data": {
            "postalCode": code.upper(),
            "isServiced": validation.is_valid,
            "serviceAreas": [
                {
                    "id": area.id,
                    "name": area.name,
                    "priority": area.priority,
                    "services": service_config_to_dict(area.service_config),
                }
                for area in areas
            ],
            "primaryArea": (
                {"name": primary.name, "services": service_config_to_dict(primary.service_config)}
                if primary
                else None
            ),
            "message": ". ".join(validation.reasons),
        },
    }


@router.post("/validate-bulk", status_code=status.HTTP_200_OK)
def validate_bulk_addresses(
    payload: BulkValidationRequest,
    service: ServiceAreaService = Depends(get_service_area_service),
) -> dict:
    """Validate up to ``max_bulk_addresses`` locations concurrently.

    A failure on one address is reported on its own row and does not fail the batch.
    """
    addresses = payload.addresses
    if not addresses:
        raise ApiError(status.HTTP_400_BAD_REQUEST, "Please provide an array of addresses to validate")
    if len(addresses) > settings.max_bulk_addresses:
        raise ApiError(
            status.HTTP_400_BAD_REQUEST,
            f"Maximum {settings.max_bulk_addresses} addresses per bulk validation",
        )

    def _validate_one(index: int, address: LocationRequest) -> dict[str, Any]:
        echoed = address.model_dump(exclude_none=True)
        try:
            validation = service.validate_location_for_booking(address.lat, address.lng, address.postalCode)
        except Exception as exc:
            logger.warning(f"Bulk validation failed for address #{index}: {exc}")
            return {
                "index": index,
                "address": echoed,
                "canDeliver": False,
                "error": f"Validation failed: {exc}",
            }
        return {
            "index": index,
            "address": echoed,
            "canDeliver": validation.can_serve,
            "serviceArea": validation.service_area.name if validation.service_area else None,
            "availableServices": validation.available_services,
            "message": validation.message,
        }

    results: list[dict[str, Any]] = []
    workers = min(settings.bulk_validation_workers, len(addresses))
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(_validate_one, index, address) for index, address in enumerate(addresses)]
        for future in as_completed(futures):
            results.append(future.result())
    results.sort(key=lambda row: row["index"])

    serviceable = sum(1 for row in results if row["canDeliver"])
    return {
        "success": True,
        "data": {
            "summary": {
                "total": len(results),
                "serviceable": serviceable,
                "unserviceable": len(results) - serviceable,
            },
            "results": results,
        },
    }


@router.post("/setup-mvp", status_code=status.HTTP_200_OK, dependencies=[Depends(require_admin_token)])
def setup_mvp(service: ServiceAreaService = Depends(get_service_area_service)) -> dict:
    """Seed the Vancouver launch zones (admin only, idempotent)."""
    try:
        result = service.setup_vancouver_mvp()
    except Exception as exc:
        logger.exception(f"MVP setup error: {exc}")
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Error setting up MVP areas", exc) from exc

    return {
        "success": True,
        "message": f"Created {len(result.created)} service areas",
        "data": {
            "created": [
                {"id": area.id, "name": area.name, "postalCodes": list(area.boundaries.postal_codes)}
                for area in result.created
            ],
            "errors": result.errors,
        },
    }


@router.get("/stats", status_code=status.HTTP_200_OK)
def get_delivery_stats(repository: ServiceAreaRepository = Depends(get_repository)) -> dict:
    try:
        stats = compute_delivery_stats(repository)
    except Exception as exc:
        logger.exception(f"Error fetching delivery stats: {exc}")
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Error fetching delivery statistics", exc) from exc
    return {"success": True, "data": stats}


@router.post("/areas", status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_admin_token)])
def create_service_area(
    payload: AreaCreateRequest = Body(...),
    service: ServiceAreaService = Depends(get_service_area_service),
) -> dict:
    common: dict[str, Any] = {
        "description": payload.description,
        "service_config": payload.serviceConfig,
        "priority": payload.priority,
        "status": payload.status,
        "operating_hours": (
            {day: schedule.model_dump() for day, schedule in payload.operatingHours.items()}
            if payload.operatingHours
            else None
        ),
    }
    try:
        match payload.type:
            case "postal_codes":
                area = service.create_postal_code_area(payload.name, payload.postalCodes, **common)
            case "radius":
                area = service.create_radius_area(
                    payload.name, payload.center.lat, payload.center.lng, payload.radiusKm, **common
                )
            case _:
                area = service.create_polygon_area(payload.name, payload.coordinates, **common)
    except ServiceAreaConflictError as exc:
        raise ApiError(status.HTTP_409_CONFLICT, str(exc)) from exc
    except ValueError as exc:
        raise ApiError(status.HTTP_400_BAD_REQUEST, str(exc)) from exc

    return {"success": True, "message": f"Service area '{area.name}' created", "data": _area_summary(area)}


@router.get("/areas/{area_id}/availability", status_code=status.HTTP_200_OK)
def check_area_availability(
    area_id: str,
    at: Optional[datetime] = Query(default=None, description="Time to check (ISO 8601). Defaults to now."),
    service: ServiceAreaService = Depends(get_service_area_service),
    validator: DeliveryAreaValidator = Depends(get_validator),
) -> dict:
    try:
        area = service.get_area(area_id)
    except ServiceAreaNotFoundError as exc:
        raise _not_found(area_id) from exc

    target_time = at or datetime.now()
    availability = validator.is_service_available_at_time(area, target_time)
    return {
        "success": True,
        "data": {
            "areaId": area.id,
            "name": area.name,
            "at": target_time.isoformat(),
            "available": availability.available,
            "reason": availability.reason,
        },
    }


@router.patch("/areas/{area_id}/status", status_code=status.HTTP_200_OK, dependencies=[Depends(require_admin_token)])
def update_area_status(
    area_id: str,
    payload: StatusUpdateRequest,
    service: ServiceAreaService = Depends(get_service_area_service),
) -> dict:
    area = service.update_area_status(area_id, payload.status)
    if area is None:
        raise _not_found(area_id)
    return {"success": True, "data": _area_summary(area)}


@router.post(
    "/areas/{area_id}/postal-codes",
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_admin_token)],
)
def add_postal_codes(
    area_id: str,
    payload: PostalCodesRequest,
    service: ServiceAreaService = Depends(get_service_area_service),
) -> dict:
    try:
        area = service.add_postal_codes_to_area(area_id, payload.postalCodes)
    except ValueError as exc:
        raise ApiError(status.HTTP_400_BAD_REQUEST, str(exc)) from exc
    if area is None:
        raise _not_found(area_id)
    return {"success": True, "data": _area_summary(area)}


@router.post(
    "/areas/{area_id}/postal-codes/remove",
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_admin_token)],
)
def remove_postal_codes(
    area_id: str,
    payload: PostalCodesRequest,
    service: ServiceAreaService = Depends(get_service_area_service),
) -> dict:
    try:
        area = service.remove_postal_codes_from_area(area_id, payload.postalCodes)
    except ValueError as exc:
        raise ApiError(status.HTTP_400_BAD_REQUEST, str(exc)) from exc
    if area is None:
        raise _not_found(area_id)
    return {"success": True, "data": _area_summary(area)}


@router.put(
    "/areas/{area_id}/service-config",
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_admin_token)],
)
def replace_service_config(
    area_id: str,
    payload: ServiceConfigModel,
    service: ServiceAreaService = Depends(get_service_area_service),
) -> dict:
    config = ServiceConfig(
        delivery_enabled=payload.deliveryEnabled,
        pickup_enabled=payload.pickupEnabled,
        same_day=payload.sameDay,
        next_day=payload.nextDay,
        standard_delivery=payload.standardDelivery,
        express_delivery=payload.expressDelivery,
    )
    area = service.update_service_config(area_id, config)
    if area is None:
        raise _not_found(area_id)
    return {"success": True, "data": _area_summary(area)}


@router.put(
    "/areas/{area_id}/operating-hours",
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_admin_token)],
)
def replace_operating_hours(
    area_id: str,
    payload: dict[str, DayScheduleModel] = Body(...),
    service: ServiceAreaService = Depends(get_service_area_service),
) -> dict:
    hours = {day: schedule.model_dump() for day, schedule in payload.items()}
    try:
        area = service.update_operating_hours(area_id, hours)
    except ValueError as exc:
        raise ApiError(status.HTTP_400_BAD_REQUEST, str(exc)) from exc
    if area is None:
        raise _not_found(area_id)
    return {"success": True, "data": _area_summary(area)}
