"""Conversion between ``ServiceArea`` objects and stored documents."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping

from ..models.domain import (
    Boundary,
    PolygonBoundary,
    PostalCodeBoundary,
    RadiusBoundary,
    ServiceArea,
)
from ..services.areas.boundaries import (
    make_polygon_boundary,
    make_postal_code_boundary,
    make_radius_boundary,
)
from ..services.operating_hours import operating_hours_to_dict, parse_operating_hours
from ..services.service_config import build_service_config, service_config_to_dict


def boundary_to_dict(boundary: Boundary) -> dict[str, Any]:
    if isinstance(boundary, PostalCodeBoundary):
        return {"type": boundary.type, "postalCodes": list(boundary.postal_codes)}
    if isinstance(boundary, RadiusBoundary):
        return {
            "type": boundary.type,
            "radius": {
                "center": {"lat": boundary.center.lat, "lng": boundary.center.lng},
                "radiusKm": boundary.radius_km,
            },
        }
    if isinstance(boundary, PolygonBoundary):
        return {
            "type": boundary.type,
            "polygon": {
                "type": "Polygon",
                "coordinates": [[[lng, lat] for lng, lat in ring] for ring in boundary.coordinates],
            },
        }
    raise ValueError(f"Unsupported boundary {boundary!r}")


def boundary_from_dict(data: Mapping[str, Any]) -> Boundary:
    boundary_type = data.get("type")
    match boundary_type:
        case "postal_codes":
            return make_postal_code_boundary(data.get("postalCodes") or [])
        case "radius":
            radius = data.get("radius") or {}
            center = radius.get("center") or {}
            return make_radius_boundary(float(center["lat"]), float(center["lng"]), float(radius["radiusKm"]))
        case "polygon":
            polygon = data.get("polygon") or {}
            return make_polygon_boundary(polygon.get("coordinates") or [])
        case _:
            raise ValueError(f"Unknown boundary type '{boundary_type}'")


def area_to_record(area: ServiceArea) -> dict[str, Any]:
    return {
        "id": area.id,
        "name": area.name,
        "description": area.description,
        "status": area.status,
        "priority": area.priority,
        "boundaries": boundary_to_dict(area.boundaries),
        "service_config": service_config_to_dict(area.service_config),
        "operating_hours": operating_hours_to_dict(area.operating_hours),
        "created_at": area.created_at.isoformat(),
        "updated_at": area.updated_at.isoformat(),
    }


def _parse_timestamp(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    return None


def area_from_record(record: Mapping[str, Any]) -> ServiceArea:
    area = ServiceArea(
        id=str(record["id"]),
        name=record["name"],
        description=record.get("description"),
        status=record.get("status") or "active",
        priority=int(record.get("priority") or 0),
        boundaries=boundary_from_dict(record.get("boundaries") or {}),
        # Stored documents always hold the complete set of flags.
        service_config=build_service_config(record.get("service_config") or {}),
        operating_hours=parse_operating_hours(record.get("operating_hours")),
    )
    created_at = _parse_timestamp(record.get("created_at"))
    updated_at = _parse_timestamp(record.get("updated_at"))
    if created_at:
        area.created_at = created_at
    if updated_at:
        area.updated_at = updated_at
    return area
