"""Delivery coverage statistics."""

from __future__ import annotations

from collections import Counter

from ..models.domain import PostalCodeBoundary
from ..persistence.repository import ServiceAreaRepository


def compute_delivery_stats(repository: ServiceAreaRepository) -> dict:
    total_areas = repository.count()
    active_areas = repository.count(status="active")
    inactive_areas = repository.count(status="inactive")
    planned_areas = repository.count(status="planned")

    postal_areas = repository.list_areas(status="active", boundary_type=PostalCodeBoundary.type)
    total_postal_codes = sum(len(area.boundaries.postal_codes) for area in postal_areas)

    active = repository.list_areas(status="active")
    areas_by_type: Counter[str] = Counter(area.boundary_type for area in active)

    return {
        "overview": {
            "totalAreas": total_areas,
            "activeAreas": active_areas,
            "inactiveAreas": inactive_areas,
            "plannedAreas": planned_areas,
            "totalPostalCodes": total_postal_codes,
        },
        "areasByType": dict(areas_by_type),
        "serviceCapabilities": {
            "sameDay": sum(1 for area in active if area.service_config.same_day),
            "nextDay": sum(1 for area in active if area.service_config.next_day),
            "pickup": sum(1 for area in active if area.service_config.pickup_enabled),
            "express": sum(1 for area in active if area.service_config.express_delivery),
        },
    }
