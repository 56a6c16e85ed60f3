"""Creation, mutation and lookup of service areas."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional, Sequence

from ...errors import ServiceAreaNotFoundError
from ...models.domain import (
    AREA_STATUSES,
    Boundary,
    PostalCodeBoundary,
    ServiceArea,
    ServiceConfig,
)
from ...persistence.repository import ServiceAreaRepository
from ..operating_hours import parse_operating_hours
from ..postal_codes import normalize_postal_code, normalize_postal_codes
from ..service_config import build_service_config, service_config_from_mapping
from ..validation.validator import DeliveryAreaValidator
from .boundaries import make_polygon_boundary, make_postal_code_boundary, make_radius_boundary
from .seed import VANCOUVER_MVP_ZONES

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class BookingValidation:
    can_serve: bool
    service_area: Optional[ServiceArea]
    available_services: list[str]
    message: str


@dataclass(slots=True)
class SeedResult:
    created: list[ServiceArea] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


def _check_status(status: str) -> str:
    if status not in AREA_STATUSES:
        raise ValueError(f"Invalid status '{status}'. Expected one of: {', '.join(AREA_STATUSES)}")
    return status


class ServiceAreaService:
    def __init__(self, repository: ServiceAreaRepository, validator: DeliveryAreaValidator | None = None):
        self.repository = repository
        self.validator = validator or DeliveryAreaValidator(repository)

    def _create(
        self,
        *,
        name: str,
        boundaries: Boundary,
        description: Optional[str],
        service_config: Optional[Mapping[str, Any]],
        priority: Optional[int],
        status: str,
        operating_hours: Optional[Mapping[str, Any]],
    ) -> ServiceArea:
        name = (name or "").strip()
        if not name:
            raise ValueError("Service area name is required")
        area = ServiceArea(
            id="",
            name=name,
            description=description,
            boundaries=boundaries,
            service_config=build_service_config(service_config),
            priority=priority or 0,
            status=_check_status(status),
            operating_hours=parse_operating_hours(operating_hours),
        )
        stored = self.repository.add(area)
        logger.info(f"Created {boundaries.type} service area '{stored.name}' ({stored.id})")
        return stored

    def create_postal_code_area(
        self,
        name: str,
        postal_codes: Iterable[str],
        *,
        description: Optional[str] = None,
        service_config: Optional[Mapping[str, Any]] = None,
        priority: Optional[int] = None,
        status: str = "active",
        operating_hours: Optional[Mapping[str, Any]] = None,
    ) -> ServiceArea:
        return self._create(
            name=name,
            boundaries=make_postal_code_boundary(postal_codes),
            description=description,
            service_config=service_config,
            priority=priority,
            status=status,
            operating_hours=operating_hours,
        )

    def create_radius_area(
        self,
        name: str,
        center_lat: float,
        center_lng: float,
        radius_km: float,
        *,
        description: Optional[str] = None,
        service_config: Optional[Mapping[str, Any]] = None,
        priority: Optional[int] = None,
        status: str = "active",
        operating_hours: Optional[Mapping[str, Any]] = None,
    ) -> ServiceArea:
        return self._create(
            name=name,
            boundaries=make_radius_boundary(center_lat, center_lng, radius_km),
            description=description,
            service_config=service_config,
            priority=priority,
            status=status,
            operating_hours=operating_hours,
        )

    def create_polygon_area(
        self,
        name: str,
        coordinates: Sequence[Sequence[Sequence[float]]],
        *,
        description: Optional[str] = None,
        service_config: Optional[Mapping[str, Any]] = None,
        priority: Optional[int] = None,
        status: str = "active",
        operating_hours: Optional[Mapping[str, Any]] = None,
    ) -> ServiceArea:
        """Create an area from GeoJSON polygon coordinates (``[[[lng, lat], ...]]``)."""
        return self._create(
            name=name,
            boundaries=make_polygon_boundary(coordinates),
            description=description,
            service_config=service_config,
            priority=priority,
            status=status,
            operating_hours=operating_hours,
        )

    def get_area(self, area_id: str) -> ServiceArea:
        area = self.repository.get(area_id)
        if area is None:
            raise ServiceAreaNotFoundError(area_id)
        return area

    def get_active_areas(self) -> list[ServiceArea]:
        """Active areas for display: priority descending, then name."""
        areas = self.repository.list_areas(status="active")
        return sorted(areas, key=lambda area: (-area.priority, area.name))

    def update_area_status(self, area_id: str, status: str) -> Optional[ServiceArea]:
        _check_status(status)
        area = self.repository.get(area_id)
        if area is None:
            return None
        area.status = status
        return self.repository.save(area)

    def _postal_area(self, area_id: str) -> Optional[ServiceArea]:
        area = self.repository.get(area_id)
        if area is not None and not isinstance(area.boundaries, PostalCodeBoundary):
            raise ValueError(f"Service area '{area.name}' is not defined by postal codes")
        return area

    def add_postal_codes_to_area(self, area_id: str, postal_codes: Iterable[str]) -> Optional[ServiceArea]:
        codes = normalize_postal_codes(postal_codes)
        area = self._postal_area(area_id)
        if area is None:
            return None
        current = area.boundaries.postal_codes
        current.extend(code for code in codes if code not in current)
        return self.repository.save(area)

    def remove_postal_codes_from_area(self, area_id: str, postal_codes: Iterable[str]) -> Optional[ServiceArea]:
        to_remove = {normalize_postal_code(str(code)) for code in postal_codes}
        area = self._postal_area(area_id)
        if area is None:
            return None
        area.boundaries.postal_codes = [code for code in area.boundaries.postal_codes if code not in to_remove]
        return self.repository.save(area)

    def update_service_config(
        self,
        area_id: str,
        service_config: ServiceConfig | Mapping[str, Any],
    ) -> Optional[ServiceArea]:
        """Replace the whole service config of an area.

        This is not a merge: when a mapping is given, every flag missing from it
        is stored as disabled.
        """
        if isinstance(service_config, ServiceConfig):
            config = service_config
        else:
            config, missing = service_config_from_mapping(service_config)
            if missing:
                logger.warning(
                    f"Service config for area {area_id} replaced without {', '.join(missing)}; "
                    "those flags are now disabled"
                )
        area = self.repository.get(area_id)
        if area is None:
            return None
        area.service_config = config
        return self.repository.save(area)

    def update_operating_hours(self, area_id: str, operating_hours: Mapping[str, Any]) -> Optional[ServiceArea]:
        hours = parse_operating_hours(operating_hours)
        area = self.repository.get(area_id)
        if area is None:
            return None
        area.operating_hours = hours
        return self.repository.save(area)

    def validate_location_for_booking(
        self,
        lat: Optional[float] = None,
        lng: Optional[float] = None,
        postal_code: Optional[str] = None,
    ) -> BookingValidation:
        validation = self.validator.validate_address(lat, lng, postal_code)
        return BookingValidation(
            can_serve=validation.is_valid,
            service_area=validation.service_area,
            available_services=validation.available_services.enabled() if validation.available_services else [],
            message=". ".join(validation.reasons),
        )

    def get_areas_for_postal_code(self, postal_code: str) -> list[ServiceArea]:
        """Every active postal area covering the code, highest priority first."""
        prefix = normalize_postal_code(postal_code)
        areas = [
            area
            for area in self.repository.list_areas(status="active", boundary_type=PostalCodeBoundary.type)
            if prefix in area.boundaries.postal_codes
        ]
        return sorted(areas, key=lambda area: area.priority, reverse=True)

    def setup_vancouver_mvp(self) -> SeedResult:
        """Create the launch zones that do not exist yet; one failure does not stop the rest."""
        result = SeedResult()
        for zone in VANCOUVER_MVP_ZONES:
            try:
                if self.repository.find_by_name(zone["name"]) is not None:
                    continue
                result.created.append(
                    self.create_postal_code_area(
                        zone["name"],
                        zone["postal_codes"],
                        service_config=zone["service_config"],
                        priority=zone["priority"],
                    )
                )
            except Exception as exc:
                logger.error(f"Failed to create MVP zone {zone['name']}: {exc}")
                result.errors.append(f"Failed to create {zone['name']}: {exc}")
        return result
