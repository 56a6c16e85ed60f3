"""Resolve a location to the service area that serves it."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ...models.domain import PostalCodeBoundary, ServiceArea
from ...persistence.repository import ServiceAreaRepository
from ..geospatial import boundary_contains, haversine_km
from ..operating_hours import time_of_day, weekday_name
from ..postal_codes import normalize_postal_code
from ..service_config import AvailableServices

logger = logging.getLogger(__name__)

NO_INPUT_REASON = "Please provide coordinates or postal code for validation"


@dataclass(slots=True)
class ValidationResult:
    """Outcome of a lookup. A miss is ``is_valid=False`` with reasons, never an exception."""

    is_valid: bool
    reasons: list[str] = field(default_factory=list)
    service_area: Optional[ServiceArea] = None
    available_services: Optional[AvailableServices] = None


@dataclass(slots=True)
class AvailabilityResult:
    available: bool
    reason: Optional[str] = None


def _by_priority(areas: list[ServiceArea]) -> list[ServiceArea]:
    # sorted() is stable, so equal priorities keep store order
    return sorted(areas, key=lambda area: area.priority, reverse=True)


def _matched(area: ServiceArea, reason: str) -> ValidationResult:
    return ValidationResult(
        is_valid=True,
        reasons=[reason],
        service_area=area,
        available_services=AvailableServices.from_config(area.service_config),
    )


class DeliveryAreaValidator:
    def __init__(self, repository: ServiceAreaRepository):
        self.repository = repository

    def validate_coordinates(self, lat: float, lng: float) -> ValidationResult:
        """Find the highest-priority active radius/polygon area containing the point."""
        try:
            areas = self.repository.list_areas(status="active")
        except Exception as exc:
            logger.exception(f"Coordinate validation failed for ({lat}, {lng})")
            return ValidationResult(is_valid=False, reasons=[f"Error validating coordinates: {exc}"])

        candidates: list[ServiceArea] = []
        for area in areas:
            try:
                contains = boundary_contains(area.boundaries, lat, lng)
            except Exception as exc:
                # A broken geometry only disqualifies its own area
                logger.warning(f"Skipping area {area.name} ({area.id}) for ({lat}, {lng}): {exc}")
                continue
            if contains:
                candidates.append(area)

        if not candidates:
            return ValidationResult(is_valid=False, reasons=["Location is outside our current delivery areas"])

        area = _by_priority(candidates)[0]
        return _matched(area, f"Delivery available in {area.name}")

    def validate_postal_code(self, postal_code: str) -> ValidationResult:
        """Match the 3-character prefix, or the full uppercased code, against postal areas."""
        accepted = {normalize_postal_code(postal_code), postal_code.upper()}
        try:
            candidates = [
                area
                for area in self.repository.list_areas(status="active", boundary_type=PostalCodeBoundary.type)
                if accepted.intersection(area.boundaries.postal_codes)
            ]
        except Exception as exc:
            logger.exception(f"Postal code validation failed for {postal_code!r}")
            return ValidationResult(is_valid=False, reasons=[f"Error validating postal code: {exc}"])

        if not candidates:
            return ValidationResult(
                is_valid=False,
                reasons=[f"Postal code {postal_code} is not in our current service areas"],
            )

        area = _by_priority(candidates)[0]
        return _matched(area, f"Delivery available for {postal_code} in {area.name}")

    def validate_address(
        self,
        lat: Optional[float] = None,
        lng: Optional[float] = None,
        postal_code: Optional[str] = None,
    ) -> ValidationResult:
        """Try coordinates first, then the postal code, keeping every failure reason."""
        reasons: list[str] = []

        if lat is not None and lng is not None:
            coord_result = self.validate_coordinates(lat, lng)
            if coord_result.is_valid:
                return coord_result
            reasons.extend(coord_result.reasons)

        if postal_code:
            postal_result = self.validate_postal_code(postal_code)
            if postal_result.is_valid:
                return postal_result
            reasons.extend(postal_result.reasons)

        if lat is None and lng is None and not postal_code:
            reasons.append(NO_INPUT_REASON)

        return ValidationResult(is_valid=False, reasons=reasons)

    def get_active_service_areas(self) -> list[ServiceArea]:
        areas = self.repository.list_areas(status="active")
        return sorted(areas, key=lambda area: (-area.priority, area.name))

    @staticmethod
    def is_service_available_at_time(
        service_area: ServiceArea,
        target_time: Optional[datetime] = None,
    ) -> AvailabilityResult:
        """Check the area's schedule for the weekday and HH:MM of ``target_time``.

        Zero-padded 24h strings order the same way as the times they encode,
        so start and end are compared as strings (both inclusive).
        """
        target_time = target_time or datetime.now()
        day_name = weekday_name(target_time)
        time_string = time_of_day(target_time)

        schedule = service_area.operating_hours.get(day_name)
        if schedule is None or not schedule.enabled:
            return AvailabilityResult(
                available=False,
                reason=f"Service not available on {day_name}s in {service_area.name}",
            )

        if time_string < schedule.start or time_string > schedule.end:
            return AvailabilityResult(
                available=False,
                reason=f"Service hours: {schedule.start} - {schedule.end}",
            )

        return AvailabilityResult(available=True)

    @staticmethod
    def haversine_distance(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
        return haversine_km(lat1, lng1, lat2, lng2)


def is_delivery_available(
    validator: DeliveryAreaValidator,
    lat: Optional[float] = None,
    lng: Optional[float] = None,
    postal_code: Optional[str] = None,
) -> bool:
    return validator.validate_address(lat, lng, postal_code).is_valid


def get_service_area_for_location(
    validator: DeliveryAreaValidator,
    lat: Optional[float] = None,
    lng: Optional[float] = None,
    postal_code: Optional[str] = None,
) -> Optional[ServiceArea]:
    return validator.validate_address(lat, lng, postal_code).service_area
