"""Domain models for delivery service areas."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import ClassVar, Literal, Optional, Union, get_args

AreaStatus = Literal["active", "inactive", "planned"]
AREA_STATUSES: tuple[str, ...] = get_args(AreaStatus)

WEEKDAYS: tuple[str, ...] = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class LatLng:
    lat: float
    lng: float


@dataclass(slots=True)
class PostalCodeBoundary:
    """Area defined by a set of 3-character postal prefixes (e.g. ``V6B``)."""

    type: ClassVar[str] = "postal_codes"

    postal_codes: list[str] = field(default_factory=list)


@dataclass(slots=True)
class RadiusBoundary:
    """Area defined by a center point and a great-circle radius in kilometres."""

    type: ClassVar[str] = "radius"

    center: LatLng
    radius_km: float


@dataclass(slots=True)
class PolygonBoundary:
    """Area defined by GeoJSON polygon rings in ``[lng, lat]`` order.

    The first ring is the exterior, any further rings are holes.
    """

    type: ClassVar[str] = "polygon"

    coordinates: list[list[tuple[float, float]]]


Boundary = Union[PostalCodeBoundary, RadiusBoundary, PolygonBoundary]


@dataclass(slots=True)
class ServiceConfig:
    """Capabilities offered inside a service area."""

    delivery_enabled: bool = True
    pickup_enabled: bool = True
    same_day: bool = False
    next_day: bool = True
    standard_delivery: bool = True
    express_delivery: bool = False


@dataclass(slots=True)
class DaySchedule:
    enabled: bool = True
    start: str = "09:00"
    end: str = "17:00"


@dataclass(slots=True)
class ServiceArea:
    """One deliverable geographic zone with its service configuration."""

    id: str
    name: str
    boundaries: Boundary
    service_config: ServiceConfig = field(default_factory=ServiceConfig)
    priority: int = 0
    status: AreaStatus = "active"
    description: Optional[str] = None
    operating_hours: dict[str, DaySchedule] = field(default_factory=dict)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @property
    def boundary_type(self) -> str:
        return self.boundaries.type
