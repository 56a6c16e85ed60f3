"""Pydantic request models for delivery endpoints."""

from __future__ import annotations

from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from ..models.domain import AreaStatus


class LocationRequest(BaseModel):
    lat: Optional[float] = Field(default=None, ge=-90, le=90)
    lng: Optional[float] = Field(default=None, ge=-180, le=180)
    postalCode: Optional[str] = None
    address: Optional[str] = Field(default=None, description="Free-form address, echoed back only.")

    @property
    def has_coordinates(self) -> bool:
        return self.lat is not None and self.lng is not None


class BulkValidationRequest(BaseModel):
    # Size limits are checked in the route so the client gets a descriptive 400.
    addresses: list[LocationRequest] = Field(default_factory=list)


class ServiceConfigModel(BaseModel):
    """Complete service configuration; every flag is required."""

    deliveryEnabled: bool
    pickupEnabled: bool
    sameDay: bool
    nextDay: bool
    standardDelivery: bool
    expressDelivery: bool


class DayScheduleModel(BaseModel):
    enabled: bool = True
    start: str = Field(default="09:00", pattern=r"^([01]\d|2[0-3]):[0-5]\d$")
    end: str = Field(default="17:00", pattern=r"^([01]\d|2[0-3]):[0-5]\d$")


class CenterModel(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class _AreaCreateBase(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    priority: int = 0
    status: AreaStatus = "active"
    serviceConfig: Optional[dict[str, bool]] = Field(
        default=None,
        description="Partial config; omitted flags take the defaults.",
    )
    operatingHours: Optional[dict[str, DayScheduleModel]] = None


class PostalCodeAreaCreate(_AreaCreateBase):
    type: Literal["postal_codes"]
    postalCodes: list[str] = Field(..., min_length=1)


class RadiusAreaCreate(_AreaCreateBase):
    type: Literal["radius"]
    center: CenterModel
    radiusKm: float = Field(..., gt=0)


class PolygonAreaCreate(_AreaCreateBase):
    type: Literal["polygon"]
    coordinates: list[list[tuple[float, float]]] = Field(
        ..., description="GeoJSON polygon rings in [lng, lat] order."
    )


# Each variant pins "type" with a Literal and forbids extra keys, so exactly one matches.
AreaCreateRequest = Union[PostalCodeAreaCreate, RadiusAreaCreate, PolygonAreaCreate]


class StatusUpdateRequest(BaseModel):
    status: AreaStatus


class PostalCodesRequest(BaseModel):
    postalCodes: list[str] = Field(..., min_length=1)
