"""Delivery location validation."""

from .validator import (
    AvailabilityResult,
    DeliveryAreaValidator,
    ValidationResult,
    get_service_area_for_location,
    is_delivery_available,
)

__all__ = [
    "DeliveryAreaValidator",
    "ValidationResult",
    "AvailabilityResult",
    "is_delivery_available",
    "get_service_area_for_location",
]
