from datetime import datetime

import pytest

from service_areas.models.domain import (
    DaySchedule,
    LatLng,
    PostalCodeBoundary,
    RadiusBoundary,
    ServiceArea,
)
from service_areas.persistence.repository import InMemoryServiceAreaRepository
from service_areas.services.areas.boundaries import make_polygon_boundary
from service_areas.services.validation import (
    DeliveryAreaValidator,
    get_service_area_for_location,
    is_delivery_available,
)
from service_areas.services.validation.validator import NO_INPUT_REASON

DOWNTOWN = (49.2827, -123.1207)


def _postal_area(name: str, codes: list[str], *, priority: int = 0, status: str = "active") -> ServiceArea:
    return ServiceArea(
        id="",
        name=name,
        boundaries=PostalCodeBoundary(postal_codes=codes),
        priority=priority,
        status=status,
    )


def _radius_area(name: str, radius_km: float, *, priority: int = 0, status: str = "active") -> ServiceArea:
    return ServiceArea(
        id="",
        name=name,
        boundaries=RadiusBoundary(center=LatLng(lat=DOWNTOWN[0], lng=DOWNTOWN[1]), radius_km=radius_km),
        priority=priority,
        status=status,
    )


def _radius_at(name: str, lat: float, lng: float, radius_km: float, *, priority: int = 0) -> ServiceArea:
    return ServiceArea(
        id="",
        name=name,
        boundaries=RadiusBoundary(center=LatLng(lat=lat, lng=lng), radius_km=radius_km),
        priority=priority,
    )


class _OfflineRepository(InMemoryServiceAreaRepository):
    def list_areas(self, status=None, boundary_type=None):
        raise ConnectionError("store offline")


@pytest.fixture
def repository() -> InMemoryServiceAreaRepository:
    return InMemoryServiceAreaRepository()


@pytest.fixture
def validator(repository: InMemoryServiceAreaRepository) -> DeliveryAreaValidator:
    return DeliveryAreaValidator(repository)


def test_coordinates_pick_highest_priority_area(repository, validator):
    repository.add(_radius_area("Wide", 20.0, priority=5))
    repository.add(_radius_area("Core", 3.0, priority=10))

    result = validator.validate_coordinates(49.2830, -123.1210)

    assert result.is_valid
    assert result.service_area.name == "Core"
    assert result.reasons == ["Delivery available in Core"]
    assert result.available_services.delivery


def test_coordinates_priority_tie_keeps_insertion_order(repository, validator):
    repository.add(_radius_area("First", 5.0, priority=3))
    repository.add(_radius_area("Second", 5.0, priority=3))

    assert validator.validate_coordinates(*DOWNTOWN).service_area.name == "First"


def test_coordinates_ignore_inactive_areas(repository, validator):
    repository.add(_radius_area("Paused", 5.0, priority=10, status="inactive"))
    repository.add(_radius_area("Planned", 5.0, priority=10, status="planned"))

    result = validator.validate_coordinates(*DOWNTOWN)

    assert not result.is_valid
    assert result.reasons == ["Location is outside our current delivery areas"]


def test_coordinates_never_match_postal_only_areas(repository, validator):
    repository.add(_postal_area("Downtown Vancouver", ["V6B", "V6C", "V6E"], priority=10))

    result = validator.validate_coordinates(49.28, -123.12)

    assert not result.is_valid
    assert result.service_area is None


def test_coordinates_match_polygon_area(repository, validator):
    ring = [[-123.2, 49.2], [-123.0, 49.2], [-123.0, 49.35], [-123.2, 49.35]]
    repository.add(ServiceArea(id="", name="Polygon", boundaries=make_polygon_boundary([ring])))

    assert validator.validate_coordinates(49.28, -123.12).service_area.name == "Polygon"
    assert not validator.validate_coordinates(49.5, -123.12).is_valid


def test_postal_code_prefix_match_and_priority(repository, validator):
    repository.add(_postal_area("Low", ["V6B"], priority=5))
    repository.add(_postal_area("High", ["V6B", "V6C"], priority=10))

    result = validator.validate_postal_code("v6b 1a1")

    assert result.is_valid
    assert result.service_area.name == "High"
    assert result.reasons == ["Delivery available for v6b 1a1 in High"]


def test_postal_code_miss_reason_echoes_input(repository, validator):
    repository.add(_postal_area("Downtown", ["V6B"]))

    result = validator.validate_postal_code("M5V 2T6")

    assert not result.is_valid
    assert result.reasons == ["Postal code M5V 2T6 is not in our current service areas"]


def test_address_without_input_asks_for_it(validator):
    result = validator.validate_address()

    assert not result.is_valid
    assert result.reasons == [NO_INPUT_REASON]
    assert result.reasons == ["Please provide coordinates or postal code for validation"]


def test_address_falls_back_to_postal_code(repository, validator):
    repository.add(_postal_area("West Vancouver", ["V7V"]))

    result = validator.validate_address(49.28, -123.12, "V7V 1A1")

    assert result.is_valid
    assert result.service_area.name == "West Vancouver"
    assert result.reasons == ["Delivery available for V7V 1A1 in West Vancouver"]


def test_address_accumulates_failure_reasons(validator):
    result = validator.validate_address(49.28, -123.12, "M5V")

    assert not result.is_valid
    assert result.reasons == [
        "Location is outside our current delivery areas",
        "Postal code M5V is not in our current service areas",
    ]


def test_address_with_partial_coordinates_uses_postal_code_only(repository, validator):
    repository.add(_radius_area("Core", 5.0))

    result = validator.validate_address(lat=DOWNTOWN[0], postal_code="M5V")

    assert result.reasons == ["Postal code M5V is not in our current service areas"]


def test_store_failure_becomes_reason():
    validator = DeliveryAreaValidator(_OfflineRepository())

    coords = validator.validate_coordinates(*DOWNTOWN)
    postal = validator.validate_postal_code("V6B")
    combined = validator.validate_address(*DOWNTOWN, "V6B")

    assert coords.reasons == ["Error validating coordinates: store offline"]
    assert postal.reasons == ["Error validating postal code: store offline"]
    assert combined.reasons == coords.reasons + postal.reasons


def test_helper_functions(repository, validator):
    repository.add(_postal_area("Downtown", ["V6B"]))

    assert is_delivery_available(validator, postal_code="V6B")
    assert not is_delivery_available(validator, postal_code="M5V")
    assert get_service_area_for_location(validator, postal_code="V6B").name == "Downtown"
    assert get_service_area_for_location(validator, postal_code="M5V") is None


def test_active_service_areas_sorted_for_display(repository, validator):
    repository.add(_postal_area("Burnaby", ["V5A"], priority=6))
    repository.add(_postal_area("Alpha", ["V5B"], priority=6))
    repository.add(_postal_area("Downtown", ["V6B"], priority=10))
    repository.add(_postal_area("Closed", ["V6C"], priority=99, status="inactive"))

    names = [area.name for area in validator.get_active_service_areas()]

    assert names == ["Downtown", "Alpha", "Burnaby"]


@pytest.mark.parametrize(
    ("hour", "minute", "available"),
    [(8, 59, False), (9, 0, True), (12, 30, True), (17, 0, True), (17, 1, False)],
)
def test_operating_hours_boundaries_are_inclusive(hour: int, minute: int, available: bool):
    area = _postal_area("Downtown", ["V6B"])
    area.operating_hours = {"tuesday": DaySchedule(enabled=True, start="09:00", end="17:00")}

    # 2024-01-02 is a Tuesday
    result = DeliveryAreaValidator.is_service_available_at_time(area, datetime(2024, 1, 2, hour, minute))

    assert result.available is available
    if not available:
        assert result.reason == "Service hours: 09:00 - 17:00"


def test_operating_hours_missing_or_disabled_day():
    area = _postal_area("Downtown", ["V6B"])
    area.operating_hours = {"saturday": DaySchedule(enabled=False)}

    sunday = DeliveryAreaValidator.is_service_available_at_time(area, datetime(2024, 1, 7, 12, 0))
    saturday = DeliveryAreaValidator.is_service_available_at_time(area, datetime(2024, 1, 6, 12, 0))

    assert not sunday.available
    assert sunday.reason == "Service not available on sundays in Downtown"
    assert saturday.reason == "Service not available on saturdays in Downtown"


def test_haversine_distance_delegates():
    assert DeliveryAreaValidator.haversine_distance(*DOWNTOWN, *DOWNTOWN) == 0.0


def test_coordinates_near_antipodal_area_does_not_break_lookup(repository, validator):
    repository.add(_radius_at("Local", -87.4853, -175.957, 5.0, priority=1))
    repository.add(_radius_at("Far", 87.4853, 4.043, 5.0, priority=10))

    result = validator.validate_coordinates(-87.4853, -175.957)

    assert result.is_valid
    assert result.service_area.name == "Local"
    assert result.reasons == ["Delivery available in Local"]


def test_geometry_error_only_skips_its_own_area(repository, validator, monkeypatch):
    from service_areas.services import geospatial
    from service_areas.services.validation import validator as validator_module

    repository.add(_radius_area("Broken", 7.0, priority=10))
    repository.add(_radius_area("Core", 5.0, priority=1))

    def contains_or_fail(boundary, lat, lng):
        if boundary.radius_km == 7.0:
            raise ValueError("math domain error")
        return geospatial.boundary_contains(boundary, lat, lng)

    monkeypatch.setattr(validator_module, "boundary_contains", contains_or_fail)

    result = validator.validate_coordinates(*DOWNTOWN)

    assert result.is_valid
    assert result.service_area.name == "Core"


def test_address_coordinates_never_match_postal_only_area(repository, validator):
    repository.add(_postal_area("Downtown Vancouver", ["V6B", "V6C", "V6E"], priority=10))

    result = validator.validate_address(49.28, -123.12)

    assert not result.is_valid
    assert result.service_area is None
    assert result.reasons == ["Location is outside our current delivery areas"]
