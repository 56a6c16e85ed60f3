import logging

import pytest

from service_areas.errors import ServiceAreaConflictError, ServiceAreaNotFoundError
from service_areas.models.domain import AREA_STATUSES, ServiceConfig
from service_areas.persistence.repository import InMemoryServiceAreaRepository
from service_areas.services.areas.service import ServiceAreaService
from service_areas.services.stats import compute_delivery_stats


class _FlakyRepository(InMemoryServiceAreaRepository):
    """Rejects one area name on insert."""

    def __init__(self, failing_name: str) -> None:
        super().__init__()
        self.failing_name = failing_name

    def add(self, area):
        if area.name == self.failing_name:
            raise RuntimeError("write rejected")
        return super().add(area)


@pytest.fixture
def repository() -> InMemoryServiceAreaRepository:
    return InMemoryServiceAreaRepository()


@pytest.fixture
def service(repository: InMemoryServiceAreaRepository) -> ServiceAreaService:
    return ServiceAreaService(repository)


def test_create_postal_code_area_merges_config_over_defaults(service):
    area = service.create_postal_code_area(
        "Downtown",
        ["v6b 1a1", "V6C", "v6b"],
        service_config={"sameDay": True},
        priority=10,
    )

    assert area.id
    assert area.boundary_type == "postal_codes"
    assert area.boundaries.postal_codes == ["V6B", "V6C"]
    assert area.service_config == ServiceConfig(
        delivery_enabled=True,
        pickup_enabled=True,
        same_day=True,
        next_day=True,
        standard_delivery=True,
        express_delivery=False,
    )
    assert area.status == "active"
    assert area.priority == 10


def test_create_area_defaults(service):
    area = service.create_radius_area("Core", 49.2827, -123.1207, 5)

    assert area.priority == 0
    assert area.service_config == ServiceConfig()
    assert area.operating_hours == {}
    assert area.boundaries.radius_km == 5.0


def test_create_area_rejects_bad_input(service):
    with pytest.raises(ValueError):
        service.create_postal_code_area("Bad codes", ["V6"])
    with pytest.raises(ValueError):
        service.create_radius_area("Bad radius", 49.0, -123.0, 0)
    with pytest.raises(ValueError):
        service.create_radius_area("Bad center", 95.0, -123.0, 3)
    with pytest.raises(ValueError):
        service.create_postal_code_area("   ", ["V6B"])
    with pytest.raises(ValueError):
        service.create_postal_code_area("Bad status", ["V6B"], status="archived")
    with pytest.raises(ValueError):
        service.create_postal_code_area("Bad config", ["V6B"], service_config={"teleport": True})
    with pytest.raises(ValueError):
        service.create_postal_code_area("Bad hours", ["V6B"], operating_hours={"funday": {}})


def test_duplicate_names_conflict(service):
    service.create_postal_code_area("Downtown", ["V6B"])

    with pytest.raises(ServiceAreaConflictError):
        service.create_radius_area("Downtown", 49.28, -123.12, 3)


def test_create_polygon_area_with_hours(service):
    area = service.create_polygon_area(
        "Polygon",
        [[[-123.2, 49.2], [-123.0, 49.2], [-123.0, 49.35], [-123.2, 49.35]]],
        operating_hours={"Monday": {"start": "08:00", "end": "20:00"}},
    )

    assert area.boundary_type == "polygon"
    assert area.operating_hours["monday"].start == "08:00"
    assert area.operating_hours["monday"].enabled


def test_get_area_unknown_raises(service):
    with pytest.raises(ServiceAreaNotFoundError):
        service.get_area("missing")


def test_get_active_areas_ordering(service):
    service.create_postal_code_area("Richmond", ["V6X"], priority=7)
    service.create_postal_code_area("Burnaby", ["V5A"], priority=6)
    service.create_postal_code_area("Annacis", ["V3M"], priority=6)
    service.create_postal_code_area("Planned", ["V3N"], priority=50, status="planned")

    assert [area.name for area in service.get_active_areas()] == ["Richmond", "Annacis", "Burnaby"]


def test_update_area_status(service):
    area = service.create_postal_code_area("Downtown", ["V6B"])

    updated = service.update_area_status(area.id, "inactive")

    assert updated.status == "inactive"
    assert service.get_area(area.id).status == "inactive"
    assert service.update_area_status("missing", "active") is None
    with pytest.raises(ValueError):
        service.update_area_status(area.id, "deleted")


def test_add_and_remove_postal_codes_are_idempotent(service):
    area = service.create_postal_code_area("Downtown", ["V6B"])

    service.add_postal_codes_to_area(area.id, ["v6c 2b5", "V6B"])
    updated = service.add_postal_codes_to_area(area.id, ["V6C"])
    assert updated.boundaries.postal_codes == ["V6B", "V6C"]

    service.remove_postal_codes_from_area(area.id, ["v6b 1a1"])
    updated = service.remove_postal_codes_from_area(area.id, ["V6B", "M5V"])
    assert updated.boundaries.postal_codes == ["V6C"]
    assert service.get_area(area.id).boundaries.postal_codes == ["V6C"]


def test_postal_code_edits_on_unknown_or_wrong_area(service):
    radius = service.create_radius_area("Core", 49.28, -123.12, 3)

    assert service.add_postal_codes_to_area("missing", ["V6B"]) is None
    assert service.remove_postal_codes_from_area("missing", ["V6B"]) is None
    with pytest.raises(ValueError):
        service.add_postal_codes_to_area(radius.id, ["V6B"])


def test_update_service_config_replaces_instead_of_merging(service, caplog):
    area = service.create_postal_code_area(
        "Downtown", ["V6B"], service_config={"sameDay": True, "expressDelivery": True}
    )

    with caplog.at_level(logging.WARNING):
        updated = service.update_service_config(area.id, {"sameDay": True})

    assert updated.service_config == ServiceConfig(
        delivery_enabled=False,
        pickup_enabled=False,
        same_day=True,
        next_day=False,
        standard_delivery=False,
        express_delivery=False,
    )
    assert "deliveryEnabled" in caplog.text


def test_update_service_config_with_full_config(service):
    area = service.create_postal_code_area("Downtown", ["V6B"])
    config = ServiceConfig(pickup_enabled=False, express_delivery=True)

    assert service.update_service_config(area.id, config).service_config == config
    assert service.update_service_config("missing", config) is None


def test_update_operating_hours(service):
    area = service.create_postal_code_area("Downtown", ["V6B"])

    updated = service.update_operating_hours(area.id, {"friday": {"enabled": False}})

    assert set(updated.operating_hours) == {"friday"}
    assert not updated.operating_hours["friday"].enabled
    with pytest.raises(ValueError):
        service.update_operating_hours(area.id, {"friday": {"start": "9am"}})


def test_validate_location_for_booking(service):
    service.create_postal_code_area("Downtown", ["V6B"], service_config={"sameDay": True})

    served = service.validate_location_for_booking(postal_code="V6B 1A1")
    missed = service.validate_location_for_booking(49.28, -123.12, "M5V")

    assert served.can_serve
    assert served.service_area.name == "Downtown"
    assert served.available_services == ["delivery", "pickup", "sameDay", "nextDay"]
    assert served.message == "Delivery available for V6B 1A1 in Downtown"

    assert not missed.can_serve
    assert missed.service_area is None
    assert missed.available_services == []
    assert missed.message == (
        "Location is outside our current delivery areas. Postal code M5V is not in our current service areas"
    )


def test_get_areas_for_postal_code(service):
    service.create_postal_code_area("Low", ["V6B"], priority=1)
    service.create_postal_code_area("High", ["V6B", "V6C"], priority=9)
    service.create_postal_code_area("Off", ["V6B"], priority=20, status="inactive")

    assert [area.name for area in service.get_areas_for_postal_code("v6b 1a1")] == ["High", "Low"]
    assert service.get_areas_for_postal_code("M5V") == []


def test_setup_vancouver_mvp_is_idempotent(service, repository):
    first = service.setup_vancouver_mvp()
    second = service.setup_vancouver_mvp()

    assert [area.name for area in first.created] == [
        "Downtown Vancouver",
        "West Vancouver",
        "Richmond",
        "Burnaby",
    ]
    assert first.errors == []
    assert second.created == []
    assert second.errors == []
    assert repository.count() == 4

    downtown = repository.find_by_name("Downtown Vancouver")
    assert downtown.priority == 10
    assert downtown.service_config.same_day
    assert not repository.find_by_name("West Vancouver").service_config.pickup_enabled


def test_setup_vancouver_mvp_collects_failures():
    repository = _FlakyRepository("Richmond")
    service = ServiceAreaService(repository)

    result = service.setup_vancouver_mvp()

    assert [area.name for area in result.created] == ["Downtown Vancouver", "West Vancouver", "Burnaby"]
    assert result.errors == ["Failed to create Richmond: write rejected"]


def test_stats_after_seeding(service, repository):
    service.setup_vancouver_mvp()
    service.create_radius_area("Core", 49.28, -123.12, 3, status="planned")
    burnaby = repository.find_by_name("Burnaby")
    service.update_area_status(burnaby.id, "inactive")

    stats = compute_delivery_stats(repository)

    assert stats["overview"] == {
        "totalAreas": 5,
        "activeAreas": 3,
        "inactiveAreas": 1,
        "plannedAreas": 1,
        "totalPostalCodes": 8,
    }
    assert stats["areasByType"] == {"postal_codes": 3}
    assert stats["serviceCapabilities"] == {"sameDay": 1, "nextDay": 3, "pickup": 2, "express": 1}


def test_area_statuses_follow_status_type(service):
    assert AREA_STATUSES == ("active", "inactive", "planned")

    for status in AREA_STATUSES:
        assert service.create_postal_code_area(f"Zone {status}", ["V6B"], status=status).status == status
