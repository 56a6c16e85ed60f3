"""Service configuration defaults, merging and capability views."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Mapping, Optional

from ..models.domain import ServiceConfig

DEFAULT_SERVICE_CONFIG = ServiceConfig(
    delivery_enabled=True,
    pickup_enabled=True,
    same_day=False,
    next_day=True,
    standard_delivery=True,
    express_delivery=False,
)

CAMEL_CASE_KEYS: dict[str, str] = {
    "delivery_enabled": "deliveryEnabled",
    "pickup_enabled": "pickupEnabled",
    "same_day": "sameDay",
    "next_day": "nextDay",
    "standard_delivery": "standardDelivery",
    "express_delivery": "expressDelivery",
}
_FIELD_BY_KEY: dict[str, str] = {
    **{name: name for name in CAMEL_CASE_KEYS},
    **{camel: name for name, camel in CAMEL_CASE_KEYS.items()},
}

# Names used by the booking flow and the HTTP "restrictions" view.
CAPABILITY_NAMES: tuple[str, ...] = ("delivery", "pickup", "sameDay", "nextDay", "express")


def _field_values(values: Mapping[str, Any]) -> dict[str, bool]:
    resolved: dict[str, bool] = {}
    for key, value in values.items():
        field_name = _FIELD_BY_KEY.get(key)
        if field_name is None:
            raise ValueError(f"Unknown service config option '{key}'")
        resolved[field_name] = bool(value)
    return resolved


def build_service_config(
    overrides: Optional[Mapping[str, Any]] = None,
    defaults: ServiceConfig = DEFAULT_SERVICE_CONFIG,
) -> ServiceConfig:
    """Merge caller overrides on top of the defaults; override keys win.

    Keys may be snake_case field names or their camelCase wire names.
    """

    if overrides is None:
        return replace(defaults)
    return replace(defaults, **_field_values(overrides))


def service_config_from_mapping(values: Mapping[str, Any]) -> tuple[ServiceConfig, list[str]]:
    """Build a config holding exactly the given flags; absent flags are False.

    Returns the config and the camelCase names of the flags that were absent.
    """

    present = _field_values(values)
    missing = [CAMEL_CASE_KEYS[f.name] for f in fields(ServiceConfig) if f.name not in present]
    config = ServiceConfig(**{f.name: present.get(f.name, False) for f in fields(ServiceConfig)})
    return config, missing


def service_config_to_dict(config: ServiceConfig) -> dict[str, bool]:
    return {CAMEL_CASE_KEYS[name]: value for name, value in asdict(config).items()}


@dataclass(slots=True, frozen=True)
class AvailableServices:
    """Fixed-shape capability record read off a service area's config."""

    delivery: bool
    pickup: bool
    same_day: bool
    next_day: bool
    express: bool

    @classmethod
    def from_config(cls, config: ServiceConfig) -> "AvailableServices":
        return cls(
            delivery=config.delivery_enabled,
            pickup=config.pickup_enabled,
            same_day=config.same_day,
            next_day=config.next_day,
            express=config.express_delivery,
        )

    def as_dict(self) -> dict[str, bool]:
        return {
            "delivery": self.delivery,
            "pickup": self.pickup,
            "sameDay": self.same_day,
            "nextDay": self.next_day,
            "express": self.express,
        }

    def enabled(self) -> list[str]:
        return [name for name, enabled in self.as_dict().items() if enabled]
