"""Preset zones for the Vancouver launch."""

from __future__ import annotations

VANCOUVER_MVP_ZONES: tuple[dict, ...] = (
    {
        "name": "Downtown Vancouver",
        "postal_codes": ["V6B", "V6C", "V6E"],
        "service_config": {
            "deliveryEnabled": True,
            "pickupEnabled": True,
            "sameDay": True,
            "nextDay": True,
            "standardDelivery": True,
            "expressDelivery": True,
        },
        "priority": 10,
    },
    {
        "name": "West Vancouver",
        "postal_codes": ["V7V", "V7W"],
        "service_config": {
            "deliveryEnabled": True,
            "pickupEnabled": False,
            "sameDay": False,
            "nextDay": True,
            "standardDelivery": True,
            "expressDelivery": False,
        },
        "priority": 5,
    },
    {
        "name": "Richmond",
        "postal_codes": ["V6X", "V6Y", "V7A"],
        "service_config": {
            "deliveryEnabled": True,
            "pickupEnabled": True,
            "sameDay": False,
            "nextDay": True,
            "standardDelivery": True,
            "expressDelivery": False,
        },
        "priority": 7,
    },
    {
        "name": "Burnaby",
        "postal_codes": ["V5A", "V5B", "V5C", "V5E", "V5G", "V5H", "V5J"],
        "service_config": {
            "deliveryEnabled": True,
            "pickupEnabled": False,
            "sameDay": False,
            "nextDay": True,
            "standardDelivery": True,
            "expressDelivery": False,
        },
        "priority": 6,
    },
)
