"""Operating-hours parsing and weekday helpers."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any, Mapping

from ..models.domain import WEEKDAYS, DaySchedule

_HH_MM = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def weekday_name(moment: datetime) -> str:
    """Lowercase English weekday name, independent of the process locale."""

    return WEEKDAYS[moment.weekday()]


def time_of_day(moment: datetime) -> str:
    return f"{moment.hour:02d}:{moment.minute:02d}"


def _parse_day(day: str, value: Any) -> DaySchedule:
    if isinstance(value, DaySchedule):
        schedule = value
    elif isinstance(value, Mapping):
        schedule = DaySchedule(
            enabled=bool(value.get("enabled", True)),
            start=str(value.get("start", "09:00")),
            end=str(value.get("end", "17:00")),
        )
    else:
        raise ValueError(f"Operating hours for '{day}' must be an object")

    for label, hhmm in (("start", schedule.start), ("end", schedule.end)):
        if not _HH_MM.match(hhmm):
            raise ValueError(f"Operating hours {label} for '{day}' must be HH:MM, got '{hhmm}'")
    return schedule


def parse_operating_hours(hours: Mapping[str, Any] | None) -> dict[str, DaySchedule]:
    if not hours:
        return {}
    parsed: dict[str, DaySchedule] = {}
    for day, value in hours.items():
        key = str(day).strip().lower()
        if key not in WEEKDAYS:
            raise ValueError(f"Unknown weekday '{day}'")
        parsed[key] = _parse_day(key, value)
    return parsed


def operating_hours_to_dict(hours: Mapping[str, DaySchedule]) -> dict[str, dict[str, Any]]:
    return {
        day: {"enabled": schedule.enabled, "start": schedule.start, "end": schedule.end}
        for day, schedule in hours.items()
    }
