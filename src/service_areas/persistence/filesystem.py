"""JSON-file-backed service-area store."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from ..config import settings
from ..models.domain import ServiceArea
from .repository import InMemoryServiceAreaRepository
from .serialization import area_from_record, area_to_record

logger = logging.getLogger(__name__)


class JsonFileServiceAreaRepository(InMemoryServiceAreaRepository):
    """Keeps areas in memory and rewrites one JSON document after every write."""

    def __init__(self, root: Path | None = None, filename: str = "service_areas.json") -> None:
        super().__init__()
        self.root = (root or settings.data_root).resolve()
        self.root.mkdir(parents=True, exist_ok=True)
        self.path = self.root / filename
        self._load()

    def _load(self) -> None:
        if not self.path.exists():
            return
        with self.path.open("r", encoding="utf-8") as handle:
            records = json.load(handle)
        for record in records:
            area = area_from_record(record)
            self._areas[area.id] = area
        logger.info(f"Loaded {len(self._areas)} service areas from {self.path}")

    def _write(self) -> None:
        records: list[dict[str, Any]] = [area_to_record(area) for area in self._areas.values()]
        tmp_path = self.path.with_suffix(".tmp")
        with tmp_path.open("w", encoding="utf-8") as handle:
            json.dump(records, handle, ensure_ascii=False, indent=2)
        tmp_path.replace(self.path)

    def add(self, area: ServiceArea) -> ServiceArea:
        stored = super().add(area)
        with self._lock:
            self._write()
        return stored

    def save(self, area: ServiceArea) -> ServiceArea:
        stored = super().save(area)
        with self._lock:
            self._write()
        return stored
