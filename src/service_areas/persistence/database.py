"""Supabase persistence for service areas.

Expected table (one row per area)::

    create table service_areas (
        id text primary key,
        name text unique not null,
        description text,
        status text not null default 'active',
        priority integer not null default 0,
        boundaries jsonb not null,
        service_config jsonb not null,
        operating_hours jsonb not null default '{}'::jsonb,
        created_at timestamptz not null default now(),
        updated_at timestamptz not null default now()
    );
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from supabase import Client

from ..config import settings
from ..errors import ServiceAreaConflictError, ServiceAreaNotFoundError
from ..models.domain import ServiceArea, utcnow
from .repository import ServiceAreaRepository, new_area_id
from .serialization import area_from_record, area_to_record

logger = logging.getLogger(__name__)


class SupabaseServiceAreaRepository(ServiceAreaRepository):
    def __init__(self, client: Client, table: str | None = None) -> None:
        self.client = client
        self.table_name = table or settings.supabase_table

    def _table(self):
        return self.client.table(self.table_name)

    def _rows_to_areas(self, rows: list[dict[str, Any]] | None) -> list[ServiceArea]:
        areas: list[ServiceArea] = []
        for row in rows or []:
            try:
                areas.append(area_from_record(row))
            except (KeyError, ValueError, TypeError) as e:
                # Skip invalid rows but continue processing
                logger.warning(f"Skipping invalid service area row {row.get('id')}: {e}")
        return areas

    def list_areas(self, status: Optional[str] = None, boundary_type: Optional[str] = None) -> list[ServiceArea]:
        query = self._table().select("*")
        if status is not None:
            query = query.eq("status", status)
        if boundary_type is not None:
            query = query.eq("boundaries->>type", boundary_type)
        response = query.order("created_at").order("id").execute()
        return self._rows_to_areas(response.data)

    def get(self, area_id: str) -> Optional[ServiceArea]:
        response = self._table().select("*").eq("id", area_id).limit(1).execute()
        areas = self._rows_to_areas(response.data)
        return areas[0] if areas else None

    def find_by_name(self, name: str) -> Optional[ServiceArea]:
        response = self._table().select("*").eq("name", name).limit(1).execute()
        areas = self._rows_to_areas(response.data)
        return areas[0] if areas else None

    def count(self, status: Optional[str] = None) -> int:
        query = self._table().select("id", count="exact")
        if status is not None:
            query = query.eq("status", status)
        response = query.execute()
        return response.count or 0

    def add(self, area: ServiceArea) -> ServiceArea:
        if self.find_by_name(area.name) is not None:
            raise ServiceAreaConflictError(area.name)
        if not area.id:
            area.id = new_area_id()
        self._table().insert(area_to_record(area)).execute()
        logger.info(f"Inserted service area {area.name} ({area.id})")
        return area

    def save(self, area: ServiceArea) -> ServiceArea:
        area.updated_at = utcnow()
        record = area_to_record(area)
        record.pop("id")
        record.pop("created_at")
        response = self._table().update(record).eq("id", area.id).execute()
        if not response.data:
            raise ServiceAreaNotFoundError(area.id)
        return area
