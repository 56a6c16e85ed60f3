"""Storage contract for service areas and the in-memory implementation."""

from __future__ import annotations

import copy
import threading
import uuid
from abc import ABC, abstractmethod
from typing import Optional

from ..errors import ServiceAreaConflictError, ServiceAreaNotFoundError
from ..models.domain import ServiceArea, utcnow


def new_area_id() -> str:
    return uuid.uuid4().hex


class ServiceAreaRepository(ABC):
    """Contract for service-area stores.

    ``list_areas`` returns areas in insertion order; callers rely on this to
    break priority ties deterministically. Returned objects are copies, so
    mutating them has no effect until they are passed to ``save``.
    """

    @abstractmethod
    def list_areas(self, status: Optional[str] = None, boundary_type: Optional[str] = None) -> list[ServiceArea]:
        raise NotImplementedError

    @abstractmethod
    def get(self, area_id: str) -> Optional[ServiceArea]:
        raise NotImplementedError

    @abstractmethod
    def find_by_name(self, name: str) -> Optional[ServiceArea]:
        raise NotImplementedError

    @abstractmethod
    def add(self, area: ServiceArea) -> ServiceArea:
        """Insert a new area. Raises ``ServiceAreaConflictError`` on duplicate names."""
        raise NotImplementedError

    @abstractmethod
    def save(self, area: ServiceArea) -> ServiceArea:
        """Replace a stored area. Raises ``ServiceAreaNotFoundError`` for unknown ids."""
        raise NotImplementedError

    def count(self, status: Optional[str] = None) -> int:
        return len(self.list_areas(status=status))


class InMemoryServiceAreaRepository(ServiceAreaRepository):
    """Process-local store; the default backend and the one used in tests."""

    def __init__(self) -> None:
        self._areas: dict[str, ServiceArea] = {}
        self._lock = threading.Lock()

    def list_areas(self, status: Optional[str] = None, boundary_type: Optional[str] = None) -> list[ServiceArea]:
        with self._lock:
            return [
                copy.deepcopy(area)
                for area in self._areas.values()
                if (status is None or area.status == status)
                and (boundary_type is None or area.boundary_type == boundary_type)
            ]

    def get(self, area_id: str) -> Optional[ServiceArea]:
        with self._lock:
            area = self._areas.get(area_id)
            return copy.deepcopy(area) if area else None

    def find_by_name(self, name: str) -> Optional[ServiceArea]:
        with self._lock:
            for area in self._areas.values():
                if area.name == name:
                    return copy.deepcopy(area)
        return None

    def add(self, area: ServiceArea) -> ServiceArea:
        with self._lock:
            if any(existing.name == area.name for existing in self._areas.values()):
                raise ServiceAreaConflictError(area.name)
            if not area.id:
                area.id = new_area_id()
            self._areas[area.id] = copy.deepcopy(area)
        return area

    def save(self, area: ServiceArea) -> ServiceArea:
        with self._lock:
            if area.id not in self._areas:
                raise ServiceAreaNotFoundError(area.id)
            area.updated_at = utcnow()
            self._areas[area.id] = copy.deepcopy(area)
        return area
