"""Geospatial helper functions."""

from __future__ import annotations

import math
from typing import Sequence

from shapely.geometry import Point, Polygon

from ..models.domain import Boundary, PolygonBoundary, RadiusBoundary

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    # Rounding can push a just outside [0, 1] for near-antipodal points
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def point_in_polygon(lat: float, lon: float, rings: Sequence[Sequence[Sequence[float]]]) -> bool:
    """Return True if the point lies inside (or on the edge of) GeoJSON polygon rings.

    ``rings`` follows GeoJSON: ``[[lng, lat], ...]`` positions, exterior first.
    """

    if not rings:
        return False
    exterior, *holes = rings
    polygon = Polygon(
        [(float(lng), float(lat_)) for lng, lat_ in exterior],
        [[(float(lng), float(lat_)) for lng, lat_ in hole] for hole in holes],
    )
    return polygon.covers(Point(lon, lat))


def point_in_radius(lat: float, lon: float, center_lat: float, center_lon: float, radius_km: float) -> bool:
    return haversine_km(center_lat, center_lon, lat, lon) <= radius_km


def boundary_contains(boundary: Boundary, lat: float, lon: float) -> bool:
    """Geometric containment test for a service-area boundary.

    Postal-code boundaries carry no geometry and never contain a coordinate.
    """

    if isinstance(boundary, RadiusBoundary):
        return point_in_radius(lat, lon, boundary.center.lat, boundary.center.lng, boundary.radius_km)
    if isinstance(boundary, PolygonBoundary):
        return point_in_polygon(lat, lon, boundary.coordinates)
    return False
