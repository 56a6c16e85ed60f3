"""Constructors that validate boundary definitions before they are stored."""

from __future__ import annotations

import math
from typing import Iterable, Sequence

from ...models.domain import LatLng, PolygonBoundary, PostalCodeBoundary, RadiusBoundary
from ..postal_codes import normalize_postal_codes


def make_postal_code_boundary(postal_codes: Iterable[str]) -> PostalCodeBoundary:
    return PostalCodeBoundary(postal_codes=normalize_postal_codes(postal_codes))


def make_radius_boundary(center_lat: float, center_lng: float, radius_km: float) -> RadiusBoundary:
    if not -90.0 <= center_lat <= 90.0 or not -180.0 <= center_lng <= 180.0:
        raise ValueError(f"Invalid center coordinates ({center_lat}, {center_lng})")
    if not math.isfinite(radius_km) or radius_km <= 0:
        raise ValueError("radius_km must be a positive number")
    return RadiusBoundary(center=LatLng(lat=float(center_lat), lng=float(center_lng)), radius_km=float(radius_km))


def make_polygon_boundary(coordinates: Sequence[Sequence[Sequence[float]]]) -> PolygonBoundary:
    """Build a polygon boundary from GeoJSON rings (``[[[lng, lat], ...], ...]``)."""

    if not coordinates:
        raise ValueError("Polygon requires at least one ring")

    rings: list[list[tuple[float, float]]] = []
    for index, ring in enumerate(coordinates):
        positions: list[tuple[float, float]] = []
        for position in ring:
            if len(position) < 2:
                raise ValueError(f"Polygon ring {index} has a position without lng/lat")
            positions.append((float(position[0]), float(position[1])))
        distinct = {p for p in positions}
        if len(distinct) < 3:
            raise ValueError(f"Polygon ring {index} needs at least 3 distinct positions")
        if positions[0] != positions[-1]:
            positions.append(positions[0])
        rings.append(positions)
    return PolygonBoundary(coordinates=rings)
