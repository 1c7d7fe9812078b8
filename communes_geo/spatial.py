"""
Point-in-boundary lookups over commune contours.

Contours are bulk-inserted during construction, then packed into a shapely
STRtree by build(). Queries do a bbox pass through the tree followed by an
exact intersects test, so a point lying on a shared edge matches both
neighbours; the smaller contour wins, then the one inserted first. A code
inserted twice keeps only its last contour, like the code index.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol

import numpy as np
import shapely
from shapely.geometry import Point, shape
from shapely.strtree import STRtree

from communes_geo.models import Commune

logger = logging.getLogger(__name__)


class PointLocator(Protocol):
    def insert(self, commune: Commune) -> None: ...

    def build(self) -> None: ...

    def query_point(self, lon: float, lat: float) -> Optional[Commune]: ...

    def __len__(self) -> int: ...


class SpatialIndex:
    def __init__(self) -> None:
        # code -> (contour, commune); the last record for a code wins
        self._pending: dict[str, tuple] = {}
        self._communes: list[Commune] = []
        self._geoms: list = []
        self._tree: STRtree | None = None
        self._areas = np.zeros(0, dtype=np.float64)

    def insert(self, commune: Commune) -> None:
        if self._tree is not None:
            raise RuntimeError("SpatialIndex is already built")
        if commune.boundary is None:
            self._pending.pop(commune.code, None)
            return
        self._pending[commune.code] = (shape(commune.boundary), commune)

    def build(self) -> None:
        self._geoms = [geom for geom, _ in self._pending.values()]
        self._communes = [commune for _, commune in self._pending.values()]
        self._pending = {}
        self._tree = STRtree(self._geoms)
        if self._geoms:
            self._areas = shapely.area(self._geoms)
        logger.debug("Spatial index built over %d contours", len(self._geoms))

    def query_point(self, lon: float, lat: float) -> Optional[Commune]:
        if self._tree is None:
            raise RuntimeError("SpatialIndex.query_point() called before build()")
        idxs = self._tree.query(Point(float(lon), float(lat)), predicate="intersects")
        if len(idxs) == 0:
            return None
        best = min((int(i) for i in idxs), key=lambda i: (self._areas[i], i))
        return self._communes[best]

    def __len__(self) -> int:
        return len(self._communes)
