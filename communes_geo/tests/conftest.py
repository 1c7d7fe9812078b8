"""
Shared fixtures: three communes tiling the square [-10, 10] x [-10, 10],
two of them sharing a name, all three sharing postal code 11111.
"""

from __future__ import annotations

import copy

import pytest

from communes_geo.database import get_indexed_db


def square(x0: float, y0: float, x1: float, y1: float) -> dict:
    return {
        "type": "Polygon",
        "coordinates": [[[x0, y0], [x0, y1], [x1, y1], [x1, y0], [x0, y0]]],
    }


GEOM1 = square(-10, -10, 0, 0)
GEOM2 = square(-10, 0, 0, 10)
GEOM3 = square(0, 0, 10, 10)

COMMUNE1 = {"nom": "abc", "code": "12345", "codesPostaux": ["11111", "22222"], "contour": GEOM1}
COMMUNE2 = {"nom": "efg", "code": "23456", "codesPostaux": ["11111"], "contour": GEOM2}
COMMUNE3 = {"nom": "efg", "code": "67890", "codesPostaux": ["11111"], "contour": GEOM3}


@pytest.fixture
def raw_communes() -> list[dict]:
    return copy.deepcopy([COMMUNE1, COMMUNE2, COMMUNE3])


@pytest.fixture(scope="module")
def db():
    return get_indexed_db(copy.deepcopy([COMMUNE1, COMMUNE2, COMMUNE3]))
