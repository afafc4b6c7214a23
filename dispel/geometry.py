# dispel/geometry.py
from typing import Sequence

import numpy as np

from dispel.types import Point2D


def dist(a, b) -> float:
    return float(np.linalg.norm(np.subtract(a, b, dtype=np.float64)))


def point_in_polygon(point: Point2D, polygon: Sequence[Point2D]) -> bool:
    """
    Even-odd ray casting: cast a ray towards +x and count edge crossings.
    Points exactly on an edge get whatever parity the arithmetic gives,
    but always the same one for the same input.
    """
    if len(polygon) < 3:
        return False

    poly = np.asarray(polygon, dtype=np.float64)
    x, y = float(point[0]), float(point[1])

    xi, yi = poly[:, 0], poly[:, 1]
    # edge i runs from vertex i-1 to vertex i (vertex -1 wraps to the last one)
    xj, yj = np.roll(xi, 1), np.roll(yi, 1)

    straddles = (yi > y) != (yj > y)
    with np.errstate(divide="ignore", invalid="ignore"):
        x_cross = (xj - xi) * (y - yi) / (yj - yi) + xi
    crossings = straddles & (x < x_cross)
    return bool(np.count_nonzero(crossings) % 2)
