from __future__ import annotations

import numpy as np

from dispel.enclosure import EnclosureTester
from dispel.geometry import dist, point_in_polygon
from dispel.types import RemovalRequest, Target

SQUARE = [(0, 0), (10, 0), (10, 10), (0, 10), (0, 0)]


class FlatProjector:
    """Screen point = (x, y) of the world position; z < 0 means behind the camera."""

    def world_to_screen(self, world_point):
        if world_point[2] < 0:
            return None
        return (float(world_point[0]), float(world_point[1]))


def test_dist() -> None:
    assert dist((0, 0), (3, 4)) == 5.0
    assert dist(np.array([1.0, 1.0]), (1, 1)) == 0.0


def test_square_inside_and_outside() -> None:
    assert point_in_polygon((5, 5), SQUARE)
    assert not point_in_polygon((15, 5), SQUARE)
    assert not point_in_polygon((5, -1), SQUARE)


def test_concave_polygon() -> None:
    # U shape open at the top
    u_shape = [(0, 0), (30, 0), (30, 30), (20, 30), (20, 10), (10, 10), (10, 30), (0, 30)]
    assert point_in_polygon((5, 20), u_shape)
    assert point_in_polygon((25, 20), u_shape)
    assert not point_in_polygon((15, 20), u_shape)


def test_degenerate_polygon_encloses_nothing() -> None:
    assert not point_in_polygon((0, 0), [])
    assert not point_in_polygon((1, 1), [(0, 0), (2, 2)])


def test_edge_point_is_deterministic() -> None:
    first = point_in_polygon((10, 5), SQUARE)
    assert all(point_in_polygon((10, 5), SQUARE) == first for _ in range(20))

    vertex = point_in_polygon((0, 0), SQUARE)
    assert all(point_in_polygon((0, 0), SQUARE) == vertex for _ in range(20))


def test_enclosure_tester_removes_only_enclosed_targets() -> None:
    tester = EnclosureTester(FlatProjector())
    targets = [
        Target("inside", np.array([5.0, 5.0, 1.0])),
        Target("outside", np.array([15.0, 5.0, 1.0])),
        Target("behind", np.array([5.0, 5.0, -1.0])),
    ]

    removal = tester.find_enclosed(SQUARE, targets)

    assert removal == RemovalRequest(frozenset({"inside"}))


def test_enclosure_tester_empty_registry() -> None:
    tester = EnclosureTester(FlatProjector())
    assert tester.find_enclosed(SQUARE, []).target_ids == frozenset()
