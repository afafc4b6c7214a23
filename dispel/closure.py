# dispel/closure.py
from typing import Optional

from config import CLOSURE_DISTANCE, MIN_POINTS
from dispel.geometry import dist
from dispel.types import GestureSession, Mode, Point2D


class ClosureDetector:
    def __init__(self, min_points: int = MIN_POINTS, closure_distance: float = CLOSURE_DISTANCE):
        self.min_points = min_points
        self.closure_distance = closure_distance

    def check(self, session: GestureSession, pointer: Optional[Point2D]) -> bool:
        """
        True when the live pointer is back within closure_distance of the
        first point of a long enough path. On success the pointer is appended
        so the polygon ends exactly where the loop was closed.
        """
        if session.mode != Mode.DRAWING or len(session.path) < self.min_points:
            return False
        if pointer is None:
            return False

        if dist(pointer, session.path[0]) > self.closure_distance:
            return False

        session.path.append((float(pointer[0]), float(pointer[1])))
        return True
