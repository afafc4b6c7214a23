# dispel/sampler.py
import logging
from typing import Optional

from config import MIN_POINT_DISTANCE
from dispel.geometry import dist
from dispel.types import GestureSession, Mode, Point2D

logger = logging.getLogger(__name__)


class Sampler:
    """
    Turns the live pointer into the drawn path.

    A point is appended only when the session's segment timer fires and the
    pointer has moved more than min_distance from the last recorded point,
    so the path is de-duplicated in time and in space.
    """

    def __init__(self, min_distance: float = MIN_POINT_DISTANCE):
        self.min_distance = min_distance

    def seed(self, session: GestureSession, pointer: Optional[Point2D]) -> None:
        """Start a fresh stroke at the pointer (if there is one)."""
        session.clear()
        if pointer is not None:
            session.path.append((float(pointer[0]), float(pointer[1])))

    def sample(self, session: GestureSession, pointer: Optional[Point2D], dt: float) -> bool:
        """Returns True if a point was appended this tick."""
        if session.mode != Mode.DRAWING:
            return False

        if not session.segment_timer.tick(dt):
            return False
        if pointer is None:
            return False

        pos = (float(pointer[0]), float(pointer[1]))
        if session.path and dist(pos, session.path[-1]) <= self.min_distance:
            return False

        session.path.append(pos)
        logger.debug("[Sampler] point %d at (%.1f, %.1f)", len(session.path), *pos)
        return True
