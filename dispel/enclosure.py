# dispel/enclosure.py
import logging
from typing import Iterable, Sequence

from dispel.geometry import point_in_polygon
from dispel.projector import Projector
from dispel.types import Point2D, RemovalRequest, Target

logger = logging.getLogger(__name__)


class EnclosureTester:
    def __init__(self, projector: Projector):
        self.projector = projector

    def find_enclosed(self, polygon: Sequence[Point2D], targets: Iterable[Target]) -> RemovalRequest:
        """
        Project every live target to screen space and keep the ones inside
        the closed polygon. Targets that fail to project (behind the camera)
        are simply not enclosed.
        """
        enclosed = set()
        for target in targets:
            screen = self.projector.world_to_screen(target.position)
            if screen is None:
                logger.debug("[Enclosure] target %s not projectable, skipped", target.target_id)
                continue
            if point_in_polygon(screen, polygon):
                enclosed.add(target.target_id)
        return RemovalRequest(target_ids=frozenset(enclosed))
