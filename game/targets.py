# game/targets.py
import itertools
import logging
from typing import Dict, Iterable, List, Optional

import numpy as np

from config import (
    GROUND_Y, MAX_TARGETS, SPAWN_HALF_ANGLE, SPAWN_MAX_DIST, SPAWN_MAX_SECS,
    SPAWN_MIN_DIST, SPAWN_MIN_SECS, TARGET_DRIFT_SPEED, TARGET_SIZE,
)
from dispel.projector import Camera
from dispel.types import Target

logger = logging.getLogger(__name__)


class TargetRegistry:
    """
    Live targets keyed by id. Spawns them periodically in front of the
    camera and lets them wander on the ground plane.
    """

    def __init__(self, rng: Optional[np.random.Generator] = None, max_targets: int = MAX_TARGETS):
        self.rng = rng if rng is not None else np.random.default_rng()
        self.max_targets = max_targets
        self._positions: Dict[int, np.ndarray] = {}
        self._velocities: Dict[int, np.ndarray] = {}
        self._ids = itertools.count(1)
        self._spawn_in = self._next_spawn_delay()

    def __len__(self) -> int:
        return len(self._positions)

    def live(self) -> List[Target]:
        return [Target(tid, pos.copy()) for tid, pos in self._positions.items()]

    def add(self, position, velocity=(0.0, 0.0, 0.0)) -> int:
        tid = next(self._ids)
        self._positions[tid] = np.array(position, dtype=np.float64)
        self._velocities[tid] = np.array(velocity, dtype=np.float64)
        return tid

    def remove(self, target_ids: Iterable[int]) -> int:
        removed = 0
        for tid in target_ids:
            if self._positions.pop(tid, None) is not None:
                self._velocities.pop(tid, None)
                removed += 1
        if removed:
            logger.info("[Targets] removed %d, %d left", removed, len(self._positions))
        return removed

    # ------------------------------------------------------------------
    def update(self, dt: float, camera: Camera) -> None:
        for tid, pos in self._positions.items():
            pos += self._velocities[tid] * dt

        self._spawn_in -= dt
        if self._spawn_in <= 0.0:
            self._spawn_in = self._next_spawn_delay()
            if len(self._positions) < self.max_targets:
                self.spawn_near(camera)

    def spawn_near(self, camera: Camera) -> int:
        """Spawn on the ground somewhere ahead of the camera."""
        fwd = camera.forward()
        look = np.arctan2(fwd[0], -fwd[2])
        angle = look + self.rng.uniform(-SPAWN_HALF_ANGLE, SPAWN_HALF_ANGLE)
        distance = self.rng.uniform(SPAWN_MIN_DIST, SPAWN_MAX_DIST)

        position = np.array([
            camera.position[0] + np.sin(angle) * distance,
            GROUND_Y + TARGET_SIZE / 2,
            camera.position[2] - np.cos(angle) * distance,
        ])
        heading = self.rng.uniform(0.0, 2 * np.pi)
        velocity = np.array([np.cos(heading), 0.0, np.sin(heading)]) * TARGET_DRIFT_SPEED

        tid = self.add(position, velocity)
        logger.info("[Targets] spawned #%d at distance %.1f", tid, distance)
        return tid

    def _next_spawn_delay(self) -> float:
        return float(self.rng.uniform(SPAWN_MIN_SECS, SPAWN_MAX_SECS))
