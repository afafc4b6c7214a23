# gesture/utils.py
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np


@dataclass
class Debounce:
    hold_frames: int
    cooldown_sec: float
    _count: int = 0
    _cooldown_until: float = 0.0
    _armed: bool = True  # edge-trigger

    def update(self, active: bool, now: float) -> bool:
        """True on the one frame a condition held for hold_frames fires (then cools down)."""
        if now < self._cooldown_until or not active:
            self._count = 0
            self._armed = True
            return False

        self._count += 1
        if self._armed and self._count >= self.hold_frames:
            self._armed = False
            self._cooldown_until = now + self.cooldown_sec
            return True
        return False


@dataclass
class ButtonEdges:
    """Derives pressed / released edges from a held flag sampled once per frame."""
    held: bool = False

    def update(self, held: bool) -> Tuple[bool, bool]:
        pressed = held and not self.held
        released = self.held and not held
        self.held = held
        return pressed, released


class PointerSmoother:
    """Exponential smoothing of a jittery 2D pointer; resets when the pointer is lost."""

    def __init__(self, weight: float):
        self.weight = weight
        self.last: Optional[np.ndarray] = None

    def update(self, point) -> Optional[np.ndarray]:
        if point is None:
            self.last = None
            return None

        point = np.asarray(point, dtype=np.float32)
        if self.last is None:
            self.last = point
        else:
            self.last = self.weight * self.last + (1.0 - self.weight) * point
        return self.last


def lm_xy(lm, w, h):
    return np.array([lm.x * w, lm.y * h], dtype=np.float32)


def pinch_ratio(thumb_tip, index_tip, hand_size) -> float:
    return float(np.linalg.norm(thumb_tip - index_tip)) / max(1e-6, hand_size)
