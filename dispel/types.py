# dispel/types.py
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Hashable, List, NamedTuple, Optional, Protocol, Tuple

import numpy as np

from config import SEGMENT_INTERVAL

Point2D = Tuple[float, float]


class Mode(str, Enum):
    DORMANT = "DORMANT"
    ARMED = "ARMED"
    DRAWING = "DRAWING"


class Target(NamedTuple):
    target_id: Hashable
    position: np.ndarray      # world space, shape (3,)


class CursorMode(Protocol):
    """Host cursor toggle used on mode transitions."""

    def capture(self) -> None:
        """Hidden and locked to the window (mouse-look)."""

    def release(self) -> None:
        """Free and visible (pointing)."""


@dataclass
class SegmentTimer:
    """Repeating timer: tick() returns True on the ticks where it finishes."""
    interval: float = SEGMENT_INTERVAL
    elapsed: float = 0.0

    def tick(self, dt: float) -> bool:
        if self.interval <= 0.0:
            return True   # no gating, every tick finishes
        self.elapsed += max(0.0, dt)
        if self.elapsed < self.interval:
            return False
        self.elapsed %= self.interval
        return True

    def reset(self) -> None:
        self.elapsed = 0.0


@dataclass
class GestureSession:
    mode: Mode = Mode.DORMANT
    path: List[Point2D] = field(default_factory=list)
    segment_timer: SegmentTimer = field(default_factory=SegmentTimer)

    @property
    def active(self) -> bool:
        return self.mode != Mode.DORMANT

    def clear(self) -> None:
        self.path.clear()
        self.segment_timer.reset()


@dataclass(frozen=True)
class FrameInput:
    """Pointer and button state for one frame. pointer is None outside the window."""
    pointer: Optional[Point2D] = None
    primary_pressed: bool = False
    primary_held: bool = False
    primary_released: bool = False
    secondary_pressed: bool = False
    dt: float = 0.0


@dataclass(frozen=True)
class RemovalRequest:
    target_ids: FrozenSet[Hashable] = frozenset()


@dataclass(frozen=True)
class Feedback:
    active: bool = False
    path: Tuple[Point2D, ...] = ()
    world_path: Tuple[np.ndarray, ...] = ()
    start_marker: Optional[np.ndarray] = None
    cursor_marker: Optional[np.ndarray] = None


@dataclass(frozen=True)
class DispelUpdate:
    removal: Optional[RemovalRequest]   # set only on the tick a loop closes
    feedback: Feedback
