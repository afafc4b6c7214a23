from __future__ import annotations

import math

import pytest

from dispel.controller import DispelController
from dispel.projector import Camera, Projector
from dispel.types import FrameInput

VIEWPORT = (480, 270)
SCALE = 2.0
SCREEN_CENTER = (VIEWPORT[0] * SCALE / 2, VIEWPORT[1] * SCALE / 2)


class FakeCursor:
    """Records cursor mode changes instead of touching a window."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    def capture(self) -> None:
        self.calls.append("capture")

    def release(self) -> None:
        self.calls.append("release")


def circle(center, radius, n, start_deg=0.0, stop_deg=330.0):
    """n points on a circle, counter-clockwise from start_deg to stop_deg."""
    points = []
    for i in range(n):
        a = math.radians(start_deg + (stop_deg - start_deg) * i / (n - 1))
        points.append((center[0] + radius * math.cos(a), center[1] + radius * math.sin(a)))
    return points


def press(pointer, dt=0.06) -> FrameInput:
    return FrameInput(pointer=pointer, primary_pressed=True, primary_held=True, dt=dt)


def hold(pointer, dt=0.06) -> FrameInput:
    return FrameInput(pointer=pointer, primary_held=True, dt=dt)


@pytest.fixture()
def cursor() -> FakeCursor:
    return FakeCursor()


@pytest.fixture()
def camera() -> Camera:
    return Camera(position=(0.0, 0.0, 0.0), viewport=VIEWPORT)


@pytest.fixture()
def projector(camera: Camera) -> Projector:
    return Projector(camera, scale=SCALE)


@pytest.fixture()
def controller(cursor: FakeCursor, projector: Projector) -> DispelController:
    return DispelController(cursor, projector)


@pytest.fixture()
def drawing(controller: DispelController) -> DispelController:
    """Controller already in DRAWING, seeded at the first point of a circle round the screen center."""
    start = circle(SCREEN_CENTER, 100, 12)[0]
    controller.update(press(start))
    controller.update(press(start))
    return controller
