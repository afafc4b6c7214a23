# game/scene.py
import numpy as np
import pygame

from config import GROUND_Y, TARGET_SIZE
from dispel.projector import Camera
from dispel.types import Feedback

SKY = (18, 16, 24)
GROUND = (70, 66, 80)
TARGET_FILL = (200, 90, 210)
TARGET_EDGE = (250, 200, 255)
GIZMO = (255, 255, 255)

GRID_EXTENT = 40
GRID_STEP = 4


def _project(camera: Camera, point):
    v = camera.world_to_viewport(point)
    return None if v is None else (int(v[0]), int(v[1]))


def draw_ground(canvas: pygame.Surface, camera: Camera) -> None:
    cx, cz = np.round(camera.position[[0, 2]] / GRID_STEP) * GRID_STEP
    for offset in range(-GRID_EXTENT, GRID_EXTENT + 1, GRID_STEP):
        for a, b in (
            ((cx + offset, GROUND_Y, cz - GRID_EXTENT), (cx + offset, GROUND_Y, cz + GRID_EXTENT)),
            ((cx - GRID_EXTENT, GROUND_Y, cz + offset), (cx + GRID_EXTENT, GROUND_Y, cz + offset)),
        ):
            _draw_segment(canvas, camera, np.array(a), np.array(b), GROUND)


def _draw_segment(canvas, camera, a, b, color, steps=16) -> None:
    # split long lines so the parts behind the camera drop out piecewise
    pts = [_project(camera, a + (b - a) * t) for t in np.linspace(0.0, 1.0, steps)]
    for p, q in zip(pts, pts[1:]):
        if p is not None and q is not None:
            pygame.draw.line(canvas, color, p, q)


def draw_targets(canvas: pygame.Surface, camera: Camera, targets) -> None:
    h = camera.viewport[1]
    f = 1.0 / np.tan(camera.fov_y / 2.0)
    visible = []
    for target in targets:
        p = _project(camera, target.position)
        if p is None:
            continue
        depth = float(np.linalg.norm(target.position - camera.position))
        visible.append((depth, p))

    for depth, p in sorted(visible, reverse=True):   # far first
        radius = max(2, int(TARGET_SIZE / 2 * f / max(depth, 1e-3) * h / 2))
        pygame.draw.circle(canvas, TARGET_FILL, p, radius)
        pygame.draw.circle(canvas, TARGET_EDGE, p, radius, 1)


def draw_feedback(canvas: pygame.Surface, camera: Camera, feedback: Feedback) -> None:
    if not feedback.active or len(feedback.world_path) < 2:
        return

    pts = [p for p in (_project(camera, w) for w in feedback.world_path) if p is not None]
    if len(pts) >= 2:
        pygame.draw.lines(canvas, GIZMO, False, pts)

    h = camera.viewport[1]
    f = 1.0 / np.tan(camera.fov_y / 2.0)
    for marker, size in ((feedback.start_marker, 0.02), (feedback.cursor_marker, 0.005)):
        if marker is None:
            continue
        p = _project(camera, marker)
        if p is not None:
            # sphere of radius GIZMO_DEPTH * size seen from GIZMO_DEPTH away
            radius = max(1, int(size * f * h / 2))
            pygame.draw.circle(canvas, GIZMO, p, radius, 1)


def render(canvas: pygame.Surface, camera: Camera, targets, feedback: Feedback) -> None:
    canvas.fill(SKY)
    draw_ground(canvas, camera)
    draw_targets(canvas, camera, targets)
    draw_feedback(canvas, camera, feedback)
