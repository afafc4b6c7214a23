# dispel/projector.py
"""
Camera model and the screen <-> world projection used by dispel.

Coordinate spaces:
  screen   - window pixels, what the pointer reports (origin top-left, +y down)
  viewport - render-target pixels, screen / CANVAS_SCALE
  world    - 3D, +y up, the camera looks down its local -z axis
"""
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from config import (
    CANVAS_H, CANVAS_SCALE, CANVAS_W, FAR, FOV_Y_DEG, GIZMO_DEPTH, MAX_PITCH, NEAR,
)
from dispel.types import Point2D


@dataclass(frozen=True)
class Ray:
    origin: np.ndarray
    direction: np.ndarray     # unit length

    def point_at(self, distance: float) -> np.ndarray:
        return self.origin + self.direction * distance


class Camera:
    """Perspective camera with yaw/pitch orientation (no roll)."""

    def __init__(
        self,
        position: Sequence[float] = (0.0, 0.0, 0.0),
        yaw: float = 0.0,
        pitch: float = 0.0,
        fov_y_deg: float = FOV_Y_DEG,
        near: float = NEAR,
        far: float = FAR,
        viewport: Tuple[int, int] = (CANVAS_W, CANVAS_H),
    ):
        self.position = np.asarray(position, dtype=np.float64)
        self.yaw = yaw
        self.pitch = pitch
        self.fov_y = np.radians(fov_y_deg)
        self.near = near
        self.far = far
        self.viewport = viewport

    def look(self, d_yaw: float, d_pitch: float) -> None:
        self.yaw += d_yaw
        self.pitch = float(np.clip(self.pitch + d_pitch, -MAX_PITCH, MAX_PITCH))

    def rotation(self) -> np.ndarray:
        cy, sy = np.cos(self.yaw), np.sin(self.yaw)
        cp, sp = np.cos(self.pitch), np.sin(self.pitch)
        ry = np.array([[cy, 0.0, sy], [0.0, 1.0, 0.0], [-sy, 0.0, cy]])
        rx = np.array([[1.0, 0.0, 0.0], [0.0, cp, -sp], [0.0, sp, cp]])
        return ry @ rx

    def forward(self) -> np.ndarray:
        return self.rotation() @ np.array([0.0, 0.0, -1.0])

    def view_matrix(self) -> np.ndarray:
        rot_t = self.rotation().T
        view = np.eye(4)
        view[:3, :3] = rot_t
        view[:3, 3] = -rot_t @ self.position
        return view

    def projection_matrix(self) -> np.ndarray:
        w, h = self.viewport
        f = 1.0 / np.tan(self.fov_y / 2.0)
        n, fa = self.near, self.far
        proj = np.zeros((4, 4))
        proj[0, 0] = f / (w / h)
        proj[1, 1] = f
        proj[2, 2] = (fa + n) / (n - fa)
        proj[2, 3] = 2.0 * fa * n / (n - fa)
        proj[3, 2] = -1.0
        return proj

    def world_to_viewport(self, world_point) -> Optional[np.ndarray]:
        """None when the point is behind the camera or outside [near, far]."""
        p = np.append(np.asarray(world_point, dtype=np.float64), 1.0)
        clip = self.projection_matrix() @ self.view_matrix() @ p
        if not np.all(np.isfinite(clip)) or clip[3] <= 0.0:
            return None

        ndc = clip[:3] / clip[3]
        if not -1.0 <= ndc[2] <= 1.0:
            return None

        w, h = self.viewport
        return np.array([(ndc[0] + 1.0) * 0.5 * w, (1.0 - ndc[1]) * 0.5 * h])

    def inverse_view_projection(self) -> Optional[np.ndarray]:
        """inv(P @ V), or None when the matrix is singular."""
        try:
            return np.linalg.inv(self.projection_matrix() @ self.view_matrix())
        except np.linalg.LinAlgError:
            return None

    def viewport_to_world(self, viewport_point) -> Optional[Ray]:
        """Ray from the near plane through a viewport pixel."""
        w, h = self.viewport
        x = 2.0 * float(viewport_point[0]) / w - 1.0
        y = 1.0 - 2.0 * float(viewport_point[1]) / h

        inverse = self.inverse_view_projection()
        if inverse is None:
            return None

        near = inverse @ np.array([x, y, -1.0, 1.0])
        far = inverse @ np.array([x, y, 1.0, 1.0])
        if near[3] == 0.0 or far[3] == 0.0:
            return None
        near, far = near[:3] / near[3], far[:3] / far[3]

        direction = far - near
        length = np.linalg.norm(direction)
        if not np.isfinite(length) or length == 0.0:
            return None
        return Ray(origin=near, direction=direction / length)

    def viewport_points_at_depth(self, viewport_points, depth: float) -> List[Optional[np.ndarray]]:
        """
        Batched viewport_to_world(p).point_at(depth) for an (N, 2) array.
        One matrix inverse for all N points; rows that fail to unproject are None.
        """
        pts = np.asarray(viewport_points, dtype=np.float64).reshape(-1, 2)
        inverse = self.inverse_view_projection()
        if inverse is None:
            return [None] * len(pts)

        w, h = self.viewport
        ndc = np.ones((len(pts), 4))
        ndc[:, 0] = 2.0 * pts[:, 0] / w - 1.0
        ndc[:, 1] = 1.0 - 2.0 * pts[:, 1] / h

        ndc[:, 2] = -1.0
        near = ndc @ inverse.T
        ndc[:, 2] = 1.0
        far = ndc @ inverse.T

        with np.errstate(divide="ignore", invalid="ignore"):
            near = near[:, :3] / near[:, 3:]
            far = far[:, :3] / far[:, 3:]
            direction = far - near
            length = np.linalg.norm(direction, axis=1)
            points = near + direction / length[:, None] * depth

        ok = np.isfinite(length) & (length > 0.0) & np.all(np.isfinite(points), axis=1)
        return [point if good else None for point, good in zip(points, ok)]


class Projector:
    """
    Screen-space front end of a Camera.

    The screen/viewport scale lives here and nowhere else: every call in
    either direction goes through the same factor.
    """

    def __init__(self, camera: Camera, scale: float = CANVAS_SCALE):
        self.camera = camera
        self.scale = scale

    def world_to_screen(self, world_point) -> Optional[Point2D]:
        viewport = self.camera.world_to_viewport(world_point)
        if viewport is None:
            return None
        return (float(viewport[0] * self.scale), float(viewport[1] * self.scale))

    def screen_to_world_ray(self, screen_point: Point2D) -> Optional[Ray]:
        viewport = np.asarray(screen_point, dtype=np.float64) / self.scale
        return self.camera.viewport_to_world(viewport)

    def screen_to_world_point(self, screen_point: Point2D, depth: float = GIZMO_DEPTH) -> Optional[np.ndarray]:
        ray = self.screen_to_world_ray(screen_point)
        if ray is None:
            return None
        return ray.point_at(depth)

    def screen_to_world_points(self, screen_points, depth: float = GIZMO_DEPTH) -> List[Optional[np.ndarray]]:
        """screen_to_world_point for a whole list of pixels at once."""
        viewport = np.asarray(screen_points, dtype=np.float64).reshape(-1, 2) / self.scale
        return self.camera.viewport_points_at_depth(viewport, depth)
