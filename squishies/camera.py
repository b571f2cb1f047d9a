"""Cameras and lights: view and projection matrices and camera movement."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum

import numpy as np

from squishies.config import WHITE, Colour

_DEFAULT_ASPECT = 1600.0 / 900.0
_PARALLEL_LIMIT = 0.999
_MIN_TARGET_DISTANCE = 0.001
_PITCH_MARGIN = 0.001


def _vec3(value) -> np.ndarray:
    arr = np.array(value, dtype=float).reshape(-1)
    if arr.size != 3:
        raise ValueError(f"expected a 3D vector, got {arr.size} components")
    return arr


def _normalize(v: np.ndarray) -> np.ndarray:
    length = float(np.linalg.norm(v))
    if length == 0.0:
        raise ValueError("cannot normalise a zero-length vector")
    return v / length


def _rotate(v: np.ndarray, axis: np.ndarray, angle: float) -> np.ndarray:
    """Rotate v about the axis by angle radians (right-handed)."""
    k = _normalize(axis)
    c, s = math.cos(angle), math.sin(angle)
    return v * c + np.cross(k, v) * s + k * float(np.dot(k, v)) * (1.0 - c)


def _look_at(eye: np.ndarray, center: np.ndarray, up: np.ndarray) -> np.ndarray:
    f = _normalize(center - eye)
    s = _normalize(np.cross(f, up))
    u = np.cross(s, f)
    m = np.identity(4)
    m[0, :3] = s
    m[1, :3] = u
    m[2, :3] = -f
    m[0, 3] = -float(np.dot(s, eye))
    m[1, 3] = -float(np.dot(u, eye))
    m[2, 3] = float(np.dot(f, eye))
    return m


def _ortho(left, right, bottom, top, near, far) -> np.ndarray:
    m = np.identity(4)
    m[0, 0] = 2.0 / (right - left)
    m[1, 1] = 2.0 / (top - bottom)
    m[2, 2] = -2.0 / (far - near)
    m[0, 3] = -(right + left) / (right - left)
    m[1, 3] = -(top + bottom) / (top - bottom)
    m[2, 3] = -(far + near) / (far - near)
    return m


def _perspective(fovy: float, aspect: float, near: float, far: float) -> np.ndarray:
    f = 1.0 / math.tan(fovy / 2.0)
    m = np.zeros((4, 4))
    m[0, 0] = f / aspect
    m[1, 1] = f
    m[2, 2] = -(far + near) / (far - near)
    m[2, 3] = -(2.0 * far * near) / (far - near)
    m[3, 2] = -1.0
    return m


@dataclass(eq=False)
class Camera:
    """A perspective or orthographic camera looking from position at target."""

    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    target: np.ndarray = field(default_factory=lambda: np.zeros(3))
    up: np.ndarray = field(default_factory=lambda: np.array([0.0, 1.0, 0.0]))
    orthographic: bool = False
    fov_degrees: float = 60.0
    near_plane: float = 0.1
    far_plane: float = 10000.0
    ortho_width: float = 10.0

    def __post_init__(self) -> None:
        self.position = _vec3(self.position)
        self.target = _vec3(self.target)
        self.up = _vec3(self.up)

    def direction(self) -> np.ndarray:
        return _normalize(self.target - self.position)

    def forward(self) -> np.ndarray:
        return _normalize(self.target - self.position)

    def up_vector(self) -> np.ndarray:
        return _normalize(self.up)

    def right(self) -> np.ndarray:
        return _normalize(np.cross(self.forward(), self.up_vector()))

    def view_matrix(self) -> np.ndarray:
        """Right-handed look-at matrix, avoiding a degenerate up vector."""
        forward = self.forward()
        safe_up = self.up
        if abs(float(np.dot(forward, _normalize(self.up)))) > _PARALLEL_LIMIT:
            safe_up = np.array([0.0, 0.0, 1.0])
        return _look_at(self.position, self.position + forward, safe_up)

    def projection_matrix(self, aspect: float = _DEFAULT_ASPECT) -> np.ndarray:
        """Projection to clip space, with depth mapped to [-1, 1]."""
        if aspect <= 0.0:
            raise ValueError("aspect ratio must be positive")
        if self.orthographic:
            half_width = self.ortho_width / 2.0
            half_height = half_width / aspect
            return _ortho(-half_width, half_width, -half_height, half_height,
                          self.near_plane, self.far_plane)
        return _perspective(math.radians(self.fov_degrees), aspect, self.near_plane, self.far_plane)

    def view_projection_matrix(self, aspect: float = _DEFAULT_ASPECT) -> np.ndarray:
        return self.projection_matrix(aspect) @ self.view_matrix()

    def move_forward(self, distance: float, in_world_plane: bool = False) -> None:
        """Move position and target along the view direction."""
        forward = self.forward()
        if in_world_plane:
            forward[1] = 0.0
            forward = _normalize(forward)
        step = forward * distance
        self.position = self.position + step
        self.target = self.target + step

    def move_up(self, distance: float) -> None:
        step = self.up_vector() * distance
        self.position = self.position + step
        self.target = self.target + step

    def move_right(self, distance: float, in_world_plane: bool = False) -> None:
        right = self.right()
        if in_world_plane:
            right[1] = 0.0
            right = _normalize(right)
        step = right * distance
        self.position = self.position + step
        self.target = self.target + step

    def move_to_target(self, delta: float) -> None:
        """Change the distance to the target by delta, never reaching it."""
        distance = float(np.linalg.norm(self.position - self.target)) + delta
        if distance <= 0.0:
            distance = _MIN_TARGET_DISTANCE
        self.position = self.target + self.forward() * -distance

    def yaw(self, angle: float, around_target: bool = False) -> None:
        """Turn about the up vector by angle radians."""
        offset = _rotate(self.target - self.position, self.up_vector(), angle)
        if around_target:
            self.position = self.target - offset
        else:
            self.target = self.position + offset

    def pitch(self, angle: float, lock_view: bool = False, around_target: bool = False,
              rotate_up: bool = False) -> None:
        """Tilt about the right vector by angle radians, optionally stopping short of vertical."""
        up = self.up_vector()
        right = self.right()
        offset = self.target - self.position

        if lock_view:
            view = _normalize(offset)
            max_up = math.acos(max(-1.0, min(1.0, float(np.dot(up, view))))) - _PITCH_MARGIN
            angle = min(angle, max_up)
            max_down = -math.acos(max(-1.0, min(1.0, float(np.dot(-up, view))))) + _PITCH_MARGIN
            angle = max(angle, max_down)

        offset = _rotate(offset, right, angle)
        if around_target:
            self.position = self.target - offset
        else:
            self.target = self.position + offset

        if rotate_up:
            self.up = _rotate(self.up, right, angle)

    def roll(self, angle: float) -> None:
        """Spin the up vector about the view direction by angle radians."""
        self.up = _rotate(self.up, self.forward(), angle)


def create_perspective(position, target, fov_degrees: float = 60.0) -> Camera:
    return Camera(position=position, target=target, orthographic=False, fov_degrees=fov_degrees)


def create_orthographic(position, target, width: float) -> Camera:
    return Camera(position=position, target=target, orthographic=True, ortho_width=width)


class LightType(Enum):
    DIRECTIONAL = 0
    POINT = 1
    SPOT = 2


class Light:
    """A light source with a camera used for its shadow pass."""

    def __init__(self, position, target, type: LightType = LightType.DIRECTIONAL) -> None:
        self.type = type
        self.colour: Colour = WHITE
        self.ambient_level = 0.1
        if type is LightType.DIRECTIONAL:
            self.light_cam = create_orthographic(position, target, 50.0)
            self.light_cam.far_plane = 500.0
        else:
            self.light_cam = create_perspective(position, target, 90.0)

    def direction(self) -> np.ndarray:
        return self.light_cam.direction()

    def view_projection_matrix(self, aspect: float = _DEFAULT_ASPECT) -> np.ndarray:
        return self.light_cam.view_projection_matrix(aspect)