"""Game-wide configuration and axis-aligned bounding boxes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Tuple

import numpy as np

Colour = Tuple[float, float, float, float]

WHITE: Colour = (1.0, 1.0, 1.0, 1.0)
BLACK: Colour = (0.0, 0.0, 0.0, 1.0)
RED: Colour = (0.9, 0.16, 0.22, 1.0)
BLUE: Colour = (0.0, 0.47, 0.95, 1.0)
YELLOW: Colour = (0.99, 0.98, 0.0, 1.0)
DARKGREY: Colour = (0.31, 0.31, 0.31, 1.0)
LIGHTBLUE: Colour = (0.4, 0.75, 1.0, 1.0)


def _vec3(point) -> np.ndarray:
    arr = np.asarray(point, dtype=float).reshape(-1)
    if arr.size == 2:
        arr = np.append(arr, 0.0)
    if arr.size != 3:
        raise ValueError(f"expected a 2D or 3D point, got {arr.size} components")
    return arr


class BoundingBox:
    """An axis-aligned box grown by the points it is extended with."""

    def __init__(self, points: Iterable = ()) -> None:
        self.reset()
        for point in points:
            self.extend(point)

    def reset(self) -> None:
        """Empty the box; it is invalid until extended again."""
        self.min = np.full(3, np.inf)
        self.max = np.full(3, -np.inf)
        self.is_valid = False

    def extend(self, point) -> "BoundingBox":
        """Grow the box so that it holds the point."""
        p = _vec3(point)
        self.min = np.minimum(self.min, p)
        self.max = np.maximum(self.max, p)
        self.is_valid = True
        return self

    def size(self) -> np.ndarray:
        """Extent along each axis; zero for an empty box."""
        if not self.is_valid:
            return np.zeros(3)
        return self.max - self.min

    def intersects(self, other: "BoundingBox") -> bool:
        """Whether the two boxes overlap or touch."""
        if not (self.is_valid and other.is_valid):
            return False
        return bool(np.all(self.min <= other.max) and np.all(other.min <= self.max))

    def contains(self, point) -> bool:
        """Whether the point lies inside the box, bounds included."""
        if not self.is_valid:
            return False
        p = _vec3(point)
        return bool(np.all(self.min <= p) and np.all(p <= self.max))

    def copy(self) -> "BoundingBox":
        box = BoundingBox()
        box.min = self.min.copy()
        box.max = self.max.copy()
        box.is_valid = self.is_valid
        return box

    def __repr__(self) -> str:
        if not self.is_valid:
            return "BoundingBox(empty)"
        return f"BoundingBox(min={self.min.tolist()}, max={self.max.tolist()})"


def _default_world_bounds() -> BoundingBox:
    return BoundingBox([(-50.0, -10.0, -1.0), (50.0, 50.0, 1.0)])


@dataclass
class Config:
    """Physics and world settings shared by the game."""

    gravity: float = -19.81
    world_bounds: BoundingBox = field(default_factory=_default_world_bounds)
    spatial_grid_size: float = 32.0


_CONFIG = Config()


def get_config() -> Config:
    """Return the shared game configuration."""
    return _CONFIG