"""Two-dimensional outlines and builders for common shapes."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List

import numpy as np


@dataclass(eq=False)
class Poly:
    """A closed outline made of 2D points, with the indices of its key corners."""

    points: np.ndarray = field(default_factory=lambda: np.zeros((0, 2)))
    primary_points: List[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.points = np.array(self.points, dtype=float).reshape(-1, 2)
        self.primary_points = list(self.primary_points)

    def __len__(self) -> int:
        return len(self.points)

    def center(self) -> np.ndarray:
        """Average of the outline's points."""
        if len(self.points) == 0:
            raise ValueError("an empty outline has no center")
        return self.points.mean(axis=0)

    def copy(self) -> "Poly":
        return Poly(self.points.copy(), list(self.primary_points))

    def translate(self, offset) -> "Poly":
        """Move every point by the offset."""
        self.points += np.asarray(offset, dtype=float).reshape(2)
        return self

    def rotate(self, angle_degrees: float) -> "Poly":
        """Rotate counter-clockwise about the origin."""
        theta = math.radians(angle_degrees)
        c, s = math.cos(theta), math.sin(theta)
        rotation = np.array([[c, -s], [s, c]])
        self.points = self.points @ rotation.T
        return self

    def scale(self, factor: float) -> "Poly":
        """Scale every point about the origin."""
        self.points *= factor
        return self


def create_rect(width: float, height: float, extra_points_x: int = 0, extra_points_y: int = 0) -> Poly:
    """Rectangle centred on the origin, with optional extra points along each edge."""
    steps_x = extra_points_x + 1
    steps_y = extra_points_y + 1
    half_w = width * 0.5
    half_h = height * 0.5

    points: list = []
    primary: List[int] = []

    # left edge, top to bottom
    for i in range(steps_y + 1):
        if i == 0:
            primary.append(len(points))
        points.append((-half_w, half_h - (height * i) / steps_y))

    # bottom edge, left to right
    for i in range(1, steps_x + 1):
        if i == steps_x:
            primary.append(len(points))
        points.append((-half_w + (width * i) / steps_x, -half_h))

    # right edge, bottom to top
    for i in range(1, steps_y + 1):
        if i == steps_y:
            primary.append(len(points))
        points.append((half_w, -half_h + (height * i) / steps_y))

    # top edge, right to left
    for i in range(1, steps_x):
        if i == steps_x - 1:
            primary.append(len(points))
        points.append((half_w - (width * i) / steps_x, half_h))

    return Poly(points, primary)


def create_square(size: float, extra_points: int = 0) -> Poly:
    return create_rect(size, size, extra_points, extra_points)


def create_circle(radius: float, segments: int) -> Poly:
    return create_ellipse(radius, radius, segments)


def create_ellipse(radius_x: float, radius_y: float, segments: int) -> Poly:
    """Ellipse centred on the origin, starting on the positive x axis."""
    if segments < 1:
        raise ValueError("an ellipse needs at least one segment")
    angles = 2.0 * math.pi * np.arange(segments) / segments
    points = np.column_stack((radius_x * np.cos(angles), radius_y * np.sin(angles)))
    return Poly(points)


def create_gear(radius: float, teeth: int, tooth_depth: float) -> Poly:
    """Gear outline with the given number of teeth cut to tooth_depth."""
    if teeth < 1:
        raise ValueError("a gear needs at least one tooth")
    segments = teeth * 4
    angle_step = (2.0 * math.pi) / segments

    points = []
    for i in range(segments):
        outside = (i % 4) < 2
        angle = angle_step * i
        r = radius if outside else radius - tooth_depth
        if outside:
            angle += -angle_step * 0.5 if i % 4 == 0 else angle_step * 0.5
        points.append((math.cos(angle) * r, math.sin(angle) * r))

    return Poly(points)