"""Squishy shapes: an outline plus the joints that hold it together."""

from __future__ import annotations

import copy as _copy
import math
from dataclasses import dataclass, field
from typing import List

import numpy as np

from squishies import poly as _poly
from squishies.config import DARKGREY, WHITE, Colour
from squishies.poly import Poly


@dataclass
class Joint:
    """A spring between two outline points with its rest length."""

    from_index: int
    to_index: int
    rest: float


@dataclass(eq=False)
class Squishy:
    """A soft shape template: outline, joints and default colour."""

    poly: Poly = field(default_factory=Poly)
    joints: List[Joint] = field(default_factory=list)
    colour: Colour = WHITE

    @property
    def points(self) -> np.ndarray:
        return self.poly.points

    def point(self, index: int) -> np.ndarray:
        return self.poly.points[index]

    def copy(self) -> "Squishy":
        return _copy.deepcopy(self)


def _brace(squishy: Squishy, strength: int) -> None:
    """Join each point to the next `strength` points around the outline."""
    points = squishy.poly.points
    count = len(points)
    for i in range(count):
        for step in range(1, strength + 1):
            if step >= count:
                break
            j = (i + step) % count
            rest = float(np.linalg.norm(points[i] - points[j]))
            squishy.joints.append(Joint(i, j, rest))


def create_rect(width: float, height: float, colour: Colour = WHITE) -> Squishy:
    """Rectangle with roughly one outline point per unit of length."""
    extra_x = int(math.floor(width - 1))
    extra_y = int(math.floor(height - 1))
    return Squishy(_poly.create_rect(width, height, extra_x, extra_y), colour=colour)


def create_square(size: float, colour: Colour = WHITE) -> Squishy:
    return create_rect(size, size, colour)


def create_circle(radius: float, segments: int, strength: int = 2, colour: Colour = WHITE) -> Squishy:
    squishy = Squishy(_poly.create_circle(radius, segments), colour=colour)
    if strength > 0:
        _brace(squishy, strength)
    return squishy


def create_ellipse(
    radius_x: float, radius_y: float, segments: int, strength: int = 2, colour: Colour = WHITE
) -> Squishy:
    squishy = Squishy(_poly.create_ellipse(radius_x, radius_y, segments), colour=colour)
    if strength > 0:
        _brace(squishy, strength)
    return squishy


def create_gear(radius: float, teeth: int, tooth_depth: float, colour: Colour = DARKGREY) -> Squishy:
    return Squishy(_poly.create_gear(radius, teeth, tooth_depth), colour=colour)